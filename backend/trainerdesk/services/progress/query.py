from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta

from trainerdesk.models.base import utcnow
from trainerdesk.services._shared.base import BaseService, ServiceContext
from trainerdesk.services._shared.dto import PageMeta
from trainerdesk.services._shared.errors import FieldErrors, NotFoundError
from trainerdesk.services._shared.references import build_reference_book, build_session_labels
from trainerdesk.services.routines._converters import routine_to_out
from trainerdesk.services.routines.dto import RoutineListOut, RoutineOut

from ._converters import completed_day_to_out, next_suggested_day_id, session_to_out
from .dto import CompletedDaysOut, HistoryIn, HistoryOut, WeekSessionsOut

logger = logging.getLogger(__name__)


def current_week_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Monday 00:00 UTC of the current week and the Monday after it."""
    now = now or utcnow()
    start = (now - timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=7)


class ProgressQueryService(BaseService):
    """
    Student-facing reads: assigned routines, weekly status and history.

    :param history_default_limit: Page size when the caller sends none.
    :param history_max_limit: Upper bound for the history page size.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        history_default_limit: int = 10,
        history_max_limit: int = 100,
    ) -> None:
        super().__init__(ctx=ctx)
        self.history_default_limit = history_default_limit
        self.history_max_limit = history_max_limit

    # ------------------------------------------------------------------ #
    # Routines
    # ------------------------------------------------------------------ #

    def list_student_routines(self) -> RoutineListOut:
        """Individual routines of the student, most recently updated first."""
        student_id = self.require_actor()
        start, end = current_week_bounds()
        with self.ro_uow() as uow:
            rows = uow.routines.list_for_student(student_id)
            week: dict[int, set[int]] = defaultdict(set)
            for session in uow.workout_sessions.list_completed_between(student_id, start, end):
                if session.routine_id is not None:
                    week[session.routine_id].add(session.day_id)
            latest = uow.workout_sessions.latest_day_ids(student_id, [r.id for r in rows])
            book = build_reference_book(uow, rows)
            items = [
                routine_to_out(
                    row,
                    book,
                    done_day_ids=week.get(row.id, set()),
                    next_suggested_day_id=next_suggested_day_id(row, latest.get(row.id)),
                )
                for row in rows
            ]
        return RoutineListOut(items=items)

    def get_student_routine(self, routine_id: int) -> RoutineOut:
        """
        One routine of the student with ``done_this_week`` on every day.

        :raises NotFoundError: If the routine is not assigned to the student.
        """
        student_id = self.require_actor()
        start, end = current_week_bounds()
        with self.ro_uow() as uow:
            routine = uow.routines.get_for_student(student_id, routine_id)
            if routine is None:
                raise NotFoundError("Routine", routine_id)
            sessions = uow.workout_sessions.list_completed_between(
                student_id, start, end, routine_id=routine.id
            )
            latest = uow.workout_sessions.latest_day_ids(student_id, [routine.id])
            return routine_to_out(
                routine,
                build_reference_book(uow, [routine]),
                done_day_ids={s.day_id for s in sessions},
                next_suggested_day_id=next_suggested_day_id(routine, latest.get(routine.id)),
            )

    # ------------------------------------------------------------------ #
    # Sessions
    # ------------------------------------------------------------------ #

    def list_completed_for_routine(self, routine_id: int) -> CompletedDaysOut:
        """``(day_id, completed_at)`` pairs for one routine, newest first."""
        student_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.routines.get_for_student(student_id, routine_id) is None:
                raise NotFoundError("Routine", routine_id)
            rows = uow.workout_sessions.list_completed_for_routine(student_id, routine_id)
            return CompletedDaysOut(items=[completed_day_to_out(row) for row in rows])

    def list_current_week(self) -> WeekSessionsOut:
        """Sessions completed since Monday 00:00 UTC, oldest first."""
        student_id = self.require_actor()
        start, end = current_week_bounds()
        with self.ro_uow() as uow:
            rows = uow.workout_sessions.list_completed_between(student_id, start, end)
            labels = build_session_labels(uow, rows)
            return WeekSessionsOut(
                week_start=start,
                week_end=end,
                items=[session_to_out(row, labels) for row in rows],
            )

    def history(self, dto: HistoryIn) -> HistoryOut:
        """
        Paginated session history, newest first.

        :raises ValidationError: If ``page`` or ``limit`` is below 1.
        """
        student_id = self.require_actor()

        errors = FieldErrors()
        if dto.page < 1:
            errors.add("page", "must be >= 1")
        if dto.limit is not None and dto.limit < 1:
            errors.add("limit", "must be >= 1")
        errors.raise_if_any()

        limit = min(dto.limit or self.history_default_limit, self.history_max_limit)
        pagination = self.ensure_pagination(page=dto.page, limit=limit, sort=["-completed_at"])
        with self.ro_uow() as uow:
            page = uow.workout_sessions.paginate_history(student_id, pagination)
            meta = PageMeta(
                page=page.page,
                limit=page.limit,
                total=page.total,
                total_pages=page.total_pages,
            )
            labels = build_session_labels(uow, page.items)
            return HistoryOut(items=[session_to_out(row, labels) for row in page.items], meta=meta)
