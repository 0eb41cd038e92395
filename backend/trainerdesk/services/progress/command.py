from __future__ import annotations

import logging
from typing import Any

from trainerdesk.models.base import utcnow
from trainerdesk.models.session import EFFORT_LEVELS, WorkoutSession
from trainerdesk.repositories.routine import RoutineRepository
from trainerdesk.repositories.session import WorkoutSessionRepository
from trainerdesk.services._shared.base import BaseService
from trainerdesk.services._shared.errors import FieldErrors, NotFoundError
from trainerdesk.services._shared.references import SessionLabels, build_session_labels
from trainerdesk.services.routines.dto import is_set

from ._converters import session_to_out
from .dto import CompleteDayIn, CompleteDayOut, EntryToggleOut, FeedbackIn, SessionOut, ToggleEntryIn

logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 2000


def _check_effort(value: Any, errors: FieldErrors) -> None:
    if value is not None and value not in EFFORT_LEVELS:
        errors.add("effort", f"must be one of: {', '.join(EFFORT_LEVELS)}")


def _clean_comment(value: Any, errors: FieldErrors) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        errors.add("comment", "must be a string")
        return None
    comment = value.strip()
    if len(comment) > COMMENT_MAX_LENGTH:
        errors.add("comment", f"must be at most {COMMENT_MAX_LENGTH} characters")
    return comment or None


class ProgressCommandService(BaseService):
    """
    Writes made by a student while training.

    Responsibilities
    ----------------
    - Record a completed training day and bump the routine counter.
    - Amend the feedback of a recorded session.
    - Flip the per-entry ``completed`` flag.

    Notes
    -----
    The acting student is ``ctx.actor_id``; routines of other students are
    reported as not found.
    """

    def complete_training_day(self, dto: CompleteDayIn) -> CompleteDayOut:
        """
        Insert a session for ``day_id`` and add one to ``completed_sessions``.

        Both writes share one unit of work: a failure in either leaves neither.

        :raises ValidationError: On an unknown effort level or oversized comment.
        :raises NotFoundError: If the routine is not the student's or the day
            does not belong to it.
        """
        student_id = self.require_actor()

        errors = FieldErrors()
        _check_effort(dto.effort, errors)
        comment = _clean_comment(dto.comment, errors)
        errors.raise_if_any()

        with self.rw_uow() as uow:
            routines: RoutineRepository = uow.routines
            routine = routines.get_for_student(student_id, dto.routine_id)
            if routine is None:
                raise NotFoundError("Routine", dto.routine_id)
            day = next((d for d in routine.days if d.id == dto.day_id), None)
            if day is None:
                raise NotFoundError("Day", dto.day_id)

            now = utcnow()
            session = WorkoutSession(
                student_id=student_id,
                trainer_id=routine.trainer_id,
                routine_id=routine.id,
                day_id=day.id,
                day_label=day.day_label,
                day_subtitle=day.subtitle,
                occurred_at=now,
                completed_at=now,
                status="completed",
                effort=dto.effort,
                comment=comment,
            )
            uow.workout_sessions.add(session)
            routines.increment_completed(routine)
            labels = SessionLabels(
                routines={routine.id: routine.title},
                trainers={routine.trainer_id: routine.trainer.name},
            )

            logger.info(
                "Training day completed",
                extra={
                    "student_id": student_id,
                    "routine_id": routine.id,
                    "day_id": day.id,
                    "session_id": session.id,
                },
            )
            return CompleteDayOut(
                session=session_to_out(session, labels),
                completed_sessions=routine.completed_sessions,
                planned_sessions=routine.planned_sessions,
                is_completed=routine.is_completed,
            )

    def amend_feedback(self, dto: FeedbackIn) -> SessionOut:
        """
        Update ``effort`` and/or ``comment`` on one of the student's sessions.

        :raises NotFoundError: If the session is not the student's.
        """
        student_id = self.require_actor()

        errors = FieldErrors()
        updates: dict[str, Any] = {}
        if is_set(dto.effort):
            _check_effort(dto.effort, errors)
            updates["effort"] = dto.effort
        if is_set(dto.comment):
            updates["comment"] = _clean_comment(dto.comment, errors)
        errors.raise_if_any()

        with self.rw_uow() as uow:
            repo: WorkoutSessionRepository = uow.workout_sessions
            session = repo.get_owned(student_id, dto.session_id)
            if session is None:
                raise NotFoundError("Session", dto.session_id)
            repo.assign_updates(session, updates)
            logger.info(
                "Session feedback amended",
                extra={"session_id": session.id, "fields": sorted(updates)},
            )
            return session_to_out(session, build_session_labels(uow, [session]))

    def toggle_entry_completed(self, dto: ToggleEntryIn) -> EntryToggleOut:
        """Flip the legacy ``completed`` flag of one entry; nothing else changes."""
        student_id = self.require_actor()

        with self.rw_uow() as uow:
            routine = uow.routines.get_for_student(student_id, dto.routine_id)
            if routine is None:
                raise NotFoundError("Routine", dto.routine_id)
            entry = next(
                (e for day in routine.days for e in day.entries if e.id == dto.entry_id),
                None,
            )
            if entry is None:
                raise NotFoundError("Entry", dto.entry_id)

            entry.completed = not entry.completed
            uow.routines.flush()
            logger.debug(
                "Entry flag toggled",
                extra={"routine_id": routine.id, "entry_id": entry.id, "completed": entry.completed},
            )
            return EntryToggleOut(routine_id=routine.id, entry_id=entry.id, completed=entry.completed)
