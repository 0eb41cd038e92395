"""Workout session repository backing the progress projections."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, cast

from sqlalchemy import Select, and_, select
from sqlalchemy.orm import InstrumentedAttribute

from trainerdesk.models.session import WorkoutSession
from trainerdesk.repositories.base import BaseRepository, Page, Pagination


class WorkoutSessionRepository(BaseRepository[WorkoutSession]):
    """Persist :class:`WorkoutSession` rows, always scoped by student."""

    model = WorkoutSession

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "completed_at": self.model.completed_at,
            "occurred_at": self.model.occurred_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "student_id": self.model.student_id,
            "routine_id": self.model.routine_id,
            "status": self.model.status,
        }

    def _updatable_fields(self) -> set[str]:
        return {"effort", "comment"}

    def get_owned(self, student_id: int, session_id: int) -> WorkoutSession | None:
        """Return the session only when it belongs to ``student_id``."""
        stmt: Select[Any] = select(self.model).where(
            and_(self.model.id == session_id, self.model.student_id == student_id)
        )
        return cast(WorkoutSession | None, self.session.execute(stmt).scalars().first())

    def list_completed_for_routine(self, student_id: int, routine_id: int) -> list[WorkoutSession]:
        """Completed sessions of one routine, newest first."""
        return self.list(
            filters={"student_id": student_id, "routine_id": routine_id, "status": "completed"},
            sort=["-completed_at"],
        )

    def list_completed_between(
        self,
        student_id: int,
        start: datetime,
        end: datetime,
        *,
        routine_id: int | None = None,
    ) -> list[WorkoutSession]:
        """Completed sessions with ``start <= completed_at < end``, oldest first."""
        stmt: Select[Any] = select(self.model).where(
            self.model.student_id == student_id,
            self.model.status == "completed",
            self.model.completed_at >= start,
            self.model.completed_at < end,
        )
        if routine_id is not None:
            stmt = stmt.where(self.model.routine_id == routine_id)
        stmt = stmt.order_by(self.model.completed_at.asc(), self.model.id.asc())
        return cast(list[WorkoutSession], list(self.session.execute(stmt).scalars().all()))

    def latest_day_ids(self, student_id: int, routine_ids: Iterable[int]) -> dict[int, int]:
        """Day id of the most recent completed session for each routine."""
        wanted = list(routine_ids)
        if not wanted:
            return {}
        stmt = (
            select(self.model.routine_id, self.model.day_id)
            .where(
                self.model.student_id == student_id,
                self.model.status == "completed",
                self.model.routine_id.in_(wanted),
            )
            .order_by(self.model.completed_at.desc(), self.model.id.desc())
        )
        latest: dict[int, int] = {}
        for routine_id, day_id in self.session.execute(stmt):
            latest.setdefault(int(routine_id), int(day_id))
        return latest

    def paginate_history(self, student_id: int, pagination: Pagination) -> Page[WorkoutSession]:
        """Completed sessions of a student, newest first."""
        return self.paginate(
            pagination,
            filters={"student_id": student_id, "status": "completed"},
        )
