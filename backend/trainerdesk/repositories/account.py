"""Read helpers over the trainer/student identity tables."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, cast

from sqlalchemy import and_, select
from sqlalchemy.orm import InstrumentedAttribute

from trainerdesk.models.account import Student, Trainer
from trainerdesk.repositories.base import BaseRepository


class TrainerRepository(BaseRepository[Trainer]):
    """Persist :class:`Trainer` rows."""

    model = Trainer

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "email": self.model.email}

    def names_by_ids(self, ids: Iterable[int]) -> dict[int, str]:
        """Map trainer ids to display names."""
        wanted = set(ids)
        if not wanted:
            return {}
        stmt = select(self.model.id, self.model.name).where(self.model.id.in_(wanted))
        return {row.id: row.name for row in self.session.execute(stmt)}


class StudentRepository(BaseRepository[Student]):
    """Persist :class:`Student` rows and answer ownership lookups."""

    model = Student

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "trainer_id": self.model.trainer_id,
            "email": self.model.email,
            "status": self.model.status,
        }

    def get_owned(self, trainer_id: int, student_id: int) -> Student | None:
        """Return the student only when coached by ``trainer_id``."""
        stmt = select(self.model).where(
            and_(self.model.id == student_id, self.model.trainer_id == trainer_id)
        )
        return cast(Student | None, self.session.execute(stmt).scalars().first())
