"""Folder repository with position helpers for the ordering engine."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute

from trainerdesk.models.folder import Folder
from trainerdesk.models.routine import Routine
from trainerdesk.repositories.base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Persist :class:`Folder` rows scoped by trainer."""

    model = Folder

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"position": self.model.position, "name": self.model.name}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"trainer_id": self.model.trainer_id, "name": self.model.name}

    def _updatable_fields(self) -> set[str]:
        return {"name", "position"}

    def get_owned(self, trainer_id: int, folder_id: int) -> Folder | None:
        """Return the folder only when owned by ``trainer_id``."""
        stmt: Select[Any] = select(self.model).where(
            and_(self.model.id == folder_id, self.model.trainer_id == trainer_id)
        )
        return cast(Folder | None, self.session.execute(stmt).scalars().first())

    def list_for_trainer(self, trainer_id: int) -> list[Folder]:
        """All folders of a trainer ordered by ``position`` then id."""
        return self.list(filters={"trainer_id": trainer_id}, sort=["position"])

    def next_position(self, trainer_id: int) -> int:
        """Slot right after the trainer's last folder."""
        stmt = select(func.max(self.model.position)).where(self.model.trainer_id == trainer_id)
        current = self.session.execute(stmt).scalar_one_or_none()
        return 0 if current is None else int(current) + 1

    def name_taken(self, trainer_id: int, name: str, *, exclude_id: int | None = None) -> bool:
        """Whether another folder of the trainer already uses ``name``."""
        stmt = select(self.model.id).where(
            and_(self.model.trainer_id == trainer_id, self.model.name == name)
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def template_counts(self, trainer_id: int) -> dict[int, int]:
        """Number of template routines per folder id for one trainer."""
        stmt = (
            select(Routine.folder_id, func.count(Routine.id))
            .where(
                Routine.trainer_id == trainer_id,
                Routine.kind == "template",
                Routine.folder_id.is_not(None),
            )
            .group_by(Routine.folder_id)
        )
        return {int(folder_id): int(count) for folder_id, count in self.session.execute(stmt)}
