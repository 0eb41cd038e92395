"""Folders grouping a trainer's template routines."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from trainerdesk.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .routine import Routine


class Folder(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Named, ordered bucket of template routines owned by one trainer.

    Notes
    -----
    - ``position`` orders a trainer's folders among themselves.
    - Deleting a folder never deletes routines; the folder service moves them
      to the no-folder bucket first, so there is no database-level cascade.
    """

    __tablename__ = "folders"

    trainer_id: Mapped[int] = mapped_column(
        ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("trainer_id", "name", name="uq_folders_trainer_name"),
        Index("ix_folders_trainer_position", "trainer_id", "position"),
    )

    routines: Mapped[list[Routine]] = relationship("Routine", back_populates="folder")

    @validates("name")
    def _validate_name(self, _key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("name must be a non-empty string")
        return value.strip()
