"""Exercise catalog rows referenced by routine entries."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from trainerdesk.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Exercise(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Catalog exercise.

    Notes
    -----
    - ``trainer_id`` is ``NULL`` for the shared catalog visible to everyone.
    - Routine entries reference exercises by id only and never embed them.
    """

    __tablename__ = "exercises"

    trainer_id: Mapped[int | None] = mapped_column(
        ForeignKey("trainers.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    muscle_group: Mapped[str | None] = mapped_column(String(60))

    __table_args__ = (Index("ix_exercises_trainer_id", "trainer_id"),)
