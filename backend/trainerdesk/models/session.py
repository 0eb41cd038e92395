"""Append-only workout session records."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from trainerdesk.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, utcnow

EFFORT_LEVELS = ("very_light", "light", "moderate", "intense", "very_intense", "max_effort")
SESSION_STATUSES = ("completed",)

SessionEffort = Enum(*EFFORT_LEVELS, name="session_effort")
SessionStatus = Enum(*SESSION_STATUSES, name="session_status")


class WorkoutSession(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    A training day executed by a student.

    Notes
    -----
    - ``day_id`` is a plain reference: the day may be removed by a later edit
      while the history keeps its ``day_label``/``day_subtitle`` snapshot.
    - Only ``effort`` and ``comment`` change after insert.
    """

    __tablename__ = "workout_sessions"

    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    trainer_id: Mapped[int] = mapped_column(
        ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False
    )
    routine_id: Mapped[int | None] = mapped_column(
        ForeignKey("routines.id", ondelete="SET NULL"), nullable=True
    )
    day_id: Mapped[int] = mapped_column(Integer, nullable=False)
    day_label: Mapped[str] = mapped_column(String(60), nullable=False)
    day_subtitle: Mapped[str | None] = mapped_column(String(120))
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    status: Mapped[str] = mapped_column(SessionStatus, nullable=False, default="completed")
    effort: Mapped[str | None] = mapped_column(SessionEffort)
    comment: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        Index("ix_workout_sessions_student_completed", "student_id", "completed_at"),
        Index("ix_workout_sessions_routine_id", "routine_id"),
    )
