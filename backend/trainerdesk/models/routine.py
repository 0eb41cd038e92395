"""Routine aggregate: routine -> training day -> exercise entry."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trainerdesk.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .account import Student, Trainer
    from .folder import Folder

# --- Domain Enums ---
ROUTINE_KINDS = ("template", "individual")
ORGANIZATION_MODES = ("weekday", "numeric", "freeform")
TEMPLATE_STATUSES = ("active", "draft", "archived")

RoutineKind = Enum(*ROUTINE_KINDS, name="routine_kind")
OrganizationMode = Enum(*ORGANIZATION_MODES, name="organization_mode")
TemplateStatus = Enum(*TEMPLATE_STATUSES, name="template_status")


class Routine(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Workout routine owned by a trainer.

    Notes
    -----
    - ``kind='template'`` routines are reusable, may live in a folder and
      carry ``status`` plus ``position_in_folder``.
    - ``kind='individual'`` routines belong to one student and carry the
      progress counters. ``completed_sessions`` is only bumped by the
      progress tracker.
    - Days and entries are owned children, written only through the routine.
    """

    __tablename__ = "routines"

    trainer_id: Mapped[int] = mapped_column(
        ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    kind: Mapped[str] = mapped_column(RoutineKind, nullable=False)
    organization_mode: Mapped[str] = mapped_column(OrganizationMode, nullable=False)

    # individual only
    student_id: Mapped[int | None] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=True
    )
    expires_on: Mapped[date | None] = mapped_column(Date)
    planned_sessions: Mapped[int | None] = mapped_column(Integer)
    completed_sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # template only
    folder_id: Mapped[int | None] = mapped_column(ForeignKey("folders.id"), nullable=True)
    status: Mapped[str | None] = mapped_column(TemplateStatus)
    position_in_folder: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "(kind = 'individual' AND student_id IS NOT NULL) "
            "OR (kind = 'template' AND student_id IS NULL)",
            name="kind_student",
        ),
        CheckConstraint("planned_sessions IS NULL OR planned_sessions >= 0", name="planned_sessions"),
        CheckConstraint("completed_sessions >= 0", name="completed_sessions"),
        Index("ix_routines_trainer_kind_folder", "trainer_id", "kind", "folder_id"),
        Index("ix_routines_student_id", "student_id"),
    )

    # Relationships
    trainer: Mapped[Trainer] = relationship("Trainer", lazy="selectin")
    student: Mapped[Student | None] = relationship("Student", lazy="selectin")
    folder: Mapped[Folder | None] = relationship("Folder", back_populates="routines", lazy="selectin")
    days: Mapped[list[RoutineDay]] = relationship(
        "RoutineDay",
        back_populates="routine",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_template(self) -> bool:
        return self.kind == "template"

    @property
    def is_completed(self) -> bool:
        """Whether an individual routine reached its planned session count.

        A routine without a positive plan counts as completed once any session
        was logged. Templates are never completed.
        """
        if self.kind != "individual":
            return False
        done = self.completed_sessions or 0
        planned = self.planned_sessions or 0
        if planned > 0:
            return done >= planned
        return done > 0

    @property
    def progress_label(self) -> str | None:
        """``"<completed>/<planned>"`` for individual routines with a plan."""
        if self.kind != "individual" or self.planned_sessions is None:
            return None
        return f"{self.completed_sessions or 0}/{self.planned_sessions}"


class RoutineDay(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Training day within a routine, ordered by ``position``."""

    __tablename__ = "routine_days"

    routine_id: Mapped[int] = mapped_column(
        ForeignKey("routines.id", ondelete="CASCADE"), nullable=False
    )
    day_label: Mapped[str] = mapped_column(String(60), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(120))
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (Index("ix_routine_days_routine_position", "routine_id", "position"),)

    routine: Mapped[Routine] = relationship("Routine", back_populates="days")
    entries: Mapped[list[RoutineEntry]] = relationship(
        "RoutineEntry",
        back_populates="day",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class RoutineEntry(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Exercise prescribed on a training day.

    ``exercise_id`` is a plain reference without a foreign key: catalog rows
    may disappear and the entry must still load (rendered as unknown).
    """

    __tablename__ = "routine_entries"

    day_id: Mapped[int] = mapped_column(
        ForeignKey("routine_days.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[int] = mapped_column(Integer, nullable=False)
    sets: Mapped[str | None] = mapped_column(String(40))
    reps: Mapped[str | None] = mapped_column(String(40))
    load: Mapped[str | None] = mapped_column(String(40))
    rest: Mapped[str | None] = mapped_column(String(40))
    notes: Mapped[str | None] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_routine_entries_day_position", "day_id", "position"),)

    day: Mapped[RoutineDay] = relationship("RoutineDay", back_populates="entries")
