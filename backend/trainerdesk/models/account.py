"""Trainer and student identities referenced by routines.

Account management lives in a separate identity service; these tables only
hold what the routine subsystem needs for ownership checks and display names.
"""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from trainerdesk.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

StudentStatus = Enum("active", "inactive", name="student_status")


class Trainer(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Personal trainer owning folders, routines and students."""

    __tablename__ = "trainers"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)

    __table_args__ = (UniqueConstraint("email", name="uq_trainers_email"),)

    students: Mapped[list[Student]] = relationship(
        "Student", back_populates="trainer", passive_deletes=True
    )

    @validates("email")
    def _normalize_email(self, _key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("email must be a non-empty string")
        return value.strip().lower()


class Student(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Student coached by exactly one trainer."""

    __tablename__ = "students"

    trainer_id: Mapped[int] = mapped_column(
        ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    status: Mapped[str] = mapped_column(StudentStatus, nullable=False, server_default="active")

    __table_args__ = (
        UniqueConstraint("email", name="uq_students_email"),
        Index("ix_students_trainer_id", "trainer_id"),
    )

    trainer: Mapped[Trainer] = relationship("Trainer", back_populates="students")

    @validates("email")
    def _normalize_email(self, _key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("email must be a non-empty string")
        return value.strip().lower()

    @property
    def first_name(self) -> str:
        """First whitespace-separated token of the display name."""
        parts = (self.name or "").split()
        return parts[0] if parts else ""
