"""Idempotent demo data for local development environments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from trainerdesk.models import (
    Exercise,
    Folder,
    Routine,
    RoutineDay,
    RoutineEntry,
    Student,
    Trainer,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

TRAINER_FIXTURE: dict[str, str] = {"email": "coach.dan@example.com", "name": "Dan Rivera"}

STUDENT_FIXTURES: list[dict[str, str]] = [
    {"email": "ana.souza@example.com", "name": "Ana Souza"},
    {"email": "jamie.lee@example.com", "name": "Jamie Lee"},
]

EXERCISE_FIXTURES: list[dict[str, str]] = [
    {"name": "Back Squat", "muscle_group": "legs"},
    {"name": "Romanian Deadlift", "muscle_group": "hamstrings"},
    {"name": "Bench Press", "muscle_group": "chest"},
    {"name": "Overhead Press", "muscle_group": "shoulders"},
    {"name": "Barbell Row", "muscle_group": "back"},
    {"name": "Pull-up", "muscle_group": "back"},
]

FOLDER_NAMES = ("Hypertrophy", "Strength")

TEMPLATE_FIXTURE: dict[str, Any] = {
    "title": "Upper / Lower",
    "organization_mode": "numeric",
    "folder": "Hypertrophy",
    "days": [
        {
            "day_label": "Day 1",
            "subtitle": "Lower",
            "entries": [
                ("Back Squat", "4", "6-8", "80%", "120s"),
                ("Romanian Deadlift", "3", "8-10", None, "90s"),
            ],
        },
        {
            "day_label": "Day 2",
            "subtitle": "Upper",
            "entries": [
                ("Bench Press", "4", "6-8", "75%", "120s"),
                ("Barbell Row", "3", "10", None, "90s"),
                ("Pull-up", "3", "AMRAP", "bodyweight", "90s"),
            ],
        },
    ],
}


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    entry["created" if created else "existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    session.flush()
    return instance, True


def seed_demo(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create a trainer with students, shared exercises, folders and a template.

    Running it twice leaves the data unchanged.
    """
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    trainer, created = _get_or_create(
        session, Trainer, email=TRAINER_FIXTURE["email"], defaults={"name": TRAINER_FIXTURE["name"]}
    )
    _touch(summary, "trainers", created)

    for fixture in STUDENT_FIXTURES:
        _, created = _get_or_create(
            session,
            Student,
            email=fixture["email"],
            defaults={"name": fixture["name"], "trainer_id": trainer.id},
        )
        _touch(summary, "students", created)

    exercises: dict[str, Exercise] = {}
    for fixture in EXERCISE_FIXTURES:
        exercise, created = _get_or_create(
            session,
            Exercise,
            name=fixture["name"],
            trainer_id=None,
            defaults={"muscle_group": fixture["muscle_group"]},
        )
        exercises[exercise.name] = exercise
        _touch(summary, "exercises", created)

    folders: dict[str, Folder] = {}
    for position, name in enumerate(FOLDER_NAMES):
        folder, created = _get_or_create(
            session, Folder, trainer_id=trainer.id, name=name, defaults={"position": position}
        )
        folders[name] = folder
        _touch(summary, "folders", created)

    folder = folders[TEMPLATE_FIXTURE["folder"]]
    template, created = _get_or_create(
        session,
        Routine,
        trainer_id=trainer.id,
        title=TEMPLATE_FIXTURE["title"],
        kind="template",
        defaults={
            "organization_mode": TEMPLATE_FIXTURE["organization_mode"],
            "folder_id": folder.id,
            "status": "active",
            "position_in_folder": 0,
            "completed_sessions": 0,
        },
    )
    if created:
        for day_position, day in enumerate(TEMPLATE_FIXTURE["days"]):
            template.days.append(
                RoutineDay(
                    day_label=day["day_label"],
                    subtitle=day["subtitle"],
                    position=day_position,
                    entries=[
                        RoutineEntry(
                            exercise_id=exercises[name].id,
                            sets=sets,
                            reps=reps,
                            load=load,
                            rest=rest,
                            position=entry_position,
                            completed=False,
                        )
                        for entry_position, (name, sets, reps, load, rest) in enumerate(day["entries"])
                    ],
                )
            )
    _touch(summary, "routines", created)

    session.commit()
    if verbose:
        LOGGER.info("Demo seed finished", extra={"summary": summary})
    return summary


__all__ = ["seed_demo"]
