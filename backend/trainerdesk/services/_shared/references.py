"""Reference values crossing the service boundary.

Rows only store ids for the exercises, trainer, student and folder they point
to. Read paths wrap each id as :class:`Unresolved`, then a
:class:`ReferenceBook` built once per read path turns every one of them into
a :class:`Resolved` summary before a DTO is returned. Output DTOs only ever
hold :class:`Resolved` values.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from trainerdesk.models.routine import Routine

UNKNOWN_EXERCISE = "Unknown exercise"


def parse_reference_id(value: Any) -> int | None:
    """Return ``value`` as a positive integer id, or ``None`` when malformed.

    Integers and digit-only strings are accepted; booleans, floats and
    anything else are not.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
        return parsed if parsed > 0 else None
    return None


@dataclass(frozen=True, slots=True)
class Unresolved:
    """A bare reference id, not yet looked up."""

    id: int


@dataclass(frozen=True, slots=True)
class Resolved:
    """
    Display-friendly summary of a referenced record.

    :param id: Referenced identifier.
    :param label: Display name (``"Unknown exercise"`` for dangling ids).
    :param known: ``False`` when the referenced record could not be found.
    :param detail: Secondary label, e.g. the exercise muscle group.
    """

    id: int
    label: str
    known: bool = True
    detail: str | None = None


Reference = Union[Unresolved, Resolved]


@dataclass(slots=True)
class ReferenceBook:
    """Exercise summaries keyed by ``(trainer_id, exercise_id)``."""

    exercises: dict[tuple[int, int], Resolved] = field(default_factory=dict)

    def exercise(self, trainer_id: int, ref: Reference) -> Resolved:
        if isinstance(ref, Resolved):
            return ref
        found = self.exercises.get((trainer_id, ref.id))
        if found is None:
            return Resolved(id=ref.id, label=UNKNOWN_EXERCISE, known=False)
        return found


def build_reference_book(uow, routines: Iterable[Routine]) -> ReferenceBook:
    """
    Look up every exercise referenced by ``routines`` in one query per trainer.

    :param uow: Active unit of work exposing ``exercises``.
    :param routines: Routines whose entries will be rendered.
    :returns: Book resolving each entry reference for its routine's trainer.
    """
    wanted: dict[int, set[int]] = defaultdict(set)
    for routine in routines:
        for day in routine.days:
            wanted[routine.trainer_id].update(entry.exercise_id for entry in day.entries)

    book = ReferenceBook()
    for trainer_id, ids in wanted.items():
        for exercise_id, row in uow.exercises.visible_by_ids(trainer_id, ids).items():
            book.exercises[(trainer_id, exercise_id)] = Resolved(
                id=exercise_id, label=row.name, detail=row.muscle_group
            )
    return book


def resolve_row(row_id: int | None, row, label_attr: str = "name") -> Resolved | None:
    """Resolve a relationship that was loaded alongside its owner row."""
    if row_id is None:
        return None
    if row is None:
        return Resolved(id=row_id, label="", known=False)
    return Resolved(id=row_id, label=getattr(row, label_attr))


@dataclass(slots=True)
class SessionLabels:
    """Routine titles and trainer names for a batch of workout sessions."""

    routines: dict[int, str] = field(default_factory=dict)
    trainers: dict[int, str] = field(default_factory=dict)

    def routine(self, routine_id: int | None) -> Resolved | None:
        if routine_id is None:
            return None
        title = self.routines.get(routine_id)
        if title is None:
            return Resolved(id=routine_id, label="", known=False)
        return Resolved(id=routine_id, label=title)

    def trainer(self, trainer_id: int) -> Resolved:
        name = self.trainers.get(trainer_id)
        if name is None:
            return Resolved(id=trainer_id, label="", known=False)
        return Resolved(id=trainer_id, label=name)


def build_session_labels(uow, sessions: Iterable[Any]) -> SessionLabels:
    """
    Look up the routine titles and trainer names of ``sessions`` in two queries.

    Sessions whose routine was deleted keep ``routine_id`` as ``None`` and
    resolve to no routine at all.
    """
    rows = list(sessions)
    routine_ids = {row.routine_id for row in rows if row.routine_id is not None}
    trainer_ids = {row.trainer_id for row in rows}
    return SessionLabels(
        routines=uow.routines.titles_by_ids(routine_ids),
        trainers=uow.trainers.names_by_ids(trainer_ids),
    )
