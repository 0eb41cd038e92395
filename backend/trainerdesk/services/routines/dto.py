from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from trainerdesk.services._shared.references import Resolved


class _Unset:
    """Marker for patch fields the caller did not send."""

    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class EntryIn:
    """
    Exercise entry as sent by the client.

    ``id`` is echoed back for entries that already exist; ``exercise_id`` and
    ``position`` are validated by the service, not here.
    """

    exercise_id: Any
    position: Any
    id: int | None = None
    sets: str | None = None
    reps: str | None = None
    load: str | None = None
    rest: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class DayIn:
    """Training day as sent by the client."""

    day_label: Any
    position: Any
    id: int | None = None
    subtitle: str | None = None
    entries: Sequence[EntryIn] = ()


@dataclass(frozen=True, slots=True)
class RoutineCreateIn:
    """Payload for creating a template or individual routine."""

    kind: str
    title: str
    organization_mode: str
    description: str | None = None
    student_id: int | None = None
    folder_id: int | None = None
    status: str | None = None
    expires_on: date | None = None
    planned_sessions: int | None = None
    days: Sequence[DayIn] = ()


@dataclass(frozen=True, slots=True)
class RoutineUpdateIn:
    """
    Partial update. Fields left as :data:`UNSET` are untouched.

    ``kind`` is accepted for payload symmetry and always ignored. ``days``
    replaces the whole day/entry subtree when set; an empty sequence clears it.
    ``folder_id=None`` moves a template to the no-folder bucket.
    """

    routine_id: int
    kind: Any = UNSET
    title: Any = UNSET
    description: Any = UNSET
    organization_mode: Any = UNSET
    status: Any = UNSET
    folder_id: Any = UNSET
    expires_on: Any = UNSET
    planned_sessions: Any = UNSET
    completed_sessions: Any = UNSET
    days: Any = UNSET


@dataclass(frozen=True, slots=True)
class RoutineListIn:
    """Listing filters; ``no_folder`` selects templates outside any folder."""

    kind: str | None = None
    folder_id: int | None = None
    no_folder: bool = False
    status: str | None = None
    student_id: int | None = None
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class MoveToFolderIn:
    routine_id: int
    folder_id: int | None


@dataclass(frozen=True, slots=True)
class CloneToStudentIn:
    """Copy ``source_routine_id`` into a new individual routine for ``student_id``."""

    source_routine_id: int
    student_id: int
    expires_on: date | None = None
    planned_sessions: int | None = None


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class EntryOut:
    """Exercise entry with its exercise reference resolved."""

    id: int
    exercise: Resolved
    sets: str | None
    reps: str | None
    load: str | None
    rest: str | None
    notes: str | None
    position: int
    completed: bool


@dataclass(frozen=True, slots=True)
class DayOut:
    """Training day; ``done_this_week`` is only filled on student views."""

    id: int
    day_label: str
    subtitle: str | None
    position: int
    entries: list[EntryOut]
    done_this_week: bool | None = None


@dataclass(frozen=True, slots=True)
class RoutineOut:
    """Routine aggregate with every reference resolved."""

    id: int
    kind: str
    title: str
    description: str | None
    organization_mode: str
    trainer: Resolved
    student: Resolved | None
    folder: Resolved | None
    status: str | None
    position_in_folder: int | None
    expires_on: date | None
    planned_sessions: int | None
    completed_sessions: int
    is_completed: bool
    progress: str | None
    created_at: datetime | None
    updated_at: datetime | None
    days: list[DayOut] = field(default_factory=list)
    next_suggested_day_id: int | None = None


@dataclass(frozen=True, slots=True)
class RoutineListOut:
    items: list[RoutineOut]
