"""Validation and wholesale replacement of a routine's day/entry subtree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from trainerdesk.models.routine import Routine, RoutineDay, RoutineEntry
from trainerdesk.services._shared.errors import FieldErrors
from trainerdesk.services._shared.references import parse_reference_id

from .dto import DayIn, EntryIn


def _is_position(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


@dataclass(frozen=True, slots=True)
class CleanEntry:
    exercise_id: int
    position: int
    id: int | None
    sets: str | None
    reps: str | None
    load: str | None
    rest: str | None
    notes: str | None


@dataclass(frozen=True, slots=True)
class CleanDay:
    day_label: str
    position: int
    id: int | None
    subtitle: str | None
    entries: list[CleanEntry]


def validate_days(days: Sequence[DayIn], errors: FieldErrors, *, prefix: str = "days") -> list[CleanDay]:
    """Check every day and entry, collecting all problems into ``errors``.

    Nothing is written here; callers raise before touching the session.
    """
    cleaned: list[CleanDay] = []
    for d_index, day in enumerate(days):
        day_path = f"{prefix}[{d_index}]"
        label = day.day_label.strip() if isinstance(day.day_label, str) else ""
        if not label:
            errors.add(f"{day_path}.day_label", "must be a non-empty string")
        if not _is_position(day.position):
            errors.add(f"{day_path}.position", "must be an integer")

        entries: list[CleanEntry] = []
        for e_index, entry in enumerate(day.entries):
            entry_path = f"{day_path}.entries[{e_index}]"
            clean = _validate_entry(entry, entry_path, errors)
            if clean is not None:
                entries.append(clean)

        if label and _is_position(day.position):
            cleaned.append(
                CleanDay(
                    day_label=label,
                    position=day.position,
                    id=day.id,
                    subtitle=_clean(day.subtitle),
                    entries=entries,
                )
            )
    return cleaned


def _validate_entry(entry: EntryIn, path: str, errors: FieldErrors) -> CleanEntry | None:
    exercise_id = parse_reference_id(entry.exercise_id)
    if exercise_id is None:
        errors.add(f"{path}.exercise_id", "must be a valid exercise id")
    if not _is_position(entry.position):
        errors.add(f"{path}.position", "must be an integer")
    if exercise_id is None or not _is_position(entry.position):
        return None
    return CleanEntry(
        exercise_id=exercise_id,
        position=entry.position,
        id=entry.id,
        sets=_clean(entry.sets),
        reps=_clean(entry.reps),
        load=_clean(entry.load),
        rest=_clean(entry.rest),
        notes=_clean(entry.notes),
    )


@dataclass(slots=True)
class SubtreeDiff:
    """Ids kept, added and removed by a replace, used for the audit log line."""

    days_kept: list[int] = field(default_factory=list)
    days_added: int = 0
    days_removed: list[int] = field(default_factory=list)
    entries_kept: list[int] = field(default_factory=list)
    entries_added: int = 0
    entries_removed: list[int] = field(default_factory=list)

    def as_log_extra(self) -> dict[str, Any]:
        return {
            "days_kept": self.days_kept,
            "days_added": self.days_added,
            "days_removed": self.days_removed,
            "entries_kept": self.entries_kept,
            "entries_added": self.entries_added,
            "entries_removed": self.entries_removed,
        }


def _build_entry(clean: CleanEntry, row: RoutineEntry | None = None) -> RoutineEntry:
    if row is None:
        row = RoutineEntry(exercise_id=clean.exercise_id, completed=False)
    row.sets = clean.sets
    row.reps = clean.reps
    row.load = clean.load
    row.rest = clean.rest
    row.notes = clean.notes
    row.position = clean.position
    return row


def replace_days(routine: Routine, days: Sequence[CleanDay]) -> SubtreeDiff:
    """Rebuild ``routine.days`` from ``days``.

    Echoed day ids that belong to the routine keep their row; an echoed entry
    id keeps its row only inside the same day and only while it still points
    at the same exercise. Everything else is created fresh, and rows missing
    from the payload are removed by the ``delete-orphan`` cascade.
    """
    diff = SubtreeDiff()
    existing_days = {day.id: day for day in routine.days}
    seen_days: set[int] = set()
    new_days: list[RoutineDay] = []

    for clean_day in days:
        day = existing_days.get(clean_day.id) if clean_day.id is not None else None
        if day is not None and day.id in seen_days:
            day = None
        if day is None:
            day = RoutineDay()
            diff.days_added += 1
        else:
            seen_days.add(day.id)
            diff.days_kept.append(day.id)
        day.day_label = clean_day.day_label
        day.subtitle = clean_day.subtitle
        day.position = clean_day.position

        existing_entries = {entry.id: entry for entry in day.entries} if day.id is not None else {}
        seen_entries: set[int] = set()
        new_entries: list[RoutineEntry] = []
        for clean_entry in clean_day.entries:
            row = existing_entries.get(clean_entry.id) if clean_entry.id is not None else None
            if row is not None and (row.id in seen_entries or row.exercise_id != clean_entry.exercise_id):
                row = None
            if row is None:
                diff.entries_added += 1
            else:
                seen_entries.add(row.id)
                diff.entries_kept.append(row.id)
            new_entries.append(_build_entry(clean_entry, row))

        diff.entries_removed.extend(
            entry_id for entry_id in existing_entries if entry_id not in seen_entries
        )
        day.entries = new_entries
        new_days.append(day)

    for day_id, day in existing_days.items():
        if day_id not in seen_days:
            diff.days_removed.append(day_id)
            diff.entries_removed.extend(entry.id for entry in day.entries)

    routine.days = new_days
    return diff


def copy_days(source: Routine) -> list[RoutineDay]:
    """Deep-copy a routine's days and entries with fresh ids and cleared flags."""
    copies: list[RoutineDay] = []
    for day in sorted(source.days, key=lambda d: (d.position, d.id)):
        copies.append(
            RoutineDay(
                day_label=day.day_label,
                subtitle=day.subtitle,
                position=day.position,
                entries=[
                    RoutineEntry(
                        exercise_id=entry.exercise_id,
                        sets=entry.sets,
                        reps=entry.reps,
                        load=entry.load,
                        rest=entry.rest,
                        notes=entry.notes,
                        position=entry.position,
                        completed=False,
                    )
                    for entry in sorted(day.entries, key=lambda e: (e.position, e.id))
                ],
            )
        )
    return copies


def build_days(days: Sequence[CleanDay]) -> list[RoutineDay]:
    """Fresh day rows for a new routine; echoed ids are ignored."""
    return [
        RoutineDay(
            day_label=day.day_label,
            subtitle=day.subtitle,
            position=day.position,
            entries=[_build_entry(entry) for entry in day.entries],
        )
        for day in days
    ]
