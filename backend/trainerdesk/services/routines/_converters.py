from __future__ import annotations

from collections.abc import Collection
from operator import attrgetter

from trainerdesk.models.base import as_utc
from trainerdesk.models.routine import Routine, RoutineDay, RoutineEntry
from trainerdesk.services._shared.references import (
    ReferenceBook,
    Resolved,
    Unresolved,
    resolve_row,
)

from .dto import DayOut, EntryOut, RoutineOut


def entry_to_out(row: RoutineEntry, trainer_id: int, book: ReferenceBook) -> EntryOut:
    return EntryOut(
        id=row.id,
        exercise=book.exercise(trainer_id, Unresolved(row.exercise_id)),
        sets=row.sets,
        reps=row.reps,
        load=row.load,
        rest=row.rest,
        notes=row.notes,
        position=row.position,
        completed=bool(row.completed),
    )


def day_to_out(
    row: RoutineDay,
    trainer_id: int,
    book: ReferenceBook,
    *,
    done_day_ids: Collection[int] | None = None,
) -> DayOut:
    entries = sorted(row.entries, key=attrgetter("position", "id"))
    return DayOut(
        id=row.id,
        day_label=row.day_label,
        subtitle=row.subtitle,
        position=row.position,
        entries=[entry_to_out(entry, trainer_id, book) for entry in entries],
        done_this_week=None if done_day_ids is None else row.id in done_day_ids,
    )


def routine_to_out(
    row: Routine,
    book: ReferenceBook,
    *,
    done_day_ids: Collection[int] | None = None,
    next_suggested_day_id: int | None = None,
) -> RoutineOut:
    days = sorted(row.days, key=attrgetter("position", "id"))
    is_template = row.kind == "template"
    return RoutineOut(
        id=row.id,
        kind=row.kind,
        title=row.title,
        description=row.description,
        organization_mode=row.organization_mode,
        trainer=resolve_row(row.trainer_id, row.trainer) or Resolved(id=row.trainer_id, label=""),
        student=resolve_row(row.student_id, row.student),
        folder=resolve_row(row.folder_id, row.folder),
        status=row.status if is_template else None,
        position_in_folder=row.position_in_folder if is_template else None,
        expires_on=row.expires_on,
        planned_sessions=row.planned_sessions,
        completed_sessions=row.completed_sessions or 0,
        is_completed=row.is_completed,
        progress=row.progress_label,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        days=[day_to_out(day, row.trainer_id, book, done_day_ids=done_day_ids) for day in days],
        next_suggested_day_id=next_suggested_day_id,
    )
