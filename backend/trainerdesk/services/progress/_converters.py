from __future__ import annotations

from operator import attrgetter

from trainerdesk.models.base import as_utc
from trainerdesk.models.routine import Routine
from trainerdesk.models.session import WorkoutSession
from trainerdesk.services._shared.references import SessionLabels

from .dto import CompletedDayOut, SessionOut


def session_to_out(row: WorkoutSession, labels: SessionLabels) -> SessionOut:
    return SessionOut(
        id=row.id,
        routine_id=row.routine_id,
        routine=labels.routine(row.routine_id),
        trainer=labels.trainer(row.trainer_id),
        day_id=row.day_id,
        day_label=row.day_label,
        day_subtitle=row.day_subtitle,
        occurred_at=as_utc(row.occurred_at),
        completed_at=as_utc(row.completed_at),
        status=row.status,
        effort=row.effort,
        comment=row.comment,
    )


def completed_day_to_out(row: WorkoutSession) -> CompletedDayOut:
    return CompletedDayOut(day_id=row.day_id, completed_at=as_utc(row.completed_at))


def next_suggested_day_id(routine: Routine, last_day_id: int | None) -> int | None:
    """
    Day after the most recently completed one, wrapping to the first day.

    Returns the first day when nothing was completed yet or the last
    completed day no longer exists, and ``None`` for a routine without days.
    """
    days = sorted(routine.days, key=attrgetter("position", "id"))
    if not days:
        return None
    ids = [day.id for day in days]
    if last_day_id is None or last_day_id not in ids:
        return ids[0]
    return ids[(ids.index(last_day_id) + 1) % len(ids)]
