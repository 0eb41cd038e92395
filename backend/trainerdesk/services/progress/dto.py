from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from trainerdesk.services._shared.dto import PageMeta
from trainerdesk.services._shared.references import Resolved
from trainerdesk.services.routines.dto import UNSET

# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class CompleteDayIn:
    """
    Mark one training day of an individual routine as done.

    :param routine_id: Routine assigned to the student.
    :type routine_id: int
    :param day_id: Day of that routine.
    :type day_id: int
    :param effort: Optional perceived effort level.
    :type effort: str | None
    :param comment: Optional free-text feedback.
    :type comment: str | None
    """

    routine_id: int
    day_id: int
    effort: str | None = None
    comment: str | None = None


@dataclass(frozen=True, slots=True)
class FeedbackIn:
    """Fields left as ``UNSET`` keep their stored value; ``None`` clears."""

    session_id: int
    effort: Any = UNSET
    comment: Any = UNSET


@dataclass(frozen=True, slots=True)
class HistoryIn:
    page: int = 1
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class ToggleEntryIn:
    routine_id: int
    entry_id: int


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class SessionOut:
    """
    Completed workout session with the day snapshot taken at completion.

    :param day_label: Label of the day when it was completed.
    :type day_label: str
    :param day_subtitle: Subtitle of the day when it was completed.
    :type day_subtitle: str | None
    :param routine: Routine the day belonged to; ``known`` is ``False`` once
        that routine is gone.
    :type routine: Resolved | None
    :param trainer: Trainer who assigned the routine.
    :type trainer: Resolved
    """

    id: int
    routine_id: int | None
    routine: Resolved | None
    trainer: Resolved
    day_id: int
    day_label: str
    day_subtitle: str | None
    occurred_at: datetime | None
    completed_at: datetime | None
    status: str
    effort: str | None
    comment: str | None


@dataclass(frozen=True, slots=True)
class CompleteDayOut:
    """New session plus the routine counters after the increment."""

    session: SessionOut
    completed_sessions: int
    planned_sessions: int | None
    is_completed: bool


@dataclass(frozen=True, slots=True)
class CompletedDayOut:
    day_id: int
    completed_at: datetime | None


@dataclass(frozen=True, slots=True)
class CompletedDaysOut:
    items: list[CompletedDayOut]


@dataclass(frozen=True, slots=True)
class WeekSessionsOut:
    """Sessions completed inside ``[week_start, week_end)``."""

    week_start: datetime
    week_end: datetime
    items: list[SessionOut]


@dataclass(frozen=True, slots=True)
class HistoryOut:
    items: list[SessionOut]
    meta: PageMeta


@dataclass(frozen=True, slots=True)
class EntryToggleOut:
    routine_id: int
    entry_id: int
    completed: bool
