"""Dense position helpers shared by the routine and folder services."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from trainerdesk.repositories.routine import RoutineRepository

logger = logging.getLogger(__name__)


class _Positioned(Protocol):
    id: int


def assign_dense(rows: Sequence[_Positioned], attr: str, *, start: int = 0) -> list[int]:
    """Set ``attr`` to ``start, start+1, ...`` following ``rows`` order.

    :returns: Ids whose stored value actually changed.
    """
    changed: list[int] = []
    for offset, row in enumerate(rows):
        target = start + offset
        if getattr(row, attr) != target:
            setattr(row, attr, target)
            changed.append(row.id)
    return changed


def renumber_bucket(routines: RoutineRepository, trainer_id: int, folder_id: int | None) -> None:
    """Close gaps left in a (trainer, folder) bucket after a template leaves it.

    Pending changes must be flushed first so the departing routine is no
    longer part of the bucket query.
    """
    rows = routines.list_bucket(trainer_id, folder_id)
    changed = assign_dense(rows, "position_in_folder")
    if changed:
        routines.flush()
        logger.debug(
            "Bucket renumbered",
            extra={"trainer_id": trainer_id, "folder_id": folder_id, "changed": changed},
        )
