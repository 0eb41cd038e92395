from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ReorderFoldersIn:
    ordered_folder_ids: Sequence[Any]


@dataclass(frozen=True, slots=True)
class ReorderRoutinesIn:
    """
    New order for the templates of one bucket.

    :param context_id: Folder id, or ``None`` for the no-folder bucket.
    :param ordered_routine_ids: Template ids in their new order.
    """

    context_id: int | None
    ordered_routine_ids: Sequence[Any]


@dataclass(frozen=True, slots=True)
class ReorderOut:
    """Ids in their stored order, plus ids that were ignored."""

    ordered_ids: list[int]
    skipped_ids: list[Any] = field(default_factory=list)
