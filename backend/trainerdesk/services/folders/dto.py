from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class FolderCreateIn:
    name: str


@dataclass(frozen=True, slots=True)
class FolderUpdateIn:
    """Rename ``folder_id`` to ``name``."""

    folder_id: int
    name: str


@dataclass(frozen=True, slots=True)
class FolderOut:
    """
    Public projection of a folder.

    :param id: Primary key.
    :type id: int
    :param name: Display name, unique per trainer.
    :type name: str
    :param position: Order among the trainer's folders.
    :type position: int
    :param template_count: Template routines currently in the folder.
    :type template_count: int
    """

    id: int
    name: str
    position: int
    template_count: int
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class FolderListOut:
    items: list[FolderOut]
