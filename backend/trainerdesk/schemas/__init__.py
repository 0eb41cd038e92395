"""Convenience exports for application schemas."""

from __future__ import annotations

from .common import MetaSchema, PaginationQuerySchema, ReferenceSchema, build_meta
from .folder import FolderReorderSchema, FolderSchema, FolderWriteSchema
from .routine import (
    CloneToStudentSchema,
    MoveToFolderSchema,
    RoutineCreateSchema,
    RoutineFilterSchema,
    RoutineReorderSchema,
    RoutineSchema,
    RoutineUpdateSchema,
)
from .session import (
    CompleteDayResultSchema,
    CompleteDaySchema,
    CompletedDaySchema,
    EntryToggleSchema,
    FeedbackSchema,
    HistoryQuerySchema,
    SessionSchema,
    WeekSessionsSchema,
)

__all__ = [
    "PaginationQuerySchema",
    "MetaSchema",
    "ReferenceSchema",
    "build_meta",
    "FolderSchema",
    "FolderWriteSchema",
    "FolderReorderSchema",
    "RoutineSchema",
    "RoutineCreateSchema",
    "RoutineUpdateSchema",
    "RoutineFilterSchema",
    "MoveToFolderSchema",
    "RoutineReorderSchema",
    "CloneToStudentSchema",
    "SessionSchema",
    "CompleteDaySchema",
    "CompleteDayResultSchema",
    "CompletedDaySchema",
    "FeedbackSchema",
    "HistoryQuerySchema",
    "WeekSessionsSchema",
    "EntryToggleSchema",
]
