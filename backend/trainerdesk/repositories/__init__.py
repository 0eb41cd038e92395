"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from trainerdesk.repositories.account import StudentRepository, TrainerRepository
from trainerdesk.repositories.exercise import ExerciseRepository
from trainerdesk.repositories.folder import FolderRepository
from trainerdesk.repositories.routine import RoutineRepository
from trainerdesk.repositories.session import WorkoutSessionRepository

__all__ = [
    "ExerciseRepository",
    "FolderRepository",
    "RoutineRepository",
    "StudentRepository",
    "TrainerRepository",
    "WorkoutSessionRepository",
]
