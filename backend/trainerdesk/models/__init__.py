from trainerdesk.models.account import Student, Trainer
from trainerdesk.models.exercise import Exercise
from trainerdesk.models.folder import Folder
from trainerdesk.models.routine import Routine, RoutineDay, RoutineEntry
from trainerdesk.models.session import WorkoutSession

__all__ = [
    "Exercise",
    "Folder",
    "Routine",
    "RoutineDay",
    "RoutineEntry",
    "Student",
    "Trainer",
    "WorkoutSession",
]
