from .clone import RoutineCloneService
from .command import RoutineCommandService
from .query import RoutineQueryService

__all__ = ["RoutineCommandService", "RoutineQueryService", "RoutineCloneService"]
