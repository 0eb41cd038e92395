from .command import ProgressCommandService
from .query import ProgressQueryService

__all__ = ["ProgressCommandService", "ProgressQueryService"]
