from .service import FolderService

__all__ = ["FolderService"]
