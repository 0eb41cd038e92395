from .service import OrderingService

__all__ = ["OrderingService"]
