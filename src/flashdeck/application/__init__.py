# Application Package
from .card_service import CardService
from .scheduler import Scheduler

__all__ = ["CardService", "Scheduler"]
