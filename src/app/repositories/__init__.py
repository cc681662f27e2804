"""Repository layer - data access abstraction."""

from src.app.repositories.audit import AuditLogRepository
from src.app.repositories.base import BaseRepository
from src.app.repositories.hour_transaction import ProjectHourTransactionRepository
from src.app.repositories.project import ProjectRepository
from src.app.repositories.status_history import ProjectStatusHistoryRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "ProjectHourTransactionRepository",
    "ProjectRepository",
    "ProjectStatusHistoryRepository",
]
