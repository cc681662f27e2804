"""Model exports.

Import from here: `from src.app.models import Project, ProjectStatus`
"""

from src.app.models.audit import AuditAction, AuditLog, AuditStatus
from src.app.models.enums import HourTransactionKind, ProjectPriority, ProjectStatus
from src.app.models.project import Project, ProjectHourTransaction, ProjectStatusHistory

__all__ = [
    # Enums
    "AuditAction",
    "AuditStatus",
    "HourTransactionKind",
    "ProjectPriority",
    "ProjectStatus",
    # Tables
    "AuditLog",
    "Project",
    "ProjectHourTransaction",
    "ProjectStatusHistory",
]
