"""FastAPI dependency injection definitions.

Re-exports all dependencies.
"""

# Actor
from src.app.api.dependencies.actor import CurrentActor, get_actor

# Database
from src.app.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.app.api.dependencies.repositories import (
    HourTransactionRepo,
    ProjectRepo,
    StatusHistoryRepo,
    get_hour_transaction_repository,
    get_project_repository,
    get_status_history_repository,
)

# Services
from src.app.api.dependencies.services import (
    AcceptanceGateDep,
    AuditServiceDep,
    ExpirationServiceDep,
    HourLedgerServiceDep,
    LifecycleServiceDep,
    ProjectServiceDep,
    get_acceptance_gate,
    get_audit_service,
    get_expiration_service,
    get_hour_ledger_service,
    get_lifecycle_service,
    get_project_service,
)

__all__ = [
    # Actor
    "CurrentActor",
    "get_actor",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "HourTransactionRepo",
    "ProjectRepo",
    "StatusHistoryRepo",
    "get_hour_transaction_repository",
    "get_project_repository",
    "get_status_history_repository",
    # Services
    "AcceptanceGateDep",
    "AuditServiceDep",
    "ExpirationServiceDep",
    "HourLedgerServiceDep",
    "LifecycleServiceDep",
    "ProjectServiceDep",
    "get_acceptance_gate",
    "get_audit_service",
    "get_expiration_service",
    "get_hour_ledger_service",
    "get_lifecycle_service",
    "get_project_service",
]
