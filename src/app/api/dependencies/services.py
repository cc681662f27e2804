"""Service factory dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends

from src.app.api.dependencies.db import DBSession
from src.app.api.dependencies.repositories import (
    HourTransactionRepo,
    ProjectRepo,
    StatusHistoryRepo,
)
from src.app.core.db import get_session
from src.app.repositories import AuditLogRepository
from src.app.services import (
    AcceptanceGate,
    AuditService,
    ExpirationService,
    HourLedgerService,
    LifecycleService,
    ProjectService,
)


async def get_audit_service() -> AsyncGenerator[AuditService]:
    """Get audit service with its own isolated session.

    Uses a dedicated session that commits independently from business transactions.
    """
    async with get_session() as session:
        yield AuditService(AuditLogRepository(session), session)


AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_project_service(
    project_repo: ProjectRepo,
    ledger_repo: HourTransactionRepo,
    session: DBSession,
    audit_service: AuditServiceDep,
) -> ProjectService:
    return ProjectService(project_repo, ledger_repo, session, audit_service)


def get_lifecycle_service(
    project_repo: ProjectRepo,
    history_repo: StatusHistoryRepo,
    session: DBSession,
    audit_service: AuditServiceDep,
) -> LifecycleService:
    return LifecycleService(project_repo, history_repo, session, audit_service)


def get_hour_ledger_service(
    project_repo: ProjectRepo,
    ledger_repo: HourTransactionRepo,
    session: DBSession,
    audit_service: AuditServiceDep,
) -> HourLedgerService:
    return HourLedgerService(project_repo, ledger_repo, session, audit_service)


def get_acceptance_gate(project_repo: ProjectRepo) -> AcceptanceGate:
    return AcceptanceGate(project_repo)


def get_expiration_service() -> ExpirationService:
    """Expiration sweep opens one session per project."""
    return ExpirationService(session_factory=get_session)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
LifecycleServiceDep = Annotated[LifecycleService, Depends(get_lifecycle_service)]
HourLedgerServiceDep = Annotated[HourLedgerService, Depends(get_hour_ledger_service)]
AcceptanceGateDep = Annotated[AcceptanceGate, Depends(get_acceptance_gate)]
ExpirationServiceDep = Annotated[ExpirationService, Depends(get_expiration_service)]
