from src.app.services.acceptance import AcceptanceDecision, AcceptanceGate, evaluate_acceptance
from src.app.services.audit_service import AuditService
from src.app.services.expiration_service import ExpirationService, SweepResult
from src.app.services.hour_ledger_service import (
    AdjustmentResult,
    ExtensionResult,
    HourLedgerService,
)
from src.app.services.lifecycle_service import LifecycleService, TransitionResult
from src.app.services.project_service import ProjectHealth, ProjectService

__all__ = [
    "AcceptanceDecision",
    "AcceptanceGate",
    "AdjustmentResult",
    "AuditService",
    "ExpirationService",
    "ExtensionResult",
    "HourLedgerService",
    "LifecycleService",
    "ProjectHealth",
    "ProjectService",
    "SweepResult",
    "TransitionResult",
    "evaluate_acceptance",
]
