"""Hour ledger - atomic mutations of a project's hour budget.

Every mutation follows the same shape: lock the project row, re-read the
balance under the lock, validate 0 <= used_hours <= total_hours, write the
project plus exactly one ledger entry, commit. Audit happens after commit.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.actor import Actor
from src.app.core.config import get_settings
from src.app.core.errors import ConflictError, DomainError, NotFoundError, ValidationError
from src.app.core.logging import get_logger
from src.app.core.validators import MAX_HOURS, to_hours, validate_reason
from src.app.models import (
    AuditAction,
    HourTransactionKind,
    Project,
    ProjectHourTransaction,
)
from src.app.models.base import utc_now
from src.app.repositories import ProjectHourTransactionRepository, ProjectRepository
from src.app.services.audit_service import AuditService

logger = get_logger(__name__)

INSUFFICIENT_HOURS = "Insufficient hours in project bucket"
OVER_RELEASE = "Cannot deallocate more hours than currently used"

ZERO = Decimal("0.00")

_AUDIT_ACTIONS = {
    HourTransactionKind.EXTENSION: AuditAction.HOURS_EXTEND,
    HourTransactionKind.ADJUSTMENT: AuditAction.HOURS_ADJUST,
    HourTransactionKind.CONSUMPTION: AuditAction.HOURS_CONSUME,
    HourTransactionKind.RELEASE: AuditAction.HOURS_RELEASE,
}


@dataclass(frozen=True)
class ExtensionResult:
    project: Project
    transaction: ProjectHourTransaction
    additional_hours: Decimal
    new_total: Decimal
    available_hours: Decimal


@dataclass(frozen=True)
class AdjustmentResult:
    project: Project
    transaction: ProjectHourTransaction
    hours: Decimal
    balance_before: Decimal
    balance_after: Decimal
    available_hours: Decimal


def _recorded(txn: ProjectHourTransaction | None) -> ProjectHourTransaction:
    if txn is None:
        raise RuntimeError("Ledger operation committed without an entry")
    return txn


def build_allocation_entry(project: Project, actor: Actor) -> ProjectHourTransaction:
    """Ledger entry recording a new project's initial budget.

    Opens the chain at used_hours = 0; added in the same transaction that
    inserts the project.
    """
    total = to_hours(project.total_hours)
    return ProjectHourTransaction(
        project_id=project.id,
        kind=HourTransactionKind.ALLOCATION.value,
        delta=total,
        balance_before=ZERO,
        balance_after=ZERO,
        total_hours_after=total,
        reason="Initial allocation",
        performed_by=actor.id,
        performed_by_name=actor.name,
    )


class HourLedgerService:
    """Service for hour budget operations on a single project."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        ledger_repo: ProjectHourTransactionRepository,
        session: AsyncSession,
        audit_service: AuditService | None = None,
    ):
        self.project_repo = project_repo
        self.ledger_repo = ledger_repo
        self.session = session
        self.audit_service = audit_service

    async def extend(
        self,
        project_id: UUID,
        additional_hours: Decimal | int | float,
        reason: str | None,
        actor: Actor,
    ) -> ExtensionResult:
        """Raise the budget ceiling by ``additional_hours``.

        Raises:
            ValidationError: Non-positive hours or reason too short.
            NotFoundError: Project does not exist.
        """
        settings = get_settings()
        hours = to_hours(additional_hours)
        if hours <= 0:
            raise ValidationError("Additional hours must be a positive number")
        cleaned_reason = validate_reason(reason, min_length=settings.reason_min_length)

        project, txn = await self._apply(
            project_id,
            HourTransactionKind.EXTENSION,
            actor,
            delta_total=hours,
            reason=cleaned_reason,
        )
        return ExtensionResult(
            project=project,
            transaction=_recorded(txn),
            additional_hours=hours,
            new_total=to_hours(project.total_hours),
            available_hours=project.available_hours,
        )

    async def adjust(
        self,
        project_id: UUID,
        delta: Decimal | int | float,
        reason: str | None,
        actor: Actor,
    ) -> AdjustmentResult:
        """Apply a manual correction to used hours (positive consumes, negative releases).

        Raises:
            ValidationError: Zero adjustment or reason too short.
            NotFoundError: Project does not exist.
            ConflictError: Result would fall outside [0, total_hours].
        """
        settings = get_settings()
        hours = to_hours(delta)
        if hours == 0:
            raise ValidationError("Adjustment must be a non-zero number")
        cleaned_reason = validate_reason(reason, min_length=settings.reason_min_length)

        project, txn = await self._apply(
            project_id,
            HourTransactionKind.ADJUSTMENT,
            actor,
            delta_used=hours,
            reason=cleaned_reason,
        )
        entry = _recorded(txn)
        return AdjustmentResult(
            project=project,
            transaction=entry,
            hours=hours,
            balance_before=to_hours(entry.balance_before),
            balance_after=to_hours(entry.balance_after),
            available_hours=project.available_hours,
        )

    async def consume(
        self,
        project_id: UUID,
        hours_to_add: Decimal | int | float,
        actor: Actor,
        request_id: UUID | None = None,
    ) -> Project:
        """Charge estimated hours for a request against the budget.

        Raises:
            ValidationError: Negative hours.
            NotFoundError: Project does not exist.
            ConflictError: used_hours would exceed total_hours.
        """
        hours = to_hours(hours_to_add)
        if hours < 0:
            raise ValidationError("Hours to consume must not be negative")
        if hours == 0:
            return await self._get_project(project_id)

        project, _ = await self._apply(
            project_id,
            HourTransactionKind.CONSUMPTION,
            actor,
            delta_used=hours,
            request_id=request_id,
        )
        return project

    async def release(
        self,
        project_id: UUID,
        hours: Decimal | int | float,
        actor: Actor,
        request_id: UUID | None = None,
    ) -> Project:
        """Return hours from a cancelled or reassigned request.

        Releases at most the currently used hours; the balance floors at zero.

        Raises:
            ValidationError: Negative hours.
            NotFoundError: Project does not exist.
        """
        amount = to_hours(hours)
        if amount < 0:
            raise ValidationError("Hours to release must not be negative")
        if amount == 0:
            return await self._get_project(project_id)

        project, _ = await self._apply(
            project_id,
            HourTransactionKind.RELEASE,
            actor,
            delta_used=-amount,
            request_id=request_id,
            floor_at_zero=True,
        )
        return project

    def record_allocation(self, project: Project, actor: Actor) -> ProjectHourTransaction:
        """Stage the allocation entry in the caller's transaction (no commit)."""
        txn = build_allocation_entry(project, actor)
        self.ledger_repo.add(txn)
        return txn

    async def get_transactions(
        self, project_id: UUID, limit: int = 50, offset: int = 0
    ) -> tuple[list[ProjectHourTransaction], int]:
        """Ledger page for a project, newest first, with total count."""
        await self._get_project(project_id)
        return await self.ledger_repo.list_for_project(project_id, limit=limit, offset=offset)

    async def _get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def _apply(
        self,
        project_id: UUID,
        kind: HourTransactionKind,
        actor: Actor,
        *,
        delta_used: Decimal = ZERO,
        delta_total: Decimal = ZERO,
        reason: str | None = None,
        request_id: UUID | None = None,
        floor_at_zero: bool = False,
    ) -> tuple[Project, ProjectHourTransaction | None]:
        """Lock, validate and write one ledger movement.

        Returns the project and the new ledger entry, or None for the entry
        when a floored release had nothing to release.
        """
        settings = get_settings()
        try:
            project = await self.project_repo.get_for_update(
                project_id, lock_timeout_ms=settings.project_lock_timeout_ms
            )
            if project is None:
                raise NotFoundError("Project", project_id)

            total_before = to_hours(project.total_hours)
            used_before = to_hours(project.used_hours)

            if floor_at_zero:
                delta_used = max(delta_used, -used_before)

            total_after = total_before + delta_total
            used_after = used_before + delta_used

            if used_after > total_after:
                raise ConflictError(
                    INSUFFICIENT_HOURS,
                    {
                        "requested_hours": delta_used,
                        "available_hours": total_before - used_before,
                    },
                )
            if used_after < 0:
                raise ConflictError(OVER_RELEASE, {"used_hours": used_before})

            if total_after > MAX_HOURS:
                raise ValidationError(
                    f"Total hours must not exceed {MAX_HOURS}",
                    {"total_hours": total_before, "max_hours": str(MAX_HOURS)},
                )

            if delta_used == 0 and delta_total == 0:
                # Floored release on an empty balance; commit keeps project loaded
                await self.session.commit()
                return project, None

            project.total_hours = total_after
            project.used_hours = used_after
            project.updated_at = utc_now()

            txn = ProjectHourTransaction(
                project_id=project.id,
                kind=kind.value,
                delta=delta_total if delta_total else delta_used,
                balance_before=used_before,
                balance_after=used_after,
                total_hours_after=total_after,
                reason=reason,
                request_id=request_id,
                performed_by=actor.id,
                performed_by_name=actor.name,
            )
            self.ledger_repo.add(txn)
            await self.session.commit()

        except DomainError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Hour ledger update failed",
                project_id=str(project_id),
                kind=kind.value,
                error=str(e),
            )
            raise

        logger.info(
            "Project hours adjusted",
            project_id=str(project.id),
            kind=kind.value,
            delta=str(txn.delta),
            balance_before=str(used_before),
            balance_after=str(used_after),
            total_hours=str(total_after),
        )
        await self._audit(project, txn, actor)
        return project, txn

    async def _audit(self, project: Project, txn: ProjectHourTransaction, actor: Actor) -> None:
        if self.audit_service is None:
            return
        await self.audit_service.log_action(
            _AUDIT_ACTIONS[HourTransactionKind(txn.kind)],
            entity_id=project.id,
            actor_id=actor.id,
            changes={
                "kind": txn.kind,
                "delta": str(txn.delta),
                "balance_before": str(txn.balance_before),
                "balance_after": str(txn.balance_after),
                "total_hours_after": str(txn.total_hours_after),
                "reason": txn.reason,
                "request_id": str(txn.request_id) if txn.request_id else None,
            },
        )
