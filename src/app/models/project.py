"""Project aggregate and its append-only history and ledger tables."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid7

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.app.core.validators import HOURS_DECIMAL_PLACES, HOURS_MAX_DIGITS
from src.app.models.base import utc_now
from src.app.models.enums import ProjectPriority, ProjectStatus


class Project(SQLModel, table=True):
    """Project with a finite hour budget.

    Invariant: 0 <= used_hours <= total_hours after every committed
    ledger operation. status and hours are only written by
    LifecycleService and HourLedgerService respectively.
    """

    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_status_deadline", "status", "deadline"),)

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    code: str = Field(max_length=20, unique=True, index=True)
    name: str = Field(max_length=200, index=True)
    description: str | None = Field(default=None, max_length=1000)
    status: str = Field(default=ProjectStatus.PENDING.value, max_length=20, index=True)
    priority: str = Field(default=ProjectPriority.MEDIUM.value, max_length=20)
    category: str | None = Field(default=None, max_length=100)

    total_hours: Decimal = Field(
        default=Decimal("0"), max_digits=HOURS_MAX_DIGITS, decimal_places=HOURS_DECIMAL_PLACES
    )
    used_hours: Decimal = Field(
        default=Decimal("0"), max_digits=HOURS_MAX_DIGITS, decimal_places=HOURS_DECIMAL_PLACES
    )
    deadline: datetime | None = Field(default=None)

    owner_id: UUID
    owner_name: str | None = Field(default=None, max_length=200)
    created_by: UUID
    created_by_name: str | None = Field(default=None, max_length=200)

    completed_at: datetime | None = Field(default=None)
    cancelled_at: datetime | None = Field(default=None)
    cancellation_reason: str | None = Field(default=None, max_length=1000)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def available_hours(self) -> Decimal:
        return Decimal(self.total_hours) - Decimal(self.used_hours)


class ProjectStatusHistory(SQLModel, table=True):
    """One row per successful status transition. Never updated or deleted."""

    __tablename__ = "project_status_history"
    __table_args__ = (
        Index("ix_project_status_history_project_changed", "project_id", "changed_at"),
    )

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", ondelete="CASCADE")
    from_status: str = Field(max_length=20)
    to_status: str = Field(max_length=20)
    reason: str | None = Field(default=None, max_length=1000)
    changed_by: UUID
    changed_by_name: str | None = Field(default=None, max_length=200)
    changed_at: datetime = Field(default_factory=utc_now)


class ProjectHourTransaction(SQLModel, table=True):
    """Append-only hour ledger entry.

    balance_before/balance_after track used_hours; for each project,
    one entry's balance_after equals the next entry's balance_before.
    """

    __tablename__ = "project_hour_transactions"
    __table_args__ = (
        Index("ix_project_hour_transactions_project_occurred", "project_id", "occurred_at"),
    )

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", ondelete="CASCADE")
    kind: str = Field(max_length=20)  # HourTransactionKind value
    delta: Decimal = Field(max_digits=HOURS_MAX_DIGITS, decimal_places=HOURS_DECIMAL_PLACES)
    balance_before: Decimal = Field(
        max_digits=HOURS_MAX_DIGITS, decimal_places=HOURS_DECIMAL_PLACES
    )
    balance_after: Decimal = Field(
        max_digits=HOURS_MAX_DIGITS, decimal_places=HOURS_DECIMAL_PLACES
    )
    total_hours_after: Decimal = Field(
        max_digits=HOURS_MAX_DIGITS, decimal_places=HOURS_DECIMAL_PLACES
    )
    reason: str | None = Field(default=None, max_length=1000)
    request_id: UUID | None = Field(default=None, index=True)
    performed_by: UUID
    performed_by_name: str | None = Field(default=None, max_length=200)
    occurred_at: datetime = Field(default_factory=utc_now)
