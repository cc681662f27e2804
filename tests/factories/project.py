"""Project, status history and hour ledger factories."""

from decimal import Decimal

from polyfactory import Use

from src.app.models import (
    HourTransactionKind,
    Project,
    ProjectHourTransaction,
    ProjectPriority,
    ProjectStatus,
    ProjectStatusHistory,
)
from tests.factories.base import BaseFactory, generate_uuid7, utc_now


class ProjectFactory(BaseFactory):
    """Factory for generating Project test data."""

    __model__ = Project

    id = Use(generate_uuid7)
    code = Use(lambda: f"{generate_uuid7().int % 10**8}-2026")
    name = Use(lambda: f"Test Project {generate_uuid7().hex[-8:]}")
    description = None
    status = ProjectStatus.ACTIVE.value
    priority = ProjectPriority.MEDIUM.value
    category = None
    total_hours = Decimal("100.00")
    used_hours = Decimal("0.00")
    deadline = None
    owner_id = Use(generate_uuid7)
    owner_name = "Owner"
    created_by = Use(generate_uuid7)
    created_by_name = "Creator"
    completed_at = None
    cancelled_at = None
    cancellation_reason = None
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def pending(cls, **kwargs):
        return cls.build(status=ProjectStatus.PENDING.value, **kwargs)

    @classmethod
    def with_hours(cls, total: str, used: str, **kwargs):
        """Project with a specific budget and consumption."""
        return cls.build(total_hours=Decimal(total), used_hours=Decimal(used), **kwargs)


class ProjectStatusHistoryFactory(BaseFactory):
    """Factory for status history entries. Set project_id explicitly."""

    __model__ = ProjectStatusHistory

    id = Use(generate_uuid7)
    from_status = ProjectStatus.PENDING.value
    to_status = ProjectStatus.ACTIVE.value
    reason = None
    changed_by = Use(generate_uuid7)
    changed_by_name = "Tester"
    changed_at = Use(utc_now)


class ProjectHourTransactionFactory(BaseFactory):
    """Factory for ledger entries. Set project_id explicitly."""

    __model__ = ProjectHourTransaction

    id = Use(generate_uuid7)
    kind = HourTransactionKind.CONSUMPTION.value
    delta = Decimal("1.00")
    balance_before = Decimal("0.00")
    balance_after = Decimal("1.00")
    total_hours_after = Decimal("100.00")
    reason = None
    request_id = None
    performed_by = Use(generate_uuid7)
    performed_by_name = "Tester"
    occurred_at = Use(utc_now)
