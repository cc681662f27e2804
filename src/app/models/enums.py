"""Shared enums for models."""

from enum import Enum


class ProjectStatus(str, Enum):
    """Project lifecycle status.

    Allowed transitions between these live in services.lifecycle_rules.
    """

    PENDING = "Pending"
    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    SUSPENDED = "Suspended"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"
    ARCHIVED = "Archived"


class ProjectPriority(str, Enum):
    """Project priority."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class HourTransactionKind(str, Enum):
    """Kinds of hour ledger movements."""

    ALLOCATION = "allocation"  # Initial budget at creation
    EXTENSION = "extension"  # Budget ceiling raised
    ADJUSTMENT = "adjustment"  # Manual correction of used hours
    CONSUMPTION = "consumption"  # Hours assigned to a request
    RELEASE = "release"  # Hours returned from a request
