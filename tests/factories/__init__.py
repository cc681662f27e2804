"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import ProjectFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid7, utc_now
from tests.factories.project import (
    ProjectFactory,
    ProjectHourTransactionFactory,
    ProjectStatusHistoryFactory,
)

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid7",
    "utc_now",
    # Project
    "ProjectFactory",
    "ProjectHourTransactionFactory",
    "ProjectStatusHistoryFactory",
]
