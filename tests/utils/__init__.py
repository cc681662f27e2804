"""Test utilities package."""

from tests.utils.database import create_test_engine

__all__ = [
    "create_test_engine",
]
