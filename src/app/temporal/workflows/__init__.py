"""Temporal Workflows - Re-exports for worker registration."""

from src.app.temporal.workflows.project_expiration import ProjectExpirationWorkflow

__all__ = ["ProjectExpirationWorkflow"]
