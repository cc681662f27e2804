"""Task queue routing for Temporal workflows."""

from dataclasses import dataclass
from enum import StrEnum


class QueueKind(StrEnum):
    """Workflow workload types for queue routing."""

    JOBS = "jobs"  # System-wide background jobs (expiration sweep)


@dataclass(frozen=True)
class TemporalRoute:
    """Routing result for workflow execution."""

    namespace: str
    task_queue: str


def task_queue_name(prefix: str, kind: QueueKind, shard: int) -> str:
    """Generate task queue name: {prefix}.{kind}.{shard:02d}"""
    return f"{prefix}.{kind}.{shard:02d}"


def route_for_system_job(
    *,
    namespace: str,
    prefix: str,
    kind: QueueKind = QueueKind.JOBS,
) -> TemporalRoute:
    """Get routing info for system-level jobs.

    Uses shard 00 for predictable routing.
    """
    return TemporalRoute(namespace=namespace, task_queue=task_queue_name(prefix, kind, shard=0))
