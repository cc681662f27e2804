"""
Project Expiration Workflow.

Runs the deadline sweep on the jobs queue. Scheduled by the worker as a
Temporal cron workflow (see Settings.expiration_schedule).
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.app.temporal.activities import expire_overdue_projects

SWEEP_TIMEOUT = timedelta(minutes=5)
SWEEP_RETRY_POLICY = RetryPolicy(
    maximum_attempts=3,
    initial_interval=timedelta(seconds=2),
)


@workflow.defn
class ProjectExpirationWorkflow:
    """Expire overdue projects.

    Idempotent: the sweep only selects Active projects past their
    deadline, so retries and overlapping runs do not double-expire.
    """

    @workflow.run
    async def run(self) -> dict[str, object]:
        workflow.logger.info("Starting project expiration sweep")

        result: dict[str, object] = await workflow.execute_activity(
            expire_overdue_projects,
            start_to_close_timeout=SWEEP_TIMEOUT,
            retry_policy=SWEEP_RETRY_POLICY,
        )

        workflow.logger.info(
            f"Project expiration sweep complete: {result['expired_count']} expired"
        )
        return result
