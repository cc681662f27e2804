"""
Temporal Worker - Separate process from API.

Run with:
    uv run python -m src.app.temporal.worker

Polls the jobs queue and makes sure the expiration cron workflow is running.
"""

import asyncio
from collections.abc import Sequence

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.worker import Worker

from src.app.core.config import get_settings
from src.app.core.db import dispose_engine
from src.app.core.logging import get_logger, setup_logging
from src.app.temporal.activities import expire_overdue_projects
from src.app.temporal.client import get_temporal_client
from src.app.temporal.routing import route_for_system_job
from src.app.temporal.workflows import ProjectExpirationWorkflow

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001


async def create_worker(
    client: Client,
    task_queue: str,
    workflows: Sequence[type],
    activities: Sequence[object],
    *,
    max_concurrent_activities: int = 50,
    max_concurrent_workflow_tasks: int = 50,
) -> Worker:
    """Create a worker with tuned settings."""
    return Worker(
        client,
        task_queue=task_queue,
        workflows=list(workflows),
        activities=list(activities),  # type: ignore[arg-type]
        max_concurrent_activities=max_concurrent_activities,
        max_concurrent_workflow_tasks=max_concurrent_workflow_tasks,
    )


async def ensure_expiration_cron(client: Client, task_queue: str) -> bool:
    """Start the expiration cron workflow unless it is disabled or already running.

    Returns:
        True if a new cron execution was started
    """
    settings = get_settings()
    if not settings.expiration_schedule:
        logger.info("Expiration schedule disabled")
        return False

    try:
        await client.start_workflow(
            ProjectExpirationWorkflow.run,
            id=settings.expiration_workflow_id,
            task_queue=task_queue,
            cron_schedule=settings.expiration_schedule,
        )
    except WorkflowAlreadyStartedError:
        logger.info(
            "Expiration cron workflow already running",
            workflow_id=settings.expiration_workflow_id,
        )
        return False

    logger.info(
        "Expiration cron workflow started",
        workflow_id=settings.expiration_workflow_id,
        schedule=settings.expiration_schedule,
    )
    return True


async def run_jobs_worker(client: Client, task_queue: str) -> None:
    """Run the worker for the jobs queue."""
    worker = await create_worker(
        client,
        task_queue,
        workflows=[ProjectExpirationWorkflow],
        activities=[expire_overdue_projects],
    )
    logger.info("Starting jobs worker", task_queue=task_queue)
    await worker.run()


async def run_health_server(task_queues: list[str], port: int = WORKER_HEALTH_PORT) -> None:
    """Run a lightweight health server for K8s probes."""
    health_app = FastAPI(title="Temporal Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str | list[str]]:
        return {
            "status": "healthy",
            "service": "temporal-worker",
            "task_queues": task_queues,
        }

    @health_app.get("/ready")
    async def ready() -> dict[str, str]:
        return {"status": "ready"}

    config = uvicorn.Config(health_app, host="0.0.0.0", port=port, log_level="warning")
    server = uvicorn.Server(config)
    logger.info("Starting worker health server", port=port)
    await server.serve()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.debug)

    client = await get_temporal_client()
    route = route_for_system_job(
        namespace=settings.temporal_namespace,
        prefix=settings.temporal_queue_prefix,
    )

    try:
        health_task = asyncio.create_task(run_health_server([route.task_queue]))
        await ensure_expiration_cron(client, route.task_queue)
        await run_jobs_worker(client, route.task_queue)
        await health_task
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
