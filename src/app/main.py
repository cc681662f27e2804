import secrets
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from src.app.api.middlewares import setup_middlewares
from src.app.api.v1.router import api_router
from src.app.core.config import Settings, get_settings
from src.app.core.db import dispose_engine, get_session
from src.app.core.exceptions import setup_exception_handlers
from src.app.core.logging import get_logger, setup_logging
from src.app.core.shutdown import request_tracker
from src.app.temporal.client import close_temporal_client, get_temporal_client

logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "projects", "description": "Project records, deadlines and health"},
    {"name": "lifecycle", "description": "Status transitions, history and request acceptance"},
    {"name": "hours", "description": "Hour budget extension, adjustment and consumption"},
]


@dataclass
class HealthReport:
    """Last dependency probe, reused for ``ttl`` seconds."""

    ttl: float = 10.0
    checked_at: float = 0.0
    body: dict[str, Any] = field(default_factory=dict)

    def fresh(self, now: float) -> bool:
        return bool(self.body) and (now - self.checked_at) < self.ttl

    def response(self, cached: bool) -> JSONResponse:
        content = {**self.body, "cached": cached}
        code = 503 if content["status"] == "unhealthy" else 200
        return JSONResponse(content=content, status_code=code)


_health = HealthReport()


async def _probe_database() -> str:
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        return f"unhealthy: {e}"
    return "healthy"


async def _probe_temporal() -> str:
    try:
        await get_temporal_client()
    except Exception as e:
        return f"unhealthy: {e}"
    return "healthy"


async def check_health() -> JSONResponse:
    """Database down is unhealthy; Temporal down only degrades (it runs the sweep)."""
    if request_tracker.is_shutting_down:
        return JSONResponse(
            content={"status": "draining", "in_flight_requests": request_tracker.in_flight_count},
            status_code=503,
        )

    now = time.time()
    if _health.fresh(now):
        return _health.response(cached=True)

    database = await _probe_database()
    temporal = await _probe_temporal()
    if database != "healthy":
        overall = "unhealthy"
    elif temporal != "healthy":
        overall = "degraded"
    else:
        overall = "healthy"

    _health.body = {
        "status": overall,
        "database": database,
        "temporal": temporal,
        "timestamp": now,
    }
    _health.checked_at = now
    return _health.response(cached=False)


def setup_metrics(app: FastAPI, settings: Settings) -> None:
    """Expose Prometheus metrics, behind X-Metrics-Key when one is configured."""
    instrumentator = Instrumentator().instrument(app)
    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    expected = settings.metrics_api_key
    key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def require_metrics_key(api_key: str | None = Depends(key_header)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(require_metrics_key)])


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Project service starting", app_name=settings.app_name, env=settings.app_env)

    yield

    await request_tracker.start_shutdown()
    await request_tracker.wait_for_drain(timeout=settings.shutdown_grace_period)

    await close_temporal_client()
    await dispose_engine()
    logger.info("Project service stopped")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Project lifecycle and hour budget API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)
    setup_metrics(app, settings)
    app.add_api_route("/health", check_health, methods=["GET"], include_in_schema=False)

    return app


app = create_app()
