"""Integration test fixtures for database and HTTP client operations.

Uses an in-memory SQLite database shared through a StaticPool, so every
session in a test (business, audit and sweep) sees the same data.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from contextlib import AbstractAsyncContextManager

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.app.api.dependencies import get_audit_service, get_db_session, get_expiration_service
from src.app.core.db import SessionFactory, get_session
from src.app.main import create_app
from src.app.models import Project
from src.app.repositories import (
    AuditLogRepository,
    ProjectHourTransactionRepository,
    ProjectRepository,
    ProjectStatusHistoryRepository,
)
from src.app.services import (
    AuditService,
    ExpirationService,
    HourLedgerService,
    LifecycleService,
    ProjectService,
)
from tests.factories import ProjectFactory
from tests.utils import create_test_engine


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    test_engine = await create_test_engine()
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> SessionFactory:
    """Opens sessions on the test engine, same shape as core.db.get_session."""

    def _factory() -> AbstractAsyncContextManager[AsyncSession]:
        return get_session(engine)

    return _factory


@pytest.fixture
async def db_session(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit. Tests that seed data must call
    `await session.commit()` (or use the `persist` fixture).
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
async def audit_session(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def audit_service(audit_session: AsyncSession) -> AuditService:
    return AuditService(AuditLogRepository(audit_session), audit_session)


@pytest.fixture
def persist(db_session: AsyncSession):  # type: ignore[no-untyped-def]
    """Insert and commit entities, returning the first one."""

    async def _persist(*entities):  # type: ignore[no-untyped-def]
        for entity in entities:
            db_session.add(entity)
            # Projects first so ledger/history rows satisfy their foreign keys
            await db_session.flush()
        await db_session.commit()
        return entities[0]

    return _persist


@pytest.fixture
async def active_project(persist) -> Project:  # type: ignore[no-untyped-def]
    return await persist(ProjectFactory.build())


@pytest.fixture
def ledger_service(db_session: AsyncSession, audit_service: AuditService) -> HourLedgerService:
    return HourLedgerService(
        ProjectRepository(db_session),
        ProjectHourTransactionRepository(db_session),
        db_session,
        audit_service,
    )


@pytest.fixture
def lifecycle_service(db_session: AsyncSession, audit_service: AuditService) -> LifecycleService:
    return LifecycleService(
        ProjectRepository(db_session),
        ProjectStatusHistoryRepository(db_session),
        db_session,
        audit_service,
        notifier=lambda **kwargs: True,
    )


@pytest.fixture
def project_service(db_session: AsyncSession, audit_service: AuditService) -> ProjectService:
    return ProjectService(
        ProjectRepository(db_session),
        ProjectHourTransactionRepository(db_session),
        db_session,
        audit_service,
    )


@pytest.fixture
def expiration_service(session_factory: SessionFactory) -> ExpirationService:
    return ExpirationService(session_factory=session_factory)


@pytest.fixture
def app(session_factory: SessionFactory) -> FastAPI:
    """Application wired to the test database."""
    application = create_app()

    async def _db_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    async def _audit_service() -> AsyncGenerator[AuditService]:
        async with session_factory() as session:
            yield AuditService(AuditLogRepository(session), session)

    application.dependency_overrides[get_db_session] = _db_session
    application.dependency_overrides[get_audit_service] = _audit_service
    application.dependency_overrides[get_expiration_service] = lambda: ExpirationService(
        session_factory=session_factory
    )
    return application


@pytest.fixture
async def client(app: FastAPI, actor_headers: dict[str, str]) -> AsyncGenerator[AsyncClient]:
    """HTTP client that sends the actor headers on every request."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=actor_headers,
    ) as client:
        yield client
