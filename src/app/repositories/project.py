"""Repository for the Project aggregate."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlmodel import col, select

from src.app.core.errors import ConcurrencyError
from src.app.core.logging import get_logger
from src.app.models import Project, ProjectStatus
from src.app.repositories.base import BaseRepository

logger = get_logger(__name__)

# PostgreSQL SQLSTATE for lock_timeout expiry
LOCK_NOT_AVAILABLE = "55P03"


def _is_lock_timeout(exc: OperationalError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return sqlstate == LOCK_NOT_AVAILABLE


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity."""

    model = Project

    async def get_for_update(
        self, project_id: UUID, lock_timeout_ms: int | None = None
    ) -> Project | None:
        """Lock the project row and return its committed state.

        Issues SELECT ... FOR UPDATE. populate_existing forces a refresh of
        any instance already in the identity map so callers never validate
        against a stale balance.

        Raises:
            ConcurrencyError: If the lock is not granted within lock_timeout_ms.
        """
        if lock_timeout_ms and self.session.get_bind().dialect.name == "postgresql":
            await self.session.execute(text(f"SET LOCAL lock_timeout = {int(lock_timeout_ms)}"))

        query = (
            select(Project)
            .where(Project.id == project_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(query)
        except OperationalError as e:
            if _is_lock_timeout(e):
                logger.warning("Project row lock timed out", project_id=str(project_id))
                raise ConcurrencyError() from e
            raise
        return result.scalar_one_or_none()

    async def list_all(
        self,
        status: str | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Project], str | None, bool]:
        """List projects, newest first, optionally filtered by status."""
        query = select(Project)
        if status:
            query = query.where(Project.status == status)
        return await self.paginate(query, cursor, limit, Project.created_at)

    async def list_by_deadline(self, status: str | None = None) -> list[Project]:
        """All projects, earliest deadline first, undated last, then by name."""
        query = select(Project)
        if status:
            query = query.where(Project.status == status)
        result = await self.session.execute(
            query.order_by(col(Project.deadline).asc().nulls_last(), col(Project.name).asc())
        )
        return list(result.scalars().all())

    async def list_codes_for_year(self, year: int) -> list[str]:
        """Return all project codes ending in -<year>."""
        result = await self.session.execute(
            select(Project.code).where(col(Project.code).like(f"%-{year}"))
        )
        return list(result.scalars().all())

    async def list_overdue_active_ids(self, now: datetime) -> list[UUID]:
        """IDs of Active projects whose deadline has passed."""
        result = await self.session.execute(
            select(Project.id)
            .where(
                Project.status == ProjectStatus.ACTIVE.value,
                col(Project.deadline).is_not(None),
                col(Project.deadline) < now,
            )
            .order_by(col(Project.deadline))
        )
        return list(result.scalars().all())

    async def list_active_due_between(self, start: datetime, end: datetime) -> list[Project]:
        """Active projects with a deadline inside [start, end], soonest first."""
        result = await self.session.execute(
            select(Project)
            .where(
                Project.status == ProjectStatus.ACTIVE.value,
                col(Project.deadline) >= start,
                col(Project.deadline) <= end,
            )
            .order_by(col(Project.deadline))
        )
        return list(result.scalars().all())
