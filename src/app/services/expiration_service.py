"""Deadline sweep - expires active projects whose deadline has passed."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from src.app.core.actor import SYSTEM_ACTOR
from src.app.core.db import SessionFactory
from src.app.core.errors import ConflictError, ValidationError
from src.app.core.logging import get_logger
from src.app.models import AuditAction, Project, ProjectStatus
from src.app.models.base import utc_now
from src.app.repositories import (
    AuditLogRepository,
    ProjectRepository,
    ProjectStatusHistoryRepository,
)
from src.app.services.audit_service import AuditService
from src.app.services.lifecycle_service import LifecycleService

logger = get_logger(__name__)

EXPIRATION_REASON = "Deadline passed"
MIN_DAYS_AHEAD = 1
MAX_DAYS_AHEAD = 365


@dataclass
class SweepResult:
    expired_project_ids: list[UUID] = field(default_factory=list)
    failed_project_ids: list[UUID] = field(default_factory=list)

    @property
    def expired_count(self) -> int:
        return len(self.expired_project_ids)

    def to_dict(self) -> dict[str, object]:
        return {
            "expired_count": self.expired_count,
            "expired_project_ids": [str(pid) for pid in self.expired_project_ids],
            "failed_project_ids": [str(pid) for pid in self.failed_project_ids],
        }


class ExpirationService:
    """Batch expiration of overdue projects.

    Each project is expired in its own session and transaction, so one
    failure never rolls back or blocks the rest of the batch.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_factory = session_factory
        self.clock = clock

    async def check_and_expire_projects(self) -> SweepResult:
        """Transition every overdue Active project to Expired."""
        now = self.clock()
        async with self.session_factory() as session:
            overdue_ids = await ProjectRepository(session).list_overdue_active_ids(now)

        result = SweepResult()
        for project_id in overdue_ids:
            try:
                await self._expire_one(project_id)
            except ConflictError as e:
                # Moved out of Active since the scan
                logger.info(
                    "Project no longer eligible for expiration",
                    project_id=str(project_id),
                    error=e.message,
                )
            except Exception as e:
                logger.error(
                    "Failed to expire project",
                    project_id=str(project_id),
                    error=str(e),
                )
                result.failed_project_ids.append(project_id)
            else:
                result.expired_project_ids.append(project_id)

        logger.info(
            "Expiration sweep complete",
            candidates=len(overdue_ids),
            expired=result.expired_count,
            failed=len(result.failed_project_ids),
        )
        return result

    async def get_projects_near_deadline(self, days_ahead: int) -> list[Project]:
        """Active projects due within ``days_ahead`` days, soonest first."""
        if not MIN_DAYS_AHEAD <= days_ahead <= MAX_DAYS_AHEAD:
            raise ValidationError(
                f"days_ahead must be between {MIN_DAYS_AHEAD} and {MAX_DAYS_AHEAD}",
                {"days_ahead": days_ahead},
            )
        now = self.clock()
        async with self.session_factory() as session:
            return await ProjectRepository(session).list_active_due_between(
                now, now + timedelta(days=days_ahead)
            )

    async def _expire_one(self, project_id: UUID) -> None:
        async with self.session_factory() as session, self.session_factory() as audit_session:
            lifecycle = LifecycleService(
                project_repo=ProjectRepository(session),
                history_repo=ProjectStatusHistoryRepository(session),
                session=session,
                audit_service=AuditService(AuditLogRepository(audit_session), audit_session),
            )
            await lifecycle.transition(
                project_id,
                ProjectStatus.EXPIRED.value,
                reason=EXPIRATION_REASON,
                actor=SYSTEM_ACTOR,
                audit_action=AuditAction.PROJECT_EXPIRE,
            )
        logger.info("Project expired", project_id=str(project_id))
