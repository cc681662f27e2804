"""Project lifecycle engine - validated status transitions with history."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.actor import Actor
from src.app.core.config import get_settings
from src.app.core.errors import ConflictError, DomainError, NotFoundError, ValidationError
from src.app.core.logging import get_logger
from src.app.core.notifications import send_project_status_email
from src.app.core.validators import validate_reason
from src.app.models import AuditAction, Project, ProjectStatus, ProjectStatusHistory
from src.app.models.base import utc_now
from src.app.repositories import ProjectRepository, ProjectStatusHistoryRepository
from src.app.services.audit_service import AuditService
from src.app.services.lifecycle_rules import TRANSITION_RULES, parse_status

logger = get_logger(__name__)

StatusNotifier = Callable[..., bool]


@dataclass(frozen=True)
class TransitionResult:
    project: Project
    history_entry: ProjectStatusHistory
    valid_next_states: tuple[ProjectStatus, ...]


class LifecycleService:
    """Moves projects between statuses according to TRANSITION_RULES."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        history_repo: ProjectStatusHistoryRepository,
        session: AsyncSession,
        audit_service: AuditService | None = None,
        notifier: StatusNotifier = send_project_status_email,
    ):
        self.project_repo = project_repo
        self.history_repo = history_repo
        self.session = session
        self.audit_service = audit_service
        self.notifier = notifier

    async def transition(
        self,
        project_id: UUID,
        target_status: str,
        reason: str | None,
        actor: Actor,
        audit_action: AuditAction = AuditAction.PROJECT_STATUS_CHANGE,
    ) -> TransitionResult:
        """Transition a project to ``target_status``.

        The row is locked and the current status re-read before the edge is
        checked, so concurrent transitions on one project serialize.

        Raises:
            ValidationError: Unknown target status or missing/short reason.
            NotFoundError: Project does not exist.
            ConflictError: No edge from the current status to the target.
            ConcurrencyError: Row lock timed out.
        """
        settings = get_settings()
        target = parse_status(target_status)
        if target is None:
            raise ValidationError(
                "Invalid status",
                {"valid_statuses": [s.value for s in ProjectStatus]},
            )
        rule = TRANSITION_RULES[target]

        try:
            project = await self.project_repo.get_for_update(
                project_id, lock_timeout_ms=settings.project_lock_timeout_ms
            )
            if project is None:
                raise NotFoundError("Project", project_id)

            current = parse_status(project.status)
            allowed = TRANSITION_RULES[current].next_states if current else ()
            if target not in allowed:
                raise ConflictError(
                    f"Cannot transition from {project.status} to {target.value}",
                    {
                        "current_status": project.status,
                        "valid_next_states": [s.value for s in allowed],
                    },
                )

            cleaned_reason = (reason or "").strip() or None
            if rule.requires_reason:
                cleaned_reason = validate_reason(reason, min_length=settings.reason_min_length)

            now = utc_now()
            from_status = project.status
            project.status = target.value
            project.updated_at = now
            if rule.timestamp_field:
                setattr(project, rule.timestamp_field, now)
            if rule.reason_field:
                setattr(project, rule.reason_field, cleaned_reason)

            entry = ProjectStatusHistory(
                project_id=project.id,
                from_status=from_status,
                to_status=target.value,
                reason=cleaned_reason,
                changed_by=actor.id,
                changed_by_name=actor.name,
                changed_at=now,
            )
            self.history_repo.add(entry)
            await self.session.commit()

        except DomainError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Project status transition failed",
                project_id=str(project_id),
                to_status=target.value,
                error=str(e),
            )
            raise

        logger.info(
            "Project status transitioned",
            project_id=str(project.id),
            from_status=from_status,
            to_status=target.value,
        )

        if self.audit_service:
            await self.audit_service.log_action(
                audit_action,
                entity_id=project.id,
                actor_id=actor.id,
                changes={
                    "status": {"old": from_status, "new": target.value},
                    "reason": cleaned_reason,
                },
            )

        if rule.notify_on_entry:
            await self._notify(project, from_status, cleaned_reason, actor)

        return TransitionResult(
            project=project,
            history_entry=entry,
            valid_next_states=rule.next_states,
        )

    async def get_history(
        self, project_id: UUID, limit: int = 50, offset: int = 0
    ) -> tuple[list[ProjectStatusHistory], int]:
        """Status history page, newest first, with total count."""
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return await self.history_repo.list_for_project(project_id, limit=limit, offset=offset)

    async def _notify(
        self, project: Project, from_status: str, reason: str | None, actor: Actor
    ) -> None:
        try:
            await asyncio.to_thread(
                self.notifier,
                project_code=project.code,
                project_name=project.name,
                from_status=from_status,
                to_status=project.status,
                reason=reason,
                changed_by_name=actor.name,
            )
        except Exception as e:
            # Transition is committed; a failed notification is only logged
            logger.warning(
                "Project status notification failed",
                project_id=str(project.id),
                to_status=project.status,
                error=str(e),
            )
