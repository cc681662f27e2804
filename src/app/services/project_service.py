"""Project service - creation, lookup, rename, delete and health metrics."""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.actor import Actor
from src.app.core.config import get_settings
from src.app.core.errors import ConflictError, NotFoundError, ValidationError
from src.app.core.logging import get_logger
from src.app.core.validators import format_project_code, parse_project_code, to_hours
from src.app.models import AuditAction, Project, ProjectPriority, ProjectStatus
from src.app.models.base import utc_now
from src.app.repositories import ProjectHourTransactionRepository, ProjectRepository
from src.app.schemas.project import ProjectCreate
from src.app.services.acceptance import evaluate_acceptance
from src.app.services.audit_service import AuditService
from src.app.services.hour_ledger_service import HourLedgerService

logger = get_logger(__name__)

CODE_INSERT_ATTEMPTS = 2
HAS_REQUESTS_MESSAGE = "Cannot delete project with associated requests"


class DeadlineStatus:
    OVERDUE = "Overdue"
    DUE_SOON = "Due Soon"
    ON_TRACK = "On Track"
    NO_DEADLINE = "No Deadline"


@dataclass(frozen=True)
class ProjectHealth:
    utilization_percent: float
    available_hours: Decimal
    deadline_status: str
    days_until_deadline: int | None
    can_accept: bool


class ProjectService:
    """Service for project CRUD around the lifecycle and ledger engines."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        ledger_repo: ProjectHourTransactionRepository,
        session: AsyncSession,
        audit_service: AuditService | None = None,
    ):
        self.project_repo = project_repo
        self.ledger_repo = ledger_repo
        self.session = session
        self.audit_service = audit_service
        self.ledger = HourLedgerService(project_repo, ledger_repo, session)

    async def create_project(self, data: ProjectCreate, actor: Actor) -> Project:
        """Create a project with an auto-generated code and its allocation entry.

        A unique-code race with a concurrent insert is retried once.

        Raises:
            ValidationError: Negative total_hours or unknown priority.
            ConflictError: Code collision persisted after retry.
        """
        total_hours = to_hours(data.total_hours)
        if total_hours < 0:
            raise ValidationError("Total hours must not be negative")
        priority = data.priority or ProjectPriority.MEDIUM.value
        if priority not in {p.value for p in ProjectPriority}:
            raise ValidationError(
                "Invalid priority", {"valid_priorities": [p.value for p in ProjectPriority]}
            )

        initial_status = self._initial_status(actor)

        for attempt in range(1, CODE_INSERT_ATTEMPTS + 1):
            code = await self._next_code()
            project = Project(
                code=code,
                name=data.name,
                description=data.description,
                status=initial_status,
                priority=priority,
                category=data.category,
                total_hours=total_hours,
                used_hours=Decimal("0.00"),
                deadline=data.deadline,
                owner_id=actor.id,
                owner_name=actor.name,
                created_by=actor.id,
                created_by_name=actor.name,
            )
            try:
                self.project_repo.add(project)
                # Project row must exist before the ledger entry that references it
                await self.session.flush()
                self.ledger.record_allocation(project, actor)
                await self.session.commit()
                break
            except IntegrityError as e:
                await self.session.rollback()
                logger.warning(
                    "Project code collision",
                    code=code,
                    attempt=attempt,
                    error=str(e),
                )
                if attempt == CODE_INSERT_ATTEMPTS:
                    raise ConflictError(
                        "Could not allocate a unique project code, please retry"
                    ) from e
            except Exception:
                await self.session.rollback()
                raise

        logger.info(
            "Project created",
            project_id=str(project.id),
            code=project.code,
            status=project.status,
            total_hours=str(total_hours),
        )
        if self.audit_service:
            await self.audit_service.log_action(
                AuditAction.PROJECT_CREATE,
                entity_id=project.id,
                actor_id=actor.id,
                changes={
                    "code": project.code,
                    "name": project.name,
                    "status": project.status,
                    "total_hours": str(total_hours),
                },
            )
        return project

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def list_projects(
        self, status: str | None = None, cursor: str | None = None, limit: int = 50
    ) -> tuple[list[Project], str | None, bool]:
        """List projects with cursor-based pagination."""
        _check_status_filter(status)
        return await self.project_repo.list_all(status=status, cursor=cursor, limit=limit)

    async def update_name(self, project_id: UUID, name: str, actor: Actor) -> Project:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Project name cannot be empty")

        project = await self.get_project(project_id)
        old_name = project.name
        project.name = cleaned
        project.updated_at = utc_now()
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if self.audit_service:
            await self.audit_service.log_action(
                AuditAction.PROJECT_UPDATE,
                entity_id=project.id,
                actor_id=actor.id,
                changes={"name": {"old": old_name, "new": cleaned}},
            )
        return project

    async def delete_project(self, project_id: UUID, actor: Actor) -> None:
        """Delete a project with no associated work requests.

        History and ledger rows are removed by the ON DELETE CASCADE foreign keys.

        Raises:
            NotFoundError: Project does not exist.
            ConflictError: A ledger entry references a work request.
        """
        project = await self.get_project(project_id)
        if await self.ledger_repo.has_request_entries(project_id):
            raise ConflictError(HAS_REQUESTS_MESSAGE)

        code = project.code
        await self.session.delete(project)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(HAS_REQUESTS_MESSAGE) from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Project deleted", project_id=str(project_id), code=code)
        if self.audit_service:
            await self.audit_service.log_action(
                AuditAction.PROJECT_DELETE,
                entity_id=project_id,
                actor_id=actor.id,
                changes={"code": code},
            )

    async def get_health_metrics(
        self, project_id: UUID, now: datetime | None = None
    ) -> ProjectHealth:
        project = await self.get_project(project_id)
        return compute_health(project, now or utc_now(), get_settings().near_deadline_days)

    async def list_health_metrics(
        self, status: str | None = None, now: datetime | None = None
    ) -> list[tuple[Project, ProjectHealth]]:
        """Every project with its health, ordered by deadline then name."""
        _check_status_filter(status)
        projects = await self.project_repo.list_by_deadline(status)
        at = now or utc_now()
        window = get_settings().near_deadline_days
        return [(p, compute_health(p, at, window)) for p in projects]

    def _initial_status(self, actor: Actor) -> str:
        settings = get_settings()
        if actor.role and actor.role.strip().lower() in settings.project_auto_activate_roles:
            return ProjectStatus.ACTIVE.value
        return settings.project_initial_status

    async def _next_code(self) -> str:
        settings = get_settings()
        year = utc_now().year
        sequences = [
            parsed[0]
            for parsed in map(parse_project_code, await self.project_repo.list_codes_for_year(year))
            if parsed is not None and parsed[1] == year
        ]
        next_seq = max(sequences) + 1 if sequences else settings.project_code_start
        return format_project_code(max(next_seq, settings.project_code_start), year)


def _check_status_filter(status: str | None) -> None:
    if status is not None and status not in {s.value for s in ProjectStatus}:
        raise ValidationError(
            "Invalid status", {"valid_statuses": [s.value for s in ProjectStatus]}
        )


def compute_health(project: Project, now: datetime, near_deadline_days: int) -> ProjectHealth:
    """Derive budget utilization and deadline standing for a project."""
    total = to_hours(project.total_hours)
    used = to_hours(project.used_hours)
    utilization = Decimal("0")
    if total > 0:
        utilization = (used / total * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    days_until: int | None = None
    if project.deadline is None:
        deadline_status = DeadlineStatus.NO_DEADLINE
    else:
        days_until = (project.deadline - now).days
        if project.deadline < now:
            deadline_status = DeadlineStatus.OVERDUE
        elif days_until <= near_deadline_days:
            deadline_status = DeadlineStatus.DUE_SOON
        else:
            deadline_status = DeadlineStatus.ON_TRACK

    return ProjectHealth(
        utilization_percent=float(utilization),
        available_hours=total - used,
        deadline_status=deadline_status,
        days_until_deadline=days_until,
        can_accept=evaluate_acceptance(project).can_accept,
    )
