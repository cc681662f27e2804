"""Acceptance gate - may a project take on new work requests?"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from src.app.core.errors import NotFoundError
from src.app.core.validators import to_hours
from src.app.models import Project
from src.app.repositories import ProjectRepository
from src.app.services.lifecycle_rules import TRANSITION_RULES, parse_status

NO_HOURS_WARNING = "No hours available in project bucket"
UNKNOWN_STATUS_MESSAGE = "Project status is not recognized"


@dataclass(frozen=True)
class AcceptanceDecision:
    can_accept: bool
    available_hours: Decimal
    reason: str | None = None
    warning: str | None = None


def evaluate_acceptance(project: Project) -> AcceptanceDecision:
    """Derive acceptance from status and hour balance. No I/O.

    Status alone decides; an exhausted budget only adds a warning.
    """
    available = to_hours(project.available_hours)
    status = parse_status(project.status)
    if status is None:
        return AcceptanceDecision(
            can_accept=False, available_hours=available, reason=UNKNOWN_STATUS_MESSAGE
        )

    rule = TRANSITION_RULES[status]
    if not rule.accepts_requests:
        return AcceptanceDecision(
            can_accept=False, available_hours=available, reason=rule.blocked_message
        )

    warning = NO_HOURS_WARNING if available <= 0 else None
    return AcceptanceDecision(can_accept=True, available_hours=available, warning=warning)


class AcceptanceGate:
    """Read-only lookup wrapper around evaluate_acceptance."""

    def __init__(self, project_repo: ProjectRepository):
        self.project_repo = project_repo

    async def can_accept_requests(self, project_id: UUID) -> AcceptanceDecision:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return evaluate_acceptance(project)
