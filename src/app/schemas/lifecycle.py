"""Lifecycle schemas - status transitions, history and acceptance."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.app.schemas.pagination import OffsetPagination
from src.app.schemas.project import Hours, ProjectRead


class StatusTransitionRequest(BaseModel):
    # Validated against the transition table by the service, not here
    status: str = Field(description="Target status, e.g. 'Active' or 'On Hold'")
    reason: str | None = Field(default=None, max_length=1000)


class TransitionInfo(BaseModel):
    history_id: UUID
    valid_next_states: list[str]


class StatusTransitionResponse(BaseModel):
    project: ProjectRead
    transition: TransitionInfo


class TransitionsResponse(BaseModel):
    """Statuses reachable from the current one."""

    current_status: str
    valid_next_states: list[str]
    requires_reason: list[str] = Field(
        description="Subset of valid_next_states that need a reason"
    )


class StatusHistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    from_status: str
    to_status: str
    reason: str | None
    changed_by: UUID
    changed_by_name: str | None
    changed_at: datetime


class StatusHistoryResponse(BaseModel):
    history: list[StatusHistoryRead]
    pagination: OffsetPagination


class AcceptanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    can_accept: bool
    reason: str | None = None
    warning: str | None = None
    available_hours: Hours
