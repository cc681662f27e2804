"""Project lifecycle endpoints - status transitions, history, acceptance."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.app.api.dependencies import (
    AcceptanceGateDep,
    CurrentActor,
    LifecycleServiceDep,
    ProjectServiceDep,
)
from src.app.schemas.lifecycle import (
    AcceptanceResponse,
    StatusHistoryRead,
    StatusHistoryResponse,
    StatusTransitionRequest,
    StatusTransitionResponse,
    TransitionInfo,
    TransitionsResponse,
)
from src.app.schemas.pagination import OffsetPagination
from src.app.schemas.project import ProjectRead
from src.app.services.lifecycle_rules import requires_reason, valid_next_states

router = APIRouter(prefix="/projects", tags=["lifecycle"])


@router.patch(
    "/{project_id}/status",
    response_model=StatusTransitionResponse,
    summary="Transition project status",
    responses={
        400: {"description": "Invalid status or missing reason"},
        404: {"description": "Project not found"},
        409: {"description": "Transition not allowed from the current status"},
    },
)
async def transition_status(
    project_id: UUID,
    request: StatusTransitionRequest,
    service: LifecycleServiceDep,
    actor: CurrentActor,
) -> StatusTransitionResponse:
    result = await service.transition(project_id, request.status, request.reason, actor)
    return StatusTransitionResponse(
        project=ProjectRead.model_validate(result.project),
        transition=TransitionInfo(
            history_id=result.history_entry.id,
            valid_next_states=[s.value for s in result.valid_next_states],
        ),
    )


@router.get(
    "/{project_id}/transitions",
    response_model=TransitionsResponse,
    summary="Valid transitions",
    description="Statuses reachable from the project's current status.",
    responses={404: {"description": "Project not found"}},
)
async def get_transitions(project_id: UUID, service: ProjectServiceDep) -> TransitionsResponse:
    project = await service.get_project(project_id)
    next_states = valid_next_states(project.status)
    return TransitionsResponse(
        current_status=project.status,
        valid_next_states=[s.value for s in next_states],
        requires_reason=[s.value for s in next_states if requires_reason(s)],
    )


@router.get(
    "/{project_id}/history",
    response_model=StatusHistoryResponse,
    summary="Status history",
    description="Status transitions for a project, newest first.",
    responses={404: {"description": "Project not found"}},
)
async def get_status_history(
    project_id: UUID,
    service: LifecycleServiceDep,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> StatusHistoryResponse:
    entries, total = await service.get_history(project_id, limit=limit, offset=offset)
    return StatusHistoryResponse(
        history=[StatusHistoryRead.model_validate(e) for e in entries],
        pagination=OffsetPagination.build(total, limit, offset),
    )


@router.get(
    "/{project_id}/can-accept",
    response_model=AcceptanceResponse,
    summary="Check request acceptance",
    description="Whether the project may accept new work requests.",
    responses={404: {"description": "Project not found"}},
)
async def can_accept_requests(project_id: UUID, gate: AcceptanceGateDep) -> AcceptanceResponse:
    decision = await gate.can_accept_requests(project_id)
    return AcceptanceResponse.model_validate(decision)
