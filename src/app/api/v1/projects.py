"""Project endpoints - CRUD, deadline sweep and health metrics."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.app.api.dependencies import (
    CurrentActor,
    ExpirationServiceDep,
    HourLedgerServiceDep,
    ProjectServiceDep,
)
from src.app.core.config import get_settings
from src.app.core.logging import get_logger
from src.app.schemas.hours import HourTransactionRead, HourTransactionsResponse
from src.app.schemas.pagination import OffsetPagination, PaginatedResponse
from src.app.schemas.project import (
    ExpireOverdueResponse,
    NearDeadlineResponse,
    ProjectCreate,
    ProjectHealthRead,
    ProjectMetricsResponse,
    ProjectRead,
    ProjectUpdate,
    ProjectWithHealthRead,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=PaginatedResponse[ProjectRead],
    summary="List projects",
    description="List projects, newest first, with cursor-based pagination.",
    responses={
        200: {"description": "Paginated list of projects"},
        400: {"description": "Unknown status filter"},
    },
)
async def list_projects(
    service: ProjectServiceDep,
    status_filter: Annotated[
        str | None, Query(alias="status", description="Only projects in this status")
    ] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ProjectRead]:
    projects, next_cursor, has_more = await service.list_projects(
        status=status_filter, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[ProjectRead.model_validate(p) for p in projects],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description=(
        "Create a project with an auto-generated code. Managers and admins create "
        "projects directly in Active; everyone else starts in the configured status."
    ),
    responses={
        201: {"description": "Project created"},
        400: {"description": "Invalid input"},
        409: {"description": "Project code could not be allocated"},
    },
)
async def create_project(
    request: ProjectCreate,
    service: ProjectServiceDep,
    actor: CurrentActor,
) -> ProjectRead:
    project = await service.create_project(request, actor)
    return ProjectRead.model_validate(project)


@router.get(
    "/near-deadline",
    response_model=NearDeadlineResponse,
    summary="Projects near deadline",
    description="Active projects whose deadline falls within the next days_ahead days.",
    responses={400: {"description": "days_ahead out of range"}},
)
async def projects_near_deadline(
    service: ExpirationServiceDep,
    days_ahead: Annotated[int | None, Query(description="Window in days (1-365)")] = None,
) -> NearDeadlineResponse:
    days = days_ahead if days_ahead is not None else get_settings().near_deadline_days
    projects = await service.get_projects_near_deadline(days)
    return NearDeadlineResponse(
        projects=[ProjectRead.model_validate(p) for p in projects],
        days_ahead=days,
    )


@router.get(
    "/metrics",
    response_model=ProjectMetricsResponse,
    summary="Projects with health metrics",
    description="Every project with its health metrics, earliest deadline first.",
    responses={400: {"description": "Unknown status filter"}},
)
async def projects_with_metrics(
    service: ProjectServiceDep,
    status_filter: Annotated[
        str | None, Query(alias="status", description="Only projects in this status")
    ] = None,
) -> ProjectMetricsResponse:
    rows = await service.list_health_metrics(status=status_filter)
    return ProjectMetricsResponse(
        projects=[
            ProjectWithHealthRead(
                project=ProjectRead.model_validate(project),
                health=ProjectHealthRead.model_validate(health),
            )
            for project, health in rows
        ]
    )


@router.post(
    "/expire-overdue",
    response_model=ExpireOverdueResponse,
    summary="Expire overdue projects",
    description=(
        "Transition every Active project past its deadline to Expired. "
        "Per-project failures are reported, not raised."
    ),
)
async def expire_overdue_projects(
    service: ExpirationServiceDep,
    actor: CurrentActor,
) -> ExpireOverdueResponse:
    logger.info("Expiration sweep requested", triggered_by=str(actor.id))
    result = await service.check_and_expire_projects()
    return ExpireOverdueResponse(
        message=f"{result.expired_count} project(s) expired",
        expired_projects=result.expired_project_ids,
        failed_projects=result.failed_project_ids,
    )


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(project_id: UUID, service: ProjectServiceDep) -> ProjectRead:
    project = await service.get_project(project_id)
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Rename project",
    responses={404: {"description": "Project not found"}},
)
async def update_project(
    project_id: UUID,
    request: ProjectUpdate,
    service: ProjectServiceDep,
    actor: CurrentActor,
) -> ProjectRead:
    project = await service.update_name(project_id, request.name, actor)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Delete a project that has no associated work requests.",
    responses={
        204: {"description": "Project deleted"},
        404: {"description": "Project not found"},
        409: {"description": "Project has associated requests"},
    },
)
async def delete_project(
    project_id: UUID,
    service: ProjectServiceDep,
    actor: CurrentActor,
) -> None:
    await service.delete_project(project_id, actor)


@router.get(
    "/{project_id}/hour-transactions",
    response_model=HourTransactionsResponse,
    summary="Hour ledger",
    description="Hour ledger entries for a project, newest first.",
    responses={404: {"description": "Project not found"}},
)
async def list_hour_transactions(
    project_id: UUID,
    service: HourLedgerServiceDep,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> HourTransactionsResponse:
    entries, total = await service.get_transactions(project_id, limit=limit, offset=offset)
    return HourTransactionsResponse(
        transactions=[HourTransactionRead.model_validate(e) for e in entries],
        pagination=OffsetPagination.build(total, limit, offset),
    )


@router.get(
    "/{project_id}/health",
    response_model=ProjectHealthRead,
    summary="Project health",
    description="Budget utilization, deadline standing and acceptance for a project.",
    responses={404: {"description": "Project not found"}},
)
async def project_health(project_id: UUID, service: ProjectServiceDep) -> ProjectHealthRead:
    health = await service.get_health_metrics(project_id)
    return ProjectHealthRead.model_validate(health)
