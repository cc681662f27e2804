"""Project hour budget endpoints - extend, adjust, consume and release."""

from uuid import UUID

from fastapi import APIRouter

from src.app.api.dependencies import CurrentActor, HourLedgerServiceDep
from src.app.core.errors import ConflictError, ValidationError
from src.app.schemas.hours import (
    AdjustHoursRequest,
    AdjustHoursResponse,
    AdjustmentInfo,
    ExtendHoursRequest,
    ExtendHoursResponse,
    ExtensionInfo,
    UpdateHoursRequest,
)
from src.app.schemas.project import ProjectRead, ProjectResponse

router = APIRouter(prefix="/projects", tags=["hours"])


@router.post(
    "/{project_id}/extend",
    response_model=ExtendHoursResponse,
    summary="Extend hour budget",
    responses={
        400: {"description": "Non-positive hours or reason too short"},
        404: {"description": "Project not found"},
    },
)
async def extend_hours(
    project_id: UUID,
    request: ExtendHoursRequest,
    service: HourLedgerServiceDep,
    actor: CurrentActor,
) -> ExtendHoursResponse:
    result = await service.extend(project_id, request.additional_hours, request.reason, actor)
    return ExtendHoursResponse(
        project=ProjectRead.model_validate(result.project),
        extension=ExtensionInfo(
            additional_hours=result.additional_hours,
            new_total=result.new_total,
            available_hours=result.available_hours,
        ),
    )


@router.post(
    "/{project_id}/adjust",
    response_model=AdjustHoursResponse,
    summary="Manually adjust used hours",
    responses={
        400: {"description": "Zero adjustment or reason too short"},
        404: {"description": "Project not found"},
        409: {"description": "Adjustment would leave used hours outside the budget"},
    },
)
async def adjust_hours(
    project_id: UUID,
    request: AdjustHoursRequest,
    service: HourLedgerServiceDep,
    actor: CurrentActor,
) -> AdjustHoursResponse:
    result = await service.adjust(project_id, request.adjustment, request.reason, actor)
    return AdjustHoursResponse(
        project=ProjectRead.model_validate(result.project),
        adjustment=AdjustmentInfo(
            hours=result.hours,
            balance_before=result.balance_before,
            balance_after=result.balance_after,
            available_hours=result.available_hours,
        ),
    )


@router.patch(
    "/{project_id}/hours",
    response_model=ProjectResponse,
    summary="Consume or release hours",
    description=(
        "Positive hours_to_add consumes hours for a request; negative releases them, "
        "never below zero used hours."
    ),
    responses={
        400: {"description": "Non-numeric input or insufficient hours"},
        404: {"description": "Project not found"},
    },
)
async def update_hours(
    project_id: UUID,
    request: UpdateHoursRequest,
    service: HourLedgerServiceDep,
    actor: CurrentActor,
) -> ProjectResponse:
    if request.hours_to_add < 0:
        project = await service.release(
            project_id, -request.hours_to_add, actor, request_id=request.request_id
        )
    else:
        try:
            project = await service.consume(
                project_id, request.hours_to_add, actor, request_id=request.request_id
            )
        except ConflictError as e:
            # This route reports an exhausted budget as a bad request
            raise ValidationError(e.message, e.details) from e
    return ProjectResponse(project=ProjectRead.model_validate(project))
