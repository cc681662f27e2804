"""Hour budget schemas - extension, adjustment, consumption and ledger reads."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.app.schemas.pagination import OffsetPagination
from src.app.schemas.project import Hours, ProjectRead


class ExtendHoursRequest(BaseModel):
    additional_hours: Decimal = Field(description="Hours added to the budget ceiling")
    reason: str | None = Field(default=None, max_length=1000)


class ExtensionInfo(BaseModel):
    additional_hours: Hours
    new_total: Hours
    available_hours: Hours


class ExtendHoursResponse(BaseModel):
    project: ProjectRead
    extension: ExtensionInfo


class AdjustHoursRequest(BaseModel):
    adjustment: Decimal = Field(
        description="Signed change to used hours; positive consumes, negative releases"
    )
    reason: str | None = Field(default=None, max_length=1000)


class AdjustmentInfo(BaseModel):
    hours: Hours
    balance_before: Hours
    balance_after: Hours
    available_hours: Hours


class AdjustHoursResponse(BaseModel):
    project: ProjectRead
    adjustment: AdjustmentInfo


class UpdateHoursRequest(BaseModel):
    """Consume (>= 0) or release (< 0) hours for a work request."""

    hours_to_add: Decimal
    request_id: UUID | None = None


class HourTransactionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    kind: str
    delta: Hours
    balance_before: Hours
    balance_after: Hours
    total_hours_after: Hours
    reason: str | None
    request_id: UUID | None
    performed_by: UUID
    performed_by_name: str | None
    occurred_at: datetime


class HourTransactionsResponse(BaseModel):
    transactions: list[HourTransactionRead]
    pagination: OffsetPagination
