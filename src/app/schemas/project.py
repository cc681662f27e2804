"""Project schemas for API request/response."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

# Decimal hours are rendered as JSON numbers
Hours = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ProjectCreate(BaseModel):
    """Schema for creating a project. The code is generated server-side."""

    name: str = Field(min_length=1, max_length=200)
    total_hours: Decimal = Field(description="Initial hour budget")
    description: str | None = Field(default=None, max_length=1000)
    priority: str | None = Field(default=None, description="Low, Medium, High or Critical")
    category: str | None = Field(default=None, max_length=100)
    deadline: datetime | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("description", "category")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v

    @field_validator("deadline")
    @classmethod
    def deadline_to_naive_utc(cls, v: datetime | None) -> datetime | None:
        # Columns are TIMESTAMP WITHOUT TIME ZONE holding UTC
        if v is not None and v.tzinfo is not None:
            return v.astimezone(UTC).replace(tzinfo=None)
        return v


class ProjectUpdate(BaseModel):
    """Schema for renaming a project."""

    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or whitespace only")
        return v


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    description: str | None
    status: str
    priority: str
    category: str | None
    total_hours: Hours
    used_hours: Hours
    available_hours: Hours
    deadline: datetime | None
    owner_id: UUID
    owner_name: str | None
    created_by: UUID
    created_by_name: str | None
    completed_at: datetime | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    created_at: datetime
    updated_at: datetime


class ProjectResponse(BaseModel):
    project: ProjectRead


class ProjectHealthRead(BaseModel):
    """Budget utilization and deadline standing."""

    model_config = ConfigDict(from_attributes=True)

    utilization_percent: float
    available_hours: Hours
    deadline_status: str
    days_until_deadline: int | None
    can_accept: bool


class ProjectWithHealthRead(BaseModel):
    project: ProjectRead
    health: ProjectHealthRead


class ProjectMetricsResponse(BaseModel):
    projects: list[ProjectWithHealthRead]


class NearDeadlineResponse(BaseModel):
    projects: list[ProjectRead]
    days_ahead: int


class ExpireOverdueResponse(BaseModel):
    message: str
    expired_projects: list[UUID]
    failed_projects: list[UUID] = Field(default_factory=list)
