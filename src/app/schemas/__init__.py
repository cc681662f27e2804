from src.app.schemas.hours import (
    AdjustHoursRequest,
    AdjustHoursResponse,
    ExtendHoursRequest,
    ExtendHoursResponse,
    HourTransactionRead,
    HourTransactionsResponse,
    UpdateHoursRequest,
)
from src.app.schemas.lifecycle import (
    AcceptanceResponse,
    StatusHistoryRead,
    StatusHistoryResponse,
    StatusTransitionRequest,
    StatusTransitionResponse,
    TransitionsResponse,
)
from src.app.schemas.pagination import OffsetPagination, PaginatedResponse
from src.app.schemas.project import (
    ExpireOverdueResponse,
    NearDeadlineResponse,
    ProjectCreate,
    ProjectHealthRead,
    ProjectMetricsResponse,
    ProjectRead,
    ProjectResponse,
    ProjectUpdate,
    ProjectWithHealthRead,
)

__all__ = [
    # Hours
    "AdjustHoursRequest",
    "AdjustHoursResponse",
    "ExtendHoursRequest",
    "ExtendHoursResponse",
    "HourTransactionRead",
    "HourTransactionsResponse",
    "UpdateHoursRequest",
    # Lifecycle
    "AcceptanceResponse",
    "StatusHistoryRead",
    "StatusHistoryResponse",
    "StatusTransitionRequest",
    "StatusTransitionResponse",
    "TransitionsResponse",
    # Pagination
    "OffsetPagination",
    "PaginatedResponse",
    # Project
    "ExpireOverdueResponse",
    "NearDeadlineResponse",
    "ProjectCreate",
    "ProjectHealthRead",
    "ProjectMetricsResponse",
    "ProjectRead",
    "ProjectResponse",
    "ProjectUpdate",
    "ProjectWithHealthRead",
]
