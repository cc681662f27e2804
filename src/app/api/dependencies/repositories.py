"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.app.api.dependencies.db import DBSession
from src.app.repositories import (
    ProjectHourTransactionRepository,
    ProjectRepository,
    ProjectStatusHistoryRepository,
)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_status_history_repository(session: DBSession) -> ProjectStatusHistoryRepository:
    return ProjectStatusHistoryRepository(session)


def get_hour_transaction_repository(session: DBSession) -> ProjectHourTransactionRepository:
    return ProjectHourTransactionRepository(session)


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
StatusHistoryRepo = Annotated[
    ProjectStatusHistoryRepository, Depends(get_status_history_repository)
]
HourTransactionRepo = Annotated[
    ProjectHourTransactionRepository, Depends(get_hour_transaction_repository)
]
