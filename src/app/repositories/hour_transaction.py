"""Repository for the project hour ledger (append-only)."""

from uuid import UUID

from sqlmodel import col, select

from src.app.models import ProjectHourTransaction
from src.app.repositories.base import BaseRepository


class ProjectHourTransactionRepository(BaseRepository[ProjectHourTransaction]):
    """Read and append ledger entries. No update or delete."""

    model = ProjectHourTransaction

    async def list_for_project(
        self, project_id: UUID, limit: int = 50, offset: int = 0
    ) -> tuple[list[ProjectHourTransaction], int]:
        """Return one page of ledger entries, newest first, plus the total count."""
        total = await self.count(ProjectHourTransaction.project_id == project_id)
        result = await self.session.execute(
            select(ProjectHourTransaction)
            .where(ProjectHourTransaction.project_id == project_id)
            .order_by(
                col(ProjectHourTransaction.occurred_at).desc(),
                col(ProjectHourTransaction.id).desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def list_chain(self, project_id: UUID) -> list[ProjectHourTransaction]:
        """Full ledger for a project in application order (oldest first)."""
        result = await self.session.execute(
            select(ProjectHourTransaction)
            .where(ProjectHourTransaction.project_id == project_id)
            .order_by(col(ProjectHourTransaction.occurred_at), col(ProjectHourTransaction.id))
        )
        return list(result.scalars().all())

    async def has_request_entries(self, project_id: UUID) -> bool:
        """True if any ledger entry ties this project to a work request."""
        count = await self.count(
            ProjectHourTransaction.project_id == project_id,
            col(ProjectHourTransaction.request_id).is_not(None),
        )
        return count > 0
