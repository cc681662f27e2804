"""Repository for project status history (append-only)."""

from uuid import UUID

from sqlmodel import col, select

from src.app.models import ProjectStatusHistory
from src.app.repositories.base import BaseRepository


class ProjectStatusHistoryRepository(BaseRepository[ProjectStatusHistory]):
    """Read and append status history entries. No update or delete."""

    model = ProjectStatusHistory

    async def list_for_project(
        self, project_id: UUID, limit: int = 50, offset: int = 0
    ) -> tuple[list[ProjectStatusHistory], int]:
        """Return one page of history, newest first, plus the total count."""
        total = await self.count(ProjectStatusHistory.project_id == project_id)
        result = await self.session.execute(
            select(ProjectStatusHistory)
            .where(ProjectStatusHistory.project_id == project_id)
            .order_by(
                col(ProjectStatusHistory.changed_at).desc(),
                col(ProjectStatusHistory.id).desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total
