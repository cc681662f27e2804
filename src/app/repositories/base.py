"""Shared data access for SQLModel tables."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.app.schemas.pagination import decode_cursor, encode_cursor


class BaseRepository[ModelType: SQLModel]:
    """Generic queries shared by the project repositories.

    Never commits; the calling service owns the transaction.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def count(self, *criteria: Any) -> int:
        """Count rows matching the given WHERE criteria."""
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Keyset page over ``cursor_field`` descending.

        Returns ``(items, next_cursor, has_more)``. An unreadable cursor
        restarts from the first page.
        """
        after = _cursor_value(cursor) if cursor else None
        if after is not None:
            query = query.where(cursor_field < after)

        result = await self.session.execute(query.order_by(cursor_field.desc()).limit(limit + 1))
        rows = list(result.scalars().all())
        items, has_more = rows[:limit], len(rows) > limit

        next_cursor = None
        if has_more and items:
            last = getattr(items[-1], cursor_field.key)
            if last is not None:
                raw = last.isoformat() if isinstance(last, datetime) else str(last)
                next_cursor = encode_cursor(raw)

        return items, next_cursor, has_more


def _cursor_value(cursor: str) -> datetime | UUID | str | None:
    try:
        raw = decode_cursor(cursor)
    except (ValueError, TypeError):
        return None
    for parse in (datetime.fromisoformat, UUID):
        try:
            return parse(raw)
        except ValueError:
            continue
    return raw
