"""Identity of whoever performs a project operation."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Actor:
    """Acting user as forwarded by the request layer."""

    id: UUID
    name: str | None = None
    role: str | None = None


# Used for scheduled operations such as the expiration sweep
SYSTEM_ACTOR = Actor(id=UUID(int=0), name="System", role="system")
