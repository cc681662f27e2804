"""Acting user dependency.

Authentication happens upstream; the caller forwards the acting user in
X-Actor-Id, X-Actor-Name and X-Actor-Role headers.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.app.core.actor import Actor
from src.app.core.logging import bind_actor_context


async def get_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_name: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Parse actor headers and bind the actor to the logging context."""
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id header is required",
        )
    try:
        actor_id = UUID(x_actor_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id must be a UUID",
        ) from e

    name = x_actor_name.strip() if x_actor_name else None
    role = x_actor_role.strip().lower() if x_actor_role else None
    bind_actor_context(actor_id, role)
    return Actor(id=actor_id, name=name or None, role=role or None)


CurrentActor = Annotated[Actor, Depends(get_actor)]
