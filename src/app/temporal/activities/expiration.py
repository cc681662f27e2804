"""Project expiration activity."""

from temporalio import activity

from src.app.core.db import get_session
from src.app.services.expiration_service import ExpirationService


@activity.defn
async def expire_overdue_projects() -> dict[str, object]:
    """Expire every Active project whose deadline has passed.

    Idempotent: a project that was already expired is no longer Active and
    is not selected again, so retries converge to a no-op.

    Returns:
        dict with expired_count, expired_project_ids and failed_project_ids
    """
    activity.logger.info("Running project expiration sweep")
    result = await ExpirationService(session_factory=get_session).check_and_expire_projects()
    activity.logger.info(
        "Project expiration sweep finished: %d expired, %d failed",
        result.expired_count,
        len(result.failed_project_ids),
    )
    return result.to_dict()
