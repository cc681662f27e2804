"""Unit tests for the acceptance gate."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid7

import pytest

from src.app.core.errors import NotFoundError
from src.app.models import ProjectStatus
from src.app.services.acceptance import (
    NO_HOURS_WARNING,
    UNKNOWN_STATUS_MESSAGE,
    AcceptanceGate,
    evaluate_acceptance,
)
from tests.factories import ProjectFactory

pytestmark = pytest.mark.unit


class TestEvaluateAcceptance:
    def test_active_with_hours_accepts(self):
        project = ProjectFactory.with_hours("100", "40")

        decision = evaluate_acceptance(project)

        assert decision.can_accept is True
        assert decision.available_hours == Decimal("60.00")
        assert decision.reason is None
        assert decision.warning is None

    def test_active_without_hours_accepts_with_warning(self):
        project = ProjectFactory.with_hours("50", "50")

        decision = evaluate_acceptance(project)

        assert decision.can_accept is True
        assert decision.available_hours == Decimal("0.00")
        assert decision.warning == NO_HOURS_WARNING

    @pytest.mark.parametrize(
        ("status", "message"),
        [
            (ProjectStatus.PENDING, "Project is pending approval"),
            (ProjectStatus.ON_HOLD, "Project is on hold"),
            (ProjectStatus.SUSPENDED, "Project is suspended"),
            (ProjectStatus.COMPLETED, "Project is completed"),
            (ProjectStatus.CANCELLED, "Project is cancelled"),
            (ProjectStatus.EXPIRED, "Project has expired"),
            (ProjectStatus.ARCHIVED, "Project is archived"),
        ],
    )
    def test_non_active_statuses_block(self, status, message):
        project = ProjectFactory.build(status=status.value)

        decision = evaluate_acceptance(project)

        assert decision.can_accept is False
        assert decision.reason == message
        assert decision.available_hours == Decimal("100.00")

    def test_blocked_status_reports_no_warning_even_without_hours(self):
        project = ProjectFactory.with_hours("10", "10", status=ProjectStatus.ON_HOLD.value)

        decision = evaluate_acceptance(project)

        assert decision.can_accept is False
        assert decision.warning is None

    def test_unrecognized_status_blocks(self):
        project = ProjectFactory.build(status="Frozen")

        decision = evaluate_acceptance(project)

        assert decision.can_accept is False
        assert decision.reason == UNKNOWN_STATUS_MESSAGE


class TestAcceptanceGate:
    async def test_looks_up_project(self):
        project = ProjectFactory.build()
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=project)

        decision = await AcceptanceGate(repo).can_accept_requests(project.id)

        repo.get_by_id.assert_awaited_once_with(project.id)
        assert decision.can_accept is True

    async def test_missing_project_raises_not_found(self):
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await AcceptanceGate(repo).can_accept_requests(uuid7())
