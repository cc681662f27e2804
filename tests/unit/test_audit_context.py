"""Unit tests for the audit context contextvar."""

import pytest

from src.app.core.audit_context import (
    USER_AGENT_MAX_LENGTH,
    clear_audit_context,
    get_audit_context,
    get_client_ip,
    set_audit_context,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_context():
    clear_audit_context()
    yield
    clear_audit_context()


def test_context_empty_by_default():
    assert get_audit_context() is None


def test_set_and_get_context():
    set_audit_context(ip_address="192.168.1.5", user_agent="curl/8", request_id="abc")

    ctx = get_audit_context()
    assert ctx is not None
    assert ctx.ip_address == "192.168.1.5"
    assert ctx.user_agent == "curl/8"
    assert ctx.request_id == "abc"


def test_user_agent_truncated():
    set_audit_context(user_agent="a" * (USER_AGENT_MAX_LENGTH + 100))

    assert len(get_audit_context().user_agent) == USER_AGENT_MAX_LENGTH


def test_clear_context():
    set_audit_context(ip_address="1.2.3.4")
    clear_audit_context()

    assert get_audit_context() is None


@pytest.mark.parametrize(
    ("forwarded_for", "client_host", "expected"),
    [
        ("203.0.113.7, 10.0.0.1", "10.0.0.2", "203.0.113.7"),
        (" 203.0.113.7 ", None, "203.0.113.7"),
        (None, "10.0.0.2", "10.0.0.2"),
        (None, None, None),
    ],
)
def test_get_client_ip(forwarded_for, client_host, expected):
    assert get_client_ip(forwarded_for, client_host) == expected
