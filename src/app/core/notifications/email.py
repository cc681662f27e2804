"""Email client using Resend API."""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError

import resend

from src.app.core.config import get_settings
from src.app.core.logging import get_logger

logger = get_logger(__name__)

_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_MUTED_STYLE = "color: #666; font-size: 14px;"
_TABLE_CELL_STYLE = "padding: 6px 12px; border-bottom: 1px solid #eee;"


def send_project_status_email(
    project_code: str,
    project_name: str,
    from_status: str,
    to_status: str,
    reason: str | None = None,
    changed_by_name: str | None = None,
) -> bool:
    """Notify configured recipients that a project changed status.

    Never raises. Blocking; call from a worker thread in async code.

    Returns:
        True if email was sent (or skipped because nothing is configured), False on error
    """
    settings = get_settings()
    recipients = settings.project_notification_recipients

    if not recipients:
        logger.debug("No project notification recipients configured", project_code=project_code)
        return True

    if not settings.resend_api_key:
        # Dev mode: log instead of sending
        logger.warning(
            "RESEND_API_KEY not set - email not sent",
            to=recipients,
            email_type="project_status",
            project_code=project_code,
        )
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": list(recipients),
                "subject": f"Project {project_code} is now {to_status}",
                "html": _get_project_status_email_html(
                    project_code, project_name, from_status, to_status, reason, changed_by_name
                ),
            }
        )

    try:
        future = _email_executor.submit(_send)
        future.result(timeout=settings.email_send_timeout_seconds)
        logger.info("Project status email sent", project_code=project_code, to_status=to_status)
        return True
    except FuturesTimeoutError:
        logger.error(
            "Email send timed out",
            project_code=project_code,
            timeout=settings.email_send_timeout_seconds,
        )
        return False
    except Exception as e:
        logger.error("Failed to send project status email", project_code=project_code, error=str(e))
        return False


def _get_project_status_email_html(
    project_code: str,
    project_name: str,
    from_status: str,
    to_status: str,
    reason: str | None,
    changed_by_name: str | None,
) -> str:
    rows = [
        ("Project", f"{html.escape(project_name)} ({html.escape(project_code)})"),
        ("Previous status", html.escape(from_status)),
        ("New status", html.escape(to_status)),
    ]
    if reason:
        rows.append(("Reason", html.escape(reason)))
    if changed_by_name:
        rows.append(("Changed by", html.escape(changed_by_name)))
    table_rows = "\n".join(
        f'        <tr><td style="{_TABLE_CELL_STYLE}"><strong>{label}</strong></td>'
        f'<td style="{_TABLE_CELL_STYLE}">{value}</td></tr>'
        for label, value in rows
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #2563eb; margin-bottom: 24px;">Project status changed</h1>
    <table style="border-collapse: collapse;">
{table_rows}
    </table>
    <p style="{_MUTED_STYLE} margin-top: 32px;">
        You are receiving this because you are subscribed to project notifications.
    </p>
</body>
</html>"""
