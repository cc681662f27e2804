"""Notification utilities - email."""

from src.app.core.notifications.email import send_project_status_email

__all__ = ["send_project_status_email"]
