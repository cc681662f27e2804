"""
Temporal Activities - Fine-grained, idempotent operations.

Activities should be:
1. Idempotent - Safe to retry
2. Fine-grained - Do one thing well
3. Side-effect aware - External calls go here, not in workflows
"""

from src.app.temporal.activities.expiration import expire_overdue_projects

__all__ = ["expire_overdue_projects"]
