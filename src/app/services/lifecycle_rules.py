"""Project status transition table.

The lifecycle is defined entirely by TRANSITION_RULES. LifecycleService and
AcceptanceGate read it; neither branches on specific statuses. To add a state
or an edge, add the enum member and its StatusRule here.

The table is validated at import time (every edge points at a known status
and every status is reachable from Pending) and exposed read-only.
"""

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from src.app.models.enums import ProjectStatus

S = ProjectStatus


@dataclass(frozen=True)
class StatusRule:
    """Everything the engine needs to know about one status.

    Attributes:
        next_states: Statuses reachable from this one in a single transition.
        requires_reason: Whether entering this status needs a justification.
        accepts_requests: Whether a project in this status may take new work.
        blocked_message: Shown by the acceptance gate when accepts_requests is False.
        timestamp_field: Project column stamped with the transition time on entry.
        reason_field: Project column that keeps the transition reason on entry.
        notify_on_entry: Whether entering this status notifies interested parties.
    """

    next_states: tuple[ProjectStatus, ...]
    requires_reason: bool = False
    accepts_requests: bool = False
    blocked_message: str | None = None
    timestamp_field: str | None = None
    reason_field: str | None = None
    notify_on_entry: bool = False


_RULES: dict[ProjectStatus, StatusRule] = {
    S.PENDING: StatusRule(
        next_states=(S.ACTIVE, S.CANCELLED),
        blocked_message="Project is pending approval",
    ),
    S.ACTIVE: StatusRule(
        next_states=(S.ON_HOLD, S.SUSPENDED, S.COMPLETED, S.CANCELLED, S.EXPIRED),
        accepts_requests=True,
        notify_on_entry=True,
    ),
    S.ON_HOLD: StatusRule(
        next_states=(S.ACTIVE, S.CANCELLED),
        requires_reason=True,
        blocked_message="Project is on hold",
    ),
    S.SUSPENDED: StatusRule(
        next_states=(S.ACTIVE, S.CANCELLED),
        requires_reason=True,
        blocked_message="Project is suspended",
        notify_on_entry=True,
    ),
    S.COMPLETED: StatusRule(
        next_states=(S.ARCHIVED,),
        blocked_message="Project is completed",
        timestamp_field="completed_at",
        notify_on_entry=True,
    ),
    S.CANCELLED: StatusRule(
        next_states=(S.ARCHIVED,),
        requires_reason=True,
        blocked_message="Project is cancelled",
        timestamp_field="cancelled_at",
        reason_field="cancellation_reason",
        notify_on_entry=True,
    ),
    S.EXPIRED: StatusRule(
        next_states=(S.ARCHIVED,),
        requires_reason=True,
        blocked_message="Project has expired",
        notify_on_entry=True,
    ),
    S.ARCHIVED: StatusRule(
        next_states=(),
        blocked_message="Project is archived",
    ),
}

INITIAL_STATUS = S.PENDING
TERMINAL_STATUSES = frozenset({S.COMPLETED, S.CANCELLED, S.EXPIRED, S.ARCHIVED})


def unreachable_states(
    rules: Mapping[ProjectStatus, StatusRule], initial: ProjectStatus
) -> set[ProjectStatus]:
    """Statuses in ``rules`` that no path from ``initial`` reaches."""
    seen = {initial}
    queue = deque([initial])
    while queue:
        for nxt in rules[queue.popleft()].next_states:
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return set(rules) - seen


def validate_rules(rules: Mapping[ProjectStatus, StatusRule], initial: ProjectStatus) -> None:
    """Raise ValueError if the table is malformed."""
    missing = set(ProjectStatus) - set(rules)
    if missing:
        raise ValueError(f"No rule for statuses: {sorted(s.value for s in missing)}")
    for status, rule in rules.items():
        unknown = [s for s in rule.next_states if s not in rules]
        if unknown:
            raise ValueError(f"{status.value} has edges to unknown statuses: {unknown}")
        if not rule.accepts_requests and not rule.blocked_message:
            raise ValueError(f"{status.value} blocks requests but has no blocked_message")
    orphans = unreachable_states(rules, initial)
    if orphans:
        raise ValueError(f"Unreachable statuses: {sorted(s.value for s in orphans)}")


validate_rules(_RULES, INITIAL_STATUS)

TRANSITION_RULES: Mapping[ProjectStatus, StatusRule] = MappingProxyType(_RULES)


def parse_status(value: str) -> ProjectStatus | None:
    """Map a raw status string to ProjectStatus, or None if unrecognized."""
    try:
        return ProjectStatus(value)
    except ValueError:
        return None


def valid_next_states(current: ProjectStatus | str) -> tuple[ProjectStatus, ...]:
    """Statuses reachable from ``current`` in one transition."""
    status = parse_status(current)
    if status is None:
        return ()
    return TRANSITION_RULES[status].next_states


def requires_reason(target: ProjectStatus | str) -> bool:
    """Whether moving into ``target`` needs a justification."""
    status = parse_status(target)
    if status is None:
        return False
    return TRANSITION_RULES[status].requires_reason


def reason_required_statuses() -> list[ProjectStatus]:
    """All statuses whose entry requires a reason, in table order."""
    return [status for status, rule in TRANSITION_RULES.items() if rule.requires_reason]
