"""Status vocabularies, legal transitions and shared checks."""
from datetime import datetime, timezone
from typing import Optional

from talentx.engagement.exceptions import InvalidStateError

# Application statuses: pending -> reviewed -> accepted | rejected
# (review is optional, pending may be decided directly)
APPLICATION_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"reviewed", "accepted", "rejected"}),
    "reviewed": frozenset({"accepted", "rejected"}),
    "accepted": frozenset(),
    "rejected": frozenset(),
}
APPLICATION_STATUSES = frozenset(APPLICATION_TRANSITIONS)

# Invitation statuses: pending -> accepted | declined, exactly once
INVITATION_STATUSES = frozenset({"pending", "accepted", "declined"})
INVITATION_RESPONSES = frozenset({"accepted", "declined"})


def check_application_transition(current: str, requested: str) -> None:
    """Raise InvalidStateError unless current -> requested is allowed.

    Raises:
        ValueError: If requested is not an application status at all
        InvalidStateError: If the move is not a legal transition
    """
    if requested not in APPLICATION_STATUSES:
        raise ValueError(
            f"Invalid status: {requested}. Must be one of {sorted(APPLICATION_STATUSES)}"
        )
    if requested not in APPLICATION_TRANSITIONS.get(current, frozenset()):
        raise InvalidStateError("application", current, requested)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def is_job_open(deadline: Optional[datetime], now: datetime) -> bool:
    """A job accepts applications until its deadline; no deadline means open."""
    if deadline is None:
        return True
    return as_utc(deadline) >= as_utc(now)
