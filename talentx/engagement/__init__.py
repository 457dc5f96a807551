"""Application and invitation lifecycle."""
from .application_service import ApplicationService
from .exceptions import (
    AccessDeniedError,
    DeadlinePassedError,
    DuplicateApplicationError,
    DuplicateInvitationError,
    EngagementError,
    InvalidInvitationError,
    InvalidStateError,
    NotFoundError,
)
from .invitation_service import InvitationService

__all__ = [
    "ApplicationService",
    "InvitationService",
    "EngagementError",
    "NotFoundError",
    "AccessDeniedError",
    "DuplicateApplicationError",
    "DuplicateInvitationError",
    "DeadlinePassedError",
    "InvalidInvitationError",
    "InvalidStateError",
]
