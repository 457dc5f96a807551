"""Engagement exceptions for TalentX.

Each error carries a stable ``kind`` so callers can tell "already
applied" apart from "not allowed", and the HTTP status the API maps it to.
"""


class EngagementError(Exception):
    """Base exception for matching and engagement errors."""

    kind = "EngagementError"
    status_code = 400


class NotFoundError(EngagementError):
    """Raised when a referenced job, profile, invitation or application is absent."""

    kind = "NotFound"
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class AccessDeniedError(EngagementError):
    """Raised when the actor does not own the resource."""

    kind = "AccessDenied"
    status_code = 403

    def __init__(self, reason: str = "Access denied"):
        super().__init__(reason)


class DuplicateApplicationError(EngagementError):
    """Raised when the talent already has an application for the job."""

    kind = "DuplicateApplication"

    def __init__(self, job_id: str, talent_id: str):
        self.job_id = job_id
        self.talent_id = talent_id
        super().__init__("Already applied to this job")


class DuplicateInvitationError(EngagementError):
    """Raised when the talent was already invited to the job."""

    kind = "DuplicateInvitation"

    def __init__(self, job_id: str, talent_id: str):
        self.job_id = job_id
        self.talent_id = talent_id
        super().__init__("Invitation already exists")


class DeadlinePassedError(EngagementError):
    """Raised when the job no longer accepts applications."""

    kind = "DeadlinePassed"

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__("Application deadline has passed")


class InvalidInvitationError(EngagementError):
    """Raised when an invitation does not match job, talent or pending status."""

    kind = "InvalidInvitation"

    def __init__(self, invitation_id: str):
        self.invitation_id = invitation_id
        super().__init__("Invalid invitation")


class InvalidStateError(EngagementError):
    """Raised on an illegal state transition."""

    kind = "InvalidState"

    def __init__(self, entity: str, current: str, requested: str):
        self.entity = entity
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move {entity} from '{current}' to '{requested}'")
