"""API models for request/response schemas."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplyRequest(BaseModel):
    """Talent application to a job, optionally through an invitation."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId", min_length=1, description="Job to apply to")
    source: Optional[Literal["manual", "invitation"]] = Field(
        None, description="Informational; the source is derived from invitationId"
    )
    invitation_id: Optional[str] = Field(
        None, alias="invitationId", description="Pending invitation being accepted"
    )


class InvitationCreateRequest(BaseModel):
    """Employer invitation for a talent."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., alias="jobId", min_length=1)
    talent_id: str = Field(..., alias="talentId", min_length=1)


class InvitationRespondRequest(BaseModel):
    """Talent's answer to an invitation."""

    status: Literal["accepted", "declined"]


class StatusUpdateRequest(BaseModel):
    """Employer decision on an application."""

    status: Literal["pending", "reviewed", "accepted", "rejected"]


class JobSummary(BaseModel):
    """Job fields embedded in application and invitation payloads."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    employer_id: str
    application_deadline: Optional[datetime] = None


class UserSummary(BaseModel):
    """Public account fields."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class ApplicationOut(BaseModel):
    """Application as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    job_id: str
    talent_id: str
    source: str
    invitation_id: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    job: Optional[JobSummary] = None


class ApplicantOut(ApplicationOut):
    """Application with the applying talent, for the job owner."""

    talent: Optional[UserSummary] = None


class InvitationOut(BaseModel):
    """Invitation as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    job_id: str
    employer_id: str
    talent_id: str
    status: str
    created_at: Optional[datetime] = None
    job: Optional[JobSummary] = None


class ErrorResponse(BaseModel):
    """Error body for every non-2xx response."""

    error: str = Field(..., description="Human-readable message")
    kind: Optional[str] = Field(None, description="Stable error kind, e.g. DuplicateApplication")
    correlation_id: Optional[str] = Field(None, description="Reference for unexpected failures")
