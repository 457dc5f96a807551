"""Read-only snapshots that the scorers and rankers work on."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from talentx.persistence.models import Job, TalentProfile


@dataclass(frozen=True)
class TalentData:
    """Detached copy of a talent profile."""

    user_id: str
    skills: list[str] = field(default_factory=list)
    experience_years: int = 0
    bio: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_model(cls, profile: TalentProfile) -> "TalentData":
        user = profile.user
        return cls(
            user_id=profile.user_id,
            skills=list(profile.skills or []),
            experience_years=profile.experience_years or 0,
            bio=profile.bio,
            name=user.name if user else None,
            email=user.email if user else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "skills": list(self.skills),
            "experience_years": self.experience_years,
            "bio": self.bio,
            "user": {"id": self.user_id, "name": self.name, "email": self.email},
        }


@dataclass(frozen=True)
class JobData:
    """Detached copy of a job posting."""

    id: str
    employer_id: str
    title: str
    required_skills: list[str] = field(default_factory=list)
    description: Optional[str] = None
    application_deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, job: Job) -> "JobData":
        return cls(
            id=job.id,
            employer_id=job.employer_id,
            title=job.title or "",
            required_skills=list(job.required_skills or []),
            description=job.description,
            application_deadline=job.application_deadline,
            created_at=job.created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "employer_id": self.employer_id,
            "title": self.title,
            "required_skills": list(self.required_skills),
            "description": self.description,
            "application_deadline": self.application_deadline,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class MatchResult:
    """A ranked subject (talent or job) with its match score (0-100)."""

    subject_id: str
    score: int
    subject: Any = None
