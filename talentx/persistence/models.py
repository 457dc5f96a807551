"""SQLAlchemy models for TalentX."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """Employer or talent account, owned by the identity service."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)  # employer, talent
    company_name = Column(String, nullable=True)  # Employers only
    created_at = Column(DateTime(timezone=True), default=utcnow)

    profile = relationship("TalentProfile", back_populates="user", uselist=False)

    def __repr__(self) -> str:
        return f"<User {self.name} ({self.role})>"


class TalentProfile(Base):
    """Skills and experience of a talent. Read-only to the engine."""

    __tablename__ = "talent_profiles"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    skills = Column(JSON, default=list)  # ["Python", "AWS", ...]
    experience_years = Column(Integer, nullable=False, default=0)
    bio = Column(Text, nullable=True)

    user = relationship("User", back_populates="profile")

    def __repr__(self) -> str:
        return f"<TalentProfile user_id={self.user_id}>"


class Job(Base):
    """Job posting. Read-only to the engine."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, default=generate_uuid)
    employer_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    required_skills = Column(JSON, default=list)  # Ordered, as posted
    description = Column(Text)
    application_deadline = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    employer = relationship("User")

    def __repr__(self) -> str:
        return f"<Job {self.title}>"


class Application(Base):
    """A talent's bid for a job, manual or converted from an invitation."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "talent_id", name="uq_applications_job_talent"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    talent_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # manual, invitation
    source = Column(String, nullable=False, default="manual")
    invitation_id = Column(String, ForeignKey("invitations.id", ondelete="SET NULL"), nullable=True)

    # Statuses: pending, reviewed, accepted, rejected
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    job = relationship("Job")
    talent = relationship("User")

    def __repr__(self) -> str:
        return f"<Application job={self.job_id} talent={self.talent_id} ({self.status})>"


class Invitation(Base):
    """Employer-initiated request for a specific talent to apply."""

    __tablename__ = "invitations"
    __table_args__ = (
        UniqueConstraint("job_id", "talent_id", name="uq_invitations_job_talent"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    employer_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    talent_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Statuses: pending, accepted, declined
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    job = relationship("Job")

    def __repr__(self) -> str:
        return f"<Invitation job={self.job_id} talent={self.talent_id} ({self.status})>"
