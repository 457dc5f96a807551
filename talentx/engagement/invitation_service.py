"""Invitation lifecycle service."""
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from talentx.engagement.application_service import ApplicationService
from talentx.engagement.exceptions import (
    AccessDeniedError,
    DuplicateInvitationError,
    InvalidInvitationError,
    InvalidStateError,
    NotFoundError,
)
from talentx.engagement.transitions import INVITATION_RESPONSES, INVITATION_STATUSES
from talentx.persistence.database import is_unique_violation, rollback_on_error
from talentx.persistence.models import Invitation, Job, TalentProfile, utcnow

logger = logging.getLogger(__name__)


class InvitationService:
    """Service for employer invitations and talent responses."""

    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow):
        """
        Initialize invitation service.

        Args:
            session: Database session
            clock: Returns the current UTC time (injectable for tests)
        """
        self.session = session
        self.clock = clock

    @rollback_on_error
    def create_invitation(self, employer_id: str, job_id: str, talent_id: str) -> Invitation:
        """
        Invite a talent to apply to one of the employer's jobs.

        Raises:
            NotFoundError: If the job or the talent profile does not exist
            AccessDeniedError: If the employer does not own the job
            DuplicateInvitationError: If the talent was already invited
        """
        job = self.session.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        if job.employer_id != employer_id:
            raise AccessDeniedError()
        if self.session.get(TalentProfile, talent_id) is None:
            raise NotFoundError("Talent profile", talent_id)

        invitation = Invitation(
            job_id=job_id,
            employer_id=job.employer_id,
            talent_id=talent_id,
            status="pending",
            created_at=self.clock(),
        )
        self.session.add(invitation)
        try:
            self.session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateInvitationError(job_id, talent_id) from e
            raise

        self.session.commit()
        self.session.refresh(invitation)

        logger.info("Employer %s invited talent %s to job %s", employer_id, talent_id, job_id)
        return invitation

    def get_invitation(self, invitation_id: str) -> Optional[Invitation]:
        """Get an invitation by ID."""
        return self.session.get(Invitation, invitation_id)

    @rollback_on_error
    def respond(self, talent_id: str, invitation_id: str, decision: str) -> Invitation:
        """
        Accept or decline a pending invitation.

        Accepting also creates the talent's application in the same unit
        of work; if that fails the invitation stays pending.

        Args:
            talent_id: Invited talent
            invitation_id: Invitation ID
            decision: accepted or declined

        Returns:
            Updated invitation

        Raises:
            ValueError: If decision is not accepted/declined
            NotFoundError: If no such invitation belongs to the talent
            InvalidStateError: If the invitation was already answered
            DeadlinePassedError: On accept, if the job is closed
            DuplicateApplicationError: On accept, if the talent already applied
        """
        if decision not in INVITATION_RESPONSES:
            raise ValueError("Status must be accepted or declined")

        invitation = self.get_invitation(invitation_id)
        if invitation is None or invitation.talent_id != talent_id:
            raise NotFoundError("Invitation", invitation_id)
        if invitation.status != "pending":
            raise InvalidStateError("invitation", invitation.status, decision)

        if decision == "declined":
            result = self.session.execute(
                update(Invitation)
                .where(Invitation.id == invitation_id, Invitation.status == "pending")
                .values(status="declined")
            )
            if result.rowcount != 1:
                raise InvalidStateError("invitation", "answered", decision)
            self.session.commit()
        else:
            applications = ApplicationService(self.session, clock=self.clock)
            try:
                applications.accept_invitation(invitation)
            except InvalidInvitationError as e:
                # Answered concurrently between our read and the swap
                raise InvalidStateError("invitation", "answered", decision) from e

        self.session.refresh(invitation)
        logger.info("Talent %s %s invitation %s", talent_id, decision, invitation_id)
        return invitation

    def get_invitations_for_talent(self, talent_id: str) -> list[Invitation]:
        """Invitations received by a talent, newest first."""
        stmt = (
            select(Invitation)
            .options(selectinload(Invitation.job))
            .where(Invitation.talent_id == talent_id)
            .order_by(Invitation.created_at.desc(), Invitation.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_sent_invitations(self, employer_id: str) -> list[Invitation]:
        """Invitations sent by an employer, newest first."""
        stmt = (
            select(Invitation)
            .options(selectinload(Invitation.job))
            .where(Invitation.employer_id == employer_id)
            .order_by(Invitation.created_at.desc(), Invitation.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_talent_stats(self, talent_id: str) -> dict[str, int]:
        """Invitation counts by status for a talent."""
        stmt = (
            select(Invitation.status, func.count(Invitation.id))
            .where(Invitation.talent_id == talent_id)
            .group_by(Invitation.status)
        )
        counts = {status: 0 for status in INVITATION_STATUSES}
        counts.update(dict(self.session.execute(stmt).all()))
        counts["total"] = sum(counts[status] for status in INVITATION_STATUSES)
        return counts
