"""Application lifecycle service."""
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from talentx.engagement.exceptions import (
    AccessDeniedError,
    DeadlinePassedError,
    DuplicateApplicationError,
    InvalidInvitationError,
    InvalidStateError,
    NotFoundError,
)
from talentx.engagement.transitions import (
    check_application_transition,
    is_job_open,
)
from talentx.persistence.database import is_unique_violation, rollback_on_error
from talentx.persistence.models import Application, Invitation, Job, utcnow

logger = logging.getLogger(__name__)


class ApplicationService:
    """Service for creating, deciding and withdrawing job applications.

    The (job_id, talent_id) unique constraint on ``applications`` is the
    final duplicate check: inserts are flushed inside the unit of work and
    a unique violation becomes DuplicateApplicationError.
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow):
        """
        Initialize application service.

        Args:
            session: Database session
            clock: Returns the current UTC time (injectable for tests)
        """
        self.session = session
        self.clock = clock

    @rollback_on_error
    def create_application(
        self,
        talent_id: str,
        job_id: str,
        invitation_id: Optional[str] = None,
    ) -> Application:
        """
        Apply a talent to a job, directly or through a pending invitation.

        Args:
            talent_id: Applying talent
            job_id: Target job
            invitation_id: Pending invitation for (job, talent) to accept

        Returns:
            Created Application

        Raises:
            NotFoundError: If the job does not exist
            DeadlinePassedError: If the job's deadline has passed
            DuplicateApplicationError: If the talent already applied, with or
                without a usable invitation
            InvalidInvitationError: If the invitation is not a pending
                invitation for this job and talent
        """
        job = self.session.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        if not is_job_open(job.application_deadline, self.clock()):
            raise DeadlinePassedError(job_id)

        if invitation_id:
            try:
                return self._convert_invitation(talent_id, job_id, invitation_id)
            except InvalidInvitationError:
                # Having applied already outranks a stale or foreign invitation
                if self._has_applied(talent_id, job_id):
                    raise DuplicateApplicationError(job_id, talent_id) from None
                raise

        application = Application(
            job_id=job_id,
            talent_id=talent_id,
            source="manual",
            status="pending",
            created_at=self.clock(),
        )
        return self._insert(application)

    @rollback_on_error
    def accept_invitation(self, invitation: Invitation) -> Application:
        """
        Accept a pending invitation and create its application atomically.

        A job that has been removed or whose deadline passed is closed.

        Raises:
            DeadlinePassedError: If the job is closed
            InvalidInvitationError: If the invitation stopped being pending
            DuplicateApplicationError: If the talent already applied; the
                invitation stays pending
        """
        job = self.session.get(Job, invitation.job_id)
        if job is None or not is_job_open(job.application_deadline, self.clock()):
            raise DeadlinePassedError(invitation.job_id)

        return self._convert_invitation(
            invitation.talent_id, invitation.job_id, invitation.id
        )

    def get_application(self, application_id: str) -> Optional[Application]:
        """Get an application by ID."""
        return self.session.get(Application, application_id)

    @rollback_on_error
    def get_applications_for_job(self, employer_id: str, job_id: str) -> list[Application]:
        """
        Applications received for a job, newest first.

        Raises:
            NotFoundError: If the job does not exist
            AccessDeniedError: If the employer does not own the job
        """
        job = self.session.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job", job_id)
        if job.employer_id != employer_id:
            raise AccessDeniedError()

        stmt = (
            select(Application)
            .options(selectinload(Application.talent))
            .where(Application.job_id == job_id)
            .order_by(Application.created_at.desc(), Application.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_applications_for_talent(self, talent_id: str) -> list[Application]:
        """A talent's application history, newest first."""
        stmt = (
            select(Application)
            .options(selectinload(Application.job))
            .where(Application.talent_id == talent_id)
            .order_by(Application.created_at.desc(), Application.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    @rollback_on_error
    def update_status(
        self,
        employer_id: str,
        application_id: str,
        new_status: str,
    ) -> Application:
        """
        Review or decide an application.

        Args:
            employer_id: Acting employer
            application_id: Application ID
            new_status: reviewed, accepted or rejected

        Returns:
            Updated application

        Raises:
            NotFoundError: If the application or its job does not exist
            AccessDeniedError: If the employer does not own the job
            InvalidStateError: If the transition is not allowed
        """
        application = self.get_application(application_id)
        if application is None:
            raise NotFoundError("Application", application_id)

        job = self.session.get(Job, application.job_id)
        if job is None:
            raise NotFoundError("Job", application.job_id)
        if job.employer_id != employer_id:
            raise AccessDeniedError()

        old_status = application.status
        check_application_transition(old_status, new_status)

        # Compare-and-swap so two concurrent decisions cannot both win
        result = self.session.execute(
            update(Application)
            .where(Application.id == application_id, Application.status == old_status)
            .values(status=new_status)
        )
        if result.rowcount != 1:
            raise InvalidStateError("application", old_status, new_status)

        self.session.commit()
        self.session.refresh(application)

        logger.info(
            "Application %s moved %s -> %s by employer %s",
            application_id,
            old_status,
            new_status,
            employer_id,
        )
        return application

    @rollback_on_error
    def withdraw(self, talent_id: str, application_id: str) -> None:
        """
        Withdraw (delete) a talent's own application, whatever its status.

        Ownership is part of the delete itself, so an unknown id and
        someone else's application are indistinguishable to the caller.

        Raises:
            AccessDeniedError: If no application with this id belongs to the talent
        """
        result = self.session.execute(
            delete(Application)
            .where(Application.id == application_id, Application.talent_id == talent_id)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount != 1:
            raise AccessDeniedError()

        self.session.commit()
        logger.info("Application %s withdrawn by talent %s", application_id, talent_id)

    def get_employer_stats(self, employer_id: str) -> dict:
        """Application counts across an employer's jobs."""
        stmt = (
            select(Job.id, Job.title, func.count(Application.id))
            .outerjoin(Application, Application.job_id == Job.id)
            .where(Job.employer_id == employer_id)
            .group_by(Job.id, Job.title)
            .order_by(Job.title, Job.id)
        )
        job_stats = [
            {"id": job_id, "title": title, "applications": count}
            for job_id, title, count in self.session.execute(stmt).all()
        ]
        return {
            "totalApplications": sum(s["applications"] for s in job_stats),
            "totalJobs": len(job_stats),
            "jobStats": job_stats,
        }

    def _convert_invitation(
        self,
        talent_id: str,
        job_id: str,
        invitation_id: str,
    ) -> Application:
        """Flip the invitation to accepted and insert its application, or neither."""
        result = self.session.execute(
            update(Invitation)
            .where(
                Invitation.id == invitation_id,
                Invitation.job_id == job_id,
                Invitation.talent_id == talent_id,
                Invitation.status == "pending",
            )
            .values(status="accepted")
        )
        if result.rowcount != 1:
            raise InvalidInvitationError(invitation_id)

        application = Application(
            job_id=job_id,
            talent_id=talent_id,
            source="invitation",
            invitation_id=invitation_id,
            status="pending",
            created_at=self.clock(),
        )
        return self._insert(application)

    def _has_applied(self, talent_id: str, job_id: str) -> bool:
        stmt = select(Application.id).where(
            Application.job_id == job_id, Application.talent_id == talent_id
        )
        return self.session.execute(stmt).first() is not None

    def _insert(self, application: Application) -> Application:
        """Flush, translate a unique violation, then commit the unit of work."""
        self.session.add(application)
        try:
            self.session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateApplicationError(application.job_id, application.talent_id) from e
            raise

        self.session.commit()
        self.session.refresh(application)

        logger.info(
            "Talent %s applied to job %s (source=%s)",
            application.talent_id,
            application.job_id,
            application.source,
        )
        return application
