"""Tests for application and invitation services."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from factories import add_job, add_talent, days_from_now
from talentx.engagement.application_service import ApplicationService
from talentx.engagement.exceptions import (
    AccessDeniedError,
    DeadlinePassedError,
    DuplicateApplicationError,
    DuplicateInvitationError,
    InvalidInvitationError,
    InvalidStateError,
    NotFoundError,
)
from talentx.engagement.invitation_service import InvitationService
from talentx.persistence.models import Application, Invitation


def count_applications(session) -> int:
    return session.execute(select(func.count(Application.id))).scalar()


class SteppingClock:
    """Clock that advances one minute per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


class TestCreateApplication:
    """Tests for ApplicationService.create_application."""

    def test_manual_application(self, test_db, open_job, talent):
        service = ApplicationService(test_db)

        app = service.create_application(talent.id, open_job.id)

        assert app.id is not None
        assert app.status == "pending"
        assert app.source == "manual"
        assert app.invitation_id is None
        assert app.created_at is not None

    def test_second_application_is_duplicate(self, test_db, open_job, talent):
        service = ApplicationService(test_db)
        service.create_application(talent.id, open_job.id)

        with pytest.raises(DuplicateApplicationError) as exc_info:
            service.create_application(talent.id, open_job.id)

        assert exc_info.value.kind == "DuplicateApplication"
        assert str(exc_info.value) == "Already applied to this job"
        assert count_applications(test_db) == 1

    def test_session_usable_after_duplicate(self, test_db, employer, open_job, talent):
        service = ApplicationService(test_db)
        service.create_application(talent.id, open_job.id)
        with pytest.raises(DuplicateApplicationError):
            service.create_application(talent.id, open_job.id)

        other_job = add_job(test_db, "job-2", employer.id)
        app = service.create_application(talent.id, other_job.id)

        assert app.job_id == "job-2"
        assert count_applications(test_db) == 2

    def test_deadline_passed(self, test_db, closed_job, talent):
        service = ApplicationService(test_db)

        with pytest.raises(DeadlinePassedError):
            service.create_application(talent.id, closed_job.id)
        assert count_applications(test_db) == 0

    def test_deadline_equal_to_now_is_open(self, test_db, employer, talent):
        deadline = datetime(2026, 6, 30, 17, 0, tzinfo=timezone.utc)
        job = add_job(test_db, "job-edge", employer.id, deadline=deadline)
        service = ApplicationService(test_db, clock=lambda: deadline)

        app = service.create_application(talent.id, job.id)

        assert app.status == "pending"

    def test_deadline_one_second_ago(self, test_db, employer, talent):
        deadline = datetime(2026, 6, 30, 17, 0, tzinfo=timezone.utc)
        job = add_job(test_db, "job-edge", employer.id, deadline=deadline)
        service = ApplicationService(test_db, clock=lambda: deadline + timedelta(seconds=1))

        with pytest.raises(DeadlinePassedError):
            service.create_application(talent.id, job.id)

    def test_missing_job(self, test_db, talent):
        service = ApplicationService(test_db)
        with pytest.raises(NotFoundError):
            service.create_application(talent.id, "no-such-job")

    def test_with_invitation_converts_it(self, test_db, employer, open_job, talent):
        invitation = InvitationService(test_db).create_invitation(employer.id, open_job.id, talent.id)
        service = ApplicationService(test_db)

        app = service.create_application(talent.id, open_job.id, invitation_id=invitation.id)

        assert app.source == "invitation"
        assert app.invitation_id == invitation.id
        assert test_db.get(Invitation, invitation.id).status == "accepted"

    def test_invitation_for_another_job(self, test_db, employer, open_job, talent):
        other_job = add_job(test_db, "job-2", employer.id)
        invitation = InvitationService(test_db).create_invitation(employer.id, other_job.id, talent.id)
        service = ApplicationService(test_db)

        with pytest.raises(InvalidInvitationError):
            service.create_application(talent.id, open_job.id, invitation_id=invitation.id)

        assert test_db.get(Invitation, invitation.id).status == "pending"
        assert count_applications(test_db) == 0

    def test_invitation_for_another_talent(self, test_db, employer, open_job, talent):
        other = add_talent(test_db, "talent-u")
        invitation = InvitationService(test_db).create_invitation(employer.id, open_job.id, other.id)

        with pytest.raises(InvalidInvitationError):
            ApplicationService(test_db).create_application(talent.id, open_job.id, invitation_id=invitation.id)

    def test_declined_invitation_is_invalid(self, test_db, employer, open_job, talent):
        invitations = InvitationService(test_db)
        invitation = invitations.create_invitation(employer.id, open_job.id, talent.id)
        invitations.respond(talent.id, invitation.id, "declined")

        with pytest.raises(InvalidInvitationError):
            ApplicationService(test_db).create_application(talent.id, open_job.id, invitation_id=invitation.id)
        assert count_applications(test_db) == 0

    def test_unknown_invitation_id(self, test_db, open_job, talent):
        with pytest.raises(InvalidInvitationError):
            ApplicationService(test_db).create_application(talent.id, open_job.id, invitation_id="nope")

    def test_unknown_invitation_after_applying_is_duplicate(self, test_db, open_job, talent):
        service = ApplicationService(test_db)
        service.create_application(talent.id, open_job.id)

        with pytest.raises(DuplicateApplicationError):
            service.create_application(talent.id, open_job.id, invitation_id="nope")
        assert count_applications(test_db) == 1

    def test_declined_invitation_after_applying_is_duplicate(self, test_db, employer, open_job, talent):
        invitations = InvitationService(test_db)
        invitation = invitations.create_invitation(employer.id, open_job.id, talent.id)
        invitations.respond(talent.id, invitation.id, "declined")
        service = ApplicationService(test_db)
        service.create_application(talent.id, open_job.id)

        with pytest.raises(DuplicateApplicationError):
            service.create_application(talent.id, open_job.id, invitation_id=invitation.id)
        assert test_db.get(Invitation, invitation.id).status == "declined"


class TestUpdateStatus:
    """Tests for ApplicationService.update_status."""

    @pytest.fixture
    def application(self, test_db, open_job, talent):
        return ApplicationService(test_db).create_application(talent.id, open_job.id)

    def test_review_then_accept(self, test_db, employer, application):
        service = ApplicationService(test_db)

        assert service.update_status(employer.id, application.id, "reviewed").status == "reviewed"
        assert service.update_status(employer.id, application.id, "accepted").status == "accepted"

    def test_pending_can_be_decided_directly(self, test_db, employer, application):
        service = ApplicationService(test_db)
        assert service.update_status(employer.id, application.id, "rejected").status == "rejected"

    @pytest.mark.parametrize("decision", ["accepted", "rejected"])
    def test_decided_applications_are_final(self, test_db, employer, application, decision):
        service = ApplicationService(test_db)
        service.update_status(employer.id, application.id, decision)

        for target in ["pending", "reviewed", "accepted", "rejected"]:
            with pytest.raises(InvalidStateError):
                service.update_status(employer.id, application.id, target)
        assert test_db.get(Application, application.id).status == decision

    def test_cannot_go_back_to_pending(self, test_db, employer, application):
        service = ApplicationService(test_db)
        service.update_status(employer.id, application.id, "reviewed")

        with pytest.raises(InvalidStateError):
            service.update_status(employer.id, application.id, "pending")

    def test_same_status_is_not_a_transition(self, test_db, employer, application):
        with pytest.raises(InvalidStateError):
            ApplicationService(test_db).update_status(employer.id, application.id, "pending")

    def test_unknown_status(self, test_db, employer, application):
        with pytest.raises(ValueError):
            ApplicationService(test_db).update_status(employer.id, application.id, "hired")

    def test_other_employer_denied(self, test_db, other_employer, application):
        with pytest.raises(AccessDeniedError):
            ApplicationService(test_db).update_status(other_employer.id, application.id, "reviewed")
        assert test_db.get(Application, application.id).status == "pending"

    def test_missing_application(self, test_db, employer):
        with pytest.raises(NotFoundError):
            ApplicationService(test_db).update_status(employer.id, "missing", "reviewed")


class TestWithdraw:
    """Tests for ApplicationService.withdraw."""

    def test_withdraw_pending(self, test_db, open_job, talent):
        service = ApplicationService(test_db)
        app = service.create_application(talent.id, open_job.id)

        service.withdraw(talent.id, app.id)

        assert service.get_application(app.id) is None

    def test_withdraw_reviewed(self, test_db, employer, open_job, talent):
        service = ApplicationService(test_db)
        app = service.create_application(talent.id, open_job.id)
        service.update_status(employer.id, app.id, "reviewed")

        service.withdraw(talent.id, app.id)

        assert count_applications(test_db) == 0

    def test_can_reapply_after_withdrawing(self, test_db, open_job, talent):
        service = ApplicationService(test_db)
        app = service.create_application(talent.id, open_job.id)
        service.withdraw(talent.id, app.id)

        again = service.create_application(talent.id, open_job.id)

        assert again.id != app.id

    @pytest.mark.parametrize("decision", ["accepted", "rejected"])
    def test_decided_can_be_withdrawn(self, test_db, employer, open_job, talent, decision):
        service = ApplicationService(test_db)
        app = service.create_application(talent.id, open_job.id)
        service.update_status(employer.id, app.id, decision)

        service.withdraw(talent.id, app.id)

        assert count_applications(test_db) == 0

    def test_other_talent_denied(self, test_db, open_job, talent):
        service = ApplicationService(test_db)
        app = service.create_application(talent.id, open_job.id)
        add_talent(test_db, "talent-u")

        with pytest.raises(AccessDeniedError):
            service.withdraw("talent-u", app.id)
        assert count_applications(test_db) == 1

    def test_missing(self, test_db, talent):
        with pytest.raises(AccessDeniedError):
            ApplicationService(test_db).withdraw(talent.id, "missing")


class TestApplicationQueries:
    """Tests for application listings and stats."""

    def test_applications_for_job_newest_first(self, test_db, employer, open_job):
        service = ApplicationService(test_db, clock=SteppingClock())
        for user_id in ["t-1", "t-2", "t-3"]:
            add_talent(test_db, user_id)
            service.create_application(user_id, open_job.id)

        apps = service.get_applications_for_job(employer.id, open_job.id)

        assert [a.talent_id for a in apps] == ["t-3", "t-2", "t-1"]
        assert apps[0].talent.email == "t-3@example.com"

    def test_applications_for_job_requires_owner(self, test_db, other_employer, open_job):
        with pytest.raises(AccessDeniedError):
            ApplicationService(test_db).get_applications_for_job(other_employer.id, open_job.id)

    def test_applications_for_missing_job(self, test_db, employer):
        with pytest.raises(NotFoundError):
            ApplicationService(test_db).get_applications_for_job(employer.id, "missing")

    def test_applications_for_talent(self, test_db, employer, open_job, talent):
        service = ApplicationService(test_db, clock=SteppingClock())
        second = add_job(test_db, "job-2", employer.id, title="Data Engineer")
        service.create_application(talent.id, open_job.id)
        service.create_application(talent.id, second.id)

        apps = service.get_applications_for_talent(talent.id)

        assert [a.job.title for a in apps] == ["Data Engineer", "Engineer"]

    def test_employer_stats(self, test_db, employer, other_employer, open_job, talent):
        service = ApplicationService(test_db)
        quiet = add_job(test_db, "job-quiet", employer.id, title="Archivist")
        add_job(test_db, "job-other", other_employer.id, title="Elsewhere")
        add_talent(test_db, "t-2")
        service.create_application(talent.id, open_job.id)
        service.create_application("t-2", open_job.id)

        stats = service.get_employer_stats(employer.id)

        assert stats["totalApplications"] == 2
        assert stats["totalJobs"] == 2
        assert stats["jobStats"] == [
            {"id": quiet.id, "title": "Archivist", "applications": 0},
            {"id": open_job.id, "title": "Engineer", "applications": 2},
        ]


class TestCreateInvitation:
    """Tests for InvitationService.create_invitation."""

    def test_create(self, test_db, employer, open_job, talent):
        invitation = InvitationService(test_db).create_invitation(employer.id, open_job.id, talent.id)

        assert invitation.status == "pending"
        assert invitation.employer_id == employer.id
        assert invitation.talent_id == talent.id

    def test_duplicate(self, test_db, employer, open_job, talent):
        service = InvitationService(test_db)
        service.create_invitation(employer.id, open_job.id, talent.id)

        with pytest.raises(DuplicateInvitationError) as exc_info:
            service.create_invitation(employer.id, open_job.id, talent.id)
        assert str(exc_info.value) == "Invitation already exists"

    def test_duplicate_even_after_decline(self, test_db, employer, open_job, talent):
        service = InvitationService(test_db)
        invitation = service.create_invitation(employer.id, open_job.id, talent.id)
        service.respond(talent.id, invitation.id, "declined")

        with pytest.raises(DuplicateInvitationError):
            service.create_invitation(employer.id, open_job.id, talent.id)

    def test_other_employer_denied(self, test_db, other_employer, open_job, talent):
        with pytest.raises(AccessDeniedError):
            InvitationService(test_db).create_invitation(other_employer.id, open_job.id, talent.id)

    def test_missing_job(self, test_db, employer, talent):
        with pytest.raises(NotFoundError):
            InvitationService(test_db).create_invitation(employer.id, "missing", talent.id)

    def test_missing_talent_profile(self, test_db, employer, other_employer, open_job):
        with pytest.raises(NotFoundError):
            InvitationService(test_db).create_invitation(employer.id, open_job.id, other_employer.id)


class TestRespond:
    """Tests for InvitationService.respond."""

    @pytest.fixture
    def invitation(self, test_db, employer, open_job, talent):
        return InvitationService(test_db).create_invitation(employer.id, open_job.id, talent.id)

    def test_accept_creates_application(self, test_db, talent, invitation):
        result = InvitationService(test_db).respond(talent.id, invitation.id, "accepted")

        assert result.status == "accepted"
        app = test_db.execute(select(Application)).scalar_one()
        assert app.source == "invitation"
        assert app.invitation_id == invitation.id
        assert app.status == "pending"

    def test_decline_creates_nothing(self, test_db, talent, invitation):
        result = InvitationService(test_db).respond(talent.id, invitation.id, "declined")

        assert result.status == "declined"
        assert count_applications(test_db) == 0

    def test_answered_once(self, test_db, talent, invitation):
        service = InvitationService(test_db)
        service.respond(talent.id, invitation.id, "declined")

        for decision in ["accepted", "declined"]:
            with pytest.raises(InvalidStateError):
                service.respond(talent.id, invitation.id, decision)
        assert count_applications(test_db) == 0

    def test_accept_after_manual_apply(self, test_db, open_job, talent, invitation):
        ApplicationService(test_db).create_application(talent.id, open_job.id)

        with pytest.raises(DuplicateApplicationError):
            InvitationService(test_db).respond(talent.id, invitation.id, "accepted")

        assert test_db.get(Invitation, invitation.id).status == "pending"
        assert count_applications(test_db) == 1

    def test_accept_after_deadline(self, test_db, employer, talent):
        deadline = datetime(2026, 6, 30, 17, 0, tzinfo=timezone.utc)
        job = add_job(test_db, "job-edge", employer.id, deadline=deadline)
        invitation = InvitationService(test_db).create_invitation(employer.id, job.id, talent.id)
        late = InvitationService(test_db, clock=lambda: deadline + timedelta(minutes=5))

        with pytest.raises(DeadlinePassedError):
            late.respond(talent.id, invitation.id, "accepted")

        assert test_db.get(Invitation, invitation.id).status == "pending"
        assert count_applications(test_db) == 0

    def test_decline_after_deadline_is_allowed(self, test_db, employer, closed_job, talent):
        service = InvitationService(test_db)
        invitation = service.create_invitation(employer.id, closed_job.id, talent.id)

        assert service.respond(talent.id, invitation.id, "declined").status == "declined"

    def test_other_talent_cannot_respond(self, test_db, invitation):
        add_talent(test_db, "talent-u")
        with pytest.raises(NotFoundError):
            InvitationService(test_db).respond("talent-u", invitation.id, "accepted")

    def test_missing_invitation(self, test_db, talent):
        with pytest.raises(NotFoundError):
            InvitationService(test_db).respond(talent.id, "missing", "declined")

    def test_invalid_decision(self, test_db, talent, invitation):
        with pytest.raises(ValueError):
            InvitationService(test_db).respond(talent.id, invitation.id, "pending")


class TestInvitationQueries:
    """Tests for invitation listings and stats."""

    def test_invitations_for_talent_and_sent(self, test_db, employer, other_employer, open_job, talent):
        clock = SteppingClock()
        service = InvitationService(test_db, clock=clock)
        other_job = add_job(test_db, "job-b", other_employer.id, title="Analyst")
        service.create_invitation(employer.id, open_job.id, talent.id)
        service.create_invitation(other_employer.id, other_job.id, talent.id)

        received = service.get_invitations_for_talent(talent.id)
        sent = service.get_sent_invitations(employer.id)

        assert [i.job.title for i in received] == ["Analyst", "Engineer"]
        assert [i.job_id for i in sent] == [open_job.id]

    def test_talent_stats(self, test_db, employer, talent):
        service = InvitationService(test_db)
        for job_id in ["j-1", "j-2", "j-3", "j-4"]:
            add_job(test_db, job_id, employer.id, deadline=days_from_now(10))
            service.create_invitation(employer.id, job_id, talent.id)
        invitations = service.get_invitations_for_talent(talent.id)
        service.respond(talent.id, invitations[0].id, "accepted")
        service.respond(talent.id, invitations[1].id, "declined")

        assert service.get_talent_stats(talent.id) == {
            "pending": 2,
            "accepted": 1,
            "declined": 1,
            "total": 4,
        }

    def test_talent_stats_empty(self, test_db, talent):
        assert InvitationService(test_db).get_talent_stats(talent.id) == {
            "pending": 0,
            "accepted": 0,
            "declined": 0,
            "total": 0,
        }
