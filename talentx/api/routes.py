"""API routes for TalentX."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from talentx.api.deps import (
    Actor,
    get_db,
    get_read_db,
    get_ranking_service,
    require_employer,
    require_talent,
)
from talentx.api.models import (
    ApplicantOut,
    ApplicationOut,
    ApplyRequest,
    InvitationCreateRequest,
    InvitationOut,
    InvitationRespondRequest,
    StatusUpdateRequest,
)
from talentx.engagement import ApplicationService, InvitationService
from talentx.matching.ranking import RankingService

logger = logging.getLogger(__name__)

applications_router = APIRouter(prefix="/applications", tags=["applications"])
invitations_router = APIRouter(prefix="/invitations", tags=["invitations"])
jobs_router = APIRouter(prefix="/jobs", tags=["jobs"])
health_router = APIRouter(tags=["health"])


# Applications


@applications_router.post("", status_code=201)
def apply_to_job(
    body: ApplyRequest,
    actor: Actor = Depends(require_talent),
    db: Session = Depends(get_db),
):
    """Apply to a job, or accept an invitation by passing its id."""
    application = ApplicationService(db).create_application(
        actor.id, body.job_id, body.invitation_id
    )
    return {
        "message": "Application submitted successfully",
        "application": ApplicationOut.model_validate(application),
    }


@applications_router.get("/my-applications")
def my_applications(
    actor: Actor = Depends(require_talent),
    db: Session = Depends(get_read_db),
):
    applications = ApplicationService(db).get_applications_for_talent(actor.id)
    return {"applications": [ApplicationOut.model_validate(a) for a in applications]}


@applications_router.get("/job/{job_id}")
def job_applications(
    job_id: str,
    actor: Actor = Depends(require_employer),
    db: Session = Depends(get_read_db),
):
    applications = ApplicationService(db).get_applications_for_job(actor.id, job_id)
    return {"applications": [ApplicantOut.model_validate(a) for a in applications]}


@applications_router.get("/stats/employer")
def employer_application_stats(
    actor: Actor = Depends(require_employer),
    db: Session = Depends(get_read_db),
):
    return ApplicationService(db).get_employer_stats(actor.id)


@applications_router.put("/{application_id}/status")
def update_application_status(
    application_id: str,
    body: StatusUpdateRequest,
    actor: Actor = Depends(require_employer),
    db: Session = Depends(get_db),
):
    application = ApplicationService(db).update_status(actor.id, application_id, body.status)
    return {
        "message": f"Application {body.status}",
        "application": ApplicationOut.model_validate(application),
    }


@applications_router.delete("/{application_id}")
def withdraw_application(
    application_id: str,
    actor: Actor = Depends(require_talent),
    db: Session = Depends(get_db),
):
    ApplicationService(db).withdraw(actor.id, application_id)
    return {"message": "Application withdrawn successfully"}


# Invitations


@invitations_router.post("", status_code=201)
def create_invitation(
    body: InvitationCreateRequest,
    actor: Actor = Depends(require_employer),
    db: Session = Depends(get_db),
):
    invitation = InvitationService(db).create_invitation(actor.id, body.job_id, body.talent_id)
    return {
        "message": "Invitation sent successfully",
        "invitation": InvitationOut.model_validate(invitation),
    }


@invitations_router.get("/my-invitations")
def my_invitations(
    actor: Actor = Depends(require_talent),
    db: Session = Depends(get_read_db),
):
    invitations = InvitationService(db).get_invitations_for_talent(actor.id)
    return {"invitations": [InvitationOut.model_validate(i) for i in invitations]}


@invitations_router.get("/sent")
def sent_invitations(
    actor: Actor = Depends(require_employer),
    db: Session = Depends(get_read_db),
):
    invitations = InvitationService(db).get_sent_invitations(actor.id)
    return {"invitations": [InvitationOut.model_validate(i) for i in invitations]}


@invitations_router.get("/stats/talent")
def talent_invitation_stats(
    actor: Actor = Depends(require_talent),
    db: Session = Depends(get_read_db),
):
    return InvitationService(db).get_talent_stats(actor.id)


@invitations_router.put("/{invitation_id}/respond")
def respond_to_invitation(
    invitation_id: str,
    body: InvitationRespondRequest,
    actor: Actor = Depends(require_talent),
    db: Session = Depends(get_db),
):
    invitation = InvitationService(db).respond(actor.id, invitation_id, body.status)
    return {
        "message": f"Invitation {body.status} successfully",
        "invitation": InvitationOut.model_validate(invitation),
    }


@invitations_router.get("/matched-talents/{job_id}")
def matched_talents(
    job_id: str,
    actor: Actor = Depends(require_employer),
    ranking: RankingService = Depends(get_ranking_service),
):
    """Best-matching talents for the employer's job."""
    matches = ranking.matched_talents_for_job(job_id, actor.id)
    return {
        "talents": [
            {"talent": m.subject.to_dict(), "matchScore": m.score} for m in matches
        ]
    }


# Jobs


@jobs_router.get("/talent/matched")
def matched_jobs(
    actor: Actor = Depends(require_talent),
    ranking: RankingService = Depends(get_ranking_service),
):
    """Open jobs for the talent, best match first."""
    matches = ranking.matched_jobs_for_talent(actor.id)
    return {"jobs": [{**m.subject.to_dict(), "matchScore": m.score} for m in matches]}


# Health


@health_router.get("/health")
def health():
    return {"status": "OK", "message": "TalentX API is running"}


all_routers = [applications_router, invitations_router, jobs_router, health_router]
