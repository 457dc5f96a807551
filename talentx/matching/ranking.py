"""Ranking of talents for a job and jobs for a talent."""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from talentx.engagement.exceptions import AccessDeniedError, NotFoundError
from talentx.engagement.transitions import as_utc, is_job_open
from talentx.matching.scorer_protocol import Scorer
from talentx.matching.types import JobData, MatchResult, TalentData
from talentx.persistence.models import Job, TalentProfile, utcnow

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 30
DEFAULT_LIMIT = 20
DEFAULT_MAX_WORKERS = 16


class RankingService:
    """Produce ordered match lists. Never writes to the store.

    Rows are copied into detached snapshots and the read transaction is
    ended before any scoring happens, so a slow scoring provider never
    holds a database lock.
    """

    def __init__(
        self,
        session: Session,
        scorer: Scorer,
        min_score: int = DEFAULT_MIN_SCORE,
        limit: int = DEFAULT_LIMIT,
        clock: Callable[[], datetime] = utcnow,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """
        Initialize ranking service.

        Args:
            session: Database session (read only)
            scorer: Relevance scorer
            min_score: Talents must score strictly above this to be shortlisted
            limit: Maximum shortlist length
            clock: Returns the current UTC time (injectable for tests)
            max_workers: Scoring calls in flight at once
        """
        self.session = session
        self.scorer = scorer
        self.min_score = min_score
        self.limit = limit
        self.clock = clock
        self.max_workers = max_workers

    def matched_talents_for_job(self, job_id: str, employer_id: str) -> list[MatchResult]:
        """
        Shortlist of talents for an employer's job.

        Scores every talent except the employer's own account, keeps
        scores above ``min_score``, sorts by score descending then
        talent id ascending, and returns at most ``limit`` results.

        Raises:
            NotFoundError: If the job does not exist
            AccessDeniedError: If the employer does not own the job
        """
        try:
            job_row = self.session.get(Job, job_id)
            if job_row is None:
                raise NotFoundError("Job", job_id)
            if job_row.employer_id != employer_id:
                raise AccessDeniedError()

            job = JobData.from_model(job_row)
            stmt = (
                select(TalentProfile)
                .options(selectinload(TalentProfile.user))
                .where(TalentProfile.user_id != employer_id)
            )
            talents = [TalentData.from_model(p) for p in self.session.execute(stmt).scalars()]
        finally:
            self._end_read()

        scores = self._score_all([(talent, job) for talent in talents])
        results = [
            MatchResult(subject_id=talent.user_id, score=score, subject=talent)
            for talent, score in zip(talents, scores)
        ]
        shortlist = [r for r in results if r.score > self.min_score]
        shortlist.sort(key=lambda r: (-r.score, r.subject_id))

        logger.info(
            "Ranked %d talents for job %s, %d above %d",
            len(results),
            job_id,
            len(shortlist),
            self.min_score,
        )
        return shortlist[: self.limit]

    def matched_jobs_for_talent(self, talent_id: str) -> list[MatchResult]:
        """
        Feed of open jobs for a talent, best match first.

        Open means no deadline or a deadline not yet passed. Jobs posted by
        the talent's own account are excluded. No floor, no truncation; ties
        go to the most recently posted job, then job id.

        Raises:
            NotFoundError: If the talent has no profile
        """
        now = self.clock()
        try:
            profile = self.session.get(TalentProfile, talent_id)
            if profile is None:
                raise NotFoundError("Talent profile", talent_id)

            talent = TalentData.from_model(profile)
            stmt = select(Job).where(Job.employer_id != talent_id)
            jobs = [
                JobData.from_model(row)
                for row in self.session.execute(stmt).scalars()
                if is_job_open(row.application_deadline, now)
            ]
        finally:
            self._end_read()

        scores = self._score_all([(talent, job) for job in jobs])
        results = [
            MatchResult(subject_id=job.id, score=score, subject=job)
            for job, score in zip(jobs, scores)
        ]
        # Newest first, then stable sort by score keeps that order within ties
        results.sort(key=lambda r: r.subject_id)
        results.sort(key=lambda r: _timestamp(r.subject.created_at), reverse=True)
        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def _score_all(self, pairs: list[tuple[TalentData, JobData]]) -> list[int]:
        """Score every pair, in input order.

        Calls run in parallel on a bounded pool, so with a remote scorer a
        ranking takes about one scorer timeout per ``max_workers`` pairs.
        """
        if len(pairs) <= 1:
            return [self.scorer.score(talent, job) for talent, job in pairs]

        workers = min(self.max_workers, len(pairs))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scoring") as executor:
            return list(executor.map(lambda pair: self.scorer.score(*pair), pairs))

    def _end_read(self) -> None:
        """Release the read snapshot; nothing was written."""
        self.session.rollback()


def _timestamp(value) -> float:
    if value is None:
        return float("-inf")
    return as_utc(value).timestamp()
