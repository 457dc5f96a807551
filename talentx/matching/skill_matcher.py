"""Deterministic skill/experience heuristic for talent-job relevance."""
import math
from typing import Iterable

from talentx.matching.types import JobData, TalentData

SKILL_WEIGHT = 60
EXPERIENCE_CAP = 25
POINTS_PER_YEAR = 2
BASE_SCORE = 15


def normalize_skills(skills: Iterable[str] | None) -> set[str]:
    """Lowercase, trim and dedupe skill names, dropping blanks."""
    tokens = set()
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        token = skill.strip().lower()
        if token:
            tokens.add(token)
    return tokens


def clamp_score(value: float) -> int:
    """Round half up and clamp to [0, 100]."""
    return max(0, min(100, math.floor(value + 0.5)))


class SkillMatcher:
    """Score a talent against a job from skills and years of experience.

    score = 60 * overlap / max(1, |job skills|)
          + min(25, 2 * experience_years)
          + 15

    A job skill counts toward the overlap when any talent skill contains
    it or is contained in it, case-insensitively.
    """

    def score(self, talent: TalentData, job: JobData) -> int:
        job_skills = normalize_skills(job.required_skills)
        talent_skills = normalize_skills(talent.skills)

        overlap = self.count_overlap(talent_skills, job_skills)
        skill_score = SKILL_WEIGHT * overlap / max(1, len(job_skills))

        years = max(0, talent.experience_years or 0)
        experience_score = min(EXPERIENCE_CAP, POINTS_PER_YEAR * years)

        return clamp_score(skill_score + experience_score + BASE_SCORE)

    @staticmethod
    def count_overlap(talent_skills: set[str], job_skills: set[str]) -> int:
        """Count job skills matched by at least one talent skill."""
        return sum(
            1
            for job_skill in job_skills
            if any(job_skill in skill or skill in job_skill for skill in talent_skills)
        )

