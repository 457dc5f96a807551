"""AI-delegated relevance scoring with a local heuristic fallback."""
import logging
import re
from typing import Optional

import requests

from talentx.matching.scorer_protocol import Scorer
from talentx.matching.skill_matcher import SkillMatcher, clamp_score
from talentx.matching.types import JobData, TalentData

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert recruiting AI that calculates job-talent compatibility scores."
)

# A bare integer, optionally followed by "%" or a full stop
SCORE_REPLY = re.compile(r"\s*(-?\d{1,4})\s*%?\s*\.?\s*")


class UpstreamScoringUnavailable(Exception):
    """The scoring provider failed or replied with something unusable.

    Internal to the matching package: AIScorer always recovers from it.
    """


def build_prompt(talent: TalentData, job: JobData) -> str:
    """Structured prompt summarising the talent and the job."""
    return (
        "Calculate a match score (0-100) between a talent profile and a job.\n\n"
        "Talent Profile:\n"
        f"- Skills: {', '.join(talent.skills)}\n"
        f"- Experience: {talent.experience_years} years\n"
        f"- Bio: {talent.bio or 'Not provided'}\n\n"
        "Job Details:\n"
        f"- Title: {job.title}\n"
        f"- Required Skills: {', '.join(job.required_skills)}\n"
        f"- Description: {job.description or 'Not provided'}\n\n"
        "Return only a number between 0 and 100 representing the match percentage. Consider:\n"
        "- Skill alignment (60% weight)\n"
        "- Experience level (25% weight)\n"
        "- Bio/description relevance (15% weight)"
    )


def parse_score(reply: str) -> int:
    """Parse a single-integer reply and clamp it to [0, 100]."""
    match = SCORE_REPLY.fullmatch(reply or "")
    if not match:
        raise UpstreamScoringUnavailable(f"Unparseable score reply: {reply!r}")
    return clamp_score(int(match.group(1)))


class AIScorer:
    """Score through an OpenAI-compatible chat completion endpoint.

    Every call is bounded by ``timeout`` seconds. Any failure (network,
    HTTP status, malformed payload or reply) is logged and answered by the
    fallback scorer, so callers never see a scoring error.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 5.0,
        fallback: Optional[Scorer] = None,
    ):
        """
        Initialize AI scorer.

        Args:
            api_key: Provider API key
            model: Chat model name
            base_url: Provider base URL
            timeout: Upper bound for one scoring call (seconds)
            fallback: Scorer used when the provider fails (defaults to SkillMatcher)
        """
        self.api_key = api_key
        self.model = model
        self.endpoint = base_url.rstrip("/") + "/chat/completions"
        self.timeout = timeout
        self.fallback = fallback or SkillMatcher()

    def score(self, talent: TalentData, job: JobData) -> int:
        try:
            return self._request_score(talent, job)
        except Exception as e:
            logger.warning(
                "AI scoring unavailable for talent=%s job=%s, using heuristic: %s",
                talent.user_id,
                job.id,
                e,
            )
            return self.fallback.score(talent, job)

    def _request_score(self, talent: TalentData, job: JobData) -> int:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(talent, job)},
            ],
            "max_tokens": 10,
            "temperature": 0.1,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except requests.RequestException as e:
            raise UpstreamScoringUnavailable(str(e)) from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamScoringUnavailable(f"Malformed provider response: {e}") from e

        return parse_score(str(content))
