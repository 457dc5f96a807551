"""Scorer protocol for pluggable scoring engines.

Defines the interface that all scoring implementations must satisfy.
SkillMatcher is the heuristic implementation; the AI scorer implements
the same protocol and falls back to it.
"""
from typing import Protocol, runtime_checkable

from talentx.matching.types import JobData, TalentData


@runtime_checkable
class Scorer(Protocol):
    """Protocol for relevance scoring engines.

    Implementations must be total: they return an integer in [0, 100]
    for every input and never raise.
    """

    def score(self, talent: TalentData, job: JobData) -> int:
        """Score a talent against a job."""
        ...
