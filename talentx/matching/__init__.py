"""Relevance scoring and ranking."""
from .ai_scorer import AIScorer
from .ranking import RankingService
from .scorer import get_scorer
from .scorer_protocol import Scorer
from .skill_matcher import SkillMatcher
from .types import JobData, MatchResult, TalentData

__all__ = [
    "AIScorer",
    "JobData",
    "MatchResult",
    "RankingService",
    "Scorer",
    "SkillMatcher",
    "TalentData",
    "get_scorer",
]
