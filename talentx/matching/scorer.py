"""Scorer construction from configuration."""
import logging

from config.settings import Settings
from talentx.matching.ai_scorer import AIScorer
from talentx.matching.scorer_protocol import Scorer
from talentx.matching.skill_matcher import SkillMatcher

logger = logging.getLogger(__name__)


def get_scorer(config: Settings) -> Scorer:
    """Factory: create a Scorer based on the configured scoring engine.

    Args:
        config: Application settings

    Returns:
        An AIScorer (with heuristic fallback) when the AI engine is
        selected and has credentials, otherwise a SkillMatcher.
    """
    heuristic = SkillMatcher()

    if config.scoring_engine == "ai" and not config.openai_api_key:
        logger.warning(
            "Scoring engine 'ai' selected but no API key configured. Falling back to heuristic."
        )

    if not config.ai_scoring_enabled:
        return heuristic

    return AIScorer(
        api_key=config.openai_api_key,
        model=config.openai_model,
        base_url=config.openai_base_url,
        timeout=config.scorer_timeout_seconds,
        fallback=heuristic,
    )
