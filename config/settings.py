"""Application settings using Pydantic."""
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///talentx.db",
        description="SQLAlchemy database URL",
    )

    # Scoring
    scoring_engine: Literal["heuristic", "ai"] = Field(
        default="heuristic",
        description="Relevance scorer to use: local heuristic or AI delegate",
    )
    openai_api_key: Optional[str] = Field(
        default=None,
        description="API key for the AI scoring provider",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the OpenAI-compatible scoring provider",
    )
    openai_model: str = Field(
        default="gpt-3.5-turbo",
        description="Chat model used for AI scoring",
    )
    scorer_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound on a single AI scoring call (seconds)",
    )

    scoring_max_workers: int = Field(
        default=16,
        gt=0,
        description="Scoring calls run in parallel during one ranking",
    )

    # Ranking
    match_min_score: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Talents must score strictly above this to be shortlisted",
    )
    match_limit: int = Field(
        default=20,
        gt=0,
        description="Maximum number of shortlisted talents per job",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for a rotating log file",
    )

    @property
    def ai_scoring_enabled(self) -> bool:
        """True when the AI delegate is selected and has credentials."""
        return self.scoring_engine == "ai" and bool(self.openai_api_key)


# Global settings instance
settings = Settings()
