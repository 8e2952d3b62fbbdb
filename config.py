"""
Configuration settings for the lexiquiz reading-comprehension core.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///lexiquiz.db",
        description="SQLAlchemy connection string (sqlite or postgresql)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Quiz Policy
    # ========================================
    passing_quiz_grade: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Minimum score (0-100) for a submission to count as passed",
    )
    max_quiz_attempts: int = Field(
        default=3,
        ge=1,
        description="Maximum attempts a student gets at the quiz for one book",
    )
    min_hours_between_attempts: float = Field(
        default=24,
        ge=0,
        description="Cooldown after any submission before the next quiz attempt",
    )
    min_questions_in_quiz: int = Field(
        default=1,
        ge=1,
        description="Fewest questions an authored quiz may contain",
    )
    max_questions_in_quiz: int = Field(
        default=30,
        ge=1,
        description="Most questions an authored quiz may contain",
    )

    # ========================================
    # Reading Level & Recommendations
    # ========================================
    default_lexile_measure: float = Field(
        default=500,
        description="Starting Lexile measure for students without an initial placement",
    )
    recommendation_limit: int = Field(
        default=10,
        ge=1,
        description="Number of books returned by a recommendation request",
    )

    @model_validator(mode="after")
    def _check_question_bounds(self) -> Settings:
        if self.min_questions_in_quiz > self.max_questions_in_quiz:
            raise ValueError(
                f"min_questions_in_quiz ({self.min_questions_in_quiz}) exceeds "
                f"max_questions_in_quiz ({self.max_questions_in_quiz})"
            )
        return self

    def get_quiz_config(self) -> dict[str, int | float]:
        """Get quiz policy constants as a dictionary."""
        return {
            "passing_quiz_grade": self.passing_quiz_grade,
            "max_quiz_attempts": self.max_quiz_attempts,
            "min_hours_between_attempts": self.min_hours_between_attempts,
            "min_questions_in_quiz": self.min_questions_in_quiz,
            "max_questions_in_quiz": self.max_questions_in_quiz,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
