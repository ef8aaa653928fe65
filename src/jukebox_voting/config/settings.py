"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization; runtime changes to voting limits go through
``SettingsConfigProvider`` instead.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import NonEmptyStr, PerUserCap, QuorumLimit, VoteWindowMinutes
from ..domain.voting.value_objects import CapScope


def _aliases(name: str, camel: str) -> AliasChoices:
    return AliasChoices(name, camel)


class VotingSettings(BaseModel):
    """Quorum limits, per-user caps and cap strategies.

    Every field also accepts the camelCase key chat users type into
    ``setconfig`` (``gongLimit``, ``voteTimeLimitMinutes``, ...).
    """

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    gong_limit: QuorumLimit = Field(default=3, validation_alias=_aliases("gong_limit", "gongLimit"))
    vote_limit: QuorumLimit = Field(default=3, validation_alias=_aliases("vote_limit", "voteLimit"))
    vote_immune_limit: QuorumLimit = Field(
        default=3, validation_alias=_aliases("vote_immune_limit", "voteImmuneLimit")
    )
    flush_vote_limit: QuorumLimit = Field(
        default=6, validation_alias=_aliases("flush_vote_limit", "flushVoteLimit")
    )
    vote_time_limit_minutes: VoteWindowMinutes = Field(
        default=5,
        validation_alias=_aliases("vote_time_limit_minutes", "voteTimeLimitMinutes"),
    )

    gong_limit_per_user: PerUserCap = Field(
        default=1, validation_alias=_aliases("gong_limit_per_user", "gongLimitPerUser")
    )
    vote_limit_per_user: PerUserCap = Field(
        default=4, validation_alias=_aliases("vote_limit_per_user", "voteLimitPerUser")
    )
    vote_immune_limit_per_user: PerUserCap = Field(
        default=1,
        validation_alias=_aliases("vote_immune_limit_per_user", "voteImmuneLimitPerUser"),
    )
    flush_vote_limit_per_user: PerUserCap = Field(
        default=1,
        validation_alias=_aliases("flush_vote_limit_per_user", "flushVoteLimitPerUser"),
    )

    # Not runtime-mutable; read once when the engine is built
    gong_cap_scope: CapScope = Field(
        default=CapScope.PER_TARGET, validation_alias=_aliases("gong_cap_scope", "gongCapScope")
    )
    vote_cap_scope: CapScope = Field(
        default=CapScope.GLOBAL, validation_alias=_aliases("vote_cap_scope", "voteCapScope")
    )
    vote_immune_cap_scope: CapScope = Field(
        default=CapScope.GLOBAL,
        validation_alias=_aliases("vote_immune_cap_scope", "voteImmuneCapScope"),
    )


RUNTIME_LIMIT_KEYS: tuple[str, ...] = (
    "gong_limit",
    "vote_limit",
    "vote_immune_limit",
    "flush_vote_limit",
    "vote_time_limit_minutes",
    "gong_limit_per_user",
    "vote_limit_per_user",
    "vote_immune_limit_per_user",
    "flush_vote_limit_per_user",
)


class FanfareSettings(BaseModel):
    """Filler track played between a gonged track and the next one."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    filler_uri: NonEmptyStr = Field(
        default="spotify:track:1FzsAo5gX5oEJD9PFVH5FO",
        validation_alias=AliasChoices("filler_uri", "gong_uri"),
    )
    filler_title: str = "Gong 1"
    filler_duration_seconds: float = Field(default=12.0, gt=0.0, le=600.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - VOTING__GONG_LIMIT, VOTING__VOTE_TIME_LIMIT_MINUTES, etc. (nested)
    - FANFARE__FILLER_URI, FANFARE__FILLER_DURATION_SECONDS (nested)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    voting: VotingSettings = Field(default_factory=VotingSettings)
    fanfare: FanfareSettings = Field(default_factory=FanfareSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
