"""Engine configuration loaded once per process.

Settings reads SPAM_DEFENSE_* environment variables (and .env) through
pydantic-settings. load_config() turns them into the frozen EngineConfig
that every scorer shares; any validation problem surfaces as ConfigInvalid.
"""

import json
import re
from datetime import datetime, timedelta
from typing import Any, FrozenSet, Iterable, Optional, Tuple, Union

from pydantic import AwareDatetime, BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from spam_defense.config.defaults import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RECENT_WINDOW,
    DEFAULT_SPAM_ERA_START,
    DEFAULT_TARGET_SCRIPT,
    DEFAULT_THRESHOLD,
    DEFAULT_TRUSTED_HOSTS,
    LOG_FORMATS,
    LOG_LEVELS,
    PLACEHOLDER_AVATAR_MARKERS,
)
from spam_defense.config.logging import configure_logging
from spam_defense.utils.errors import ConfigInvalid
from spam_defense.utils.script_detection import SCRIPT_PREDICATES

# DNS labels plus an optional port
_HOST_PATTERN = re.compile(r"[a-z0-9](?:[a-z0-9-]*[a-z0-9])?(?:\.[a-z0-9](?:[a-z0-9-]*[a-z0-9])?)*(?::\d{1,5})?")


def normalize_host(host: str) -> str:
    """Lowercase a bare host name and reject anything that is not one.

    Accepts dot-separated labels of [a-z0-9-] with an optional :port.

    Raises:
        ValueError: For empty values, URLs, paths, quotes or any other
            character outside the host name alphabet.
    """
    value = host.strip().lower()
    if not value:
        raise ValueError("host must not be empty")
    if not _HOST_PATTERN.fullmatch(value):
        raise ValueError(f"not a bare host name: {host!r}")
    return value


def split_list(raw: Union[str, Iterable[str]]) -> list[str]:
    """Split a comma-separated string or a JSON array of strings.

    A string starting with "[" is decoded as JSON; anything else is split
    on commas with blank items dropped.

    Raises:
        ValueError: If the JSON is malformed or is not a list of strings.
    """
    if not isinstance(raw, str):
        return list(raw)
    text = raw.strip()
    if text.startswith("["):
        try:
            items = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"malformed JSON list: {e}") from e
        if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
            raise ValueError("JSON list must contain only strings")
        return [item for item in items if item.strip()]
    return [part for part in text.split(",") if part.strip()]


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Attributes:
        threshold: Verdict is spam when total score exceeds this
        recent_window_days: Age below which an account or server counts as new
        trusted_hosts: Allow-list of hosts, comma-separated or a JSON array
        spam_era_start: Servers first seen after this instant score higher
        fetch_timeout_seconds: Bound on each profile/instance lookup
        fail_open: Score an unavailable lookup as 0 instead of raising
        short_circuit_on_trusted_user: Skip instance/activity scoring when user score is 0
        target_script: Name of the script predicate used for instance descriptions
        placeholder_avatar_markers: Substrings marking a generated default avatar
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
    """

    threshold: int = Field(default=DEFAULT_THRESHOLD, description="Spam verdict threshold")
    recent_window_days: float = Field(
        default=DEFAULT_RECENT_WINDOW.total_seconds() / 86400,
        gt=0,
        allow_inf_nan=False,
        description="Recent observation window in days",
    )
    trusted_hosts: str = Field(
        default=",".join(sorted(DEFAULT_TRUSTED_HOSTS)),
        description="Trusted hosts, comma-separated or a JSON array",
    )
    spam_era_start: datetime = Field(
        default=DEFAULT_SPAM_ERA_START,
        description="Start of the known spam campaign (timezone-aware)",
    )
    fetch_timeout_seconds: float = Field(
        default=DEFAULT_FETCH_TIMEOUT_SECONDS,
        gt=0,
        allow_inf_nan=False,
        description="Timeout per external lookup",
    )
    fail_open: bool = Field(default=True, description="Treat unavailable lookups as score 0")
    short_circuit_on_trusted_user: bool = Field(
        default=False,
        description="Skip remaining scorers once the user score is 0",
    )
    target_script: str = Field(
        default=DEFAULT_TARGET_SCRIPT,
        description="Script expected in local community server descriptions",
    )
    placeholder_avatar_markers: str = Field(
        default=",".join(PLACEHOLDER_AVATAR_MARKERS),
        description="Default-avatar URL markers, comma-separated or a JSON array",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    log_format: str = Field(default=DEFAULT_LOG_FORMAT, description="Log output format: json or console")

    model_config = {
        "env_prefix": "SPAM_DEFENSE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log_level {value!r}, expected one of {list(LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        log_format = value.strip().lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(f"unknown log_format {value!r}, expected one of {list(LOG_FORMATS)}")
        return log_format


class EngineConfig(BaseModel):
    """Immutable, process-wide scoring configuration."""

    threshold: int = Field(DEFAULT_THRESHOLD, ge=0)
    recent_window: timedelta = DEFAULT_RECENT_WINDOW
    trusted_hosts: FrozenSet[str] = DEFAULT_TRUSTED_HOSTS
    spam_era_start: AwareDatetime = DEFAULT_SPAM_ERA_START
    fetch_timeout: float = Field(DEFAULT_FETCH_TIMEOUT_SECONDS, gt=0, allow_inf_nan=False)
    fail_open: bool = True
    short_circuit_on_trusted_user: bool = False
    target_script: str = DEFAULT_TARGET_SCRIPT
    placeholder_avatar_markers: Tuple[str, ...] = PLACEHOLDER_AVATAR_MARKERS

    model_config = {"frozen": True}

    @field_validator("recent_window")
    @classmethod
    def _positive_window(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("recent_window must be positive")
        return value

    @field_validator("trusted_hosts", mode="before")
    @classmethod
    def _normalize_hosts(cls, value: Any) -> FrozenSet[str]:
        return frozenset(normalize_host(host) for host in split_list(value))

    @field_validator("placeholder_avatar_markers", mode="before")
    @classmethod
    def _split_markers(cls, value: Any) -> Tuple[str, ...]:
        return tuple(marker.strip() for marker in split_list(value))

    @field_validator("target_script")
    @classmethod
    def _known_script(cls, value: str) -> str:
        name = value.lower()
        if name not in SCRIPT_PREDICATES:
            raise ValueError(
                f"unknown target_script {value!r}, expected one of {sorted(SCRIPT_PREDICATES)}"
            )
        return name

    def is_trusted(self, host: str) -> bool:
        return host.strip().lower() in self.trusted_hosts

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineConfig":
        return cls(
            threshold=settings.threshold,
            recent_window=timedelta(days=settings.recent_window_days),
            trusted_hosts=settings.trusted_hosts,
            spam_era_start=settings.spam_era_start,
            fetch_timeout=settings.fetch_timeout_seconds,
            fail_open=settings.fail_open,
            short_circuit_on_trusted_user=settings.short_circuit_on_trusted_user,
            target_script=settings.target_script,
            placeholder_avatar_markers=settings.placeholder_avatar_markers,
        )


def load_config(settings: Optional[Settings] = None, **overrides: Any) -> EngineConfig:
    """
    Build the EngineConfig from environment settings.

    Also applies settings.log_level and settings.log_format to the loguru
    and structlog outputs.

    Args:
        settings: Pre-built Settings (read from the environment if None)
        **overrides: Settings fields overriding environment values

    Returns:
        Frozen EngineConfig

    Raises:
        ConfigInvalid: On any malformed value
    """
    try:
        if settings is None:
            settings = Settings(**overrides)
        elif overrides:
            settings = Settings.model_validate({**settings.model_dump(), **overrides})
        config = EngineConfig.from_settings(settings)
    except (ValidationError, ValueError, OverflowError) as e:
        raise ConfigInvalid(str(e)) from e
    configure_logging(settings.log_level, settings.log_format)
    return config


__all__ = ["Settings", "EngineConfig", "load_config", "normalize_host", "split_list"]
