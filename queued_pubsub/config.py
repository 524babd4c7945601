"""Runtime configuration read from the environment (and a local .env file)."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SERIALIZE_PUBLISH = False

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Package-wide settings; build with get_settings()."""

    log_level: int = logging.INFO
    serialize_publish: bool = DEFAULT_SERIALIZE_PUBLISH


def _parse_log_level(raw: str | None) -> int:
    """Accept a level name (INFO, debug) or a number; unknown values fall back to INFO."""
    value = (raw or DEFAULT_LOG_LEVEL).strip()
    try:
        return int(value)
    except (ValueError, TypeError):
        pass
    level = logging.getLevelName(value.upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


def get_settings() -> Settings:
    """Read PUBSUB_LOG_LEVEL and PUBSUB_SERIALIZE_PUBLISH from the environment."""
    return Settings(
        log_level=_parse_log_level(os.environ.get("PUBSUB_LOG_LEVEL")),
        serialize_publish=_parse_bool(
            os.environ.get("PUBSUB_SERIALIZE_PUBLISH"), DEFAULT_SERIALIZE_PUBLISH
        ),
    )
