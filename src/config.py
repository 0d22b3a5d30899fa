from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = 1
DEFAULT_MIN_STUDENT_AGE = 18


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    api_prefix: str = ""
    log_level: int = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    min_student_age: int = DEFAULT_MIN_STUDENT_AGE


def _int_from_env(
    env: Mapping[str, str],
    name: str,
    default: int,
    minimum: int,
    maximum: int,
) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid {name} value: {raw}. Error: {e}. Using default: {default}")
        return default
    if value < minimum or value > maximum:
        logger.warning(
            f"{name} value {value} is outside {minimum}..{maximum}. Using default: {default}"
        )
        return default
    return value


def normalize_prefix(prefix: str) -> str:
    prefix = prefix.strip().strip("/")
    return f"/{prefix}" if prefix else ""


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables, falling back to defaults on bad input."""
    env = os.environ if env is None else env
    return Settings(
        host=env.get("HOST", "").strip() or DEFAULT_HOST,
        port=_int_from_env(env, "PORT", DEFAULT_PORT, 1, 65535),
        api_prefix=normalize_prefix(env.get("API_PREFIX", "")),
        log_level=_int_from_env(env, "LOG_LEVEL", DEFAULT_LOG_LEVEL, 0, 2),
        log_file=env.get("LOG_FILE") or None,
        min_student_age=_int_from_env(
            env, "MIN_STUDENT_AGE", DEFAULT_MIN_STUDENT_AGE, 0, 150
        ),
    )
