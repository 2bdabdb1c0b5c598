"""Centralized configuration for unflatten.

This module is the single source of truth for all configuration.
It loads the .env file once and exposes settings lazily.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from unflatten.core.models import PLACEHOLDER_DIR_NAME

DEFAULT_SOURCE_URL = "https://etherscan.io/address/"
DEFAULT_OUTPUT_DIR = "./unflattened"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"


def _find_project_root() -> Path:
    """Find project root by searching for .env file.

    Searches upward from this file's location until .env is found.
    Falls back to the parent of the unflatten package.

    Returns:
        Path to project root directory
    """
    current = Path(__file__).resolve().parent

    # Search upward for .env file (max 5 levels)
    for _ in range(5):
        if (current / ".env").exists():
            return current
        if current.parent == current:
            break
        current = current.parent

    return Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read from the environment."""
    source_url: str = DEFAULT_SOURCE_URL
    output_dir: str = DEFAULT_OUTPUT_DIR
    placeholder: str = PLACEHOLDER_DIR_NAME
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


_CACHED_SETTINGS: Settings | None = None


def _load_dotenv() -> None:
    env_path = _find_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)
    else:
        load_dotenv()


def _read_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"UNFLATTEN_HTTP_TIMEOUT must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError("UNFLATTEN_HTTP_TIMEOUT must be positive")
    return value


def _load_settings() -> Settings:
    """Load settings from .env and the process environment."""
    _load_dotenv()

    placeholder = os.environ.get("UNFLATTEN_PLACEHOLDER", "").strip() or PLACEHOLDER_DIR_NAME
    if "/" in placeholder:
        raise ValueError("UNFLATTEN_PLACEHOLDER must be a single path segment")

    return Settings(
        source_url=os.environ.get("UNFLATTEN_SOURCE_URL", "").strip() or DEFAULT_SOURCE_URL,
        output_dir=os.environ.get("UNFLATTEN_OUTPUT_DIR", "").strip() or DEFAULT_OUTPUT_DIR,
        placeholder=placeholder,
        http_timeout=_read_timeout(os.environ.get("UNFLATTEN_HTTP_TIMEOUT", "").strip()),
        log_level=(os.environ.get("UNFLATTEN_LOG_LEVEL", "").strip() or DEFAULT_LOG_LEVEL).upper(),
    )


def get_settings() -> Settings:
    """Get the settings, loading once and caching."""
    global _CACHED_SETTINGS
    if _CACHED_SETTINGS is None:
        _CACHED_SETTINGS = _load_settings()
    return _CACHED_SETTINGS


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _CACHED_SETTINGS
    _CACHED_SETTINGS = None
