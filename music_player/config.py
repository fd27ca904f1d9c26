"""Runtime settings read from the environment and an optional ``.env`` file."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from . import store
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_VOLUME = 70


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        config_dir: Directory holding ``state.json`` and the log file.
        log_level: Logging level name.
        max_scan_depth: Optional recursion bound for folder scans.
        default_volume: Initial volume percent (0-100).
        dev_mode: Developer flag; forces DEBUG logging.
    """

    config_dir: Path
    log_level: str = "INFO"
    max_scan_depth: Optional[int] = None
    default_volume: int = DEFAULT_VOLUME
    dev_mode: bool = False

    @property
    def state_file(self) -> Path:
        return self.config_dir / store.STATE_FILENAME


def _int_env(name: str, default: Optional[int], minimum: int = 0) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < minimum:
        logger.warning("Ignoring %s=%r: must be >= %d", name, raw, minimum)
        return default
    return value


def _bool_env(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on", "development"}


def _resolve_config_dir() -> Path:
    """The per-user config dir, or a temp-dir fallback if it cannot be created."""
    try:
        return store._config_dir()
    except OSError as e:
        fallback = Path(tempfile.gettempdir()) / "music-player"
        logger.warning("Config directory unavailable (%s); using %s", e, fallback)
        return fallback


def load_settings(dotenv: bool = True) -> Settings:
    """Build ``Settings`` from ``MUSIC_PLAYER_*`` environment variables.

    Args:
        dotenv: Read a ``.env`` file found from the working directory first
            (existing variables win).
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    dev_mode = _bool_env("MUSIC_PLAYER_DEV")
    log_level = os.getenv("MUSIC_PLAYER_LOG_LEVEL", "").strip().upper() or "INFO"
    if dev_mode:
        log_level = "DEBUG"

    volume = _int_env("MUSIC_PLAYER_DEFAULT_VOLUME", DEFAULT_VOLUME)
    if volume is not None and volume > 100:
        logger.warning("Clamping MUSIC_PLAYER_DEFAULT_VOLUME=%d to 100", volume)
        volume = 100

    return Settings(
        config_dir=_resolve_config_dir(),
        log_level=log_level,
        max_scan_depth=_int_env("MUSIC_PLAYER_MAX_SCAN_DEPTH", None),
        default_volume=DEFAULT_VOLUME if volume is None else volume,
        dev_mode=dev_mode,
    )
