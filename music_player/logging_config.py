"""Central logging configuration for the music player.

This module configures a console logger by default and also writes logs to a
file in the user's config directory when that is possible.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path


_LOGGER_NAME_PREFIX = "musicplayer"
_DEFAULT_LEVEL = logging.INFO


def _get_log_file_path() -> Path:
    """Return the path to the main log file.

    We reuse the config directory used by ``store`` and place
    ``musicplayer.log`` in it. If anything goes wrong, we fall back to a log
    file in the user's home directory.
    """

    from . import store

    try:
        return store._config_dir() / "musicplayer.log"
    except OSError:
        return Path.home() / ".musicplayer.log"


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level name, number or ``None`` into a logging level.

    ``None`` consults ``MUSIC_PLAYER_LOG_LEVEL``; unknown names fall back to
    INFO.
    """

    if level is None:
        level = os.getenv("MUSIC_PLAYER_LOG_LEVEL")
        if not level:
            return _DEFAULT_LEVEL
    if isinstance(level, str):
        return int(getattr(logging, level.upper(), _DEFAULT_LEVEL))
    return int(level)


def configure_logging(level: int | str | None = None, log_to_file: bool = True) -> None:
    """Configure the root music player logger.

    This function is idempotent and safe to call multiple times. It will not
    add duplicate handlers if called more than once.
    """

    resolved_level = resolve_level(level)

    logger = logging.getLogger(_LOGGER_NAME_PREFIX)
    if logger.handlers:
        # Already configured.
        logger.setLevel(resolved_level)
        for handler in logger.handlers:
            handler.setLevel(resolved_level)
        return

    logger.setLevel(resolved_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler (stderr)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if not log_to_file:
        return

    try:
        log_file = _get_log_file_path()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(resolved_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning("File logging disabled, console only: %s", e)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger for the given module name.

    Module names inside the package are shortened, so
    ``music_player.playback`` logs as ``musicplayer.playback``.

    Example::

        from .logging_config import get_logger
        logger = get_logger(__name__)
    """

    if name is None:
        return logging.getLogger(_LOGGER_NAME_PREFIX)
    if name.startswith("music_player."):
        name = name[len("music_player."):]
    return logging.getLogger(f"{_LOGGER_NAME_PREFIX}.{name}")
