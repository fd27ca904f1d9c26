"""Unit tests for settings and logging configuration."""

import logging
import tempfile
from pathlib import Path

import pytest

from music_player import logging_config
from music_player.config import DEFAULT_VOLUME, load_settings
from music_player.logging_config import get_logger, resolve_level

ENV_VARS = ["MUSIC_PLAYER_LOG_LEVEL", "MUSIC_PLAYER_MAX_SCAN_DEPTH",
            "MUSIC_PLAYER_DEFAULT_VOLUME", "MUSIC_PLAYER_DEV"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env, isolated_config):
        settings = load_settings(dotenv=False)
        assert settings.config_dir == isolated_config
        assert settings.state_file == isolated_config / "state.json"
        assert settings.log_level == "INFO"
        assert settings.max_scan_depth is None
        assert settings.default_volume == DEFAULT_VOLUME
        assert settings.dev_mode is False

    def test_from_environment(self, clean_env):
        clean_env.setenv("MUSIC_PLAYER_LOG_LEVEL", "warning")
        clean_env.setenv("MUSIC_PLAYER_MAX_SCAN_DEPTH", "4")
        clean_env.setenv("MUSIC_PLAYER_DEFAULT_VOLUME", "35")
        settings = load_settings(dotenv=False)
        assert settings.log_level == "WARNING"
        assert settings.max_scan_depth == 4
        assert settings.default_volume == 35

    def test_dev_mode_forces_debug(self, clean_env):
        clean_env.setenv("MUSIC_PLAYER_DEV", "1")
        settings = load_settings(dotenv=False)
        assert settings.dev_mode is True
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["deep", "-2"])
    def test_invalid_depth_falls_back(self, clean_env, value):
        clean_env.setenv("MUSIC_PLAYER_MAX_SCAN_DEPTH", value)
        assert load_settings(dotenv=False).max_scan_depth is None

    def test_volume_clamped(self, clean_env):
        clean_env.setenv("MUSIC_PLAYER_DEFAULT_VOLUME", "180")
        assert load_settings(dotenv=False).default_volume == 100

    def test_unusable_config_dir_falls_back(self, clean_env, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        clean_env.setenv("MUSIC_PLAYER_CONFIG_DIR", str(blocker / "config"))
        settings = load_settings(dotenv=False)
        assert settings.config_dir == Path(tempfile.gettempdir()) / "music-player"

    def test_dotenv_file(self, clean_env, tmp_path):
        # make monkeypatch remove whatever load_dotenv sets
        clean_env.setenv("MUSIC_PLAYER_MAX_SCAN_DEPTH", "0")
        clean_env.delenv("MUSIC_PLAYER_MAX_SCAN_DEPTH")
        clean_env.chdir(tmp_path)
        (tmp_path / ".env").write_text("MUSIC_PLAYER_MAX_SCAN_DEPTH=2\n", encoding="utf-8")
        assert load_settings().max_scan_depth == 2


class TestLogging:
    def test_child_logger_names(self):
        assert get_logger("music_player.playback").name == "musicplayer.playback"
        assert get_logger("tests").name == "musicplayer.tests"
        assert get_logger().name == "musicplayer"

    @pytest.mark.parametrize("level,expected", [
        ("debug", logging.DEBUG),
        ("ERROR", logging.ERROR),
        ("bogus", logging.INFO),
        (logging.WARNING, logging.WARNING),
    ])
    def test_resolve_level(self, level, expected):
        assert resolve_level(level) == expected

    def test_resolve_level_from_env(self, clean_env):
        clean_env.setenv("MUSIC_PLAYER_LOG_LEVEL", "error")
        assert resolve_level() == logging.ERROR

    def test_configure_is_idempotent(self, isolated_config):
        logger = logging.getLogger("musicplayer")
        saved = list(logger.handlers)
        for h in saved:
            logger.removeHandler(h)
        try:
            logging_config.configure_logging("DEBUG")
            count = len(logger.handlers)
            logging_config.configure_logging("WARNING")
            assert len(logger.handlers) == count == 2
            assert logger.level == logging.WARNING
            assert (isolated_config / "musicplayer.log").exists()
        finally:
            for h in list(logger.handlers):
                h.close()
                logger.removeHandler(h)
            for h in saved:
                logger.addHandler(h)
