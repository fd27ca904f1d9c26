"""Test configuration for pytest."""

import os
import sys
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

# Ensure music_player module is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from music_player.audio_output import AudioOutput
from music_player.models import Track


class FakeAudioOutput(AudioOutput):
    """In-memory audio output that records every call."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self.loaded_path = None
        self.volume = None
        self.fail_on_play = None
        self.pending = []

    def _load(self, path):
        self.loaded_path = path
        self.calls.append(("load", path))

    def play(self):
        if self.fail_on_play:
            raise RuntimeError(self.fail_on_play)
        self.calls.append(("play",))

    def pause(self):
        self.calls.append(("pause",))

    def seek(self, fraction):
        self.calls.append(("seek", fraction))

    def set_volume(self, volume):
        self.volume = volume
        self.calls.append(("volume", volume))

    # helpers to drive events from tests
    def send(self, event, *args):
        """Raise *event* for the current source and deliver it immediately."""
        self.emit(event, self.generation, *args)

    def hold(self, event, *args):
        """Raise *event* for the current source but deliver it later."""
        self.pending.append((event, self.generation, args))

    def flush(self):
        pending, self.pending = self.pending, []
        for event, generation, args in pending:
            self.emit(event, generation, *args)

    def count(self, name):
        return sum(1 for c in self.calls if c[0] == name)


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for Qt tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - other tests might need it


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep state files out of the real user config directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("MUSIC_PLAYER_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def fake_output():
    return FakeAudioOutput()


def make_tracks(*names, folder="/music"):
    return [Track(path=f"{folder}/{name}", name=name, size_bytes=1024) for name in names]


@pytest.fixture
def tracks():
    return make_tracks("a.mp3", "b.wav", "c.flac")
