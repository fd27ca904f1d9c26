"""Audio output collaborator used by the playback engine.

``AudioOutput`` is the narrow interface the engine talks to. Every ``load``
starts a new generation. Implementations stamp each event with the generation
of the source that raised it, at the moment it is raised, so a notification
delivered after a newer ``load`` still carries its old generation and the
engine can drop it.

Events and their callback arguments:

    loaded       (generation, duration_seconds)
    time_update  (generation, current_seconds)
    ended        (generation,)
    error        (generation, reason)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from .logging_config import get_logger

logger = get_logger(__name__)

EVENTS = ("loaded", "time_update", "ended", "error")


class AudioOutput(ABC):
    """Abstract audio sink with callback-style event delivery."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {name: [] for name in EVENTS}
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def on(self, event: str, callback: Callable) -> None:
        """Subscribe *callback* to *event*.

        Raises:
            ValueError: If *event* is not one of ``EVENTS``.
        """
        if event not in self._listeners:
            raise ValueError(f"unknown audio event: {event}")
        self._listeners[event].append(callback)

    def emit(self, event: str, generation: int, *args) -> None:
        """Deliver *event* for the source loaded as *generation*."""
        for callback in list(self._listeners[event]):
            callback(generation, *args)

    def load(self, path: str) -> int:
        """Load *path* as the current source and return its generation."""
        self._generation += 1
        self._load(path)
        return self._generation

    @abstractmethod
    def _load(self, path: str) -> None: ...

    @abstractmethod
    def play(self) -> None: ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def seek(self, fraction: float) -> None: ...

    @abstractmethod
    def set_volume(self, volume: float) -> None: ...


class QtAudioOutput(AudioOutput):
    """``AudioOutput`` backed by ``QMediaPlayer``.

    Decoding happens inside Qt Multimedia; ``play()`` returns immediately and
    failures arrive later through ``errorOccurred``.
    """

    def __init__(self, parent=None):
        super().__init__()
        self._audio_output = QAudioOutput(parent)
        self._player = QMediaPlayer(parent)
        self._player.setAudioOutput(self._audio_output)
        self._source_generation: Optional[int] = None
        self._source_url = QUrl()

        self._player.durationChanged.connect(self._on_duration_changed)
        self._player.positionChanged.connect(self._on_position_changed)
        self._player.mediaStatusChanged.connect(self._on_media_status_changed)
        self._player.errorOccurred.connect(self._on_error)

    def _load(self, path: str) -> None:
        logger.debug("Loading %s", path)
        url = QUrl.fromLocalFile(path)
        # Signals raised while the player switches sources belong to neither load.
        self._source_generation = None
        self._source_url = url
        self._player.setSource(url)
        self._source_generation = self.generation

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def seek(self, fraction: float) -> None:
        duration = self._player.duration()
        if duration <= 0:
            return
        self._player.setPosition(int(max(0.0, min(1.0, fraction)) * duration))

    def set_volume(self, volume: float) -> None:
        self._audio_output.setVolume(max(0.0, min(1.0, float(volume))))

    # --- Qt signal handlers ---

    def _emit_for_source(self, event: str, *args) -> None:
        """Emit *event* stamped with the generation of the player's source.

        Events raised mid-switch, or for a source other than the one recorded
        by the last ``load``, are dropped.
        """
        generation = self._source_generation
        if generation is None or self._player.source() != self._source_url:
            logger.debug("Dropping %s event for %s", event, self._player.source().toString())
            return
        self.emit(event, generation, *args)

    def _on_duration_changed(self, duration_ms: int):
        if duration_ms > 0:
            self._emit_for_source("loaded", duration_ms / 1000.0)

    def _on_position_changed(self, position_ms: int):
        self._emit_for_source("time_update", position_ms / 1000.0)

    def _on_media_status_changed(self, status):
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._emit_for_source("ended")
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._emit_for_source("error", "invalid or unsupported media")

    def _on_error(self, error, error_string):
        if error == QMediaPlayer.Error.NoError:
            return
        logger.error("QMediaPlayer error: %s - %s", error, error_string)
        self._emit_for_source("error", error_string or str(error))
