"""Composition root tying the queue, the engine and the favorites together.

The window talks only to a ``Controller``; it never reaches into the engine's
state directly except through the engine's read-only properties.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from PySide6.QtCore import QObject, Signal

from .audio_output import AudioOutput, QtAudioOutput
from .config import Settings
from .errors import OutOfRange
from .favorites import Favorites, FavoritesRepository
from .logging_config import get_logger
from .models import Track, ViewMode
from .playback import PlaybackEngine
from .scanner import FileScanner, ScanReport
from .store import KeyValueStore
from .view_filter import queue_index_for, visible
from .workers import ScanWorker

logger = get_logger(__name__)


class Controller(QObject):
    """Application-level operations behind the buttons.

    Signals:
        notice(str, str): Level and message for a non-blocking notification.
        statusChanged(str): Short status line text.
        viewChanged(object): The new ``ViewMode``.
        playlistChanged(): Visible rows need to be re-rendered.
    """

    notice = Signal(str, str)
    statusChanged = Signal(str)
    viewChanged = Signal(object)
    playlistChanged = Signal()

    def __init__(self, engine: PlaybackEngine, favorites: Favorites,
                 scanner: Optional[FileScanner] = None, parent=None):
        super().__init__(parent)
        self.engine = engine
        self.favorites = favorites
        self.scanner = scanner or FileScanner()
        self.view_mode = ViewMode.ALL_SONGS
        self.status = "Ready"
        self._worker: Optional[ScanWorker] = None

        engine.notice.connect(self.notice)
        engine.currentIndexChanged.connect(lambda _: self.playlistChanged.emit())
        engine.currentIndexChanged.connect(lambda _: self._announce_current())
        engine.queueReplaced.connect(lambda _: self.playlistChanged.emit())
        engine.playbackFailed.connect(lambda *_: self._set_status("Error playing audio"))
        favorites.changed.connect(lambda *_: self.playlistChanged.emit())
        favorites.persistenceFailed.connect(lambda msg: self.notice.emit("error", msg))

    # --- queue population ---------------------------------------------------

    @property
    def is_scanning(self) -> bool:
        return self._worker is not None and self._worker.isRunning()

    def load_files(self, paths: Iterable[str], background: bool = False) -> Optional[int]:
        """Replace the queue with the picked files.

        Returns:
            Number of tracks loaded, or None when the work was handed to a
            background worker (or refused because one is already running).
        """
        paths = list(paths)
        if not paths:
            return 0
        self._set_status("Selecting music files...")
        if background:
            self._start_worker(ScanWorker(self.scanner, paths=paths, parent=self))
            return None
        return self.apply_scan(self.scanner.list_report(paths), "files")

    def load_folder(self, root: str, background: bool = False) -> Optional[int]:
        """Replace the queue with every audio file found below *root*."""
        self._set_status("Scanning music folder...")
        if background:
            self._start_worker(ScanWorker(self.scanner, root=root, parent=self))
            return None
        return self.apply_scan(self.scanner.scan_report(root), "folder")

    def apply_scan(self, report: ScanReport, source: str) -> int:
        """Install the tracks of a finished scan as the new queue.

        An empty result leaves the current queue untouched.
        """
        if report.errors:
            self.notice.emit("warning", f"Skipped {len(report.errors)} unreadable item(s)")
        if not report.tracks:
            self.notice.emit("warning", "No music files found")
            self._set_status("Ready")
            return 0

        count = self.engine.replace_queue(report.tracks)
        suffix = " from folder" if source == "folder" else ""
        self.notice.emit("success", f"Loaded {count} music file(s){suffix}")
        self._set_status("Ready")
        return count

    def _start_worker(self, worker: ScanWorker) -> None:
        if self.is_scanning:
            logger.warning("Scan requested while another is running; ignored")
            self.notice.emit("warning", "A scan is already running")
            worker.deleteLater()
            return
        worker.scan_complete.connect(self.apply_scan)
        worker.scan_failed.connect(self._on_scan_failed)
        worker.finished.connect(self._on_worker_finished)
        self._worker = worker
        worker.start()

    def _on_worker_finished(self) -> None:
        worker, self._worker = self._worker, None
        if worker is not None:
            worker.deleteLater()

    def _on_scan_failed(self, message: str) -> None:
        suffix = "scan music folder" if self._worker and self._worker.source == "folder" else "load music files"
        self.notice.emit("error", f"Failed to {suffix}")
        logger.error("Scan failed: %s", message)
        self._set_status("Ready")

    # --- favorites ----------------------------------------------------------

    def is_favorite(self, path: str) -> bool:
        return self.favorites.contains(path)

    def toggle_favorite(self, path: Optional[str] = None) -> Optional[bool]:
        """Toggle *path*, or the current track when no path is given.

        Returns:
            New membership, or None if there was nothing to toggle.
        """
        if path is None:
            track = self.engine.current_track
            if track is None:
                return None
            path = track.path
        now_favorite = self.favorites.toggle(path)
        if now_favorite:
            self.notice.emit("success", "Added to favorites")
        else:
            self.notice.emit("info", "Removed from favorites")
        return now_favorite

    # --- view ---------------------------------------------------------------

    def visible_tracks(self) -> List[Track]:
        return visible(self.engine.store, self.favorites.paths, self.view_mode)

    def toggle_favorites_view(self) -> ViewMode:
        if self.view_mode is ViewMode.FAVORITES_ONLY:
            return self.show_all_songs()
        return self._set_view(ViewMode.FAVORITES_ONLY)

    def show_all_songs(self) -> ViewMode:
        return self._set_view(ViewMode.ALL_SONGS)

    def _set_view(self, mode: ViewMode) -> ViewMode:
        self.view_mode = mode
        self.viewChanged.emit(mode)
        self.playlistChanged.emit()
        return mode

    def play_visible(self, row: int) -> bool:
        """Play the track shown at *row* of the current view.

        Raises:
            OutOfRange: If *row* is not a displayed row.
        """
        rows = self.visible_tracks()
        if not 0 <= row < len(rows):
            raise OutOfRange(row, len(rows))
        index = queue_index_for(self.engine.store, rows[row])
        return self.engine.select_track(index)

    def _announce_current(self) -> None:
        track = self.engine.current_track
        if track is not None:
            self._set_status(f"Loading: {track.name}")

    def _set_status(self, text: str) -> None:
        self.status = text
        self.statusChanged.emit(text)


def build_controller(settings: Settings, output: Optional[AudioOutput] = None,
                     parent=None) -> Controller:
    """Construct the full object graph from *settings*.

    A ``QtAudioOutput`` is created unless *output* is given.
    """
    if output is None:
        output = QtAudioOutput(parent)

    engine = PlaybackEngine(output, volume=settings.default_volume, parent=parent)
    repository = FavoritesRepository(KeyValueStore(settings.state_file))
    favorites = Favorites(repository, parent=parent)
    scanner = FileScanner(max_depth=settings.max_scan_depth)
    return Controller(engine, favorites, scanner, parent=parent)
