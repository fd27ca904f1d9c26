"""Main window and application entry point.

The window only renders controller state and forwards user input; all
decisions live in ``Controller`` and ``PlaybackEngine``.
"""

import sys
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QKeySequence, QPalette, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from .config import load_settings
from .controller import Controller, build_controller
from .logging_config import configure_logging, get_logger
from .models import ViewMode, format_time
from .view_filter import empty_message

logger = get_logger(__name__)

AUDIO_FILE_FILTER = "Audio Files (*.mp3 *.wav *.ogg *.m4a *.flac *.aac);;All Files (*)"
NOTICE_TIMEOUT_MS = 3000
SEEK_STEPS = 1000

MAIN_WINDOW_STYLE = """
    QMainWindow { background: #1e1e1e; }
    QListWidget {
        background: #252525;
        color: #e0e0e0;
        border: 1px solid #3a3a3a;
        selection-background-color: #0d4f8f;
    }
    QPushButton {
        background: #2d2d2d;
        color: #c0c0c0;
        border: 1px solid #404040;
        border-radius: 3px;
        padding: 4px 10px;
    }
    QPushButton:checked {
        background: #0d4f8f;
        color: white;
        border: 1px solid #4da6ff;
    }
    QLabel { color: #e0e0e0; }
"""


class MainWindow(QMainWindow):
    def __init__(self, controller: Controller):
        super().__init__()
        self.controller = controller
        self.engine = controller.engine
        self._seeking = False

        self.setWindowTitle("Music Player")
        self.setMinimumSize(800, 600)
        self.resize(1200, 800)
        self.setStyleSheet(MAIN_WINDOW_STYLE)

        self._build_ui()
        self._build_shortcuts()
        self._wire_signals()

        self.volume_slider.setValue(int(round(self.engine.volume * 100)))
        self._render_playlist()
        self._update_transport()
        self.statusBar().showMessage("Welcome to Music Player! Select music files to get started.",
                                     NOTICE_TIMEOUT_MS)

    # --- construction -------------------------------------------------------

    def _build_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)

        pick_row = QHBoxLayout()
        self.files_btn = QPushButton("Add Music")
        self.files_btn.clicked.connect(self._on_select_files)
        self.folder_btn = QPushButton("Add Folder")
        self.folder_btn.clicked.connect(self._on_select_folder)
        self.all_songs_btn = QPushButton("All Songs")
        self.all_songs_btn.setCheckable(True)
        self.all_songs_btn.clicked.connect(self.controller.show_all_songs)
        self.favorites_btn = QPushButton("Favorites")
        self.favorites_btn.setCheckable(True)
        self.favorites_btn.clicked.connect(self.controller.toggle_favorites_view)
        self.track_count = QLabel("(0)")
        for w in (self.files_btn, self.folder_btn, self.all_songs_btn, self.favorites_btn, self.track_count):
            pick_row.addWidget(w)
        pick_row.addStretch(1)
        layout.addLayout(pick_row)

        self.playlist = QListWidget()
        self.playlist.itemDoubleClicked.connect(self._on_row_activated)
        layout.addWidget(self.playlist, 1)

        self.title_label = QLabel("No song selected")
        self.subtitle_label = QLabel("")
        layout.addWidget(self.title_label)
        layout.addWidget(self.subtitle_label)

        progress_row = QHBoxLayout()
        self.current_time = QLabel("0:00")
        self.progress = QSlider(Qt.Horizontal)
        self.progress.setRange(0, SEEK_STEPS)
        self.progress.sliderPressed.connect(self._on_seek_started)
        self.progress.sliderReleased.connect(self._on_seek_released)
        self.total_time = QLabel("0:00")
        progress_row.addWidget(self.current_time)
        progress_row.addWidget(self.progress, 1)
        progress_row.addWidget(self.total_time)
        layout.addLayout(progress_row)

        transport = QHBoxLayout()
        self.prev_btn = QPushButton("Prev")
        self.prev_btn.clicked.connect(self.engine.previous)
        self.play_btn = QPushButton("Play")
        self.play_btn.clicked.connect(self.engine.toggle)
        self.next_btn = QPushButton("Next")
        self.next_btn.clicked.connect(self.engine.next)
        self.shuffle_btn = QPushButton("Shuffle")
        self.shuffle_btn.setCheckable(True)
        self.shuffle_btn.clicked.connect(self.engine.toggle_shuffle)
        self.repeat_btn = QPushButton("Repeat")
        self.repeat_btn.setCheckable(True)
        self.repeat_btn.clicked.connect(self.engine.toggle_repeat)
        self.favorite_btn = QPushButton("♡")
        self.favorite_btn.setCheckable(True)
        self.favorite_btn.clicked.connect(lambda: self.controller.toggle_favorite())
        self.volume_slider = QSlider(Qt.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setFixedWidth(120)
        self.volume_slider.valueChanged.connect(self.engine.set_volume)
        for w in (self.prev_btn, self.play_btn, self.next_btn, self.shuffle_btn,
                  self.repeat_btn, self.favorite_btn):
            transport.addWidget(w)
        transport.addStretch(1)
        transport.addWidget(QLabel("Volume"))
        transport.addWidget(self.volume_slider)
        layout.addLayout(transport)

        self.setCentralWidget(central)
        self.status_label = QLabel(self.controller.status)
        self.statusBar().addPermanentWidget(self.status_label)

    def _build_shortcuts(self):
        bindings = [
            (QKeySequence(Qt.Key_Space), self.engine.toggle),
            (QKeySequence(Qt.Key_Left), self.engine.previous),
            (QKeySequence(Qt.Key_Right), self.engine.next),
            (QKeySequence("Ctrl+S"), self.engine.toggle_shuffle),
            (QKeySequence("Ctrl+R"), self.engine.toggle_repeat),
        ]
        self._shortcuts = []
        for seq, slot in bindings:
            shortcut = QShortcut(seq, self)
            shortcut.activated.connect(slot)
            self._shortcuts.append(shortcut)

    def _wire_signals(self):
        c, e = self.controller, self.engine
        c.notice.connect(self._show_notice)
        c.statusChanged.connect(self.status_label.setText)
        c.playlistChanged.connect(self._render_playlist)
        c.playlistChanged.connect(self._update_transport)
        c.viewChanged.connect(lambda _: self._update_transport())
        e.stateChanged.connect(lambda _: self._update_transport())
        e.modesChanged.connect(lambda *_: self._update_transport())
        e.durationChanged.connect(lambda d: self.total_time.setText(format_time(d or None)))
        e.positionChanged.connect(self._on_position)

    # --- rendering ----------------------------------------------------------

    def _render_playlist(self):
        self.playlist.clear()
        rows = self.controller.visible_tracks()
        self.track_count.setText(f"({len(rows)})")
        if not rows:
            headline, hint = empty_message(self.controller.view_mode)
            item = QListWidgetItem(f"{headline}\n{hint}")
            item.setFlags(Qt.NoItemFlags)
            self.playlist.addItem(item)
            return

        current = self.engine.current_track
        for track in rows:
            heart = "♥" if self.controller.is_favorite(track.path) else "♡"
            item = QListWidgetItem(f"{heart}  {track.name}    {track.size_label}")
            item.setData(Qt.UserRole, track.path)
            self.playlist.addItem(item)
            if current is not None and track.path == current.path:
                item.setSelected(True)
                self.playlist.setCurrentItem(item)

    def _update_transport(self):
        e = self.engine
        self.play_btn.setText("Pause" if e.is_playing else "Play")
        self.shuffle_btn.setChecked(e.is_shuffled)
        self.repeat_btn.setChecked(e.is_repeated)
        favorites_view = self.controller.view_mode is ViewMode.FAVORITES_ONLY
        self.favorites_btn.setChecked(favorites_view)
        self.all_songs_btn.setChecked(not favorites_view)

        track = e.current_track
        if track is None:
            self.title_label.setText("No song selected")
            self.subtitle_label.setText("")
            self.favorite_btn.setChecked(False)
            self.favorite_btn.setText("♡")
            return
        self.title_label.setText(track.name)
        self.subtitle_label.setText(track.size_label)
        is_fav = self.controller.is_favorite(track.path)
        self.favorite_btn.setChecked(is_fav)
        self.favorite_btn.setText("♥" if is_fav else "♡")

    def _on_position(self, seconds: float):
        self.current_time.setText(format_time(seconds))
        if not self._seeking:
            self.progress.setValue(int(self.engine.progress * SEEK_STEPS))

    def _show_notice(self, level: str, message: str):
        log = logger.warning if level in ("warning", "error") else logger.info
        log("%s", message)
        self.statusBar().showMessage(message, NOTICE_TIMEOUT_MS)

    # --- user input ---------------------------------------------------------

    def _on_select_files(self):
        paths, _ = QFileDialog.getOpenFileNames(self, "Select Music Files", "", AUDIO_FILE_FILTER)
        if paths:
            self.controller.load_files(paths, background=True)

    def _on_select_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Music Folder")
        if folder:
            self.controller.load_folder(folder, background=True)

    def _on_row_activated(self, item: QListWidgetItem):
        # The empty-view placeholder row carries no path.
        if not item.data(Qt.UserRole):
            return
        self.controller.play_visible(self.playlist.row(item))

    def _on_seek_started(self):
        self._seeking = True

    def _on_seek_released(self):
        self._seeking = False
        self.engine.seek(self.progress.value() / SEEK_STEPS)


def _apply_dark_palette(app: QApplication) -> None:
    app.setStyle("Fusion")
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor(30, 30, 30))
    palette.setColor(QPalette.WindowText, Qt.white)
    palette.setColor(QPalette.Base, QColor(25, 25, 25))
    palette.setColor(QPalette.AlternateBase, QColor(45, 45, 45))
    palette.setColor(QPalette.Text, Qt.white)
    palette.setColor(QPalette.Button, QColor(45, 45, 45))
    palette.setColor(QPalette.ButtonText, Qt.white)
    palette.setColor(QPalette.Highlight, QColor(64, 128, 255))
    palette.setColor(QPalette.HighlightedText, Qt.black)
    app.setPalette(palette)


def main(argv: Optional[list] = None) -> int:
    """App entry point: read settings, create QApplication, show MainWindow."""
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Starting Music Player (config dir: %s)", settings.config_dir)

    app = QApplication.instance() or QApplication(argv if argv is not None else sys.argv)
    _apply_dark_palette(app)

    controller = build_controller(settings, parent=app)
    window = MainWindow(controller)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
