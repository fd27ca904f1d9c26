"""Tests for the composition root."""

import random
import time

import pytest
from PySide6.QtCore import QCoreApplication

from conftest import make_tracks
from music_player.config import load_settings
from music_player.controller import Controller, build_controller
from music_player.errors import OutOfRange
from music_player.favorites import Favorites, FavoritesRepository
from music_player.models import ViewMode
from music_player.playback import PlaybackEngine
from music_player.scanner import ScanReport
from music_player.store import KeyValueStore


@pytest.fixture
def controller(fake_output, tmp_path):
    engine = PlaybackEngine(fake_output, rng=random.Random(3))
    favorites = Favorites(FavoritesRepository(KeyValueStore(tmp_path / "state.json")))
    return Controller(engine, favorites)


@pytest.fixture
def notices(controller):
    seen = []
    controller.notice.connect(lambda level, msg: seen.append((level, msg)))
    return seen


def _music_folder(tmp_path):
    folder = tmp_path / "music"
    folder.mkdir()
    for name in ("A.mp3", "B.wav", "C.txt"):
        (folder / name).write_bytes(b"data")
    return folder


class TestLoading:
    def test_load_folder(self, controller, notices, tmp_path):
        folder = _music_folder(tmp_path)
        assert controller.load_folder(str(folder)) == 2
        assert {t.name for t in controller.engine.store} == {"A.mp3", "B.wav"}
        assert ("success", "Loaded 2 music file(s) from folder") in notices
        assert controller.status == "Ready"
        assert controller.engine.current_index == 0
        assert not controller.engine.is_playing

    def test_load_files(self, controller, notices, tmp_path):
        folder = _music_folder(tmp_path)
        paths = [str(folder / "B.wav"), str(folder / "A.mp3")]
        assert controller.load_files(paths) == 2
        assert [t.name for t in controller.engine.store] == ["B.wav", "A.mp3"]
        assert ("success", "Loaded 2 music file(s)") in notices

    def test_empty_scan_keeps_queue(self, controller, notices, tmp_path):
        controller.apply_scan(ScanReport(tracks=make_tracks("x.mp3")), "files")
        empty = tmp_path / "empty"
        empty.mkdir()
        assert controller.load_folder(str(empty)) == 0
        assert [t.name for t in controller.engine.store] == ["x.mp3"]
        assert ("warning", "No music files found") in notices

    def test_partial_scan_warns(self, controller, notices, tmp_path):
        folder = _music_folder(tmp_path)
        controller.load_files([str(folder / "A.mp3"), str(folder / "missing.mp3")])
        assert len(controller.engine.store) == 1
        assert ("warning", "Skipped 1 unreadable item(s)") in notices

    def test_load_no_files(self, controller):
        assert controller.load_files([]) == 0

    def test_background_scan(self, qapp, controller, tmp_path):
        folder = _music_folder(tmp_path)
        assert controller.load_folder(str(folder), background=True) is None
        worker = controller._worker
        assert worker is not None
        worker.wait(5000)

        deadline = time.monotonic() + 5
        while len(controller.engine.store) == 0 and time.monotonic() < deadline:
            QCoreApplication.processEvents()
            time.sleep(0.01)

        assert {t.name for t in controller.engine.store} == {"A.mp3", "B.wav"}


class TestFavorites:
    def test_toggle_current_track_and_view(self, controller, notices):
        controller.apply_scan(ScanReport(tracks=make_tracks("x.mp3", "y.mp3")), "files")

        assert controller.toggle_favorite() is True
        assert controller.is_favorite("/music/x.mp3")
        assert ("success", "Added to favorites") in notices

        controller.toggle_favorites_view()
        assert controller.view_mode is ViewMode.FAVORITES_ONLY
        assert [t.path for t in controller.visible_tracks()] == ["/music/x.mp3"]

    def test_toggle_by_path(self, controller, notices):
        controller.apply_scan(ScanReport(tracks=make_tracks("x.mp3")), "files")
        controller.toggle_favorite("/music/x.mp3")
        assert controller.toggle_favorite("/music/x.mp3") is False
        assert ("info", "Removed from favorites") in notices

    def test_toggle_without_queue(self, controller):
        assert controller.toggle_favorite() is None
        assert len(controller.favorites) == 0

    def test_view_round_trip_restores_queue(self, controller):
        tracks = make_tracks("a.mp3", "b.mp3", "c.mp3")
        controller.apply_scan(ScanReport(tracks=tracks), "files")
        controller.toggle_favorite("/music/b.mp3")
        before = controller.visible_tracks()

        controller.toggle_favorites_view()
        controller.show_all_songs()

        assert controller.visible_tracks() == before == tracks

    def test_favorites_view_toggles_back(self, controller):
        assert controller.toggle_favorites_view() is ViewMode.FAVORITES_ONLY
        assert controller.toggle_favorites_view() is ViewMode.ALL_SONGS

    def test_view_does_not_change_playback(self, controller):
        controller.apply_scan(ScanReport(tracks=make_tracks("a.mp3", "b.mp3")), "files")
        controller.engine.select_track(1)
        controller.toggle_favorites_view()
        assert controller.engine.current_index == 1
        assert controller.engine.is_playing


class TestPlayVisible:
    def test_maps_filtered_row_to_queue_index(self, controller):
        controller.apply_scan(ScanReport(tracks=make_tracks("a.mp3", "b.mp3", "c.mp3")), "files")
        controller.toggle_favorite("/music/c.mp3")
        controller.toggle_favorites_view()

        controller.play_visible(0)

        assert controller.engine.current_index == 2
        assert controller.engine.current_track.name == "c.mp3"

    def test_bad_row_raises(self, controller):
        controller.apply_scan(ScanReport(tracks=make_tracks("a.mp3")), "files")
        controller.toggle_favorites_view()
        with pytest.raises(OutOfRange):
            controller.play_visible(0)


def test_build_controller(fake_output, isolated_config):
    settings = load_settings(dotenv=False)
    controller = build_controller(settings, output=fake_output)
    assert controller.engine.volume == pytest.approx(settings.default_volume / 100)
    assert controller.scanner.max_depth == settings.max_scan_depth
    controller.toggle_favorite("/music/x.mp3")
    assert (isolated_config / "state.json").exists()


def test_status_follows_current_track(controller):
    controller.apply_scan(ScanReport(tracks=make_tracks("a.mp3", "b.mp3")), "files")
    controller.engine.next()
    assert controller.status == "Loading: b.mp3"
