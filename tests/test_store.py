"""Unit tests for the JSON key-value store."""

import json

import pytest

from music_player import store as store_module
from music_player.errors import PersistenceIOFailure
from music_player.store import KeyValueStore


def test_set_writes_through(tmp_path):
    path = tmp_path / "state.json"
    kv = KeyValueStore(path)
    kv.set("favorites", ["/a.mp3"])
    assert json.loads(path.read_text(encoding="utf-8")) == {"favorites": ["/a.mp3"]}


def test_get_default(tmp_path):
    kv = KeyValueStore(tmp_path / "missing.json")
    assert kv.get("favorites") is None
    assert kv.get("favorites", []) == []


def test_preserves_other_keys(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"other": 1}), encoding="utf-8")
    kv = KeyValueStore(path)
    kv.set("favorites", [])
    assert json.loads(path.read_text(encoding="utf-8")) == {"other": 1, "favorites": []}
    assert sorted(kv.keys()) == ["favorites", "other"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", ""])
def test_corrupt_file_loads_empty(tmp_path, content):
    path = tmp_path / "state.json"
    path.write_text(content, encoding="utf-8")
    assert KeyValueStore(path).get("favorites") is None


def test_write_failure_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    kv = KeyValueStore(blocker / "state.json")
    with pytest.raises(PersistenceIOFailure):
        kv.set("favorites", ["/a.mp3"])
    # in-memory value is kept
    assert kv.get("favorites") == ["/a.mp3"]


def test_default_location_honours_env(isolated_config):
    kv = KeyValueStore()
    assert kv.path == isolated_config / "state.json"
    assert isolated_config.is_dir()
    assert store_module._config_dir() == isolated_config
