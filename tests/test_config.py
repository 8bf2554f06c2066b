"""Tests for the config module."""
import json
from pathlib import Path

from lifequest.config import (
    DEFAULT_STORAGE_KEY,
    get_db_path,
    get_storage_key,
    load_config,
    save_config,
    set_db_path,
)
from lifequest.db import DEFAULT_DB_PATH


class TestLoadConfig:
    def test_missing_file_returns_empty(self, tmp_path):
        assert load_config(tmp_path / "nonexistent.json") == {}

    def test_invalid_json_returns_empty(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")
        assert load_config(path) == {}

    def test_non_object_returns_empty(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_config(path) == {}

    def test_loads_valid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"key": "value"}', encoding="utf-8")
        assert load_config(path) == {"key": "value"}


class TestSaveConfig:
    def test_creates_file(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"hello": "world"}, path)
        assert json.loads(path.read_text()) == {"hello": "world"}

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "sub" / "dir" / "config.json"
        save_config({"nested": True}, path)
        assert path.exists()


class TestDbPath:
    def test_default(self, tmp_path):
        assert get_db_path(tmp_path / "config.json") == DEFAULT_DB_PATH

    def test_set_and_get_roundtrip(self, tmp_path):
        config_path = tmp_path / "config.json"
        target = tmp_path / "data" / "quest.db"
        set_db_path(target, config_path)
        assert get_db_path(config_path) == target

    def test_expands_user(self, tmp_path):
        config_path = tmp_path / "config.json"
        save_config({"db_path": "~/quest.db"}, config_path)
        assert get_db_path(config_path) == Path.home() / "quest.db"

    def test_preserves_other_config_keys(self, tmp_path):
        config_path = tmp_path / "config.json"
        save_config({"storage_key": "keep_me"}, config_path)
        set_db_path(Path("/some/path.db"), config_path)
        config = load_config(config_path)
        assert config["storage_key"] == "keep_me"
        assert config["db_path"] == "/some/path.db"


class TestStorageKey:
    def test_default(self, tmp_path):
        assert get_storage_key(tmp_path / "config.json") == DEFAULT_STORAGE_KEY == "lifequest_gamestate"

    def test_configured(self, tmp_path):
        config_path = tmp_path / "config.json"
        save_config({"storage_key": "second_profile"}, config_path)
        assert get_storage_key(config_path) == "second_profile"
