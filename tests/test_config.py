"""
Tests for centralized configuration and the persisted editor options.
"""

import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from drone_editor.config import (
    AIConfig,
    ConnectionConfig,
    EditorOptions,
    PathConfig,
    Settings,
    UIConfig,
    get_settings,
    load_options,
    reload_settings,
    save_options,
)
from drone_editor.exceptions import ConfigurationError, ValidationError


class TestPathConfig:
    """Tests for PathConfig."""

    def test_custom_paths_from_env(self, tmp_path):
        with patch.dict(os.environ, {
            "DRONE_EDITOR_AUTOSAVE_DIR": str(tmp_path / "auto"),
            "DRONE_EDITOR_PROJECT_DIR": str(tmp_path / "projects"),
            "LUT_DIRS": os.pathsep.join([str(tmp_path / "a"), str(tmp_path / "b")]),
        }):
            config = PathConfig()
            assert config.autosave_dir == tmp_path / "auto"
            assert config.project_dir == tmp_path / "projects"
            assert config.lut_dirs == [tmp_path / "a", tmp_path / "b"]

    def test_linux_lut_dirs(self, monkeypatch, tmp_path):
        monkeypatch.delenv("LUT_DIRS", raising=False)
        monkeypatch.delenv("USERPROFILE", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setattr("drone_editor.config.platform.system", lambda: "Linux")
        config = PathConfig()
        assert config.lut_dirs == [
            tmp_path / ".local" / "share" / "DaVinciResolve" / "LUT",
            Path("/opt/resolve/LUT"),
        ]

    def test_ensure_directories(self, settings):
        settings.paths.ensure_directories()
        assert settings.paths.autosave_dir.is_dir()
        assert settings.paths.project_dir.is_dir()
        assert settings.paths.options_file.parent.is_dir()


class TestEnvironmentSections:

    def test_connection_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = ConnectionConfig()
            assert config.max_attempts == 3
            assert config.retry_delay == 2.0

    def test_ai_from_env(self):
        with patch.dict(os.environ, {
            "DRONE_EDITOR_AI_BRIDGE": "true",
            "SCENE_DETECT_BIN": "/usr/local/bin/scene_detect",
            "MAX_SCENES": "5",
        }):
            config = AIConfig()
            assert config.use_bridge is True
            assert config.scene_detect_executable == "/usr/local/bin/scene_detect"
            assert config.max_scenes == 5

    def test_ui_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = UIConfig()
            assert config.console_mode is False
            assert config.autosave_interval_minutes == 5


class TestSettings:

    def test_reload(self):
        first = get_settings()
        assert get_settings() is first
        second = reload_settings()
        assert second is not first
        assert get_settings() is second

    def test_container(self, settings):
        assert isinstance(settings, Settings)
        assert isinstance(settings.ai, AIConfig)


class TestEditorOptions:

    def test_defaults(self):
        options = EditorOptions()
        assert options.lut_selection == "Default"
        assert options.default_transition == "Cross Dissolve"
        assert options.default_transition_duration == 30
        assert options.confirm_deletions is True

    def test_unknown_keys_are_ignored(self):
        options = EditorOptions()
        applied = options.update_from_dict({"lut_selection": "Cinematic", "future_option": 1})
        assert applied == ["lut_selection"]
        assert options.lut_selection == "Cinematic"
        assert not hasattr(options, "future_option")

    def test_rejects_value_outside_choices(self, caplog):
        options = EditorOptions()
        assert options.set("export_format", "GIF") is False
        assert options.export_format == "MP4"
        assert "Invalid value for option 'export_format'" in caplog.text

    def test_check_value_explains_choices(self):
        options = EditorOptions()
        with pytest.raises(ValidationError) as exc_info:
            options.check_value("lut_selection", "Teal Orange")
        assert exc_info.value.user_message == "Invalid value for option 'lut_selection': 'Teal Orange'"
        assert exc_info.value.suggestion == "Choose one of: Default, Cinematic, Vintage, Drone Aerial"

        with pytest.raises(ValidationError):
            options.check_value("future_option", 1)
        options.check_value("lut_selection", "Vintage")

    def test_rejects_wrong_types(self):
        options = EditorOptions()
        assert options.set("auto_volume", "yes") is False
        assert options.set("default_transition_duration", True) is False
        assert options.set("default_transition_duration", -1) is False
        assert options.set("default_transition", "") is False
        assert options.auto_volume is False
        assert options.default_transition_duration == 30

    def test_custom_resolution(self):
        options = EditorOptions()
        assert options.set("export_resolution", {"width": 2720, "height": 1530}) is True
        assert options.set("export_resolution", {"width": 0, "height": 1530}) is False
        assert options.export_resolution == {"width": 2720, "height": 1530}

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        options = EditorOptions(lut_selection="Vintage", noise_gate_eq=True)

        assert save_options(options, path) == path
        loaded = load_options(path)

        assert loaded == options
        assert json.loads(path.read_text(encoding="utf-8"))["lut_selection"] == "Vintage"

    def test_load_keeps_defaults_for_bad_entries(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"lut_selection": "Sepia", "show_tooltips": False}), encoding="utf-8")

        loaded = EditorOptions.load(path)

        assert loaded.lut_selection == "Default"
        assert loaded.show_tooltips is False

    def test_load_errors(self, tmp_path):
        with pytest.raises(ConfigurationError):
            EditorOptions.load(tmp_path / "missing.json")

        empty = tmp_path / "empty.json"
        empty.write_text("  ", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            EditorOptions.load(empty)

        not_object = tmp_path / "list.json"
        not_object.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            EditorOptions.load(not_object)

    def test_load_options_falls_back_to_defaults(self, tmp_path, caplog):
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")

        assert load_options(tmp_path / "missing.json") == EditorOptions()
        assert load_options(broken) == EditorOptions()
        assert any(r.levelno == logging.WARNING for r in caplog.records)
