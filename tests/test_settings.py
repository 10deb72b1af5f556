"""Tests for shelf.library.settings."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from shelf.library.settings import (
    DEFAULT_GOOGLE_BOOKS_URL,
    Settings,
    load_settings,
    settings_from_dict,
)


def _write(directory: Path, data: object) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "settings.json").write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def dirs(tmp_path: Path) -> tuple[Path, Path]:
    config_dir = tmp_path / "home" / ".shelf"
    project = tmp_path / "project"
    project.mkdir()
    return config_dir, project


class TestSettingsFromDict:
    def test_defaults(self) -> None:
        settings = settings_from_dict({})
        assert settings == Settings()
        assert settings.search_cache_ttl == 300.0
        assert settings.google_books_url == DEFAULT_GOOGLE_BOOKS_URL

    def test_camel_case_keys(self) -> None:
        settings = settings_from_dict({"menuMaxLeft": 60, "summaryMaxTokens": "900"})
        assert settings.menu_max_left == 60.0
        assert settings.summary_max_tokens == 900

    def test_invalid_values_are_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = settings_from_dict({"menuMaxVisible": "lots", "menuKeybindings": ["enter"]})
        assert settings.menu_max_visible == 8
        assert settings.menu_keybindings == {}
        assert "Ignoring invalid setting" in caplog.text

    def test_unknown_keys_are_ignored(self) -> None:
        assert settings_from_dict({"theme": "dark"}) == Settings()

    def test_editor_options_are_clamped(self) -> None:
        options = settings_from_dict({"menuMaxVisible": 99, "menuVerticalOffset": 10}).editor_options()
        assert options.menu_max_visible == 20
        assert options.menu_vertical_offset == 10.0

    def test_keybindings_from_settings(self) -> None:
        settings = settings_from_dict({"menuKeybindings": {"selectCancel": "ctrl+c"}})
        keys = settings.keybindings()
        assert keys.matches("Ctrl+C", "selectCancel")
        assert not keys.matches("Escape", "selectCancel")

    def test_unknown_keybinding_action_is_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = settings_from_dict(
            {"menuKeybindings": {"jumpAround": "ctrl+j", "selectUp": 5, "selectDown": ["ctrl+n"]}}
        )
        assert settings.menu_keybindings == {"selectDown": ["ctrl+n"]}
        keys = settings.keybindings()
        assert keys.matches("Ctrl+N", "selectDown")
        assert keys.matches("ArrowUp", "selectUp")
        assert "unknown menu action 'jumpAround'" in caplog.text


class TestLoadSettings:
    def test_no_files(self, dirs: tuple[Path, Path]) -> None:
        config_dir, project = dirs
        settings = load_settings(cwd=str(project), config_dir=str(config_dir), environ={})
        assert settings == Settings()

    def test_project_overrides_global(self, dirs: tuple[Path, Path]) -> None:
        config_dir, project = dirs
        _write(config_dir, {"menuMaxLeft": 80, "summaryModel": "global-model"})
        _write(project / ".shelf", {"menuMaxLeft": 120})

        settings = load_settings(cwd=str(project), config_dir=str(config_dir), environ={})
        assert settings.menu_max_left == 120.0
        assert settings.summary_model == "global-model"

    def test_environment_overrides_files(self, dirs: tuple[Path, Path]) -> None:
        config_dir, project = dirs
        _write(project / ".shelf", {"searchCacheTtl": 10, "summaryModel": "file-model"})
        environ = {"SHELF_SEARCH_CACHE_TTL": "60", "SHELF_SUMMARY_MODEL": "env-model"}

        settings = load_settings(cwd=str(project), config_dir=str(config_dir), environ=environ)
        assert settings.search_cache_ttl == 60.0
        assert settings.summary_model == "env-model"

    def test_empty_environment_value_is_ignored(self, dirs: tuple[Path, Path]) -> None:
        config_dir, project = dirs
        settings = load_settings(
            cwd=str(project), config_dir=str(config_dir), environ={"SHELF_GOOGLE_BOOKS_URL": ""}
        )
        assert settings.google_books_url == DEFAULT_GOOGLE_BOOKS_URL

    def test_malformed_file_is_ignored(self, dirs: tuple[Path, Path], caplog: pytest.LogCaptureFixture) -> None:
        config_dir, project = dirs
        config_dir.mkdir(parents=True)
        (config_dir / "settings.json").write_text("{not json", encoding="utf-8")
        _write(project / ".shelf", ["not", "an", "object"])

        settings = load_settings(cwd=str(project), config_dir=str(config_dir), environ={})
        assert settings == Settings()
        assert "Ignoring" in caplog.text

    def test_same_directory_read_once(self, tmp_path: Path) -> None:
        _write(tmp_path / ".shelf", {"menuMaxVisible": 5})
        settings = load_settings(
            cwd=str(tmp_path), config_dir=os.path.join(str(tmp_path), ".shelf"), environ={}
        )
        assert settings.menu_max_visible == 5
