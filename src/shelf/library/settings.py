"""Application settings loaded from JSON files and the environment.

Precedence, lowest to highest: defaults, global settings
(``~/.shelf/settings.json``), project settings (``<cwd>/.shelf/settings.json``),
environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from shelf.editor.editor import EditorOptions
from shelf.editor.keybindings import DEFAULT_MENU_KEYBINDINGS, MenuKeybindingsManager

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".shelf"

DEFAULT_GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1"
DEFAULT_SUMMARY_MODEL = "claude-sonnet-4-20250514"


@dataclass
class Settings:
    """Resolved settings."""

    menu_max_left: float = 100.0
    menu_vertical_offset: float = 24.0
    menu_max_visible: int = 8
    menu_keybindings: dict[str, Any] = field(default_factory=dict)
    search_cache_ttl: float = 300.0
    google_books_url: str = DEFAULT_GOOGLE_BOOKS_URL
    summary_model: str = DEFAULT_SUMMARY_MODEL
    summary_max_tokens: int = 1500

    def editor_options(self) -> EditorOptions:
        return EditorOptions(
            menu_max_left=self.menu_max_left,
            menu_vertical_offset=self.menu_vertical_offset,
            menu_max_visible=self.menu_max_visible,
        )

    def keybindings(self) -> MenuKeybindingsManager:
        return MenuKeybindingsManager(self.menu_keybindings)  # type: ignore[arg-type]


# JSON key -> (attribute, type)
_FIELDS: dict[str, tuple[str, type]] = {
    "menuMaxLeft": ("menu_max_left", float),
    "menuVerticalOffset": ("menu_vertical_offset", float),
    "menuMaxVisible": ("menu_max_visible", int),
    "menuKeybindings": ("menu_keybindings", dict),
    "searchCacheTtl": ("search_cache_ttl", float),
    "googleBooksUrl": ("google_books_url", str),
    "summaryModel": ("summary_model", str),
    "summaryMaxTokens": ("summary_max_tokens", int),
}

_ENV_OVERRIDES: dict[str, str] = {
    "SHELF_SEARCH_CACHE_TTL": "searchCacheTtl",
    "SHELF_GOOGLE_BOOKS_URL": "googleBooksUrl",
    "SHELF_SUMMARY_MODEL": "summaryModel",
}


def _load_from_file(path: str) -> dict[str, Any]:
    """Read a settings file; missing or malformed files yield an empty dict."""
    if not os.path.exists(path):
        return {}
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", path)
        return {}
    return data


def _env_settings(environ: Mapping[str, str]) -> dict[str, Any]:
    return {key: environ[var] for var, key in _ENV_OVERRIDES.items() if environ.get(var)}


def _clean_keybindings(value: dict[str, Any]) -> dict[str, Any]:
    """Keep only known menu actions bound to a key name or a list of them."""
    cleaned: dict[str, Any] = {}
    for action, keys in value.items():
        if action not in DEFAULT_MENU_KEYBINDINGS:
            logger.warning("Ignoring keybinding for unknown menu action %r", action)
            continue
        valid = isinstance(keys, str) or (
            isinstance(keys, list) and all(isinstance(k, str) for k in keys)
        )
        if not valid:
            logger.warning("Ignoring invalid keybinding %s=%r", action, keys)
            continue
        cleaned[action] = keys
    return cleaned


def settings_from_dict(raw: dict[str, Any]) -> Settings:
    """Build :class:`Settings` from camelCase keys, skipping invalid values."""
    settings = Settings()
    for key, value in raw.items():
        spec = _FIELDS.get(key)
        if spec is None or value is None:
            continue
        attr, kind = spec
        try:
            if kind is dict:
                if not isinstance(value, dict):
                    raise TypeError(f"expected an object, got {type(value).__name__}")
                converted: Any = _clean_keybindings(value)
            else:
                converted = kind(value)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid setting %s=%r: %s", key, value, e)
            continue
        setattr(settings, attr, converted)
    return settings


def _default_config_dir() -> str:
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def load_settings(
    cwd: str | None = None,
    config_dir: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load and merge settings from disk and the environment."""
    global_path = os.path.join(config_dir or _default_config_dir(), "settings.json")
    project_path = os.path.join(cwd or os.getcwd(), CONFIG_DIR_NAME, "settings.json")

    merged: dict[str, Any] = {}
    merged.update(_load_from_file(global_path))
    if os.path.abspath(project_path) != os.path.abspath(global_path):
        merged.update(_load_from_file(project_path))
    merged.update(_env_settings(os.environ if environ is None else environ))
    return settings_from_dict(merged)
