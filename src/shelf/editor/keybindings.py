"""Key bindings for the slash command menu.

Keys are identified by DOM-style names (``ArrowDown``, ``Enter``) with
optional modifiers (``Ctrl+Z``). Comparison ignores case and modifier order.
"""

from __future__ import annotations

from typing import Literal

MenuAction = Literal[
    "selectUp",
    "selectDown",
    "selectConfirm",
    "selectCancel",
    "undo",
]

KeyId = str

MenuKeybindingsConfig = dict[MenuAction, KeyId | list[KeyId]]

DEFAULT_MENU_KEYBINDINGS: dict[MenuAction, KeyId | list[KeyId]] = {
    "selectUp": "arrowup",
    "selectDown": "arrowdown",
    "selectConfirm": ["enter", "tab"],
    "selectCancel": "escape",
    "undo": ["ctrl+z", "meta+z"],
}

_MODIFIERS = ("ctrl", "alt", "shift", "meta")


def normalize_key(key: str) -> str:
    """Lower-case *key* and put its modifiers in a fixed order.

    >>> normalize_key("Z+Ctrl")
    'ctrl+z'
    """
    parts = [p for p in key.lower().split("+") if p]
    if not parts:
        # The "+" key itself
        return "+" if "+" in key else ""
    mods = sorted({p for p in parts if p in _MODIFIERS}, key=_MODIFIERS.index)
    base = [p for p in parts if p not in _MODIFIERS]
    return "+".join(mods + base[-1:])


def matches_key(key: str, key_id: KeyId) -> bool:
    return normalize_key(key) == normalize_key(key_id)


class MenuKeybindingsManager:
    """Maps menu actions to the keys that trigger them."""

    def __init__(self, config: MenuKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[MenuAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: MenuKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_MENU_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = [normalize_key(k) for k in key_array]

        for action, keys in config.items():
            if action not in DEFAULT_MENU_KEYBINDINGS:
                raise ValueError(f"Unknown menu action: {action!r}")
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = [normalize_key(k) for k in key_array]

    def matches(self, key: str, action: MenuAction) -> bool:
        """Check if *key* is bound to *action*."""
        return normalize_key(key) in self._action_to_keys.get(action, [])

    def get_keys(self, action: MenuAction) -> list[KeyId]:
        return list(self._action_to_keys.get(action, []))

    def set_config(self, config: MenuKeybindingsConfig) -> None:
        self._build_maps(config)


_global_menu_keybindings: MenuKeybindingsManager | None = None


def get_menu_keybindings() -> MenuKeybindingsManager:
    global _global_menu_keybindings
    if _global_menu_keybindings is None:
        _global_menu_keybindings = MenuKeybindingsManager()
    return _global_menu_keybindings


def set_menu_keybindings(manager: MenuKeybindingsManager) -> None:
    global _global_menu_keybindings
    _global_menu_keybindings = manager
