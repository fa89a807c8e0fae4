"""Application settings management.

Loads/saves shortcuts, the last opened file pair, the pending-only
filter and the grid font size from ``~/.transeditor/settings.json``,
falling back to bundled defaults.
"""

from __future__ import annotations

import importlib.resources
import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)

_USER_CONFIG_DIR = Path.home() / ".transeditor"
_USER_SETTINGS_PATH = _USER_CONFIG_DIR / "settings.json"

_loaded: bool = False
_shortcuts: dict[str, str] = {}
_last_paths: dict[str, str] = {}  # "source" / "destination" → file path
_show_pending_only: bool = False
_font_size: int = 0
_translator: str = ""

DEFAULT_FONT_SIZE = 12
MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 48


# Human-readable labels for actions (used in menus and tooltips)
ACTION_LABELS: dict[str, str] = {
    "file_open": "Open Translation Pair",
    "file_reload": "Reload",
    "file_save": "Save",
    "file_quit": "Quit",
    "edit_undo": "Undo",
    "edit_redo": "Redo",
    "op_edit_cell": "Edit Localized Value",
    "op_auto_translate": "Auto Translate",
    "view_pending_only": "Show Pending Only",
}


def _load_defaults() -> dict[str, str]:
    """Load the bundled default shortcuts using importlib.resources.

    Works whether the package is run from source or installed as a wheel.
    """
    try:
        ref = importlib.resources.files("transeditor").joinpath("default_shortcuts.json")
        with importlib.resources.as_file(ref) as p:
            with open(p, encoding="utf-8") as f:
                return json.load(f)
    except (FileNotFoundError, TypeError):
        return {}


def _load_settings() -> dict:
    """Load the user settings file, ignoring a corrupt one."""
    if not _USER_SETTINGS_PATH.exists():
        return {}
    try:
        with open(_USER_SETTINGS_PATH, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", _USER_SETTINGS_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _clamp_font(size: int) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, int(size)))


def _setting(user: dict, key: str, kind, default):
    """Return ``user[key]`` if it has type *kind*, else *default*."""
    if key not in user:
        return default
    value = user[key]
    # bool is an int subclass; a font size of true is still wrong
    if isinstance(value, kind) and not (kind is int and isinstance(value, bool)):
        return value
    log.warning(
        "Ignoring setting %r in %s: expected %s, got %r",
        key, _USER_SETTINGS_PATH, kind.__name__, value,
    )
    return default


def _load() -> None:
    """Load and merge default + user configs."""
    global _shortcuts, _last_paths, _show_pending_only, _font_size, _translator, _loaded
    user = _load_settings()

    # Shortcuts: defaults overlaid with user overrides
    _shortcuts = dict(_load_defaults())
    overrides = _setting(user, "shortcuts", dict, {})
    _shortcuts.update(
        (name, seq) for name, seq in overrides.items() if isinstance(seq, str)
    )

    _last_paths = {"source": "", "destination": ""}
    paths = _setting(user, "last_paths", dict, {})
    for key in ("source", "destination"):
        value = paths.get(key)
        _last_paths[key] = value if isinstance(value, str) else ""

    _show_pending_only = _setting(user, "show_pending_only", bool, False)
    _font_size = _clamp_font(_setting(user, "font_size", int, DEFAULT_FONT_SIZE))
    _translator = _setting(user, "translator", str, "")

    _loaded = True


def _ensure_loaded() -> None:
    if not _loaded:
        _load()


def save_settings() -> None:
    """Persist the current settings to disk."""
    _ensure_loaded()
    _USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = {
        "shortcuts": _shortcuts,
        "last_paths": _last_paths,
        "show_pending_only": _show_pending_only,
        "font_size": _font_size,
        "translator": _translator,
    }
    with open(_USER_SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def reload() -> None:
    """Force re-read of config files."""
    _load()


# ── Shortcuts ───────────────────────────────────────────────────


def get_shortcuts() -> dict[str, str]:
    """Return the full shortcut mapping (cached after first call)."""
    _ensure_loaded()
    return _shortcuts


def get_shortcut(action: str) -> str:
    """Return the key-sequence string for *action*, or empty string."""
    return get_shortcuts().get(action, "")


# ── Last opened pair ────────────────────────────────────────────


def get_last_paths() -> tuple[str, str]:
    """Return ``(source, destination)`` of the last loaded pair ("" if unset)."""
    _ensure_loaded()
    return _last_paths["source"], _last_paths["destination"]


def set_last_paths(source: str, destination: str) -> None:
    _ensure_loaded()
    _last_paths["source"] = str(source)
    _last_paths["destination"] = str(destination)


# ── View ────────────────────────────────────────────────────────


def get_show_pending_only() -> bool:
    _ensure_loaded()
    return _show_pending_only


def set_show_pending_only(value: bool) -> None:
    global _show_pending_only
    _ensure_loaded()
    _show_pending_only = bool(value)


def get_font_size() -> int:
    _ensure_loaded()
    return _font_size


def set_font_size(size: int) -> None:
    """Set the grid font size, clamped to the allowed range."""
    global _font_size
    _ensure_loaded()
    _font_size = _clamp_font(size)


# ── Auto-translate ──────────────────────────────────────────────


def get_translator_name() -> str:
    """Return the name of the selected auto-translate hook ("" for none)."""
    _ensure_loaded()
    return _translator


def set_translator_name(name: str) -> None:
    global _translator
    _ensure_loaded()
    _translator = name
