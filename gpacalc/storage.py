"""
Persistent storage for the application state.

Two entries live in a key-value store:

    gpa_calc_save_pref_vanilla   -> JSON bool, "remember my data"
    gpa_calc_state_vanilla_v1    -> JSON snapshot of AppState (only if enabled)

Design rationale:
- the preference is always written, so turning persistence off
  is itself remembered
- the snapshot is removed as soon as persistence is turned off
- reading never crashes the application: a missing or corrupted
  entry silently degrades to the defaults
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

from gpacalc import config
from gpacalc.model import AppState

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def clear(self) -> None: ...


class MemoryStore:
    """In-memory store (tests, throwaway sessions)."""

    def __init__(self, data: Optional[dict[str, str]] = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def clear(self) -> None:
        self.data.clear()


class JsonFileStore:
    """
    Key-value store backed by one JSON object file.

    The whole file is rewritten on every change. An unreadable file
    behaves like an empty store.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        # Use custom path if provided (mainly for tests),
        # otherwise fall back to the per-user data directory
        self.path = Path(path) if path is not None else config.default_store_path()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            logger.debug("Unreadable store file %s, treating as empty", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def clear(self) -> None:
        self._write({})


def default_state(save_settings_enabled: bool = True) -> AppState:
    state = AppState.from_dict(dict(config.DEFAULT_STATE))
    state.save_settings_enabled = save_settings_enabled
    return state


def load_preference(store: KeyValueStore) -> bool:
    """
    Read the "remember my data" flag. Absent or unparsable -> True.
    """
    raw = store.get(config.SAVE_PREF_KEY)
    if raw is None:
        return True
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return True
    return value if isinstance(value, bool) else True


def load_state(store: KeyValueStore, pref_enabled: bool) -> AppState:
    """
    Load the state snapshot.

    Stored fields override the defaults key by key, so fields added
    in newer versions survive older snapshots.
    """
    if not pref_enabled:
        return default_state(save_settings_enabled=False)

    raw = store.get(config.STATE_KEY)
    if raw is None:
        return default_state()

    try:
        parsed: Any = json.loads(raw)
        if not isinstance(parsed, dict):
            raise TypeError("snapshot is not an object")
        merged = {**config.DEFAULT_STATE, **parsed, "saveSettingsEnabled": True}
        return AppState.from_dict(merged)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, OverflowError) as e:
        logger.debug("Corrupted state snapshot, using defaults: %s", e)
        return default_state()


def save_state(store: KeyValueStore, state: AppState) -> None:
    store.set(config.SAVE_PREF_KEY, json.dumps(state.save_settings_enabled))
    if state.save_settings_enabled:
        store.set(config.STATE_KEY, json.dumps(state.to_dict(), ensure_ascii=False))
    else:
        store.remove(config.STATE_KEY)


def clear_all(store: KeyValueStore) -> None:
    store.clear()
    logger.info("Cleared all stored data")
