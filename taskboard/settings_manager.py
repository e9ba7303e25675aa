from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger

_logger = get_logger("settings")

SEEDED_KEY = "is_seeded"


class SettingsManager:
    """Small JSON-backed preferences file.

    Holds the one-time seeding marker plus a few runtime options. Every `set`
    writes the file back so the marker survives a crash right after seeding.
    """

    def __init__(self, settings_path: str | None):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "data_path": None,
        "scan_enabled": True,
        "nfc_enabled": True,
    }

    def load(self) -> None:
        if not self.settings_path:
            self._settings = {}
            return
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            self._write()
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def _write(self) -> None:
        if not self.settings_path:
            return
        parent = os.path.dirname(self.settings_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.settings_path, "w", encoding="utf-8") as f:
            json.dump(self._settings, f, ensure_ascii=False, indent=2)
        _logger.debug("settings saved: %s", self.settings_path)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def is_seeded(self) -> bool:
        # Presence of the key is the marker, whatever its value
        return self.has(SEEDED_KEY)

    def mark_seeded(self) -> None:
        """Persist the marker; raises OSError and stays unseeded if the write fails."""
        self._settings[SEEDED_KEY] = True
        try:
            self._write()
        except OSError:
            del self._settings[SEEDED_KEY]
            raise

    @property
    def data_path(self) -> str | None:
        val = self.get("data_path")
        return val if isinstance(val, str) and val.strip() else None

    @property
    def scan_enabled(self) -> bool:
        return bool(self.get("scan_enabled", True))

    @property
    def nfc_enabled(self) -> bool:
        return bool(self.get("nfc_enabled", True))
