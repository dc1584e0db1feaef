from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .logger import get_logger

_logger = get_logger("settings")


def default_settings_path() -> str:
    env = (os.getenv("PNGCROP_SETTINGS") or "").strip()
    if env:
        return env
    return (Path.home() / ".pngcrop" / "settings.json").as_posix()


class SettingsManager:
    def __init__(self, settings_path: str | None = None):
        self.settings_path = settings_path or default_settings_path()
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "background_color": "#000000",
        "crop_step": 1,
        "crop_fast_step": 10,
    }

    def load(self) -> None:
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
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except (OSError, TypeError) as e:
            _logger.error("settings save failed: %s", e)

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

    def _positive_int(self, key: str) -> int:
        value = self.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        _logger.warning("invalid %s in settings: %r", key, value)
        return int(self.DEFAULTS[key])

    @property
    def crop_step(self) -> int:
        return self._positive_int("crop_step")

    @property
    def crop_fast_step(self) -> int:
        return self._positive_int("crop_fast_step")

    @property
    def background_color(self) -> str:
        val = self.get("background_color")
        return val if isinstance(val, str) and val.strip() else str(self.DEFAULTS["background_color"])
