"""Application configuration management module."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from .defaults import DEFAULT_CONFIG
from .merge import deep_merge
from feedview.core.env import resolve_cache_dir, resolve_config_path
from feedview.core.feed import CardKind

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _as_positive_int(value: Any, fallback: int, *, minimum: int = 1) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    return number if number >= minimum else fallback


@dataclass
class SettingsManager:
    """YAML backed settings with defaults merged underneath user values."""

    config_path: Path = Path("config/settings.yaml")

    def __post_init__(self) -> None:
        self.config_path = resolve_config_path(Path(self.config_path))
        self._data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        user_config: Any = {}
        if self.config_path.exists():
            with self.config_path.open("r", encoding="utf-8") as file:
                user_config = yaml.safe_load(file) or {}
        if not isinstance(user_config, dict):
            user_config = {}
        self._data = deep_merge(DEFAULT_CONFIG, user_config)

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as file:
            yaml.safe_dump(self._data, file, allow_unicode=False, sort_keys=True)

    def get_raw(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    # feed

    def get_initial_page_size(self) -> int:
        feed = self._data.get("feed", {})
        return _as_positive_int(feed.get("initial_page_size"), DEFAULT_CONFIG["feed"]["initial_page_size"])

    def get_more_page_size(self) -> int:
        feed = self._data.get("feed", {})
        return _as_positive_int(feed.get("more_page_size"), DEFAULT_CONFIG["feed"]["more_page_size"])

    def get_refresh_start_id(self) -> int:
        feed = self._data.get("feed", {})
        return _as_positive_int(
            feed.get("refresh_start_id"), DEFAULT_CONFIG["feed"]["refresh_start_id"], minimum=0
        )

    def get_cache_enabled(self) -> bool:
        feed = self._data.get("feed", {})
        return bool(feed.get("cache_enabled", DEFAULT_CONFIG["feed"]["cache_enabled"]))

    def set_cache_enabled(self, enabled: bool) -> None:
        feed = self._data.setdefault("feed", {})
        feed["cache_enabled"] = bool(enabled)

    def get_cache_path(self) -> Path:
        feed = self._data.get("feed", {})
        name = str(feed.get("cache_file") or DEFAULT_CONFIG["feed"]["cache_file"])
        path = Path(name)
        if path.is_absolute():
            return path
        return resolve_cache_dir() / path

    # layout

    def get_viewport_height(self) -> int:
        layout = self._data.get("layout", {})
        return _as_positive_int(layout.get("viewport_height"), DEFAULT_CONFIG["layout"]["viewport_height"])

    def set_viewport_height(self, value: int) -> None:
        layout = self._data.setdefault("layout", {})
        layout["viewport_height"] = max(1, int(value))

    def get_recycle_margin(self) -> int:
        layout = self._data.get("layout", {})
        return _as_positive_int(
            layout.get("recycle_margin"), DEFAULT_CONFIG["layout"]["recycle_margin"], minimum=0
        )

    def get_card_height(self, kind: CardKind) -> int:
        defaults = DEFAULT_CONFIG["layout"]["card_heights"]
        heights = self._data.get("layout", {}).get("card_heights", {})
        if not isinstance(heights, dict):
            heights = {}
        fallback = defaults.get(kind.value, defaults[CardKind.TEXT.value])
        return _as_positive_int(heights.get(kind.value), fallback)

    def set_card_height(self, kind: CardKind, value: int) -> None:
        layout = self._data.setdefault("layout", {})
        heights = layout.setdefault("card_heights", {})
        heights[kind.value] = max(1, int(value))

    # playback

    def get_autoplay_on_settle(self) -> bool:
        playback = self._data.get("playback", {})
        return bool(playback.get("autoplay_on_settle", DEFAULT_CONFIG["playback"]["autoplay_on_settle"]))

    def set_autoplay_on_settle(self, enabled: bool) -> None:
        playback = self._data.setdefault("playback", {})
        playback["autoplay_on_settle"] = bool(enabled)

    # diagnostics

    def get_diagnostics_log_level(self) -> str:
        diagnostics = self._data.get("diagnostics", {})
        level = str(diagnostics.get("log_level", DEFAULT_CONFIG["diagnostics"]["log_level"])).upper()
        return level if level in _LOG_LEVELS else DEFAULT_CONFIG["diagnostics"]["log_level"]

    def set_diagnostics_log_level(self, level: str) -> None:
        diagnostics = self._data.setdefault("diagnostics", {})
        diagnostics["log_level"] = str(level).upper()

    def get_log_exposure_events(self) -> bool:
        diagnostics = self._data.get("diagnostics", {})
        return bool(
            diagnostics.get("log_exposure_events", DEFAULT_CONFIG["diagnostics"]["log_exposure_events"])
        )

    def set_log_exposure_events(self, enabled: bool) -> None:
        diagnostics = self._data.setdefault("diagnostics", {})
        diagnostics["log_exposure_events"] = bool(enabled)
