"""Environment overrides for feedview paths and run modes."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str) -> bool:
    return str(os.environ.get(name, "")).strip().lower() in _TRUTHY


def _env_path(*names: str) -> Optional[Path]:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return Path(value)
    return None


def is_demo_mode() -> bool:
    """True when running the scripted scroll session (logs go to the temp dir)."""

    return env_flag("FEEDVIEW_DEMO")


def resolve_config_path(default_path: Path) -> Path:
    """``FEEDVIEW_CONFIG_PATH`` wins over ``FEEDVIEW_CONFIG_DIR``/settings.yaml."""

    explicit = _env_path("FEEDVIEW_CONFIG_PATH")
    if explicit is not None:
        return explicit
    config_dir = _env_path("FEEDVIEW_CONFIG_DIR")
    if config_dir is not None:
        return config_dir / "settings.yaml"
    return default_path


def resolve_cache_dir(default_path: Path | None = None) -> Path:
    return _env_path("FEEDVIEW_CACHE_DIR") or default_path or Path.cwd() / "cache"


def resolve_log_dir() -> Path:
    """Directory for run logs; ``FEEDVIEW_LOG_DIR`` overrides the cwd/logs default."""

    override = _env_path("FEEDVIEW_LOG_DIR")
    if override is not None:
        return override
    if is_demo_mode():
        return Path(tempfile.gettempdir()) / "feedview_demo_logs"
    return Path.cwd() / "logs"