"""Entry point: runs the feed screen headlessly through a scripted scroll session."""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from feedview.core.config import SettingsManager
from feedview.core.env import resolve_log_dir
from feedview.exposure.types import ExposureEvent
from feedview.playback.mock_backend import MockMediaCapability
from feedview.ui.feed_host import FeedHost


_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# loggers that carry one line per scroll tick when exposure logging is on
_EXPOSURE_LOGGERS = ("feedview.ui.feed_host",)


def _apply_diagnostics(settings: SettingsManager) -> None:
    """Let per-tick exposure lines through even when the root level is quieter."""

    if not settings.get_log_exposure_events():
        return
    for name in _EXPOSURE_LOGGERS:
        target = logging.getLogger(name)
        if target.getEffectiveLevel() > logging.INFO:
            target.setLevel(logging.INFO)


def _open_log_file(level: int) -> Optional[Path]:
    fallback_dir = Path(tempfile.gettempdir()) / "feedview_logs"
    for logs_dir in (resolve_log_dir(), fallback_dir):
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            log_path = logs_dir / f"feedview-{datetime.now():%Y%m%d-%H%M%S}.log"
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError:
            continue
        formatter = logging.Formatter(_LOG_FORMAT)
        file_handler.setFormatter(formatter)
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logging.basicConfig(level=level, handlers=[file_handler, stream_handler])
        if logs_dir == fallback_dir:
            logging.getLogger(__name__).warning("Using fallback log directory %s", logs_dir)
        return log_path
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    return None


def _configure_logging(settings: SettingsManager) -> Optional[Path]:
    level_name = (os.environ.get("LOGLEVEL") or settings.get_diagnostics_log_level()).upper()
    level = getattr(logging, level_name, logging.WARNING)
    log_path = _open_log_file(level)
    _apply_diagnostics(settings)
    if log_path is not None:
        logging.getLogger(__name__).info("Writing log to %s", log_path)
    return log_path


def _print_event(event: ExposureEvent) -> None:
    print(f"  {event.kind.name:<14} item={event.item_id} ratio={event.visible_ratio:.2f}")


def _print_playback(host: FeedHost) -> None:
    binding = host.coordinator.binding
    state = "playing" if host.coordinator.is_playing() else "paused"
    if binding.is_bound:
        print(f"  -> video item={binding.item_id} {state}")
    else:
        print("  -> no video bound")


def run_demo(host: FeedHost, steps: int = 6, step_pixels: float = 350.0) -> None:
    print("start")
    host.start()
    _print_playback(host)
    for index in range(steps):
        print(f"scroll #{index + 1} by {step_pixels:.0f}px")
        host.scroll_by(step_pixels)
        host.settle()
        _print_playback(host)
    print("back to top")
    host.fling(-host.layout.scroll_offset)
    _print_playback(host)


def run() -> None:
    settings = SettingsManager()
    _configure_logging(settings)
    logger = logging.getLogger(__name__)
    logger.debug(
        "Settings: viewport=%s autoplay_on_settle=%s cache=%s env.LOGLEVEL=%s",
        settings.get_viewport_height(),
        settings.get_autoplay_on_settle(),
        settings.get_cache_path() if settings.get_cache_enabled() else None,
        os.environ.get("LOGLEVEL"),
    )
    with FeedHost(settings, MockMediaCapability(), exposure_listener=_print_event) as host:
        run_demo(host)


if __name__ == "__main__":
    run()
