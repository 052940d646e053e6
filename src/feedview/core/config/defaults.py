"""Default configuration values."""

from __future__ import annotations

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "feed": {
        "initial_page_size": 20,
        "more_page_size": 10,
        "refresh_start_id": 1000,
        "cache_enabled": True,
        "cache_file": "feed_cache.yaml",
    },
    "layout": {
        "viewport_height": 800,
        "recycle_margin": 200,
        "card_heights": {
            "text": 160,
            "image_text": 320,
            "video": 420,
        },
    },
    "playback": {
        "autoplay_on_settle": True,
    },
    "diagnostics": {
        "log_level": "WARNING",
        "log_exposure_events": False,
    },
}
