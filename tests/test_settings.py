from __future__ import annotations

from pathlib import Path

import yaml

from feedview.core.config import DEFAULT_CONFIG, SettingsManager
from feedview.core.feed import CardKind


def test_defaults_when_file_missing(tmp_path):
    manager = SettingsManager(config_path=tmp_path / "settings.yaml")

    assert manager.get_viewport_height() == DEFAULT_CONFIG["layout"]["viewport_height"]
    assert manager.get_autoplay_on_settle() is True
    assert manager.get_card_height(CardKind.VIDEO) == 420
    assert manager.get_diagnostics_log_level() == "WARNING"


def test_user_values_merge_over_defaults(tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text(
        yaml.safe_dump({"layout": {"card_heights": {"video": 500}}, "playback": {"autoplay_on_settle": False}}),
        encoding="utf-8",
    )

    manager = SettingsManager(config_path=config_path)

    assert manager.get_card_height(CardKind.VIDEO) == 500
    assert manager.get_card_height(CardKind.TEXT) == 160
    assert manager.get_autoplay_on_settle() is False
    assert manager.get_recycle_margin() == DEFAULT_CONFIG["layout"]["recycle_margin"]


def test_invalid_values_fall_back_to_defaults(tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "layout": {"viewport_height": "tall", "card_heights": {"text": -3}},
                "diagnostics": {"log_level": "chatty"},
                "feed": {"initial_page_size": 0},
            }
        ),
        encoding="utf-8",
    )

    manager = SettingsManager(config_path=config_path)

    assert manager.get_viewport_height() == DEFAULT_CONFIG["layout"]["viewport_height"]
    assert manager.get_card_height(CardKind.TEXT) == 160
    assert manager.get_diagnostics_log_level() == "WARNING"
    assert manager.get_initial_page_size() == DEFAULT_CONFIG["feed"]["initial_page_size"]


def test_non_mapping_file_is_ignored(tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    manager = SettingsManager(config_path=config_path)

    assert manager.get_raw() == DEFAULT_CONFIG


def test_save_roundtrip(tmp_path):
    config_path = tmp_path / "nested" / "settings.yaml"
    manager = SettingsManager(config_path=config_path)
    manager.set_viewport_height(640)
    manager.set_card_height(CardKind.IMAGE_TEXT, 250)
    manager.set_autoplay_on_settle(False)
    manager.set_diagnostics_log_level("debug")
    manager.save()

    reloaded = SettingsManager(config_path=config_path)

    assert reloaded.get_viewport_height() == 640
    assert reloaded.get_card_height(CardKind.IMAGE_TEXT) == 250
    assert reloaded.get_autoplay_on_settle() is False
    assert reloaded.get_diagnostics_log_level() == "DEBUG"


def test_environment_overrides_config_and_cache_locations(tmp_path, monkeypatch):
    monkeypatch.setenv("FEEDVIEW_CONFIG_DIR", str(tmp_path / "cfg"))
    monkeypatch.setenv("FEEDVIEW_CACHE_DIR", str(tmp_path / "cache"))

    manager = SettingsManager()

    assert manager.config_path == tmp_path / "cfg" / "settings.yaml"
    assert manager.get_cache_path() == tmp_path / "cache" / "feed_cache.yaml"

    monkeypatch.setenv("FEEDVIEW_CONFIG_PATH", str(tmp_path / "explicit.yaml"))
    assert SettingsManager().config_path == Path(tmp_path / "explicit.yaml")
