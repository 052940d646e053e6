from __future__ import annotations

import pytest

from feedview.core.feed import CardKind, FeedItem
from feedview.exposure.types import ExposureEvent, ExposureEventType
from feedview.playback.coordinator import PlaybackCoordinator
from feedview.playback.mock_backend import MediaLoadError, MockMediaCapability, MockSink
from feedview.playback.types import PlaybackCandidate, ScrollState


def _video(item_id: int, url: str | None = "auto") -> FeedItem:
    if url == "auto":
        url = f"https://media.example.com/{item_id}.mp4"
    return FeedItem(id=item_id, title=f"Video {item_id}", kind=CardKind.VIDEO, media_url=url)


@pytest.fixture
def capability() -> MockMediaCapability:
    return MockMediaCapability()


@pytest.fixture
def coordinator(capability) -> PlaybackCoordinator:
    return PlaybackCoordinator(capability)


def test_bind_and_play_attaches_loads_and_starts(capability, coordinator):
    sink = MockSink("a")

    coordinator.bind_and_play(sink, _video(1))

    assert capability.call_names() == ["attach", "load", "play"]
    assert capability.is_attached_to(sink)
    assert capability.media_ref == "https://media.example.com/1.mp4"
    assert coordinator.binding.sink is sink
    assert coordinator.bound_item_id == 1
    assert coordinator.is_playing()


def test_rebinding_detaches_previous_sink_before_attaching(capability, coordinator):
    sink_a, sink_b = MockSink("a"), MockSink("b")
    coordinator.bind_and_play(sink_a, _video(1))
    capability.calls.clear()

    coordinator.bind_and_play(sink_b, _video(2))

    names = capability.call_names()
    assert names.index("detach") < names.index("attach")
    assert capability.calls[names.index("detach")][1] is sink_a
    assert not capability.is_attached_to(sink_a)
    assert sink_a.capability is None
    assert capability.is_attached_to(sink_b)
    assert coordinator.bound_item_id == 2


def test_item_without_media_only_detaches(capability, coordinator):
    sink_a, sink_b = MockSink("a"), MockSink("b")
    coordinator.bind_and_play(sink_a, _video(1))
    capability.calls.clear()

    coordinator.bind_and_play(sink_b, _video(2, url="   "))

    assert "load" not in capability.call_names()
    assert "attach" not in capability.call_names()
    assert capability.sink is None
    assert not coordinator.binding.is_bound


def test_item_without_media_and_nothing_bound_is_a_no_op(capability, coordinator):
    coordinator.bind_and_play(MockSink("a"), _video(1, url=None))

    assert capability.calls == []
    assert not coordinator.binding.is_bound


def test_toggle_on_bound_pair_flips_without_reload(capability, coordinator):
    sink = MockSink("a")
    item = _video(1)
    coordinator.bind_and_play(sink, item)
    capability.advance(3.0)
    capability.calls.clear()

    coordinator.toggle_play(sink, item)
    assert not coordinator.is_playing()
    coordinator.toggle_play(sink, item)

    assert capability.call_names() == ["pause", "play"]
    assert capability.position_seconds == 3.0
    assert coordinator.is_playing()


def test_toggle_on_other_pair_restarts_like_bind_and_play(capability, coordinator):
    sink_a, sink_b = MockSink("a"), MockSink("b")
    coordinator.bind_and_play(sink_a, _video(1))
    capability.advance(5.0)
    capability.calls.clear()

    coordinator.toggle_play(sink_b, _video(2))

    assert capability.call_names() == ["pause", "detach", "attach", "load", "play"]
    assert capability.position_seconds == 0.0
    assert coordinator.bound_item_id == 2


def test_toggle_same_sink_different_item_reloads(capability, coordinator):
    sink = MockSink("a")
    coordinator.bind_and_play(sink, _video(1))
    capability.calls.clear()

    coordinator.toggle_play(sink, _video(7))

    assert "load" in capability.call_names()
    assert coordinator.bound_item_id == 7
    assert capability.is_attached_to(sink)


def test_pause_keeps_binding(capability, coordinator):
    sink = MockSink("a")
    coordinator.bind_and_play(sink, _video(1))

    coordinator.pause()

    assert not coordinator.is_playing()
    assert coordinator.is_bound_to(sink)


def test_pause_if_matching_only_pauses_bound_item(capability, coordinator):
    sink = MockSink("a")
    coordinator.bind_and_play(sink, _video(2))

    assert coordinator.pause_if_matching(1) is False
    assert coordinator.is_playing()

    assert coordinator.pause_if_matching(2) is True
    assert not coordinator.is_playing()


def test_stale_disappear_does_not_pause_newer_binding_on_same_sink(capability, coordinator):
    sink = MockSink("reused")
    coordinator.bind_and_play(sink, _video(1))
    coordinator.bind_and_play(sink, _video(2))

    coordinator.on_exposure_event(ExposureEvent(1, ExposureEventType.DISAPPEAR, 0.0))

    assert coordinator.is_playing()


def test_disappear_of_bound_item_always_pauses(capability, coordinator):
    coordinator.bind_and_play(MockSink("a"), _video(1))
    coordinator.pause()
    capability.calls.clear()

    coordinator.on_exposure_event(ExposureEvent(1, ExposureEventType.DISAPPEAR, 0.0))

    assert capability.call_names() == ["pause"]


def test_other_exposure_events_do_not_touch_playback(capability, coordinator):
    for kind in (ExposureEventType.ENTER, ExposureEventType.OVER_HALF, ExposureEventType.FULLY_VISIBLE):
        coordinator.on_exposure_event(ExposureEvent(1, kind, 1.0))

    assert capability.calls == []


def test_recycled_bound_sink_is_paused_and_detached(capability, coordinator):
    sink = MockSink("a")
    coordinator.bind_and_play(sink, _video(1))
    capability.calls.clear()

    assert coordinator.on_sink_recycled(MockSink("other")) is False
    assert coordinator.on_sink_recycled(sink) is True

    assert capability.call_names() == ["pause", "detach"]
    assert not coordinator.binding.is_bound
    assert not capability.is_attached_to(sink)


def test_release_tears_down_and_later_calls_are_ignored(capability):
    sink = MockSink("a")
    with PlaybackCoordinator(capability) as coordinator:
        coordinator.bind_and_play(sink, _video(1))

    assert capability.released
    assert coordinator.released
    assert not coordinator.binding.is_bound

    coordinator.release()
    coordinator.bind_and_play(sink, _video(2))
    coordinator.pause()
    coordinator.toggle_play(sink, _video(2))
    assert capability.call_names().count("release") == 1
    assert not coordinator.is_playing()


def test_load_failure_is_reported_unchanged_and_leaves_nothing_bound():
    capability = MockMediaCapability(failing_refs=("bad://clip",))
    coordinator = PlaybackCoordinator(capability)
    sink = MockSink("a")

    with pytest.raises(MediaLoadError):
        coordinator.bind_and_play(sink, _video(1, url="bad://clip"))

    assert not coordinator.binding.is_bound
    assert capability.sink is None
    assert capability.call_names().count("load") == 1

    coordinator.bind_and_play(MockSink("b"), _video(2))
    assert coordinator.bound_item_id == 2


def test_settle_binds_candidate_closest_to_center(capability, coordinator):
    viewport = 1000.0
    sinks = [MockSink(name) for name in ("far", "near", "farther")]
    # centers at distances 40, 5, 90 from the viewport center (500)
    candidates = [
        PlaybackCandidate(sinks[0], _video(1), top=360, bottom=560),
        PlaybackCandidate(sinks[1], _video(2), top=405, bottom=605),
        PlaybackCandidate(sinks[2], _video(3), top=490, bottom=690),
    ]

    coordinator.on_scroll_state_changed(ScrollState.DRAGGING)
    coordinator.on_scroll_state_changed(ScrollState.IDLE, candidates, viewport)

    assert coordinator.bound_item_id == 2
    assert capability.is_attached_to(sinks[1])


def test_select_most_centered_skips_cards_without_media_and_keeps_first_tie():
    sink_a, sink_b, sink_c = MockSink("a"), MockSink("b"), MockSink("c")
    candidates = [
        PlaybackCandidate(sink_a, _video(1, url=None), top=450, bottom=550),
        PlaybackCandidate(sink_b, _video(2), top=300, bottom=500),
        PlaybackCandidate(sink_c, _video(3), top=500, bottom=700),
    ]

    chosen = PlaybackCoordinator.select_most_centered(candidates, 1000)

    assert chosen is candidates[1]
    assert PlaybackCoordinator.select_most_centered([], 1000) is None


def test_scroll_start_pauses_unconditionally(capability, coordinator):
    coordinator.bind_and_play(MockSink("a"), _video(1))

    coordinator.on_scroll_state_changed(ScrollState.DRAGGING)
    assert not coordinator.is_playing()

    coordinator.on_scroll_state_changed(ScrollState.SETTLING)
    assert capability.call_names().count("pause") == 2


def test_settle_resumes_bound_card_in_place(capability, coordinator):
    sink = MockSink("a")
    item = _video(1)
    coordinator.bind_and_play(sink, item)
    capability.advance(2.0)
    coordinator.on_scroll_state_changed(ScrollState.DRAGGING)
    capability.calls.clear()

    coordinator.on_scroll_state_changed(ScrollState.IDLE, [PlaybackCandidate(sink, item, 0, 400)], 400)

    assert capability.call_names() == ["play"]
    assert capability.position_seconds == 2.0


def test_settle_without_autoplay_leaves_playback_alone(capability):
    coordinator = PlaybackCoordinator(capability, autoplay_on_settle=False)
    candidates = [PlaybackCandidate(MockSink("a"), _video(1), 0, 400)]

    coordinator.on_scroll_state_changed(ScrollState.DRAGGING)
    coordinator.on_scroll_state_changed(ScrollState.IDLE, candidates, 400)

    assert not coordinator.binding.is_bound


def test_idle_without_prior_motion_does_not_autoplay(capability, coordinator):
    candidates = [PlaybackCandidate(MockSink("a"), _video(1), 0, 400)]

    coordinator.on_scroll_state_changed(ScrollState.IDLE, candidates, 400)

    assert capability.calls == []


def test_rapid_rebinds_never_attach_two_sinks(capability, coordinator):
    sinks = [MockSink(str(index)) for index in range(5)]
    for round_index in range(3):
        for index, sink in enumerate(sinks):
            coordinator.bind_and_play(sink, _video(index + round_index * 10))

    # MockMediaCapability.attach raises if a second sink is attached
    attached = [sink for sink in sinks if sink.capability is capability]
    assert attached == [sinks[-1]]
