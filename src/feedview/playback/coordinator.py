"""Single shared video player, bound to at most one card at a time."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from feedview.core.feed import FeedItem, ItemId
from feedview.exposure.types import ExposureEvent, ExposureEventType
from feedview.playback.types import (
    UNBOUND,
    MediaCapability,
    PlaybackBinding,
    PlaybackCandidate,
    ScrollState,
)

logger = logging.getLogger(__name__)


class PlaybackCoordinator:
    """Decides which card owns the shared media capability.

    The capability is handed in by the hosting screen and torn down by
    :meth:`release` (or by leaving the ``with`` block). Every attach/detach goes
    through this class so that at most one sink is attached at any time.
    """

    def __init__(self, capability: MediaCapability, *, autoplay_on_settle: bool = True) -> None:
        self._capability = capability
        self._binding: PlaybackBinding = UNBOUND
        self._scroll_state = ScrollState.IDLE
        self._released = False
        self.autoplay_on_settle = autoplay_on_settle

    def __enter__(self) -> "PlaybackCoordinator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def binding(self) -> PlaybackBinding:
        return self._binding

    @property
    def bound_item_id(self) -> Optional[ItemId]:
        return self._binding.item_id

    @property
    def scroll_state(self) -> ScrollState:
        return self._scroll_state

    @property
    def released(self) -> bool:
        return self._released

    def is_bound_to(self, sink: Any) -> bool:
        return self._binding.is_bound and self._binding.sink is sink

    def is_playing(self) -> bool:
        if self._released:
            return False
        return bool(self._capability.is_playing())

    def bind_and_play(self, sink: Any, item: FeedItem) -> None:
        if self._released:
            logger.warning("bind_and_play ignored after release (item=%s)", item.id)
            return
        media_ref = item.media_ref
        if media_ref is None:
            logger.debug("Item %s has no media reference; detaching only", item.id)
            self._unbind(pause=True)
            return

        if self._binding.is_bound and self._binding.sink is not sink:
            self._unbind(pause=True)
        self._capability.attach(sink)
        self._binding = PlaybackBinding(sink=sink, item_id=item.id)
        try:
            self._capability.load(media_ref)
            self._capability.play()
        except Exception:
            logger.exception("PlaybackCoordinator: failed to start item=%s ref=%s", item.id, media_ref)
            self._unbind(pause=False)
            raise
        logger.debug("Bound item=%s to sink=%r", item.id, sink)

    def toggle_play(self, sink: Any, item: FeedItem) -> None:
        if self._released:
            return
        if not self._binding.matches(sink, item.id):
            self.bind_and_play(sink, item)
            return
        if self._capability.is_playing():
            self._capability.pause()
            logger.debug("Paused item=%s", item.id)
        else:
            self._capability.play()
            logger.debug("Resumed item=%s", item.id)

    def pause(self) -> None:
        if self._released:
            return
        self._capability.pause()

    def pause_if_matching(self, item_id: ItemId) -> bool:
        if self._released or not self._binding.is_bound or self._binding.item_id != item_id:
            return False
        self._capability.pause()
        logger.debug("Paused disappearing item=%s", item_id)
        return True

    def on_sink_recycled(self, sink: Any) -> bool:
        if self._released or not self.is_bound_to(sink):
            return False
        logger.debug("Sink for item=%s recycled; unbinding", self._binding.item_id)
        self._unbind(pause=True)
        return True

    def release(self) -> None:
        if self._released:
            return
        self._binding = UNBOUND
        self._released = True
        self._capability.release()
        logger.debug("Media capability released")

    def on_exposure_event(self, event: ExposureEvent) -> None:
        if event.kind is ExposureEventType.DISAPPEAR:
            self.pause_if_matching(event.item_id)

    def on_scroll_state_changed(
        self,
        state: ScrollState,
        candidates: Iterable[PlaybackCandidate] = (),
        viewport_height: float = 0.0,
    ) -> None:
        previous = self._scroll_state
        self._scroll_state = state
        if state.is_moving:
            self.pause()
            return
        if previous.is_moving and self.autoplay_on_settle:
            self.play_most_centered(candidates, viewport_height)

    def play_most_centered(self, candidates: Iterable[PlaybackCandidate], viewport_height: float) -> bool:
        """Bind the card nearest the viewport center; resume in place if it is already bound."""
        if self._released:
            return False
        chosen = self.select_most_centered(candidates, viewport_height)
        if chosen is None:
            return False
        if self._binding.matches(chosen.sink, chosen.item.id):
            if not self._capability.is_playing():
                self._capability.play()
            return True
        self.bind_and_play(chosen.sink, chosen.item)
        return True

    @staticmethod
    def select_most_centered(
        candidates: Iterable[PlaybackCandidate],
        viewport_height: float,
    ) -> Optional[PlaybackCandidate]:
        center = viewport_height / 2.0
        best: Optional[PlaybackCandidate] = None
        best_distance = 0.0
        for candidate in candidates:
            if getattr(candidate.item, "media_ref", None) is None:
                continue
            distance = abs(candidate.center - center)
            if best is None or distance < best_distance:
                best = candidate
                best_distance = distance
        return best

    def _unbind(self, *, pause: bool) -> None:
        if not self._binding.is_bound:
            self._binding = UNBOUND
            return
        if pause:
            self._capability.pause()
        self._capability.detach()
        self._binding = UNBOUND
