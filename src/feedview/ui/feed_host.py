"""Feed screen host: wires layout, exposure tracking and shared playback."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from feedview.core.config import SettingsManager
from feedview.core.feed import CardKind, FeedItem, FeedModel, ItemId
from feedview.core.feed_cache import FeedCache
from feedview.core.feed_repository import FeedRepository
from feedview.exposure.tracker import ExposureTracker
from feedview.exposure.types import ExposureEvent, ExposureListener
from feedview.playback.coordinator import PlaybackCoordinator
from feedview.playback.types import MediaCapability, PlaybackCandidate, ScrollState
from feedview.ui.cards import CardVisual, ItemClickHandler, binder_for, build_binder_table
from feedview.ui.layout import FeedLayout

logger = logging.getLogger(__name__)


class FeedHost:
    """Plays the role of the feed screen for the core components.

    Realized slots get a visual from a per-kind pool; a visual whose slot goes
    off screen is returned to the pool and reused for a different card, which is
    when the coordinator has to let go of its sink.
    """

    def __init__(
        self,
        settings: SettingsManager,
        capability: MediaCapability,
        *,
        repository: Optional[FeedRepository] = None,
        cache: Optional[FeedCache] = None,
        exposure_listener: Optional[ExposureListener] = None,
        on_item_click: Optional[ItemClickHandler] = None,
    ) -> None:
        self._settings = settings
        self._repository = repository or FeedRepository.from_settings(settings)
        self._cache = cache
        if self._cache is None and settings.get_cache_enabled():
            self._cache = FeedCache(settings.get_cache_path())
        self._exposure_listener = exposure_listener
        self._log_exposure = settings.get_log_exposure_events()

        self.model = FeedModel()
        self.layout = FeedLayout(
            self.model,
            lambda item: settings.get_card_height(item.kind),
            viewport_height=settings.get_viewport_height(),
            recycle_margin=settings.get_recycle_margin(),
            show_footer=True,
        )
        self.coordinator = PlaybackCoordinator(
            capability,
            autoplay_on_settle=settings.get_autoplay_on_settle(),
        )
        self.tracker = ExposureTracker(self.layout, self.model, self._handle_exposure_event)
        self._binders = build_binder_table(self.coordinator, on_item_click)
        self._visuals: Dict[ItemId, CardVisual] = {}
        self._pool: Dict[CardKind, List[CardVisual]] = {}
        self._next_visual_id = 0
        self._scroll_state = ScrollState.IDLE
        self._destroyed = False

    def __enter__(self) -> "FeedHost":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.on_destroy()

    @property
    def scroll_state(self) -> ScrollState:
        return self._scroll_state

    # lifecycle

    def start(self) -> None:
        items: List[FeedItem] = self._cache.load() if self._cache is not None else []
        if items:
            logger.info("Starting from cached feed (%d items)", len(items))
        else:
            items = self._repository.load_initial()
            self._save_cache(items)
        self._replace_items(items)
        if self.coordinator.autoplay_on_settle:
            self.coordinator.play_most_centered(self.playback_candidates(), self.layout.viewport_height())

    def refresh(self) -> None:
        items = self._repository.refresh()
        self._replace_items(items)
        self._save_cache(items)

    def load_more(self) -> int:
        next_id = max((item.id for item in self.model.items if isinstance(item.id, int)), default=-1) + 1
        items = self._repository.load_more(next_id)
        start = self.model.append_items(items)
        self._after_data_change()
        self._save_cache(self.model.items)
        return start

    def remove_item(self, position: int) -> Optional[FeedItem]:
        removed = self.model.remove_at(position)
        if removed is None:
            return None
        self._after_data_change()
        self.tracker.engine.forget(removed.id)
        self._save_cache(self.model.items)
        return removed

    def on_pause(self) -> None:
        self.coordinator.pause()

    def on_destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        for item_id in list(self._visuals):
            self._recycle(item_id)
        self.coordinator.release()

    # scroll signals

    def scroll_by(self, dy: float) -> float:
        if not self._scroll_state.is_moving:
            self.set_scroll_state(ScrollState.DRAGGING)
        applied = self.layout.scroll_by(dy)
        self._sync_visuals()
        self.tracker.check_exposure()
        return applied

    def fling(self, dy: float) -> float:
        self.set_scroll_state(ScrollState.SETTLING)
        applied = self.layout.scroll_by(dy)
        self._sync_visuals()
        self.tracker.check_exposure()
        self.set_scroll_state(ScrollState.IDLE)
        return applied

    def settle(self) -> None:
        self.set_scroll_state(ScrollState.IDLE)

    def set_scroll_state(self, state: ScrollState) -> None:
        if state is self._scroll_state:
            return
        self._scroll_state = state
        self.coordinator.on_scroll_state_changed(
            state,
            self.playback_candidates(),
            self.layout.viewport_height(),
        )

    # queries and input

    def visual_at(self, position: int) -> Optional[CardVisual]:
        item = self.model.item_at(position)
        if item is None:
            return None
        return self._visuals.get(item.id)

    def realized_visuals(self) -> List[CardVisual]:
        return sorted(self._visuals.values(), key=lambda visual: visual.position)

    def playback_candidates(self) -> List[PlaybackCandidate]:
        candidates: List[PlaybackCandidate] = []
        for slot in self.layout.realized_slots():
            item = self.model.item_at(slot.position)
            if item is None or not item.is_video:
                continue
            visual = self._visuals.get(item.id)
            if visual is None or visual.sink is None:
                continue
            candidates.append(PlaybackCandidate(visual.sink, item, slot.top, slot.bottom))
        return candidates

    def click(self, position: int) -> None:
        visual = self.visual_at(position)
        if visual is not None:
            visual.click()

    def click_media(self, position: int) -> None:
        visual = self.visual_at(position)
        if visual is not None:
            visual.click_media()

    def span_size_for_position(self, position: int) -> int:
        item = self.model.item_at(position)
        if item is None:
            return 1
        return binder_for(self._binders, item.kind).span_size(item)

    # internals

    def _replace_items(self, items: List[FeedItem]) -> None:
        for item_id in list(self._visuals):
            self._recycle(item_id)
        self.model.set_items(items)
        self.layout.scroll_to(0)
        self._after_data_change()
        # old ids got their DISAPPEAR on the tick above
        self.tracker.engine.prune(self.model.item_ids())

    def _after_data_change(self) -> None:
        self._sync_visuals()
        self.tracker.check_exposure()

    def _sync_visuals(self) -> None:
        realized: Dict[ItemId, int] = {}
        for slot in self.layout.realized_slots():
            item = self.model.item_at(slot.position)
            if item is not None:
                realized[item.id] = slot.position
        for item_id in list(self._visuals):
            if item_id not in realized:
                self._recycle(item_id)
        for item_id, position in realized.items():
            item = self.model.items[position]
            visual = self._visuals.get(item_id)
            if visual is None:
                visual = self._obtain(item.kind)
                self._visuals[item_id] = visual
            elif visual.position == position:
                continue
            binder_for(self._binders, item.kind).bind_data(visual, item, position)

    def _obtain(self, kind: CardKind) -> CardVisual:
        pool = self._pool.get(kind)
        if pool:
            return pool.pop()
        visual = binder_for(self._binders, kind).create_visual(self._next_visual_id)
        self._next_visual_id += 1
        return visual

    def _recycle(self, item_id: ItemId) -> None:
        visual = self._visuals.pop(item_id, None)
        if visual is None:
            return
        if visual.sink is not None:
            self.coordinator.on_sink_recycled(visual.sink)
        visual.clear()
        self._pool.setdefault(visual.kind, []).append(visual)

    def _handle_exposure_event(self, event: ExposureEvent) -> None:
        if self._log_exposure:
            logger.info("Exposure %s item=%s ratio=%.2f", event.kind.name, event.item_id, event.visible_ratio)
        self.coordinator.on_exposure_event(event)
        if self._exposure_listener is not None:
            self._exposure_listener(event)

    def _save_cache(self, items: List[FeedItem]) -> None:
        if self._cache is not None:
            self._cache.save(items)

