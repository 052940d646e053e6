"""Per-card visibility state machine driven by geometry snapshots.

Every tick classifies each card in the snapshot by the fraction of its height
inside the viewport and emits only the forward crossings since the previous
tick (``ENTER``, ``OVER_HALF``, ``FULLY_VISIBLE``) plus ``DISAPPEAR`` when a
card drops back to nothing. Cards that stop being reported at all are treated
as gone.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

from feedview.core.feed import ItemId
from feedview.exposure.types import (
    ExposureEvent,
    ExposureEventType,
    ExposureListener,
    ExposureState,
    VisibleGeometry,
)

logger = logging.getLogger(__name__)

FULL_THRESHOLD = 0.99
HALF_THRESHOLD = 0.5


def _finite(value: object) -> Optional[float]:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def visible_ratio(top: float, bottom: float, height: float, viewport_height: float) -> float:
    """Fraction of ``height`` that lies within ``[0, viewport_height]``, clamped to [0, 1]."""

    top_v = _finite(top)
    bottom_v = _finite(bottom)
    height_v = _finite(height)
    viewport_v = _finite(viewport_height)
    if top_v is None or bottom_v is None or height_v is None or viewport_v is None:
        return 0.0
    if height_v <= 0:
        return 0.0
    visible = min(bottom_v, viewport_v) - max(top_v, 0.0)
    visible = min(max(visible, 0.0), height_v)
    return visible / height_v


def classify(ratio: float) -> ExposureState:
    if ratio <= 0:
        return ExposureState.NONE
    if ratio >= FULL_THRESHOLD:
        return ExposureState.FULLY_VISIBLE
    if ratio >= HALF_THRESHOLD:
        return ExposureState.HALF_VISIBLE
    return ExposureState.ENTERED


def transition_events(
    item_id: ItemId,
    prev: ExposureState,
    now: ExposureState,
    ratio: float,
) -> List[ExposureEvent]:
    """Events for a single prev -> now step; each rule is checked independently."""

    events: List[ExposureEvent] = []
    if prev is ExposureState.NONE and now is not ExposureState.NONE:
        events.append(ExposureEvent(item_id, ExposureEventType.ENTER, ratio))
    if prev < ExposureState.HALF_VISIBLE <= now:
        events.append(ExposureEvent(item_id, ExposureEventType.OVER_HALF, ratio))
    if prev < ExposureState.FULLY_VISIBLE and now is ExposureState.FULLY_VISIBLE:
        events.append(ExposureEvent(item_id, ExposureEventType.FULLY_VISIBLE, ratio))
    if prev is not ExposureState.NONE and now is ExposureState.NONE:
        events.append(ExposureEvent(item_id, ExposureEventType.DISAPPEAR, 0.0))
    return events


class ExposureEngine:
    """Owns the per-card exposure table; never mutated from outside."""

    def __init__(self, listener: Optional[ExposureListener] = None) -> None:
        self._states: Dict[ItemId, ExposureState] = {}
        self._listener = listener

    def set_listener(self, listener: Optional[ExposureListener]) -> None:
        self._listener = listener

    def state_of(self, item_id: ItemId) -> ExposureState:
        return self._states.get(item_id, ExposureState.NONE)

    def tracked_ids(self) -> List[ItemId]:
        return list(self._states)

    def tick(
        self,
        snapshot: Sequence[VisibleGeometry],
        viewport_height: float,
    ) -> List[ExposureEvent]:
        previous = self._states
        current: Dict[ItemId, ExposureState] = {}
        events: List[ExposureEvent] = []

        for geometry in snapshot:
            ratio = visible_ratio(geometry.top, geometry.bottom, geometry.height, viewport_height)
            now = classify(ratio)
            # a repeated id in one snapshot continues from the state set earlier in this tick
            prev = current.get(geometry.item_id, previous.get(geometry.item_id, ExposureState.NONE))
            events.extend(transition_events(geometry.item_id, prev, now, ratio))
            current[geometry.item_id] = now

        for item_id, prev in previous.items():
            if item_id in current:
                continue
            if prev is not ExposureState.NONE:
                events.append(ExposureEvent(item_id, ExposureEventType.DISAPPEAR, 0.0))
            current[item_id] = ExposureState.NONE

        self._states = current
        for event in events:
            self._dispatch(event)
        return events

    def forget(self, item_id: ItemId) -> None:
        """Drop bookkeeping for a card removed from the data source."""
        self._states.pop(item_id, None)

    def prune(self, valid_ids: Iterable[ItemId]) -> int:
        keep = set(valid_ids)
        stale = [item_id for item_id in self._states if item_id not in keep]
        for item_id in stale:
            del self._states[item_id]
        if stale:
            logger.debug("Pruned %d exposure entries", len(stale))
        return len(stale)

    def reset(self) -> None:
        self._states = {}

    def _dispatch(self, event: ExposureEvent) -> None:
        logger.debug(
            "itemId=%s, event=%s, visibleRatio=%.3f",
            event.item_id,
            event.kind.name,
            event.visible_ratio,
        )
        if self._listener is None:
            return
        try:
            self._listener(event)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Exposure listener failed for item=%s event=%s", event.item_id, event.kind.name)
