"""Glue between the layout surface and the exposure engine."""

from __future__ import annotations

import logging
from typing import List, Optional

from feedview.core.feed import INVALID_ITEM_ID
from feedview.exposure.engine import ExposureEngine
from feedview.exposure.types import (
    ExposureDataProvider,
    ExposureEvent,
    ExposureListener,
    GeometrySource,
    SlotGeometry,
    VisibleGeometry,
)

logger = logging.getLogger(__name__)


class ExposureTracker:
    """Turns realized slots into a geometry snapshot and feeds the engine.

    The host calls :meth:`check_exposure` on every scrolled tick and once after
    the first layout pass.
    """

    def __init__(
        self,
        geometry_source: GeometrySource,
        data_provider: ExposureDataProvider,
        listener: Optional[ExposureListener] = None,
        *,
        engine: Optional[ExposureEngine] = None,
    ) -> None:
        self._geometry_source = geometry_source
        self._data_provider = data_provider
        self._engine = engine or ExposureEngine()
        if listener is not None:
            self._engine.set_listener(listener)

    @property
    def engine(self) -> ExposureEngine:
        return self._engine

    def snapshot(self, slots: Optional[List[SlotGeometry]] = None) -> List[VisibleGeometry]:
        if slots is None:
            slots = self._geometry_source.realized_slots()
        geometry: List[VisibleGeometry] = []
        for slot in slots:
            if slot.position < 0:
                continue
            item_id = self._data_provider.get_item_id_for_position(slot.position)
            if item_id == INVALID_ITEM_ID:
                continue
            geometry.append(VisibleGeometry(item_id, slot.top, slot.bottom, slot.height))
        return geometry

    def check_exposure(self) -> List[ExposureEvent]:
        viewport_height = self._geometry_source.viewport_height()
        slots = self._geometry_source.realized_slots()
        if not slots or viewport_height <= 0:
            logger.debug("Skipping exposure pass (slots=%d viewport=%s)", len(slots), viewport_height)
            return []
        return self._engine.tick(self.snapshot(slots), viewport_height)
