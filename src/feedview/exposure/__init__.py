"""Card exposure tracking.

The public API is re-exported here; see `engine` for the state machine itself.
"""

from __future__ import annotations

from .engine import FULL_THRESHOLD, HALF_THRESHOLD, ExposureEngine, classify, visible_ratio
from .tracker import ExposureTracker
from .types import (
    ExposureDataProvider,
    ExposureEvent,
    ExposureEventType,
    ExposureListener,
    ExposureState,
    GeometrySource,
    SlotGeometry,
    VisibleGeometry,
)

__all__ = [
    "FULL_THRESHOLD",
    "HALF_THRESHOLD",
    "ExposureDataProvider",
    "ExposureEngine",
    "ExposureEvent",
    "ExposureEventType",
    "ExposureListener",
    "ExposureState",
    "ExposureTracker",
    "GeometrySource",
    "SlotGeometry",
    "VisibleGeometry",
    "classify",
    "visible_ratio",
]
