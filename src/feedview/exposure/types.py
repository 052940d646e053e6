"""Exposure tracking type definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Protocol

from feedview.core.feed import ItemId


class ExposureState(IntEnum):
    """How much of a card is on screen; ordered for threshold comparisons."""

    NONE = 0
    ENTERED = 1
    HALF_VISIBLE = 2
    FULLY_VISIBLE = 3


class ExposureEventType(Enum):
    ENTER = "enter"
    OVER_HALF = "over_half"
    FULLY_VISIBLE = "fully_visible"
    DISAPPEAR = "disappear"


@dataclass(frozen=True)
class ExposureEvent:
    item_id: ItemId
    kind: ExposureEventType
    visible_ratio: float


@dataclass(frozen=True)
class VisibleGeometry:
    """Viewport-relative bounds of one realized card, valid for a single tick."""

    item_id: ItemId
    top: float
    bottom: float
    height: float


@dataclass(frozen=True)
class SlotGeometry:
    """Bounds of one realized slot as reported by the layout surface."""

    position: int
    top: float
    bottom: float
    height: float


ExposureListener = Callable[[ExposureEvent], None]


class ExposureDataProvider(Protocol):
    def get_item_id_for_position(self, position: int) -> ItemId: ...


class GeometrySource(Protocol):
    def viewport_height(self) -> float: ...

    def realized_slots(self) -> list[SlotGeometry]: ...
