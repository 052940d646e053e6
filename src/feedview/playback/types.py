"""Playback type definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

from feedview.core.feed import ItemId


class ScrollState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    SETTLING = "settling"

    @property
    def is_moving(self) -> bool:
        return self is not ScrollState.IDLE


class MediaCapability(Protocol):
    """The one media pipeline instance shared by every video card."""

    def attach(self, sink: Any) -> None: ...

    def detach(self) -> None: ...

    def load(self, media_ref: str) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def is_playing(self) -> bool: ...

    def release(self) -> None: ...


@dataclass(frozen=True)
class PlaybackBinding:
    sink: Any = None
    item_id: Optional[ItemId] = None

    @property
    def is_bound(self) -> bool:
        return self.item_id is not None and self.sink is not None

    def matches(self, sink: Any, item_id: ItemId) -> bool:
        return self.is_bound and self.sink is sink and self.item_id == item_id


UNBOUND = PlaybackBinding()


@dataclass(frozen=True)
class PlaybackCandidate:
    """A realized video card the coordinator may pick on scroll-settle."""

    sink: Any
    item: Any
    top: float
    bottom: float

    @property
    def center(self) -> float:
        return (self.top + self.bottom) / 2.0
