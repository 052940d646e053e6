"""Card binders: one handler set per card kind, looked up by kind."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from feedview.core.feed import CardKind, FeedItem, ItemId
from feedview.playback.coordinator import PlaybackCoordinator

logger = logging.getLogger(__name__)

VIDEO_HINT = "Tap the video to pause or resume"


class VideoSurface:
    """Sink a video card exposes to the shared media capability."""

    def __init__(self, visual_id: int) -> None:
        self.visual_id = visual_id

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"VideoSurface(#{self.visual_id})"


@dataclass
class CardVisual:
    """Headless stand-in for one realized card view."""

    visual_id: int
    kind: CardKind
    title: str = ""
    content: str = ""
    hint: str = ""
    item_id: Optional[ItemId] = None
    position: int = -1
    sink: Optional[VideoSurface] = None
    on_click: Optional[Callable[[], None]] = field(default=None, repr=False)
    on_media_click: Optional[Callable[[], None]] = field(default=None, repr=False)

    def click(self) -> None:
        if self.on_click is not None:
            self.on_click()

    def click_media(self) -> None:
        if self.on_media_click is not None:
            self.on_media_click()

    def clear(self) -> None:
        self.item_id = None
        self.position = -1
        self.on_click = None
        self.on_media_click = None


ItemClickHandler = Callable[[FeedItem, int], None]


class CardBinder:
    kind: CardKind = CardKind.TEXT

    def __init__(self, on_item_click: Optional[ItemClickHandler] = None) -> None:
        self._on_item_click = on_item_click

    def create_visual(self, visual_id: int) -> CardVisual:
        return CardVisual(visual_id=visual_id, kind=self.kind)

    def bind_data(self, visual: CardVisual, item: FeedItem, position: int) -> None:
        visual.item_id = item.id
        visual.position = position
        visual.title = item.title
        visual.content = item.content
        handler = self._on_item_click
        visual.on_click = (lambda: handler(item, position)) if handler else None

    def span_size(self, item: FeedItem) -> int:
        return item.span_size


class TextCardBinder(CardBinder):
    kind = CardKind.TEXT


class ImageTextCardBinder(CardBinder):
    kind = CardKind.IMAGE_TEXT


class VideoCardBinder(CardBinder):
    kind = CardKind.VIDEO

    def __init__(
        self,
        coordinator: PlaybackCoordinator,
        on_item_click: Optional[ItemClickHandler] = None,
    ) -> None:
        super().__init__(on_item_click)
        self._coordinator = coordinator

    def create_visual(self, visual_id: int) -> CardVisual:
        visual = super().create_visual(visual_id)
        visual.sink = VideoSurface(visual_id)
        return visual

    def bind_data(self, visual: CardVisual, item: FeedItem, position: int) -> None:
        super().bind_data(visual, item, position)
        visual.title = f"[Video] {item.title}"
        visual.hint = VIDEO_HINT
        sink = visual.sink
        coordinator = self._coordinator
        visual.on_media_click = lambda: coordinator.toggle_play(sink, item)


def build_binder_table(
    coordinator: PlaybackCoordinator,
    on_item_click: Optional[ItemClickHandler] = None,
) -> Dict[CardKind, CardBinder]:
    return {
        CardKind.TEXT: TextCardBinder(on_item_click),
        CardKind.IMAGE_TEXT: ImageTextCardBinder(on_item_click),
        CardKind.VIDEO: VideoCardBinder(coordinator, on_item_click),
    }


def binder_for(table: Dict[CardKind, CardBinder], kind: CardKind) -> CardBinder:
    binder = table.get(kind)
    if binder is None:
        logger.debug("No binder for %s, falling back to text", kind)
        binder = table[CardKind.TEXT]
    return binder
