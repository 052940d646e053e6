"""Feed data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Iterable, List, Optional

ItemId = Hashable

INVALID_ITEM_ID: int = -1


class CardKind(Enum):
    TEXT = "text"
    IMAGE_TEXT = "image_text"
    VIDEO = "video"

    @classmethod
    def from_value(cls, value: object) -> "CardKind":
        if isinstance(value, CardKind):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.TEXT


@dataclass
class FeedItem:
    id: ItemId
    title: str
    content: str = ""
    kind: CardKind = CardKind.TEXT
    media_url: Optional[str] = None
    span_size: int = 1

    @property
    def media_ref(self) -> Optional[str]:
        """Playable media reference, or None when the card has nothing to play."""
        if not self.media_url:
            return None
        ref = str(self.media_url).strip()
        return ref or None

    @property
    def is_video(self) -> bool:
        return self.kind is CardKind.VIDEO

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "kind": self.kind.value,
            "media_url": self.media_url,
            "span_size": self.span_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FeedItem":
        span = data.get("span_size", 1)
        try:
            span_size = max(1, int(span))
        except (TypeError, ValueError):
            span_size = 1
        return cls(
            id=data["id"],
            title=str(data.get("title", "")),
            content=str(data.get("content", "")),
            kind=CardKind.from_value(data.get("kind", CardKind.TEXT.value)),
            media_url=data.get("media_url") or None,
            span_size=span_size,
        )


@dataclass
class FeedModel:
    """Ordered list of cards backing the feed."""

    items: List[FeedItem] = field(default_factory=list)

    def set_items(self, items: Iterable[FeedItem]) -> None:
        self.items = list(items)

    def append_items(self, items: Iterable[FeedItem]) -> int:
        """Append cards and return the position of the first one added."""
        start = len(self.items)
        self.items.extend(items)
        return start

    def remove_at(self, position: int) -> Optional[FeedItem]:
        if 0 <= position < len(self.items):
            return self.items.pop(position)
        return None

    def item_at(self, position: int) -> Optional[FeedItem]:
        if 0 <= position < len(self.items):
            return self.items[position]
        return None

    def count(self) -> int:
        return len(self.items)

    def get_item_id_for_position(self, position: int) -> ItemId:
        item = self.item_at(position)
        return item.id if item is not None else INVALID_ITEM_ID

    def index_of(self, item_id: ItemId) -> int:
        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        return -1

    def item_ids(self) -> List[ItemId]:
        return [item.id for item in self.items]
