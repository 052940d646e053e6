"""Simulated server-side feed source."""

from __future__ import annotations

import logging
from typing import List

from feedview.core.feed import CardKind, FeedItem

logger = logging.getLogger(__name__)

_KIND_CYCLE = (CardKind.TEXT, CardKind.IMAGE_TEXT, CardKind.VIDEO)
_SAMPLE_MEDIA_URL = "https://media.example.com/feed/{item_id}.mp4"


class FeedRepository:
    """Generates deterministic pages of cards; stands in for a network client."""

    def __init__(
        self,
        *,
        initial_page_size: int = 20,
        more_page_size: int = 10,
        refresh_start_id: int = 1000,
    ) -> None:
        self._initial_page_size = initial_page_size
        self._more_page_size = more_page_size
        self._refresh_start_id = refresh_start_id

    @classmethod
    def from_settings(cls, settings) -> "FeedRepository":
        return cls(
            initial_page_size=settings.get_initial_page_size(),
            more_page_size=settings.get_more_page_size(),
            refresh_start_id=settings.get_refresh_start_id(),
        )

    def load_initial(self) -> List[FeedItem]:
        return self._generate(0, self._initial_page_size)

    def refresh(self) -> List[FeedItem]:
        return self._generate(self._refresh_start_id, self._initial_page_size)

    def load_more(self, offset: int) -> List[FeedItem]:
        return self._generate(max(0, offset), self._more_page_size)

    def _generate(self, start_id: int, count: int) -> List[FeedItem]:
        items: List[FeedItem] = []
        for index in range(count):
            item_id = start_id + index
            kind = _KIND_CYCLE[item_id % len(_KIND_CYCLE)]
            items.append(
                FeedItem(
                    id=item_id,
                    title=f"Title {item_id}",
                    content=f"Feed summary for item {item_id}",
                    kind=kind,
                    media_url=_SAMPLE_MEDIA_URL.format(item_id=item_id) if kind is CardKind.VIDEO else None,
                    span_size=2 if kind is CardKind.VIDEO else 1,
                )
            )
        logger.debug("Generated %d feed items starting at id=%s", count, start_id)
        return items
