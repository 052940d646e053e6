"""Vertical list layout used in place of a real rendering surface."""

from __future__ import annotations

from typing import Callable, List, Tuple

from feedview.core.feed import FeedItem, FeedModel
from feedview.exposure.types import SlotGeometry

FOOTER_HEIGHT = 80


class FeedLayout:
    """Stacks cards top to bottom and reports the slots currently realized.

    A slot is realized while it intersects the viewport extended by
    ``recycle_margin`` on both ends. The optional footer occupies position
    ``model.count()`` and maps to no item.
    """

    def __init__(
        self,
        model: FeedModel,
        height_for: Callable[[FeedItem], float],
        *,
        viewport_height: float,
        recycle_margin: float = 0.0,
        show_footer: bool = False,
    ) -> None:
        self._model = model
        self._height_for = height_for
        self._viewport_height = float(viewport_height)
        self._recycle_margin = max(0.0, float(recycle_margin))
        self.show_footer = show_footer
        self._scroll_offset = 0.0

    @property
    def scroll_offset(self) -> float:
        return self._scroll_offset

    def viewport_height(self) -> float:
        return self._viewport_height

    def set_viewport_height(self, value: float) -> None:
        self._viewport_height = max(0.0, float(value))
        self._clamp()

    def _layout(self) -> List[Tuple[int, float, float]]:
        rows: List[Tuple[int, float, float]] = []
        offset = 0.0
        for position, item in enumerate(self._model.items):
            height = float(self._height_for(item))
            rows.append((position, offset, height))
            offset += max(0.0, height)
        if self.show_footer:
            rows.append((self._model.count(), offset, float(FOOTER_HEIGHT)))
        return rows

    def content_height(self) -> float:
        return sum(max(0.0, height) for _, _, height in self._layout())

    def max_scroll(self) -> float:
        return max(0.0, self.content_height() - self._viewport_height)

    def scroll_by(self, dy: float) -> float:
        """Scroll by ``dy`` pixels (positive moves down the list); returns the applied delta."""
        before = self._scroll_offset
        self._scroll_offset = before + float(dy)
        self._clamp()
        return self._scroll_offset - before

    def scroll_to(self, offset: float) -> None:
        self._scroll_offset = float(offset)
        self._clamp()

    def scroll_to_position(self, position: int) -> None:
        for row_position, top, _ in self._layout():
            if row_position == position:
                self.scroll_to(top)
                return

    def realized_slots(self) -> List[SlotGeometry]:
        low = -self._recycle_margin
        high = self._viewport_height + self._recycle_margin
        slots: List[SlotGeometry] = []
        for position, absolute_top, height in self._layout():
            top = absolute_top - self._scroll_offset
            bottom = top + height
            if bottom <= low or top >= high:
                continue
            slots.append(SlotGeometry(position=position, top=top, bottom=bottom, height=height))
        return slots

    def _clamp(self) -> None:
        self._scroll_offset = min(max(self._scroll_offset, 0.0), self.max_scroll())
