"""Local snapshot of the feed list, stored as YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

import yaml

from feedview.core.feed import FeedItem

logger = logging.getLogger(__name__)


class FeedCache:
    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, items: Sequence[FeedItem]) -> None:
        """Persist the list; an empty list clears the snapshot instead."""
        if not items:
            logger.debug("save: empty list, clearing cache")
            self.clear()
            return
        payload = [item.to_dict() for item in items]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as file:
                yaml.safe_dump(payload, file, allow_unicode=True, sort_keys=False)
        except OSError as exc:
            logger.error("save: failed to write %s: %s", self._path, exc)
            return
        logger.debug("save: cache saved, size=%d", len(payload))

    def load(self) -> List[FeedItem]:
        if not self._path.exists():
            logger.debug("load: no cache")
            return []
        try:
            with self._path.open("r", encoding="utf-8") as file:
                payload = yaml.safe_load(file)
            if not payload:
                return []
            if not isinstance(payload, list):
                raise ValueError("cache payload is not a list")
            items = [FeedItem.from_dict(entry) for entry in payload]
        except (OSError, yaml.YAMLError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("load: unreadable cache %s, clearing: %s", self._path, exc)
            self.clear()
            return []
        logger.debug("load: loaded cache, size=%d", len(items))
        return items

    def has_cache(self) -> bool:
        try:
            return self._path.exists() and self._path.stat().st_size > 0
        except OSError:
            return False

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("clear: failed to remove %s: %s", self._path, exc)
