"""Mock media backend used by tests and the headless demo."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

logger = logging.getLogger(__name__)


class MediaLoadError(RuntimeError):
    """Raised by the mock when asked to load a reference marked as broken."""


class MockSink:
    """Stand-in video surface that remembers which capability renders into it."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.capability: Optional["MockMediaCapability"] = None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"MockSink({self.name!r})"


class MockMediaCapability:
    """Single-instance player stand-in that records every call it receives."""

    def __init__(self, *, failing_refs: Tuple[str, ...] = ()) -> None:
        self.sink: Any = None
        self.media_ref: Optional[str] = None
        self.position_seconds: float = 0.0
        self.released = False
        self.calls: List[Tuple[str, Any]] = []
        self._playing = False
        self._failing_refs = set(failing_refs)

    def attach(self, sink: Any) -> None:
        self._ensure_alive()
        if self.sink is not None and self.sink is not sink:
            raise AssertionError(f"attach({sink!r}) while still attached to {self.sink!r}")
        self.calls.append(("attach", sink))
        self.sink = sink
        if isinstance(sink, MockSink):
            sink.capability = self
        logger.info("[MOCK] Attach to %s", sink)

    def detach(self) -> None:
        self._ensure_alive()
        self.calls.append(("detach", self.sink))
        if isinstance(self.sink, MockSink):
            self.sink.capability = None
        logger.info("[MOCK] Detach from %s", self.sink)
        self.sink = None

    def load(self, media_ref: str) -> None:
        self._ensure_alive()
        self.calls.append(("load", media_ref))
        self._playing = False
        if media_ref in self._failing_refs:
            raise MediaLoadError(f"cannot open {media_ref}")
        self.media_ref = media_ref
        self.position_seconds = 0.0
        logger.info("[MOCK] Load %s", media_ref)

    def play(self) -> None:
        self._ensure_alive()
        self.calls.append(("play", self.media_ref))
        self._playing = True
        logger.info("[MOCK] Play %s", self.media_ref)

    def pause(self) -> None:
        self._ensure_alive()
        self.calls.append(("pause", self.media_ref))
        if self._playing:
            logger.info("[MOCK] Pause %s at %.1fs", self.media_ref, self.position_seconds)
        self._playing = False

    def is_playing(self) -> bool:
        return self._playing

    def release(self) -> None:
        self.calls.append(("release", None))
        if isinstance(self.sink, MockSink):
            self.sink.capability = None
        self.sink = None
        self.media_ref = None
        self._playing = False
        self.released = True
        logger.info("[MOCK] Released")

    def advance(self, seconds: float) -> None:
        """Simulate elapsed playback time."""
        if self._playing:
            self.position_seconds += max(0.0, seconds)

    def is_attached_to(self, sink: Any) -> bool:
        return self.sink is not None and self.sink is sink

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def _ensure_alive(self) -> None:
        if self.released:
            raise RuntimeError("media capability used after release")
