"""Shared video playback for feed cards."""

from __future__ import annotations

from .coordinator import PlaybackCoordinator
from .types import MediaCapability, PlaybackBinding, PlaybackCandidate, ScrollState, UNBOUND

__all__ = [
    "MediaCapability",
    "PlaybackBinding",
    "PlaybackCandidate",
    "PlaybackCoordinator",
    "ScrollState",
    "UNBOUND",
]
