"""components.resources — World-level singletons (not per-agent)."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class SimClock:
    """Monotonic simulation time.

    ``tick`` counts completed update passes; ``time`` accumulates the
    frame ``dt`` handed to ``advance`` (seconds, informational only).
    Behaviour is tick-driven, never dt-driven.
    """
    tick: int = 0
    time: float = 0.0


@dataclass
class Camera:
    x: float = 0.0
    y: float = 0.0
