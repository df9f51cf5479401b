"""components.spatial — Position and heading.

All coordinates are in tiles; an agent stands on tile
``(floor(x), floor(y))``.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Position:
    x: float = 0.0        # tiles
    y: float = 0.0        # tiles


@dataclass
class Heading:
    """Direction of travel in radians (0 = +x, π/2 = +y)."""
    angle: float = 0.0
