"""logic/ai/steering.py — AI movement helpers.

Position-producing functions shared by the species updates: stepping
along a heading, clamping to the map margin, heading toward a point and
the escape-angle ladder fleeing prey falls back on when blocked.

All helpers only commit a move that lands on an in-bounds tile, so an
agent's position always maps to a tile.
"""

from __future__ import annotations
import math

from core.world_map import WorldMap

# Alternate headings tried, in order, when the direct flee step is blocked.
ESCAPE_OFFSETS = (
    math.pi / 6, -math.pi / 6,
    math.pi / 4, -math.pi / 4,
    math.pi / 3, -math.pi / 3,
    math.pi / 2, -math.pi / 2,
)

TAU = math.pi * 2


def step(pos, angle: float, speed: float) -> tuple[float, float]:
    """Point *speed* tiles from *pos* along *angle*."""
    return pos.x + math.cos(angle) * speed, pos.y + math.sin(angle) * speed


def clamp_to_margin(wm: WorldMap, x: float, y: float,
                    margin: float) -> tuple[float, float]:
    """Keep (x, y) at least *margin* tiles inside the map edge."""
    x = max(margin, min(wm.width - margin, x))
    y = max(margin, min(wm.height - margin, y))
    return x, y


def try_move(wm: WorldMap, pos, nx: float, ny: float) -> bool:
    """Move *pos* to (nx, ny) if that is on the map."""
    if wm.get_tile(nx, ny) is None:
        return False
    pos.x = nx
    pos.y = ny
    return True


def heading_to(pos, tx: float, ty: float) -> float:
    return math.atan2(ty - pos.y, tx - pos.x)


def move_toward(wm: WorldMap, pos, heading, tx: float, ty: float,
                speed: float) -> bool:
    """Turn *heading* toward (tx, ty) and take one in-bounds step."""
    heading.angle = heading_to(pos, tx, ty)
    nx, ny = step(pos, heading.angle, speed)
    return try_move(wm, pos, nx, ny)


def random_heading(r) -> float:
    return r.random() * TAU
