"""logic/movement.py — Input-driven movement.

Only the player moves through here; AI agents steer themselves in
``logic.ai``.  Speed depends on the tile the agent currently stands on,
and a step that would leave the map is rejected without touching the
agent.
"""

from __future__ import annotations
import math

from core.ecs import EntityStore
from core.tuning import get as _tun
from core.world_map import Tile, WorldMap
from components import Player, Position


def tile_speed(wm: WorldMap, x: float, y: float) -> float:
    """Base speed (tiles / step) on the tile under (x, y)."""
    if wm.get_tile(x, y) is Tile.WATER:
        return _tun("movement", "water_speed", 0.05)
    return _tun("movement", "land_speed", 0.1)


def move_entity(store: EntityStore, eid: int, dx: float, dy: float,
                sprinting: bool = False) -> bool:
    """Step *eid* along (dx, dy).  True iff the move was applied.

    The direction is normalised first; a zero vector is a zero-length
    step and still counts as applied when the agent is on the map.
    """
    wm = store.res(WorldMap)
    pos = store.get(eid, Position)
    if wm is None or pos is None:
        return False

    length = math.hypot(dx, dy)
    if length > 0:
        dx /= length
        dy /= length

    speed = tile_speed(wm, pos.x, pos.y)
    if sprinting:
        speed *= _tun("movement", "sprint_multiplier", 2.0)

    player = store.get(eid, Player)
    if player is not None:
        player.sprinting = sprinting

    nx = pos.x + dx * speed
    ny = pos.y + dy * speed
    if wm.get_tile(nx, ny) is None:
        return False
    pos.x = nx
    pos.y = ny
    return True
