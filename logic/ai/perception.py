"""logic/ai/perception.py — Prey search, threat alerts, land search.

Used by the species updates to find and evaluate targets.  Every
function returns ids (or ``None``) and never holds on to components
across ticks.
"""

from __future__ import annotations
import math

from core.constants import PREY_SPECIES
from core.ecs import EntityStore
from core.world_map import Tile, WorldMap
from components import Position, Prey


# ── Targeting ────────────────────────────────────────────────────────

def find_closest_prey(store: EntityStore, eid: int,
                      radius: float = 10.0) -> int | None:
    """Id of the closest fish/pig/cow strictly within *radius* of *eid*."""
    pos = store.get(eid, Position)
    if pos is None:
        return None
    return store.nearest_of_species(pos.x, pos.y, PREY_SPECIES, radius,
                                    exclude=eid)


def live_target(store: EntityStore, target: int | None) -> int | None:
    """*target* if it still exists, else ``None``."""
    return target if store.alive(target) else None


def alert_nearby_prey(store: EntityStore, wolf: int,
                      radius: float = 8.0) -> int:
    """Point every prey within *radius* at *wolf* as its flee target.

    Overwrites whatever threat the prey was fleeing before.  Returns the
    number of prey alerted.
    """
    pos = store.get(wolf, Position)
    if pos is None:
        return 0
    n = 0
    for eid, _, _ in store.nearby(pos.x, pos.y, radius, PREY_SPECIES):
        prey = store.get(eid, Prey)
        if prey is not None:
            prey.flee_target = wolf
            n += 1
    return n


# ── Terrain awareness ────────────────────────────────────────────────

def nearest_land(wm: WorldMap, x: float, y: float,
                 max_search: int = 5) -> tuple[float, int | None, int | None]:
    """Closest non-water tile in a square window around (x, y).

    Returns ``(distance, tile_x, tile_y)``; distance is ``inf`` and the
    coordinates ``None`` when the window holds only water.
    """
    best = math.inf
    best_x = None
    best_y = None
    for dx in range(-max_search, max_search + 1):
        for dy in range(-max_search, max_search + 1):
            cx = math.floor(x + dx)
            cy = math.floor(y + dy)
            tile = wm.get_tile(cx, cy)
            if tile is None or tile is Tile.WATER:
                continue
            d = math.hypot(dx, dy)
            if d < best:
                best = d
                best_x = cx
                best_y = cy
    return best, best_x, best_y

