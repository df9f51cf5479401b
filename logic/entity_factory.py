"""logic/entity_factory.py — Table-driven agent spawning.

``_SPECIES_TABLE`` maps each species to the component builders it is
assembled from, so the per-species bundles documented in
``components.agents`` are defined in one place.  ``create_agent`` is
the only way agents enter the store; the ``spawn_*`` helpers pick a
location (bounded retries on the right terrain) and seed initial state.

Spawn helpers give up silently after their retry limit and return
``None``; the caller simply tries again on a later tick.
"""

from __future__ import annotations
import math
from typing import Callable

from core.constants import COW, FISH, PIG, PLAYER, PREY_HEALTH, WOLF
from core.ecs import EntityStore
from core.tuning import get as _tun
from core.world_map import Tile, WorldMap
from components import (
    DevLog, Heading, Hunger, Hunt, Identity, Pack, Player, Position, Prey, Wander,
)
from logic.ai.brains import current_tick, rng, settings


# ── Component builders ───────────────────────────────────────────────
# Each takes (store, r) and returns one component.

def _player(store, r):
    return Player()


def _wander(store, r):
    return Wander()


def _prey_for(species: str) -> Callable:
    def build(store, r):
        return Prey(health=float(PREY_HEALTH.get(species, 100.0)))
    return build


def _hunger(store, r):
    return Hunger(current=0.0, rate=_tun("ai.wolf", "hunger_rate", 0.02))


def _hunt(store, r):
    return Hunt()


def _pack(store, r):
    return Pack()


_SPECIES_TABLE: dict[str, tuple[Callable, ...]] = {
    PLAYER: (_player,),
    FISH: (_wander, _prey_for(FISH)),
    PIG: (_wander, _prey_for(PIG)),
    COW: (_wander, _prey_for(COW)),
    WOLF: (_wander, _hunger, _hunt, _pack),
}


def create_agent(store: EntityStore, species: str, x: float, y: float) -> int | None:
    """Add a *species* agent at (x, y).  ``None`` if off the map."""
    wm = store.res(WorldMap)
    builders = _SPECIES_TABLE.get(species)
    if wm is None or builders is None or not wm.in_bounds(x, y):
        return None
    r = rng(store)
    eid = store.spawn()
    store.add(eid, Identity(species))
    store.add(eid, Position(float(x), float(y)))
    store.add(eid, Heading(0.0))
    for build in builders:
        store.add(eid, build(store, r))
    return eid


def _log_spawn(store: EntityStore, eid: int, species: str) -> None:
    log = store.res(DevLog)
    if log is None:
        return
    pos = store.get(eid, Position)
    log.record(eid, "spawn", f"{species} at ({pos.x:.0f},{pos.y:.0f})",
               species=species, t=current_tick(store))


def _init_wander(store: EntityStore, eid: int, timer_spread: float,
                 moving: bool) -> None:
    r = rng(store)
    wander = store.get(eid, Wander)
    wander.timer = r.random() * timer_spread
    wander.moving = moving
    store.get(eid, Heading).angle = r.random() * math.pi * 2


# ── Spawners ─────────────────────────────────────────────────────────

def spawn_player(store: EntityStore) -> int | None:
    wm = store.res(WorldMap)
    if wm is None:
        return None
    sx, sy = wm.spawn_point
    eid = create_agent(store, PLAYER, sx, sy)
    if eid is not None:
        print(f"[SPAWN] player at {wm.spawn_point}")
    return eid


def spawn_fish(store: EntityStore) -> int | None:
    wm = store.res(WorldMap)
    if wm is None:
        return None
    r = rng(store)
    for _ in range(int(_tun("entities.spawn", "attempts", 100))):
        x = math.floor(r.random() * wm.width)
        y = math.floor(r.random() * wm.height)
        if wm.get_tile(x, y) is Tile.WATER:
            eid = create_agent(store, FISH, x, y)
            _init_wander(store, eid, _tun("entities.spawn", "fish_timer", 100), True)
            _log_spawn(store, eid, FISH)
            return eid
    return None


def spawn_land_animal(store: EntityStore, species: str) -> int | None:
    """Spawn a pig or cow on land, away from the map edge."""
    wm = store.res(WorldMap)
    if wm is None:
        return None
    r = rng(store)
    margin = int(_tun("entities.spawn", "edge_margin", 5))
    timer = _tun("entities.spawn", "herd_timer", 200)
    for _ in range(int(_tun("entities.spawn", "attempts", 100))):
        x = margin + math.floor(r.random() * (wm.width - margin * 2))
        y = margin + math.floor(r.random() * (wm.height - margin * 2))
        if wm.is_land(x, y):
            eid = create_agent(store, species, x, y)
            _init_wander(store, eid, timer, False)
            _log_spawn(store, eid, species)
            return eid

    cx = wm.width // 2
    cy = wm.height // 2
    if wm.is_land(cx, cy):
        eid = create_agent(store, species, cx, cy)
        _init_wander(store, eid, timer, False)
        _log_spawn(store, eid, species)
        return eid
    return None


def spawn_wolf(store: EntityStore) -> int | None:
    wm = store.res(WorldMap)
    if wm is None:
        return None
    r = rng(store)
    for _ in range(int(_tun("entities.spawn", "attempts", 100))):
        x = math.floor(r.random() * wm.width)
        y = math.floor(r.random() * wm.height)
        tile = wm.get_tile(x, y)
        if tile is Tile.GRASS or tile is Tile.DARK_GRASS:
            eid = create_agent(store, WOLF, x, y)
            _init_wander(store, eid, _tun("entities.spawn", "wolf_timer", 150), True)
            store.get(eid, Pack).wants_pack = r.random() < settings(store).wolf_pack_chance
            _log_spawn(store, eid, WOLF)
            return eid
    return None


SPAWNERS: dict[str, Callable[[EntityStore], int | None]] = {
    FISH: spawn_fish,
    PIG: lambda store: spawn_land_animal(store, PIG),
    COW: lambda store: spawn_land_animal(store, COW),
    WOLF: spawn_wolf,
}
