"""logic/ai/herd.py — Pigs and cows: flee or graze.

Two exclusive modes:

* **Fleeing** while ``Prey.flee_target`` names a live wolf.  The animal
  runs straight away from it, faster the closer it is, and falls back
  on the escape-angle ladder when the direct step lands in water.  It
  calms down only once it is more than ``release_distance`` away *and*
  the wolf is neither hunting nor hungry.
* **Wandering** otherwise — slow random walk on land with idle spells.

Both modes keep the animal ``edge_margin`` tiles inside the map.
"""

from __future__ import annotations
import math

from core.constants import COW, PIG
from core.ecs import EntityStore
from core.tuning import get as _tun
from core.world_map import WorldMap
from components import Heading, Hunger, Hunt, Position, Prey, Wander
from logic.ai.brains import register_update, rng
from logic.ai.steering import (
    ESCAPE_OFFSETS, clamp_to_margin, random_heading, step,
)


def threat_is_calm(store: EntityStore, threat: int) -> bool:
    """True when *threat* is not hunting and not yet hungry."""
    hunt = store.get(threat, Hunt)
    hunger = store.get(threat, Hunger)
    hunting = hunt.is_hunting if hunt else False
    level = hunger.current if hunger else 0.0
    return not hunting and level < _tun("ai.herd", "calm_hunger", 60)


def flee_step(wm: WorldMap, pos, heading, tx: float, ty: float) -> bool:
    """One step directly away from (tx, ty).  Returns whether it moved."""
    dx = pos.x - tx
    dy = pos.y - ty
    distance = math.hypot(dx, dy)

    heading.angle = math.atan2(dy, dx)
    panic_range = _tun("ai.herd", "panic_range", 12.0)
    boost = max(0.0, (panic_range - distance) / panic_range) * _tun("ai.herd", "panic_boost", 0.02)
    speed = _tun("ai.herd", "flee_speed", 0.04) + boost
    margin = _tun("ai.herd", "edge_margin", 2)

    nx, ny = clamp_to_margin(wm, *step(pos, heading.angle, speed), margin)
    if wm.is_land(nx, ny):
        pos.x, pos.y = nx, ny
        return True

    for offset in ESCAPE_OFFSETS:
        angle = heading.angle + offset
        ax, ay = clamp_to_margin(wm, *step(pos, angle, speed), margin)
        if wm.is_land(ax, ay):
            pos.x, pos.y = ax, ay
            heading.angle = angle
            return True
    return False


def graze_step(store: EntityStore, wm: WorldMap, pos, heading, wander) -> None:
    r = rng(store)
    wander.timer -= 1
    if wander.timer <= 0:
        wander.timer = (_tun("ai.herd", "timer_min", 150)
                        + r.random() * _tun("ai.herd", "timer_spread", 200))
        heading.angle = random_heading(r)
        wander.moving = r.random() < _tun("ai.herd", "move_chance", 0.7)

    if not wander.moving:
        return
    margin = _tun("ai.herd", "edge_margin", 2)
    nx, ny = clamp_to_margin(
        wm, *step(pos, heading.angle, _tun("ai.herd", "walk_speed", 0.015)), margin)
    if wm.is_land(nx, ny):
        pos.x, pos.y = nx, ny
    else:
        heading.angle = random_heading(r)


def _herd_update(store: EntityStore, eid: int) -> None:
    wm = store.res(WorldMap)
    pos = store.get(eid, Position)
    heading = store.get(eid, Heading)
    prey = store.get(eid, Prey)
    wander = store.get(eid, Wander)
    if wm is None or pos is None or heading is None or prey is None or wander is None:
        return

    if prey.flee_target is not None and not store.alive(prey.flee_target):
        prey.flee_target = None

    if prey.flee_target is not None:
        tpos = store.get(prey.flee_target, Position)
        distance = math.hypot(pos.x - tpos.x, pos.y - tpos.y)
        if (distance > _tun("ai.herd", "release_distance", 15.0)
                and threat_is_calm(store, prey.flee_target)):
            prey.flee_target = None
        else:
            flee_step(wm, pos, heading, tpos.x, tpos.y)
            return

    graze_step(store, wm, pos, heading, wander)


register_update(PIG, _herd_update)
register_update(COW, _herd_update)
