"""logic/ai/fish.py — Fish: wander-only swimmers.

Fish ignore threats.  They swim along a heading, re-pick it on a
countdown, and turn immediately when the next step would leave water.
"""

from __future__ import annotations

from core.constants import FISH
from core.ecs import EntityStore
from core.tuning import get as _tun
from core.world_map import Tile, WorldMap
from components import Heading, Position, Wander
from logic.ai.brains import register_update, rng
from logic.ai.steering import random_heading, step


def _fish_update(store: EntityStore, eid: int) -> None:
    wm = store.res(WorldMap)
    pos = store.get(eid, Position)
    heading = store.get(eid, Heading)
    wander = store.get(eid, Wander)
    if wm is None or pos is None or heading is None or wander is None:
        return
    r = rng(store)

    wander.timer -= 1
    if wander.timer <= 0:
        wander.timer = (_tun("ai.fish", "timer_min", 50)
                        + r.random() * _tun("ai.fish", "timer_spread", 100))
        heading.angle = random_heading(r)

    nx, ny = step(pos, heading.angle, _tun("ai.fish", "speed", 0.02))
    if wm.get_tile(nx, ny) is Tile.WATER:
        pos.x = nx
        pos.y = ny
    else:
        heading.angle = random_heading(r)


register_update(FISH, _fish_update)
