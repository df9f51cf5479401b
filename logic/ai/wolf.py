"""logic/ai/wolf.py — Wolves: hunger economy, hunting, pack role.

Per tick, in this order:

1. Hunger climbs; at the starvation bound the wolf leaves its pack and
   is removed on the spot.
2. Stale references (dead leader, members, targets) are dropped.
3. Pack role: a member spots prey for its leader; a free wolf joins or
   founds a pack; a fed leader recruits; a member follows its leader
   and inherits the leader's hunt.
4. Hunger > alert threshold: nearby prey start fleeing this wolf.
5. Hunger > hunt threshold: start hunting.
6. Hunt step (chase, kill, water avoidance) or wander step.
"""

from __future__ import annotations
import math

from core.constants import WOLF
from core.ecs import EntityStore
from core.events import AgentDied, EventBus
from core.tuning import get as _tun
from core.world_map import Tile, WorldMap
from components import Heading, Hunger, Hunt, Identity, Pack, Position, Prey, Wander
from logic.ai import pack as packs
from logic.ai.brains import _log, register_update, rng, settings
from logic.ai.perception import (
    alert_nearby_prey, find_closest_prey, live_target, nearest_land,
)
from logic.ai.steering import move_toward, random_heading, step, try_move


# ── Death ────────────────────────────────────────────────────────────

def starve(store: EntityStore, eid: int) -> None:
    """Remove a starved wolf after detaching it from its pack."""
    hunger = store.get(eid, Hunger)
    _log(store, eid, "starve", f"starved at hunger {hunger.current:.2f}")
    packs.leave_pack(store, eid)
    store.remove(eid)
    bus = store.res(EventBus)
    if bus is not None:
        bus.emit(AgentDied(eid=eid, species=WOLF, cause="starvation"))


def kill(store: EntityStore, eid: int, prey: int) -> list[int]:
    """Eat *prey* and share the meal with the pack.  Returns wolves fed."""
    ident = store.get(prey, Identity)
    species = ident.species if ident else "?"
    store.remove(prey)

    hunt = store.get(eid, Hunt)
    hunt.target = None
    hunt.is_hunting = False
    fed = packs.share_kill(store, eid)

    _log(store, eid, "kill", f"ate {species} {prey}, fed {len(fed)}",
         details={"prey": prey, "fed": fed})
    bus = store.res(EventBus)
    if bus is not None:
        bus.emit(AgentDied(eid=prey, species=species, cause="predation",
                           killer_eid=eid))
    return fed


# ── Hunting ──────────────────────────────────────────────────────────

def choose_target(store: EntityStore, eid: int) -> int | None:
    """Re-search: a leader's pending tip first, else the nearest prey."""
    hunger = store.get(eid, Hunger)
    pack = store.get(eid, Pack)
    if pack is not None and pack.is_leader and live_target(store, pack.alerted_prey) is not None:
        target = pack.alerted_prey
        pack.alerted_prey = None
    else:
        target = find_closest_prey(store, eid, _tun("ai.wolf", "search_radius", 10.0))
    if target is None and hunger.current > _tun("ai.wolf", "desperate_hunger", 85):
        target = find_closest_prey(store, eid, _tun("ai.wolf", "desperate_radius", 20.0))
    return target


def may_swim(wm: WorldMap, store: EntityStore, eid: int, nx: float, ny: float,
             target_pos, distance: float) -> bool:
    """Whether a chase step may end on water."""
    if wm.get_tile(target_pos.x, target_pos.y) is Tile.WATER:
        return True
    land_d, _, _ = nearest_land(wm, nx, ny)
    if land_d <= _tun("ai.wolf", "swim_land_distance", 3.0):
        return True
    hunger = store.get(eid, Hunger).current
    return (hunger > _tun("ai.wolf", "swim_hunger", 80)
            and distance < _tun("ai.wolf", "swim_distance", 5.0))


def hunt_step(store: EntityStore, eid: int) -> None:
    wm = store.res(WorldMap)
    pos = store.get(eid, Position)
    heading = store.get(eid, Heading)
    hunt = store.get(eid, Hunt)
    hunger = store.get(eid, Hunger)
    r = rng(store)

    hunt.target = live_target(store, hunt.target)
    if hunt.target is None or r.random() < _tun("ai.wolf", "research_chance", 0.05):
        found = choose_target(store, eid)
        if found is not None and found != hunt.target:
            _log(store, eid, "hunt", f"targeting {found}")
        hunt.target = found

    if hunt.target is None:
        nx, ny = step(pos, heading.angle, _tun("ai.wolf", "roam_speed", 0.035))
        if not try_move(wm, pos, nx, ny):
            heading.angle = random_heading(r)
        return

    tpos = store.get(hunt.target, Position)
    distance = math.hypot(tpos.x - pos.x, tpos.y - pos.y)

    if distance > _tun("ai.wolf", "switch_distance", 15.0):
        closer = find_closest_prey(store, eid, _tun("ai.wolf", "search_radius", 10.0))
        if closer is not None:
            hunt.target = closer
            return

    if distance < _tun("ai.wolf", "kill_distance", 0.5):
        kill(store, eid, hunt.target)
        return

    heading.angle = math.atan2(tpos.y - pos.y, tpos.x - pos.x)
    speed = (_tun("ai.wolf", "chase_speed", 0.04)
             + hunger.current / 100 * _tun("ai.wolf", "hunger_boost", 0.02))
    nx, ny = step(pos, heading.angle, speed)
    new_tile = wm.get_tile(nx, ny)

    if new_tile is not None and (new_tile is not Tile.WATER
                                 or may_swim(wm, store, eid, nx, ny, tpos, distance)):
        pos.x, pos.y = nx, ny
    elif wm.is_water(pos.x, pos.y):
        _, lx, ly = nearest_land(wm, pos.x, pos.y)
        if lx is not None:
            move_toward(wm, pos, heading, lx, ly, _tun("ai.wolf", "escape_speed", 0.05))
        else:
            heading.angle = random_heading(r)
    else:
        hunt.target = find_closest_prey(store, eid, _tun("ai.wolf", "search_radius", 10.0))

    target = live_target(store, hunt.target)
    prey = store.get(target, Prey)
    if prey is not None:
        prey.flee_target = eid


# ── Wandering ────────────────────────────────────────────────────────

def wander_step(store: EntityStore, eid: int) -> None:
    wm = store.res(WorldMap)
    pos = store.get(eid, Position)
    heading = store.get(eid, Heading)
    wander = store.get(eid, Wander)
    r = rng(store)

    wander.timer -= 1
    if wander.timer <= 0:
        wander.timer = (_tun("ai.wolf", "timer_min", 30)
                        + r.random() * _tun("ai.wolf", "timer_spread", 70))
        heading.angle = random_heading(r)
        wander.moving = r.random() < _tun("ai.wolf", "move_chance", 0.8)

    if wm.is_water(pos.x, pos.y):
        _, lx, ly = nearest_land(wm, pos.x, pos.y,
                                 int(_tun("ai.wolf", "land_search", 10)))
        if lx is not None:
            move_toward(wm, pos, heading, lx, ly, _tun("ai.wolf", "wander_escape", 0.04))
        return

    if not wander.moving:
        return
    nx, ny = step(pos, heading.angle, _tun("ai.wolf", "walk_speed", 0.025))
    if wm.is_land(nx, ny):
        pos.x, pos.y = nx, ny
    else:
        heading.angle = random_heading(r)


# ── Update ───────────────────────────────────────────────────────────

def _wolf_update(store: EntityStore, eid: int) -> None:
    wm = store.res(WorldMap)
    hunger = store.get(eid, Hunger)
    hunt = store.get(eid, Hunt)
    pack = store.get(eid, Pack)
    if wm is None or hunger is None or hunt is None or pack is None:
        return

    hunger.current += hunger.rate
    if hunger.current >= settings(store).wolf_starvation_hunger:
        starve(store, eid)
        return

    packs.validate_pack(store, eid, pack)
    hunt.target = live_target(store, hunt.target)

    if pack.leader is not None and not hunt.is_hunting:
        packs.spot_prey(store, eid)

    packs.find_or_create_pack(store, eid)

    if pack.is_leader and hunger.current < _tun("ai.pack", "recruit_hunger", 40):
        packs.seek_pack_members(store, eid)

    if pack.leader is not None:
        packs.follow_pack_leader(store, eid)
        packs.inherit_leader_hunt(store, eid)
    elif pack.is_leader and pack.members and hunt.is_hunting:
        packs.coordinate_pack_hunt(store, eid)

    if hunger.current > _tun("ai.wolf", "alert_hunger", 60):
        alert_nearby_prey(store, eid, _tun("ai.wolf", "alert_radius", 8.0))

    if hunger.current > _tun("ai.wolf", "hunt_hunger", 70) and not hunt.is_hunting:
        hunt.is_hunting = True
        hunt.target = None
        _log(store, eid, "hunt", f"started hunting at hunger {hunger.current:.1f}")

    if hunt.is_hunting:
        hunt_step(store, eid)
    else:
        wander_step(store, eid)


register_update(WOLF, _wolf_update)
