"""logic/ai/pack.py — Wolf pack lifecycle.

Roles
-----
A wolf is exactly one of *free*, *member* or *leader* (see
``components.agents.Pack``).  Membership lives on both sides: the
member's ``Pack.leader`` and the leader's ``Pack.members`` list.  Every
function here keeps the two in step, and :func:`leave_pack` must run
before a wolf is removed so no later agent in the same tick can see a
dead leader or a dead member.

Invariants
----------
* ``leader_count(store) <= EntitySettings.max_pack_leaders``
* ``len(leader.members) <= EntitySettings.max_pack_size``
* a leader never has a leader, so two wolves can never lead each other.
"""

from __future__ import annotations
import math

from core.constants import WOLF
from core.ecs import EntityStore
from core.events import EventBus, PackChanged
from core.tuning import get as _tun
from core.world_map import WorldMap
from components import Heading, Hunger, Hunt, Pack, Position
from logic.ai.brains import _log, rng, settings
from logic.ai.perception import find_closest_prey, live_target
from logic.ai.steering import move_toward, try_move


def _emit(store: EntityStore, leader: int, member: int | None, change: str) -> None:
    bus = store.res(EventBus)
    if bus is not None:
        bus.emit(PackChanged(leader=leader, member=member, change=change))


# ── Queries ──────────────────────────────────────────────────────────

def leaders(store: EntityStore) -> list[int]:
    return [eid for eid, pack in store.all_of(Pack) if pack.is_leader]


def leader_count(store: EntityStore) -> int:
    return sum(1 for _, pack in store.all_of(Pack) if pack.is_leader)


def has_room(store: EntityStore, leader_pack: Pack) -> bool:
    return len(leader_pack.members) < settings(store).max_pack_size


def validate_pack(store: EntityStore, eid: int, pack: Pack) -> None:
    """Drop references to wolves that no longer exist."""
    if pack.leader is not None:
        lp = store.get(pack.leader, Pack)
        if lp is None or not lp.is_leader:
            pack.leader = None
    if pack.members:
        pack.members = [m for m in pack.members if store.alive(m)]
    pack.spotted_prey = live_target(store, pack.spotted_prey)
    pack.alerted_prey = live_target(store, pack.alerted_prey)


# ── Membership changes ───────────────────────────────────────────────

def join(store: EntityStore, wolf: int, leader: int) -> None:
    pack = store.get(wolf, Pack)
    lp = store.get(leader, Pack)
    pack.leader = leader
    pack.wants_pack = False
    lp.members.append(wolf)


def leave_pack(store: EntityStore, eid: int) -> None:
    """Detach *eid* from its pack ahead of removal.

    A leader's departure dissolves the pack: every member becomes free
    and re-rolls ``wants_pack``.  A member is spliced out of its
    leader's list.
    """
    pack = store.get(eid, Pack)
    if pack is None:
        return
    if pack.is_leader:
        r = rng(store)
        chance = settings(store).wolf_pack_chance
        for m in pack.members:
            mp = store.get(m, Pack)
            if mp is None:
                continue
            mp.leader = None
            mp.preferred_angle = None
            mp.wants_pack = r.random() < chance
        if pack.members:
            _log(store, eid, "pack", f"pack of {len(pack.members)} dissolved")
        pack.members = []
        pack.is_leader = False
        _emit(store, eid, None, "dissolve")
    elif pack.leader is not None:
        lp = store.get(pack.leader, Pack)
        if lp is not None and eid in lp.members:
            lp.members.remove(eid)
            _emit(store, pack.leader, eid, "leave")
        pack.leader = None


def find_or_create_pack(store: EntityStore, eid: int) -> None:
    """A free wolf that wants a pack joins one nearby or may found one."""
    pack = store.get(eid, Pack)
    pos = store.get(eid, Position)
    if pack is None or pos is None:
        return
    if not pack.wants_pack or not pack.is_free:
        return

    join_range = _tun("ai.pack", "join_range", 10.0)
    current = leaders(store)
    for lid in current:
        lp = store.get(lid, Pack)
        if not has_room(store, lp):
            continue
        lpos = store.get(lid, Position)
        if math.hypot(lpos.x - pos.x, lpos.y - pos.y) < join_range:
            join(store, eid, lid)
            _log(store, eid, "pack", f"joined pack of wolf {lid}")
            _emit(store, lid, eid, "join")
            return

    max_leaders = settings(store).max_pack_leaders
    if max_leaders <= 0 or len(current) >= max_leaders:
        return
    chance = _tun("ai.pack", "leader_chance", 0.3) * (1 - len(current) / max_leaders)
    if rng(store).random() < chance:
        pack.is_leader = True
        pack.wants_pack = False
        pack.members = []
        _log(store, eid, "pack", "became pack leader")
        _emit(store, eid, None, "leader")


def seek_pack_members(store: EntityStore, leader: int) -> int | None:
    """Walk toward the nearest free wolf looking for a pack; recruit on contact.

    Recruits at most one wolf per call.  Returns the recruit's id.
    """
    wm = store.res(WorldMap)
    pos = store.get(leader, Position)
    heading = store.get(leader, Heading)
    lp = store.get(leader, Pack)
    if wm is None or pos is None or lp is None or not has_room(store, lp):
        return None

    recruit_radius = _tun("ai.pack", "recruit_radius", 12.0)
    best = None
    best_d = math.inf
    for eid, _, d in store.nearby(pos.x, pos.y, recruit_radius, (WOLF,)):
        if eid == leader:
            continue
        cand = store.get(eid, Pack)
        if cand is None or not cand.wants_pack or not cand.is_free:
            continue
        if d < best_d:
            best = eid
            best_d = d
    if best is None:
        return None

    target = store.get(best, Position)
    moved = move_toward(wm, pos, heading, target.x, target.y,
                        _tun("ai.pack", "recruit_speed", 0.03))
    if moved and best_d < _tun("ai.pack", "capture_distance", 2.0):
        join(store, best, leader)
        _log(store, leader, "pack", f"recruited wolf {best}")
        _emit(store, leader, best, "recruit")
        return best
    return None


def enforce_pack_caps(store: EntityStore) -> tuple[int, int]:
    """Bring existing packs back within the current settings.

    Leaders past ``max_pack_leaders`` in creation order dissolve their
    packs; members past ``max_pack_size`` in join order leave.
    Returns ``(leaders dissolved, members released)``.
    """
    s = settings(store)
    current = leaders(store)
    dissolved = 0
    for lid in current[max(0, s.max_pack_leaders):]:
        leave_pack(store, lid)
        dissolved += 1

    released = 0
    for lid in current[:max(0, s.max_pack_leaders)]:
        lp = store.get(lid, Pack)
        for m in lp.members[s.max_pack_size:]:
            leave_pack(store, m)
            released += 1
    return dissolved, released


# ── Member behaviour ─────────────────────────────────────────────────

def formation_slot(store: EntityStore, member: int, leader: int) -> tuple[float, float]:
    """V-formation target behind the leader for *member*."""
    lpos = store.get(leader, Position)
    lh = store.get(leader, Heading)
    lp = store.get(leader, Pack)
    s = settings(store)
    index = lp.members.index(member) if member in lp.members else 0
    angle = math.pi * 2 * index / max(1, len(lp.members))
    tx = (lpos.x - math.cos(lh.angle) * s.pack_follow_distance
          + math.cos(angle) * s.pack_spread_distance)
    ty = (lpos.y - math.sin(lh.angle) * s.pack_follow_distance
          + math.sin(angle) * s.pack_spread_distance)
    return tx, ty


def follow_pack_leader(store: EntityStore, eid: int) -> None:
    """Close in on the formation slot once too far from the leader."""
    wm = store.res(WorldMap)
    pack = store.get(eid, Pack)
    pos = store.get(eid, Position)
    heading = store.get(eid, Heading)
    leader = pack.leader if pack else None
    if wm is None or leader is None or not store.alive(leader):
        return
    lpos = store.get(leader, Position)
    if math.hypot(lpos.x - pos.x, lpos.y - pos.y) <= settings(store).pack_follow_distance:
        return

    tx, ty = formation_slot(store, eid, leader)
    dx = tx - pos.x
    dy = ty - pos.y
    d = math.hypot(dx, dy)
    if d <= 0.1:
        return
    speed = _tun("ai.pack", "follow_speed", 0.04)
    nx = pos.x + dx / d * speed
    ny = pos.y + dy / d * speed
    if try_move(wm, pos, nx, ny) and d < 1:
        heading.angle = store.get(leader, Heading).angle


def inherit_leader_hunt(store: EntityStore, eid: int) -> None:
    """A member adopts its live leader's hunt target, whatever its hunger."""
    pack = store.get(eid, Pack)
    if pack is None or pack.leader is None:
        return
    lhunt = store.get(pack.leader, Hunt)
    target = live_target(store, lhunt.target) if lhunt else None
    if target is None:
        return
    hunt = store.get(eid, Hunt)
    hunt.target = target
    hunt.is_hunting = True


def spot_prey(store: EntityStore, eid: int) -> int | None:
    """An idle member scans for prey and tips off its leader.

    The sighting is surfaced as the leader's ``alerted_prey`` only when
    it is strictly closer to the leader than the leader's current target
    (or the leader has none).  The leader just tracks it; it consumes the
    tip on its next re-search.
    """
    pack = store.get(eid, Pack)
    hunt = store.get(eid, Hunt)
    if pack is None or pack.leader is None or (hunt and hunt.is_hunting):
        return None

    prey = find_closest_prey(store, eid, _tun("ai.pack", "spot_radius", 15.0))
    if prey is None:
        pack.spotted_prey = None
        return None

    leader = pack.leader
    lhunt = store.get(leader, Hunt)
    current = live_target(store, lhunt.target) if lhunt else None
    if current is not None and not store.distance(leader, prey) < store.distance(leader, current):
        pack.spotted_prey = None
        return None

    pack.spotted_prey = prey
    store.get(leader, Pack).alerted_prey = prey
    return prey


def coordinate_pack_hunt(store: EntityStore, leader: int) -> None:
    """Spread members around the quarry: member i gets angle 2πi/n."""
    lp = store.get(leader, Pack)
    hunt = store.get(leader, Hunt)
    if lp is None or not lp.members or hunt is None or live_target(store, hunt.target) is None:
        return
    n = len(lp.members)
    for i, m in enumerate(lp.members):
        mp = store.get(m, Pack)
        if mp is not None:
            mp.preferred_angle = math.pi * 2 * i / n


def share_kill(store: EntityStore, eid: int) -> list[int]:
    """Reset hunger and hunting state for the whole pack of *eid*.

    Returns the ids whose hunger was reset (the hunter included).
    """
    pack = store.get(eid, Pack)
    if pack is not None and pack.is_leader:
        head = eid
    elif pack is not None and pack.leader is not None and store.alive(pack.leader):
        head = pack.leader
    else:
        head = None

    fed = [eid]
    if head is not None:
        fed = [head] + [m for m in store.get(head, Pack).members if store.alive(m)]
        if eid not in fed:
            fed.append(eid)

    for w in fed:
        hunger = store.get(w, Hunger)
        hunt = store.get(w, Hunt)
        if hunger is not None:
            hunger.current = 0.0
        if hunt is not None:
            hunt.is_hunting = False
            hunt.target = None
    return fed


__all__ = [
    "leaders", "leader_count", "has_room", "validate_pack", "join",
    "leave_pack", "enforce_pack_caps", "find_or_create_pack", "seek_pack_members",
    "formation_slot", "follow_pack_leader", "inherit_leader_hunt",
    "spot_prey", "coordinate_pack_hunt", "share_kill",
]
