"""test_entities.py — EntityStore, agent factory, spawning, player movement.

Run:  python test_entities.py
"""
from __future__ import annotations
import sys, random, traceback

# ── Bootstrap ────────────────────────────────────────────────────────
from core.tuning import load as _load_tuning
_load_tuning()

from logic.tick import spawn_system
from core.constants import COW, FISH, PIG, PLAYER, WOLF
from core.ecs import EntityStore
from core.events import EventBus
from core.settings import EntitySettings
from core.world_map import Tile, WorldMap
from components import (
    DevLog, Hunger, Hunt, Pack, Player, Position, Prey, SimClock, Wander,
)
from logic.entity_factory import (
    create_agent, spawn_fish, spawn_land_animal, spawn_player, spawn_wolf,
)
from logic.movement import move_entity


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

def check(cond: bool, label: str, detail: str = ""):
    if cond:
        ok(label)
    else:
        fail(label, detail)
    assert cond, f"{label} {detail}".strip()


# ── Store builders ───────────────────────────────────────────────────

def _store(wm: WorldMap, seed: int = 1, **entity_changes) -> EntityStore:
    store = EntityStore()
    store.set_res(wm)
    store.set_res(random.Random(seed))
    store.set_res(EntitySettings().with_changes(**entity_changes))
    store.set_res(DevLog())
    store.set_res(EventBus())
    store.set_res(SimClock())
    return store


def _split_map(size: int = 64) -> WorldMap:
    """Left half water, right half grass."""
    wm = WorldMap.filled(size, Tile.GRASS)
    for y in range(size):
        for x in range(size // 2):
            wm.set_tile(x, y, Tile.WATER)
    return wm


# ── Tests ────────────────────────────────────────────────────────────

def test_create_remove():
    print("\n── Create / remove ──")
    store = _store(WorldMap.filled(32))
    check(create_agent(store, PIG, -0.1, 5) is None, "create rejects x < 0")
    check(create_agent(store, PIG, 5, 32) is None, "create rejects y >= size")
    check(create_agent(store, "dragon", 5, 5) is None, "create rejects unknown species")
    check(len(store) == 0, "rejected creates leave the store empty")

    a = create_agent(store, PIG, 5.5, 6.5)
    b = create_agent(store, PIG, 31.99, 0)
    check(a is not None and b is not None and a != b, "ids are unique")
    pos = store.get(a, Position)
    check((pos.x, pos.y) == (5.5, 6.5), "position stored as given")

    check(store.remove(a) is True, "remove reports an existing agent")
    check(store.remove(a) is False, "second remove reports nothing removed")
    check(not store.alive(a) and store.get(a, Position) is None,
          "removed agent has no components")
    check(not store.alive(None), "alive(None) is False")


def test_species_bundles():
    print("\n── Species component bundles ──")
    store = _store(WorldMap.filled(32))
    fish = create_agent(store, FISH, 1, 1)
    pig = create_agent(store, PIG, 2, 2)
    cow = create_agent(store, COW, 3, 3)
    wolf = create_agent(store, WOLF, 4, 4)
    player = create_agent(store, PLAYER, 5, 5)

    check(store.has(fish, Prey) and not store.has(fish, Pack) and not store.has(fish, Hunger),
          "fish: prey, no pack, no hunger")
    check(store.has(wolf, Hunger) and store.has(wolf, Hunt) and store.has(wolf, Pack)
          and not store.has(wolf, Prey), "wolf: hunger, hunt, pack, not prey")
    check(store.has(player, Player) and not store.has(player, Wander),
          "player: input-driven, no wander")
    check([store.get(e, Prey).health for e in (fish, pig, cow)] == [50.0, 75.0, 100.0],
          "prey health fish 50, pig 75, cow 100")
    hunger = store.get(wolf, Hunger)
    check(hunger.current == 0 and abs(hunger.rate - 0.02) < 1e-12,
          "wolf starts fed with default hunger economy")
    check(store.get(wolf, Pack).is_free, "new wolf is free")


def test_queries():
    print("\n── Spatial queries ──")
    store = _store(WorldMap.filled(32))
    w = create_agent(store, WOLF, 10, 10)
    p1 = create_agent(store, PIG, 13, 10)       # distance 3
    p2 = create_agent(store, COW, 10, 13)       # distance 3, created later
    p3 = create_agent(store, PIG, 10, 5)        # distance 5
    w2 = create_agent(store, WOLF, 10.5, 10)

    prey = (FISH, PIG, COW)
    check(store.nearest_of_species(10, 10, prey, 10) == p1,
          "equal distances → earliest created wins")
    check(store.nearest_of_species(10, 10, prey, 3) is None,
          "radius is strict: distance 3 not within 3")
    check(store.nearest_of_species(10, 10, (WOLF,), 5, exclude=w) == w2,
          "exclude skips the searcher only")
    check(store.nearest_of_species(10, 10, prey, 10) not in store.of_species(WOLF),
          "prey search never returns a wolf")

    store.remove(p1)
    check(store.nearest_of_species(10, 10, prey, 10) == p2, "removed agents are not found")
    check(store.entities_at_tile(10, 5) == [p3], "entities_at_tile floors positions")
    check(set(store.entities_at_tile(10, 10)) == {w, w2}, "two wolves share tile (10,10)")
    check(store.of_species(PIG, COW) == [p2, p3], "of_species keeps creation order")
    check(store.count_species(WOLF) == 2, "count_species")
    check(abs(store.distance(w, p3) - 5.0) < 1e-12, "distance between agents")
    check(store.distance(w, 999) is None, "distance to a missing agent is None")


def test_mid_iteration_removal():
    print("\n── Removal during iteration ──")
    store = _store(WorldMap.filled(32))
    ids = [create_agent(store, PIG, i, i) for i in range(6)]
    seen = []
    for eid, _pos in store.query(Position):
        seen.append(eid)
        if eid == ids[1]:
            store.remove(ids[3])
            store.remove(ids[4])
    check(seen == [ids[0], ids[1], ids[2], ids[5]],
          "agents removed mid-query are skipped", str(seen))

    kept = store.clear(keep=[ids[0]])
    check(kept == 3 and store.ids() == [ids[0]], "clear(keep=…) keeps only listed ids")


def test_spawners():
    print("\n── Spawners ──")
    store = _store(WorldMap.filled(32, Tile.GRASS))
    check(spawn_fish(store) is None, "no fish without water")
    check(spawn_wolf(_store(WorldMap.filled(32, Tile.SAND))) is None,
          "no wolf without grass")
    check(spawn_land_animal(_store(WorldMap.filled(32, Tile.WATER)), PIG) is None,
          "no land animal on an all-water map")

    store = _store(_split_map())
    fish = spawn_fish(store)
    pos = store.get(fish, Position)
    check(store.res(WorldMap).get_tile(pos.x, pos.y) is Tile.WATER, "fish spawns on water")
    check(store.get(fish, Wander).timer < 100, "fish timer in [0, 100)")

    for _ in range(20):
        pig = spawn_land_animal(store, PIG)
        pos = store.get(pig, Position)
        if not (5 <= pos.x < 59 and 5 <= pos.y < 59 and store.res(WorldMap).is_land(pos.x, pos.y)):
            check(False, "land animal inside margin on land", f"({pos.x},{pos.y})")
    ok("land animals spawn on land, 5 tiles from the edge")
    check(store.get(pig, Wander).moving is False, "land animal starts idle")

    wolf = spawn_wolf(store)
    pos = store.get(wolf, Position)
    check(store.res(WorldMap).get_tile(pos.x, pos.y) in (Tile.GRASS, Tile.DARK_GRASS),
          "wolf spawns on grass")
    check(isinstance(store.get(wolf, Pack).wants_pack, bool), "wolf rolls wants_pack")

    log = store.res(DevLog)
    check(len(log.for_cat("spawn")) == 22, "each spawn logged", str(len(log.for_cat("spawn"))))

    wm = WorldMap.filled(32, Tile.WATER)
    wm.set_tile(16, 16, Tile.GRASS)
    store = _store(wm)
    cow = spawn_land_animal(store, COW)
    pos = store.get(cow, Position) if cow else None
    check(pos is not None and (pos.x, pos.y) == (16, 16), "centre fallback for land animals")

    wm = WorldMap.filled(32, Tile.SAND)
    wm.spawn_point = (7, 9)
    store = _store(wm)
    pid = spawn_player(store)
    pos = store.get(pid, Position)
    check((pos.x, pos.y) == (7, 9), "player placed on the spawn point")


def test_spawn_phase():
    print("\n── Spawn phase caps & chances ──")
    store = _store(_split_map(), fish_spawn_chance=1.0, pig_spawn_chance=1.0,
                   cow_spawn_chance=1.0, wolf_spawn_chance=1.0)
    born = spawn_system(store)
    check(len(born) == 4, "one of each species per spawn phase", str(len(born)))
    check([store.count_species(s) for s in (FISH, PIG, COW, WOLF)] == [1, 1, 1, 1],
          "fish, pig, cow, wolf each spawned")

    store = _store(_split_map(), fish_spawn_chance=1.0, max_fish=2,
                   pig_spawn_chance=0.0, cow_spawn_chance=0.0, wolf_spawn_chance=0.0)
    for _ in range(10):
        spawn_system(store)
    check(store.count_species(FISH) == 2, "population never exceeds its cap")
    check(store.count_species(PIG) == 0, "zero chance never spawns")


def test_player_movement():
    print("\n── Player movement ──")
    wm = WorldMap.filled(32, Tile.GRASS)
    for x in range(16, 32):
        for y in range(32):
            wm.set_tile(x, y, Tile.WATER)
    store = _store(wm)
    pid = create_agent(store, PLAYER, 5.5, 5.5)
    pos = store.get(pid, Position)

    check(move_entity(store, pid, 1, 0), "move applied")
    check(abs(pos.x - 5.6) < 1e-9 and pos.y == 5.5, "land speed 0.1", f"x={pos.x}")

    move_entity(store, pid, 3, 4)
    check(abs(pos.x - 5.66) < 1e-9 and abs(pos.y - 5.58) < 1e-9,
          "direction normalised", f"({pos.x}, {pos.y})")

    pos.x, pos.y = 5.5, 5.5
    move_entity(store, pid, 0, 1, sprinting=True)
    check(abs(pos.y - 5.7) < 1e-9, "sprint doubles speed", f"y={pos.y}")
    check(store.get(pid, Player).sprinting, "sprint flag recorded")

    pos.x, pos.y = 20.5, 5.5
    move_entity(store, pid, -1, 0)
    check(abs(pos.x - 20.45) < 1e-9, "water speed 0.05", f"x={pos.x}")

    pos.x, pos.y = 0.05, 5.5
    check(move_entity(store, pid, -1, 0) is False, "move off the map rejected")
    check((pos.x, pos.y) == (0.05, 5.5), "rejected move leaves position unchanged")

    check(move_entity(store, 12345, 1, 0) is False, "unknown id → False")


if __name__ == "__main__":
    sections = [
        ("Create / Remove", test_create_remove),
        ("Species Bundles", test_species_bundles),
        ("Queries", test_queries),
        ("Mid-iteration Removal", test_mid_iteration_removal),
        ("Spawners", test_spawners),
        ("Spawn Phase", test_spawn_phase),
        ("Player Movement", test_player_movement),
    ]

    for name, fn in sections:
        try:
            fn()
        except AssertionError:
            pass
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    total = _passed + _failed
    print(f"\n{'=' * 60}")
    print(f"  Entity Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
