"""test_world_sim.py — WorldSim facade and the per-frame clock.

Run:  python test_world_sim.py
"""
from __future__ import annotations
import sys, random, traceback
from dataclasses import FrozenInstanceError

# ── Bootstrap ────────────────────────────────────────────────────────
from core.tuning import load as _load_tuning
_load_tuning()

from core.constants import FISH, PLAYER, WOLF
from core.settings import (
    EntitySettings, FoliageSettings, InvalidConfiguration, TerrainSettings,
)
from core.world_map import Tile
from components import Hunger, Pack
from logic.ai import pack as packs
from logic.entity_factory import create_agent
from simulation.clock import SimulationClock
from simulation.world_sim import AgentView, WorldSim
from scenes.world_scene import WorldScene


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


def _sim(seed: float = 7, **entity_changes) -> WorldSim:
    return WorldSim(64, TerrainSettings(seed=seed),
                    entities=EntitySettings().with_changes(**entity_changes),
                    rng=random.Random(1))


def _player_xy(sim: WorldSim) -> tuple[float, float]:
    view = sim.view(sim.player_id)
    return view.x, view.y


def _raises(fn, exc=InvalidConfiguration) -> bool:
    try:
        fn()
    except exc:
        return True
    return False


# ── Tests ────────────────────────────────────────────────────────────

def test_init():
    print("\n── Construction ──")
    sim = _sim()
    check(sim.size == 64, "map size")
    check(sim.world_map.count(Tile.WATER) == 3799, "terrain from the seed",
          str(sim.world_map.count(Tile.WATER)))
    check(sim.counts()[PLAYER] == 1 and len(sim.store) == 1, "only the player exists")
    check(_player_xy(sim) == tuple(float(c) for c in sim.world_map.spawn_point),
          "player on the spawn point")
    check(sim.clock.tick == 0, "clock starts at zero")
    check(_raises(lambda: WorldSim(size=100)), "non-preset size rejected")
    check(_raises(lambda: WorldSim(64, TerrainSettings(seed=1, octaves=0))),
          "invalid terrain settings rejected")


def test_regenerate():
    print("\n── Regenerate ──")
    sim = _sim(fish_spawn_chance=1.0, pig_spawn_chance=1.0)
    resets = []
    sim.bus.subscribe("WorldReset", resets.append)
    for _ in range(5):
        sim.advance()
    check(len(sim.store) > 1, "animals spawned", str(sim.counts()))
    pid = sim.player_id

    wm = sim.regenerate(seed=42)
    check(sim.world_map is wm and sim.terrain.seed == 42, "new map installed")
    check(len(resets) == 1 and resets[0].width == 64 and resets[0].seed == 42,
          "WorldReset announced")
    check(sim.player_id == pid and len(sim.store) == 1, "animals cleared, player kept")
    check(_player_xy(sim) == tuple(float(c) for c in wm.spawn_point),
          "player moved to the new spawn point")
    check((resets[0].spawn_x, resets[0].spawn_y) == wm.spawn_point,
          "event carries the spawn point")

    again = sim.regenerate(TerrainSettings(seed=7))
    check(again.count(Tile.WATER) == 3799, "same settings → same map")

    before = sim.world_map
    check(_raises(lambda: sim.regenerate(water_level=2.0)), "out-of-range level rejected")
    check(_raises(lambda: sim.regenerate(bogus=1)), "unknown field rejected")
    for bad in (float("nan"), float("inf"), "abc", True):
        check(_raises(lambda: sim.regenerate(seed=bad)), f"seed {bad!r} rejected")
    foliage = sim.foliage
    check(_raises(lambda: sim.regenerate(foliage=FoliageSettings(), seed="abc")),
          "bad seed with new foliage rejected")
    check(sim.foliage is foliage, "rejected change keeps the foliage")
    check(sim.world_map is before and sim.terrain.seed == 7,
          "rejected change leaves the world intact")
    check(len(resets) == 2, "no reset for rejected changes")

    sim.new_seed()
    check(sim.terrain.seed != 7 and len(resets) == 3, "new_seed regenerates")


def test_resize():
    print("\n── Resize ──")
    sim = _sim(seed=42)
    sim.resize(128)
    check(sim.size == 128 and sim.world_map.height == 128, "resized to a preset")
    check(sim.world_map.count(Tile.WATER) == 14209, "same seed at the new size",
          str(sim.world_map.count(Tile.WATER)))
    check(_raises(lambda: sim.resize(100)), "arbitrary size rejected")
    check(sim.size == 128, "rejected resize keeps the map")
    check(_raises(lambda: sim.resize("64")), "non-integer size rejected")


def test_entity_settings():
    print("\n── Entity settings ──")
    sim = _sim()
    old = sim.entity_settings
    check(_raises(lambda: sim.update_entity_settings(max_fish=-1)), "negative cap rejected")
    check(sim.entity_settings is old, "rejected update keeps the old settings")
    new = sim.update_entity_settings(max_fish=0, fish_spawn_chance=1.0)
    check(sim.entity_settings is new and new.max_fish == 0, "update applied")
    for _ in range(10):
        sim.advance()
    check(sim.counts()[FISH] == 0, "cap of zero spawns nothing")


def test_starvation_bound_is_live():
    print("\n── Starvation bound follows settings ──")
    sim = _sim(fish_spawn_chance=0.0, pig_spawn_chance=0.0,
               cow_spawn_chance=0.0, wolf_spawn_chance=0.0)
    sx, sy = sim.world_map.spawn_point
    wolf = create_agent(sim.store, WOLF, sx + 0.5, sy + 0.5)
    sim.store.get(wolf, Hunger).current = 60.0
    sim.advance()
    check(sim.store.alive(wolf), "wolf below the default bound survives")

    sim.update_entity_settings(wolf_starvation_hunger=50.0)
    sim.advance()
    check(not sim.store.alive(wolf), "lowered bound starves an existing wolf")
    check(sim.counts()[WOLF] == 0, "starved wolf is gone from the counts")


def test_lowered_pack_caps():
    print("\n── Lowered pack caps ──")
    sim = _sim(fish_spawn_chance=0.0, pig_spawn_chance=0.0,
               cow_spawn_chance=0.0, wolf_spawn_chance=0.0,
               max_pack_leaders=2)
    sx, sy = sim.world_map.spawn_point
    first, second, m1, m2, m3 = (create_agent(sim.store, WOLF, sx + 0.5, sy + 0.5)
                                 for _ in range(5))
    for lid in (first, second):
        sim.store.get(lid, Pack).is_leader = True
    packs.join(sim.store, m1, first)
    packs.join(sim.store, m2, first)
    packs.join(sim.store, m3, second)

    sim.update_entity_settings(max_pack_leaders=1)
    check(packs.leaders(sim.store) == [first], "newest leader dissolved")
    check(sim.store.get(second, Pack).is_free and sim.store.get(m3, Pack).leader is None,
          "dissolved pack members are free")
    check(sim.store.get(first, Pack).members == [m1, m2], "kept pack untouched")

    sim.update_entity_settings(max_pack_size=1)
    check(sim.store.get(first, Pack).members == [m1], "pack trimmed to the new size")
    check(sim.store.get(m2, Pack).leader is None, "latest joiner released")

    old = sim.entity_settings
    check(_raises(lambda: sim.update_entity_settings(bogus=1)), "unknown field rejected")
    check(sim.entity_settings is old, "rejected update keeps the old settings")


def test_scene_reset_subscription():
    print("\n── Viewer reset subscription ──")
    sim = _sim()
    before = len(sim.bus._subs["WorldReset"])
    scene = WorldScene(sim)
    scene.on_enter(None)
    scene.on_enter(None)
    check(len(sim.bus._subs["WorldReset"]) == before + 1,
          "re-entering the scene keeps one reset handler")

    scene.camera.x = scene.camera.y = -1.0
    wm = sim.regenerate(seed=42)
    check((scene.camera.x, scene.camera.y) == tuple(float(c) for c in wm.spawn_point),
          "camera re-centred on reset")


def test_commands():
    print("\n── Commands ──")
    sim = _sim()
    x0, y0 = _player_xy(sim)
    check(sim.move_player(1, 0), "player moves")
    x1, y1 = _player_xy(sim)
    check(x1 > x0 and y1 == y0, "moved along +x")
    check(not sim.move_entity(9999, 1, 0), "unknown agent cannot move")

    sim.advance(0.5)
    sim.advance(0.25)
    check(sim.clock.tick == 2, "advance runs one tick each")
    check(abs(sim.clock.time - 0.75) < 1e-12, "frame time accumulated")


def test_queries():
    print("\n── Queries ──")
    sim = _sim(seed=42)
    check(sim.get_tile(-1, 0) is None and sim.get_tile(0, 64) is None,
          "off-map tiles are None")
    info = sim.tile_info(3.5, 4.5)
    check(info["x"] == 3 and info["y"] == 4 and info["tile"] is sim.get_tile(3, 4),
          "tile_info floors coordinates")

    trees = list(sim.world_map.trees)
    if trees:
        (tx, ty), variant = trees[0]
        check(sim.get_tree(tx + 0.5, ty + 0.5) == variant, "tree lookup")
    check(sim.get_rock(-5, -5) is None and sim.get_grass(-5, -5) is None,
          "no features off the map")

    sx, sy = sim.world_map.spawn_point
    check(sim.entities_at_tile(sx, sy) == [sim.player_id], "player found on its tile")

    snap = sim.snapshot()
    check(len(snap) == 1 and isinstance(snap[0], AgentView), "snapshot of live agents")
    view = snap[0]
    check(view.species == PLAYER and view.hunger is None and view.health is None,
          "player view has no animal fields")
    check(_raises(lambda: setattr(view, "x", 0.0), FrozenInstanceError),
          "snapshot views are read-only")
    check(sim.view(9999) is None, "view of a missing agent is None")

    dbg = sim.debug_info()
    check(dbg["tick"] == 0 and dbg["size"] == 64 and dbg["agents"] == 1, "debug info")


def test_clock():
    print("\n── Simulation clock ──")
    sim = _sim()
    check(_raises(lambda: SimulationClock(sim, 0)), "scale 0 rejected")
    check(_raises(lambda: SimulationClock(sim, 21)), "scale 21 rejected")
    check(_raises(lambda: SimulationClock(sim, 2.5)), "fractional scale rejected")
    check(_raises(lambda: SimulationClock(sim, True)), "bool scale rejected")

    clock = SimulationClock(sim, 5)
    check(clock.frame(1 / 60) == 5 and sim.clock.tick == 5, "idle frame runs time_scale ticks")
    check(clock.frame(1 / 60, move=(1, 0)) == 1 and sim.clock.tick == 6,
          "moving frame runs one tick")

    clock.toggle_pause()
    x0, _ = _player_xy(sim)
    check(clock.frame(1 / 60, move=(1, 0)) == 0 and sim.clock.tick == 6,
          "paused frame runs no ticks")
    check(_player_xy(sim)[0] > x0, "player still moves while paused")
    clock.toggle_pause()

    clock.time_scale = 19
    check(clock.speed_up() == 20 and clock.speed_up() == 20, "speed clamps at 20")
    clock.time_scale = 2
    check(clock.slow_down() == 1 and clock.slow_down() == 1, "speed clamps at 1")

    try:
        clock.time_scale = 50
    except InvalidConfiguration:
        ok("setter rejects out-of-range scale")
    else:
        fail("setter rejects out-of-range scale")
    check(clock.time_scale == 1, "rejected scale keeps the old value")


if __name__ == "__main__":
    sections = [
        ("Construction", test_init),
        ("Regenerate", test_regenerate),
        ("Resize", test_resize),
        ("Entity Settings", test_entity_settings),
        ("Live Starvation Bound", test_starvation_bound_is_live),
        ("Lowered Pack Caps", test_lowered_pack_caps),
        ("Scene Reset Subscription", test_scene_reset_subscription),
        ("Commands", test_commands),
        ("Queries", test_queries),
        ("Clock", test_clock),
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
    print(f"  WorldSim Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
