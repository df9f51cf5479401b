"""simulation/world_sim.py — Top-level simulation facade.

``WorldSim`` owns one isolated simulation: an ``EntityStore`` holding
the agents plus the world-level resources (``WorldMap``, settings,
``random.Random``, ``DevLog``, ``EventBus``, ``SimClock``).  A host (the
pygame viewer, a test, a script) only talks to this class.

Usage::

    sim = WorldSim(size=128, terrain_settings=TerrainSettings(seed=42))
    sim.bus.subscribe("WorldReset", on_reset)
    sim.move_player(1, 0, sprinting=True)
    sim.advance(dt)
    for view in sim.snapshot():
        draw(view)

Configuration changes are validated before any state is touched: an
``InvalidConfiguration`` leaves the previous world running.
"""

from __future__ import annotations
import random
from dataclasses import dataclass

from core.constants import DEFAULT_MAP_SIZE, SPECIES
from core.ecs import EntityStore
from core.events import EventBus, WorldReset
from core.settings import (
    EntitySettings, FoliageSettings, InvalidConfiguration, TerrainSettings,
    validate_map_size,
)
from core.world_map import Tile, WorldMap
from components import (
    DevLog, Heading, Hunger, Hunt, Identity, Pack, Position, Prey, SimClock,
)
from logic import terrain
from logic.entity_factory import spawn_player
from logic.movement import move_entity
from logic.tick import tick_systems
from logic.ai import pack as packs


@dataclass(frozen=True)
class AgentView:
    """Read-only per-agent snapshot handed to renderers."""
    id: int
    species: str
    x: float
    y: float
    heading: float
    hunger: float | None = None
    is_hunting: bool = False
    is_pack_leader: bool = False
    pack_leader: int | None = None
    flee_target: int | None = None
    hunt_target: int | None = None
    health: float | None = None


class WorldSim:
    """One simulated world and the commands a host may issue against it."""

    def __init__(self, size: int = DEFAULT_MAP_SIZE,
                 terrain_settings: TerrainSettings | None = None,
                 foliage: FoliageSettings | None = None,
                 entities: EntitySettings | None = None,
                 *, rng: random.Random | None = None) -> None:
        size = validate_map_size(size)
        self.terrain = terrain_settings or TerrainSettings.from_tuning()
        self.foliage = foliage or FoliageSettings.from_tuning()
        self.terrain.validate()
        self.foliage.validate()
        entities = entities or EntitySettings.from_tuning()
        entities.validate()

        self.store = EntityStore()
        self.store.set_res(rng or random.Random())
        self.store.set_res(entities)
        self.store.set_res(DevLog())
        self.store.set_res(EventBus())
        self.store.set_res(SimClock())

        self.player_id: int | None = None
        self._install_map(self._generate(size, self.terrain))

    # ── Resources ────────────────────────────────────────────────────

    @property
    def world_map(self) -> WorldMap:
        return self.store.res(WorldMap)

    @property
    def bus(self) -> EventBus:
        return self.store.res(EventBus)

    @property
    def log(self) -> DevLog:
        return self.store.res(DevLog)

    @property
    def clock(self) -> SimClock:
        return self.store.res(SimClock)

    @property
    def entity_settings(self) -> EntitySettings:
        return self.store.res(EntitySettings)

    @property
    def size(self) -> int:
        return self.world_map.width

    # ── World (re)generation ─────────────────────────────────────────

    def _generate(self, size: int, settings: TerrainSettings,
                  foliage: FoliageSettings | None = None) -> WorldMap:
        wm = terrain.generate(size, size, settings, foliage or self.foliage)
        print(f"[WORLD] Generated {size}x{size} seed={settings.seed:.2f} "
              f"water={wm.count(Tile.WATER)} trees={len(wm.trees)} "
              f"rocks={len(wm.rocks)} spawn={wm.spawn_point}")
        return wm

    def _install_map(self, wm: WorldMap) -> None:
        """Swap in *wm*, clear animals and put the player on the spawn point."""
        keep = [self.player_id] if self.player_id is not None else []
        removed = self.store.clear(keep=keep)
        self.store.set_res(wm)

        sx, sy = wm.spawn_point
        if self.store.alive(self.player_id):
            pos = self.store.get(self.player_id, Position)
            pos.x = float(sx)
            pos.y = float(sy)
        else:
            self.player_id = spawn_player(self.store)

        self.bus.emit(WorldReset(width=wm.width, height=wm.height,
                                 spawn_x=sx, spawn_y=sy, seed=self.terrain.seed))
        self.bus.drain()
        if removed:
            print(f"[SIM] World reset: cleared {removed} agents")

    def regenerate(self, settings: TerrainSettings | None = None,
                   *, foliage: FoliageSettings | None = None,
                   **changes) -> WorldMap:
        """Rebuild the map from *settings* (plus field *changes*).

        Raises ``InvalidConfiguration`` without touching the current world
        if the new settings are out of range.
        """
        new_terrain = settings or self.terrain
        new_foliage = foliage or self.foliage
        try:
            new_terrain = new_terrain.with_changes(**changes)
            new_foliage.validate()
        except (InvalidConfiguration, TypeError) as exc:
            print(f"[SIM] Rejected terrain settings: {exc}")
            raise InvalidConfiguration(str(exc)) from exc

        wm = self._generate(self.size, new_terrain, new_foliage)
        self.terrain = new_terrain
        self.foliage = new_foliage
        self._install_map(wm)
        return wm

    def resize(self, size: int) -> WorldMap:
        """Regenerate at a new preset map size, keeping the terrain settings."""
        try:
            size = validate_map_size(size)
        except InvalidConfiguration as exc:
            print(f"[SIM] Rejected map size: {exc}")
            raise
        wm = self._generate(size, self.terrain)
        self._install_map(wm)
        return wm

    def new_seed(self) -> WorldMap:
        return self.regenerate(seed=self.store.res(random.Random).random() * 10000)

    def update_entity_settings(self, settings: EntitySettings | None = None,
                               **changes) -> EntitySettings:
        """Install new entity settings and trim packs to the new caps.

        Raises ``InvalidConfiguration`` and keeps the old settings if the
        new ones are out of range.
        """
        try:
            new = (settings or self.entity_settings).with_changes(**changes)
        except (InvalidConfiguration, TypeError) as exc:
            print(f"[SIM] Rejected entity settings: {exc}")
            raise InvalidConfiguration(str(exc)) from exc
        self.store.set_res(new)

        dissolved, released = packs.enforce_pack_caps(self.store)
        if dissolved or released:
            print(f"[SIM] Pack caps lowered: dissolved {dissolved} packs, "
                  f"released {released} members")
        self.bus.drain()
        return new

    # ── Commands ─────────────────────────────────────────────────────

    def move_entity(self, eid: int, dx: float, dy: float,
                    sprinting: bool = False) -> bool:
        return move_entity(self.store, eid, dx, dy, sprinting)

    def move_player(self, dx: float, dy: float, sprinting: bool = False) -> bool:
        if self.player_id is None:
            return False
        return move_entity(self.store, self.player_id, dx, dy, sprinting)

    def advance(self, dt: float = 0.0) -> None:
        """Run one simulation tick (spawn phase, then update phase)."""
        self.clock.time += dt
        tick_systems(self.store)

    # ── Queries ──────────────────────────────────────────────────────

    def get_tile(self, x: float, y: float) -> Tile | None:
        return self.world_map.get_tile(x, y)

    def get_tree(self, x: float, y: float) -> int | None:
        return self.world_map.get_tree(x, y)

    def get_rock(self, x: float, y: float) -> int | None:
        return self.world_map.get_rock(x, y)

    def get_grass(self, x: float, y: float) -> int | None:
        return self.world_map.get_grass(x, y)

    def tile_info(self, x: float, y: float) -> dict | None:
        return self.world_map.tile_info(x, y)

    def entities_at_tile(self, tx: int, ty: int) -> list[int]:
        return self.store.entities_at_tile(tx, ty)

    def view(self, eid: int) -> AgentView | None:
        if not self.store.alive(eid):
            return None
        s = self.store
        ident = s.get(eid, Identity)
        pos = s.get(eid, Position)
        heading = s.get(eid, Heading)
        hunger = s.get(eid, Hunger)
        hunt = s.get(eid, Hunt)
        pack = s.get(eid, Pack)
        prey = s.get(eid, Prey)
        return AgentView(
            id=eid,
            species=ident.species,
            x=pos.x,
            y=pos.y,
            heading=heading.angle if heading else 0.0,
            hunger=hunger.current if hunger else None,
            is_hunting=hunt.is_hunting if hunt else False,
            is_pack_leader=pack.is_leader if pack else False,
            pack_leader=pack.leader if pack else None,
            flee_target=prey.flee_target if prey else None,
            hunt_target=hunt.target if hunt else None,
            health=prey.health if prey else None,
        )

    def snapshot(self) -> list[AgentView]:
        """Every live agent, in creation order."""
        return [self.view(eid) for eid in self.store.ids()]

    def counts(self) -> dict[str, int]:
        return {sp: self.store.count_species(sp) for sp in SPECIES}

    def debug_info(self) -> dict:
        """Return debug information about the simulation state."""
        wm = self.world_map
        return {
            "tick": self.clock.tick,
            "size": wm.width,
            "seed": self.terrain.seed,
            "spawn_point": wm.spawn_point,
            "agents": len(self.store),
            "counts": self.counts(),
            "events": self.bus.stats(),
            "recent_log": self.log.recent(10),
        }
