"""logic/tick.py — Simulation tick orchestration.

One tick is two phases, always in this order:

1. **Spawn** — for each animal species below its cap, one Bernoulli
   draw at the species spawn chance; on success a bounded-retry spawn.
2. **Update** — every live agent once, fish → pigs/cows → wolves.

Events queued during the tick are drained at the end.

Usage::

    from logic.tick import tick_systems
    tick_systems(store)
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import SimClock
from core.constants import COW, FISH, PIG, WOLF
from core.events import EventBus
from logic.ai.brains import rng, settings, tick_agents
from logic.entity_factory import SPAWNERS

if TYPE_CHECKING:
    from core.ecs import EntityStore

SPAWN_ORDER = (FISH, PIG, COW, WOLF)


def spawn_system(store: "EntityStore") -> list[int]:
    """Run the spawn phase.  Returns ids of agents created."""
    s = settings(store)
    r = rng(store)
    born = []
    for species in SPAWN_ORDER:
        cap, chance = s.cap_and_chance(species)
        if store.count_species(species) >= cap:
            continue
        if r.random() >= chance:
            continue
        eid = SPAWNERS[species](store)
        if eid is not None:
            born.append(eid)
    return born


def tick_systems(store: "EntityStore", *, skip_spawn: bool = False) -> None:
    """Run one full simulation tick.

    Parameters
    ----------
    store : EntityStore
        The agent store; the WorldMap and settings live on it as resources.
    skip_spawn : bool
        Skip the spawn phase (useful in scripted scenarios).
    """
    clock = store.res(SimClock)
    if clock:
        clock.tick += 1

    if not skip_spawn:
        spawn_system(store)

    tick_agents(store)

    bus = store.res(EventBus)
    if bus:
        bus.drain()
