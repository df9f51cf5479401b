"""
core/ecs.py — Entity store

Agents are ints. Components are any object, stored by type.
Query by component types to get matching agents.

    store = EntityStore()
    e = store.spawn()
    store.add(e, Position(5.0, 3.0))
    store.add(e, Identity("pig"))

    for eid, pos, ident in store.query(Position, Identity):
        pos.x += 1

Removal is immediate: once ``remove(eid)`` returns, no query, lookup or
``alive()`` check will see that id again, even later in the same tick.
Cross-references between agents are stored as ids and must be checked
with ``alive()`` before use.

World-level singletons (the map, settings, rng, logs) live alongside
the agents as resources::

    store.set_res(world_map)
    wm = store.res(WorldMap)
"""

from __future__ import annotations
import math
from typing import Any, Iterable, Iterator

from components.agents import Identity
from components.spatial import Position


class EntityStore:
    def __init__(self):
        self._next_id = 0
        self._stores: dict[type, dict[int, Any]] = {}
        self._live: dict[int, None] = {}      # insertion-ordered id set
        self._resources: dict[type, Any] = {}

    # -- Agents --

    def spawn(self) -> int:
        self._next_id += 1
        self._live[self._next_id] = None
        return self._next_id

    def remove(self, eid: int) -> bool:
        """Drop *eid* and all its components.  Returns whether it existed."""
        if eid not in self._live:
            return False
        del self._live[eid]
        for store in self._stores.values():
            store.pop(eid, None)
        return True

    def alive(self, eid: int | None) -> bool:
        return eid is not None and eid in self._live

    def ids(self) -> list[int]:
        """Snapshot of live ids in creation order."""
        return list(self._live)

    def __len__(self) -> int:
        return len(self._live)

    def clear(self, keep: Iterable[int] = ()) -> int:
        """Remove every agent except those in *keep*.  Returns count removed."""
        keep = set(keep)
        doomed = [eid for eid in self._live if eid not in keep]
        for eid in doomed:
            self.remove(eid)
        return len(doomed)

    # -- Components --

    def add(self, eid: int, comp: Any):
        t = type(comp)
        if t not in self._stores:
            self._stores[t] = {}
        self._stores[t][eid] = comp

    def get(self, eid: int | None, comp_type: type) -> Any | None:
        if eid is None:
            return None
        return self._stores.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid in self._stores.get(comp_type, {})

    # -- Queries --

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield (eid, comp1, comp2, ...) for agents that have ALL types.

        Iterates in creation order; agents removed mid-iteration are
        skipped.
        """
        if not types:
            return
        buckets = [self._stores.get(t, {}) for t in types]
        for eid in list(self._live):
            if eid not in self._live:
                continue
            if all(eid in b for b in buckets):
                yield (eid, *(b[eid] for b in buckets))

    def all_of(self, comp_type: type) -> Iterator[tuple[int, Any]]:
        """Yield (eid, component) for every agent with this type."""
        store = self._stores.get(comp_type, {})
        for eid in list(store):
            if eid in store:
                yield eid, store[eid]

    def count(self, comp_type: type) -> int:
        return len(self._stores.get(comp_type, {}))

    # -- Species / spatial queries --

    def of_species(self, *species: str) -> list[int]:
        """Live ids whose Identity.species is in *species*, creation order."""
        wanted = set(species)
        return [eid for eid, ident in self.all_of(Identity)
                if ident.species in wanted]

    def count_species(self, species: str) -> int:
        return sum(1 for _, ident in self.all_of(Identity)
                   if ident.species == species)

    def nearby(self, x: float, y: float, radius: float,
               species: Iterable[str] | None = None) -> Iterator[tuple[int, Position, float]]:
        """Yield ``(eid, pos, dist)`` for agents strictly within *radius*."""
        wanted = set(species) if species is not None else None
        for eid, pos, ident in self.query(Position, Identity):
            if wanted is not None and ident.species not in wanted:
                continue
            d = math.hypot(pos.x - x, pos.y - y)
            if d < radius:
                yield eid, pos, d

    def nearest_of_species(self, x: float, y: float, species: Iterable[str],
                           max_radius: float, *,
                           exclude: int | None = None) -> int | None:
        """Id of the strictly-closest agent of *species* within *max_radius*.

        Ties go to the earliest-created agent.
        """
        best = None
        best_d = math.inf
        for eid, _, d in self.nearby(x, y, max_radius, species):
            if eid == exclude:
                continue
            if d < best_d:
                best_d = d
                best = eid
        return best

    def entities_at_tile(self, tx: int, ty: int) -> list[int]:
        """Ids of agents whose floored position is (tx, ty)."""
        return [eid for eid, pos in self.all_of(Position)
                if math.floor(pos.x) == tx and math.floor(pos.y) == ty]

    def distance(self, a: int, b: int) -> float | None:
        """Euclidean distance between two live agents, else None."""
        pa = self.get(a, Position)
        pb = self.get(b, Position)
        if pa is None or pb is None:
            return None
        return math.hypot(pa.x - pb.x, pa.y - pb.y)

    # -- Resources (singletons, not tied to agents) --

    def set_res(self, resource: Any):
        self._resources[type(resource)] = resource

    def res(self, res_type: type) -> Any | None:
        return self._resources.get(res_type)
