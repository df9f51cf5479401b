"""logic/ai/brains.py — Species update registry and runner.

Public API
----------
``register_update(species, fn)``  — add a per-tick update for a species
``get_update(species)``           — look up the update for a species
``registered_names()``            — list all registered species
``tick_agents(store)``            — run every live agent once, in the
                                    fixed species order

Update functions have the signature ``fn(store, eid) -> None`` and read
everything else (map, settings, rng, log) from store resources.

Species modules register themselves at import time via
``register_update``.  Import order matters: this module must be
importable before the modules that call ``register_update``.
"""

from __future__ import annotations
import random
import traceback
from typing import Callable

from core.constants import UPDATE_ORDER
from core.ecs import EntityStore
from core.settings import EntitySettings
from components import DevLog, Identity, SimClock

# ── Registry ─────────────────────────────────────────────────────────

_registry: dict[str, Callable] = {}


def register_update(species: str, fn: Callable) -> None:
    """Register *fn* as the per-tick update for *species*."""
    _registry[species] = fn


def get_update(species: str) -> Callable | None:
    """Return the update function for *species*, or ``None``."""
    return _registry.get(species)


def registered_names() -> list[str]:
    """Return a sorted list of all registered species."""
    return sorted(_registry.keys())


# ── Shared helpers ───────────────────────────────────────────────────

def rng(store: EntityStore):
    """The injected ``random.Random`` resource, else the global module."""
    r = store.res(random.Random)
    return r if r is not None else random


def settings(store: EntityStore) -> EntitySettings:
    s = store.res(EntitySettings)
    if s is None:
        s = EntitySettings()
        store.set_res(s)
    return s


def current_tick(store: EntityStore) -> int:
    clock = store.res(SimClock)
    return clock.tick if clock else 0


def _log(store: EntityStore, eid: int, cat: str, msg: str, **kw):
    """Write to DevLog if available."""
    log = store.res(DevLog)
    if log is None:
        return
    ident = store.get(eid, Identity)
    species = ident.species if ident else "?"
    log.record(eid, cat, msg, species=species, t=current_tick(store), **kw)


# ── Runner ───────────────────────────────────────────────────────────

def tick_agents(store: EntityStore) -> None:
    """Update every live agent once: fish, then pigs/cows, then wolves.

    Each group is snapshotted before it runs; agents removed earlier in
    the tick (eaten, starved) are skipped when their turn comes.
    """
    for group in UPDATE_ORDER:
        for eid in store.of_species(*group):
            if not store.alive(eid):
                continue
            ident = store.get(eid, Identity)
            fn = get_update(ident.species)
            if fn is None:
                continue
            try:
                fn(store, eid)
            except Exception as exc:
                traceback.print_exc()
                _log(store, eid, "error",
                     f"{ident.species} update crash: {exc}")


# ── Side-effect imports: trigger register_update() calls ─────────────
from logic.ai import fish as _fish                                  # noqa: F401, E402
from logic.ai import herd as _herd                                  # noqa: F401, E402
from logic.ai import wolf as _wolf                                  # noqa: F401, E402
