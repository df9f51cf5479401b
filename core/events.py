"""core/events.py — Lightweight event bus.

Decouples systems that need to *signal* something from systems that
*react* to it.  The bus lives as a store resource::

    from core.events import EventBus, WorldReset
    bus = store.res(EventBus)
    bus.emit(AgentDied(eid=42, species="pig", cause="predation"))

Consumers subscribe with a callable::

    bus.subscribe("WorldReset", viewer.recentre_camera)

And the orchestrator drains once per tick::

    bus.drain()          # calls all handlers for pending events

Design rules:
  - Events are plain dataclasses — no behaviour.
  - ``emit()`` is O(1) (just appends).
  - ``drain()`` processes all queued events in FIFO order.
  - Handlers may emit new events; those are processed in the same drain.

Events never carry state the simulation depends on: agent state is
mutated directly during the tick, the bus only tells observers about it.
"""

from __future__ import annotations
import traceback
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class WorldReset:
    """The map was regenerated; the viewer should re-centre on the player."""
    width: int = 0
    height: int = 0
    spawn_x: float = 0.0
    spawn_y: float = 0.0
    seed: float = 0.0


@dataclass
class AgentDied:
    """An agent left the world: ``cause`` is "predation" or "starvation"."""
    eid: int
    species: str = ""
    cause: str = ""
    killer_eid: int | None = None


@dataclass
class PackChanged:
    """Pack membership changed.

    ``change`` is one of "leader", "join", "recruit", "leave", "dissolve".
    """
    leader: int
    member: int | None = None
    change: str = ""


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget event bus stored as a store resource."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)

    # ── Public API ───────────────────────────────────────────────────

    def emit(self, event) -> None:
        """Queue an event for processing on next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Register *handler* to receive events of *event_type*.

        *event_type* is the class name, e.g. ``"WorldReset"``.
        """
        self._subs[event_type].append(handler)

    def drain(self) -> int:
        """Process all queued events.  Returns number processed."""
        processed = 0
        safety = 1000  # prevent infinite loops
        while self._queue and safety > 0:
            batch = self._queue[:]
            self._queue.clear()
            for event in batch:
                name = type(event).__name__
                self._stats[name] += 1
                for handler in self._subs.get(name, []):
                    try:
                        handler(event)
                    except Exception as exc:
                        print(f"[EVENT] handler error for {name}: {exc}")
                        traceback.print_exc()
            processed += len(batch)
            safety -= 1
        return processed

    def clear(self) -> None:
        """Discard all pending events."""
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Return cumulative event counts by type."""
        return dict(self._stats)

    def pending(self) -> list[Any]:
        """Copy of the undrained queue (for tests and the debug overlay)."""
        return list(self._queue)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"
