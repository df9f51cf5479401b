"""components.dev_log — Structured agent behaviour log.

A ring-buffer resource that records what agents did on which tick:
spawns, kills, starvation, pack changes, hunt starts and update errors.
Read by tests and the viewer's debug overlay.

Usage:
    log = store.res(DevLog)
    log.record(eid, "kill", "ate pig 17", species="wolf", t=clock.tick,
               details={"shared_with": 3})

Each entry is a dict:
    {"t": int, "eid": int, "species": str, "cat": str,
     "msg": str, "details": dict | None}
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field


@dataclass
class DevLog:
    """Ring-buffer of agent / system events."""

    max_entries: int = 500
    entries: deque = field(default_factory=deque)

    # If non-empty, only entries whose ``cat`` is in the set are kept.
    cat_filter: set[str] = field(default_factory=set)
    # If non-empty, only entries whose ``eid`` is in the set are kept.
    eid_filter: set[int] = field(default_factory=set)

    def __post_init__(self):
        self.entries = deque(self.entries, maxlen=self.max_entries)

    def record(self, eid: int, cat: str, msg: str, *,
               species: str = "", t: int = 0,
               details: dict | None = None) -> None:
        if self.cat_filter and cat not in self.cat_filter:
            return
        if self.eid_filter and eid not in self.eid_filter:
            return
        self.entries.append({
            "t": t,
            "eid": eid,
            "species": species,
            "cat": cat,
            "msg": msg,
            "details": details,
        })

    def clear(self):
        self.entries.clear()

    def recent(self, n: int = 50) -> list[dict]:
        """Return the *n* most recent entries (newest last)."""
        return list(self.entries)[-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        return [e for e in self.entries if e["cat"] == cat][-n:]
