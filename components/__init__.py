"""components — Agent component dataclasses, organised by domain.

Submodules
----------
spatial    Position, Heading
agents     Identity, Player, Wander, Prey, Hunger, Hunt, Pack
resources  SimClock, Camera
dev_log    DevLog

All public names are re-exported here so callers can write
``from components import Position``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Position, Heading

# ── Agents ───────────────────────────────────────────────────────────
from components.agents import Identity, Player, Wander, Prey, Hunger, Hunt, Pack

# ── World resources / singletons ─────────────────────────────────────
from components.resources import SimClock, Camera

# ── Diagnostics ──────────────────────────────────────────────────────
from components.dev_log import DevLog

__all__ = [
    # spatial
    "Position", "Heading",
    # agents
    "Identity", "Player", "Wander", "Prey", "Hunger", "Hunt", "Pack",
    # resources
    "SimClock", "Camera",
    # diagnostics
    "DevLog",
]
