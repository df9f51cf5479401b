"""components.agents — Per-species agent state.

Each species is a fixed bundle of components, so invalid combinations
(a fish with pack fields, a pig with hunger) cannot be expressed:

    player  Identity, Position, Heading, Player
    fish    Identity, Position, Heading, Wander, Prey
    pig/cow Identity, Position, Heading, Wander, Prey
    wolf    Identity, Position, Heading, Wander, Hunger, Hunt, Pack

Every field that refers to another agent holds its *id*, never the
object.  Callers re-check ``store.alive(id)`` before every use.
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Identity:
    species: str = "pig"


@dataclass
class Player:
    """Marks the player agent.  Moved only by input, never by AI."""
    sprinting: bool = False


@dataclass
class Wander:
    """Random-walk cadence.

    ``timer`` counts down one per tick; on expiry a new heading is
    picked and ``moving`` is re-rolled (herbivores and wolves idle
    some of the time, fish always swim).
    """
    timer: float = 0.0
    moving: bool = True


@dataclass
class Prey:
    """Huntable animal.

    ``flee_target`` — id of the wolf this animal is running from.
    ``health``      — HP (harvesting is handled outside the simulation).
    """
    flee_target: int | None = None
    health: float = 100.0


@dataclass
class Hunger:
    """Wolf hunger gauge.

    ``current`` climbs by ``rate`` every tick from 0 toward
    ``EntitySettings.wolf_starvation_hunger``; reaching it removes the
    wolf.  The bound is read from the live settings each tick.
    """
    current: float = 0.0
    rate: float = 0.02


@dataclass
class Hunt:
    is_hunting: bool = False
    target: int | None = None


@dataclass
class Pack:
    """Wolf pack role.

    A wolf is exactly one of: free (``leader is None`` and not
    ``is_leader``), member (``leader`` set) or leader (``is_leader``).

    ``members``         — ids of pack members, in join order (leaders only).
    ``wants_pack``      — free wolf is looking for a pack.
    ``spotted_prey``    — member's latest sighting.
    ``alerted_prey``    — sighting surfaced to a leader, consumed on re-search.
    ``preferred_angle`` — attack angle assigned by a hunting leader.
    """
    leader: int | None = None
    members: list[int] = field(default_factory=list)
    is_leader: bool = False
    wants_pack: bool = False
    spotted_prey: int | None = None
    alerted_prey: int | None = None
    preferred_angle: float | None = None

    @property
    def is_free(self) -> bool:
        return self.leader is None and not self.is_leader
