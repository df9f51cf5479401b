"""core/settings.py — Terrain, foliage and entity settings.

The three dataclasses here are the configuration boundary of the
simulation.  Every field has an in-code default; ``from_tuning()``
overlays the matching ``data/tuning.toml`` table on top.  ``validate()``
raises :class:`InvalidConfiguration` before any world state is touched,
so a rejected change leaves the previous world intact.

    terrain = TerrainSettings.from_tuning().with_changes(seed=42)
"""

from __future__ import annotations
import math
import random
from dataclasses import dataclass, field, fields, replace

from core import tuning
from core.constants import MAP_SIZES


class InvalidConfiguration(ValueError):
    """A setting is outside its accepted range."""


def _random_seed() -> float:
    return random.random() * 10000


def _check(cond: bool, msg: str) -> None:
    if not cond:
        raise InvalidConfiguration(msg)


def _from_section(cls, section: str):
    known = {f.name for f in fields(cls)}
    overrides = {k: v for k, v in tuning.section(section).items() if k in known}
    obj = cls(**overrides)
    obj.validate()
    return obj


def validate_map_size(size) -> int:
    """Return *size* as an int, or raise if it is not a preset."""
    _check(isinstance(size, int) and not isinstance(size, bool),
           f"map size must be an integer, got {size!r}")
    _check(size in MAP_SIZES,
           f"map size must be one of {MAP_SIZES}, got {size}")
    return size


# ------------------------------------------------------------
# TERRAIN
# ------------------------------------------------------------
@dataclass
class TerrainSettings:
    scale: float = 0.05            # base noise frequency
    water_level: float = 0.2       # value < water_level → water
    sand_level: float = 0.3        # value < sand_level  → sand
    dark_grass_chance: float = 0.6
    octaves: int = 3
    persistence: float = 0.5       # amplitude falloff per octave
    lacunarity: float = 2.0        # frequency growth per octave
    seed: float = field(default_factory=_random_seed)

    @classmethod
    def from_tuning(cls) -> "TerrainSettings":
        return _from_section(cls, "terrain")

    def validate(self) -> None:
        seed = self.seed
        _check(isinstance(seed, (int, float)) and not isinstance(seed, bool)
               and math.isfinite(seed),
               f"seed must be a finite number, got {seed!r}")
        _check(self.scale > 0, f"scale must be > 0, got {self.scale}")
        _check(isinstance(self.octaves, int) and self.octaves >= 1,
               f"octaves must be an integer >= 1, got {self.octaves}")
        _check(self.persistence >= 0, f"persistence must be >= 0, got {self.persistence}")
        _check(self.lacunarity >= 1, f"lacunarity must be >= 1, got {self.lacunarity}")
        for name in ("water_level", "sand_level", "dark_grass_chance"):
            v = getattr(self, name)
            _check(0.0 <= v <= 1.0, f"{name} must be within [0, 1], got {v}")

    def with_changes(self, **changes) -> "TerrainSettings":
        new = replace(self, **changes)
        new.validate()
        return new


# ------------------------------------------------------------
# FOLIAGE / DECORATIVE FEATURES
# ------------------------------------------------------------
@dataclass
class FoliageSettings:
    grass_chance: float = 0.3
    min_grass_spacing: int = 1
    rock_chance: float = 0.05
    min_rock_spacing: int = 2
    tree_chance: float = 0.1
    min_tree_spacing: int = 2
    grass_variants: int = 3
    rock_variants: int = 3
    tree_variants: int = 4

    @classmethod
    def from_tuning(cls) -> "FoliageSettings":
        return _from_section(cls, "foliage")

    def validate(self) -> None:
        for name in ("grass_chance", "rock_chance", "tree_chance"):
            v = getattr(self, name)
            _check(0.0 <= v <= 1.0, f"{name} must be within [0, 1], got {v}")
        for name in ("min_grass_spacing", "min_rock_spacing", "min_tree_spacing"):
            v = getattr(self, name)
            _check(isinstance(v, int) and v >= 0, f"{name} must be an integer >= 0, got {v}")
        for name in ("grass_variants", "rock_variants", "tree_variants"):
            v = getattr(self, name)
            _check(isinstance(v, int) and v >= 1, f"{name} must be an integer >= 1, got {v}")

    def with_changes(self, **changes) -> "FoliageSettings":
        new = replace(self, **changes)
        new.validate()
        return new


# ------------------------------------------------------------
# ENTITIES (population caps, spawn rates, wolf packs)
# ------------------------------------------------------------
@dataclass
class EntitySettings:
    max_fish: int = 20
    fish_spawn_chance: float = 0.01
    max_pigs: int = 15
    pig_spawn_chance: float = 0.01
    max_cows: int = 10
    cow_spawn_chance: float = 0.01
    max_wolves: int = 8
    wolf_spawn_chance: float = 0.005
    wolf_starvation_hunger: float = 95.0
    wolf_pack_chance: float = 0.7
    max_pack_size: int = 4
    pack_follow_distance: float = 3.0
    pack_spread_distance: float = 2.0
    max_pack_leaders: int = 1

    @classmethod
    def from_tuning(cls) -> "EntitySettings":
        return _from_section(cls, "entities")

    def validate(self) -> None:
        for name in ("max_fish", "max_pigs", "max_cows", "max_wolves",
                     "max_pack_size", "max_pack_leaders"):
            v = getattr(self, name)
            _check(isinstance(v, int) and v >= 0, f"{name} must be an integer >= 0, got {v}")
        for name in ("fish_spawn_chance", "pig_spawn_chance", "cow_spawn_chance",
                     "wolf_spawn_chance", "wolf_pack_chance"):
            v = getattr(self, name)
            _check(0.0 <= v <= 1.0, f"{name} must be within [0, 1], got {v}")
        _check(self.wolf_starvation_hunger > 0,
               f"wolf_starvation_hunger must be > 0, got {self.wolf_starvation_hunger}")
        _check(self.pack_follow_distance >= 0 and self.pack_spread_distance >= 0,
               "pack distances must be >= 0")

    def with_changes(self, **changes) -> "EntitySettings":
        new = replace(self, **changes)
        new.validate()
        return new

    def cap_and_chance(self, species: str) -> tuple[int, float]:
        """Return ``(population cap, spawn chance)`` for *species*."""
        return {
            "fish": (self.max_fish, self.fish_spawn_chance),
            "pig": (self.max_pigs, self.pig_spawn_chance),
            "cow": (self.max_cows, self.cow_spawn_chance),
            "wolf": (self.max_wolves, self.wolf_spawn_chance),
        }.get(species, (0, 0.0))
