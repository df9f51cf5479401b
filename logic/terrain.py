"""logic/terrain.py — Procedural terrain synthesis.

``generate(width, height, settings)`` builds a fresh :class:`WorldMap`:

1. Base pass — multi-octave noise per tile, classified water / sand /
   grass by ``water_level`` and ``sand_level``.
2. Dark-grass pass — an independent field (seed + 1, fixed scale)
   speckles grass that has no sand among its 8 neighbours.
3. Feature passes — grass decoration, then rocks, then trees, each
   probability-gated per eligible tile and rejected if another feature
   of the same kind sits inside the spacing window.
4. Spawn search — expanding rings from the map centre.

Given the same settings (seed included) the result is identical: the
feature passes draw from a ``random.Random`` seeded from the terrain
seed unless the caller injects its own.
"""

from __future__ import annotations
import random

from core import tuning
from core.noise import NoiseField
from core.settings import FoliageSettings, TerrainSettings
from core.world_map import FeatureMap, Tile, WorldMap

_tun = tuning.get


def generate(width: int, height: int, settings: TerrainSettings,
             foliage: FoliageSettings | None = None,
             rng: random.Random | None = None) -> WorldMap:
    """Return a new WorldMap for *settings*.  Does not touch any store."""
    settings.validate()
    if foliage is None:
        foliage = FoliageSettings()
    foliage.validate()
    if rng is None:
        rng = random.Random(settings.seed)

    wm = WorldMap(width, height, classify_base(width, height, settings))
    add_dark_grass(wm, settings)

    place_features(wm.grass, wm, rng, foliage.grass_chance,
                   foliage.min_grass_spacing, foliage.grass_variants,
                   lambda t: t is Tile.DARK_GRASS)
    place_features(wm.rocks, wm, rng, foliage.rock_chance,
                   foliage.min_rock_spacing, foliage.rock_variants,
                   lambda t: t is not Tile.WATER)
    place_features(wm.trees, wm, rng, foliage.tree_chance,
                   foliage.min_tree_spacing, foliage.tree_variants,
                   lambda t: t is Tile.GRASS or t is Tile.DARK_GRASS)

    wm.spawn_point = find_spawn_point(wm)
    return wm


# ── Passes ───────────────────────────────────────────────────────────

def sample_height(noise: NoiseField, x: int, y: int,
                  settings: TerrainSettings) -> float:
    """Normalised multi-octave value for tile (x, y)."""
    return noise.octaves(x * settings.scale, y * settings.scale,
                         settings.octaves, settings.persistence,
                         settings.lacunarity)


def classify(value: float, water_level: float, sand_level: float) -> Tile:
    if value < water_level:
        return Tile.WATER
    if value < sand_level:
        return Tile.SAND
    return Tile.GRASS


def classify_base(width: int, height: int,
                  settings: TerrainSettings) -> list[list[Tile]]:
    noise = NoiseField(settings.seed)
    return [
        [classify(sample_height(noise, x, y, settings),
                  settings.water_level, settings.sand_level)
         for x in range(width)]
        for y in range(height)
    ]


def _touches_sand(wm: WorldMap, x: int, y: int) -> bool:
    for dy in (-1, 0, 1):
        ny = y + dy
        if ny < 0 or ny >= wm.height:
            continue
        row = wm.tiles[ny]
        for dx in (-1, 0, 1):
            nx = x + dx
            if 0 <= nx < wm.width and row[nx] is Tile.SAND:
                return True
    return False


def add_dark_grass(wm: WorldMap, settings: TerrainSettings) -> int:
    """Reclassify inland grass as dark grass.  Returns tiles changed."""
    noise = NoiseField(settings.seed + 1)
    scale = _tun("terrain.dark_grass", "scale", 0.15)
    threshold = 0.4 - settings.dark_grass_chance * 0.4
    changed = 0
    for y in range(wm.height):
        row = wm.tiles[y]
        for x in range(wm.width):
            if row[x] is not Tile.GRASS:
                continue
            if _touches_sand(wm, x, y):
                continue
            if noise.sample(x * scale, y * scale) > threshold:
                row[x] = Tile.DARK_GRASS
                changed += 1
    return changed


def place_features(fmap: FeatureMap, wm: WorldMap, rng: random.Random,
                   chance: float, spacing: int, variants: int,
                   eligible) -> int:
    """Scatter one feature category over *wm*.  Returns count placed."""
    fmap.clear()
    for y in range(wm.height):
        row = wm.tiles[y]
        for x in range(wm.width):
            if not eligible(row[x]):
                continue
            if rng.random() >= chance:
                continue
            if fmap.any_within(x, y, spacing):
                continue
            fmap.place(x, y, rng.randrange(variants))
    return len(fmap)


# ── Spawn point ──────────────────────────────────────────────────────

def _spawnable(tile: Tile | None) -> bool:
    return tile is Tile.GRASS or tile is Tile.SAND


def find_spawn_point(wm: WorldMap, search_radius: int | None = None) -> tuple[int, int]:
    """First grass/sand tile on expanding rings from the centre.

    Falls back to a row-major scan of the whole grid, then to (1, 1),
    so it terminates on an all-water map.
    """
    if search_radius is None:
        search_radius = int(_tun("terrain.spawn", "search_radius", 20))
    cx = wm.width // 2
    cy = wm.height // 2

    for r in range(search_radius):
        for dy in range(-r, r + 1):
            for dx in range(-r, r + 1):
                if max(abs(dx), abs(dy)) != r:
                    continue
                x = cx + dx
                y = cy + dy
                if _spawnable(wm.get_tile(x, y)):
                    return (x, y)

    for y in range(wm.height):
        for x in range(wm.width):
            if _spawnable(wm.tiles[y][x]):
                return (x, y)

    return (1, 1)
