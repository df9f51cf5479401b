"""core/world_map.py — Tile grid, decorative feature maps, tile queries.

A ``WorldMap`` is built wholesale by ``logic.terrain.generate`` and
replaced (never patched) when the world is regenerated.  Systems look
it up as an ECS resource::

    wm = world.res(WorldMap)
    if wm.get_tile(x, y) is Tile.WATER:
        ...

Every in-bounds tile is traversable; only the map edge blocks
movement.  Out-of-bounds queries return ``None``, never raise.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator


class Tile(IntEnum):
    WATER = 0
    GRASS = 1
    SAND = 2
    DARK_GRASS = 3


LAND_TILES = frozenset({Tile.GRASS, Tile.SAND, Tile.DARK_GRASS})


@dataclass
class FeatureMap:
    """Sparse per-category feature store: ``(tx, ty) → variant index``.

    At most one feature per tile.  Spacing is enforced by the generator
    through :meth:`any_within`.
    """
    kind: str
    cells: dict[tuple[int, int], int] = field(default_factory=dict)

    def place(self, tx: int, ty: int, variant: int) -> None:
        self.cells[(tx, ty)] = variant

    def get(self, x: float, y: float) -> int | None:
        return self.cells.get((math.floor(x), math.floor(y)))

    def has(self, x: float, y: float) -> bool:
        return (math.floor(x), math.floor(y)) in self.cells

    def any_within(self, tx: int, ty: int, spacing: int) -> bool:
        """True if any feature lies in the square window of radius *spacing*."""
        cells = self.cells
        for dy in range(-spacing, spacing + 1):
            for dx in range(-spacing, spacing + 1):
                if (tx + dx, ty + dy) in cells:
                    return True
        return False

    def clear(self) -> None:
        self.cells.clear()

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[tuple[tuple[int, int], int]]:
        return iter(self.cells.items())


class WorldMap:
    """Square tile grid plus its grass / rock / tree feature maps."""

    def __init__(self, width: int, height: int,
                 tiles: list[list[Tile]] | None = None):
        self.width = width
        self.height = height
        if tiles is None:
            tiles = [[Tile.GRASS] * width for _ in range(height)]
        self.tiles = tiles
        self.grass = FeatureMap("grass")
        self.rocks = FeatureMap("rock")
        self.trees = FeatureMap("tree")
        self.spawn_point: tuple[int, int] = (1, 1)

    # -- Construction helpers --

    @classmethod
    def filled(cls, size: int, tile: Tile = Tile.GRASS) -> "WorldMap":
        """Uniform square map (handy for tests and arenas)."""
        return cls(size, size, [[tile] * size for _ in range(size)])

    # -- Tile queries --

    def in_bounds(self, x: float, y: float) -> bool:
        tx = math.floor(x)
        ty = math.floor(y)
        return 0 <= tx < self.width and 0 <= ty < self.height

    def get_tile(self, x: float, y: float) -> Tile | None:
        """Tile under continuous position (x, y), or ``None`` off-map."""
        tx = math.floor(x)
        ty = math.floor(y)
        if tx < 0 or tx >= self.width or ty < 0 or ty >= self.height:
            return None
        return self.tiles[ty][tx]

    def set_tile(self, tx: int, ty: int, tile: Tile) -> None:
        self.tiles[ty][tx] = tile

    def is_water(self, x: float, y: float) -> bool:
        return self.get_tile(x, y) is Tile.WATER

    def is_land(self, x: float, y: float) -> bool:
        """In bounds and not water."""
        t = self.get_tile(x, y)
        return t is not None and t is not Tile.WATER

    def count(self, tile: Tile) -> int:
        return sum(row.count(tile) for row in self.tiles)

    # -- Feature queries --

    def get_tree(self, x: float, y: float) -> int | None:
        return self.trees.get(x, y)

    def has_tree(self, x: float, y: float) -> bool:
        return self.trees.has(x, y)

    def get_rock(self, x: float, y: float) -> int | None:
        return self.rocks.get(x, y)

    def has_rock(self, x: float, y: float) -> bool:
        return self.rocks.has(x, y)

    def get_grass(self, x: float, y: float) -> int | None:
        return self.grass.get(x, y)

    def has_grass(self, x: float, y: float) -> bool:
        return self.grass.has(x, y)

    def tile_info(self, x: float, y: float) -> dict | None:
        """Tile plus features at (x, y) for the debug overlay."""
        tile = self.get_tile(x, y)
        if tile is None:
            return None
        return {
            "x": math.floor(x),
            "y": math.floor(y),
            "tile": tile,
            "grass": self.get_grass(x, y),
            "rock": self.get_rock(x, y),
            "tree": self.get_tree(x, y),
        }

    def __repr__(self) -> str:
        return (f"WorldMap({self.width}x{self.height}, trees={len(self.trees)}, "
                f"rocks={len(self.rocks)}, grass={len(self.grass)})")
