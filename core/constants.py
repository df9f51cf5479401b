"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.

Unit System
-----------
All gameplay distances are measured in **tiles**.  Agent positions are
continuous; the tile an agent stands on is ``(floor(x), floor(y))``.

    Distance / position     tiles
    Speed                   tiles / tick
    Time                    ticks (one full spawn + update pass)
    Angles                  radians

Rendering converts to pixels via ``TILE_SIZE`` (px per tile).
No gameplay code should reference pixels — only the renderer.

Detection Range Hierarchy (small → large):
     0.5  Kill distance
     2    Recruitment capture distance
     8    Hungry-wolf alert radius
    10    Prey search / pack join range
    12    Pack recruitment radius
    15    Member spotting radius / flee release distance
    20    Starving-wolf prey search
"""

# ── Map size presets ────────────────────────────────────────────────
MAP_TINY = 64
MAP_SMALL = 128
MAP_MEDIUM = 256
MAP_LARGE = 512
MAP_HUGE = 1024

MAP_SIZES: tuple[int, ...] = (MAP_TINY, MAP_SMALL, MAP_MEDIUM, MAP_LARGE, MAP_HUGE)
DEFAULT_MAP_SIZE = MAP_SMALL

# ── Species ─────────────────────────────────────────────────────────
PLAYER = "player"
FISH = "fish"
PIG = "pig"
COW = "cow"
WOLF = "wolf"

SPECIES: tuple[str, ...] = (PLAYER, FISH, PIG, COW, WOLF)
PREY_SPECIES: frozenset[str] = frozenset({FISH, PIG, COW})

# Fixed update order: wolves last so hunts see this tick's prey positions.
UPDATE_ORDER: tuple[tuple[str, ...], ...] = ((FISH,), (PIG, COW), (WOLF,))

# Base health per prey species (HP)
PREY_HEALTH = {FISH: 50.0, PIG: 75.0, COW: 100.0}

# ── Render ──────────────────────────────────────────────────────────
TILE_SIZE = 16

# Tile id → colour (must match core.world_map.Tile values)
TILE_COLORS = {
    0: (38, 92, 150),      # water
    1: (86, 150, 60),      # grass
    2: (214, 196, 132),    # sand
    3: (48, 104, 40),      # dark grass
}

FEATURE_COLORS = {
    "grass": (70, 130, 50),
    "rock": (120, 120, 125),
    "tree": (24, 70, 24),
}

SPECIES_GLYPHS = {
    PLAYER: ("@", (255, 255, 100)),
    FISH: ("f", (180, 220, 255)),
    PIG: ("p", (255, 170, 190)),
    COW: ("c", (240, 240, 240)),
    WOLF: ("W", (150, 150, 160)),
}
