"""scenes/world_draw.py — Rendering helpers for the world scene.

All pure-draw functions live here so that WorldScene.draw() stays thin.
Every function receives the data it needs as parameters and only reads
simulation state through ``WorldMap`` and ``AgentView`` snapshots.
"""

from __future__ import annotations
import math
import pygame
from core.app import App
from core.constants import (
    FEATURE_COLORS, SPECIES_GLYPHS, TILE_COLORS, TILE_SIZE, WOLF,
)
from core.world_map import WorldMap
from simulation.world_sim import AgentView


# ── Tiles & features ────────────────────────────────────────────────

def visible_range(wm: WorldMap, ox: int, oy: int,
                  sw: int, sh: int) -> tuple[int, int, int, int]:
    """(start_row, start_col, end_row, end_col) of on-screen tiles."""
    start_col = max(0, -ox // TILE_SIZE)
    start_row = max(0, -oy // TILE_SIZE)
    end_col = min(wm.width, (sw - ox) // TILE_SIZE + 1)
    end_row = min(wm.height, (sh - oy) // TILE_SIZE + 1)
    return start_row, start_col, end_row, end_col


def draw_tiles(
    surface: pygame.Surface,
    wm: WorldMap,
    ox: int, oy: int,
    show_grid: bool,
    start_row: int, start_col: int,
    end_row: int, end_col: int,
):
    for row in range(start_row, end_row):
        tiles = wm.tiles[row]
        for col in range(start_col, end_col):
            color = TILE_COLORS.get(int(tiles[col]), (255, 0, 255))
            rect = pygame.Rect(
                ox + col * TILE_SIZE,
                oy + row * TILE_SIZE,
                TILE_SIZE, TILE_SIZE,
            )
            pygame.draw.rect(surface, color, rect)
            if show_grid:
                pygame.draw.rect(surface, (255, 255, 255), rect, 1)


def draw_features(
    surface: pygame.Surface,
    wm: WorldMap,
    ox: int, oy: int,
    start_row: int, start_col: int,
    end_row: int, end_col: int,
):
    half = TILE_SIZE // 2
    for row in range(start_row, end_row):
        for col in range(start_col, end_col):
            cx = ox + col * TILE_SIZE + half
            cy = oy + row * TILE_SIZE + half
            variant = wm.get_grass(col, row)
            if variant is not None:
                for i in range(variant + 1):
                    pygame.draw.line(surface, FEATURE_COLORS["grass"],
                                     (cx - 4 + i * 4, cy + 4), (cx - 4 + i * 4, cy - 2))
            variant = wm.get_rock(col, row)
            if variant is not None:
                pygame.draw.circle(surface, FEATURE_COLORS["rock"], (cx, cy), 3 + variant)
            variant = wm.get_tree(col, row)
            if variant is not None:
                pygame.draw.circle(surface, FEATURE_COLORS["tree"], (cx, cy), half - 2 + variant // 2)


# ── Agents ──────────────────────────────────────────────────────────

def draw_agents(
    surface: pygame.Surface,
    app: App,
    views: list[AgentView],
    ox: int, oy: int,
    show_debug: bool,
):
    sw, sh = surface.get_size()
    for v in views:
        sx = ox + int(v.x * TILE_SIZE)
        sy = oy + int(v.y * TILE_SIZE)
        if sx < -TILE_SIZE or sy < -TILE_SIZE or sx > sw or sy > sh:
            continue
        char, color = SPECIES_GLYPHS.get(v.species, ("?", (255, 0, 255)))
        if v.species == WOLF and v.is_hunting:
            color = (230, 80, 70)
        app.draw_text(surface, char, sx - 4, sy - 9, color=color, font=app.font_lg)

        if v.is_pack_leader:
            pygame.draw.circle(surface, (255, 215, 0), (sx, sy), TILE_SIZE // 2 + 2, 1)

        if show_debug:
            hx = sx + int(math.cos(v.heading) * TILE_SIZE * 0.6)
            hy = sy + int(math.sin(v.heading) * TILE_SIZE * 0.6)
            pygame.draw.line(surface, (255, 255, 255), (sx, sy), (hx, hy), 1)
            if v.hunger is not None:
                app.draw_text(surface, f"{v.hunger:.0f}", sx + 6, sy - 14,
                              color=(255, 200, 100), font=app.font_sm)


def draw_pack_links(
    surface: pygame.Surface,
    views: list[AgentView],
    ox: int, oy: int,
):
    by_id = {v.id: v for v in views}
    for v in views:
        if v.pack_leader is None:
            continue
        leader = by_id.get(v.pack_leader)
        if leader is None:
            continue
        pygame.draw.line(surface, (255, 215, 0),
                         (ox + int(v.x * TILE_SIZE), oy + int(v.y * TILE_SIZE)),
                         (ox + int(leader.x * TILE_SIZE), oy + int(leader.y * TILE_SIZE)), 1)


# ── HUD ─────────────────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App, scene):
    sim = scene.sim
    clock = scene.clock
    sw = surface.get_width()
    y = 8

    counts = sim.counts()
    app.draw_text_bg(surface,
                     "  ".join(f"{sp}:{n}" for sp, n in counts.items() if sp != "player"),
                     8, y, (220, 220, 220))
    y += 18

    player = sim.view(sim.player_id) if sim.player_id is not None else None
    if player is not None:
        info = sim.tile_info(player.x, player.y) or {}
        tile = info.get("tile")
        app.draw_text_bg(surface,
                         f"({player.x:.1f}, {player.y:.1f}) {tile.name.lower() if tile is not None else '-'}",
                         8, y, (200, 220, 255))

    status = f"tick {sim.clock.tick}  x{clock.time_scale}"
    if clock.paused:
        status += "  PAUSED"
    app.draw_text_bg(surface, status, sw - 200, 8, (200, 200, 255))
    app.draw_text_bg(surface, f"{sim.size}x{sim.size} seed {sim.terrain.seed:.0f}",
                     sw - 200, 26, (150, 150, 200))


def draw_debug_overlay(surface: pygame.Surface, app: App, scene):
    """Recent DevLog entries, newest at the bottom."""
    entries = scene.sim.log.recent(12)
    sh = surface.get_height()
    y = sh - 14 * len(entries) - 8
    for e in entries:
        app.draw_text_bg(surface, f"[{e['t']:>6}] {e['species']:<5} #{e['eid']:<4} "
                                  f"{e['cat']:<6} {e['msg']}",
                         8, y, (180, 255, 180), font=app.font_sm)
        y += 14
