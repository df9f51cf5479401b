"""
scenes/world_scene.py — Top-down tile view of a WorldSim

Renders the terrain grid, features and agents.  Camera follows the
player and re-centres on every world reset.

Keys: WASD/arrows move, Shift sprints, P pauses, +/- time scale,
N new seed, 1-5 map size, Tab debug overlay, G grid, F4 reload tuning.
"""

from __future__ import annotations
import pygame
from core.scene import Scene
from core.app import App
from core import tuning
from core.constants import MAP_SIZES, TILE_SIZE
from core.settings import InvalidConfiguration
from components import Camera
from logic.input_manager import InputManager, SIZE_INTENTS
from scenes.world_draw import (
    draw_agents, draw_debug_overlay, draw_features, draw_hud,
    draw_pack_links, draw_tiles, visible_range,
)
from simulation.clock import SimulationClock
from simulation.world_sim import WorldSim


class WorldScene(Scene):
    def __init__(self, sim: WorldSim):
        self.sim = sim
        self.clock = SimulationClock(sim)
        self.input = InputManager()
        self.camera = Camera()
        self.show_debug = False
        self.show_grid = False
        self.sim.bus.subscribe("WorldReset", self._on_world_reset)

    def on_enter(self, app: App):
        sx, sy = self.sim.world_map.spawn_point
        self.camera.x = float(sx)
        self.camera.y = float(sy)
        self.input.begin_frame()

    def _on_world_reset(self, event) -> None:
        self.camera.x = float(event.spawn_x)
        self.camera.y = float(event.spawn_y)

    def handle_event(self, event: pygame.event.Event, app: App):
        self.input.feed(event)

    def update(self, dt: float, app: App):
        self.input.end_frame()
        self._process_commands()
        self.clock.frame(dt, self.input.movement(), self.input.held("sprint"))

        player = self.sim.view(self.sim.player_id) if self.sim.player_id is not None else None
        if player is not None:
            self.camera.x = player.x
            self.camera.y = player.y
        self.input.begin_frame()

    def _process_commands(self) -> None:
        inp = self.input
        if inp.just("pause"):
            self.clock.toggle_pause()
        if inp.just("speed_up"):
            self.clock.speed_up()
        if inp.just("slow_down"):
            self.clock.slow_down()
        if inp.just("toggle_debug"):
            self.show_debug = not self.show_debug
        if inp.just("toggle_grid"):
            self.show_grid = not self.show_grid
        if inp.just("reload_tuning"):
            tuning.reload()
        try:
            if inp.just("new_seed"):
                self.sim.new_seed()
            for intent, size in zip(SIZE_INTENTS, MAP_SIZES):
                if inp.just(intent) and size != self.sim.size:
                    self.sim.resize(size)
        except InvalidConfiguration as exc:
            print(f"[SIM] Command ignored: {exc}")

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill((20, 20, 25))
        wm = self.sim.world_map
        sw, sh = surface.get_size()

        ox = sw // 2 - int(self.camera.x * TILE_SIZE)
        oy = sh // 2 - int(self.camera.y * TILE_SIZE)
        start_row, start_col, end_row, end_col = visible_range(wm, ox, oy, sw, sh)

        draw_tiles(surface, wm, ox, oy, self.show_grid,
                   start_row, start_col, end_row, end_col)
        draw_features(surface, wm, ox, oy, start_row, start_col, end_row, end_col)

        views = self.sim.snapshot()
        if self.show_debug:
            draw_pack_links(surface, views, ox, oy)
        draw_agents(surface, app, views, ox, oy, self.show_debug)
        draw_hud(surface, app, self)

        if self.show_debug:
            draw_debug_overlay(surface, app, self)
