"""logic/input_manager.py — Intent-based input layer.

Sits between raw pygame events and viewer commands.  The scene feeds in
raw events; the manager maps them to *intents*.  Other code reads the
intents and never touches raw keycodes.

Usage (in world_scene):

    self.input = InputManager()
    # each frame:
    self.input.begin_frame()
    for event in events:
        self.input.feed(event)
    self.input.end_frame()          # captures held-key state

    if self.input.just("pause"):    # discrete press
        ...
    move = self.input.movement()    # → (dx, dy) normalised
    sprint = self.input.held("sprint")
"""

from __future__ import annotations
import pygame


# ── Default key bindings ────────────────────────────────────────────
# Each binding is  (pygame key constant, modifier mask or 0)

_BINDS: dict[str, list[tuple[int, int]]] = {
    # Movement  (held — continuous)
    "move_up":      [(pygame.K_w, 0), (pygame.K_UP, 0)],
    "move_down":    [(pygame.K_s, 0), (pygame.K_DOWN, 0)],
    "move_left":    [(pygame.K_a, 0), (pygame.K_LEFT, 0)],
    "move_right":   [(pygame.K_d, 0), (pygame.K_RIGHT, 0)],
    "sprint":       [(pygame.K_LSHIFT, 0), (pygame.K_RSHIFT, 0)],
    # Simulation controls  (press — discrete)
    "pause":        [(pygame.K_p, 0)],
    "speed_up":     [(pygame.K_EQUALS, 0), (pygame.K_PLUS, 0), (pygame.K_KP_PLUS, 0)],
    "slow_down":    [(pygame.K_MINUS, 0), (pygame.K_KP_MINUS, 0)],
    "new_seed":     [(pygame.K_n, 0)],
    "size_1":       [(pygame.K_1, 0)],
    "size_2":       [(pygame.K_2, 0)],
    "size_3":       [(pygame.K_3, 0)],
    "size_4":       [(pygame.K_4, 0)],
    "size_5":       [(pygame.K_5, 0)],
    # Debug
    "toggle_debug": [(pygame.K_TAB, 0)],
    "toggle_grid":  [(pygame.K_g, 0)],
    "reload_tuning":[(pygame.K_F4, 0)],
}

SIZE_INTENTS = ("size_1", "size_2", "size_3", "size_4", "size_5")


class InputManager:
    """Maps pygame events to intents.

    Call ``begin_frame()`` before processing events,
    ``feed(event)`` for each pygame event,
    ``end_frame()`` after all events.

    Then use ``just(intent)`` for discrete presses and
    ``held(intent)`` for continuous holds.
    """

    def __init__(self, binds: dict[str, list[tuple[int, int]]] | None = None):
        self.binds = binds or _BINDS
        # Intents pressed *this frame* (rising edge)
        self._pressed: set[str] = set()
        # Intents currently held (key is down right now)
        self._held: set[str] = set()
        # Stash for unhandled raw events the scene still needs (e.g. QUIT)
        self.raw_events: list[pygame.event.Event] = []

    # ── frame lifecycle ─────────────────────────────────────────

    def begin_frame(self):
        """Call at the start of each frame before feeding events."""
        self._pressed.clear()
        self.raw_events.clear()

    def feed(self, event: pygame.event.Event):
        """Feed a raw pygame event."""
        if event.type != pygame.KEYDOWN:
            self.raw_events.append(event)
            return
        mods = pygame.key.get_mods()
        for intent, key_list in self.binds.items():
            for key, req_mod in key_list:
                if event.key == key and (req_mod == 0 or (mods & req_mod)):
                    self._pressed.add(intent)
                    break

    def end_frame(self):
        """Snapshot held-key state for continuous intents (movement)."""
        self._held.clear()
        keys = pygame.key.get_pressed()
        mods = pygame.key.get_mods()
        for intent, key_list in self.binds.items():
            for key, req_mod in key_list:
                if keys[key] and (req_mod == 0 or (mods & req_mod)):
                    self._held.add(intent)
                    break

    # ── queries ─────────────────────────────────────────────────

    def just(self, intent: str) -> bool:
        """True if the intent was triggered this frame (rising edge)."""
        return intent in self._pressed

    def held(self, intent: str) -> bool:
        """True if the intent is continuously held down."""
        return intent in self._held

    def movement(self) -> tuple[float, float]:
        """Return a normalised (dx, dy) movement vector from held keys."""
        dx = 0.0
        dy = 0.0
        if self.held("move_up"):
            dy -= 1.0
        if self.held("move_down"):
            dy += 1.0
        if self.held("move_left"):
            dx -= 1.0
        if self.held("move_right"):
            dx += 1.0
        # Normalise diagonal so the player doesn't move √2× faster
        if dx != 0.0 and dy != 0.0:
            mag = (dx * dx + dy * dy) ** 0.5
            dx /= mag
            dy /= mag
        return dx, dy
