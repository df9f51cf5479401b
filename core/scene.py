"""
core/scene.py — Scene interface

Every screen of the viewer is a Scene.  The app holds a stack of them;
only the top scene gets update/draw calls.

    class MyScene(Scene):
        def on_enter(self, app):
            # setup, called when the scene becomes active
            pass

        def handle_event(self, event, app):
            # one pygame event
            pass

        def update(self, dt, app):
            # dt is seconds since last frame
            pass

        def draw(self, surface, app):
            pass
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    def on_enter(self, app: App):
        """Called when this scene becomes active (pushed or revealed)."""

    def on_exit(self, app: App):
        """Called when this scene is removed or covered."""

    def handle_event(self, event: pygame.event.Event, app: App):
        """Process a single pygame event."""

    def update(self, dt: float, app: App):
        """Advance one frame. dt is seconds."""

    def draw(self, surface: pygame.Surface, app: App):
        """Draw to the render surface."""
