"""simulation/clock.py — Per-frame driver for a WorldSim.

The host calls ``frame()`` once per rendered frame.  Player input is
applied exactly once per frame; the update phase then runs
``time_scale`` times (or not at all while paused).  While the player is
actively moving the update phase runs once, so the world does not
race ahead of the player.
"""

from __future__ import annotations

from core.settings import InvalidConfiguration
from core.tuning import get as _tun


class SimulationClock:
    def __init__(self, sim, time_scale: int = 1) -> None:
        self.sim = sim
        self.paused = False
        self._time_scale = 1
        self.time_scale = time_scale

    @property
    def min_scale(self) -> int:
        return int(_tun("clock", "min_time_scale", 1))

    @property
    def max_scale(self) -> int:
        return int(_tun("clock", "max_time_scale", 20))

    @property
    def time_scale(self) -> int:
        return self._time_scale

    @time_scale.setter
    def time_scale(self, value: int) -> None:
        if (not isinstance(value, int) or isinstance(value, bool)
                or not self.min_scale <= value <= self.max_scale):
            raise InvalidConfiguration(
                f"time scale must be an integer in [{self.min_scale}, "
                f"{self.max_scale}], got {value!r}")
        self._time_scale = value

    def speed_up(self) -> int:
        self._time_scale = min(self.max_scale, self._time_scale + 1)
        return self._time_scale

    def slow_down(self) -> int:
        self._time_scale = max(self.min_scale, self._time_scale - 1)
        return self._time_scale

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        print(f"[SIM] {'Paused' if self.paused else 'Resumed'}")
        return self.paused

    def frame(self, dt: float, move: tuple[float, float] | None = None,
              sprint: bool = False) -> int:
        """Apply input, then run the update phase.  Returns ticks run."""
        moving = move is not None and (move[0] != 0 or move[1] != 0)
        if moving:
            self.sim.move_player(move[0], move[1], sprint)

        if self.paused:
            return 0
        ticks = 1 if moving else self._time_scale
        for _ in range(ticks):
            self.sim.advance(dt)
        return ticks
