"""core/noise.py — Seeded 2D gradient noise.

``NoiseField(seed).sample(x, y)`` is a pure function of
``(seed, x, y)``: the permutation table is built once from a
Park–Miller linear-congruential generator and never mutated.

Output lies within roughly [-1, 1] and is continuous across lattice
boundaries (quintic fade, corner gradients dotted with the
corner-relative offset).
"""

from __future__ import annotations
import math

_LCG_MULT = 16807
_LCG_MOD = 2147483647

# 16 gradient directions, indexed by ``hash & 15``
_GRADIENTS: tuple[tuple[int, int], ...] = (
    (1, 1), (-1, 1), (1, -1), (-1, -1),
    (1, 0), (-1, 0), (1, 0), (-1, 0),
    (0, 1), (0, -1), (0, 1), (0, -1),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
)


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(t: float, a: float, b: float) -> float:
    return a + t * (b - a)


def _grad(h: int, x: float, y: float) -> float:
    gx, gy = _GRADIENTS[h & 15]
    return gx * x + gy * y


class NoiseField:
    """2D coherent noise keyed by a numeric seed."""

    def __init__(self, seed: float):
        self.seed = seed
        self.permutation = _build_permutation(seed)
        self._p = self.permutation + self.permutation

    def sample(self, x: float, y: float) -> float:
        p = self._p
        fx = math.floor(x)
        fy = math.floor(y)
        xi = fx & 255
        yi = fy & 255
        x -= fx
        y -= fy

        u = _fade(x)
        v = _fade(y)

        a = p[xi] + yi
        b = p[xi + 1] + yi

        return _lerp(v,
                     _lerp(u, _grad(p[a], x, y), _grad(p[b], x - 1, y)),
                     _lerp(u, _grad(p[a + 1], x, y - 1), _grad(p[b + 1], x - 1, y - 1)))

    def octaves(self, x: float, y: float, count: int,
                persistence: float, lacunarity: float) -> float:
        """Sum *count* layers of noise, normalised by total amplitude."""
        amplitude = 1.0
        frequency = 1.0
        total = 0.0
        max_value = 0.0
        for _ in range(count):
            total += self.sample(x * frequency, y * frequency) * amplitude
            max_value += amplitude
            amplitude *= persistence
            frequency *= lacunarity
        if max_value == 0:
            return 0.0
        return total / max_value

    def __repr__(self) -> str:
        return f"NoiseField(seed={self.seed!r})"


def _build_permutation(seed: float) -> list[int]:
    """Fisher–Yates shuffle of 0..255 driven by a Park–Miller LCG."""
    state = seed % _LCG_MOD
    if state == 0:
        # The LCG has a fixed point at zero.
        state = 1

    perm = list(range(256))
    for i in range(255, 0, -1):
        state = (state * _LCG_MULT) % _LCG_MOD
        r = (state - 1) / (_LCG_MOD - 1)
        j = max(0, math.floor(r * (i + 1)))
        perm[i], perm[j] = perm[j], perm[i]
    return perm
