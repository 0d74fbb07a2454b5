"""
Particle Field Module - Flat coordinate buffers and their per-frame motion

Buffers are flat ``float64`` arrays laid out as x0, y0, z0, x1, y1, z1, ...
so the geometry can hand them to a renderer without reshaping.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

BOUNDARY = 7.5
REFLECTION = 0.95
DAMPING = 0.9

WAVE_AMPLITUDE = 0.001
WAVE_X_FREQUENCY = 0.001
WAVE_Y_FREQUENCY = 0.0015


@dataclass
class ParticleField:
    positions: np.ndarray
    velocities: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None

    def __post_init__(self):
        self.positions = np.ascontiguousarray(self.positions, dtype=np.float64)
        if self.positions.ndim != 1 or self.positions.size % 3:
            raise ValueError("positions must be a flat array of xyz triples")
        if self.velocities is not None:
            self.velocities = np.ascontiguousarray(self.velocities, dtype=np.float64)
            if self.velocities.shape != self.positions.shape:
                raise ValueError("velocities must match the positions buffer")
        if self.colors is not None:
            self.colors = np.ascontiguousarray(self.colors, dtype=np.float64)
            if self.colors.shape != self.positions.shape:
                raise ValueError("colors must hold one rgb triple per particle")

    @classmethod
    def random(cls, count, spread, rng=None, speed=None, palette=None):
        """
        Scatter ``count`` particles uniformly in a cube of edge ``spread``

        Args:
            count (int): Number of particles
            spread (float): Cube edge centred on the origin
            rng (numpy.random.Generator, optional): Source of randomness
            speed (float, optional): Velocity scale; no velocities when None
            palette (list, optional): RGB triples to colour particles from

        Returns:
            ParticleField: Newly allocated field
        """
        if count <= 0:
            raise ValueError(f"count must be positive, got {count}")
        rng = rng if rng is not None else np.random.default_rng()

        positions = (rng.random(count * 3) - 0.5) * spread
        velocities = None
        if speed is not None:
            velocities = (rng.random(count * 3) - 0.5) * speed

        colors = None
        if palette:
            swatches = np.asarray(palette, dtype=np.float64).reshape(-1, 3)
            picks = rng.integers(0, len(swatches), size=count)
            colors = swatches[picks].reshape(-1)

        return cls(positions=positions, velocities=velocities, colors=colors)

    @property
    def count(self):
        return self.positions.size // 3

    def drift(self):
        """Advance by velocity and bounce coordinates that leave the boundary."""
        if self.velocities is None:
            raise ValueError("drift needs a velocity buffer")
        self.positions += self.velocities
        escaped = np.abs(self.positions) > BOUNDARY
        self.positions[escaped] *= -REFLECTION
        self.velocities[escaped] *= -DAMPING

    def wave(self, timestamp):
        """Nudge x and y by an oscillation of the frame time and buffer index."""
        index = np.arange(0, self.positions.size, 3, dtype=np.float64)
        self.positions[0::3] += np.sin(timestamp * WAVE_X_FREQUENCY + index) * WAVE_AMPLITUDE
        self.positions[1::3] += np.cos(timestamp * WAVE_Y_FREQUENCY + index) * WAVE_AMPLITUDE

    def step(self, timestamp):
        if self.velocities is not None:
            self.drift()
        else:
            self.wave(timestamp)

    def as_points(self):
        """View of the positions as an (N, 3) array."""
        return self.positions.reshape(-1, 3)


__all__ = ['ParticleField', 'BOUNDARY', 'REFLECTION', 'DAMPING']
