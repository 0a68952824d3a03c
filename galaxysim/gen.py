"""Initial particle generation and the star flare texture."""

from __future__ import annotations

import math
from typing import Protocol

import numpy as np


class _UniformSource(Protocol):
    def random(self) -> float: ...


def random_particle_pos(rng: _UniformSource) -> np.ndarray:
    """Random position on a thick disk, as ``(x, y, z, 1)``.

    ``rng`` is anything with a ``random()`` method returning values in [0, 1).
    """
    t = rng.random() * 2 * math.pi
    s = rng.random() * 100
    z = rng.random() * 4
    return np.array([math.cos(t) * s, math.sin(t) * s, z, 1.0])


def random_particle_vel(pos) -> np.ndarray:
    """Orbital velocity for a particle at ``pos``, as ``(vx, vy, vz, 0)``."""
    p = np.asarray(pos, dtype=float)[:3]
    vel = np.cross(p, np.array([0.0, 0.0, 1.0]))
    length = np.linalg.norm(vel)
    orbital_vel = math.sqrt(2.0 * length)
    with np.errstate(invalid="ignore", divide="ignore"):
        vel = vel / length * orbital_vel
    return np.append(vel, 0.0)


def gen_flare_tex(tex_size: int) -> np.ndarray:
    """Gamma corrected gaussian flare texture of shape ``(tex_size, tex_size)``."""
    if tex_size < 0:
        raise ValueError("texture size must not be negative")
    sigma2 = tex_size / 2.0
    offsets = np.arange(tex_size, dtype=float) - tex_size // 2
    sq = offsets**2
    dist = sq[:, None] / (2 * sigma2) + sq[None, :] / (2 * sigma2)
    return (np.exp(-dist) ** 2.2).astype(np.float32)