"""Direct-summation N-body simulation of a disk galaxy."""

from __future__ import annotations

import math
import platform
import random
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from .params import CalculationMethod, SimParam

PI = np.float32(math.pi)
coords_t = np.float32

_INTERACTION_CHUNK = 512


class _Mt19937:
    """32-bit Mersenne Twister seeded like the standard library engine."""

    DEFAULT_SEED = 5489

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        state = [seed & 0xFFFFFFFF]
        for i in range(1, 624):
            prev = state[-1]
            state.append((1812433253 * (prev ^ (prev >> 30)) + i) & 0xFFFFFFFF)
        self._rng = random.Random()
        self._rng.setstate((3, tuple(state) + (624,), None))

    def next_u32(self) -> int:
        return self._rng.getrandbits(32)

    def uniform(self) -> float:
        """Uniform double in [0, 1) built from two 32-bit outputs."""
        low = self.next_u32()
        high = self.next_u32()
        value = (low + high * 2**32) / 2**64
        return value if value < 1.0 else math.nextafter(1.0, 0.0)


def _as_coords(values) -> np.ndarray:
    return np.asarray(values, dtype=coords_t)


@dataclass
class ParticleData:
    """Particle coordinates stored as three parallel arrays."""

    x: np.ndarray
    y: np.ndarray
    z: np.ndarray

    def __post_init__(self) -> None:
        self.x = np.array(self.x, dtype=coords_t)
        self.y = np.array(self.y, dtype=coords_t)
        self.z = np.array(self.z, dtype=coords_t)
        if not (len(self.x) == len(self.y) == len(self.z)):
            raise ValueError("coordinate arrays must have equal length")

    @classmethod
    def zeros(cls, n: int) -> "ParticleData":
        return cls(np.zeros(n), np.zeros(n), np.zeros(n))

    def __len__(self) -> int:
        return len(self.x)

    def copy(self) -> "ParticleData":
        return ParticleData(self.x.copy(), self.y.copy(), self.z.copy())


def cross(v0: Sequence[float], v1: Sequence[float]) -> np.ndarray:
    """Cross product of two 3-vectors."""
    a = _as_coords(v0)
    b = _as_coords(v1)
    return np.array(
        [
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ],
        dtype=coords_t,
    )


def length(v: Sequence[float]) -> float:
    """Euclidean length of a 3-vector."""
    a = _as_coords(v)
    return float(np.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2]))


def normalize(v: Sequence[float]) -> np.ndarray:
    """The 3-vector ``v`` scaled to unit length."""
    a = _as_coords(v)
    with np.errstate(invalid="ignore", divide="ignore"):
        return a / coords_t(length(a))


def _forces(pos: ParticleData, dist_eps: float, method: CalculationMethod) -> np.ndarray:
    """Summed gravitational pull on each particle, shape ``(3, n)``."""
    n = len(pos)
    eps = coords_t(dist_eps)
    force = np.zeros((3, n), dtype=coords_t)
    others = np.arange(n)
    for start in range(0, n, _INTERACTION_CHUNK):
        stop = min(start + _INTERACTION_CHUNK, n)
        rx = pos.x[None, :] - pos.x[start:stop, None]
        ry = pos.y[None, :] - pos.y[start:stop, None]
        rz = pos.z[None, :] - pos.z[start:stop, None]
        dist_sqr = rx * rx + ry * ry + rz * rz + eps
        inv_dist_cube = coords_t(1) / np.sqrt(dist_sqr * dist_sqr * dist_sqr)
        is_self = np.arange(start, stop)[:, None] == others[None, :]
        for axis, r in enumerate((rx, ry, rz)):
            contribution = r * inv_dist_cube
            if method is CalculationMethod.BRANCH:
                contribution = np.where(is_self, coords_t(0), contribution)
            else:
                contribution = contribution * is_self.astype(coords_t)
            force[axis, start:stop] = contribution.sum(axis=1, dtype=coords_t)
    return force


def particle_interaction(
    pos: ParticleData, vel: ParticleData, params: SimParam
) -> Tuple[ParticleData, ParticleData]:
    """One O(n^2) integration step; returns ``(next_pos, next_vel)``.

    Every particle has unit mass. In BRANCH mode a particle's own term is
    skipped; in PREDICATED mode each term is weighted by whether it is the
    particle's own term.
    """
    if len(pos) != len(vel):
        raise ValueError("position and velocity data differ in length")
    with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
        force = _forces(pos, params.dist_eps, params.calc_method)
        damping = coords_t(params.damping)
        dt = coords_t(params.dt)
        gravity = coords_t(params.gravity)
        new_vel = []
        new_pos = []
        for axis, (p, v) in enumerate(((pos.x, vel.x), (pos.y, vel.y), (pos.z, vel.z))):
            curr_vel = v * damping + force[axis] * dt * gravity
            new_vel.append(curr_vel)
            new_pos.append(p + curr_vel * dt)
    return ParticleData(*new_pos), ParticleData(*new_vel)


class DiskGalaxySimulator:
    """Holds particle state and advances the simulation frame by frame."""

    def __init__(self, params: SimParam) -> None:
        self.params = params
        self.last_step_time: float = 0.0
        self._device_name: Optional[str] = None
        self.particle_pos = self._random_particle_pos()
        self.particle_vel = self._initial_particle_vel()

    @property
    def num_particles(self) -> int:
        return self.params.num_particles

    @property
    def gw_size(self) -> int:
        return self.params.gw_size

    @property
    def calc_method(self) -> CalculationMethod:
        return self.params.calc_method

    def _random_particle_pos(self) -> ParticleData:
        # Deterministic: the default engine seed is always used.
        gen = _Mt19937()
        n = self.params.num_particles
        angle_radius = np.array([gen.uniform() for _ in range(2 * n)], dtype=np.float64)
        t = (angle_radius[0::2] * 2 * float(PI)).astype(coords_t)
        s = (angle_radius[1::2] * 100).astype(coords_t)
        z = np.array([4.0 * gen.uniform() for _ in range(n)], dtype=np.float64)
        return ParticleData(np.cos(t) * s, np.sin(t) * s, z.astype(coords_t))

    def _initial_particle_vel(self) -> ParticleData:
        pos = self.particle_pos
        zero = np.zeros(len(pos), dtype=coords_t)
        vx = pos.y * coords_t(1) - pos.z * coords_t(0)
        vy = pos.z * coords_t(0) - pos.x * coords_t(1)
        vz = pos.x * coords_t(0) - pos.y * coords_t(0) + zero
        with np.errstate(invalid="ignore", divide="ignore"):
            lengths = np.sqrt(vx * vx + vy * vy + vz * vz)
            orbital = np.sqrt(2.0 * lengths.astype(np.float64)).astype(coords_t)
            return ParticleData(
                vx / lengths * orbital, vy / lengths * orbital, vz / lengths * orbital
            )

    def device_name(self) -> str:
        """Name of the device running the simulation, queried once."""
        if self._device_name is None:
            name = platform.processor() or platform.machine()
            self._device_name = name or "Unknown Device"
        return self._device_name

    def step_sim(self) -> None:
        """Advance one frame and record its duration in milliseconds."""
        if self.params.gw_size <= 0:
            raise ValueError("work group size must be positive")
        start = time.perf_counter()
        pos = self.particle_pos
        vel = self.particle_vel
        for _ in range(max(0, self.params.sim_iterations_per_frame)):
            pos, vel = particle_interaction(pos, vel, self.params)
        self.last_step_time = (time.perf_counter() - start) * 1000.0
        self.particle_pos = pos
        self.particle_vel = vel