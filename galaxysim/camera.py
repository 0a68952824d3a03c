"""Orbiting camera with damped motion and its view/projection matrices.

Matrices are returned in conventional row-major form, so they act on column
vectors as ``matrix @ vector``.
"""

from __future__ import annotations

import math

import numpy as np

PI = math.pi
_Z_UP = np.array([0.0, 0.0, 1.0])
_POLAR_LIMIT = PI / 2 - 0.001
_VELOCITY_DAMPING = 0.72
_LOOK_AT_DAMPING = 0.90


def _normalize(v: np.ndarray) -> np.ndarray:
    return v / np.linalg.norm(v)


def cartesian_coordinates(v) -> np.ndarray:
    """Convert ``(azimuth, elevation, radius)`` to cartesian coordinates."""
    a, e, r = (float(c) for c in v)
    return np.array([math.cos(a) * math.cos(e), math.sin(a) * math.cos(e), math.sin(e)]) * r


def infinite_perspective(fovy: float, aspect: float, near: float) -> np.ndarray:
    """Right-handed perspective projection with the far plane at infinity."""
    extent = math.tan(fovy / 2) * near
    left, right = -extent * aspect, extent * aspect
    bottom, top = -extent, extent
    m = np.zeros((4, 4))
    m[0, 0] = 2 * near / (right - left)
    m[1, 1] = 2 * near / (top - bottom)
    m[2, 2] = -1.0
    m[3, 2] = -1.0
    m[2, 3] = -2 * near
    return m


def look_at(eye, center, up) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` toward ``center``."""
    eye = np.asarray(eye, dtype=float)
    f = _normalize(np.asarray(center, dtype=float) - eye)
    s = _normalize(np.cross(f, np.asarray(up, dtype=float)))
    u = np.cross(s, f)
    m = np.identity(4)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


class Camera:
    """Camera on a sphere around a movable look-at point."""

    def __init__(self) -> None:
        self.position = np.array([0.0, PI / 4, 50.0])  # polar, radians
        self.velocity = np.zeros(3)
        self.look_at = np.zeros(3)
        self.look_at_vel = np.zeros(3)

    def step(self) -> None:
        """Advance the camera by one step, applying damping and limits."""
        self.position[0] -= self.velocity[0]
        self.position[1] -= self.velocity[1]
        self.position[2] *= 1.0 - self.velocity[2]
        self.look_at += self.look_at_vel

        self.velocity *= _VELOCITY_DAMPING
        self.look_at_vel *= _LOOK_AT_DAMPING

        if self.position[0] < 0:
            self.position[0] += 2 * PI
        if self.position[0] >= 2 * PI:
            self.position[0] -= 2 * PI
        self.position[1] = max(-_POLAR_LIMIT, min(self.position[1], _POLAR_LIMIT))

    def proj(self, width: int, height: int) -> np.ndarray:
        """Projection matrix for a viewport of the given size."""
        return infinite_perspective(math.radians(30.0), width / float(height), 1.0)

    def view(self) -> np.ndarray:
        """View matrix for the current camera state."""
        eye = cartesian_coordinates(self.position) + self.look_at
        return look_at(eye, self.look_at, _Z_UP)

    def forward(self) -> np.ndarray:
        return _normalize(-cartesian_coordinates(self.position))

    def right(self) -> np.ndarray:
        return _normalize(np.cross(cartesian_coordinates(self.position), _Z_UP))

    def up(self) -> np.ndarray:
        return _normalize(np.cross(cartesian_coordinates(self.position), self.right()))

    def add_velocity(self, vel) -> None:
        self.velocity += np.asarray(vel, dtype=float)

    def add_look_at_velocity(self, vel) -> None:
        self.look_at_vel += np.asarray(vel, dtype=float)