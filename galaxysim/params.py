"""Simulation parameters and their command-line parsing."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Sequence

SIZE_MAX = 2**64 - 1
PARTICLES_PER_BATCH = 256

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class CalculationMethod(enum.Enum):
    """How the interaction kernel excludes a particle's own contribution."""

    BRANCH = "BRANCH"
    PREDICATED = "PREDICATED"


def get_calculation_method(method: str) -> CalculationMethod:
    """Return the calculation method named exactly by ``method``."""
    try:
        return CalculationMethod[method]
    except KeyError:
        raise ValueError(
            "Valid calculation methods are BRANCH or PREDICATED"
        ) from None


def _leading_int(text: str) -> int:
    """Integer value of the longest numeric prefix of ``text``, or 0."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _leading_float(text: str) -> float:
    """Float value of the longest numeric prefix of ``text``, or 0.0."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _as_size(value: int) -> int:
    """Wrap a signed integer into the unsigned 64-bit range."""
    return value % 2**64


@dataclass
class SimParam:
    """Parameters of the disk galaxy simulation."""

    gravity: float = 2.0
    dt: float = 0.005
    num_particles: int = 50 * PARTICLES_PER_BATCH
    num_frames: int = SIZE_MAX
    sim_iterations_per_frame: int = 4
    damping: float = 0.999998
    dist_eps: float = 1.0e-7
    gw_size: int = 64
    calc_method: CalculationMethod = CalculationMethod.BRANCH

    def parse_args(self, argv: Sequence[str]) -> None:
        """Override parameters from positional arguments (program name excluded).

        The order is: particle batches (256 particles each), iterations per
        frame, damping, dt, minimum distance, gravity, frame count, work group
        size and calculation method. Missing trailing arguments keep their
        current values; unparsable numbers read as zero.
        """
        args = list(argv)
        setters = (
            lambda a: setattr(
                self, "num_particles", _as_size(PARTICLES_PER_BATCH * _leading_int(a))
            ),
            lambda a: setattr(self, "sim_iterations_per_frame", _leading_int(a)),
            lambda a: setattr(self, "damping", _leading_float(a)),
            lambda a: setattr(self, "dt", _leading_float(a)),
            lambda a: setattr(self, "dist_eps", _leading_float(a)),
            lambda a: setattr(self, "gravity", _leading_float(a)),
            lambda a: setattr(self, "num_frames", _as_size(_leading_int(a))),
            lambda a: setattr(self, "gw_size", _leading_int(a)),
            lambda a: setattr(self, "calc_method", get_calculation_method(a)),
        )
        for setter, arg in zip(setters, args):
            setter(arg)