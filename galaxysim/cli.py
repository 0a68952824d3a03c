"""Headless benchmark runner for the disk galaxy simulation."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TextIO, Tuple

from .params import SimParam
from .simulator import DiskGalaxySimulator

WARM_STEPS = 2


@dataclass
class StepStats:
    """Running record of step times in milliseconds."""

    times: List[float] = field(default_factory=list)

    def add(self, step_time: float) -> Tuple[float, float]:
        """Record a step time and return ``(mean, stddev)`` of all recorded."""
        self.times.append(step_time)
        count = len(self.times)
        mean = math.fsum(self.times) / count
        variance = math.fsum((t - mean) ** 2 for t in self.times) / count
        return mean, math.sqrt(variance)


def run(params: SimParam, out: TextIO) -> StepStats:
    """Run ``params.num_frames`` frames, reporting times after warm-up."""
    sim = DiskGalaxySimulator(params)
    stats = StepStats()
    step = 0
    while step < params.num_frames:
        sim.step_sim()
        step += 1
        if step > WARM_STEPS:
            mean, std_dev = stats.add(sim.last_step_time)
            out.write(
                f"At step {step} kernel time is {stats.times[-1]:g} "
                f"and mean is {mean:g} and stddev is: {std_dev:g}\n"
            )
    return stats


def main(argv: Optional[Sequence[str]] = None) -> int:
    params = SimParam()
    try:
        params.parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    run(params, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())