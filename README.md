# galaxysim

An O(n²) N-body simulation of a disk-shaped galaxy. It also has helpers for
an orbiting camera, Gaussian bloom kernels, skyline rectangle packing and a
small text-editing engine.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Command line

```
galaxysim [BATCHES] [ITERATIONS] [DAMPING] [DT] [DIST_EPS] [G] [FRAMES] [WG_SIZE] [METHOD]
```

Every argument is positional and optional. A missing trailing argument keeps
its default value:

| Position | Meaning                                         | Default      |
|----------|-------------------------------------------------|--------------|
| 1        | number of particle batches (256 per batch)      | 50           |
| 2        | simulation iterations per frame                 | 4            |
| 3        | velocity damping                                | 0.999998     |
| 4        | time step `dt`                                  | 0.005        |
| 5        | `dist_eps`, added to every squared distance     | 1e-7         |
| 6        | gravitational parameter `G`                     | 2.0          |
| 7        | number of frames to simulate                    | 2**64 - 1    |
| 8        | work group size (must be positive)              | 64           |
| 9        | calculation method: `BRANCH` or `PREDICATED`    | `BRANCH`     |

A number is read from the longest numeric prefix of its argument. If an
argument has no numeric prefix, it reads as zero. An unknown calculation
method prints an error and exits with status 1.

The first two steps are warm-up steps. After them, each step prints its time
in milliseconds, together with the running mean and standard deviation:

```
galaxysim 1 1 0.999998 0.005 1e-7 2.0 10
```

The default frame count is effectively unlimited, so give a frame count for
runs that should end.

## Library use

```python
from galaxysim.params import SimParam
from galaxysim.simulator import DiskGalaxySimulator

params = SimParam()
params.parse_args(["1", "2"])   # 256 particles, 2 iterations per frame
sim = DiskGalaxySimulator(params)
sim.step_sim()
print(sim.last_step_time, sim.particle_pos.x[:4])
```

Modules:

- `galaxysim.params`: `SimParam`, `CalculationMethod` and
  `get_calculation_method`.
- `galaxysim.simulator`: `DiskGalaxySimulator` and `ParticleData`.
  `particle_interaction` performs one integration step. The vector helpers
  are `cross`, `length` and `normalize`.
- `galaxysim.cli`: `run(params, out)`, `main(argv=None)` and `StepStats`.
- `galaxysim.gen`: `random_particle_pos`, `random_particle_vel` and
  `gen_flare_tex`.
- `galaxysim.camera`: `Camera`, which works in polar coordinates with damped
  velocity. Also `cartesian_coordinates`, `look_at` and
  `infinite_perspective`.
- `galaxysim.kernels`: `gauss_kernel`, `optim_gauss_kernel` (merges taps for
  linear interpolation) and `fbo_layout` / `FboLayout` (bloom framebuffer
  sizes).
- `galaxysim.rectpack`: `RectPacker`, `Rect` and `Heuristic`. This is a
  skyline packer with bottom-left and best-fit heuristics.
- `galaxysim.text_layout`: `TextBuffer`, `MonospaceBuffer`, `TextRow`,
  `FindState`, `locate_coord` and `find_charpos`.
- `galaxysim.text_undo`: `UndoState` and `UndoRecord`. This is bounded
  undo/redo history.
- `galaxysim.text_edit`: `TextEditState` and `Key`. These handle cursor,
  selection, clipboard and keyboard editing.

## What it does not do

The package has no renderer and opens no window. The camera, flare texture
and bloom-kernel helpers compute matrices and data, but nothing draws them.
The simulation runs on the CPU with numpy. The command line reports step
timings only.

## Tests

```
pytest
```