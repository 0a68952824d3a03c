import math

import numpy as np
import pytest

from galaxysim.params import CalculationMethod, SimParam
from galaxysim.simulator import (
    DiskGalaxySimulator,
    ParticleData,
    _Mt19937,
    cross,
    length,
    normalize,
    particle_interaction,
)


def _params(**kwargs):
    defaults = dict(num_particles=16, sim_iterations_per_frame=1)
    defaults.update(kwargs)
    return SimParam(**defaults)


def test_engine_ten_thousandth_output():
    gen = _Mt19937()
    for _ in range(9999):
        gen.next_u32()
    assert gen.next_u32() == 4123659995


def test_engine_uniform_range_and_determinism():
    a = [_Mt19937().uniform() for _ in range(1)]
    b = [_Mt19937().uniform() for _ in range(1)]
    assert a == b
    gen = _Mt19937()
    values = [gen.uniform() for _ in range(1000)]
    assert all(0.0 <= v < 1.0 for v in values)


def test_cross_of_axes():
    assert np.allclose(cross((1, 0, 0), (0, 1, 0)), [0, 0, 1])
    assert np.allclose(cross((0, 1, 0), (1, 0, 0)), [0, 0, -1])


def test_length_and_normalize():
    assert length((3, 4, 0)) == pytest.approx(5.0)
    v = normalize((2.0, -7.0, 3.5))
    assert length(v) == pytest.approx(1.0, rel=1e-6)


def test_particle_data_zeros_and_mismatch():
    data = ParticleData.zeros(5)
    assert len(data) == 5
    assert data.x.dtype == np.float32
    assert np.all(data.z == 0)
    with pytest.raises(ValueError):
        ParticleData([1, 2], [1], [1, 2])


def test_initial_positions_deterministic_and_in_disk():
    a = DiskGalaxySimulator(_params(num_particles=64))
    b = DiskGalaxySimulator(_params(num_particles=64))
    assert np.array_equal(a.particle_pos.x, b.particle_pos.x)
    pos = a.particle_pos
    radius = np.hypot(pos.x, pos.y)
    assert np.all(radius <= 100.0 + 1e-3)
    assert np.all((pos.z >= 0) & (pos.z <= 4))
    assert a.num_particles == 64 == len(pos)


def test_initial_velocity_is_orbital():
    sim = DiskGalaxySimulator(_params(num_particles=32))
    pos, vel = sim.particle_pos, sim.particle_vel
    assert np.allclose(vel.z, 0)
    assert np.allclose(pos.x * vel.x + pos.y * vel.y, 0, atol=1e-2)
    speed = np.sqrt(vel.x**2 + vel.y**2)
    expected = np.sqrt(2 * np.hypot(pos.x, pos.y))
    assert np.allclose(speed, expected, rtol=1e-4)


def test_branch_interaction_conserves_momentum():
    pos = ParticleData([0.0, 1.0, -2.0], [0.0, 0.5, 1.0], [0.0, 0.0, 0.3])
    vel = ParticleData.zeros(3)
    params = _params(num_particles=3, damping=1.0)
    new_pos, new_vel = particle_interaction(pos, vel, params)
    assert abs(new_vel.x.sum()) < 1e-5
    assert abs(new_vel.y.sum()) < 1e-5
    assert new_vel.x[0] > 0
    assert np.allclose(new_pos.x, pos.x + new_vel.x * params.dt)


def test_predicated_interaction_has_no_attraction():
    pos = ParticleData([0.0, 1.0], [0.0, 0.0], [0.0, 0.0])
    vel = ParticleData([1.0, 2.0], [0.0, 0.0], [0.0, 0.0])
    params = _params(num_particles=2, calc_method=CalculationMethod.PREDICATED)
    new_pos, new_vel = particle_interaction(pos, vel, params)
    assert np.allclose(new_vel.x, vel.x * np.float32(params.damping))
    assert np.allclose(new_pos.x, pos.x + new_vel.x * np.float32(params.dt))


def test_interaction_rejects_mismatched_data():
    with pytest.raises(ValueError):
        particle_interaction(ParticleData.zeros(2), ParticleData.zeros(3), _params())


def test_step_sim_matches_repeated_interaction():
    params = _params(num_particles=24, sim_iterations_per_frame=2)
    sim = DiskGalaxySimulator(params)
    pos, vel = sim.particle_pos.copy(), sim.particle_vel.copy()
    for _ in range(2):
        pos, vel = particle_interaction(pos, vel, params)
    sim.step_sim()
    assert np.array_equal(sim.particle_pos.x, pos.x)
    assert np.array_equal(sim.particle_vel.y, vel.y)
    assert sim.last_step_time >= 0.0


def test_step_sim_rejects_zero_work_group():
    sim = DiskGalaxySimulator(_params(gw_size=0))
    with pytest.raises(ValueError):
        sim.step_sim()


def test_device_name_cached():
    sim = DiskGalaxySimulator(_params(num_particles=1))
    name = sim.device_name()
    assert isinstance(name, str) and len(name) > 0
    assert sim.device_name() is name