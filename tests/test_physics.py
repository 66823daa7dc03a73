"""Tests for the force field."""

import pytest
import numpy as np
from nbody_sim.physics.bodies import Body, BodySet
from nbody_sim.physics.force_field import G, ForceField, compute_accelerations
from nbody_sim.presets import UniformCloud


def _brute_force(bodies, softening, G=G):
    """Reference double loop: unit direction times softened magnitude."""
    n = len(bodies)
    acc = np.zeros((n, 3))
    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            direction = bodies.positions[j] - bodies.positions[i]
            distance_sq = np.dot(direction, direction)
            magnitude = G * bodies.masses[j] / (distance_sq + softening ** 2)
            acc[i] += direction / np.sqrt(distance_sq) * magnitude
    return acc


def test_body_set_construction():
    """Test body set initialization from records."""
    bodies = BodySet.from_bodies([
        Body(1.0, [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]),
        Body(2.0, [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]),
    ])

    assert len(bodies) == 2
    assert bodies.positions.shape == (2, 3)
    assert np.allclose(bodies.accelerations, 0)
    assert bodies[1].mass == 2.0
    assert np.allclose(bodies[1].velocity, [0.0, 1.0, 0.0])


def test_two_body_symmetry():
    """Test Newton's third law for unequal masses at arbitrary positions."""
    rng = np.random.default_rng(7)
    for _ in range(10):
        positions = rng.normal(0.0, 1.0e6, (2, 3))
        masses = rng.uniform(1.0e20, 1.0e25, 2)
        bodies = BodySet(masses, positions, np.zeros((2, 3)))

        compute_accelerations(bodies, softening=1.0e3)

        a0, a1 = bodies.accelerations
        # Equal and opposite forces
        assert np.allclose(masses[0] * a0, -masses[1] * a1, rtol=1e-12)
        # Body 0 is pulled toward body 1
        assert np.dot(a0, positions[1] - positions[0]) > 0


def test_equal_masses_opposite_accelerations():
    """Test accelerations equal in magnitude and opposite for equal masses."""
    bodies = BodySet([3.0, 3.0], [[0.0, 0.0, 0.0], [1.0, 2.0, -2.0]], np.zeros((2, 3)))
    ForceField(G=1.0).compute_accelerations(bodies, softening=0.1)

    a0, a1 = bodies.accelerations
    assert np.allclose(a0, -a1)
    assert np.isclose(np.linalg.norm(a0), 3.0 / (9.0 + 0.01))


def test_single_body_has_zero_acceleration():
    """Test zero self-force for N=1."""
    bodies = BodySet([5.0], [[1.0, 2.0, 3.0]], [[0.0, 0.0, 0.0]])
    bodies.accelerations[:] = 42.0

    ForceField(G=1.0).compute_accelerations(bodies, softening=0.0)

    assert np.array_equal(bodies.accelerations, np.zeros((1, 3)))


def test_empty_body_set():
    """Test N=0 is a no-op."""
    bodies = BodySet.empty()
    ForceField().compute_accelerations(bodies, softening=1.0)
    assert bodies.accelerations.shape == (0, 3)


def test_softening_bounds_force():
    """Test the magnitude tends to G*m/eps^2 as separation goes to zero."""
    eps = 1.0
    m = 2.0
    force_field = ForceField(G=1.0)
    magnitudes = []
    for d in [1e-1, 1e-3, 1e-6, 1e-9]:
        bodies = BodySet([1.0, m], [[0.0, 0.0, 0.0], [d, 0.0, 0.0]], np.zeros((2, 3)))
        force_field.compute_accelerations(bodies, softening=eps)
        magnitudes.append(np.linalg.norm(bodies.accelerations[0]))

    assert all(np.isfinite(magnitudes))
    assert all(mag <= m / eps ** 2 for mag in magnitudes)
    assert np.isclose(magnitudes[-1], m / eps ** 2, rtol=1e-12)


def test_earth_moon_scenario():
    """Test Earth/Moon accelerations after one force calculation."""
    m_earth, m_moon, d = 5.972e24, 7.348e22, 3.844e8
    bodies = BodySet(
        [m_earth, m_moon],
        [[0.0, 0.0, 0.0], [d, 0.0, 0.0]],
        np.zeros((2, 3)),
    )

    compute_accelerations(bodies, softening=1.0e3)

    a_earth, a_moon = bodies.accelerations
    assert a_earth[0] > 0
    assert np.allclose(a_earth[1:], 0)
    assert np.isclose(a_earth[0], G * m_moon / d ** 2, rtol=1e-9)
    assert np.isclose(a_moon[0], -G * m_earth / d ** 2, rtol=1e-9)
    assert np.isclose(m_earth * a_earth[0], -m_moon * a_moon[0], rtol=1e-12)


def test_matches_brute_force():
    """Test vectorized kernel against a plain double loop."""
    rng = np.random.default_rng(3)
    bodies = BodySet(
        rng.uniform(1.0, 10.0, 7),
        rng.normal(0.0, 5.0, (7, 3)),
        rng.normal(0.0, 1.0, (7, 3)),
    )
    ForceField(G=1.0).compute_accelerations(bodies, softening=0.05)

    assert np.allclose(bodies.accelerations, _brute_force(bodies, 0.05, G=1.0), rtol=1e-12)


def test_positions_and_velocities_untouched():
    """Test only accelerations are written."""
    bodies = UniformCloud(n_bodies=20, seed=1).generate()
    bodies.velocities[:] = 1.0
    positions, velocities, masses = bodies.get_state()

    ForceField().compute_accelerations(bodies, softening=1.0e3)

    assert np.array_equal(bodies.positions, positions)
    assert np.array_equal(bodies.velocities, velocities)
    assert np.array_equal(bodies.masses, masses)


def test_parallel_matches_inline():
    """Test the thread fan-out gives the same result as a single chunk."""
    bodies = UniformCloud(n_bodies=300, seed=42).generate()
    parallel = bodies.copy()

    ForceField(workers=1).compute_accelerations(bodies, softening=1.0e8)
    ForceField(workers=4, chunk_size=37).compute_accelerations(parallel, softening=1.0e8)

    assert np.allclose(parallel.accelerations, bodies.accelerations, rtol=1e-12, atol=0)


def test_parallel_is_deterministic():
    """Test repeated parallel calls give identical output."""
    bodies = UniformCloud(n_bodies=400, seed=5).generate()
    other = bodies.copy()
    force_field = ForceField(workers=4)

    force_field.compute_accelerations(bodies, softening=1.0e8)
    force_field.compute_accelerations(other, softening=1.0e8)

    assert np.array_equal(bodies.accelerations, other.accelerations)


def test_worker_pool_reused_until_close():
    """Test the thread pool persists across calls and is released by close()."""
    bodies = UniformCloud(n_bodies=300, seed=8).generate()
    force_field = ForceField(workers=4, chunk_size=50)
    assert force_field._pool is None

    force_field.compute_accelerations(bodies, softening=1.0e8)
    pool = force_field._pool
    assert pool is not None
    first = bodies.accelerations.copy()

    force_field.compute_accelerations(bodies, softening=1.0e8)
    assert force_field._pool is pool
    assert np.array_equal(bodies.accelerations, first)

    force_field.close()
    assert force_field._pool is None

    # Usable again after close, with a fresh pool
    force_field.compute_accelerations(bodies, softening=1.0e8)
    assert force_field._pool is not None and force_field._pool is not pool
    assert np.array_equal(bodies.accelerations, first)
    force_field.close()


def test_inline_path_starts_no_pool():
    """Test small or single-worker runs never create threads."""
    bodies = UniformCloud(n_bodies=20, seed=8).generate()
    with ForceField(workers=1) as force_field:
        force_field.compute_accelerations(bodies, softening=1.0e8)
        assert force_field._pool is None


def test_coincident_bodies_without_softening_surface_nan():
    """Test eps=0 with coincident distinct bodies yields NaN rather than raising."""
    bodies = BodySet(
        [1.0, 1.0, 1.0],
        [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
        np.zeros((3, 3)),
    )
    ForceField(G=1.0, self_pair="index").compute_accelerations(bodies, softening=0.0)

    assert np.all(np.isnan(bodies.accelerations[0]))
    assert np.all(np.isnan(bodies.accelerations[1]))
    assert np.all(np.isfinite(bodies.accelerations[2]))


def test_self_pair_by_position_skips_coincident_bodies():
    """Test position-equality skipping drops the interaction between coincident bodies."""
    bodies = BodySet(
        [1.0, 1.0, 1.0],
        [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
        np.zeros((3, 3)),
    )
    ForceField(G=1.0, self_pair="position").compute_accelerations(bodies, softening=0.0)

    assert np.allclose(bodies.accelerations[0], [1.0, 0.0, 0.0])
    assert np.allclose(bodies.accelerations[1], [1.0, 0.0, 0.0])
    assert np.allclose(bodies.accelerations[2], [-2.0, 0.0, 0.0])


def test_self_pair_modes_agree_for_distinct_positions():
    """Test both exclusion modes agree when no two bodies coincide."""
    bodies = UniformCloud(n_bodies=30, seed=9).generate()
    by_position = bodies.copy()

    ForceField(self_pair="index").compute_accelerations(bodies, softening=1.0e3)
    ForceField(self_pair="position").compute_accelerations(by_position, softening=1.0e3)

    assert np.array_equal(bodies.accelerations, by_position.accelerations)


def test_unknown_self_pair_mode():
    """Test invalid self-pair mode is rejected."""
    with pytest.raises(ValueError):
        ForceField(self_pair="label")


def test_potential_energy_matches_force():
    """Test -dU/dd equals the force magnitude, with and without softening."""
    m1, m2 = 2.0, 3.0
    force_field = ForceField(G=1.0)

    def potential(d, eps):
        bodies = BodySet([m1, m2], [[0.0, 0.0, 0.0], [d, 0.0, 0.0]], np.zeros((2, 3)))
        return force_field.potential_energy(bodies, eps)

    assert np.isclose(potential(2.0, 0.0), -m1 * m2 / 2.0)
    for eps in [0.0, 0.5]:
        d, h = 1.5, 1e-5
        dU = (potential(d + h, eps) - potential(d - h, eps)) / (2 * h)
        assert np.isclose(dU, m1 * m2 / (d ** 2 + eps ** 2), rtol=1e-6)
