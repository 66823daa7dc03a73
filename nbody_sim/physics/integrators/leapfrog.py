"""Leapfrog kick-drift-kick integrator (symplectic, time-reversible, O(h²))."""

from typing import Optional
from nbody_sim.physics.bodies import BodySet
from nbody_sim.physics.force_field import ForceField
from nbody_sim.physics.integrators.base import Integrator


class LeapfrogIntegrator(Integrator):
    """Kick-drift-kick leapfrog.

    One step:
    1. v += a * dt/2      (a cached from the previous force refresh)
    2. x += v * dt
    3. a = F(x) / m       (single force refresh)
    4. v += a * dt/2

    The cached acceleration makes this one force evaluation per step. The
    phase order is what gives the scheme its symplectic, time-reversible
    character; running with -dt retraces the trajectory.
    """

    @property
    def name(self) -> str:
        return "leapfrog"

    @property
    def order(self) -> int:
        return 2

    def step(self, bodies: BodySet, dt: float, softening: float) -> None:
        half_dt = dt / 2.0

        # Kick (half step)
        bodies.velocities += bodies.accelerations * half_dt

        # Drift (full step)
        bodies.positions += bodies.velocities * dt

        # Force refresh at the drifted positions
        self.force_field.compute_accelerations(bodies, softening)

        # Kick (second half step)
        bodies.velocities += bodies.accelerations * half_dt


def step_once(
    bodies: BodySet,
    dt: float,
    softening: float,
    force_field: Optional[ForceField] = None,
) -> None:
    """Perform one kick-drift-kick step on bodies in place.

    bodies.accelerations must already match bodies.positions (call
    compute_accelerations once before the first step).
    """
    LeapfrogIntegrator(force_field).step(bodies, dt, softening)
