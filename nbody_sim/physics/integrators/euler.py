"""Euler method integrator (baseline, O(h) accuracy)."""

from nbody_sim.physics.bodies import BodySet
from nbody_sim.physics.integrators.base import Integrator


class EulerIntegrator(Integrator):
    """Euler method - simple first-order integrator.

    Fast but drifts in energy. Kept as a baseline for comparison with the
    leapfrog scheme.
    """

    @property
    def name(self) -> str:
        return "euler"

    @property
    def order(self) -> int:
        return 1

    def step(self, bodies: BodySet, dt: float, softening: float) -> None:
        """Euler step: r_new = r + v*dt, v_new = v + a*dt, then refresh a."""
        bodies.positions += bodies.velocities * dt
        bodies.velocities += bodies.accelerations * dt
        self.force_field.compute_accelerations(bodies, softening)
