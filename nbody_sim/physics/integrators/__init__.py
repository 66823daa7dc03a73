"""Numerical integrators for N-body simulations."""

from nbody_sim.physics.integrators.base import Integrator
from nbody_sim.physics.integrators.euler import EulerIntegrator
from nbody_sim.physics.integrators.leapfrog import LeapfrogIntegrator, step_once

INTEGRATORS = {
    "euler": EulerIntegrator,
    "leapfrog": LeapfrogIntegrator,
}


def get_integrator(name: str):
    """Get integrator class by name."""
    integrator_class = INTEGRATORS.get(name.lower())
    if integrator_class is None:
        raise ValueError(f"Unknown integrator: {name}. Available: {list(INTEGRATORS.keys())}")
    return integrator_class


__all__ = [
    "Integrator",
    "EulerIntegrator",
    "LeapfrogIntegrator",
    "step_once",
    "get_integrator",
    "INTEGRATORS",
]
