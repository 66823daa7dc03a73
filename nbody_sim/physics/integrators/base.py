"""Abstract base class for numerical integrators."""

from abc import ABC, abstractmethod
from typing import Optional
from nbody_sim.physics.bodies import BodySet
from nbody_sim.physics.force_field import ForceField


class Integrator(ABC):
    """Abstract interface for fixed-step integrators.

    An integrator mutates the body set it is handed and keeps nothing about
    it between calls. On return from step(), bodies.accelerations matches
    the new positions, ready for the next step.
    """

    def __init__(self, force_field: Optional[ForceField] = None):
        self.force_field = force_field or ForceField()

    def prime(self, bodies: BodySet, softening: float) -> None:
        """Compute the accelerations the first step starts from."""
        self.force_field.compute_accelerations(bodies, softening)

    @abstractmethod
    def step(self, bodies: BodySet, dt: float, softening: float) -> None:
        """Advance bodies in place by one time step.

        Args:
            bodies: Body set whose accelerations match its positions
            dt: Time step (negative integrates backwards)
            softening: Softening length passed to the force field
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (1 for Euler, 2 for leapfrog)."""
        pass
