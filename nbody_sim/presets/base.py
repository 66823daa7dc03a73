"""Base class for preset scenarios."""

from abc import ABC, abstractmethod
from nbody_sim.physics.bodies import BodySet


class Preset(ABC):
    """Abstract base class for preset scenarios."""

    def __init__(self, n_bodies: int, seed: int = None):
        """Initialize preset.

        Args:
            n_bodies: Number of bodies
            seed: Random seed for reproducibility
        """
        self.n_bodies = n_bodies
        self.seed = seed

    @abstractmethod
    def generate(self) -> BodySet:
        """Generate initial conditions."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this preset."""
        pass
