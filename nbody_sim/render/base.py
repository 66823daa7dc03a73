"""Base renderer interface."""

from abc import ABC, abstractmethod
from nbody_sim.physics.bodies import Snapshot


class Renderer(ABC):
    """Abstract base class for renderers.

    A renderer is a simulation observer: Simulator.add_observer(renderer)
    calls it with every snapshot at the plot cadence.
    """

    def __call__(self, snapshot: Snapshot):
        self.render(snapshot)

    @abstractmethod
    def render(self, snapshot: Snapshot):
        """Render one snapshot.

        Args:
            snapshot: Read-only body state (masses, positions, velocities)
        """
        pass

    @abstractmethod
    def close(self):
        """Release any figures or files held by the renderer."""
        pass
