"""Body records and the structure-of-arrays body set."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple
import numpy as np


@dataclass
class Body:
    """A single point mass.

    Acceleration is not stored here: it is derived state that lives only
    in a BodySet and is recomputed every step.
    """
    mass: float
    position: np.ndarray
    velocity: np.ndarray

    def __post_init__(self):
        self.mass = float(self.mass)
        self.position = _as_vector(self.position, "position")
        self.velocity = _as_vector(self.velocity, "velocity")


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a body set handed to observers.

    Arrays are copies with the writeable flag cleared.
    """
    step: int
    time: float
    masses: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray

    def __len__(self) -> int:
        return self.masses.shape[0]

    def bodies(self) -> Iterator[Tuple[float, np.ndarray, np.ndarray]]:
        """Yield (mass, position, velocity) per body."""
        for i in range(len(self)):
            yield float(self.masses[i]), self.positions[i], self.velocities[i]


class BodySet:
    """Index-stable set of bodies stored as parallel arrays.

    Index identity is what force computation and integration key off of;
    the number of bodies never changes after construction.
    """

    def __init__(self, masses, positions, velocities):
        """Initialize body set.

        Args:
            masses: Array of shape (n,)
            positions: Array of shape (n, 3)
            velocities: Array of shape (n, 3)
        """
        masses = np.array(masses, dtype=np.float64).reshape(-1)
        positions = np.array(positions, dtype=np.float64)
        velocities = np.array(velocities, dtype=np.float64)
        if positions.size == 0:
            positions = positions.reshape(0, 3)
        if velocities.size == 0:
            velocities = velocities.reshape(0, 3)

        n = masses.shape[0]
        if positions.shape != (n, 3) or velocities.shape != (n, 3):
            raise ValueError(
                f"Inconsistent body arrays: {n} masses, positions {positions.shape}, "
                f"velocities {velocities.shape}"
            )

        self.masses = masses
        self.positions = positions
        self.velocities = velocities
        # Transient, recomputed by the force field before the first step
        self.accelerations = np.zeros((n, 3))

    @classmethod
    def from_bodies(cls, bodies: Iterable[Body]) -> "BodySet":
        bodies = list(bodies)
        if not bodies:
            return cls(np.zeros(0), np.zeros((0, 3)), np.zeros((0, 3)))
        return cls(
            [b.mass for b in bodies],
            [b.position for b in bodies],
            [b.velocity for b in bodies],
        )

    @classmethod
    def empty(cls) -> "BodySet":
        return cls.from_bodies([])

    def __len__(self) -> int:
        return self.masses.shape[0]

    def __getitem__(self, index: int) -> Body:
        return Body(
            self.masses[index],
            self.positions[index].copy(),
            self.velocities[index].copy(),
        )

    def __iter__(self) -> Iterator[Body]:
        for i in range(len(self)):
            yield self[i]

    @property
    def n_bodies(self) -> int:
        return len(self)

    def copy(self) -> "BodySet":
        """Deep copy, including the cached accelerations."""
        clone = BodySet(self.masses, self.positions, self.velocities)
        clone.accelerations = self.accelerations.copy()
        return clone

    def get_state(self):
        """Get current state (positions, velocities, masses).

        Returns:
            Tuple of (positions, velocities, masses) as numpy array copies
        """
        return self.positions.copy(), self.velocities.copy(), self.masses.copy()

    def snapshot(self, step: int = 0, time: float = 0.0) -> Snapshot:
        """Read-only (mass, position, velocity) view for external observers."""
        masses, positions, velocities = self.masses.copy(), self.positions.copy(), self.velocities.copy()
        for arr in (masses, positions, velocities):
            arr.setflags(write=False)
        return Snapshot(step=step, time=time, masses=masses, positions=positions, velocities=velocities)


def _as_vector(value, label: str) -> np.ndarray:
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"{label} must have 3 components, got {vec.shape[0]}")
    return vec
