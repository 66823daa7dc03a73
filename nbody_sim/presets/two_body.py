"""Two bodies on a circular orbit about their common centre of mass."""

import numpy as np
from nbody_sim.physics.bodies import BodySet
from nbody_sim.physics.force_field import G
from nbody_sim.presets.base import Preset

EARTH_MASS = 5.972e24
MOON_MASS = 7.348e22
EARTH_MOON_DISTANCE = 3.844e8


class TwoBodyOrbit(Preset):
    """Circular two-body orbit in the x-y plane (defaults: Earth and Moon)."""

    def __init__(
        self,
        primary_mass: float = EARTH_MASS,
        secondary_mass: float = MOON_MASS,
        separation: float = EARTH_MOON_DISTANCE,
        G: float = G
    ):
        super().__init__(n_bodies=2)
        self.primary_mass = primary_mass
        self.secondary_mass = secondary_mass
        self.separation = separation
        self.G = G

    @property
    def name(self) -> str:
        return "two_body"

    @property
    def period(self) -> float:
        """Orbital period 2*pi*sqrt(d^3 / (G*M))."""
        total_mass = self.primary_mass + self.secondary_mass
        return 2.0 * np.pi * np.sqrt(self.separation ** 3 / (self.G * total_mass))

    def generate(self) -> BodySet:
        m1, m2, d = self.primary_mass, self.secondary_mass, self.separation
        total_mass = m1 + m2

        # Relative speed for a circular orbit, split about the centre of mass
        v_rel = np.sqrt(self.G * total_mass / d)
        positions = np.array([
            [-d * m2 / total_mass, 0.0, 0.0],
            [d * m1 / total_mass, 0.0, 0.0],
        ])
        velocities = np.array([
            [0.0, -v_rel * m2 / total_mass, 0.0],
            [0.0, v_rel * m1 / total_mass, 0.0],
        ])
        return BodySet([m1, m2], positions, velocities)
