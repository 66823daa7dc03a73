"""Uniform spherical cloud of equal-mass bodies at rest."""

import numpy as np
from nbody_sim.physics.bodies import BodySet
from nbody_sim.presets.base import Preset


class UniformCloud(Preset):
    """Bodies uniformly distributed inside a sphere, zero initial velocity."""

    def __init__(
        self,
        n_bodies: int = 1000,
        seed: int = None,
        radius: float = 1.0e11,
        total_mass: float = 2.0e30
    ):
        """Initialize uniform cloud preset.

        Args:
            n_bodies: Number of bodies
            seed: Random seed
            radius: Cloud radius (m)
            total_mass: Total mass, shared equally (kg)
        """
        super().__init__(n_bodies, seed)
        self.radius = radius
        self.total_mass = total_mass

    @property
    def name(self) -> str:
        return "cloud"

    def generate(self) -> BodySet:
        n = self.n_bodies
        rng = np.random.default_rng(self.seed)

        # Inverse-CDF sampling: r ~ R * u^(1/3), isotropic direction
        r = self.radius * np.cbrt(rng.uniform(0.0, 1.0, n))
        cos_theta = rng.uniform(-1.0, 1.0, n)
        phi = rng.uniform(0.0, 2.0 * np.pi, n)
        sin_theta = np.sqrt(1.0 - cos_theta ** 2)

        positions = np.column_stack([
            r * sin_theta * np.cos(phi),
            r * sin_theta * np.sin(phi),
            r * cos_theta,
        ])
        velocities = np.zeros((n, 3))
        masses = np.full(n, self.total_mass / n) if n else np.zeros(0)
        return BodySet(masses, positions, velocities)
