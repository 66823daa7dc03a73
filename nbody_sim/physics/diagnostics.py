"""Diagnostics for N-body simulations."""

from typing import Optional, Tuple
import numpy as np
from nbody_sim.physics.bodies import BodySet
from nbody_sim.physics.force_field import ForceField, G as G_DEFAULT


class Diagnostics:
    """Compute conserved quantities consistent with the force law."""

    def __init__(self, G: float = G_DEFAULT, softening: float = 0.0, force_field: Optional[ForceField] = None):
        """Initialize diagnostics.

        Args:
            G: Gravitational constant
            softening: Softening length (must match the force calculation)
            force_field: Force field whose potential is used (built from G if None)
        """
        self.force_field = force_field or ForceField(G=G, workers=1)
        self.G = self.force_field.G
        self.softening = softening

    def compute_kinetic_energy(self, bodies: BodySet) -> float:
        """K = 0.5 * sum(m_i * v_i^2)"""
        v_sq = np.sum(bodies.velocities ** 2, axis=1)
        return float(0.5 * np.sum(bodies.masses * v_sq))

    def compute_potential_energy(self, bodies: BodySet) -> float:
        return self.force_field.potential_energy(bodies, self.softening)

    def compute_energies(self, bodies: BodySet) -> Tuple[float, float, float]:
        """Compute kinetic, potential, and total energy.

        Returns:
            Tuple of (kinetic_energy, potential_energy, total_energy)
        """
        K = self.compute_kinetic_energy(bodies)
        U = self.compute_potential_energy(bodies)
        return K, U, K + U

    def compute_momentum(self, bodies: BodySet) -> np.ndarray:
        """Total linear momentum vector sum(m_i * v_i)."""
        return np.sum(bodies.masses[:, np.newaxis] * bodies.velocities, axis=0)

    def compute_angular_momentum(self, bodies: BodySet) -> np.ndarray:
        """Total angular momentum vector sum(m_i * r_i x v_i) about the origin."""
        if len(bodies) == 0:
            return np.zeros(3)
        return np.sum(
            bodies.masses[:, np.newaxis] * np.cross(bodies.positions, bodies.velocities),
            axis=0,
        )

    def compute_center_of_mass(self, bodies: BodySet) -> np.ndarray:
        total_mass = np.sum(bodies.masses)
        if total_mass == 0:
            return np.zeros(3)
        return np.sum(bodies.masses[:, np.newaxis] * bodies.positions, axis=0) / total_mass

    @staticmethod
    def relative_energy_error(initial_energy: float, energy: float) -> float:
        """|E - E0| / |E0| (absolute difference when E0 is zero)."""
        if initial_energy == 0:
            return abs(energy)
        return abs(energy - initial_energy) / abs(initial_energy)
