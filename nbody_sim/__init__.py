"""N-body simulator - direct-summation Newtonian gravity with a leapfrog integrator.

Features:
- Softened pairwise forces, fanned out over a thread pool
- Kick-drift-kick leapfrog (and an Euler baseline)
- JSON/NPZ initial conditions and final-state export
- Density projection rendering to PNG
- CLI with JSON/YAML configuration
"""

__version__ = "0.1.0"

from nbody_sim.physics.bodies import Body, BodySet
from nbody_sim.physics.force_field import G, ForceField, compute_accelerations
from nbody_sim.physics.integrators.leapfrog import step_once
from nbody_sim.physics.simulator import Simulator

__all__ = [
    "G",
    "Body",
    "BodySet",
    "ForceField",
    "compute_accelerations",
    "step_once",
    "Simulator",
]
