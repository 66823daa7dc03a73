"""Physics engine for N-body simulations."""

from nbody_sim.physics.bodies import Body, BodySet, Snapshot
from nbody_sim.physics.force_field import G, ForceField, compute_accelerations
from nbody_sim.physics.integrators import LeapfrogIntegrator, step_once
from nbody_sim.physics.simulator import Simulator

__all__ = [
    "G",
    "Body",
    "BodySet",
    "Snapshot",
    "ForceField",
    "compute_accelerations",
    "LeapfrogIntegrator",
    "step_once",
    "Simulator",
]
