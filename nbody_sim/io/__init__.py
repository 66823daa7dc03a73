"""I/O utilities for initial conditions and state export."""

from nbody_sim.io.state_io import save_bodies, load_bodies, load_state

__all__ = ["save_bodies", "load_bodies", "load_state"]
