"""Rendering observers for simulation snapshots."""

from nbody_sim.render.base import Renderer
from nbody_sim.render.density import DensityProjectionRenderer, PROJECTIONS

__all__ = ["Renderer", "DensityProjectionRenderer", "PROJECTIONS"]
