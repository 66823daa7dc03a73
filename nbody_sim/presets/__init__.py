"""Preset initial conditions."""

from nbody_sim.presets.base import Preset
from nbody_sim.presets.two_body import TwoBodyOrbit
from nbody_sim.presets.cloud import UniformCloud

PRESETS = {
    "two_body": TwoBodyOrbit,
    "cloud": UniformCloud,
}

__all__ = ["Preset", "TwoBodyOrbit", "UniformCloud", "PRESETS"]
