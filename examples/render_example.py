"""Render density projections of a collapsing cloud."""

from nbody_sim import Simulator
from nbody_sim.presets import UniformCloud
from nbody_sim.render import DensityProjectionRenderer


def main():
    bodies = UniformCloud(n_bodies=500, seed=42).generate()

    sim = Simulator(dt=1.0e4, softening=1.0e9)
    sim.initialize(bodies)
    renderer = DensityProjectionRenderer("output", projections=["xy", "xz"])
    sim.add_observer(renderer)

    sim.run(200, plot_interval=20, progress=True)

    print(f"Wrote {len(renderer.written)} images")


if __name__ == "__main__":
    main()
