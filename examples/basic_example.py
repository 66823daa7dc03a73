"""Basic example: one Earth/Moon orbit with the leapfrog integrator."""

from nbody_sim import Simulator
from nbody_sim.presets import TwoBodyOrbit


def main():
    """Run the two-body preset for one orbital period."""
    preset = TwoBodyOrbit()
    bodies = preset.generate()

    sim = Simulator(dt=1.0e3, softening=1.0e3)
    sim.initialize(bodies)

    n_steps = int(preset.period / sim.dt)
    initial_energy = sim.get_energy()

    print("Running simulation...")
    print(f"Initial energy: {initial_energy:.6e}")

    for step in range(n_steps):
        sim.step()
        if step % 500 == 0:
            energy = sim.get_energy()
            print(f"Step {step}: Time={sim.time:.3e} s, Energy={energy:.6e}")

    drift = abs(sim.get_energy() - initial_energy) / abs(initial_energy)
    print(f"Final energy: {sim.get_energy():.6e} (relative drift {drift:.2e})")
    print("Simulation complete!")


if __name__ == "__main__":
    main()
