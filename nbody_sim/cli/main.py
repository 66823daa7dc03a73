"""CLI main entry point."""

import argparse
import sys
from dataclasses import replace
from nbody_sim.io.state_io import load_bodies, save_bodies
from nbody_sim.physics.bodies import BodySet
from nbody_sim.physics.diagnostics import Diagnostics
from nbody_sim.physics.force_field import SELF_PAIR_MODES, ForceField
from nbody_sim.physics.integrators import INTEGRATORS, get_integrator
from nbody_sim.physics.simulator import Simulator
from nbody_sim.presets import PRESETS
from nbody_sim.render.density import DensityProjectionRenderer
from nbody_sim.utils.config import Config, load_config


def get_preset(name: str, n_bodies: int = None, seed: int = None):
    """Get preset instance by name."""
    preset_class = PRESETS.get(name.lower())
    if preset_class is None:
        raise ValueError(f"Unknown preset: {name}. Available: {list(PRESETS.keys())}")
    if name.lower() == "two_body":
        if n_bodies is not None or seed is not None:
            raise ValueError("--bodies and --seed apply only to the cloud preset")
        return preset_class()
    kwargs = {"seed": seed}
    if n_bodies is not None:
        kwargs["n_bodies"] = n_bodies
    return preset_class(**kwargs)


def build_config(args) -> Config:
    """Merge config file values with command-line overrides."""
    config = load_config(args.config) if args.config else Config()

    overrides = {
        "input_file": args.input,
        "time_steps": args.steps,
        "dt": args.dt,
        "softening_factor": args.softening,
        "plot_interval": args.plot_interval,
        "output_dir": args.output,
        "projections": args.projections,
        "workers": args.workers,
        "self_pair": args.self_pair,
        "integrator": args.integrator,
        "save_state": args.save_state,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if args.no_render:
        overrides["render"] = False
    if args.no_progress:
        overrides["progress"] = False

    return replace(config, **overrides).validate()


def run_simulation(config: Config, preset=None, energy_table: bool = False):
    """Run a simulation."""
    if preset is not None:
        print(f"Generating initial conditions from preset '{preset.name}'...")
        bodies = preset.generate()
    else:
        print(f"Reading initial conditions from '{config.input_file}'...")
        bodies = load_bodies(config.input_file)
    print(f"Successfully loaded {len(bodies)} bodies.")

    force_field = ForceField(workers=config.workers, self_pair=config.self_pair)
    integrator = get_integrator(config.integrator)(force_field)
    sim = Simulator(integrator, dt=config.dt, softening=config.softening_factor)
    sim.initialize(bodies)

    renderer = None
    if config.render:
        renderer = DensityProjectionRenderer(config.output_dir, projections=config.projections)
        sim.add_observer(renderer)

    print(f"Integrator: {integrator.name}, dt: {config.dt}, eps: {config.softening_factor}, "
          f"steps: {config.time_steps}, workers: {force_field.workers}")

    if energy_table:
        sim.add_observer(EnergyReporter(sim.diagnostics(), sim.bodies))

    print("Starting simulation...")
    try:
        sim.run(config.time_steps, plot_interval=config.plot_interval, progress=config.progress)
    finally:
        sim.close()
    print("Simulation complete.")

    if config.save_state:
        save_bodies(sim.bodies, config.save_state, metadata={
            'time': sim.time,
            'steps': sim.step_count,
            'dt': config.dt,
            'softening_factor': config.softening_factor,
            'integrator': integrator.name
        })
        print(f"State saved to {config.save_state}")

    if renderer is not None:
        print(f"Wrote {len(renderer.written)} images to {config.output_dir}")
        renderer.close()

    return sim


class EnergyReporter:
    """Observer printing K, U, E and the relative energy drift per snapshot."""

    def __init__(self, diagnostics: Diagnostics, bodies):
        self.diagnostics = diagnostics
        self.initial_energy = diagnostics.compute_energies(bodies)[2]
        print(f"{'Step':<8} {'Time':<12} {'K':<14} {'U':<14} {'E':<14} {'dE/E0':<10}")
        print("-" * 76)

    def __call__(self, snapshot):
        bodies = BodySet(snapshot.masses, snapshot.positions, snapshot.velocities)
        K, U, E = self.diagnostics.compute_energies(bodies)
        dE = Diagnostics.relative_energy_error(self.initial_energy, E)
        print(f"{snapshot.step:<8} {snapshot.time:<12.4g} {K:<14.6g} {U:<14.6g} {E:<14.6g} {dE:<10.2e}")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="N-body simulator - direct-summation gravity with leapfrog integration")

    parser.add_argument('--config', type=str, default=None,
                        help='JSON or YAML configuration file (flags override it)')

    # Initial conditions
    parser.add_argument('--input', type=str, default=None,
                        help='Initial conditions file (.json or .npz, default: particles.json)')
    parser.add_argument('--preset', type=str, default=None, choices=sorted(PRESETS.keys()),
                        help='Generate initial conditions instead of reading --input')
    parser.add_argument('--bodies', type=int, default=None,
                        help='Number of bodies (cloud preset only; rejected with two_body)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed (cloud preset only; rejected with two_body)')

    # Simulation parameters
    parser.add_argument('--steps', type=int, default=None,
                        help='Number of time steps (default: 1000)')
    parser.add_argument('--dt', type=float, default=None,
                        help='Time step in seconds (default: 1e3)')
    parser.add_argument('--softening', type=float, default=None,
                        help='Softening length in metres (default: 1e3)')
    parser.add_argument('--integrator', type=str, default=None, choices=sorted(INTEGRATORS),
                        help='Numerical integrator (default: leapfrog)')
    parser.add_argument('--workers', type=int, default=None,
                        help='Threads for the force calculation (default: CPU count)')
    parser.add_argument('--self-pair', type=str, default=None, choices=list(SELF_PAIR_MODES),
                        help='Exclude self-interaction by index or by exact position equality')

    # Output
    parser.add_argument('--plot-interval', type=int, default=None,
                        help='Write projection images every N steps (default: 10)')
    parser.add_argument('--projections', type=str, nargs='+', default=None,
                        help='Axis pairs to render (default: xy xz yz)')
    parser.add_argument('--output', type=str, default=None,
                        help='Output directory for images (default: output)')
    parser.add_argument('--no-render', action='store_true',
                        help='Skip projection images')
    parser.add_argument('--save-state', type=str, default=None,
                        help='Save final state to file (.json or .npz)')
    parser.add_argument('--no-progress', action='store_true',
                        help='Hide the progress bar')
    parser.add_argument('--energy', action='store_true',
                        help='Print an energy table at every plot interval')

    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        preset = get_preset(args.preset, args.bodies, args.seed) if args.preset else None
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        run_simulation(config, preset=preset, energy_table=args.energy)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == '__main__':
    main()
