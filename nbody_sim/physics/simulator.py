"""Main simulator controller."""

from typing import Callable, List, Optional
from tqdm import tqdm
from nbody_sim.physics.bodies import BodySet, Snapshot
from nbody_sim.physics.diagnostics import Diagnostics
from nbody_sim.physics.force_field import ForceField
from nbody_sim.physics.integrators.base import Integrator
from nbody_sim.physics.integrators.leapfrog import LeapfrogIntegrator

Observer = Callable[[Snapshot], None]


class Simulator:
    """Main simulation controller.

    Owns the body set for the whole run and sequences fixed-size integrator
    steps. Observers are handed read-only snapshots every plot_interval
    steps and never see the live arrays.
    """

    def __init__(
        self,
        integrator: Optional[Integrator] = None,
        dt: float = 1.0e3,
        softening: float = 1.0e3,
        force_field: Optional[ForceField] = None,
    ):
        """Initialize simulator.

        Args:
            integrator: Integrator to use (default: leapfrog)
            dt: Time step
            softening: Softening length
            force_field: Force field for a default integrator (ignored if integrator is given)
        """
        self.integrator = integrator or LeapfrogIntegrator(force_field)
        self.dt = dt
        self.softening = softening

        self.bodies: Optional[BodySet] = None
        self.time = 0.0
        self.step_count = 0
        self._primed = False
        self._observers: List[Observer] = []

    @property
    def force_field(self) -> ForceField:
        return self.integrator.force_field

    def initialize(self, bodies: BodySet):
        """Copy the body set and compute initial accelerations.

        The simulator works on its own copy; later changes to ``bodies`` do
        not reach the run, and the run never writes back into ``bodies``.

        Args:
            bodies: Initial body set (accelerations are recomputed, never trusted)
        """
        self.bodies = bodies.copy()
        self.time = 0.0
        self.step_count = 0
        self.integrator.prime(self.bodies, self.softening)
        self._primed = True

    def add_observer(self, observer: Observer):
        """Register a callback receiving a Snapshot at the plot cadence."""
        self._observers.append(observer)

    def remove_observer(self, observer: Observer):
        self._observers.remove(observer)

    def step(self):
        """Perform one integration step."""
        if self.bodies is None:
            raise RuntimeError("Simulator not initialized")
        if not self._primed:
            self.integrator.prime(self.bodies, self.softening)
            self._primed = True

        self.integrator.step(self.bodies, self.dt, self.softening)

        self.time += self.dt
        self.step_count += 1

    def run(self, n_steps: int, plot_interval: int = 1, progress: bool = False):
        """Run exactly n_steps steps, notifying observers on a fixed cadence.

        After the step with zero-based index i, observers are called when
        i % plot_interval == 0.

        Args:
            n_steps: Number of steps to run
            plot_interval: Observer cadence in steps
            progress: Show a progress bar
        """
        bar = tqdm(total=n_steps, unit="step", disable=not progress)
        try:
            for i in range(n_steps):
                self.step()
                if self._observers and i % plot_interval == 0:
                    self._notify(i)
                bar.update(1)
        finally:
            bar.close()

    def _notify(self, step_index: int):
        snapshot = self.bodies.snapshot(step=step_index, time=self.time)
        for observer in self._observers:
            observer(snapshot)

    def set_integrator(self, integrator: Integrator):
        """Swap integrator; accelerations are recomputed before the next step."""
        self.integrator = integrator
        self._primed = False

    def get_snapshot(self) -> Snapshot:
        """Current read-only snapshot, for observers that poll instead of subscribe."""
        return self.bodies.snapshot(step=self.step_count, time=self.time)

    def get_state(self):
        """Get current simulation state.

        Returns:
            Tuple of (positions, velocities, masses, time, step_count)
        """
        pos, vel, mass = self.bodies.get_state()
        return pos, vel, mass, self.time, self.step_count

    def diagnostics(self) -> Diagnostics:
        return Diagnostics(softening=self.softening, force_field=self.force_field)

    def get_energy(self) -> float:
        """Get current total energy (kinetic + potential)."""
        return self.diagnostics().compute_energies(self.bodies)[2]

    def get_kinetic_energy(self) -> float:
        return self.diagnostics().compute_kinetic_energy(self.bodies)

    def get_potential_energy(self) -> float:
        return self.diagnostics().compute_potential_energy(self.bodies)

    def close(self):
        """Release the force field's worker threads."""
        self.force_field.close()
