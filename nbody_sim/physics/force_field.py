"""Softened pairwise gravity with a fork-join fan-out over target bodies.

Each worker owns a contiguous slice of rows of the acceleration array and
reads the full position/mass arrays. No locking is needed: the write sets of
the workers are disjoint and nothing they read is written during the call.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Literal, Optional
import numpy as np
from nbody_sim.physics.bodies import BodySet

# Gravitational constant (m^3 kg^-1 s^-2)
G = 6.67430e-11

SELF_PAIR_MODES = ("index", "position")

# Below this many bodies the thread pool costs more than it saves
PARALLEL_MIN_BODIES = 256

# Upper bound on the (rows, n, 3) temporary built per chunk
_CHUNK_TARGET_ELEMENTS = 4_000_000


class ForceField:
    """Direct-summation gravitational accelerations, O(N^2) per call.

    For each body i:

        a_i = sum_{j != i} G*m_j / (d^2 + eps^2) * (p_j - p_i) / d

    The softened magnitude multiplies the unit direction vector; the
    softening term is added to the squared distance before normalization.
    """

    def __init__(
        self,
        G: float = G,
        workers: Optional[int] = None,
        chunk_size: Optional[int] = None,
        self_pair: Literal["index", "position"] = "index",
    ):
        """Initialize force field.

        Args:
            G: Gravitational constant
            workers: Thread count for the per-body fan-out (None: CPU count, 1: inline)
            chunk_size: Rows per task (None: derived from n and workers)
            self_pair: How a body's own contribution is excluded. "index" skips
                i == j; "position" skips every pair with exactly equal positions,
                which also drops distinct bodies sitting on the same point.
        """
        if self_pair not in SELF_PAIR_MODES:
            raise ValueError(f"Unknown self_pair mode '{self_pair}'. Available: {list(SELF_PAIR_MODES)}")
        self.G = G
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        self.chunk_size = chunk_size
        self.self_pair = self_pair
        self._pool: Optional[ThreadPoolExecutor] = None

    def close(self) -> None:
        """Shut down the worker pool; a later call starts a fresh one."""
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _get_pool(self) -> ThreadPoolExecutor:
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="force-field")
        return self._pool

    def compute_accelerations(self, bodies: BodySet, softening: float) -> None:
        """Overwrite bodies.accelerations with the net softened acceleration.

        Positions, velocities and masses are only read. Returns after every
        row has been written.
        """
        n = len(bodies)
        accelerations = bodies.accelerations
        if n < 2:
            accelerations[...] = 0.0
            return

        softening_sq = softening * softening
        chunks = self._chunks(n)

        if len(chunks) == 1 or self.workers <= 1:
            for start, stop in chunks:
                self._compute_rows(bodies.positions, bodies.masses, accelerations, start, stop, softening_sq)
            return

        # Reused across calls until close()
        pool = self._get_pool()
        futures = [
            pool.submit(
                self._compute_rows,
                bodies.positions,
                bodies.masses,
                accelerations,
                start,
                stop,
                softening_sq,
            )
            for start, stop in chunks
        ]
        # Join barrier; re-raises any worker exception
        for future in futures:
            future.result()

    def potential_energy(self, bodies: BodySet, softening: float) -> float:
        """Potential energy consistent with this force law.

        Integrating G*m_i*m_j / (r^2 + eps^2) from d to infinity gives
        U_ij = -G*m_i*m_j * arctan(eps/d) / eps, which tends to the Newtonian
        -G*m_i*m_j / d as eps -> 0.
        """
        n = len(bodies)
        if n < 2:
            return 0.0
        positions = bodies.positions
        masses = bodies.masses
        i_idx, j_idx = np.triu_indices(n, k=1)
        r_diff = positions[j_idx] - positions[i_idx]
        distance = np.sqrt(np.sum(r_diff ** 2, axis=1))
        mass_products = masses[i_idx] * masses[j_idx]
        with np.errstate(divide="ignore", invalid="ignore"):
            if softening == 0:
                pair_terms = mass_products / distance
            else:
                pair_terms = mass_products * np.arctan2(softening, distance) / softening
        return float(-self.G * np.sum(pair_terms))

    def _chunks(self, n: int):
        if self.chunk_size is not None:
            size = max(1, int(self.chunk_size))
        elif self.workers <= 1 or n < PARALLEL_MIN_BODIES:
            size = max(1, _CHUNK_TARGET_ELEMENTS // (3 * n))
        else:
            per_worker = -(-n // self.workers)
            size = max(1, min(per_worker, _CHUNK_TARGET_ELEMENTS // (3 * n)))
        return [(start, min(start + size, n)) for start in range(0, n, size)]

    def _compute_rows(self, positions, masses, out, start: int, stop: int, softening_sq: float) -> None:
        """Accelerations for target rows [start, stop) written into out[start:stop]."""
        # r_diff: (1,n,3) - (k,1,3) -> (k,n,3), pointing from target i to source j
        pos_i = positions[start:stop, np.newaxis, :]
        pos_j = positions[np.newaxis, :, :]
        r_diff = pos_j - pos_i
        distance_sq = np.sum(r_diff ** 2, axis=2)

        with np.errstate(divide="ignore", invalid="ignore"):
            magnitude = self.G * masses[np.newaxis, :] / (distance_sq + softening_sq)
            distance = np.sqrt(distance_sq)
            # Coincident pairs have no direction: zero unit vector
            inv_distance = np.where(distance > 0.0, 1.0 / distance, 0.0)
            contributions = (magnitude * inv_distance)[:, :, np.newaxis] * r_diff

        if self.self_pair == "index":
            rows = np.arange(stop - start)
            contributions[rows, rows + start, :] = 0.0
        else:
            same_position = np.all(r_diff == 0.0, axis=2)
            contributions[same_position] = 0.0

        out[start:stop] = np.sum(contributions, axis=1)


def compute_accelerations(
    bodies: BodySet,
    softening: float,
    G: float = G,
    self_pair: Literal["index", "position"] = "index",
    workers: Optional[int] = None,
) -> None:
    """Overwrite every body's acceleration in place (see ForceField)."""
    with ForceField(G=G, workers=workers, self_pair=self_pair) as field:
        field.compute_accelerations(bodies, softening)
