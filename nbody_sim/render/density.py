"""Density projection images written to PNG with matplotlib (Agg, no GUI)."""

from pathlib import Path
from typing import List, Sequence, Tuple
import numpy as np
from matplotlib.figure import Figure
from matplotlib.backends.backend_agg import FigureCanvasAgg
from nbody_sim.physics.bodies import Snapshot
from nbody_sim.render.base import Renderer

AXIS_INDEX = {'x': 0, 'y': 1, 'z': 2}
PROJECTIONS = ('xy', 'xz', 'yz')


class DensityProjectionRenderer(Renderer):
    """Scatter every body onto one or more coordinate planes.

    Each call writes <output_dir>/<axes>_proj_<step:04d>.png per projection,
    white points on black with axes fitted to the bodies' bounding box.
    """

    def __init__(
        self,
        output_dir: str = "output",
        projections: Sequence[str] = PROJECTIONS,
        size: Tuple[int, int] = (1024, 768),
        dpi: int = 100,
        marker_size: float = 2.0
    ):
        """Initialize density projection renderer.

        Args:
            output_dir: Directory for PNG files (created if missing)
            projections: Axis pairs such as 'xy', 'xz', 'yz'
            size: Image size in pixels (width, height)
            dpi: Dots per inch
            marker_size: Marker radius in points
        """
        self.projections = [_parse_projection(p) for p in projections]
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.size = size
        self.dpi = dpi
        self.marker_size = marker_size
        self.written: List[Path] = []

    def render(self, snapshot: Snapshot):
        for axes in self.projections:
            path = self.output_dir / f"{axes}_proj_{snapshot.step:04d}.png"
            self.plot_projection(snapshot.positions, axes, snapshot.step, path)
            self.written.append(path)

    def plot_projection(self, positions: np.ndarray, axes: str, step: int, path: Path) -> Path:
        """Draw positions projected onto the plane spanned by axes and save as PNG."""
        i, j = AXIS_INDEX[axes[0]], AXIS_INDEX[axes[1]]
        p1 = positions[:, i]
        p2 = positions[:, j]

        width, height = self.size
        fig = Figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi, facecolor='black')
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111, facecolor='black')
        ax.set_title(f"Density Projection ({axes[0]}-{axes[1]}) at t={step}", color='white')
        ax.tick_params(colors='white')
        for spine in ax.spines.values():
            spine.set_color('white')
        ax.grid(True, color='white', alpha=0.2)

        ax.set_xlim(*_bounds(p1))
        ax.set_ylim(*_bounds(p2))
        ax.scatter(p1, p2, s=self.marker_size ** 2, c='white', marker='o', linewidths=0)

        fig.savefig(path, facecolor=fig.get_facecolor())
        return path

    def close(self):
        self.written = []


def _parse_projection(name: str) -> str:
    axes = name.lower()
    if len(axes) != 2 or axes[0] == axes[1] or any(a not in AXIS_INDEX for a in axes):
        raise ValueError(f"Invalid axes '{name}'. Use two of x, y, z such as {list(PROJECTIONS)}")
    return axes


def _bounds(values: np.ndarray) -> Tuple[float, float]:
    """Min/max of values, widened when empty, degenerate or non-finite."""
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return -1.0, 1.0
    low, high = float(finite.min()), float(finite.max())
    if high - low <= 0.0:
        pad = abs(low) * 0.1 or 1.0
        return low - pad, high + pad
    return low, high
