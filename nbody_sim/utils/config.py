"""Configuration management."""

import json
import yaml
from typing import List, Optional
from pathlib import Path
from dataclasses import dataclass, field, asdict, fields
from nbody_sim.physics.force_field import SELF_PAIR_MODES
from nbody_sim.physics.integrators import INTEGRATORS

AXES = "xyz"


@dataclass
class Config:
    """Simulation configuration.

    G is a fixed physical constant and not configurable.
    """
    # Simulation parameters
    softening_factor: float = 1.0e3
    dt: float = 1.0e3
    time_steps: int = 1000
    integrator: str = "leapfrog"
    workers: Optional[int] = None
    self_pair: str = "index"

    # Input
    input_file: str = "particles.json"

    # Rendering parameters
    render: bool = True
    plot_interval: int = 10
    projections: List[str] = field(default_factory=lambda: ["xy", "xz", "yz"])
    output_dir: str = "output"

    # Export / reporting
    save_state: Optional[str] = None
    progress: bool = True

    def validate(self):
        """Check value ranges; raises ValueError on the first problem found."""
        if not self.dt > 0:
            raise ValueError(f"dt must be > 0, got {self.dt}")
        if not self.softening_factor > 0:
            raise ValueError(f"softening_factor must be > 0, got {self.softening_factor}")
        if self.time_steps < 0:
            raise ValueError(f"time_steps must be >= 0, got {self.time_steps}")
        if self.plot_interval < 1:
            raise ValueError(f"plot_interval must be >= 1, got {self.plot_interval}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.self_pair not in SELF_PAIR_MODES:
            raise ValueError(f"Unknown self_pair '{self.self_pair}'. Available: {list(SELF_PAIR_MODES)}")
        if self.integrator.lower() not in INTEGRATORS:
            raise ValueError(f"Unknown integrator '{self.integrator}'. Available: {list(INTEGRATORS)}")
        for axes in self.projections:
            if len(axes) != 2 or axes[0] == axes[1] or any(a not in AXES for a in axes.lower()):
                raise ValueError(f"Invalid projection '{axes}'")
        return self


def load_config(config_path: str) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        Config object
    """
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        if config_path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    data = data or {}
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys in {config_path}: {unknown}")
    return Config(**data)


def save_config(config: Config, output_path: str):
    """Save configuration to file.

    Args:
        config: Config object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, 'w') as f:
        if output_path.suffix in ('.yaml', '.yml'):
            yaml.dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
