"""State I/O for loading initial conditions and saving body states.

Accelerations are never written or read: they are recomputed from the
positions before the first step.
"""

import numpy as np
import json
from typing import Tuple, Dict, Any, Optional
from pathlib import Path
from nbody_sim.physics.bodies import Body, BodySet


def save_bodies(
    bodies: BodySet,
    output_path: str,
    metadata: Optional[Dict[str, Any]] = None
):
    """Save body state to file.

    Args:
        bodies: Body set to save
        output_path: Output file path (.npz or .json)
        metadata: Optional metadata dictionary
    """
    output_path = Path(output_path)

    if output_path.suffix == '.npz':
        save_dict = {
            'masses': bodies.masses,
            'positions': bodies.positions,
            'velocities': bodies.velocities
        }
        if metadata:
            # Only scalars survive the npz round trip
            for key, value in metadata.items():
                if isinstance(value, (int, float, str)):
                    save_dict[f'metadata_{key}'] = value
        np.savez_compressed(output_path, **save_dict)

    elif output_path.suffix == '.json':
        records = [
            {
                'mass': float(body.mass),
                'position': body.position.tolist(),
                'velocity': body.velocity.tolist()
            }
            for body in bodies
        ]
        # Bare list matches the initial-condition format; wrap only to carry metadata
        payload = {'bodies': records, 'metadata': metadata} if metadata else records
        with open(output_path, 'w') as f:
            json.dump(payload, f, indent=2)

    else:
        raise ValueError(f"Unsupported file format: {output_path.suffix}. Use .npz or .json")


def load_state(input_path: str) -> Tuple[BodySet, Dict[str, Any]]:
    """Load body state from file.

    Args:
        input_path: Input file path (.json or .npz)

    Returns:
        Tuple of (bodies, metadata)
    """
    input_path = Path(input_path)

    if input_path.suffix == '.npz':
        with np.load(input_path) as data:
            for key in ('masses', 'positions', 'velocities'):
                if key not in data:
                    raise ValueError(f"{input_path}: missing array '{key}'")
            bodies = BodySet(data['masses'], data['positions'], data['velocities'])

            metadata = {}
            for key in data.keys():
                if key.startswith('metadata_'):
                    metadata[key[9:]] = data[key].item()

        return bodies, metadata

    elif input_path.suffix == '.json':
        with open(input_path, 'r') as f:
            payload = json.load(f)

        if isinstance(payload, dict):
            records = payload.get('bodies')
            metadata = payload.get('metadata') or {}
        else:
            records = payload
            metadata = {}
        if not isinstance(records, list):
            raise ValueError(f"{input_path}: expected a list of bodies")

        bodies = BodySet.from_bodies(_parse_body(record, i) for i, record in enumerate(records))
        return bodies, metadata

    else:
        raise ValueError(f"Unsupported file format: {input_path.suffix}. Use .npz or .json")


def load_bodies(input_path: str) -> BodySet:
    """Load initial conditions, discarding metadata."""
    bodies, _ = load_state(input_path)
    return bodies


def _parse_body(record: Any, index: int) -> Body:
    if not isinstance(record, dict):
        raise ValueError(f"Body {index}: expected an object, got {type(record).__name__}")
    try:
        return Body(record['mass'], record['position'], record['velocity'])
    except KeyError as e:
        raise ValueError(f"Body {index}: missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise ValueError(f"Body {index}: {e}") from e
