"""Tests for the command-line entry point."""

import json
import pytest
from nbody_sim.cli.main import main
from nbody_sim.io.state_io import load_state


def test_preset_run_writes_images_and_state(tmp_path, capsys):
    """Test a short preset run renders at the plot cadence and saves state."""
    out = tmp_path / "output"
    state = tmp_path / "final.json"

    main([
        "--preset", "two_body", "--steps", "5", "--plot-interval", "2",
        "--output", str(out), "--save-state", str(state), "--no-progress",
    ])

    names = sorted(p.name for p in out.iterdir())
    expected = sorted(
        f"{axes}_proj_{step:04d}.png" for axes in ("xy", "xz", "yz") for step in (0, 2, 4)
    )
    assert names == expected

    bodies, metadata = load_state(str(state))
    assert len(bodies) == 2
    assert metadata["steps"] == 5
    assert metadata["integrator"] == "leapfrog"

    stdout = capsys.readouterr().out
    assert "Successfully loaded 2 bodies." in stdout
    assert "Simulation complete." in stdout


def test_input_file_run(tmp_path):
    """Test reading initial conditions from a JSON file without rendering."""
    particles = tmp_path / "particles.json"
    particles.write_text(json.dumps([
        {"mass": 1.0e24, "position": [0.0, 0.0, 0.0], "velocity": [0.0, 0.0, 0.0]},
        {"mass": 1.0e22, "position": [1.0e8, 0.0, 0.0], "velocity": [0.0, 800.0, 0.0]},
    ]))
    state = tmp_path / "final.npz"

    main([
        "--input", str(particles), "--steps", "3", "--no-render",
        "--save-state", str(state), "--no-progress",
    ])

    bodies, metadata = load_state(str(state))
    assert len(bodies) == 2
    assert metadata["steps"] == 3


def test_config_file_with_overrides(tmp_path):
    """Test flags take precedence over config file values."""
    config = tmp_path / "config.yaml"
    config.write_text(
        "time_steps: 100\n"
        "plot_interval: 1\n"
        "projections: [xy]\n"
        "progress: false\n"
    )
    out = tmp_path / "frames"

    main([
        "--config", str(config), "--preset", "cloud", "--bodies", "8", "--seed", "1",
        "--steps", "2", "--output", str(out),
    ])

    assert sorted(p.name for p in out.iterdir()) == ["xy_proj_0000.png", "xy_proj_0001.png"]


def test_energy_table(tmp_path, capsys):
    """Test --energy prints one row per plotted step."""
    main([
        "--preset", "two_body", "--steps", "4", "--plot-interval", "2",
        "--no-render", "--no-progress", "--energy",
    ])

    lines = capsys.readouterr().out.splitlines()
    header = next(i for i, line in enumerate(lines) if line.startswith("Step"))
    rows = [line for line in lines[header + 2:] if line and line.split()[0].isdigit()]
    assert [row.split()[0] for row in rows] == ["0", "2"]


def test_invalid_dt_exits():
    """Test invalid parameters exit with status 2."""
    with pytest.raises(SystemExit) as excinfo:
        main(["--preset", "two_body", "--dt", "0", "--no-render", "--no-progress"])
    assert excinfo.value.code == 2


def test_missing_input_exits(tmp_path, capsys):
    """Test a missing initial-conditions file exits with status 1."""
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(tmp_path / "missing.json"), "--no-render", "--no-progress"])
    assert excinfo.value.code == 1
    assert "Error" in capsys.readouterr().err


@pytest.mark.parametrize("extra", [["--seed", "3"], ["--bodies", "10"]])
def test_two_body_rejects_cloud_options(extra, capsys):
    """Test --bodies and --seed are refused for the fixed two-body preset."""
    with pytest.raises(SystemExit) as excinfo:
        main(["--preset", "two_body", "--no-render", "--no-progress"] + extra)
    assert excinfo.value.code == 2
    assert "cloud preset" in capsys.readouterr().err


def test_zero_softening_exits():
    """Test a zero softening length is refused before the run starts."""
    with pytest.raises(SystemExit) as excinfo:
        main(["--preset", "two_body", "--softening", "0", "--no-render", "--no-progress"])
    assert excinfo.value.code == 2
