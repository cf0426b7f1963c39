"""Smoke tests for the example scripts.

Each example is run in a fresh interpreter from a temporary directory so its
outputs/ folder does not land in the project tree. Results are not checked,
only that the script exits cleanly and writes its outputs.
"""

import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
EXAMPLES_DIR = PROJECT_ROOT / "pilots_intent" / "examples"


def run_example(example_name: str, cwd: Path, timeout: int = 180) -> subprocess.CompletedProcess:
    """Run an example script headless and return the result."""
    env = dict(os.environ)
    env["MPLBACKEND"] = "Agg"
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(PROJECT_ROOT), env.get("PYTHONPATH", "")) if p
    )

    return subprocess.run(
        [sys.executable, str(EXAMPLES_DIR / f"{example_name}.py")],
        capture_output=True,
        text=True,
        timeout=timeout,
        cwd=cwd,
        env=env,
    )


class TestExamplesSmoke:
    """Examples run to completion."""

    def test_constant_pitch_runs(self, tmp_path) -> None:
        result = run_example("constant_pitch", tmp_path)
        assert result.returncode == 0, f"constant_pitch failed:\n{result.stderr}"
        assert "Terminal velocity" in result.stdout
        assert list((tmp_path / "outputs").glob("constant_pitch_*/data/trajectory.csv"))

    def test_integrator_stability_runs(self, tmp_path) -> None:
        result = run_example("integrator_stability", tmp_path)
        assert result.returncode == 0, f"integrator_stability failed:\n{result.stderr}"
        assert "stable: False" in result.stdout
        assert list((tmp_path / "outputs").glob("integrator_stability_*/plots/*.png"))
