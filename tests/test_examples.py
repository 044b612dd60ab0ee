"""Smoke tests for example scripts.

These tests ensure that the example scripts can be run end to end without
raising exceptions.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def test_bell_pair_example_runs() -> None:
    """Test that examples/bell_pair.py runs successfully."""
    script = ROOT / "examples" / "bell_pair.py"
    assert script.exists(), f"Example script not found: {script}"

    result = subprocess.run(
        [sys.executable, str(script)],
        capture_output=True,
        text=True,
        check=False,
        timeout=60,
        cwd=str(ROOT),
    )

    assert result.returncode == 0, (
        f"Example script failed with return code {result.returncode}.\n"
        f"STDOUT:\n{result.stdout}\n"
        f"STDERR:\n{result.stderr}"
    )
    assert "Gates: 4 -> 2" in result.stdout
    assert "cx q[0] q[1];" in result.stdout
