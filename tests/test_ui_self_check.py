import os
import subprocess
import sys

import pytest


@pytest.mark.skipif(os.environ.get("DISPLAY") is None, reason="No display available")
def test_ui_self_check_passes():
    result = subprocess.run(
        [sys.executable, "-m", "tictactoe.ui_tk", "--self-check", "--size", "5"],
        capture_output=True,
        text=True,
        env={**os.environ, "PYTHONPATH": os.pathsep.join(["src", os.environ.get("PYTHONPATH", "")])},
    )
    assert result.returncode == 0, result.stdout + result.stderr
    assert "UI_SELF_CHECK_PASS" in result.stdout


def test_ui_self_check_skips_without_display():
    pytest.importorskip("tkinter")
    env = {key: value for key, value in os.environ.items() if key != "DISPLAY"}
    env["PYTHONPATH"] = os.pathsep.join(["src", os.environ.get("PYTHONPATH", "")])
    result = subprocess.run(
        [sys.executable, "-m", "tictactoe.ui_tk", "--self-check"],
        capture_output=True,
        text=True,
        env=env,
    )
    assert result.returncode == 0, result.stdout + result.stderr
    assert "UI_SELF_CHECK_SKIP" in result.stdout
