from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from tests.handler_fixtures import EXAMPLE_NOTES


def _write_notes(tmp_path, text: str = EXAMPLE_NOTES):
    path = tmp_path / "notes.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_prints_default_scenarios(tmp_path, capsys) -> None:
    from tools.handler_rounds import main

    rc = main([str(_write_notes(tmp_path))])

    assert rc == 0
    assert capsys.readouterr().out == "quick: 10605\nlong: 2713310158\n"


def test_scenario_file_and_invariant_checks(tmp_path, capsys) -> None:
    from tools.handler_rounds import main

    scenarios = tmp_path / "scenarios.yaml"
    scenarios.write_text(
        "scenarios:\n  - {name: short, rounds: 20, policy: modulus_normalization}\n",
        encoding="utf-8",
    )
    rc = main(["--scenarios", str(scenarios), "--check-invariants", str(_write_notes(tmp_path))])

    assert rc == 0
    # Top two counts after 20 rounds: 103 and 99.
    assert capsys.readouterr().out == "short: 10197\n"


def test_missing_notes_file(tmp_path, capsys) -> None:
    from tools.handler_rounds import main

    rc = main([str(tmp_path / "missing.txt")])

    assert rc == 2
    assert capsys.readouterr().err.startswith("handler_rounds error: ")


def test_parse_error(tmp_path, capsys) -> None:
    from tools.handler_rounds import main

    rc = main([str(_write_notes(tmp_path, EXAMPLE_NOTES.replace("old + 6", "old - 6")))])

    assert rc == 2
    assert "invalid operation line" in capsys.readouterr().err


def test_route_out_of_range(tmp_path, capsys) -> None:
    from tools.handler_rounds import main

    rc = main([str(_write_notes(tmp_path, EXAMPLE_NOTES.replace("throw to monkey 3\n\nMonkey 1", "throw to monkey 4\n\nMonkey 1")))])

    captured = capsys.readouterr()
    assert rc == 2
    assert captured.out == ""
    assert "route_false=4 outside 0..3" in captured.err


def test_bad_scenario_file(tmp_path, capsys) -> None:
    from tools.handler_rounds import main

    scenarios = tmp_path / "scenarios.yaml"
    scenarios.write_text("scenarios:\n  - {name: x, rounds: 1, policy: halve}\n", encoding="utf-8")
    rc = main(["--scenarios", str(scenarios), str(_write_notes(tmp_path))])

    assert rc == 2
    assert "policy 'halve'" in capsys.readouterr().err


def _run_tool(args: list[str], *, log_level: str) -> subprocess.CompletedProcess[str]:
    # Out of process: pytest's root handlers would turn basicConfig into a no-op.
    root = Path(__file__).resolve().parents[1]
    env = {**os.environ, "RELAYSIM_LOG_LEVEL": log_level}
    return subprocess.run(
        [sys.executable, str(root / "tools" / "handler_rounds.py"), *args],
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )


def test_unknown_log_level_reported_as_config_error(tmp_path) -> None:
    proc = _run_tool([str(_write_notes(tmp_path))], log_level="verbose")

    assert proc.returncode == 2
    assert proc.stdout == ""
    assert proc.stderr.startswith("handler_rounds error: RELAYSIM_LOG_LEVEL='verbose'")
    assert "Traceback" not in proc.stderr


def test_info_log_level_logs_to_stderr(tmp_path) -> None:
    scenarios = tmp_path / "scenarios.yaml"
    scenarios.write_text("scenarios:\n  - {name: quick, rounds: 20, policy: bounded_division}\n", encoding="utf-8")

    proc = _run_tool(["--scenarios", str(scenarios), str(_write_notes(tmp_path))], log_level=" info ")

    assert proc.returncode == 0
    assert proc.stdout == "quick: 10605\n"
    assert "INFO relaysim.integration.runner: scenario quick" in proc.stderr
