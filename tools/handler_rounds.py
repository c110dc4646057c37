#!/usr/bin/env python3
"""
Run the handler-routing simulation over a notes file and print one score per scenario.

Example:
  python3 tools/handler_rounds.py input.txt
  python3 tools/handler_rounds.py --scenarios scenarios.yaml --check-invariants input.txt

Log level comes from RELAYSIM_LOG_LEVEL (default: WARNING).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from relaysim.core.rounds.errors import RegistryConstructionError, RoundInvariantError, ScorePreconditionError
from relaysim.integration.notes import load_notes
from relaysim.integration.runner import run_scenarios
from relaysim.integration.scenarios import DEFAULT_SCENARIOS, load_scenarios, log_level_from_env


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Simulate handler rounds and print the score of each scenario.")
    p.add_argument("notes", type=Path, help="Path to the handler notes text file")
    p.add_argument("--scenarios", type=Path, default=None, help="YAML scenario file (default: quick + long)")
    p.add_argument("--check-invariants", action="store_true", help="Verify registry invariants after every round")
    args = p.parse_args(argv)

    try:
        logging.basicConfig(level=log_level_from_env(os.environ), format="%(levelname)s %(name)s: %(message)s")
        specs = load_notes(args.notes)
        scenarios = load_scenarios(args.scenarios) if args.scenarios is not None else list(DEFAULT_SCENARIOS)
        outcomes = run_scenarios(specs, scenarios, check_invariants=bool(args.check_invariants))
    except (OSError, ValueError, RegistryConstructionError, RoundInvariantError, ScorePreconditionError) as exc:
        print(f"handler_rounds error: {exc}", file=sys.stderr)
        return 2

    for outcome in outcomes:
        print(f"{outcome.scenario.name}: {outcome.result.score}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
