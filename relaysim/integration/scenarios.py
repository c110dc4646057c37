"""
Scenario configuration: which (rounds, value policy) pairs to run.

Scenario files are YAML:

    scenarios:
      - name: quick
        rounds: 20
        policy: bounded_division
      - name: long
        rounds: 10000
        policy: modulus_normalization
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Tuple

import yaml

from ..core.rounds.engine import LONG_ROUNDS, QUICK_ROUNDS
from ..core.rounds.policies import BOUNDED_DIVISION, MODULUS_NORMALIZATION, POLICIES

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "RELAYSIM_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Scenario:
    name: str
    rounds: int
    policy: str


DEFAULT_SCENARIOS: Tuple[Scenario, ...] = (
    Scenario(name="quick", rounds=QUICK_ROUNDS, policy=BOUNDED_DIVISION),
    Scenario(name="long", rounds=LONG_ROUNDS, policy=MODULUS_NORMALIZATION),
)


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value.strip()


def _require_rounds(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _parse_scenario(entry: Any, *, index: int) -> Scenario:
    prefix = f"scenarios[{index}]"
    if not isinstance(entry, Mapping):
        raise ValueError(f"{prefix} must be a mapping")
    unknown = set(entry) - {"name", "rounds", "policy"}
    if unknown:
        raise ValueError(f"{prefix} has unknown fields: {', '.join(sorted(map(str, unknown)))}")
    name = _require_str(entry.get("name"), name=f"{prefix}.name")
    rounds = _require_rounds(entry.get("rounds"), name=f"{prefix}.rounds")
    policy = _require_str(entry.get("policy"), name=f"{prefix}.policy")
    if policy not in POLICIES:
        raise ValueError(f"{prefix}.policy {policy!r} is not one of: {', '.join(sorted(POLICIES))}")
    return Scenario(name=name, rounds=rounds, policy=policy)


def parse_scenarios(obj: Any) -> List[Scenario]:
    """Validate a decoded scenario document."""
    if not isinstance(obj, Mapping):
        raise ValueError("scenario config must be a mapping")
    entries = obj.get("scenarios")
    if not isinstance(entries, list) or not entries:
        raise ValueError("scenario config must have a non-empty 'scenarios' list")

    out: List[Scenario] = []
    seen: set[str] = set()
    for i, entry in enumerate(entries):
        scenario = _parse_scenario(entry, index=i)
        if scenario.name in seen:
            raise ValueError(f"scenarios[{i}].name {scenario.name!r} is duplicated")
        seen.add(scenario.name)
        out.append(scenario)
    return out


def load_scenarios(path: Path) -> List[Scenario]:
    path = Path(path)
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"{path}: invalid YAML: {exc}") from exc
    scenarios = parse_scenarios(obj)
    logger.debug("loaded %d scenarios from %s", len(scenarios), path)
    return scenarios


def log_level_from_env(environ: Mapping[str, str]) -> int:
    """Resolve `RELAYSIM_LOG_LEVEL` to a logging level; unknown names raise ValueError."""
    raw = environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"{LOG_LEVEL_ENV}={raw!r} is not a log level name")
    return level
