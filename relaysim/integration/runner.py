"""
Runs configured scenarios against one parsed handler set.

Every scenario gets a fresh registry built from the same specs, so scenarios
never observe each other's queues or counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ..core.rounds.engine import simulate
from ..core.rounds.policies import policy_for
from ..core.rounds.types import HandlerSpec, SimulationResult
from ..state.registry import HandlerRegistry
from .scenarios import Scenario

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioOutcome:
    scenario: Scenario
    result: SimulationResult


def run_scenario(
    specs: Sequence[HandlerSpec], scenario: Scenario, *, check_invariants: bool = False
) -> ScenarioOutcome:
    divisors = HandlerRegistry.create(specs).divisors()
    policy = policy_for(scenario.policy, divisors)
    result = simulate(specs, scenario.rounds, policy, check_invariants=check_invariants)
    logger.info("scenario %s: rounds=%d policy=%s score=%d", scenario.name, scenario.rounds, scenario.policy, result.score)
    return ScenarioOutcome(scenario=scenario, result=result)


def run_scenarios(
    specs: Sequence[HandlerSpec], scenarios: Iterable[Scenario], *, check_invariants: bool = False
) -> List[ScenarioOutcome]:
    specs = tuple(specs)
    return [run_scenario(specs, s, check_invariants=check_invariants) for s in scenarios]
