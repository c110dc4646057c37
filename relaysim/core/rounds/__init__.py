"""`rounds`: the round engine for the item-routing simulation.

- deterministic, integer-only transitions,
- immutable rule sets (frozen dataclasses), mutable state only in the registry,
- fail-fast value policy and invariant checks.

Public API:
- `run_round(registry, value_policy)` / `run(registry, rounds, value_policy)`
- `score(registry) -> int`
- `simulate(specs, rounds, value_policy) -> SimulationResult`
- `quick_score(specs)` / `long_score(specs)`
"""

from .engine import (
    LONG_ROUNDS,
    QUICK_ROUNDS,
    apply_transform,
    long_score,
    quick_score,
    run,
    run_round,
    score,
    simulate,
    take_turn,
    top_two,
)
from .errors import (
    RegistryConstructionError,
    RoundInvariantError,
    ScorePreconditionError,
    ValuePolicyError,
)
from .policies import (
    ModulusNormalization,
    bounded_division,
    congruence_checked,
    divisor_modulus,
    modulus_normalization,
    policy_for,
)
from .types import HandlerSpec, SimulationResult, Transform, TransformKind, ValuePolicy

__all__ = [
    "LONG_ROUNDS",
    "QUICK_ROUNDS",
    "apply_transform",
    "long_score",
    "quick_score",
    "run",
    "run_round",
    "score",
    "simulate",
    "take_turn",
    "top_two",
    "RegistryConstructionError",
    "RoundInvariantError",
    "ScorePreconditionError",
    "ValuePolicyError",
    "ModulusNormalization",
    "bounded_division",
    "congruence_checked",
    "divisor_modulus",
    "modulus_normalization",
    "policy_for",
    "HandlerSpec",
    "SimulationResult",
    "Transform",
    "TransformKind",
    "ValuePolicy",
]
