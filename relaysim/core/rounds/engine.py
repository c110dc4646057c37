"""Round engine: drives handler turns over a `HandlerRegistry` and scores the result.

A round visits handler ids in ascending order. Each turn drains the handler's
whole queue first, then for every value, in FIFO order:

1. transform (dispatch table keyed by `TransformKind`),
2. normalize (injected value policy),
3. count it as processed,
4. route it by the divisibility test.

Because the drain happens before any routing, a value sent back to the same
handler waits for the next round; a value sent to a higher id is processed later
in this round, one sent to a lower id waits for the next round.

The engine keeps no state of its own between calls.
"""

from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Sequence, Tuple

from .errors import RoundInvariantError, ScorePreconditionError, ValuePolicyError
from .invariants import check_structural
from .policies import bounded_division, modulus_normalization
from .types import HandlerSpec, SimulationResult, Transform, TransformKind, ValuePolicy

if TYPE_CHECKING:
    from ...state.registry import HandlerRegistry

logger = logging.getLogger(__name__)

QUICK_ROUNDS: int = 20
LONG_ROUNDS: int = 10_000

TransformFn = Callable[[int, int], int]

_TRANSFORMS: Dict[TransformKind, TransformFn] = {
    TransformKind.ADD: lambda value, k: value + k,
    TransformKind.MULTIPLY: lambda value, k: value * k,
    TransformKind.SQUARE: lambda value, _k: value * value,
}


def apply_transform(transform: Transform, value: int) -> int:
    return _TRANSFORMS[transform.kind](value, transform.operand)


def take_turn(registry: HandlerRegistry, handler_id: int, value_policy: ValuePolicy) -> int:
    """Run one handler's turn; returns how many values it processed."""
    spec = registry.handler(handler_id)
    values = registry.drain(handler_id)
    for value in values:
        transformed = apply_transform(spec.transform, value)
        normalized = value_policy(transformed)
        if not isinstance(normalized, int) or isinstance(normalized, bool) or normalized < 0:
            raise ValuePolicyError(
                "policy must return a non-negative int", value_in=transformed, value_out=normalized
            )
        registry.increment_processed(handler_id)
        target = spec.route_true if normalized % spec.divisor == 0 else spec.route_false
        registry.enqueue(target, normalized)
    return len(values)


def run_round(registry: HandlerRegistry, value_policy: ValuePolicy) -> None:
    for handler_id in range(len(registry)):
        take_turn(registry, handler_id, value_policy)


def run(
    registry: HandlerRegistry,
    rounds: int,
    value_policy: ValuePolicy,
    *,
    check_invariants: bool = False,
) -> None:
    """
    Run exactly `rounds` rounds in order.

    With `check_invariants=True`, the structural invariants are verified after
    every round and `RoundInvariantError` is raised on the first failure.
    """
    if not isinstance(rounds, int) or isinstance(rounds, bool) or rounds < 0:
        raise ValueError(f"rounds must be a non-negative int, got {rounds!r}")
    logger.debug("running %d rounds over %d handlers (%d items)", rounds, len(registry), registry.total_items())
    for round_no in range(rounds):
        run_round(registry, value_policy)
        if check_invariants:
            violations = check_structural(registry)
            if violations:
                logger.debug("invariants failed after round %d: %s", round_no + 1, violations)
                raise RoundInvariantError(violations)
    logger.debug("processed counts after %d rounds: %s", rounds, registry.snapshot_counts())


def top_two(counts: Iterable[int]) -> Tuple[int, int]:
    """The two largest entries (multiset semantics: equal counts may both be picked)."""
    largest = heapq.nlargest(2, counts)
    if len(largest) < 2:
        raise ScorePreconditionError(f"scoring needs at least two counts, got {len(largest)}")
    return largest[0], largest[1]


def score(registry: HandlerRegistry) -> int:
    """Product of the two highest processed counts."""
    first, second = top_two(registry.snapshot_counts())
    return first * second


def simulate(
    specs: Sequence[HandlerSpec],
    rounds: int,
    value_policy: ValuePolicy,
    *,
    check_invariants: bool = False,
) -> SimulationResult:
    """Build a fresh registry from `specs`, run it, and score it."""
    from ...state.registry import HandlerRegistry

    registry = HandlerRegistry.create(specs)
    run(registry, rounds, value_policy, check_invariants=check_invariants)
    return SimulationResult(rounds=rounds, counts=registry.snapshot_counts(), score=score(registry))


def quick_score(specs: Sequence[HandlerSpec]) -> int:
    return simulate(specs, QUICK_ROUNDS, bounded_division).score


def long_score(specs: Sequence[HandlerSpec]) -> int:
    from ...state.registry import HandlerRegistry

    # Modulus is fixed from the validated handler set before the first round.
    divisors = HandlerRegistry.create(specs).divisors()
    return simulate(specs, LONG_ROUNDS, modulus_normalization(divisors)).score
