"""
Value policies: reductions applied to every transformed value before routing.

Contract: for every handler divisor `d`, `policy(x) % d == x % d`, and the
result is a non-negative int.

- `modulus_normalization` meets the contract exactly: `M` is the product of all
  divisors, so every `d` divides `M` and `(x % M) % d == x % d` for all x >= 0.
  Values therefore stay below `M` for any number of rounds.
- `bounded_division` does NOT meet it in general. It is kept for short runs
  (20 rounds) where the magnitudes stay small, and must not be used for long
  runs or wrapped in `congruence_checked`.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import prod
from typing import Callable, Dict, Sequence, Tuple

from .errors import ValuePolicyError
from .types import ValuePolicy

BOUNDED_DIVISION = "bounded_division"
MODULUS_NORMALIZATION = "modulus_normalization"

RELIEF_FACTOR = 3


def bounded_division(x: int) -> int:
    return x // RELIEF_FACTOR


def divisor_modulus(divisors: Sequence[int]) -> int:
    """Product of all divisors. Raises ValueError if empty or any is < 1."""
    divisors = tuple(divisors)
    if not divisors:
        raise ValueError("divisor_modulus needs at least one divisor")
    for d in divisors:
        if not isinstance(d, int) or isinstance(d, bool) or d < 1:
            raise ValueError(f"divisors must be positive ints, got {d!r}")
    return prod(divisors)


@dataclass(frozen=True)
class ModulusNormalization:
    """`x -> x % modulus`, with `modulus` the product of a handler set's divisors."""

    modulus: int

    def __call__(self, x: int) -> int:
        return x % self.modulus


def modulus_normalization(divisors: Sequence[int]) -> ModulusNormalization:
    """Build the policy for `divisors`; `M` is computed once, here, from the full divisor set."""
    return ModulusNormalization(modulus=divisor_modulus(divisors))


def congruence_checked(policy: ValuePolicy, divisors: Sequence[int]) -> ValuePolicy:
    """
    Wrap `policy` so that every call verifies the congruence contract.

    Raises ValuePolicyError on the first value whose residue changes modulo any
    divisor, or whose result is not a non-negative int.
    """
    checked_divisors: Tuple[int, ...] = tuple(divisors)

    def checked(x: int) -> int:
        out = policy(x)
        if not isinstance(out, int) or isinstance(out, bool) or out < 0:
            raise ValuePolicyError("policy must return a non-negative int", value_in=x, value_out=out)
        for d in checked_divisors:
            if out % d != x % d:
                raise ValuePolicyError(f"policy changed residue mod {d}", value_in=x, value_out=out)
        return out

    return checked


POLICIES: Dict[str, Callable[[Tuple[int, ...]], ValuePolicy]] = {
    BOUNDED_DIVISION: lambda _divisors: bounded_division,
    MODULUS_NORMALIZATION: modulus_normalization,
}


def policy_for(name: str, divisors: Sequence[int]) -> ValuePolicy:
    """Resolve a registered policy name against a handler set's divisors."""
    factory = POLICIES.get(name)
    if factory is None:
        raise ValueError(f"unknown value policy {name!r} (known: {', '.join(sorted(POLICIES))})")
    return factory(tuple(divisors))
