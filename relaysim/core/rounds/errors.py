"""Exception types for the round engine.

Construction and scoring failures are structural (bad input shape), and policy
failures are caller bugs; none of them is retried.
"""

from __future__ import annotations


class RegistryConstructionError(Exception):
    """Raised when a handler list cannot form a valid registry."""


class ValuePolicyError(Exception):
    """Raised when a value policy returns a value that breaks its contract."""

    def __init__(self, message: str, *, value_in: int, value_out: object) -> None:
        self.value_in = value_in
        self.value_out = value_out
        super().__init__(f"{message} (in={value_in!r}, out={value_out!r})")


class ScorePreconditionError(Exception):
    """Raised when a score is requested from fewer than two handlers."""


class RoundInvariantError(Exception):
    """Raised when a registry violates one or more invariants after a round."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
