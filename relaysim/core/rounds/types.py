"""Data types for the round engine.

All records are frozen dataclasses. Mutable simulation state (queues and
processed counts) lives in `relaysim.state.registry.HandlerRegistry`, never here.

Conventions:
- handler ids are dense ordinals `0..n-1`, also the turn order within a round.
- every queued value is a non-negative `int` (arbitrary precision).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Callable, Tuple

# Normalization applied to every transformed value before its routing test.
ValuePolicy = Callable[[int], int]


@unique
class TransformKind(Enum):
    ADD = "add"
    MULTIPLY = "multiply"
    SQUARE = "square"


@dataclass(frozen=True)
class Transform:
    """One handler's transformation rule; `operand` is unused (0) for SQUARE."""

    kind: TransformKind
    operand: int = 0

    @classmethod
    def add(cls, k: int) -> "Transform":
        return cls(TransformKind.ADD, k)

    @classmethod
    def multiply(cls, k: int) -> "Transform":
        return cls(TransformKind.MULTIPLY, k)

    @classmethod
    def square(cls) -> "Transform":
        return cls(TransformKind.SQUARE)

    def render(self) -> str:
        """Notes form of the rule, e.g. ``old * 19``."""
        if self.kind is TransformKind.SQUARE:
            return "old * old"
        if self.kind is TransformKind.MULTIPLY:
            return f"old * {self.operand}"
        return f"old + {self.operand}"


@dataclass(frozen=True)
class HandlerSpec:
    """Immutable rule set plus starting queue for one handler."""

    transform: Transform
    divisor: int
    route_true: int
    route_false: int
    initial_queue: Tuple[int, ...] = ()


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of a complete run on a fresh registry."""

    rounds: int
    counts: Tuple[int, ...]
    score: int
