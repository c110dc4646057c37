"""
Handler registry: the fixed, ordered arena of handlers and their mutable state.

Each handler is addressed by its ordinal id. Rule sets (`HandlerSpec`) are
immutable; only queues and processed counts change, and only through the
primitives below. A value lives in exactly one queue at a time: `drain` removes
it, `enqueue` places it.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Mapping, Sequence, Tuple

from ..core.rounds.errors import RegistryConstructionError
from ..core.rounds.types import HandlerSpec, Transform, TransformKind


def _require_int(value: Any, *, name: str, minimum: int | None = None) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise RegistryConstructionError(f"{name} must be an int, got {type(value).__name__}")
    if minimum is not None and value < minimum:
        raise RegistryConstructionError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def _validate_spec(spec: HandlerSpec, *, index: int, size: int) -> None:
    name = f"handler[{index}]"
    if not isinstance(spec, HandlerSpec):
        raise RegistryConstructionError(f"{name} must be a HandlerSpec, got {type(spec).__name__}")
    if not isinstance(spec.transform, Transform) or not isinstance(spec.transform.kind, TransformKind):
        raise RegistryConstructionError(f"{name}.transform must be a Transform with a TransformKind")
    if spec.transform.kind is not TransformKind.SQUARE:
        _require_int(spec.transform.operand, name=f"{name}.transform.operand", minimum=0)
    _require_int(spec.divisor, name=f"{name}.divisor", minimum=1)
    for field in ("route_true", "route_false"):
        target = _require_int(getattr(spec, field), name=f"{name}.{field}")
        if not 0 <= target < size:
            raise RegistryConstructionError(f"{name}.{field}={target} outside 0..{size - 1}")
    for pos, value in enumerate(spec.initial_queue):
        _require_int(value, name=f"{name}.initial_queue[{pos}]", minimum=0)


class HandlerRegistry:
    """
    Mutable registry of handlers indexed by dense ids `0..n-1`.

    Size and rule sets are fixed at construction; use `create()` (or
    `create_registry()`) rather than calling the constructor with unchecked specs.
    """

    def __init__(self, specs: Sequence[HandlerSpec]):
        self._specs: Tuple[HandlerSpec, ...] = tuple(specs)
        self._queues: List[Deque[int]] = [deque(s.initial_queue) for s in self._specs]
        self._counts: List[int] = [0] * len(self._specs)
        self.initial_item_count: int = sum(len(q) for q in self._queues)

    @classmethod
    def create(cls, specs: Sequence[HandlerSpec]) -> "HandlerRegistry":
        """
        Build a registry with `specs` at ids `0..n-1`, all counts zero.

        Raises:
            RegistryConstructionError: fewer than two handlers, a route target
                outside the id range, a non-positive divisor, or a negative value.
        """
        specs = tuple(specs)
        if len(specs) < 2:
            raise RegistryConstructionError(f"registry needs at least two handlers, got {len(specs)}")
        for i, spec in enumerate(specs):
            _validate_spec(spec, index=i, size=len(specs))
        return cls(specs)

    def __len__(self) -> int:
        return len(self._specs)

    def _check_id(self, handler_id: int) -> int:
        # Ids are dense 0..n-1; negative ids must not wrap around to the end.
        if not isinstance(handler_id, int) or isinstance(handler_id, bool) or not 0 <= handler_id < len(self._specs):
            raise IndexError(f"handler id {handler_id!r} outside 0..{len(self._specs) - 1}")
        return handler_id

    def handler(self, handler_id: int) -> HandlerSpec:
        return self._specs[self._check_id(handler_id)]

    def drain(self, handler_id: int) -> List[int]:
        """Remove and return every value queued at `handler_id`, in FIFO order."""
        queue = self._queues[self._check_id(handler_id)]
        values = list(queue)
        queue.clear()
        return values

    def enqueue(self, handler_id: int, value: int) -> None:
        self._queues[self._check_id(handler_id)].append(value)

    def increment_processed(self, handler_id: int) -> None:
        self._counts[self._check_id(handler_id)] += 1

    def snapshot_counts(self) -> Tuple[int, ...]:
        return tuple(self._counts)

    def queue(self, handler_id: int) -> Tuple[int, ...]:
        # Copy; callers must not mutate queues except through enqueue/drain.
        return tuple(self._queues[self._check_id(handler_id)])

    def divisors(self) -> Tuple[int, ...]:
        return tuple(s.divisor for s in self._specs)

    def total_items(self) -> int:
        return sum(len(q) for q in self._queues)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict snapshot of specs, queues and counts (ordered by id)."""
        return {
            "initial_item_count": self.initial_item_count,
            "handlers": [
                {
                    "transform": {"kind": s.transform.kind.value, "operand": s.transform.operand},
                    "divisor": s.divisor,
                    "route_true": s.route_true,
                    "route_false": s.route_false,
                    "initial_queue": list(s.initial_queue),
                    "queue": list(q),
                    "processed_count": c,
                }
                for s, q, c in zip(self._specs, self._queues, self._counts)
            ],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "HandlerRegistry":
        """
        Rebuild a registry from `to_dict()` output.

        Specs are validated exactly as in `create()`; queues and counts are restored
        afterwards. Raises KeyError on missing fields.
        """
        rows = d["handlers"]
        if not isinstance(rows, list):
            raise RegistryConstructionError("handlers must be a list")
        specs: List[HandlerSpec] = []
        for i, row in enumerate(rows):
            try:
                kind = TransformKind(row["transform"]["kind"])
            except ValueError as exc:
                raise RegistryConstructionError(f"handler[{i}].transform.kind: {exc}") from exc
            specs.append(
                HandlerSpec(
                    transform=Transform(kind, row["transform"]["operand"]),
                    divisor=row["divisor"],
                    route_true=row["route_true"],
                    route_false=row["route_false"],
                    initial_queue=tuple(row["initial_queue"]),
                )
            )
        registry = cls.create(specs)
        for i, row in enumerate(rows):
            registry._queues[i] = deque(
                _require_int(value, name=f"handler[{i}].queue[{pos}]", minimum=0)
                for pos, value in enumerate(row["queue"])
            )
            registry._counts[i] = _require_int(row["processed_count"], name=f"handler[{i}].processed_count", minimum=0)
        registry.initial_item_count = _require_int(d["initial_item_count"], name="initial_item_count", minimum=0)
        return registry

    def __repr__(self) -> str:
        return f"HandlerRegistry({len(self._specs)} handlers, {self.total_items()} items)"


def create_registry(specs: Sequence[HandlerSpec]) -> HandlerRegistry:
    return HandlerRegistry.create(specs)


def registry_from_dict(d: Mapping[str, Any]) -> HandlerRegistry:
    return HandlerRegistry.from_dict(d)
