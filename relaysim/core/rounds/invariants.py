"""Invariant checkers over a `HandlerRegistry`.

Each function returns True when the invariant holds; `check_all()` returns the
list of violated invariant IDs (empty = all pass).

`inv_routes_not_self` is advisory: handlers may legally route to themselves, so
`check_structural()` (used by the engine) leaves it out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

if TYPE_CHECKING:
    from ...state.registry import HandlerRegistry


def inv_items_conserved(r: HandlerRegistry) -> bool:
    return r.total_items() == r.initial_item_count


def inv_values_non_negative(r: HandlerRegistry) -> bool:
    for i in range(len(r)):
        for v in r.queue(i):
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                return False
    return True


def inv_counts_non_negative(r: HandlerRegistry) -> bool:
    return all(c >= 0 for c in r.snapshot_counts())


def inv_routes_in_range(r: HandlerRegistry) -> bool:
    n = len(r)
    for i in range(n):
        spec = r.handler(i)
        if not (0 <= spec.route_true < n and 0 <= spec.route_false < n):
            return False
    return True


def inv_routes_not_self(r: HandlerRegistry) -> bool:
    return all(i not in (r.handler(i).route_true, r.handler(i).route_false) for i in range(len(r)))


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[HandlerRegistry], bool]] = {
    "inv_items_conserved": inv_items_conserved,
    "inv_values_non_negative": inv_values_non_negative,
    "inv_counts_non_negative": inv_counts_non_negative,
    "inv_routes_in_range": inv_routes_in_range,
    "inv_routes_not_self": inv_routes_not_self,
}

ADVISORY_INVARIANTS: frozenset[str] = frozenset({"inv_routes_not_self"})


def check_all(registry: HandlerRegistry) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(registry)
    ]


def check_structural(registry: HandlerRegistry) -> list[str]:
    """Like `check_all()` but without the advisory checks."""
    return [inv_id for inv_id in check_all(registry) if inv_id not in ADVISORY_INVARIANTS]


def counts_monotonic(before: Sequence[int], after: Sequence[int]) -> bool:
    """True if no processed count decreased between two snapshots of one registry."""
    if len(before) != len(after):
        return False
    return all(b <= a for b, a in zip(before, after))
