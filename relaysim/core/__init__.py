"""
Core simulation algorithms
"""

from .rounds import (
    HandlerSpec,
    SimulationResult,
    Transform,
    TransformKind,
    long_score,
    quick_score,
    run,
    run_round,
    score,
    simulate,
)

__all__ = [
    "HandlerSpec",
    "SimulationResult",
    "Transform",
    "TransformKind",
    "long_score",
    "quick_score",
    "run",
    "run_round",
    "score",
    "simulate",
]
