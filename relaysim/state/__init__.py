"""
Simulation state for relaysim
"""

from .registry import HandlerRegistry, create_registry, registry_from_dict

__all__ = [
    "HandlerRegistry",
    "create_registry",
    "registry_from_dict",
]
