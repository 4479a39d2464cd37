# literary_graphs/layout/__init__.py

"""
Layout subpackage for literary graphs.

Provides:
  - GraphEngine: interactive, host-driven force layout with drag support
  - ForceSimulation: the cooling simulation underneath it
  - the individual force models
"""

from __future__ import annotations

from .engine import GraphEngine, EngineDestroyedError
from .simulation import ForceSimulation
from .forces import (
    Force,
    LinkForce,
    ManyBodyForce,
    CenterForce,
    CollideForce,
    RadialForce,
    PositionForce,
)

__all__ = [
    "GraphEngine",
    "EngineDestroyedError",
    "ForceSimulation",
    "Force",
    "LinkForce",
    "ManyBodyForce",
    "CenterForce",
    "CollideForce",
    "RadialForce",
    "PositionForce",
]
