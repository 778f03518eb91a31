"""
Systematics Graph Module

Builds and queries the property graph of the twelve systems.

Core pieces:
1. Graph: query facade over EntryStore + LinkStore, building -> sealed
2. SystemBuilder: populates a Graph from registry + vocabulary and seals it
3. geometry: closed-form canonical coordinates
4. checks: invariant verification of sealed graphs

Contracts:
- All-or-nothing: a build either seals a complete graph or raises BuildError
- Immutability: a sealed graph refuses every write
- Determinism: same inputs, same graph
"""

from .builder import DEFAULT_PALETTE, SystemBuilder
from .checks import check_graph, check_identifiers, check_order
from .geometry import canonical_coordinates, canonical_point
from .graph import Graph, GraphState, OrderSummary

__all__ = [
    "DEFAULT_PALETTE",
    "SystemBuilder",
    "check_graph",
    "check_identifiers",
    "check_order",
    "Graph",
    "GraphState",
    "OrderSummary",
    "canonical_coordinates",
    "canonical_point",
]
