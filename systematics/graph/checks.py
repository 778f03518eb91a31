"""
Graph Checks

Invariant verification over a sealed graph, used by `systematics check`.
Each check returns a list of human-readable problems; empty means healthy.
"""

from math import comb
from typing import List

from systematics.errors import SystematicsError
from systematics.identifiers import canonical_identifier, format_identifier

from .graph import Graph


def check_order(graph: Graph, order: int) -> List[str]:
    """Counts, completeness and coordinate totality of one order"""
    problems = []
    pairs = comb(order, 2)

    locations = graph.locations_for_order(order)
    positions = sorted(location.position for location in locations)
    if positions != list(range(1, order + 1)):
        problems.append(f"order {order}: locations cover positions {positions}")

    for location in locations:
        try:
            graph.coordinate_at(location.id)
        except SystematicsError as e:
            problems.append(f"order {order}: {e}")

    connectives = graph.connectives(order)
    if len(connectives) != pairs:
        problems.append(f"order {order}: {len(connectives)} connectives, expected {pairs}")
    if len({link.id for link in connectives}) != len(connectives):
        problems.append(f"order {order}: duplicate connective identifiers")

    lines = graph.lines(order)
    if len(lines) != pairs:
        problems.append(f"order {order}: {len(lines)} lines, expected {pairs}")

    return problems


def check_identifiers(graph: Graph) -> List[str]:
    """Every identifier formats from its fields and parses back to itself"""
    problems = []
    for item in list(graph.entries) + list(graph.links):
        try:
            if format_identifier(item) != item.id or canonical_identifier(item.id) != item.id:
                problems.append(f"identifier does not round-trip: {item.id}")
        except SystematicsError as e:
            problems.append(f"identifier does not decode: {item.id} ({e})")
    return problems


def check_graph(graph: Graph) -> List[str]:
    problems = []
    for order in graph.orders_present():
        problems.extend(check_order(graph, order))
    problems.extend(check_identifiers(graph))
    return problems
