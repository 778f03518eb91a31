"""
System Builder

Populates a Graph with complete systems and seals it.

Per order n:
1. Order(n), Position(1..n), Location(n, p) for each p
2. Order-level entries from the registry row (null designations are skipped)
3. Canonical Coordinates, palette Colours, one Line per coordinate pair
4. With a vocabulary: one Term per Location, Characters inserted once
5. One Connective per unordered Location pair, tagged when the vocabulary
   names the pair
6. Seal

Contracts:
- All-or-nothing: any failure raises BuildError and no graph is returned
- Deterministic: the same inputs produce equal graphs, in the same order
"""

import logging
import time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from systematics import MAX_ORDER, MIN_ORDER
from systematics.data.loader import ConnectiveSpec, OrderRegistry, Vocabulary
from systematics.errors import BuildError, DecodeError, StoreError
from systematics.language import Language
from systematics.models.entries import (
    Character,
    CoherenceAttribute,
    Colour,
    ConnectiveDesignation,
    Coordinate,
    Location,
    Order,
    Position,
    SystemName,
    Term,
    TermDesignation,
)
from systematics.models.links import Link

from .geometry import canonical_coordinates
from .graph import Graph

logger = logging.getLogger(__name__)


# Position p takes DEFAULT_PALETTE[p - 1]
DEFAULT_PALETTE: Tuple[str, ...] = (
    "#FF0000",  # red
    "#0000FF",  # blue
    "#FFFF00",  # yellow
    "#099902",  # green
    "#9900FF",  # purple
    "#FFA500",  # orange
    "#00FFFF",  # cyan
    "#8B4513",  # brown
    "#FF00FF",  # magenta
    "#FFFFFF",  # white
    "#C0C0C0",  # silver
    "#FFD700",  # gold
)


class SystemBuilder:
    """
    Builds sealed graphs from a registry and an optional vocabulary

    Without a vocabulary the result is structure only: no Terms, no
    Characters, untagged Connectives.

    Example:
        >>> builder = SystemBuilder(load_registry(), load_vocabulary("canonical"))
        >>> graph = builder.build(3)
        >>> graph.order_summary(3).name
        'Triad'
    """

    def __init__(
        self,
        registry: OrderRegistry,
        vocabulary: Optional[Vocabulary] = None,
        palette: Sequence[str] = DEFAULT_PALETTE,
    ):
        self.registry = registry
        self.vocabulary = vocabulary
        self.palette = tuple(palette)

    @property
    def language(self) -> Optional[Language]:
        return self.vocabulary.language if self.vocabulary is not None else None

    def build(self, order: int) -> Graph:
        """Sealed graph holding one system"""
        return self.build_orders([order])

    def build_all(self) -> Graph:
        """Sealed graph holding all twelve systems"""
        return self.build_orders(range(MIN_ORDER, MAX_ORDER + 1))

    def build_orders(self, orders: Iterable[int]) -> Graph:
        """
        Sealed graph holding the given orders

        Raises:
            BuildError: missing registry row, bad order, inconsistent
                vocabulary or any store violation during construction
        """
        start_time = time.time()
        graph = Graph()
        orders = list(orders)

        for order in orders:
            try:
                self._populate(graph, order)
            except (StoreError, DecodeError) as e:
                raise BuildError(f"Construction failed: {e.message}", order=order) from e

        graph.seal()
        logger.info(
            "Built orders %s (language=%s): %d entries, %d links in %.1fms",
            orders,
            self.language.value if self.language else "none",
            len(graph.entries),
            len(graph.links),
            (time.time() - start_time) * 1000,
        )
        return graph

    # ==========================================================================
    # Steps
    # ==========================================================================

    def _populate(self, graph: Graph, order: int) -> None:
        if not isinstance(order, int) or not MIN_ORDER <= order <= MAX_ORDER:
            raise BuildError(f"No system is defined for order {order!r}", order=order)

        locations = self._add_anchors(graph, order)
        self._add_order_entries(graph, order)
        self._add_geometry(graph, order, locations)
        if self.vocabulary is not None:
            self._add_terms(graph, order, locations)
        self._add_connectives(graph, order, locations)
        logger.debug("Populated order %d", order)

    def _add_anchors(self, graph: Graph, order: int) -> List[Location]:
        graph.add_entry(Order(order))
        for position in range(1, order + 1):
            if graph.entries.get(Position(position).id) is None:
                graph.add_entry(Position(position))
        return [graph.add_entry(Location.of(order, position)) for position in range(1, order + 1)]

    def _add_order_entries(self, graph: Graph, order: int) -> None:
        row = self.registry.row(order)
        if row is None:
            raise BuildError("Order registry has no row for this order", order=order)

        graph.add_entry(SystemName.for_order(order, row.name))
        graph.add_entry(CoherenceAttribute.for_order(order, row.coherence))
        if row.term_designation is not None:
            graph.add_entry(TermDesignation.for_order(order, row.term_designation))
        if row.connective_designation is not None:
            graph.add_entry(ConnectiveDesignation.for_order(order, row.connective_designation))

    def _add_geometry(self, graph: Graph, order: int, locations: List[Location]) -> None:
        points = canonical_coordinates(order)
        if len(self.palette) < order:
            raise BuildError(
                "Palette has fewer colours than positions", order=order, palette=len(self.palette)
            )

        coordinates = []
        for location in locations:
            point = points.get(location.position)
            if point is None:
                raise BuildError("No coordinate for location", order=order, location=location.id)
            coordinates.append(graph.add_entry(Coordinate(location.id, point)))
            graph.add_entry(Colour(location.id, self.palette[location.position - 1]))

        for i, first in enumerate(coordinates):
            for second in coordinates[i + 1:]:
                graph.add_link(Link.line(first.id, second.id))

    def _add_terms(self, graph: Graph, order: int, locations: List[Location]) -> None:
        values = self.vocabulary.term_values(order)
        if values is None:
            raise BuildError(
                "Vocabulary has no terms for this order",
                order=order,
                language=self.language.value,
            )
        if len(values) != order:
            raise BuildError(
                f"Vocabulary lists {len(values)} terms, expected {order}",
                order=order,
                language=self.language.value,
            )

        for location, value in zip(locations, values):
            character = graph.ensure_character(Character(self.language, value))
            graph.add_entry(Term(location.id, character.id))

    def _add_connectives(self, graph: Graph, order: int, locations: List[Location]) -> None:
        specs = self._connective_specs(order)
        by_position = {location.position: location for location in locations}

        for i in range(1, order + 1):
            for j in range(i + 1, order + 1):
                spec = specs.get((i, j))
                if spec is None:
                    graph.add_link(Link.connective(by_position[i].id, by_position[j].id))
                    continue
                character = graph.ensure_character(Character(self.language, spec.character))
                graph.add_link(Link.connective(
                    by_position[spec.base].id,
                    by_position[spec.target].id,
                    character.id,
                ))

    def _connective_specs(self, order: int) -> Dict[Tuple[int, int], ConnectiveSpec]:
        """Vocabulary connectives keyed by unordered pair, checked for consistency"""
        if self.vocabulary is None:
            return {}

        specs: Dict[Tuple[int, int], ConnectiveSpec] = {}
        for spec in self.vocabulary.connective_specs(order):
            if spec.base > order or spec.target > order:
                raise BuildError(
                    "Connective position out of range",
                    order=order,
                    base=spec.base,
                    target=spec.target,
                )
            if spec.base == spec.target:
                raise BuildError("Connective cannot be a self-loop", order=order, position=spec.base)
            if spec.pair in specs:
                raise BuildError("Connective pair listed twice", order=order, pair=spec.pair)
            specs[spec.pair] = spec
        return specs
