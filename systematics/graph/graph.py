"""
Graph

Single query facade over EntryStore + LinkStore. This is what an external
resolver layer calls.

Lifecycle (two states, one transition):

    BUILDING --seal()--> SEALED

- BUILDING: add_entry/add_link allowed, referential checks active,
  query facade refuses to answer
- SEALED: immutable, queryable, safe to share across threads

Queries are organised in three groups:
- Anchor queries: Order, Position, Location
- Systematic queries: content mapped onto anchors (terms, coordinates, ...)
- Link queries: connectives and lines
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from systematics.errors import (
    BuildError,
    DanglingReferenceError,
    DuplicateError,
    GraphStateError,
    InternalConsistencyError,
    NotFoundError,
)
from systematics.identifiers import (
    canonical_identifier,
    coherence_id,
    colour_id,
    connective_designation_id,
    location_id,
    order_id,
    parse_entry_identifier,
    position_id,
    system_name_id,
    term_designation_id,
)
from systematics.kinds import EntryKind, EntryLevel, LinkKind
from systematics.language import Language
from systematics.models.entries import (
    Character,
    Colour,
    Coordinate,
    Entry,
    Location,
    Order,
    Position,
    Term,
    entry_location,
)
from systematics.models.links import Link
from systematics.store import EntryStore, LinkStore

logger = logging.getLogger(__name__)


class GraphState(str, Enum):
    """Graph lifecycle state"""
    BUILDING = "building"
    SEALED = "sealed"


@dataclass(frozen=True)
class OrderSummary:
    """The four order-level entries of one order; absent ones are None"""
    order: int
    name: Optional[str]
    coherence: Optional[str]
    term_designation: Optional[str]
    connective_designation: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order,
            "name": self.name,
            "coherence": self.coherence,
            "term_designation": self.term_designation,
            "connective_designation": self.connective_designation,
        }


class Graph:
    """
    Property graph of one or more systems

    Attributes:
        entries: EntryStore holding every entry variant
        links: LinkStore holding lines and connectives

    Example:
        >>> graph = SystemBuilder(registry, vocabulary).build(3)
        >>> graph.order_summary(3).name
        'Triad'
        >>> len(graph.connectives_for_location("loc_3_1"))
        2
    """

    def __init__(self):
        self.entries = EntryStore()
        self.links = LinkStore(self.entries)
        self._state = GraphState.BUILDING
        # (location id, kind) -> entry id; one Term/Coordinate/Colour per Location
        self._slots: Mapping[Tuple[str, EntryKind], str] = {}

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    @property
    def state(self) -> GraphState:
        return self._state

    @property
    def is_sealed(self) -> bool:
        return self._state == GraphState.SEALED

    def _require_building(self, operation: str) -> None:
        if self._state != GraphState.BUILDING:
            raise GraphStateError(f"Cannot {operation}: graph is sealed", state=self._state.value)

    def _require_sealed(self) -> None:
        if self._state != GraphState.SEALED:
            raise GraphStateError("Graph is not sealed yet", state=self._state.value)

    def add_entry(self, entry: Entry) -> Entry:
        """
        Add an entry while building

        Raises:
            GraphStateError: graph already sealed
            DuplicateError: identifier taken, or Location slot already occupied
            DanglingReferenceError: referenced anchor/character does not exist
        """
        self._require_building("add entry")
        self._check_references(entry)
        self.entries.insert(entry)
        if entry.kind.level == EntryLevel.LOCATION:
            self._slots[(entry.location, entry.kind)] = entry.id
        return entry

    def add_link(self, link: Link) -> Link:
        """Add a link while building (see LinkStore.insert for checks)"""
        self._require_building("add link")
        self.links.insert(link)
        return link

    def ensure_character(self, character: Character) -> Character:
        """Add a Character unless an identical one is already present"""
        existing = self.entries.get(character.id)
        if existing is None:
            self.add_entry(character)
            return character
        if existing != character:
            raise DuplicateError(
                "Character identifier already used for a different value",
                identifier=character.id,
                existing=existing.value,
                new=character.value,
            )
        return existing

    def _check_references(self, entry: Entry) -> None:
        level = entry.kind.level
        if entry.kind == EntryKind.LOCATION:
            self._require_entry(entry.order_id, entry)
            self._require_entry(entry.position_id, entry)
        elif level == EntryLevel.ORDER:
            self._require_entry(entry.order, entry)
        elif level == EntryLevel.LOCATION:
            self._require_entry(entry.location, entry)
            slot = (entry.location, entry.kind)
            if slot in self._slots:
                raise DuplicateError(
                    f"Location already has a {entry.kind.value}",
                    identifier=entry.id,
                    existing=self._slots[slot],
                )
            if entry.kind == EntryKind.TERM and entry.character is not None:
                self._require_entry(entry.character, entry)

    def _require_entry(self, reference: str, entry: Entry) -> None:
        if reference not in self.entries:
            raise DanglingReferenceError(
                f"{entry.kind.value} references a missing entry",
                identifier=entry.id,
                reference=reference,
            )

    def seal(self) -> "Graph":
        """
        Verify structural invariants and freeze the graph

        Checks:
        1. every Order n has Locations at exactly positions 1..n
        2. every Location has exactly one Coordinate

        Raises:
            GraphStateError: already sealed
            BuildError: an invariant does not hold (graph stays unsealed)
        """
        self._require_building("seal")

        for order in self.entries.entries_of_kind(EntryKind.ORDER):
            positions = sorted(loc.position for loc in self._locations_of(order.value))
            if positions != list(range(1, order.value + 1)):
                raise BuildError(
                    "Locations do not cover positions 1..n",
                    order=order.value,
                    positions=positions,
                )

        for location in self.entries.entries_of_kind(EntryKind.LOCATION):
            if (location.id, EntryKind.COORDINATE) not in self._slots:
                raise BuildError(
                    "Location has no Coordinate", order=location.order, location=location.id
                )

        self.entries.freeze()
        self.links.freeze()
        self._slots = MappingProxyType(dict(self._slots))
        self._state = GraphState.SEALED
        logger.info(
            "Graph sealed: %d entries, %d links, orders=%s",
            len(self.entries),
            len(self.links),
            self.entries.orders(),
        )
        return self

    # ==========================================================================
    # Lookup
    # ==========================================================================

    def get_entry(self, entry_id: str) -> Optional[Entry]:
        """Entry by identifier, None if absent (decode errors propagate)"""
        self._require_sealed()
        parse_entry_identifier(entry_id)
        return self.entries.get(entry_id)

    def get_link(self, link_id: str) -> Optional[Link]:
        """Link by identifier; either endpoint order is accepted"""
        self._require_sealed()
        return self.links.get(canonical_identifier(link_id))

    def require_entry(self, entry_id: str, kind: Optional[EntryKind] = None) -> Entry:
        """
        Entry by identifier, failing loudly

        Raises:
            MalformedIdentifierError / InvalidStructureError: bad identifier
            NotFoundError: well-formed but absent
        """
        self._require_sealed()
        parse_entry_identifier(entry_id, kind)
        entry = self.entries.get(entry_id)
        if entry is None:
            raise NotFoundError("No such entry", identifier=entry_id)
        return entry

    def _location_entry(self, location_id: str) -> Location:
        return self.require_entry(location_id, EntryKind.LOCATION)

    def _slot(self, location: str, kind: EntryKind) -> Optional[Entry]:
        entry_id = self._slots.get((location, kind))
        return self.entries.get(entry_id) if entry_id else None

    # ==========================================================================
    # Anchor Queries
    # ==========================================================================

    def order(self, value: int) -> Optional[Order]:
        self._require_sealed()
        return self.entries.get(order_id(value))

    def orders(self) -> List[Order]:
        self._require_sealed()
        return self.entries.entries_of_kind(EntryKind.ORDER)

    def orders_present(self) -> List[int]:
        return [order.value for order in self.orders()]

    def position(self, value: int) -> Optional[Position]:
        self._require_sealed()
        return self.entries.get(position_id(value))

    def positions(self) -> List[Position]:
        self._require_sealed()
        return self.entries.entries_of_kind(EntryKind.POSITION)

    def location(self, order: int, position: int) -> Optional[Location]:
        self._require_sealed()
        return self.entries.get(location_id(order, position))

    def _locations_of(self, order: int) -> List[Location]:
        return [
            e for e in self.entries.entries_of_order(order) if e.kind == EntryKind.LOCATION
        ]

    def locations_for_order(self, order: int) -> List[Location]:
        self._require_sealed()
        return self._locations_of(order)

    def locations_for_position(self, position: int) -> List[Location]:
        """Locations at one position across all orders"""
        self._require_sealed()
        return [
            loc for loc in self.entries.entries_of_kind(EntryKind.LOCATION)
            if loc.position == position
        ]

    # ==========================================================================
    # Systematic Queries - order level
    # ==========================================================================

    def system(self, order: int) -> List[Entry]:
        """Everything mapped to an order (anchor, order- and location-level entries)"""
        self._require_sealed()
        return self.entries.entries_of_order(order)

    def order_summary(self, order: int) -> OrderSummary:
        """
        Assemble the four order-level entries

        Raises:
            InvalidStructureError: order outside 1..12
            NotFoundError: order not built into this graph
        """
        self._require_sealed()
        if order_id(order) not in self.entries:
            raise NotFoundError("Order not present in graph", identifier=order_id(order))

        def value_of(entry_id: str) -> Optional[str]:
            entry = self.entries.get(entry_id)
            return entry.value if entry is not None else None

        return OrderSummary(
            order=order,
            name=value_of(system_name_id(order)),
            coherence=value_of(coherence_id(order)),
            term_designation=value_of(term_designation_id(order)),
            connective_designation=value_of(connective_designation_id(order)),
        )

    # ==========================================================================
    # Systematic Queries - location level
    # ==========================================================================

    def term_at_location(self, location_id: str) -> Optional[Term]:
        """Term anchored at a Location, None if undecorated"""
        location = self._location_entry(location_id)
        return self._slot(location.id, EntryKind.TERM)

    def term_character_at(self, location_id: str) -> Optional[Character]:
        """
        Character shown at a Location

        Fails soft: a structure-only system (no Term, or a Term without a
        Character) yields None.
        """
        term = self.term_at_location(location_id)
        if term is None or term.character is None:
            return None
        return self.entries.get(term.character)

    def coordinate_at(self, location_id: str) -> Coordinate:
        """
        Coordinate of a Location (total for every Location in a sealed graph)

        Raises:
            NotFoundError: Location absent
            InternalConsistencyError: Location present without a Coordinate
        """
        location = self._location_entry(location_id)
        coordinate = self._slot(location.id, EntryKind.COORDINATE)
        if coordinate is None:
            raise InternalConsistencyError(
                "Sealed graph has a Location without a Coordinate", identifier=location.id
            )
        return coordinate

    def colour_at(self, location_id: str) -> Optional[Colour]:
        location = self._location_entry(location_id)
        return self._slot(location.id, EntryKind.COLOUR)

    def terms(self, order: int, language: Optional[Language] = None) -> List[Term]:
        """Terms of an order, optionally only those whose Character is in `language`"""
        self._require_sealed()
        terms = [e for e in self.entries.entries_of_order(order) if e.kind == EntryKind.TERM]
        if language is None:
            return terms
        language = Language(language)
        result = []
        for term in terms:
            character = self.entries.get(term.character) if term.character else None
            if character is not None and Language(character.language) == language:
                result.append(term)
        return result

    def term(self, order: int, position: int) -> Optional[Term]:
        return self.term_at_location(location_id(order, position))

    def coordinates(self, order: int) -> List[Coordinate]:
        self._require_sealed()
        return [e for e in self.entries.entries_of_order(order) if e.kind == EntryKind.COORDINATE]

    def colours(self, order: int) -> List[Colour]:
        self._require_sealed()
        return [e for e in self.entries.entries_of_order(order) if e.kind == EntryKind.COLOUR]

    def colour(self, order: int, position: int, language: Language = Language.HEX) -> Optional[Colour]:
        self._require_sealed()
        return self.entries.get(colour_id(order, position, language))

    # ==========================================================================
    # Character Queries
    # ==========================================================================

    def characters(self, language: Optional[Language] = None) -> List[Character]:
        self._require_sealed()
        chars = self.entries.entries_of_kind(EntryKind.CHARACTER)
        if language is None:
            return chars
        language = Language(language)
        return [c for c in chars if Language(c.language) == language]

    def get_character(self, character_id: str) -> Optional[Character]:
        self._require_sealed()
        parse_entry_identifier(character_id, EntryKind.CHARACTER)
        return self.entries.get(character_id)

    # ==========================================================================
    # Cross-Cutting Queries
    # ==========================================================================

    def slice(self, order: int, position: int) -> List[Entry]:
        """All entries at one Location (the fiber over (order, position))"""
        self._require_sealed()
        loc = location_id(order, position)
        return [
            e for e in self.entries.entries_of_order(order)
            if entry_location(e) == loc
        ]

    # ==========================================================================
    # Link Queries
    # ==========================================================================

    def connectives_for_location(self, location_id: str) -> List[Link]:
        """Connectives with the Location as base or target (insertion order)"""
        location = self._location_entry(location_id)
        return self.links.connectives_touching(location.id)

    def connectives_for_term(self, term_id: str) -> List[Link]:
        """
        Connectives of the Location a Term is anchored at

        Raises:
            NotFoundError: no such Term
        """
        term = self.require_entry(term_id, EntryKind.TERM)
        return self.connectives_for_location(term.location)

    def connectives(
        self,
        order: int,
        base_position: Optional[int] = None,
        target_position: Optional[int] = None,
    ) -> List[Link]:
        """Connectives of an order, optionally filtered by authored direction"""
        self._require_sealed()
        result = []
        for link in self.links.links_of_kind(LinkKind.CONNECTIVE):
            base = parse_entry_identifier(link.base, EntryKind.LOCATION)
            target = parse_entry_identifier(link.target, EntryKind.LOCATION)
            if base.order != order:
                continue
            if base_position is not None and base.position != base_position:
                continue
            if target_position is not None and target.position != target_position:
                continue
            result.append(link)
        return result

    def lines(self, order: int) -> List[Link]:
        self._require_sealed()
        return [link for link in self.links.links_of_kind(LinkKind.LINE) if link.order == order]

    def lines_touching(self, coord_id: str) -> List[Link]:
        coordinate = self.require_entry(coord_id, EntryKind.COORDINATE)
        return self.links.lines_touching(coordinate.id)

    # ==========================================================================
    # Statistics
    # ==========================================================================

    def stats(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "entry_count": len(self.entries),
            "link_count": len(self.links),
            "entry_kinds": self.entries.count_by_kind(),
            "link_kinds": self.links.count_by_kind(),
            "orders": self.entries.orders(),
        }
