"""
Entry Models

The entry taxonomy is a closed, flat tagged union. Every variant is a frozen
dataclass carrying a `kind` tag; callers dispatch on the tag, never on a
class hierarchy.

Anchors (the objects everything maps TO):
- Order: the system level (1-12)
- Position: abstract "n-th place" (1-12)
- Location: the pullback of Order x Position, 1 <= position <= order

Order-level entries (reference an Order identifier):
- SystemName, CoherenceAttribute, TermDesignation, ConnectiveDesignation

Location-level entries (reference a Location identifier):
- Term, Coordinate, Colour

Semantic content (unanchored, shared):
- Character

Frozen Contract:
- identifiers are derived from structural fields in __post_init__
- entries reference anchors by identifier, never by raw (order, position)
"""

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Union

from systematics.errors import InvalidStructureError
from systematics.identifiers import (
    EntryRef,
    character_id,
    coherence_id,
    colour_id,
    connective_designation_id,
    coordinate_id,
    location_id,
    order_id,
    parse_entry_identifier,
    position_id,
    slugify,
    system_name_id,
    term_designation_id,
    term_id,
)
from systematics.kinds import EntryKind, EntryLevel
from systematics.language import Language


# =============================================================================
# Geometric value
# =============================================================================


@dataclass(frozen=True)
class Point3d:
    """3D point for geometric coordinates"""
    x: float
    y: float
    z: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


def _set_id(entry: Any, value: str) -> None:
    object.__setattr__(entry, "id", value)


def _anchor(reference: str, kind: EntryKind) -> EntryRef:
    """Decode an anchor reference, insisting on its kind"""
    return parse_entry_identifier(reference, kind)


# =============================================================================
# Anchors
# =============================================================================


@dataclass(frozen=True)
class Order:
    """Order: the system level (1-12)"""
    kind: ClassVar[EntryKind] = EntryKind.ORDER

    value: int
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, order_id(self.value))

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, order=self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "kind": self.kind.value, "value": self.value}


@dataclass(frozen=True)
class Position:
    """
    Position: abstract "n-th place" (1-12)

    Enables queries like "all position-1s across orders".
    """
    kind: ClassVar[EntryKind] = EntryKind.POSITION

    value: int
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, position_id(self.value))

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, position=self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "kind": self.kind.value, "value": self.value}


@dataclass(frozen=True)
class Location:
    """
    Location: the pullback of Order x Position

    Exists only where both constraints hold (1 <= position <= order).
    Construction validates; an out-of-range pair raises InvalidStructureError.

    Example:
        >>> Location.of(3, 1).id
        'loc_3_1'
    """
    kind: ClassVar[EntryKind] = EntryKind.LOCATION

    order: int
    position: int
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, location_id(self.order, self.position))

    @classmethod
    def of(cls, order: Union[int, "Order"], position: Union[int, "Position"]) -> "Location":
        """Validating factory from Order/Position entries or their values"""
        order_value = order.value if isinstance(order, Order) else order
        position_value = position.value if isinstance(position, Position) else position
        return cls(order_value, position_value)

    @classmethod
    def from_id(cls, identifier: str) -> "Location":
        ref = _anchor(identifier, EntryKind.LOCATION)
        return cls(ref.order, ref.position)

    @property
    def order_id(self) -> str:
        return order_id(self.order)

    @property
    def position_id(self) -> str:
        return position_id(self.position)

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, order=self.order, position=self.position)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "order": self.order_id,
            "position": self.position_id,
        }


# =============================================================================
# Order-level entries
# =============================================================================


def _order_entry_dict(entry: Any) -> Dict[str, Any]:
    return {"id": entry.id, "kind": entry.kind.value, "order": entry.order, "value": entry.value}


@dataclass(frozen=True)
class SystemName:
    """Human-readable name of a system order (order 3 -> "Triad")"""
    kind: ClassVar[EntryKind] = EntryKind.SYSTEM_NAME

    order: str
    value: str
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, system_name_id(self.order_value))

    @classmethod
    def for_order(cls, order: int, value: str) -> "SystemName":
        return cls(order_id(order), value)

    @property
    def order_value(self) -> int:
        return _anchor(self.order, EntryKind.ORDER).order

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, order=self.order_value)

    def to_dict(self) -> Dict[str, Any]:
        return _order_entry_dict(self)


@dataclass(frozen=True)
class CoherenceAttribute:
    """Coherence quality of a system order (order 3 -> "Dynamism")"""
    kind: ClassVar[EntryKind] = EntryKind.COHERENCE_ATTRIBUTE

    order: str
    value: str
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, coherence_id(self.order_value))

    @classmethod
    def for_order(cls, order: int, value: str) -> "CoherenceAttribute":
        return cls(order_id(order), value)

    @property
    def order_value(self) -> int:
        return _anchor(self.order, EntryKind.ORDER).order

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, order=self.order_value)

    def to_dict(self) -> Dict[str, Any]:
        return _order_entry_dict(self)


@dataclass(frozen=True)
class TermDesignation:
    """What the terms of an order are called (order 3 -> "Impulses")"""
    kind: ClassVar[EntryKind] = EntryKind.TERM_DESIGNATION

    order: str
    value: str
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, term_designation_id(self.order_value))

    @classmethod
    def for_order(cls, order: int, value: str) -> "TermDesignation":
        return cls(order_id(order), value)

    @property
    def order_value(self) -> int:
        return _anchor(self.order, EntryKind.ORDER).order

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, order=self.order_value)

    def to_dict(self) -> Dict[str, Any]:
        return _order_entry_dict(self)


@dataclass(frozen=True)
class ConnectiveDesignation:
    """What the connectives of an order are called (order 3 -> "Acts")"""
    kind: ClassVar[EntryKind] = EntryKind.CONNECTIVE_DESIGNATION

    order: str
    value: str
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, connective_designation_id(self.order_value))

    @classmethod
    def for_order(cls, order: int, value: str) -> "ConnectiveDesignation":
        return cls(order_id(order), value)

    @property
    def order_value(self) -> int:
        return _anchor(self.order, EntryKind.ORDER).order

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, order=self.order_value)

    def to_dict(self) -> Dict[str, Any]:
        return _order_entry_dict(self)


# =============================================================================
# Location-level entries
# =============================================================================


@dataclass(frozen=True)
class Term:
    """
    Vocabulary label decorating a Location

    Attributes:
        location: Location identifier (e.g. "loc_3_1")
        character: Character identifier shown at that location, if any
    """
    kind: ClassVar[EntryKind] = EntryKind.TERM

    location: str
    character: Optional[str] = None
    id: str = field(init=False)

    def __post_init__(self):
        loc = _anchor(self.location, EntryKind.LOCATION)
        if self.character is not None:
            _anchor(self.character, EntryKind.CHARACTER)
        _set_id(self, term_id(loc.order, loc.position))

    @property
    def ref(self) -> EntryRef:
        loc = _anchor(self.location, EntryKind.LOCATION)
        return EntryRef(self.kind, order=loc.order, position=loc.position)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "location": self.location,
            "character": self.character,
        }


@dataclass(frozen=True)
class Coordinate:
    """3D point placed at a Location"""
    kind: ClassVar[EntryKind] = EntryKind.COORDINATE

    location: str
    point: Point3d
    id: str = field(init=False)

    def __post_init__(self):
        loc = _anchor(self.location, EntryKind.LOCATION)
        _set_id(self, coordinate_id(loc.order, loc.position))

    @property
    def ref(self) -> EntryRef:
        loc = _anchor(self.location, EntryKind.LOCATION)
        return EntryRef(self.kind, order=loc.order, position=loc.position)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "location": self.location,
            "point": self.point.to_dict(),
        }


@dataclass(frozen=True)
class Colour:
    """
    Colour value at a Location

    Attributes:
        location: Location identifier
        language: representation (hex or name)
        value: e.g. "#FF0000" or "Red"
    """
    kind: ClassVar[EntryKind] = EntryKind.COLOUR

    location: str
    value: str
    language: Language = Language.HEX
    id: str = field(init=False)

    def __post_init__(self):
        loc = _anchor(self.location, EntryKind.LOCATION)
        _set_id(self, colour_id(loc.order, loc.position, self.language))

    @property
    def ref(self) -> EntryRef:
        loc = _anchor(self.location, EntryKind.LOCATION)
        return EntryRef(self.kind, order=loc.order, position=loc.position,
                        language=Language(self.language))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "location": self.location,
            "language": Language(self.language).value,
            "value": self.value,
        }


# =============================================================================
# Semantic content
# =============================================================================


@dataclass(frozen=True)
class Character:
    """
    Vocabulary-neutral unit of meaning: (language, value)

    The same Character can label a Term and tag a Connective.

    Example:
        >>> Character(Language.CANONICAL, "Will").id
        'char_canonical_will'
    """
    kind: ClassVar[EntryKind] = EntryKind.CHARACTER

    language: Language
    value: str
    id: str = field(init=False)

    def __post_init__(self):
        _set_id(self, character_id(self.language, self.value))

    @property
    def ref(self) -> EntryRef:
        return EntryRef(self.kind, language=Language(self.language), value=slugify(self.value))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "language": Language(self.language).value,
            "value": self.value,
        }


# =============================================================================
# Entry sum type
# =============================================================================

Entry = Union[
    Order,
    Position,
    Location,
    SystemName,
    CoherenceAttribute,
    TermDesignation,
    ConnectiveDesignation,
    Term,
    Coordinate,
    Colour,
    Character,
]

ENTRY_TYPES: Dict[EntryKind, type] = {
    EntryKind.ORDER: Order,
    EntryKind.POSITION: Position,
    EntryKind.LOCATION: Location,
    EntryKind.SYSTEM_NAME: SystemName,
    EntryKind.COHERENCE_ATTRIBUTE: CoherenceAttribute,
    EntryKind.TERM_DESIGNATION: TermDesignation,
    EntryKind.CONNECTIVE_DESIGNATION: ConnectiveDesignation,
    EntryKind.TERM: Term,
    EntryKind.COORDINATE: Coordinate,
    EntryKind.COLOUR: Colour,
    EntryKind.CHARACTER: Character,
}


def entry_order(entry: Entry) -> Optional[int]:
    """
    Order value an entry belongs to

    Anchors report their own order, order-level entries the Order they
    reference, location-level entries their Location's order. Positions and
    Characters belong to no order.
    """
    level = entry.kind.level
    if entry.kind == EntryKind.ORDER:
        return entry.value
    if entry.kind == EntryKind.LOCATION:
        return entry.order
    if level == EntryLevel.ORDER:
        return entry.order_value
    if level == EntryLevel.LOCATION:
        return entry.ref.order
    return None


def entry_position(entry: Entry) -> Optional[int]:
    """Position value of an entry (anchors and location-level entries only)"""
    if entry.kind == EntryKind.POSITION:
        return entry.value
    if entry.kind == EntryKind.LOCATION:
        return entry.position
    if entry.kind.level == EntryLevel.LOCATION:
        return entry.ref.position
    return None


def entry_location(entry: Entry) -> Optional[str]:
    """Location identifier an entry sits at, if any"""
    if entry.kind == EntryKind.LOCATION:
        return entry.id
    if entry.kind.level == EntryLevel.LOCATION:
        return entry.location
    return None


def entry_to_json(entry: Entry) -> str:
    return json.dumps(entry.to_dict())


def validate_entry(entry: Any) -> Entry:
    """Check that an object is one of the union's variants"""
    kind = getattr(entry, "kind", None)
    if kind not in ENTRY_TYPES or not isinstance(entry, ENTRY_TYPES[kind]):
        raise InvalidStructureError(f"Not an entry: {type(entry).__name__}")
    return entry
