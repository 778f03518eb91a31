"""
Systematics Data Models

Entry kinds (one flat tagged union):
- Anchors: Order, Position, Location
- Order-level: SystemName, CoherenceAttribute, TermDesignation, ConnectiveDesignation
- Location-level: Term, Coordinate, Colour
- Semantic: Character

Link kinds:
- LINE: Coordinate -> Coordinate
- CONNECTIVE: Location -> Location (tag: Character)
"""

from systematics.kinds import EntryKind, EntryLevel, LinkKind
from systematics.language import Language
from .entries import (
    Character,
    CoherenceAttribute,
    Colour,
    ConnectiveDesignation,
    Coordinate,
    Entry,
    ENTRY_TYPES,
    Location,
    Order,
    Point3d,
    Position,
    SystemName,
    Term,
    TermDesignation,
    entry_location,
    entry_order,
    entry_position,
    validate_entry,
)
from .links import Link

__all__ = [
    "EntryKind",
    "EntryLevel",
    "LinkKind",
    "Language",
    "Entry",
    "ENTRY_TYPES",
    "Order",
    "Position",
    "Location",
    "SystemName",
    "CoherenceAttribute",
    "TermDesignation",
    "ConnectiveDesignation",
    "Term",
    "Coordinate",
    "Colour",
    "Character",
    "Point3d",
    "Link",
    "entry_order",
    "entry_position",
    "entry_location",
    "validate_entry",
]
