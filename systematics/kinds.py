"""
Entry and link kind tags

The entry union is closed: adding a kind means adding a member here,
a variant in entries.py, and an arm wherever kinds are dispatched.
"""

from enum import Enum
from typing import Dict


class EntryLevel(str, Enum):
    """Where an entry attaches in the structure"""
    ANCHOR = "anchor"        # Order, Position, Location
    ORDER = "order"          # attaches to one Order
    LOCATION = "location"    # attaches to one Location
    SEMANTIC = "semantic"    # free-standing vocabulary content


class EntryKind(str, Enum):
    """Entry kind tag"""
    # Anchors
    ORDER = "order"
    POSITION = "position"
    LOCATION = "location"

    # Order-level
    SYSTEM_NAME = "system_name"
    COHERENCE_ATTRIBUTE = "coherence_attribute"
    TERM_DESIGNATION = "term_designation"
    CONNECTIVE_DESIGNATION = "connective_designation"

    # Location-level
    TERM = "term"
    COORDINATE = "coordinate"
    COLOUR = "colour"

    # Semantic content
    CHARACTER = "character"

    @property
    def level(self) -> EntryLevel:
        return ENTRY_LEVELS[self]


class LinkKind(str, Enum):
    """Link kind tag"""
    LINE = "line"               # Coordinate -> Coordinate (geometric)
    CONNECTIVE = "connective"   # Location -> Location (semantic)


ENTRY_LEVELS: Dict[EntryKind, EntryLevel] = {
    EntryKind.ORDER: EntryLevel.ANCHOR,
    EntryKind.POSITION: EntryLevel.ANCHOR,
    EntryKind.LOCATION: EntryLevel.ANCHOR,
    EntryKind.SYSTEM_NAME: EntryLevel.ORDER,
    EntryKind.COHERENCE_ATTRIBUTE: EntryLevel.ORDER,
    EntryKind.TERM_DESIGNATION: EntryLevel.ORDER,
    EntryKind.CONNECTIVE_DESIGNATION: EntryLevel.ORDER,
    EntryKind.TERM: EntryLevel.LOCATION,
    EntryKind.COORDINATE: EntryLevel.LOCATION,
    EntryKind.COLOUR: EntryLevel.LOCATION,
    EntryKind.CHARACTER: EntryLevel.SEMANTIC,
}

# Endpoint kind required by each link kind
LINK_ENDPOINT_KINDS: Dict[LinkKind, EntryKind] = {
    LinkKind.LINE: EntryKind.COORDINATE,
    LinkKind.CONNECTIVE: EntryKind.LOCATION,
}
