"""
Systematics: property graph of the twelve systems (Monad … Dodecad)

Each system of order n is a complete graph K_n over n structural positions,
decorated by two independent semantic layers:

- order-level vocabulary: system name, coherence attribute,
  term designation, connective designation
- location-level vocabulary: terms, coordinates, colours, plus
  connectives (semantic edges) tagged with characters

Core principles:
- Anchored: every vertex-level entry references a Location, and every
  connective references two Locations, never a Term or a Character
- Self-describing: every entry and link carries an identifier derived
  purely from its structural fields
- Immutable: a graph is built once, sealed, and only read afterwards

Version History:
- 0.1.0: Initial property graph, builder and query service
"""

__version__ = "0.1.0"

MIN_ORDER = 1
MAX_ORDER = 12

# Frozen contracts
ANCHOR_PRINCIPLE = "Connectives MUST point at Locations, never at vocabulary"
IDENTITY_PRINCIPLE = "Identifiers MUST be derivable from structural fields alone"
IMMUTABILITY_PRINCIPLE = "A sealed graph MUST NOT be mutated"
