"""
Systematics Store Module

In-memory storage for the property graph.

Contracts:
- Uniqueness: one entry/link per identifier, duplicates are errors
- Integrity: link endpoints and tags must reference existing entries
"""

from .entry_store import EntryStore
from .link_store import LinkStore

__all__ = [
    "EntryStore",
    "LinkStore",
]
