"""
Entry Store

Flat, tagged collection of every entry variant, keyed by identifier.

Contracts:
- Insertion of an existing identifier raises DuplicateError, never overwrites
- Iteration follows insertion order (deterministic given deterministic builds)
- Per-kind and per-order indexes are maintained on insert
"""

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from systematics.errors import DuplicateError, GraphStateError
from systematics.kinds import EntryKind
from systematics.models.entries import Entry, entry_order, validate_entry

logger = logging.getLogger(__name__)


class EntryStore:
    """
    Identifier -> Entry mapping

    Example:
        >>> store = EntryStore()
        >>> store.insert(Order(3))
        >>> store.get("order_3").value
        3
    """

    def __init__(self):
        self._entries: Mapping[str, Entry] = {}
        self._by_kind: Mapping[EntryKind, List[str]] = defaultdict(list)
        self._by_order: Mapping[int, List[str]] = defaultdict(list)
        self._frozen = False

    def insert(self, entry: Entry) -> None:
        """
        Insert a new entry

        Raises:
            DuplicateError: if the identifier is already present
        """
        if self._frozen:
            raise GraphStateError("Entry store is frozen", identifier=getattr(entry, "id", None))
        validate_entry(entry)
        if entry.id in self._entries:
            raise DuplicateError(
                f"Duplicate {entry.kind.value} entry", identifier=entry.id
            )
        self._entries[entry.id] = entry
        self._by_kind[entry.kind].append(entry.id)
        order = entry_order(entry)
        if order is not None:
            self._by_order[order].append(entry.id)

    def freeze(self) -> None:
        """Replace the indexes with read-only views; later inserts fail"""
        self._entries = MappingProxyType(dict(self._entries))
        self._by_kind = MappingProxyType({k: tuple(v) for k, v in self._by_kind.items()})
        self._by_order = MappingProxyType({k: tuple(v) for k, v in self._by_order.items()})
        self._frozen = True
        logger.debug("Froze entry store (%d entries)", len(self._entries))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, entry_id: str) -> Optional[Entry]:
        return self._entries.get(entry_id)

    def entries_of_kind(self, kind: EntryKind) -> List[Entry]:
        return [self._entries[i] for i in self._by_kind.get(EntryKind(kind), [])]

    def entries_of_order(self, order: int) -> List[Entry]:
        """Order anchor, order-level and location-level entries of one order"""
        return [self._entries[i] for i in self._by_order.get(order, [])]

    def orders(self) -> List[int]:
        return sorted(self._by_order)

    def ids(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries.values()))

    def count_by_kind(self) -> Dict[str, int]:
        return {kind.value: len(ids) for kind, ids in self._by_kind.items() if ids}
