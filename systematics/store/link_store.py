"""
Link Store

Identifier -> Link mapping with eager referential integrity.

Contracts:
- Duplicate identifiers raise DuplicateError (one link per unordered pair)
- Both endpoints must already exist in the associated EntryStore and be of
  the kind the link requires (Line: Coordinates, Connective: Locations)
- A connective tag must name an existing Character
- Adjacency is indexed on insert, so touching-queries are O(degree)
"""

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from systematics.errors import DanglingReferenceError, DuplicateError, GraphStateError
from systematics.kinds import LINK_ENDPOINT_KINDS, EntryKind, LinkKind
from systematics.models.links import Link

from .entry_store import EntryStore

logger = logging.getLogger(__name__)


class LinkStore:
    """
    Typed relationships between entries of one EntryStore

    Attributes:
        entries: the EntryStore endpoints are checked against
    """

    def __init__(self, entries: EntryStore):
        self.entries = entries
        self._links: Mapping[str, Link] = {}
        self._adjacency: Mapping[str, List[str]] = defaultdict(list)
        self._frozen = False

    def insert(self, link: Link) -> None:
        """
        Insert a new link

        Raises:
            DuplicateError: identifier already present
            DanglingReferenceError: endpoint or tag missing, or of the wrong kind
        """
        if self._frozen:
            raise GraphStateError("Link store is frozen", identifier=link.id)
        if link.id in self._links:
            raise DuplicateError(f"Duplicate {link.kind.value} link", identifier=link.id)

        required = LINK_ENDPOINT_KINDS[link.kind]
        for endpoint in link.endpoints:
            self._require(endpoint, required, link)
        if link.tag is not None:
            self._require(link.tag, EntryKind.CHARACTER, link)

        self._links[link.id] = link
        for endpoint in link.endpoints:
            self._adjacency[endpoint].append(link.id)

    def _require(self, entry_id: str, kind: EntryKind, link: Link) -> None:
        entry = self.entries.get(entry_id)
        if entry is None:
            raise DanglingReferenceError(
                f"{link.kind.value.capitalize()} references a missing entry",
                identifier=link.id,
                reference=entry_id,
            )
        if entry.kind != kind:
            raise DanglingReferenceError(
                f"{link.kind.value.capitalize()} expects a {kind.value}, got {entry.kind.value}",
                identifier=link.id,
                reference=entry_id,
            )

    def freeze(self) -> None:
        """Replace the indexes with read-only views; later inserts fail"""
        self._links = MappingProxyType(dict(self._links))
        self._adjacency = MappingProxyType({k: tuple(v) for k, v in self._adjacency.items()})
        self._frozen = True
        logger.debug("Froze link store (%d links)", len(self._links))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, link_id: str) -> Optional[Link]:
        return self._links.get(link_id)

    def links_of_kind(self, kind: LinkKind) -> List[Link]:
        kind = LinkKind(kind)
        return [link for link in self._links.values() if link.kind == kind]

    def touching(self, entry_id: str, kind: Optional[LinkKind] = None) -> List[Link]:
        links = [self._links[i] for i in self._adjacency.get(entry_id, [])]
        if kind is not None:
            links = [link for link in links if link.kind == kind]
        return links

    def lines_touching(self, coord_id: str) -> List[Link]:
        return self.touching(coord_id, LinkKind.LINE)

    def connectives_touching(self, location_id: str) -> List[Link]:
        return self.touching(location_id, LinkKind.CONNECTIVE)

    def ids(self) -> List[str]:
        return list(self._links)

    def __contains__(self, link_id: object) -> bool:
        return link_id in self._links

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[Link]:
        return iter(list(self._links.values()))

    def count_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = defaultdict(int)
        for link in self._links.values():
            counts[link.kind.value] += 1
        return dict(counts)
