"""
Link Models

Links are explicit relationships between entries.

Link kinds:
1. LINE - Coordinate -> Coordinate (geometric edge, never tagged)
2. CONNECTIVE - Location -> Location (semantic edge, optional Character tag)

Connectives are simplex-anchored: their endpoints are Locations, so the
structure survives vocabulary changes. The human-readable label is a separate
join through the tag, never part of the edge's identity.

`base`/`target` keep the authored direction; the identifier is normalised so
that one unordered pair always maps to one identifier.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from systematics.errors import InvalidStructureError
from systematics.identifiers import (
    LinkRef,
    connective_id,
    line_id,
    parse_entry_identifier,
)
from systematics.kinds import LINK_ENDPOINT_KINDS, EntryKind, LinkKind


@dataclass(frozen=True)
class Link:
    """
    Relationship between two entries

    Attributes:
        kind: LINE or CONNECTIVE
        base: source entry identifier
        target: target entry identifier
        tag: Character identifier labelling a connective (None for lines)
        id: derived from the unordered endpoint pair
    """
    kind: LinkKind
    base: str
    target: str
    tag: Optional[str] = None
    id: str = field(init=False)

    def __post_init__(self):
        kind = LinkKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind == LinkKind.LINE:
            if self.tag is not None:
                raise InvalidStructureError("Lines carry no tag", base=self.base, target=self.target)
            object.__setattr__(self, "id", line_id(self.base, self.target))
        else:
            if self.tag is not None:
                parse_entry_identifier(self.tag, EntryKind.CHARACTER)
            object.__setattr__(self, "id", connective_id(self.base, self.target))

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def line(cls, base: str, target: str) -> "Link":
        """Line between two Coordinate identifiers"""
        return cls(LinkKind.LINE, base, target)

    @classmethod
    def connective(cls, base: str, target: str, tag: Optional[str] = None) -> "Link":
        """Connective between two Location identifiers, optionally tagged"""
        return cls(LinkKind.CONNECTIVE, base, target, tag)

    def with_tag(self, tag: Optional[str]) -> "Link":
        return Link(self.kind, self.base, self.target, tag)

    # =========================================================================
    # Helpers
    # =========================================================================

    @property
    def is_connective(self) -> bool:
        return self.kind == LinkKind.CONNECTIVE

    @property
    def endpoints(self) -> Tuple[str, str]:
        return (self.base, self.target)

    @property
    def ref(self) -> LinkRef:
        endpoint_kind = LINK_ENDPOINT_KINDS[self.kind]
        base = parse_entry_identifier(self.base, endpoint_kind)
        target = parse_entry_identifier(self.target, endpoint_kind)
        first, second = sorted((base, target), key=lambda r: r.position)
        return LinkRef(self.kind, (first, second))

    @property
    def order(self) -> int:
        return self.ref.order

    def touches(self, entry_id: str) -> bool:
        return entry_id == self.base or entry_id == self.target

    def other_end(self, entry_id: str) -> str:
        """The endpoint opposite `entry_id`"""
        if entry_id == self.base:
            return self.target
        if entry_id == self.target:
            return self.base
        raise InvalidStructureError("Entry is not an endpoint of this link", identifier=self.id, entry=entry_id)

    def character_id(self) -> Optional[str]:
        """Character identifier labelling this link (connectives only)"""
        return self.tag if self.is_connective else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "base": self.base,
            "target": self.target,
            "tag": self.tag,
        }
