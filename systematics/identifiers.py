"""
Identifier Codec

Every entry and link carries a structured string identifier derived purely
from its structural fields. This module formats and parses them.

Grammar:
    order_{n}                          Order
    position_{n}                       Position
    loc_{o}_{p}                        Location
    system_{n}                         SystemName
    coherence_{n}                      CoherenceAttribute
    term_des_{n}                       TermDesignation
    conn_des_{n}                       ConnectiveDesignation
    term_{o}_{p}                       Term
    coord_{o}_{p}                      Coordinate
    colour_{o}_{p}_{representation}    Colour
    char_{language}_{value}            Character
    conn_loc_{o}_{p}_loc_{o}_{p}       Connective
    line_coord_{o}_{p}_coord_{o}_{p}   Line

Contracts:
- format_identifier(parse_identifier(s)) == s for every canonical identifier
- numbers are decimal, unsigned, without leading zeros
- link endpoints are emitted in structural order (ascending position), so an
  unordered pair always yields one identifier; parse accepts either order
  and returns the normalised reference

Errors:
- MalformedIdentifierError: unknown prefix, non-numeric or ill-shaped fields
- InvalidStructureError: numeric fields outside the Location invariant
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from systematics import MAX_ORDER, MIN_ORDER
from systematics.errors import InvalidStructureError, MalformedIdentifierError
from systematics.kinds import EntryKind, LinkKind
from systematics.language import Language


# ============================================
# References (decoded identifiers)
# ============================================


@dataclass(frozen=True)
class EntryRef:
    """
    Structural fields of an entry identifier

    Only the fields meaningful for the kind are set:
    - ORDER/SYSTEM_NAME/...: order
    - POSITION: position
    - LOCATION/TERM/COORDINATE: order, position
    - COLOUR: order, position, language (representation)
    - CHARACTER: language, value (slug)
    """
    kind: EntryKind
    order: Optional[int] = None
    position: Optional[int] = None
    language: Optional[Language] = None
    value: Optional[str] = None

    @property
    def id(self) -> str:
        return format_identifier(self)

    @property
    def location(self) -> Optional["EntryRef"]:
        """The Location this reference sits at (None for non-located kinds)"""
        if self.order is None or self.position is None:
            return None
        return EntryRef(EntryKind.LOCATION, order=self.order, position=self.position)

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class LinkRef:
    """Structural fields of a link identifier (endpoints in canonical order)"""
    kind: LinkKind
    endpoints: Tuple[EntryRef, EntryRef]

    @property
    def id(self) -> str:
        return format_identifier(self)

    @property
    def order(self) -> int:
        return self.endpoints[0].order

    def __str__(self) -> str:
        return self.id


Ref = Union[EntryRef, LinkRef]


# ============================================
# Field helpers
# ============================================

# "0" is accepted here so that it fails as a range error, not a shape error
_NUM = r"(0|[1-9][0-9]*)"
_SLUG = r"([a-z0-9]+(?:_[a-z0-9]+)*)"


def slugify(value: str) -> str:
    """
    Turn a character value into its identifier-safe form

    Example:
        >>> slugify("Higher Potential")
        'higher_potential'
    """
    if any(ch.isalnum() and not ch.isascii() for ch in value):
        raise MalformedIdentifierError(
            f"Character value {value!r} has non-ASCII letters or digits"
        )
    slug = re.sub(r"[^a-z0-9]+", "_", value.lower()).strip("_")
    if not slug:
        raise MalformedIdentifierError(
            f"Character value {value!r} has no identifier-safe characters"
        )
    return slug


def _check_order(order: int, identifier: str = None) -> int:
    if not MIN_ORDER <= order <= MAX_ORDER:
        raise InvalidStructureError(
            f"Order must be {MIN_ORDER}-{MAX_ORDER}, got {order}",
            identifier=identifier,
        )
    return order


def _check_position(position: int, order: Optional[int] = None, identifier: str = None) -> int:
    upper = MAX_ORDER if order is None else order
    if not 1 <= position <= upper:
        raise InvalidStructureError(
            f"Position must be 1-{upper}, got {position}",
            identifier=identifier,
        )
    return position


def _check_location(order: int, position: int, identifier: str = None) -> None:
    _check_order(order, identifier)
    _check_position(position, order, identifier)


def _vocabulary(language: Union[Language, str], identifier: str = None) -> Language:
    try:
        lang = Language(language)
    except ValueError:
        raise MalformedIdentifierError(f"Unknown language: {language}", identifier=identifier)
    if not lang.is_vocabulary:
        raise MalformedIdentifierError(
            f"Characters need a vocabulary language, got {lang.value}", identifier=identifier
        )
    return lang


def _representation(language: Union[Language, str], identifier: str = None) -> Language:
    try:
        lang = Language(language)
    except ValueError:
        raise MalformedIdentifierError(f"Unknown representation: {language}", identifier=identifier)
    if not lang.is_representation:
        raise MalformedIdentifierError(
            f"Colours need a representation language, got {lang.value}", identifier=identifier
        )
    return lang


# ============================================
# Builders (structural fields -> identifier)
# ============================================


def order_id(order: int) -> str:
    return f"order_{_check_order(order)}"


def position_id(position: int) -> str:
    return f"position_{_check_position(position)}"


def location_id(order: int, position: int) -> str:
    _check_location(order, position)
    return f"loc_{order}_{position}"


def system_name_id(order: int) -> str:
    return f"system_{_check_order(order)}"


def coherence_id(order: int) -> str:
    return f"coherence_{_check_order(order)}"


def term_designation_id(order: int) -> str:
    return f"term_des_{_check_order(order)}"


def connective_designation_id(order: int) -> str:
    return f"conn_des_{_check_order(order)}"


def term_id(order: int, position: int) -> str:
    _check_location(order, position)
    return f"term_{order}_{position}"


def coordinate_id(order: int, position: int) -> str:
    _check_location(order, position)
    return f"coord_{order}_{position}"


def colour_id(order: int, position: int, language: Union[Language, str] = Language.HEX) -> str:
    _check_location(order, position)
    return f"colour_{order}_{position}_{_representation(language).value}"


def character_id(language: Union[Language, str], value: str) -> str:
    return f"char_{_vocabulary(language).value}_{slugify(value)}"


def _pair(kind: LinkKind, a: EntryRef, b: EntryRef, identifier: str = None) -> Tuple[EntryRef, EntryRef]:
    """Validate two endpoints and return them in canonical order"""
    if a.order != b.order:
        raise InvalidStructureError(
            f"{kind.value.capitalize()} endpoints must share an order",
            identifier=identifier,
            base=a.id,
            target=b.id,
        )
    if a.position == b.position:
        raise InvalidStructureError(
            f"{kind.value.capitalize()} cannot be a self-loop", identifier=identifier, endpoint=a.id
        )
    return (a, b) if a.position < b.position else (b, a)


def connective_id(base: str, target: str) -> str:
    """Connective identifier for two Location identifiers (either order)"""
    a = _expect(parse_identifier(base), EntryKind.LOCATION, base)
    b = _expect(parse_identifier(target), EntryKind.LOCATION, target)
    return format_identifier(LinkRef(LinkKind.CONNECTIVE, _pair(LinkKind.CONNECTIVE, a, b)))


def line_id(base: str, target: str) -> str:
    """Line identifier for two Coordinate identifiers (either order)"""
    a = _expect(parse_identifier(base), EntryKind.COORDINATE, base)
    b = _expect(parse_identifier(target), EntryKind.COORDINATE, target)
    return format_identifier(LinkRef(LinkKind.LINE, _pair(LinkKind.LINE, a, b)))


def _expect(ref: Ref, kind: EntryKind, identifier: str) -> EntryRef:
    if not isinstance(ref, EntryRef) or ref.kind != kind:
        raise InvalidStructureError(f"Expected a {kind.value} identifier", identifier=identifier)
    return ref


# ============================================
# Format
# ============================================

_ENTRY_FORMATS: Dict[EntryKind, Callable[[EntryRef], str]] = {
    EntryKind.ORDER: lambda r: f"order_{r.order}",
    EntryKind.POSITION: lambda r: f"position_{r.position}",
    EntryKind.LOCATION: lambda r: f"loc_{r.order}_{r.position}",
    EntryKind.SYSTEM_NAME: lambda r: f"system_{r.order}",
    EntryKind.COHERENCE_ATTRIBUTE: lambda r: f"coherence_{r.order}",
    EntryKind.TERM_DESIGNATION: lambda r: f"term_des_{r.order}",
    EntryKind.CONNECTIVE_DESIGNATION: lambda r: f"conn_des_{r.order}",
    EntryKind.TERM: lambda r: f"term_{r.order}_{r.position}",
    EntryKind.COORDINATE: lambda r: f"coord_{r.order}_{r.position}",
    EntryKind.COLOUR: lambda r: f"colour_{r.order}_{r.position}_{Language(r.language).value}",
    EntryKind.CHARACTER: lambda r: f"char_{Language(r.language).value}_{r.value}",
}

_LINK_PREFIX: Dict[LinkKind, str] = {
    LinkKind.CONNECTIVE: "conn",
    LinkKind.LINE: "line",
}


def format_identifier(obj: Any) -> str:
    """
    Format an identifier from structural fields

    Args:
        obj: EntryRef, LinkRef, or any entry/link exposing `.ref`

    Returns:
        Canonical identifier string
    """
    ref = obj if isinstance(obj, (EntryRef, LinkRef)) else obj.ref
    if isinstance(ref, LinkRef):
        first, second = sorted(ref.endpoints, key=lambda e: (e.order, e.position))
        return f"{_LINK_PREFIX[ref.kind]}_{_ENTRY_FORMATS[first.kind](first)}_{_ENTRY_FORMATS[second.kind](second)}"
    return _ENTRY_FORMATS[ref.kind](ref)


# ============================================
# Parse
# ============================================

_ENTRY_PATTERNS = [
    (EntryKind.ORDER, re.compile(rf"^order_{_NUM}$")),
    (EntryKind.POSITION, re.compile(rf"^position_{_NUM}$")),
    (EntryKind.LOCATION, re.compile(rf"^loc_{_NUM}_{_NUM}$")),
    (EntryKind.SYSTEM_NAME, re.compile(rf"^system_{_NUM}$")),
    (EntryKind.COHERENCE_ATTRIBUTE, re.compile(rf"^coherence_{_NUM}$")),
    (EntryKind.TERM_DESIGNATION, re.compile(rf"^term_des_{_NUM}$")),
    (EntryKind.CONNECTIVE_DESIGNATION, re.compile(rf"^conn_des_{_NUM}$")),
    (EntryKind.TERM, re.compile(rf"^term_{_NUM}_{_NUM}$")),
    (EntryKind.COORDINATE, re.compile(rf"^coord_{_NUM}_{_NUM}$")),
    (EntryKind.COLOUR, re.compile(rf"^colour_{_NUM}_{_NUM}_([a-z]+)$")),
    (EntryKind.CHARACTER, re.compile(rf"^char_([a-z]+)_{_SLUG}$")),
]

_LINK_PATTERNS = [
    (LinkKind.CONNECTIVE, EntryKind.LOCATION, re.compile(rf"^conn_(loc_{_NUM}_{_NUM})_(loc_{_NUM}_{_NUM})$")),
    (LinkKind.LINE, EntryKind.COORDINATE, re.compile(rf"^line_(coord_{_NUM}_{_NUM})_(coord_{_NUM}_{_NUM})$")),
]

_ORDER_ONLY = {
    EntryKind.ORDER,
    EntryKind.SYSTEM_NAME,
    EntryKind.COHERENCE_ATTRIBUTE,
    EntryKind.TERM_DESIGNATION,
    EntryKind.CONNECTIVE_DESIGNATION,
}

_LOCATED = {EntryKind.LOCATION, EntryKind.TERM, EntryKind.COORDINATE}


def _parse_entry(kind: EntryKind, groups: Tuple[str, ...], identifier: str) -> EntryRef:
    if kind in _ORDER_ONLY:
        order = _check_order(int(groups[0]), identifier)
        return EntryRef(kind, order=order)
    if kind == EntryKind.POSITION:
        position = _check_position(int(groups[0]), identifier=identifier)
        return EntryRef(kind, position=position)
    if kind in _LOCATED:
        order, position = int(groups[0]), int(groups[1])
        _check_location(order, position, identifier)
        return EntryRef(kind, order=order, position=position)
    if kind == EntryKind.COLOUR:
        order, position = int(groups[0]), int(groups[1])
        _check_location(order, position, identifier)
        return EntryRef(kind, order=order, position=position,
                        language=_representation(groups[2], identifier))
    if kind == EntryKind.CHARACTER:
        return EntryRef(kind, language=_vocabulary(groups[0], identifier), value=groups[1])
    raise MalformedIdentifierError(f"Unhandled entry kind: {kind.value}", identifier=identifier)


def parse_identifier(identifier: str) -> Ref:
    """
    Decode an identifier into its structural fields

    Args:
        identifier: Identifier string

    Returns:
        EntryRef or LinkRef (link endpoints normalised to canonical order)

    Raises:
        MalformedIdentifierError: unknown prefix or ill-shaped fields
        InvalidStructureError: fields violate order/position ranges

    Example:
        >>> parse_identifier("loc_3_1")
        EntryRef(kind=<EntryKind.LOCATION: 'location'>, order=3, position=1, ...)
    """
    if not isinstance(identifier, str):
        raise MalformedIdentifierError(f"Identifier must be a string, got {type(identifier).__name__}")

    for link_kind, endpoint_kind, pattern in _LINK_PATTERNS:
        match = pattern.match(identifier)
        if match:
            base = _parse_entry(endpoint_kind, match.group(2, 3), identifier)
            target = _parse_entry(endpoint_kind, match.group(5, 6), identifier)
            return LinkRef(link_kind, _pair(link_kind, base, target, identifier))

    for kind, pattern in _ENTRY_PATTERNS:
        match = pattern.match(identifier)
        if match:
            return _parse_entry(kind, match.groups(), identifier)

    raise MalformedIdentifierError("Unrecognised identifier", identifier=identifier)


def parse_entry_identifier(identifier: str, kind: Optional[EntryKind] = None) -> EntryRef:
    """Parse an identifier that must name an entry (optionally of one kind)"""
    ref = parse_identifier(identifier)
    if not isinstance(ref, EntryRef):
        raise InvalidStructureError("Expected an entry identifier, got a link", identifier=identifier)
    if kind is not None and ref.kind != kind:
        raise InvalidStructureError(
            f"Expected a {kind.value} identifier, got {ref.kind.value}", identifier=identifier
        )
    return ref


def parse_link_identifier(identifier: str, kind: Optional[LinkKind] = None) -> LinkRef:
    """Parse an identifier that must name a link (optionally of one kind)"""
    ref = parse_identifier(identifier)
    if not isinstance(ref, LinkRef):
        raise InvalidStructureError("Expected a link identifier, got an entry", identifier=identifier)
    if kind is not None and ref.kind != kind:
        raise InvalidStructureError(
            f"Expected a {kind.value} identifier, got {ref.kind.value}", identifier=identifier
        )
    return ref


def canonical_identifier(identifier: str) -> str:
    """Normalise an identifier (swaps link endpoints into canonical order)"""
    return format_identifier(parse_identifier(identifier))
