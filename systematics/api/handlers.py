"""
Systematics API Handlers

Resolver-facing adapters over SystematicsService.

Provided handlers:
- handle_system - full view of one order
- handle_order_summary - the four order-level entries
- handle_term_at - Term (and Character) at a Location
- handle_connectives_for_location / handle_connectives_for_term
- handle_coordinate_at / handle_colour_at
- handle_parse_identifier - decode an identifier

Every handler returns {"status": "success", "data": ...} or
{"status": "error", "code": ..., "error": ...}. InternalConsistencyError is
never converted: a sealed graph that breaks an invariant must fail loudly.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from systematics.errors import (
    BuildError,
    ConfigError,
    InvalidStructureError,
    MalformedIdentifierError,
    NotFoundError,
)
from systematics.graph.graph import Graph
from systematics.identifiers import (
    EntryRef,
    LinkRef,
    Ref,
    order_id,
    parse_entry_identifier,
    parse_identifier,
)
from systematics.kinds import EntryKind
from systematics.models.links import Link
from systematics.service import SystematicsService

logger = logging.getLogger(__name__)

# Checked in order; subclasses first
ERROR_CODES = (
    (MalformedIdentifierError, "MALFORMED_IDENTIFIER"),
    (InvalidStructureError, "INVALID_STRUCTURE"),
    (NotFoundError, "NOT_FOUND"),
    (ConfigError, "CONFIG_ERROR"),
    (BuildError, "BUILD_ERROR"),
)

_HANDLED = tuple(error for error, _ in ERROR_CODES)


def _error_code(error: Exception) -> str:
    return next(code for error_type, code in ERROR_CODES if isinstance(error, error_type))


def _success(data: Any) -> Dict[str, Any]:
    return {"status": "success", "data": data}


def _handle(operation: str, fn: Callable[[], Any]) -> Dict[str, Any]:
    try:
        return _success(fn())
    except _HANDLED as e:
        code = _error_code(e)
        logger.warning(f"{operation} failed ({code}): {e}")
        return {"status": "error", "code": code, "error": str(e)}


def _ref_to_dict(ref: Ref) -> Dict[str, Any]:
    if isinstance(ref, LinkRef):
        return {
            "id": ref.id,
            "kind": ref.kind.value,
            "order": ref.order,
            "endpoints": [endpoint.id for endpoint in ref.endpoints],
        }
    return {
        "id": ref.id,
        "kind": ref.kind.value,
        "order": ref.order,
        "position": ref.position,
        "language": ref.language.value if ref.language else None,
        "value": ref.value,
    }


def _links_to_dicts(graph: Graph, links: List[Link]) -> List[Dict[str, Any]]:
    result = []
    for link in links:
        data = link.to_dict()
        character = graph.get_character(link.tag) if link.tag else None
        data["value"] = character.value if character is not None else None
        result.append(data)
    return result


def _location_graph(service: SystematicsService, location_id: str, language: Optional[str]) -> Graph:
    ref: EntryRef = parse_entry_identifier(location_id, EntryKind.LOCATION)
    return service.graph(ref.order, language)


# ============================================
# Order-level handlers
# ============================================


def handle_system(
    service: SystematicsService,
    order: int,
    language: Optional[str] = None
) -> Dict[str, Any]:
    """
    Full view of one order

    Args:
        service: SystematicsService
        order: 1..12
        language: vocabulary name, "none" for structure only, None for default

    Returns:
        Dict: SystemView.to_dict() envelope
    """
    def run():
        order_id(order)
        return service.system_view(order, language).to_dict()

    return _handle("System view", run)


def handle_order_summary(service: SystematicsService, order: int) -> Dict[str, Any]:
    def run():
        order_id(order)
        return service.order_summary(order).to_dict()

    return _handle("Order summary", run)


# ============================================
# Location-level handlers
# ============================================


def handle_term_at(
    service: SystematicsService,
    location_id: str,
    language: Optional[str] = None
) -> Dict[str, Any]:
    """
    Term anchored at a Location plus its Character

    `data` is None for a structure-only system.
    """
    def run():
        graph = _location_graph(service, location_id, language)
        term = graph.term_at_location(location_id)
        if term is None:
            return None
        character = graph.term_character_at(location_id)
        return {
            "term": term.to_dict(),
            "character": character.to_dict() if character is not None else None,
        }

    return _handle("Term lookup", run)


def handle_coordinate_at(
    service: SystematicsService,
    location_id: str,
    language: Optional[str] = None
) -> Dict[str, Any]:
    def run():
        graph = _location_graph(service, location_id, language)
        return graph.coordinate_at(location_id).to_dict()

    return _handle("Coordinate lookup", run)


def handle_colour_at(
    service: SystematicsService,
    location_id: str,
    language: Optional[str] = None
) -> Dict[str, Any]:
    def run():
        graph = _location_graph(service, location_id, language)
        colour = graph.colour_at(location_id)
        return colour.to_dict() if colour is not None else None

    return _handle("Colour lookup", run)


# ============================================
# Link handlers
# ============================================


def handle_connectives_for_location(
    service: SystematicsService,
    location_id: str,
    language: Optional[str] = None
) -> Dict[str, Any]:
    """Connectives touching a Location, with their tag values"""
    def run():
        graph = _location_graph(service, location_id, language)
        return _links_to_dicts(graph, graph.connectives_for_location(location_id))

    return _handle("Connective lookup", run)


def handle_connectives_for_term(
    service: SystematicsService,
    term_id: str,
    language: Optional[str] = None
) -> Dict[str, Any]:
    def run():
        ref = parse_entry_identifier(term_id, EntryKind.TERM)
        graph = service.graph(ref.order, language)
        return _links_to_dicts(graph, graph.connectives_for_term(term_id))

    return _handle("Connective lookup", run)


# ============================================
# Identifiers
# ============================================


def handle_parse_identifier(identifier: str) -> Dict[str, Any]:
    """
    Decode an identifier without touching any graph

    Returns:
        Dict: structural fields plus the canonical identifier
    """
    return _handle("Identifier parse", lambda: _ref_to_dict(parse_identifier(identifier)))
