"""
System View

Serialisable snapshot of one order, joined through the graph so that
callers get character values next to identifiers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from systematics.graph.graph import Graph, OrderSummary
from systematics.language import Language
from systematics.models.links import Link


@dataclass
class SystemView:
    """One system as external callers see it"""
    order: int
    language: Optional[Language]
    summary: OrderSummary
    terms: List[Dict[str, Any]] = field(default_factory=list)
    coordinates: List[Dict[str, Any]] = field(default_factory=list)
    colours: List[Dict[str, Any]] = field(default_factory=list)
    connectives: List[Dict[str, Any]] = field(default_factory=list)
    lines: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def notation(self) -> str:
        """Complete-graph notation, e.g. K3 for the Triad"""
        return f"K{self.order}"

    @property
    def name(self) -> Optional[str]:
        return self.summary.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order,
            "notation": self.notation,
            "language": self.language.value if self.language else None,
            "summary": self.summary.to_dict(),
            "terms": self.terms,
            "coordinates": self.coordinates,
            "colours": self.colours,
            "connectives": self.connectives,
            "lines": self.lines,
        }


def _character_value(graph: Graph, character_id: Optional[str]) -> Optional[str]:
    if character_id is None:
        return None
    character = graph.get_character(character_id)
    return character.value if character is not None else None


def _connective_dict(graph: Graph, link: Link) -> Dict[str, Any]:
    data = link.to_dict()
    data["value"] = _character_value(graph, link.tag)
    return data


def build_system_view(graph: Graph, order: int, language: Optional[Language] = None) -> SystemView:
    """
    Assemble the view of one order from a sealed graph

    Raises:
        NotFoundError: order not present in the graph
    """
    summary = graph.order_summary(order)
    view = SystemView(order=order, language=language, summary=summary)

    for location in graph.locations_for_order(order):
        term = graph.term_at_location(location.id)
        if term is not None:
            data = term.to_dict()
            data["position"] = location.position
            data["value"] = _character_value(graph, term.character)
            view.terms.append(data)

        coordinate = graph.coordinate_at(location.id)
        view.coordinates.append(coordinate.to_dict())

        colour = graph.colour_at(location.id)
        if colour is not None:
            view.colours.append(colour.to_dict())

    view.connectives = [_connective_dict(graph, link) for link in graph.connectives(order)]
    view.lines = [link.to_dict() for link in graph.lines(order)]
    return view
