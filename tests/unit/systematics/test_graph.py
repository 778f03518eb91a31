from __future__ import annotations

import pytest

from systematics.errors import (
    BuildError,
    DanglingReferenceError,
    DuplicateError,
    GraphStateError,
    InternalConsistencyError,
    InvalidStructureError,
    MalformedIdentifierError,
    NotFoundError,
)
from systematics.graph import Graph, GraphState
from systematics.language import Language
from systematics.models import (
    Character,
    Colour,
    Coordinate,
    Link,
    Location,
    Order,
    Point3d,
    Position,
    SystemName,
    Term,
)


def _dyad(coordinates: bool = True) -> Graph:
    graph = Graph()
    graph.add_entry(Order(2))
    for position in (1, 2):
        graph.add_entry(Position(position))
        graph.add_entry(Location(2, position))
        if coordinates:
            graph.add_entry(Coordinate(f"loc_2_{position}", Point3d(-1.0 if position == 1 else 1.0, 0.0)))
    graph.add_entry(SystemName.for_order(2, "Dyad"))
    return graph


def test_state_machine() -> None:
    graph = _dyad()
    assert graph.state == GraphState.BUILDING
    with pytest.raises(GraphStateError):
        graph.order_summary(2)

    graph.seal()
    assert graph.state == GraphState.SEALED
    assert graph.is_sealed

    with pytest.raises(GraphStateError):
        graph.seal()
    with pytest.raises(GraphStateError):
        graph.add_entry(Order(3))
    with pytest.raises(GraphStateError):
        graph.add_link(Link.connective("loc_2_1", "loc_2_2"))


def test_seal_requires_coordinates() -> None:
    graph = _dyad(coordinates=False)
    with pytest.raises(BuildError):
        graph.seal()
    assert graph.state == GraphState.BUILDING


def test_seal_requires_all_positions() -> None:
    graph = Graph()
    graph.add_entry(Order(3))
    graph.add_entry(Position(1))
    graph.add_entry(Location(3, 1))
    graph.add_entry(Coordinate("loc_3_1", Point3d(1.0, 0.0)))
    with pytest.raises(BuildError):
        graph.seal()


def test_reference_checks_while_building() -> None:
    graph = Graph()
    with pytest.raises(DanglingReferenceError):
        graph.add_entry(Location(3, 1))
    with pytest.raises(DanglingReferenceError):
        graph.add_entry(SystemName.for_order(3, "Triad"))

    graph = _dyad()
    with pytest.raises(DanglingReferenceError):
        graph.add_entry(Term("loc_2_1", "char_canonical_essence"))
    with pytest.raises(DuplicateError):
        graph.add_entry(Coordinate("loc_2_1", Point3d(0.0, 0.0)))

    graph.add_entry(Colour("loc_2_1", "#FF0000"))
    with pytest.raises(DuplicateError):
        graph.add_entry(Colour("loc_2_1", "Red", Language.NAME))


def test_ensure_character_shares_one_entry() -> None:
    graph = _dyad()
    first = graph.ensure_character(Character(Language.CANONICAL, "Function"))
    second = graph.ensure_character(Character(Language.CANONICAL, "Function"))
    assert first is second
    assert len(graph.entries.entries_of_kind("character")) == 1
    with pytest.raises(DuplicateError):
        graph.ensure_character(Character(Language.CANONICAL, "function"))


def test_sealed_dyad_queries() -> None:
    graph = _dyad()
    graph.add_entry(Character(Language.CANONICAL, "Essence"))
    graph.add_entry(Term("loc_2_1", "char_canonical_essence"))
    graph.add_link(Link.connective("loc_2_2", "loc_2_1"))
    graph.seal()

    assert graph.term_at_location("loc_2_1").character == "char_canonical_essence"
    assert graph.term_at_location("loc_2_2") is None
    assert graph.term_character_at("loc_2_1").value == "Essence"
    assert graph.term_character_at("loc_2_2") is None
    assert graph.coordinate_at("loc_2_2").point == Point3d(1.0, 0.0)

    connectives = graph.connectives_for_location("loc_2_1")
    assert [link.base for link in connectives] == ["loc_2_2"]
    assert graph.connectives_for_term("term_2_1") == connectives
    assert graph.get_link("conn_loc_2_2_loc_2_1") == connectives[0]

    summary = graph.order_summary(2)
    assert summary.name == "Dyad"
    assert summary.coherence is None


def test_query_errors() -> None:
    graph = _dyad().seal()
    with pytest.raises(NotFoundError):
        graph.order_summary(3)
    with pytest.raises(InvalidStructureError):
        graph.order_summary(13)
    with pytest.raises(NotFoundError):
        graph.term_at_location("loc_3_1")
    with pytest.raises(NotFoundError):
        graph.connectives_for_term("term_2_1")
    with pytest.raises(MalformedIdentifierError):
        graph.coordinate_at("bogus_1")
    with pytest.raises(InvalidStructureError):
        graph.coordinate_at("loc_2_3")
    with pytest.raises(InvalidStructureError):
        graph.coordinate_at("term_2_1")
    assert graph.get_entry("order_9") is None


def test_coordinate_missing_after_seal_is_fatal() -> None:
    graph = _dyad().seal()
    # simulate a corrupted graph: drop the slot behind the query
    graph._slots = {}
    with pytest.raises(InternalConsistencyError):
        graph.coordinate_at("loc_2_1")
    assert issubclass(InternalConsistencyError, RuntimeError)


def test_anchor_queries(triad: Graph) -> None:
    assert triad.order(3) == Order(3)
    assert triad.order(4) is None
    assert triad.orders_present() == [3]
    assert [p.value for p in triad.positions()] == [1, 2, 3]
    assert triad.location(3, 2) == Location(3, 2)
    assert [loc.position for loc in triad.locations_for_order(3)] == [1, 2, 3]
    assert [loc.id for loc in triad.locations_for_position(1)] == ["loc_3_1"]


def test_cross_cutting_queries(all_systems: Graph) -> None:
    firsts = all_systems.locations_for_position(1)
    assert len(firsts) == 12
    assert {loc.order for loc in firsts} == set(range(1, 13))

    fiber = {entry.kind.value for entry in all_systems.slice(3, 1)}
    assert fiber == {"location", "term", "coordinate", "colour"}

    system = all_systems.system(3)
    assert system[0] == Order(3)
    assert any(entry.id == "system_3" for entry in system)


def test_semantic_queries(triad: Graph) -> None:
    assert [t.id for t in triad.terms(3)] == ["term_3_1", "term_3_2", "term_3_3"]
    assert len(triad.terms(3, Language.CANONICAL)) == 3
    assert triad.terms(3, Language.ENERGY) == []
    assert triad.term(3, 2).character == "char_canonical_function"
    assert triad.colour(3, 1).value == "#FF0000"
    assert triad.colour_at("loc_3_2").value == "#0000FF"
    assert len(triad.coordinates(3)) == 3
    assert len(triad.colours(3)) == 3
    assert triad.get_character("char_canonical_will").value == "Will"
    assert {c.value for c in triad.characters(Language.CANONICAL)} >= {"Will", "Function", "Being", "Act1"}


def test_link_queries(triad: Graph) -> None:
    assert len(triad.connectives(3)) == 3
    authored = triad.connectives(3, base_position=3)
    assert [(l.base, l.target) for l in authored] == [("loc_3_3", "loc_3_1")]
    assert triad.connectives(3, base_position=1, target_position=2)[0].tag == "char_canonical_act1"
    assert triad.connectives(4) == []
    assert len(triad.lines(3)) == 3
    assert len(triad.lines_touching("coord_3_1")) == 2


def test_stats(triad: Graph) -> None:
    stats = triad.stats()
    assert stats["state"] == "sealed"
    assert stats["orders"] == [3]
    assert stats["link_kinds"] == {"line": 3, "connective": 3}
