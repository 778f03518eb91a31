from __future__ import annotations

import math
from math import comb

import pytest

from systematics.data import ConnectiveSpec, OrderRegistry, OrderRegistryRow, Vocabulary
from systematics.errors import BuildError
from systematics.graph import DEFAULT_PALETTE, Graph, SystemBuilder, canonical_coordinates, check_graph
from systematics.identifiers import canonical_identifier, format_identifier
from systematics.kinds import EntryKind
from systematics.language import Language
from systematics.models import Point3d


ORDERS = range(1, 13)


@pytest.mark.parametrize("order", ORDERS)
def test_every_order_is_complete(builder: SystemBuilder, order: int) -> None:
    graph = builder.build(order)
    pairs = comb(order, 2)

    assert len(graph.positions()) == order
    assert sorted(loc.position for loc in graph.locations_for_order(order)) == list(range(1, order + 1))
    assert len(graph.connectives(order)) == pairs
    assert len(graph.lines(order)) == pairs
    assert len(graph.terms(order)) == order
    for location in graph.locations_for_order(order):
        assert graph.coordinate_at(location.id).location == location.id
    assert check_graph(graph) == []


def test_connectives_cover_every_pair_once(all_systems: Graph) -> None:
    for order in ORDERS:
        pairs = set()
        for link in all_systems.connectives(order):
            ends = tuple(sorted(all_systems.get_entry(e).position for e in link.endpoints))
            assert ends[0] != ends[1]
            pairs.add(ends)
        assert len(pairs) == comb(order, 2)


def test_triad_scenario(triad: Graph) -> None:
    summary = triad.order_summary(3)
    assert summary.name == "Triad"
    assert summary.coherence == "Dynamism"
    assert summary.term_designation == "Impulses"
    assert summary.connective_designation == "Acts"

    assert triad.term_character_at("loc_3_1").value == "Will"
    assert triad.term_character_at("loc_3_2").value == "Function"
    assert triad.term_character_at("loc_3_3").value == "Being"

    connectives = triad.connectives_for_location("loc_3_1")
    assert len(connectives) == 2
    assert {link.tag for link in connectives} == {"char_canonical_act1", "char_canonical_act3"}


def test_monad_scenario(builder: SystemBuilder) -> None:
    graph = builder.build(1)
    assert [loc.id for loc in graph.locations_for_order(1)] == ["loc_1_1"]
    assert graph.coordinate_at("loc_1_1").point == Point3d(0.0, 0.0, 0.0)
    assert graph.connectives_for_location("loc_1_1") == []
    assert graph.lines(1) == []
    assert graph.order_summary(1).name == "Monad"


def test_tetrad_keeps_authored_direction(builder: SystemBuilder) -> None:
    graph = builder.build(4)
    regard = graph.get_link("conn_loc_4_1_loc_4_3")
    assert (regard.base, regard.target) == ("loc_4_3", "loc_4_1")
    assert graph.get_character(regard.tag).value == "Receptive Regard"


def test_shared_characters_inserted_once(all_systems: Graph) -> None:
    ids = [c.id for c in all_systems.characters()]
    assert len(ids) == len(set(ids))
    function = all_systems.get_character("char_canonical_function")
    assert all_systems.term(3, 2).character == function.id
    pentad = all_systems.get_link("conn_loc_5_2_loc_5_3")
    assert pentad.tag == function.id


def test_placeholder_connectives(builder: SystemBuilder) -> None:
    graph = builder.build(6)
    first = graph.get_link("conn_loc_6_1_loc_6_2")
    last = graph.get_link("conn_loc_6_5_loc_6_6")
    assert graph.get_character(first.tag).value == "Step 1 Needs Research"
    assert graph.get_character(last.tag).value == "Step 15 Needs Research"


def test_unresearched_designations_are_absent(builder: SystemBuilder) -> None:
    summary = builder.build(9).order_summary(9)
    assert summary.name == "Ennead"
    assert summary.coherence == "Transformation"
    assert summary.term_designation is None
    assert summary.connective_designation is None


def test_build_is_idempotent(builder: SystemBuilder) -> None:
    first = builder.build(5)
    second = builder.build(5)
    assert first.entries.ids() == second.entries.ids()
    assert list(first.entries) == list(second.entries)
    assert list(first.links) == list(second.links)


def test_resolution_consistency(all_systems: Graph) -> None:
    for term in all_systems.entries.entries_of_kind(EntryKind.TERM):
        assert all_systems.term_at_location(term.location) == term
        assert all_systems.connectives_for_term(term.id) == all_systems.connectives_for_location(term.location)


def test_identifiers_round_trip(all_systems: Graph) -> None:
    for item in list(all_systems.entries) + list(all_systems.links):
        assert format_identifier(item) == item.id
        assert canonical_identifier(item.id) == item.id


def test_structure_only_build(registry: OrderRegistry) -> None:
    graph = SystemBuilder(registry).build(3)
    assert graph.terms(3) == []
    assert graph.characters() == []
    assert graph.term_character_at("loc_3_1") is None
    assert all(link.tag is None for link in graph.connectives(3))
    assert len(graph.connectives(3)) == 3
    assert graph.order_summary(3).name == "Triad"


def test_palette_colours(triad: Graph) -> None:
    assert [c.value for c in triad.colours(3)] == list(DEFAULT_PALETTE[:3])


def test_canonical_coordinates() -> None:
    assert canonical_coordinates(2) == {1: Point3d(-1.0, 0.0), 2: Point3d(1.0, 0.0)}
    square = canonical_coordinates(4)
    assert square[1] == Point3d(1.0, 0.0)
    assert square[2] == Point3d(0.0, 1.0)
    assert square[3] == Point3d(-1.0, 0.0)
    hexagon = canonical_coordinates(6)
    for point in hexagon.values():
        assert math.isclose(math.hypot(point.x, point.y), 1.0)


# ============================================
# Failure policy
# ============================================


def test_out_of_range_order_rejected(builder: SystemBuilder) -> None:
    with pytest.raises(BuildError):
        builder.build(13)
    with pytest.raises(BuildError):
        builder.build(0)


def test_missing_registry_row_is_fatal(vocabulary: Vocabulary) -> None:
    registry = OrderRegistry(orders=[OrderRegistryRow(order=1, name="Monad", coherence="Universality")])
    with pytest.raises(BuildError):
        SystemBuilder(registry, vocabulary).build(2)


def test_inconsistent_vocabulary_is_fatal(registry: OrderRegistry) -> None:
    short = Vocabulary(language=Language.CANONICAL, terms={3: ["Will", "Function"]})
    with pytest.raises(BuildError):
        SystemBuilder(registry, short).build(3)

    missing = Vocabulary(language=Language.CANONICAL, terms={})
    with pytest.raises(BuildError):
        SystemBuilder(registry, missing).build(3)

    twice = Vocabulary(
        language=Language.CANONICAL,
        terms={3: ["Will", "Function", "Being"]},
        connectives={3: [
            ConnectiveSpec(base=1, target=2, character="Act1"),
            ConnectiveSpec(base=2, target=1, character="Act2"),
        ]},
    )
    with pytest.raises(BuildError):
        SystemBuilder(registry, twice).build(3)

    out_of_range = Vocabulary(
        language=Language.CANONICAL,
        terms={3: ["Will", "Function", "Being"]},
        connectives={3: [ConnectiveSpec(base=1, target=4, character="Act1")]},
    )
    with pytest.raises(BuildError):
        SystemBuilder(registry, out_of_range).build(3)


def test_short_palette_is_fatal(registry: OrderRegistry) -> None:
    with pytest.raises(BuildError):
        SystemBuilder(registry, palette=["#FF0000"]).build(3)


@pytest.mark.parametrize("bad_value", ["", "--", "???"])
def test_unusable_character_values_fail_the_build(registry: OrderRegistry, bad_value: str) -> None:
    bad_term = Vocabulary.model_construct(
        language=Language.CANONICAL,
        terms={3: ["Will", bad_value, "Being"]},
        connectives={},
        placeholders={},
    )
    with pytest.raises(BuildError):
        SystemBuilder(registry, bad_term).build(3)

    bad_connective = Vocabulary.model_construct(
        language=Language.CANONICAL,
        terms={3: ["Will", "Function", "Being"]},
        connectives={3: [ConnectiveSpec.model_construct(base=1, target=2, character=bad_value)]},
        placeholders={},
    )
    with pytest.raises(BuildError):
        SystemBuilder(registry, bad_connective).build(3)
