from __future__ import annotations

import pytest

from systematics.api import (
    handle_colour_at,
    handle_connectives_for_location,
    handle_connectives_for_term,
    handle_coordinate_at,
    handle_order_summary,
    handle_parse_identifier,
    handle_system,
    handle_term_at,
)
from systematics.config import SystematicsConfig
from systematics.data import OrderRegistry, Vocabulary
from systematics.errors import InternalConsistencyError
from systematics.language import Language
from systematics.service import SystematicsService


def test_handle_system(service: SystematicsService) -> None:
    result = handle_system(service, 3)
    assert result["status"] == "success"
    assert result["data"]["summary"]["name"] == "Triad"
    assert result["data"]["notation"] == "K3"


def test_handle_system_errors(service: SystematicsService) -> None:
    result = handle_system(service, 13)
    assert result["status"] == "error"
    assert result["code"] == "INVALID_STRUCTURE"

    result = handle_system(service, 3, "energy")
    assert result["code"] == "CONFIG_ERROR"
    assert "energy" in result["error"]


def test_handle_order_summary(service: SystematicsService) -> None:
    result = handle_order_summary(service, 12)
    assert result["data"] == {
        "order": 12,
        "name": "Dodecad",
        "coherence": "Perfection",
        "term_designation": None,
        "connective_designation": None,
    }


def test_handle_term_at(service: SystematicsService) -> None:
    result = handle_term_at(service, "loc_5_3")
    assert result["status"] == "success"
    assert result["data"]["term"]["id"] == "term_5_3"
    assert result["data"]["character"]["value"] == "Higher Potential"

    assert handle_term_at(service, "loc_5_3", "none")["data"] is None


@pytest.mark.parametrize(
    "location_id, code",
    [
        ("bogus_1", "MALFORMED_IDENTIFIER"),
        ("loc_3_4", "INVALID_STRUCTURE"),
        ("term_3_1", "INVALID_STRUCTURE"),
    ],
)
def test_handle_term_at_errors(service: SystematicsService, location_id: str, code: str) -> None:
    result = handle_term_at(service, location_id)
    assert result["status"] == "error"
    assert result["code"] == code


def test_handle_coordinate_and_colour(service: SystematicsService) -> None:
    coordinate = handle_coordinate_at(service, "loc_2_1")
    assert coordinate["data"]["point"] == {"x": -1.0, "y": 0.0, "z": 0.0}
    colour = handle_colour_at(service, "loc_4_4")
    assert colour["data"]["value"] == "#099902"


def test_handle_connectives(service: SystematicsService) -> None:
    result = handle_connectives_for_location(service, "loc_4_1")
    assert result["status"] == "success"
    values = {link["value"] for link in result["data"]}
    assert values == {"Motivational Imperative", "Effectual Compatibility", "Receptive Regard"}

    by_term = handle_connectives_for_term(service, "term_4_1")
    assert by_term["data"] == result["data"]

    structure = handle_connectives_for_term(service, "term_4_1", "none")
    assert structure["code"] == "NOT_FOUND"


def test_handle_parse_identifier() -> None:
    result = handle_parse_identifier("conn_loc_3_3_loc_3_1")
    assert result["data"] == {
        "id": "conn_loc_3_1_loc_3_3",
        "kind": "connective",
        "order": 3,
        "endpoints": ["loc_3_1", "loc_3_3"],
    }
    entry = handle_parse_identifier("colour_3_2_hex")
    assert entry["data"]["language"] == "hex"
    assert entry["data"]["position"] == 2
    assert handle_parse_identifier("order_13")["code"] == "INVALID_STRUCTURE"
    assert handle_parse_identifier("nope")["code"] == "MALFORMED_IDENTIFIER"


def test_internal_consistency_errors_are_not_converted(service: SystematicsService) -> None:
    graph = service.graph(2)
    graph._slots = {}
    with pytest.raises(InternalConsistencyError):
        handle_coordinate_at(service, "loc_2_1")


def test_unusable_vocabulary_reports_build_error(config: SystematicsConfig, registry: OrderRegistry) -> None:
    broken = Vocabulary.model_construct(
        language=Language.CANONICAL,
        terms={3: ["Will", "", "Being"]},
        connectives={},
        placeholders={},
    )
    service = SystematicsService(registry=registry, vocabulary_loader=lambda language: broken, config=config)
    result = handle_system(service, 3)
    assert result["status"] == "error"
    assert result["code"] == "BUILD_ERROR"
