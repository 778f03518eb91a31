from __future__ import annotations

import threading

import pytest

from systematics.errors import BuildError, ConfigError
from systematics.language import Language
from systematics.service import SystematicsService, get_service, reset_service, resolve_language
from systematics.service import systematics_service


def test_resolve_language() -> None:
    assert resolve_language(None, Language.CANONICAL) == Language.CANONICAL
    assert resolve_language("none", Language.CANONICAL) is None
    assert resolve_language("Canonical") == Language.CANONICAL
    with pytest.raises(ConfigError):
        resolve_language("hex")
    with pytest.raises(ConfigError):
        resolve_language("klingon")


def test_graphs_are_cached(service: SystematicsService) -> None:
    first = service.graph(3)
    assert service.graph(3) is first
    assert service.graph(3, "canonical") is first
    assert service.graph(3, "none") is not first
    assert first.is_sealed
    assert (3, Language.CANONICAL) in service.cached_keys()


def test_concurrent_requests_build_once(service: SystematicsService) -> None:
    results = []

    def fetch() -> None:
        results.append(service.graph(7))

    threads = [threading.Thread(target=fetch) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert all(graph is results[0] for graph in results)


def test_all_orders(service: SystematicsService) -> None:
    graph = service.all_orders()
    assert graph.orders_present() == list(range(1, 13))
    assert service.all_orders() is graph


def test_order_summary(service: SystematicsService) -> None:
    summary = service.order_summary(4)
    assert summary.name == "Tetrad"
    assert summary.term_designation == "Sources"


def test_system_view(service: SystematicsService) -> None:
    view = service.system_view(3)
    assert view.notation == "K3"
    assert view.name == "Triad"
    assert [t["value"] for t in view.terms] == ["Will", "Function", "Being"]
    assert len(view.coordinates) == 3
    assert len(view.lines) == 3
    assert {c["value"] for c in view.connectives} == {"Act1", "Act2", "Act3"}

    data = view.to_dict()
    assert data["language"] == "canonical"
    assert data["summary"]["connective_designation"] == "Acts"
    assert data["colours"][0]["value"] == "#FF0000"


def test_structure_only_view(service: SystematicsService) -> None:
    view = service.system_view(4, "none")
    assert view.language is None
    assert view.terms == []
    assert len(view.connectives) == 6
    assert all(c["value"] is None for c in view.connectives)


def test_errors_propagate(service: SystematicsService) -> None:
    with pytest.raises(BuildError):
        service.graph(13)
    with pytest.raises(ConfigError):
        service.graph(3, "energy")


def test_warm_builds_every_order(service: SystematicsService) -> None:
    assert service.warm() == 12
    service.clear()
    assert service.cached_keys() == []


def test_injected_vocabulary_loader(config, registry, vocabulary) -> None:
    calls = []

    def loader(language: Language):
        calls.append(language)
        return vocabulary

    service = SystematicsService(registry=registry, vocabulary_loader=loader, config=config)
    service.graph(2)
    service.graph(3)
    assert calls == [Language.CANONICAL]


def test_get_service_singleton(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_service()
    monkeypatch.setattr(systematics_service, "get_config", lambda: _config_without_eager())
    first = get_service()
    assert get_service() is first
    reset_service()
    assert get_service() is not first
    reset_service()


def _config_without_eager():
    from systematics.config import SystematicsConfig
    return SystematicsConfig(_env_file=None, eager_build=False)
