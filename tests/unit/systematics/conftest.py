from __future__ import annotations

import pytest

from systematics.config import SystematicsConfig
from systematics.data import OrderRegistry, Vocabulary, load_registry, load_vocabulary
from systematics.graph import Graph, SystemBuilder
from systematics.language import Language
from systematics.service import SystematicsService


@pytest.fixture(scope="session")
def registry() -> OrderRegistry:
    return load_registry()


@pytest.fixture(scope="session")
def vocabulary() -> Vocabulary:
    return load_vocabulary(Language.CANONICAL)


@pytest.fixture(scope="session")
def builder(registry: OrderRegistry, vocabulary: Vocabulary) -> SystemBuilder:
    return SystemBuilder(registry, vocabulary)


@pytest.fixture(scope="session")
def triad(builder: SystemBuilder) -> Graph:
    return builder.build(3)


@pytest.fixture(scope="session")
def all_systems(builder: SystemBuilder) -> Graph:
    return builder.build_all()


@pytest.fixture()
def config() -> SystematicsConfig:
    return SystematicsConfig(_env_file=None, default_language="canonical", log_level="INFO")


@pytest.fixture()
def service(config: SystematicsConfig, registry: OrderRegistry) -> SystematicsService:
    return SystematicsService(registry=registry, config=config)
