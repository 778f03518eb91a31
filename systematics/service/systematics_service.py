"""
Systematics Service

Lazily builds and caches sealed graphs.

Design:
- One sealed Graph per (order, language) and one per (all, language)
- Builds are serialised by a lock; a graph is published only once sealed
- Published graphs are immutable and shared without further locking
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple, Union

from systematics import MAX_ORDER, MIN_ORDER
from systematics.config import SystematicsConfig, get_config
from systematics.data.loader import OrderRegistry, Vocabulary, load_registry, load_vocabulary
from systematics.errors import ConfigError
from systematics.graph.builder import SystemBuilder
from systematics.graph.graph import Graph, OrderSummary
from systematics.language import Language

from .view import SystemView, build_system_view

logger = logging.getLogger(__name__)

ALL_ORDERS = "all"
STRUCTURE_ONLY = "none"

LanguageArg = Union[Language, str, None]
CacheKey = Tuple[Union[int, str], Optional[Language]]


def resolve_language(language: LanguageArg, default: Optional[Language] = None) -> Optional[Language]:
    """
    Normalise a caller's language selection

    - None: fall back to `default`
    - "none": structure only (no vocabulary)
    - anything else must name a vocabulary language

    Raises:
        ConfigError: unknown language or a representation language
    """
    if language is None:
        return default
    if isinstance(language, str) and language.strip().lower() == STRUCTURE_ONLY:
        return None
    try:
        resolved = Language(language.strip().lower() if isinstance(language, str) else language)
    except ValueError:
        raise ConfigError(f"Unknown language: {language}")
    if not resolved.is_vocabulary:
        raise ConfigError(f"'{resolved.value}' is not a vocabulary language")
    return resolved


class SystematicsService:
    """
    Query service over sealed graphs

    Attributes:
        config: settings used for defaults and data paths

    Example:
        >>> service = SystematicsService()
        >>> service.order_summary(3).name
        'Triad'
        >>> service.system_view(3).notation
        'K3'
    """

    def __init__(
        self,
        registry: Optional[OrderRegistry] = None,
        vocabulary_loader: Optional[Callable[[Language], Vocabulary]] = None,
        config: Optional[SystematicsConfig] = None,
    ):
        self.config = config or get_config()
        self._registry = registry
        self._vocabulary_loader = vocabulary_loader or self._load_vocabulary
        self._vocabularies: Dict[Language, Vocabulary] = {}
        self._graphs: Dict[CacheKey, Graph] = {}
        self._lock = threading.Lock()

    # ============================================
    # Inputs
    # ============================================

    @property
    def registry(self) -> OrderRegistry:
        if self._registry is None:
            self._registry = load_registry(self.config.registry_path)
        return self._registry

    def _load_vocabulary(self, language: Language) -> Vocabulary:
        return load_vocabulary(language, self.config.vocabulary_dir)

    def vocabulary(self, language: Language) -> Vocabulary:
        if language not in self._vocabularies:
            self._vocabularies[language] = self._vocabulary_loader(language)
        return self._vocabularies[language]

    def resolve_language(self, language: LanguageArg) -> Optional[Language]:
        return resolve_language(language, self.config.default_language)

    # ============================================
    # Graphs
    # ============================================

    def _builder(self, language: Optional[Language]) -> SystemBuilder:
        vocabulary = self.vocabulary(language) if language is not None else None
        return SystemBuilder(self.registry, vocabulary)

    def _cached(self, key: CacheKey, build: Callable[[SystemBuilder], Graph]) -> Graph:
        graph = self._graphs.get(key)
        if graph is not None:
            logger.debug("Graph cache hit: %s", key)
            return graph

        with self._lock:
            graph = self._graphs.get(key)
            if graph is None:
                graph = build(self._builder(key[1]))
                self._graphs[key] = graph
        return graph

    def graph(self, order: int, language: LanguageArg = None) -> Graph:
        """
        Sealed graph of one order

        Raises:
            BuildError: order outside 1..12 or inconsistent data
            ConfigError: language or data files invalid
        """
        lang = self.resolve_language(language)
        return self._cached((order, lang), lambda builder: builder.build(order))

    def all_orders(self, language: LanguageArg = None) -> Graph:
        """Sealed graph of all twelve orders"""
        lang = self.resolve_language(language)
        return self._cached((ALL_ORDERS, lang), lambda builder: builder.build_all())

    def warm(self, language: LanguageArg = None) -> int:
        """Build every single-order graph up front; returns how many are cached"""
        for order in range(MIN_ORDER, MAX_ORDER + 1):
            self.graph(order, language)
        logger.info("Warmed %d graphs", len(self._graphs))
        return len(self._graphs)

    def cached_keys(self) -> List[CacheKey]:
        return list(self._graphs)

    def clear(self) -> None:
        """Drop cached graphs and vocabularies (for testing)"""
        with self._lock:
            self._graphs.clear()
            self._vocabularies.clear()

    # ============================================
    # Queries
    # ============================================

    def order_summary(self, order: int, language: LanguageArg = None) -> OrderSummary:
        return self.graph(order, language).order_summary(order)

    def system_view(self, order: int, language: LanguageArg = None) -> SystemView:
        lang = self.resolve_language(language)
        graph = self.graph(order, lang if lang is not None else STRUCTURE_ONLY)
        return build_system_view(graph, order, lang)


# Global singleton instance
_service: Optional[SystematicsService] = None
_service_lock = threading.Lock()


def get_service() -> SystematicsService:
    """
    Get the global service instance

    Warms all twelve orders on first use when `eager_build` is configured.
    """
    global _service

    if _service is None:
        with _service_lock:
            if _service is None:
                service = SystematicsService()
                if service.config.eager_build:
                    service.warm()
                _service = service

    return _service


def reset_service() -> None:
    """Reset global service (for testing)"""
    global _service
    with _service_lock:
        _service = None
