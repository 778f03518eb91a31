"""
Registry and Vocabulary Loader

Loads the per-order registry and per-language vocabularies from YAML.

Features:
- pydantic models for both tables (callers may also build them in memory)
- packaged defaults under systematics/data/, overridable by path
- placeholder connectives ("{Prefix} {i} Needs Research") for orders whose
  connectives have not been researched yet
- every load failure surfaces as ConfigError
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from systematics import MAX_ORDER, MIN_ORDER
from systematics.errors import ConfigError, DecodeError
from systematics.identifiers import slugify
from systematics.language import Language

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent
REGISTRY_PATH = DATA_DIR / "registry.yaml"
VOCABULARY_DIR = DATA_DIR / "vocabularies"

PLACEHOLDER_SUFFIX = "Needs Research"


def _check_order_key(order: int) -> int:
    if not MIN_ORDER <= order <= MAX_ORDER:
        raise ValueError(f"order must be {MIN_ORDER}-{MAX_ORDER}, got {order}")
    return order


def _check_character_value(value: str) -> str:
    try:
        slugify(value)
    except DecodeError as e:
        raise ValueError(e.message)
    return value


# ============================================
# Registry
# ============================================


class OrderRegistryRow(BaseModel):
    """Order-level vocabulary of one system"""

    order: int = Field(..., ge=MIN_ORDER, le=MAX_ORDER, description="System order")
    name: str = Field(..., min_length=1, description="System name (e.g. 'Triad')")
    coherence: str = Field(..., min_length=1, description="Coherence attribute (e.g. 'Dynamism')")
    term_designation: Optional[str] = Field(None, description="What terms are called (e.g. 'Impulses')")
    connective_designation: Optional[str] = Field(None, description="What connectives are called (e.g. 'Acts')")


class OrderRegistry(BaseModel):
    """One row per order, keyed by order value"""

    orders: List[OrderRegistryRow] = Field(default_factory=list)

    @field_validator("orders")
    @classmethod
    def validate_unique_orders(cls, v: List[OrderRegistryRow]) -> List[OrderRegistryRow]:
        seen = set()
        for row in v:
            if row.order in seen:
                raise ValueError(f"duplicate registry row for order {row.order}")
            seen.add(row.order)
        return sorted(v, key=lambda row: row.order)

    def row(self, order: int) -> Optional[OrderRegistryRow]:
        for row in self.orders:
            if row.order == order:
                return row
        return None

    def order_values(self) -> List[int]:
        return [row.order for row in self.orders]

    def __contains__(self, order: object) -> bool:
        return self.row(order) is not None


# ============================================
# Vocabulary
# ============================================


class ConnectiveSpec(BaseModel):
    """One authored connective: base position -> target position, labelled"""

    base: int = Field(..., ge=1, le=MAX_ORDER)
    target: int = Field(..., ge=1, le=MAX_ORDER)
    character: str = Field(..., min_length=1)

    @field_validator("character")
    @classmethod
    def validate_character(cls, v: str) -> str:
        return _check_character_value(v)

    @property
    def pair(self) -> Tuple[int, int]:
        """Unordered pair, smaller position first"""
        return (min(self.base, self.target), max(self.base, self.target))


class Vocabulary(BaseModel):
    """
    Term and connective characters of one language

    Attributes:
        language: vocabulary language
        terms: order -> term values by position (index 0 is position 1)
        connectives: order -> authored connectives
        placeholders: order -> prefix expanded over all pairs
    """

    language: Language
    terms: Dict[int, List[str]] = Field(default_factory=dict)
    connectives: Dict[int, List[ConnectiveSpec]] = Field(default_factory=dict)
    placeholders: Dict[int, str] = Field(default_factory=dict)

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: Language) -> Language:
        if not v.is_vocabulary:
            raise ValueError(f"'{v.value}' is a representation, not a vocabulary")
        return v

    @field_validator("terms", "connectives", "placeholders")
    @classmethod
    def validate_order_keys(cls, v: Dict) -> Dict:
        for order in v:
            _check_order_key(order)
        return v

    @field_validator("terms")
    @classmethod
    def validate_term_values(cls, v: Dict[int, List[str]]) -> Dict[int, List[str]]:
        for values in v.values():
            for value in values:
                _check_character_value(value)
        return v

    @field_validator("placeholders")
    @classmethod
    def validate_placeholder_prefixes(cls, v: Dict[int, str]) -> Dict[int, str]:
        for prefix in v.values():
            _check_character_value(prefix)
        return v

    def term_values(self, order: int) -> Optional[List[str]]:
        return self.terms.get(order)

    def connective_specs(self, order: int) -> List[ConnectiveSpec]:
        """
        Connectives for an order

        Explicit connectives win; otherwise a placeholder prefix is expanded
        over the pairs (i, j), i < j, in lexicographic order.
        """
        if order in self.connectives:
            return list(self.connectives[order])
        prefix = self.placeholders.get(order)
        if prefix is None:
            return []
        specs = []
        index = 1
        for i in range(1, order + 1):
            for j in range(i + 1, order + 1):
                specs.append(ConnectiveSpec(
                    base=i, target=j, character=f"{prefix} {index} {PLACEHOLDER_SUFFIX}"
                ))
                index += 1
        return specs


# ============================================
# Loading
# ============================================


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError("Data file not found", path=str(path))
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path=str(path))
    if not isinstance(data, dict):
        raise ConfigError("Data file must contain a mapping", path=str(path))
    return data


def load_registry(path: Optional[Union[str, Path]] = None) -> OrderRegistry:
    """
    Load the order registry

    Args:
        path: YAML file (defaults to the packaged registry)

    Raises:
        ConfigError: file missing, unreadable or invalid
    """
    path = Path(path) if path is not None else REGISTRY_PATH
    data = _read_yaml(path)
    try:
        registry = OrderRegistry(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid registry: {e}", path=str(path))
    logger.debug("Loaded registry from %s (%d orders)", path, len(registry.orders))
    return registry


def load_vocabulary(
    language: Union[Language, str],
    directory: Optional[Union[str, Path]] = None,
) -> Vocabulary:
    """
    Load the vocabulary of one language from <directory>/<language>.yaml

    Raises:
        ConfigError: unknown language, no table for it, or invalid table
    """
    try:
        language = Language(language)
    except ValueError:
        raise ConfigError(f"Unknown language: {language}")
    if not language.is_vocabulary:
        raise ConfigError(f"'{language.value}' is not a vocabulary language")

    directory = Path(directory) if directory is not None else VOCABULARY_DIR
    path = directory / f"{language.value}.yaml"
    if not path.is_file():
        raise ConfigError(f"No vocabulary table for '{language.value}'", path=str(path))

    data = _read_yaml(path)
    data.setdefault("language", language.value)
    try:
        vocabulary = Vocabulary(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid vocabulary: {e}", path=str(path))
    if vocabulary.language != language:
        raise ConfigError(
            f"Vocabulary file declares '{vocabulary.language.value}'",
            path=str(path),
            expected=language.value,
        )
    logger.debug("Loaded %s vocabulary from %s", language.value, path)
    return vocabulary
