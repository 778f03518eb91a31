"""
Systematics Data Module

Registry and vocabulary tables, packaged as YAML and validated with pydantic.
"""

from .loader import (
    ConnectiveSpec,
    OrderRegistry,
    OrderRegistryRow,
    Vocabulary,
    load_registry,
    load_vocabulary,
)

__all__ = [
    "ConnectiveSpec",
    "OrderRegistry",
    "OrderRegistryRow",
    "Vocabulary",
    "load_registry",
    "load_vocabulary",
]
