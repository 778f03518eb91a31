"""
Systematics Service Module

Builds, caches and publishes sealed graphs per (order | all, language) and
assembles serialisable views of single systems.
"""

from .systematics_service import (
    SystematicsService,
    get_service,
    reset_service,
    resolve_language,
)
from .view import SystemView, build_system_view

__all__ = [
    "SystematicsService",
    "SystemView",
    "build_system_view",
    "get_service",
    "reset_service",
    "resolve_language",
]
