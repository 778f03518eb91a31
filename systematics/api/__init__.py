"""
Systematics API Module

Envelope-returning handlers for an external resolver layer.
"""

from .handlers import (
    ERROR_CODES,
    handle_colour_at,
    handle_connectives_for_location,
    handle_connectives_for_term,
    handle_coordinate_at,
    handle_order_summary,
    handle_parse_identifier,
    handle_system,
    handle_term_at,
)

__all__ = [
    "ERROR_CODES",
    "handle_colour_at",
    "handle_connectives_for_location",
    "handle_connectives_for_term",
    "handle_coordinate_at",
    "handle_order_summary",
    "handle_parse_identifier",
    "handle_system",
    "handle_term_at",
]
