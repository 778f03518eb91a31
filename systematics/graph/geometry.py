"""
Canonical geometry

Closed-form placement of the n Locations of an order:
- order 1: the origin
- order 2: (-1, 0, 0) and (1, 0, 0)
- order n >= 3: vertices of a regular n-gon on the unit circle, position 1 at
  angle 0, counter-clockwise

Values are rounded to 12 decimals so that repeated builds compare equal.
"""

import math
from typing import Dict

from systematics.identifiers import order_id
from systematics.models.entries import Point3d

PRECISION = 12


def _round(value: float) -> float:
    rounded = round(value, PRECISION)
    # normalise -0.0
    return rounded + 0.0


def canonical_point(order: int, position: int) -> Point3d:
    """Point for one (order, position)"""
    if order == 1:
        return Point3d(0.0, 0.0, 0.0)
    if order == 2:
        return Point3d(-1.0 if position == 1 else 1.0, 0.0, 0.0)
    angle = 2 * math.pi * (position - 1) / order
    return Point3d(_round(math.cos(angle)), _round(math.sin(angle)), 0.0)


def canonical_coordinates(order: int) -> Dict[int, Point3d]:
    """
    Position -> Point3d for every position of an order

    Raises:
        InvalidStructureError: order outside 1..12
    """
    order_id(order)
    return {position: canonical_point(order, position) for position in range(1, order + 1)}
