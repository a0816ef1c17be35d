"""Geometry helpers for rotation and hit-testing."""

from __future__ import annotations

import math
from typing import List, Sequence

from PyQt6.QtCore import QPointF, QRectF

# Approximate rendered label box, in logical units
LABEL_CHAR_WIDTH = 7.0
LABEL_TEXT_HEIGHT = 14.0
LABEL_PADDING = 4.0


def distance(a: QPointF, b: QPointF) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x() - a.x(), b.y() - a.y())


def angle_degrees(origin: QPointF, target: QPointF) -> float:
    """Angle of the vector origin -> target, in degrees."""
    return math.degrees(math.atan2(target.y() - origin.y(), target.x() - origin.x()))


def rotate_point(point: QPointF, center: QPointF, angle_deg: float) -> QPointF:
    """
    Rotate a point around a center using the standard 2D rotation matrix.

    With y growing downward a positive angle turns clockwise on screen.
    """
    angle_rad = math.radians(angle_deg)
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)
    dx = point.x() - center.x()
    dy = point.y() - center.y()
    return QPointF(
        center.x() + dx * cos_a - dy * sin_a,
        center.y() + dx * sin_a + dy * cos_a,
    )


def rotate_about_anchor(points: Sequence[QPointF], angle_deg: float) -> List[QPointF]:
    """Rotate every point except the first around the first point."""
    if not points:
        return []
    anchor = QPointF(points[0])
    return [anchor] + [rotate_point(p, anchor, angle_deg) for p in points[1:]]


def point_to_segment_distance(p: QPointF, a: QPointF, b: QPointF) -> float:
    """Calculate distance from point p to line segment a-b."""
    if a == b:
        return distance(p, a)

    ab_x = b.x() - a.x()
    ab_y = b.y() - a.y()
    ab_squared = ab_x ** 2 + ab_y ** 2
    t = ((p.x() - a.x()) * ab_x + (p.y() - a.y()) * ab_y) / ab_squared

    # Clamp t to [0, 1] to stay on the segment
    t = max(0.0, min(1.0, t))

    return distance(p, QPointF(a.x() + t * ab_x, a.y() + t * ab_y))


def polyline_distance(p: QPointF, points: Sequence[QPointF]) -> float:
    """Shortest distance from p to a polyline; infinite for fewer than 2 points."""
    if len(points) < 2:
        return math.inf
    return min(
        point_to_segment_distance(p, points[i], points[i + 1])
        for i in range(len(points) - 1)
    )


def label_rect(text: str, x: float, y: float, margin: float = 0.0) -> QRectF:
    """Approximate box of a label's text glyphs centred on (x, y)."""
    width = len(text) * LABEL_CHAR_WIDTH + 2 * margin
    height = LABEL_TEXT_HEIGHT + 2 * margin
    return QRectF(x - width / 2, y - height / 2, width, height)
