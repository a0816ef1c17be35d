"""Mapping of pointer positions to logical canvas coordinates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from PyQt6.QtCore import QPointF, QRectF
from PyQt6.QtGui import QPointerEvent, QSinglePointEvent

from .models import Region

logger = logging.getLogger(__name__)

DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 400


@dataclass(frozen=True)
class MappedPoint:
    """A pointer position in logical units, classified into a region."""

    x: float
    y: float
    region: Region

    def to_qpointf(self) -> QPointF:
        return QPointF(self.x, self.y)


class CoordinateMapper:
    """
    Converts raw pointer positions into the logical viewport.

    The surface is the on-screen rectangle the logical viewport is drawn
    into, expressed in the same coordinate system as event positions.
    """

    def __init__(
        self,
        width: int = DEFAULT_CANVAS_WIDTH,
        height: int = DEFAULT_CANVAS_HEIGHT
    ) -> None:
        self.width = width
        self.height = height

    def region_for_x(self, x: float) -> Region:
        """Classify a logical x coordinate into a region."""
        return Region.LEFT if x < self.width / 2 else Region.RIGHT

    def region_center(self, region: Region) -> QPointF:
        """Default position inside a region, used for new labels."""
        quarter = self.width / 4
        x = quarter if Region(region) == Region.LEFT else 3 * quarter
        return QPointF(x, self.height / 2)

    @staticmethod
    def event_position(event: Any) -> Optional[QPointF]:
        """
        Extract a position from a mouse event, touch event or bare point.

        Touch events use their first touch point.
        """
        if isinstance(event, QPointF):
            return QPointF(event)
        if isinstance(event, QSinglePointEvent):
            return event.position()
        if isinstance(event, QPointerEvent):
            points = event.points()
            if not points:
                return None
            return points[0].position()
        logger.debug(f"Unsupported pointer event type: {type(event).__name__}")
        return None

    def map_position(self, pos: QPointF, surface: Optional[QRectF]) -> Optional[MappedPoint]:
        """Scale a position inside the surface to logical units."""
        if surface is None or surface.width() <= 0 or surface.height() <= 0:
            return None

        x = (pos.x() - surface.left()) / surface.width() * self.width
        y = (pos.y() - surface.top()) / surface.height() * self.height
        return MappedPoint(x, y, self.region_for_x(x))

    def map_event(self, event: Any, surface: Optional[QRectF]) -> Optional[MappedPoint]:
        """
        Map a pointer event to logical coordinates.

        Args:
            event: QMouseEvent, QTouchEvent or QPointF
            surface: Bounding box of the rendering surface, or None when
                the surface is not available

        Returns:
            MappedPoint, or None when the surface or position is unavailable
        """
        if surface is None:
            return None
        pos = self.event_position(event)
        if pos is None:
            return None
        return self.map_position(pos, surface)

    def fit_surface(self, bounds: QRectF) -> QRectF:
        """
        Largest rectangle inside bounds with the logical aspect ratio, centred.

        Args:
            bounds: Available widget area

        Returns:
            Letter-boxed surface rectangle
        """
        if bounds.width() <= 0 or bounds.height() <= 0:
            return QRectF(bounds.topLeft(), bounds.size())

        scale = min(bounds.width() / self.width, bounds.height() / self.height)
        width = self.width * scale
        height = self.height * scale
        left = bounds.left() + (bounds.width() - width) / 2
        top = bounds.top() + (bounds.height() - height) / 2
        return QRectF(left, top, width, height)
