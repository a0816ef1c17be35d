"""Canvas widget that renders a lash map and feeds pointer input to the editor."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QEvent, QPointF, QRectF, Qt
from PyQt6.QtGui import (
    QColor, QFont, QMouseEvent, QPainter, QPainterPath, QPen, QPixmap, QTouchEvent
)
from PyQt6.QtWidgets import QSizePolicy, QWidget

from ..core.editor import LashMapEditor
from ..core.geometry import LABEL_PADDING, label_rect
from ..core.models import DrawingPath, LengthLabel, PathKind, Region
from ..core.modes import EditorMode

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "No mapping data yet."


class LashMapCanvas(QWidget):
    """
    Renders both eyes, their strokes and labels with QPainter.

    Drawing happens in logical 800x400 units; the painter is scaled to the
    letter-boxed surface so the editor's coordinate mapping and the
    rendering always agree.
    """

    OUTLINE_COLOR = QColor(62, 42, 32, 90)
    ERASE_COLOR = QColor(220, 0, 0)

    def __init__(self, editor: LashMapEditor, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.editor = editor
        self._background: Optional[QPixmap] = None
        self._background_ref: Optional[str] = None

        self.setMouseTracking(False)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(400, 200)

        editor.changed.connect(self._on_editor_changed)
        self._update_surface()

    # === Geometry ===

    def surface_rect(self) -> QRectF:
        """On-screen rectangle the logical canvas is fitted into."""
        return self.editor.mapper.fit_surface(QRectF(self.rect()))

    def _update_surface(self) -> None:
        self.editor.set_surface(self.surface_rect())

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._update_surface()

    def set_background_pixmap(self, pixmap: Optional[QPixmap]) -> None:
        """Set the image drawn behind the strokes."""
        self._background = pixmap if pixmap is not None and not pixmap.isNull() else None
        self.update()

    def _on_editor_changed(self) -> None:
        ref = self.editor.model.background_image_ref
        if ref != self._background_ref:
            self._background_ref = ref
            self._load_background(ref)
        self.update()

    def _load_background(self, ref: Optional[str]) -> None:
        """Load the background when its reference points to a local image file."""
        if not ref or not Path(ref).is_file():
            self._background = None
            return
        pixmap = QPixmap(ref)
        if pixmap.isNull():
            logger.warning(f"Could not load background image: {ref}")
            self._background = None
        else:
            self._background = pixmap

    # === Input ===

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self.editor.press(event):
            event.accept()
            self.update()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self.editor.move(event):
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.editor.release(event)
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event) -> None:
        self.editor.leave()
        super().leaveEvent(event)

    def event(self, event: QEvent) -> bool:
        """Handle touch input the same way as mouse input."""
        event_type = event.type()
        if event_type == QEvent.Type.TouchBegin:
            self.editor.press(event)
        elif event_type == QEvent.Type.TouchUpdate:
            self.editor.move(event)
        elif event_type in (QEvent.Type.TouchEnd, QEvent.Type.TouchCancel):
            self.editor.release(event)
        else:
            return super().event(event)
        event.accept()
        return True

    # === Painting ===

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        surface = self.surface_rect()
        if self._background is not None:
            painter.drawPixmap(surface.toRect(), self._background)
        else:
            painter.fillRect(surface, QColor("white"))

        painter.save()
        painter.translate(surface.topLeft())
        scale = surface.width() / self.editor.mapper.width if surface.width() > 0 else 1.0
        painter.scale(scale, scale)

        self._draw_outlines(painter)

        model = self.editor.model
        for path in model.left_paths + model.right_paths:
            self._draw_path(painter, path)
        if self.editor.current_path is not None:
            self._draw_path(painter, self.editor.current_path)
        for label in model.left_labels + model.right_labels:
            self._draw_label(painter, label)

        painter.restore()

        if self.editor.read_only and model.is_empty:
            painter.setPen(QColor(62, 42, 32, 180))
            painter.drawText(surface, Qt.AlignmentFlag.AlignCenter, PLACEHOLDER_TEXT)

        painter.end()

    def _draw_outlines(self, painter: QPainter) -> None:
        """Draw the stylized eye outline of each region."""
        mapper = self.editor.mapper
        half_width = mapper.width / 2 * 0.4
        bulge = mapper.height * 0.3
        painter.setPen(QPen(self.OUTLINE_COLOR, 2))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for region in (Region.LEFT, Region.RIGHT):
            center = mapper.region_center(region)
            outline = QPainterPath(QPointF(center.x() - half_width, center.y()))
            outline.quadTo(QPointF(center.x(), center.y() - bulge), QPointF(center.x() + half_width, center.y()))
            outline.quadTo(QPointF(center.x(), center.y() + bulge), QPointF(center.x() - half_width, center.y()))
            painter.drawPath(outline)

    def _draw_path(self, painter: QPainter, path: DrawingPath) -> None:
        """Draw a stroke and, in rotate mode, its end handle."""
        if not path.is_renderable:
            return

        interactive = not self.editor.read_only
        color = QColor(path.color)
        if path.kind == PathKind.TEMPLATE:
            color.setAlphaF(0.8)

        pen = QPen(color, path.stroke_width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)

        stroke = QPainterPath(path.points[0])
        for point in path.points[1:]:
            stroke.lineTo(point)

        if interactive and self.editor.mode == EditorMode.ERASE:
            glow = QColor(self.ERASE_COLOR)
            glow.setAlphaF(0.3)
            painter.setPen(QPen(glow, path.stroke_width + 4))
            painter.drawPath(stroke)

        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(stroke)

        if interactive and self.editor.mode == EditorMode.ROTATE and path.is_rotatable:
            radius = self.editor.config.handle_radius
            painter.setPen(QPen(QColor("white"), 2))
            painter.setBrush(QColor(path.color))
            painter.drawEllipse(path.end, radius, radius)

    def _draw_label(self, painter: QPainter, label: LengthLabel) -> None:
        """Draw a label with its background box."""
        erasing = not self.editor.read_only and self.editor.mode == EditorMode.ERASE
        accent = self.ERASE_COLOR if erasing else QColor(self.editor.selected_color)

        box = label_rect(label.text, label.x, label.y, LABEL_PADDING)
        painter.setPen(QPen(accent, 2 if erasing else 1.5))
        painter.setBrush(QColor(255, 200, 200, 230) if erasing else QColor(255, 255, 255, 242))
        painter.drawRoundedRect(box, 4, 4)

        font = QFont("Arial")
        font.setPixelSize(12)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(accent)
        painter.drawText(box, Qt.AlignmentFlag.AlignCenter, label.text)
