"""Gesture handlers that turn mapped pointer input into model changes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from PyQt6.QtCore import QPointF

from .coordinates import MappedPoint
from .geometry import (
    angle_degrees, distance, label_rect, polyline_distance,
    rotate_about_anchor, rotate_point
)
from .models import DrawingPath, LengthLabel, PathKind, Region
from .modes import EditorMode
from .templates import get_template
from .undo_redo import AddItemCommand, MoveLabelCommand, RemoveItemCommand, RotatePathCommand

if TYPE_CHECKING:
    from .editor import LashMapEditor

logger = logging.getLogger(__name__)


class GestureHandler:
    """
    Base class for the per-mode pointer handlers.

    A gesture is press -> move* -> release. Handlers return True when
    they consumed an event and False when it was ignored.
    """

    mode: EditorMode

    def __init__(self, editor: LashMapEditor) -> None:
        self._editor = editor

    @property
    def is_active(self) -> bool:
        """Whether a gesture is in flight."""
        return False

    @property
    def active_region(self) -> Optional[Region]:
        """Region locked by the in-flight gesture, if any."""
        return None

    def press(self, point: MappedPoint) -> bool:
        return False

    def move(self, point: MappedPoint) -> bool:
        return False

    def release(self) -> bool:
        return False

    def cancel(self) -> None:
        """Abort the in-flight gesture without committing or emitting."""


class FreeDrawHandler(GestureHandler):
    """Freehand strokes, straightened to their end points on release."""

    mode = EditorMode.DRAW

    def __init__(self, editor: LashMapEditor) -> None:
        super().__init__(editor)
        self._path: Optional[DrawingPath] = None

    @property
    def is_active(self) -> bool:
        return self._path is not None

    @property
    def active_region(self) -> Optional[Region]:
        return self._path.region if self._path else None

    @property
    def current_path(self) -> Optional[DrawingPath]:
        """The stroke being drawn, for rendering."""
        return self._path

    def press(self, point: MappedPoint) -> bool:
        self._path = DrawingPath(
            region=point.region,
            points=[point.to_qpointf()],
            color=self._editor.selected_color,
            stroke_width=self._editor.stroke_width,
            kind=PathKind.DRAWN,
        )
        self._editor.notify_changed()
        return True

    def move(self, point: MappedPoint) -> bool:
        if self._path is None:
            return False

        # Lock to the region the stroke started in
        if point.region != self._path.region:
            return False

        pos = point.to_qpointf()
        if distance(self._path.points[-1], pos) < self._editor.config.min_point_distance:
            return False

        self._path.points.append(pos)
        self._editor.notify_changed()
        return True

    def release(self) -> bool:
        path, self._path = self._path, None
        if path is None:
            return False

        if len(path.points) >= 2:
            path.points = [path.points[0], path.points[-1]]

        items = self._editor.model.paths_for(path.region)
        self._editor.commit(AddItemCommand(items, path, "Draw Line", self._editor.notify_changed))
        return True

    def cancel(self) -> None:
        if self._path is not None:
            logger.debug(f"Freehand stroke in {self._path.region.value} region cancelled")
            self._path = None
            self._editor.notify_changed()


class TemplatePlacementHandler(GestureHandler):
    """Places a translated copy of the selected template on every press."""

    mode = EditorMode.TEMPLATE

    def press(self, point: MappedPoint) -> bool:
        template = get_template(self._editor.selected_template_id)
        if template is None:
            logger.debug("No template selected, ignoring press")
            return False

        path = DrawingPath(
            region=point.region,
            points=template.translate(point.x, point.y),
            color=self._editor.selected_color,
            stroke_width=self._editor.stroke_width,
            kind=PathKind.TEMPLATE,
            template_id=template.id,
        )
        items = self._editor.model.paths_for(point.region)
        self._editor.commit(
            AddItemCommand(items, path, f"Add {template.name}", self._editor.notify_changed)
        )
        return True


class LabelDragHandler(GestureHandler):
    """Drags a length label within its own region."""

    mode = EditorMode.LABEL

    def __init__(self, editor: LashMapEditor) -> None:
        super().__init__(editor)
        self._label: Optional[LengthLabel] = None
        self._origin: Optional[QPointF] = None

    @property
    def is_active(self) -> bool:
        return self._label is not None

    @property
    def active_region(self) -> Optional[Region]:
        return self._label.region if self._label else None

    @property
    def dragging_label(self) -> Optional[LengthLabel]:
        return self._label

    def begin_drag(self, label: LengthLabel) -> None:
        """Bind a drag to a label chosen by the caller."""
        self._label = label
        self._origin = label.position

    def press(self, point: MappedPoint) -> bool:
        label = self._editor.label_at(point.to_qpointf(), point.region)
        if label is None:
            return False
        self.begin_drag(label)
        return True

    def move(self, point: MappedPoint) -> bool:
        if self._label is None or point.region != self._label.region:
            return False

        self._label.move_to(point.x, point.y)
        self._editor.model.metadata.touch()
        self._editor.notify_changed()
        return True

    def release(self) -> bool:
        label, origin = self._label, self._origin
        self._label = None
        self._origin = None
        if label is None:
            return False

        if origin is not None and origin != label.position:
            self._editor.commit(
                MoveLabelCommand(label, origin, label.position, self._editor.notify_changed)
            )
        else:
            self._editor.emitter.emit_deferred(self._editor.model)
        return True

    def cancel(self) -> None:
        self._label = None
        self._origin = None


@dataclass
class RotationGrab:
    """State bound by grabbing a rotation handle."""

    path: DrawingPath
    region: Region
    base_angle: float
    grab_point: QPointF
    original_points: List[QPointF]
    original_angle: Optional[float]


class RotateHandler(GestureHandler):
    """
    Rotates template paths around their anchor by dragging the end handle.

    Geometry is always recomputed from the template's original offsets so
    repeated rotation never accumulates floating point drift.
    """

    mode = EditorMode.ROTATE

    def __init__(self, editor: LashMapEditor) -> None:
        super().__init__(editor)
        self._grab: Optional[RotationGrab] = None

    @property
    def is_active(self) -> bool:
        return self._grab is not None

    @property
    def active_region(self) -> Optional[Region]:
        return self._grab.region if self._grab else None

    @property
    def grab(self) -> Optional[RotationGrab]:
        return self._grab

    def press(self, point: MappedPoint) -> bool:
        path = self._editor.rotation_handle_at(point.to_qpointf(), point.region)
        if path is None:
            return False

        current_angle = angle_degrees(path.start, path.end)
        self._grab = RotationGrab(
            path=path,
            region=point.region,
            base_angle=current_angle - (path.rotation_angle or 0.0),
            grab_point=point.to_qpointf(),
            original_points=[QPointF(p) for p in path.points],
            original_angle=path.rotation_angle,
        )
        return True

    def move(self, point: MappedPoint) -> bool:
        grab = self._grab
        if grab is None or point.region != grab.region:
            return False

        path = grab.path
        if not path.is_rotatable:
            return False

        current_angle = angle_degrees(path.start, point.to_qpointf())
        total = current_angle - grab.base_angle
        path.points = rotate_about_anchor(self.unrotated_points(path), total)
        path.rotation_angle = total

        model = self._editor.model
        model.metadata.touch()
        self._editor.notify_changed()
        self._editor.emitter.emit_debounced(model)
        return True

    def release(self) -> bool:
        grab, self._grab = self._grab, None
        if grab is None:
            return False

        emitter = self._editor.emitter
        emitter.cancel_debounce()
        path = grab.path
        if path.rotation_angle != grab.original_angle:
            self._editor.commit(
                RotatePathCommand(
                    path,
                    grab.original_points,
                    grab.original_angle,
                    path.points,
                    path.rotation_angle,
                    self._editor.notify_changed,
                ),
                emit="now",
            )
        else:
            emitter.emit_now(self._editor.model)
        return True

    def cancel(self) -> None:
        if self._grab is not None:
            self._editor.emitter.cancel_debounce()
            self._grab = None

    @staticmethod
    def unrotated_points(path: DrawingPath) -> List[QPointF]:
        """
        Points of the path in its original orientation, anchored at its start.

        Uses the catalog offsets when the template is known, otherwise
        reverses the stored rotation.
        """
        anchor = path.start
        template = get_template(path.template_id)
        if template is not None and len(template.points) == len(path.points):
            return template.translate(anchor.x(), anchor.y())

        angle = path.rotation_angle or 0.0
        return [QPointF(anchor)] + [rotate_point(p, anchor, -angle) for p in path.points[1:]]


class EraseHandler(GestureHandler):
    """Deletes the label or stroke under a single press."""

    mode = EditorMode.ERASE

    def press(self, point: MappedPoint) -> bool:
        pos = point.to_qpointf()

        label = self._editor.label_at(pos)
        if label is not None:
            return self._editor.remove_label(label.id)

        hit = self._editor.path_at(pos)
        if hit is None:
            return False

        region, index = hit
        return self._editor.erase_path(region, index)


def path_hit(path: DrawingPath, pos: QPointF, tolerance: float) -> bool:
    """Hit-test a point against the rendered stroke of a path."""
    return polyline_distance(pos, path.points) <= path.stroke_width / 2 + tolerance


def label_hit(label: LengthLabel, pos: QPointF, tolerance: float) -> bool:
    """Hit-test a point against a label's text box."""
    return label_rect(label.text, label.x, label.y, tolerance).contains(pos)


def handle_hit(path: DrawingPath, pos: QPointF, radius: float) -> bool:
    """Hit-test a point against a path's rotation handle."""
    return path.is_rotatable and distance(path.end, pos) <= radius


def find_path(
    paths_by_region: List[Tuple[Region, List[DrawingPath]]],
    pos: QPointF,
    tolerance: float
) -> Optional[Tuple[Region, int]]:
    """Topmost path under pos, searching regions in reverse draw order."""
    for region, paths in reversed(paths_by_region):
        for index in range(len(paths) - 1, -1, -1):
            if path_hit(paths[index], pos, tolerance):
                return region, index
    return None
