"""Lash map editor: the headless editing core behind the canvas widget."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

from PyQt6.QtCore import QObject, QPointF, QRectF, pyqtSignal

from .config import UNDO_POLICY_CHRONOLOGICAL, EditorConfig
from .coordinates import CoordinateMapper, MappedPoint
from .geometry import LABEL_PADDING
from .gestures import (
    EraseHandler, FreeDrawHandler, GestureHandler, LabelDragHandler,
    RotateHandler, TemplatePlacementHandler, find_path, handle_hit, label_hit
)
from .models import (
    AnnotationSnapshot, DrawingPath, LengthLabel, Region, utc_timestamp
)
from .modes import EditorMode, ModeController
from .persistence import SaveCallback, SnapshotEmitter
from .templates import get_template
from .undo_redo import (
    AddItemCommand, BatchCommand, ClearCollectionsCommand, Command, RemoveItemCommand,
    UndoRedoManager
)

logger = logging.getLogger(__name__)


class LashMapEditor(QObject):
    """
    Editing core for a two-eye lash map.

    Receives pointer events, maps them into the logical 800x400 viewport,
    routes them to the gesture handler of the current mode and hands
    snapshots of the drawing to the save callback.

    Signals:
        changed: Model or in-flight gesture changed, repaint needed
        snapshot_ready: A snapshot was delivered (AnnotationSnapshot)
        history_changed: Undo/redo availability changed
    """

    changed = pyqtSignal()
    snapshot_ready = pyqtSignal(object)
    history_changed = pyqtSignal()

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        initial_data: Optional[AnnotationSnapshot] = None,
        read_only: bool = False,
        background_image_ref: Optional[str] = None,
        on_save: Optional[SaveCallback] = None,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self.config = config or EditorConfig()
        self.mapper = CoordinateMapper(self.config.canvas_width, self.config.canvas_height)
        self._read_only = read_only
        self._surface: Optional[QRectF] = None
        self._initial_data: Optional[AnnotationSnapshot] = None

        self.selected_template_id: Optional[str] = None
        self.selected_color = self.config.default_color
        self.stroke_width = float(self.config.stroke_width)

        self.emitter = SnapshotEmitter(on_save, self.config.rotation_save_delay_ms, self)
        self.emitter.snapshot_ready.connect(self.snapshot_ready)

        self.history = UndoRedoManager(self.config.max_history_entries)
        self.history.state_changed.connect(self.history_changed)

        self.modes = ModeController(self)
        self.free_draw = FreeDrawHandler(self)
        self.template_placement = TemplatePlacementHandler(self)
        self.label_drag = LabelDragHandler(self)
        self.rotate = RotateHandler(self)
        self.erase = EraseHandler(self)
        for handler in (
            self.template_placement, self.label_drag, self.free_draw, self.rotate, self.erase
        ):
            self.modes.register(handler)
        self.modes.mode_changed.connect(lambda _mode: self.notify_changed())

        self.model = AnnotationSnapshot(background_image_ref=background_image_ref)
        self.model.metadata.created = utc_timestamp()
        if initial_data is not None:
            self.set_initial_data(initial_data)

    # === State ===

    @property
    def read_only(self) -> bool:
        return self._read_only

    def set_read_only(self, read_only: bool) -> None:
        """Enable or disable all interaction; geometry keeps rendering."""
        if read_only and not self._read_only:
            self.modes.cancel_gestures()
        self._read_only = read_only
        self.notify_changed()

    @property
    def mode(self) -> EditorMode:
        return self.modes.mode

    def set_mode(self, mode: EditorMode) -> bool:
        """Switch tool mode; refused while a gesture is in flight."""
        return self.modes.set_mode(mode)

    @property
    def is_chronological_undo(self) -> bool:
        return self.config.undo_policy == UNDO_POLICY_CHRONOLOGICAL

    @property
    def current_path(self) -> Optional[DrawingPath]:
        """Freehand stroke currently being drawn."""
        return self.free_draw.current_path

    @property
    def surface(self) -> Optional[QRectF]:
        return self._surface

    def set_surface(self, surface: Optional[QRectF]) -> None:
        """Set the on-screen rectangle the logical viewport is drawn into."""
        self._surface = QRectF(surface) if surface is not None else None

    def select_template(self, template_id: Optional[str]) -> bool:
        """
        Choose the template placed by presses in template mode.

        Args:
            template_id: Catalog id, or None to deselect

        Returns:
            True if the selection was applied
        """
        if template_id is not None and get_template(template_id) is None:
            logger.warning(f"Unknown template id: {template_id}")
            return False
        self.selected_template_id = template_id
        return True

    def set_color(self, color: str) -> None:
        self.selected_color = color

    def set_stroke_width(self, width: float) -> None:
        self.stroke_width = float(width)

    def snapshot(self) -> AnnotationSnapshot:
        """Independent copy of the current drawing."""
        return self.model.copy()

    def set_initial_data(self, data: Optional[AnnotationSnapshot]) -> bool:
        """
        Hydrate from an external record.

        The model is replaced, never merged, whenever a different object is
        passed in. Passing the same object again does nothing.

        Returns:
            True if the model was replaced
        """
        if data is None or data is self._initial_data:
            return False

        self._initial_data = data
        self.modes.cancel_gestures()
        self.emitter.cancel_debounce()
        background = self.model.background_image_ref
        self.model = data.copy()
        if self.model.background_image_ref is None:
            self.model.background_image_ref = background
        self.history.clear()
        logger.info(
            f"Loaded lash map with {self.model.path_count} lines "
            f"and {self.model.label_count} labels"
        )
        self.notify_changed()
        return True

    def set_background_image_ref(self, ref: Optional[str]) -> None:
        """Set the opaque reference of the image rendered behind the strokes."""
        self.model.background_image_ref = ref
        self.notify_changed()

    def set_on_save(self, on_save: Optional[SaveCallback]) -> None:
        self.emitter.set_on_save(on_save)

    def dispose(self) -> None:
        """Tear down: cancel gestures and make sure nothing is emitted afterwards."""
        self.modes.cancel_gestures()
        self.emitter.dispose()

    # === Pointer input ===

    def map_event(self, event: Any) -> Optional[MappedPoint]:
        return self.mapper.map_event(event, self._surface)

    def press(self, event: Any) -> bool:
        """Pointer down on the surface."""
        if self._read_only:
            return False

        # A press without a preceding release ends the abandoned gesture
        if self.modes.is_gesture_active:
            self.release()

        point = self.map_event(event)
        handler = self.modes.active_handler
        if point is None or handler is None:
            return False
        return handler.press(point)

    def move(self, event: Any) -> bool:
        """Pointer moved over the surface."""
        if self._read_only:
            return False

        handler = self._active_gesture_handler()
        if handler is None:
            return False

        point = self.map_event(event)
        if point is None:
            return False
        return handler.move(point)

    def release(self, event: Any = None) -> bool:
        """Pointer up; ends the in-flight gesture."""
        handler = self._active_gesture_handler()
        if handler is None:
            return False
        return handler.release()

    def leave(self) -> bool:
        """Pointer left the surface; treated as a release."""
        return self.release()

    def _active_gesture_handler(self) -> Optional[GestureHandler]:
        handler = self.modes.active_handler
        if handler is not None and handler.is_active:
            return handler
        return None

    # === Hit-testing ===

    def label_at(self, pos: QPointF, region: Optional[Region] = None) -> Optional[LengthLabel]:
        """Topmost label whose text box contains pos."""
        regions: Iterable[Region] = (region,) if region is not None else (Region.RIGHT, Region.LEFT)
        for current in regions:
            for label in reversed(self.model.labels_for(current)):
                if label_hit(label, pos, LABEL_PADDING):
                    return label
        return None

    def path_at(self, pos: QPointF) -> Optional[Tuple[Region, int]]:
        """Region and index of the topmost stroke under pos."""
        return find_path(
            [(Region.LEFT, self.model.left_paths), (Region.RIGHT, self.model.right_paths)],
            pos,
            self.config.hit_tolerance,
        )

    def rotation_handle_at(self, pos: QPointF, region: Region) -> Optional[DrawingPath]:
        """Template path in region whose end handle is under pos."""
        radius = self.config.handle_radius + self.config.hit_tolerance
        for path in reversed(self.model.paths_for(region)):
            if handle_hit(path, pos, radius):
                return path
        return None

    # === Mutations ===

    def commit(self, command: Command, emit: Optional[str] = "deferred") -> None:
        """
        Apply a completed mutation and hand a snapshot to the save callback.

        Args:
            command: Mutation to apply
            emit: "deferred" for the next tick, "now" for immediate
                delivery, or None to skip emission
        """
        if self.is_chronological_undo:
            self.history.execute(command)
        else:
            command.execute()

        self.model.metadata.touch()
        self.notify_changed()

        if emit == "deferred":
            self.emitter.emit_deferred(self.model)
        elif emit == "now":
            self.emitter.emit_now(self.model)

    def notify_changed(self) -> None:
        self.changed.emit()

    def add_length_label(
        self,
        length: int,
        regions: Optional[Iterable[Region]] = None
    ) -> List[LengthLabel]:
        """
        Add a length label at the centre of each target region.

        Args:
            length: Lash length in millimeters (8-18)
            regions: Target regions, both by default

        Returns:
            The labels that were added
        """
        if self._read_only:
            return []
        if not LengthLabel.is_valid_length(length):
            logger.warning(f"Ignoring label with invalid length: {length!r}")
            return []

        targets = [Region(r) for r in regions] if regions is not None else [Region.LEFT, Region.RIGHT]
        added = []
        commands: List[Command] = []
        for region in targets:
            center = self.mapper.region_center(region)
            label = LengthLabel(region=region, length=length, x=center.x(), y=center.y())
            commands.append(
                AddItemCommand(self.model.labels_for(region), label, f"Add {label.text} Label")
            )
            added.append(label)

        # One call is one undo step, however many eyes receive the label
        if commands:
            self.commit(BatchCommand(
                commands, f"Add {added[0].text} Label", self.notify_changed
            ))
        return added

    def remove_label(self, label_id: str) -> bool:
        """Delete a label by id from whichever region holds it."""
        if self._read_only:
            return False

        for region in (Region.LEFT, Region.RIGHT):
            labels = self.model.labels_for(region)
            for index, label in enumerate(labels):
                if label.id == label_id:
                    if self.label_drag.dragging_label is label:
                        self.label_drag.cancel()
                    self.commit(RemoveItemCommand(
                        labels, label, index, f"Erase {label.text} Label", self.notify_changed
                    ))
                    return True

        logger.debug(f"No label with id {label_id}")
        return False

    def erase_path(self, region: Region, index: int) -> bool:
        """Delete a stroke by region and index."""
        if self._read_only:
            return False

        paths = self.model.paths_for(region)
        if not 0 <= index < len(paths):
            return False

        path = paths[index]
        grab = self.rotate.grab
        if grab is not None and grab.path is path:
            self.rotate.cancel()
        self.commit(RemoveItemCommand(paths, path, index, "Erase Line", self.notify_changed))
        return True

    def undo(self) -> bool:
        """
        Undo according to the configured policy.

        The "priority" policy removes the last element of the first
        non-empty collection in the order right labels, right lines, left
        labels, left lines. The "chronological" policy steps back through
        the command journal.

        Returns:
            True if anything was undone
        """
        if self._read_only:
            return False

        self.modes.cancel_gestures()

        if self.is_chronological_undo:
            undone = self.history.undo()
        else:
            undone = False
            for items in (
                self.model.right_labels,
                self.model.right_paths,
                self.model.left_labels,
                self.model.left_paths,
            ):
                if items:
                    items.pop()
                    undone = True
                    break

        self.model.metadata.touch()
        self.notify_changed()
        return undone

    def redo(self) -> bool:
        """Redo the last undone command (chronological policy only)."""
        if self._read_only or not self.is_chronological_undo:
            return False

        self.modes.cancel_gestures()
        redone = self.history.redo()
        if redone:
            self.model.metadata.touch()
            self.notify_changed()
        return redone

    def can_undo(self) -> bool:
        if self.is_chronological_undo:
            return self.history.can_undo()
        return not self.model.is_empty

    def can_redo(self) -> bool:
        return self.is_chronological_undo and self.history.can_redo()

    def clear_region(self, region: Region) -> None:
        """
        Empty one region's lines and labels.

        No snapshot is emitted; the caller saves separately.
        """
        if self._read_only:
            return

        region = Region(region)
        self.modes.cancel_gestures(region)
        command = ClearCollectionsCommand(
            [self.model.paths_for(region), self.model.labels_for(region)],
            f"Clear {region.value.title()} Eye",
            self.notify_changed,
        )
        self.commit(command, emit=None)

    def clear_all(self) -> None:
        """Empty both regions and emit a snapshot immediately."""
        if self._read_only:
            return

        self.modes.cancel_gestures()
        command = ClearCollectionsCommand(
            [
                self.model.left_paths,
                self.model.right_paths,
                self.model.left_labels,
                self.model.right_labels,
            ],
            "Clear All",
            self.notify_changed,
        )
        self.commit(command, emit="now")
