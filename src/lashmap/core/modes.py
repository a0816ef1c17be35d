"""Editor tool modes and the controller that selects the live gesture handler."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .models import Region

if TYPE_CHECKING:
    from .gestures import GestureHandler

logger = logging.getLogger(__name__)


class EditorMode(str, Enum):
    """Tool mode; exactly one gesture handler is live per mode."""

    TEMPLATE = "template"
    LABEL = "label"
    DRAW = "draw"
    ROTATE = "rotate"
    ERASE = "erase"


DEFAULT_MODE = EditorMode.TEMPLATE


class ModeController(QObject):
    """
    Single-selection state machine over the editor modes.

    Switching modes never touches geometry. A switch requested while a
    gesture is in flight is refused until that gesture is released or
    cancelled.
    """

    mode_changed = pyqtSignal(object)  # Emits EditorMode

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._mode = DEFAULT_MODE
        self._handlers: Dict[EditorMode, GestureHandler] = {}

    @property
    def mode(self) -> EditorMode:
        return self._mode

    def register(self, handler: GestureHandler) -> None:
        """Register the handler serving its mode."""
        self._handlers[handler.mode] = handler

    def handler_for(self, mode: EditorMode) -> Optional[GestureHandler]:
        return self._handlers.get(EditorMode(mode))

    @property
    def active_handler(self) -> Optional[GestureHandler]:
        """Handler wired to the pointer stream in the current mode."""
        return self._handlers.get(self._mode)

    @property
    def is_gesture_active(self) -> bool:
        return any(handler.is_active for handler in self._handlers.values())

    def set_mode(self, mode: EditorMode) -> bool:
        """
        Switch the active mode.

        Args:
            mode: Mode to activate

        Returns:
            True if the mode is now active, False if the switch was refused
        """
        mode = EditorMode(mode)
        if mode == self._mode:
            return True

        if self.is_gesture_active:
            logger.debug(f"Mode switch to '{mode.value}' refused during an active gesture")
            return False

        self._mode = mode
        logger.debug(f"Mode changed to '{mode.value}'")
        self.mode_changed.emit(mode)
        return True

    def cancel_gestures(self, region: Optional[Region] = None) -> None:
        """
        Cancel in-flight gestures.

        Args:
            region: Only cancel gestures locked to this region, or all if None
        """
        for handler in self._handlers.values():
            if not handler.is_active:
                continue
            if region is None or handler.active_region == region:
                handler.cancel()
