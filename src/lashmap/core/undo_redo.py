"""Chronological undo/redo journal using the Command pattern."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from PyQt6.QtCore import QObject, QPointF, pyqtSignal

if TYPE_CHECKING:
    from .models import DrawingPath, LengthLabel

logger = logging.getLogger(__name__)


class Command(ABC):
    """Abstract base class for undoable commands."""

    @abstractmethod
    def execute(self) -> None:
        """Execute the command."""
        pass

    @abstractmethod
    def undo(self) -> None:
        """Undo the command."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the command."""
        pass


class AddItemCommand(Command):
    """Command for appending a path or label to a region collection."""

    def __init__(
        self,
        items: list,
        item: object,
        description: str,
        on_change: Optional[Callable[[], None]] = None
    ) -> None:
        self._items = items
        self._item = item
        self._description = description
        self._on_change = on_change

    def execute(self) -> None:
        if not any(existing is self._item for existing in self._items):
            self._items.append(self._item)
        if self._on_change:
            self._on_change()

    def undo(self) -> None:
        self._items[:] = [existing for existing in self._items if existing is not self._item]
        if self._on_change:
            self._on_change()

    @property
    def description(self) -> str:
        return self._description


class RemoveItemCommand(Command):
    """Command for erasing a path or label from a region collection."""

    def __init__(
        self,
        items: list,
        item: object,
        index: int,
        description: str,
        on_change: Optional[Callable[[], None]] = None
    ) -> None:
        self._items = items
        self._item = item
        self._index = index
        self._description = description
        self._on_change = on_change

    def execute(self) -> None:
        self._items[:] = [existing for existing in self._items if existing is not self._item]
        if self._on_change:
            self._on_change()

    def undo(self) -> None:
        if not any(existing is self._item for existing in self._items):
            self._items.insert(min(self._index, len(self._items)), self._item)
        if self._on_change:
            self._on_change()

    @property
    def description(self) -> str:
        return self._description


class RotatePathCommand(Command):
    """Command for a completed rotation of a template path."""

    def __init__(
        self,
        path: DrawingPath,
        old_points: Sequence[QPointF],
        old_angle: Optional[float],
        new_points: Sequence[QPointF],
        new_angle: Optional[float],
        on_change: Optional[Callable[[], None]] = None
    ) -> None:
        self._path = path
        self._old_points = [QPointF(p) for p in old_points]
        self._old_angle = old_angle
        self._new_points = [QPointF(p) for p in new_points]
        self._new_angle = new_angle
        self._on_change = on_change

    def execute(self) -> None:
        self._path.points = [QPointF(p) for p in self._new_points]
        self._path.rotation_angle = self._new_angle
        if self._on_change:
            self._on_change()

    def undo(self) -> None:
        self._path.points = [QPointF(p) for p in self._old_points]
        self._path.rotation_angle = self._old_angle
        if self._on_change:
            self._on_change()

    @property
    def description(self) -> str:
        return "Rotate Line"


class MoveLabelCommand(Command):
    """Command for a completed label drag."""

    def __init__(
        self,
        label: LengthLabel,
        old_position: QPointF,
        new_position: QPointF,
        on_change: Optional[Callable[[], None]] = None
    ) -> None:
        self._label = label
        self._old_position = QPointF(old_position)
        self._new_position = QPointF(new_position)
        self._on_change = on_change

    def execute(self) -> None:
        self._label.move_to(self._new_position.x(), self._new_position.y())
        if self._on_change:
            self._on_change()

    def undo(self) -> None:
        self._label.move_to(self._old_position.x(), self._old_position.y())
        if self._on_change:
            self._on_change()

    @property
    def description(self) -> str:
        return f"Move {self._label.text} Label"


class ClearCollectionsCommand(Command):
    """Command for emptying one or more region collections at once."""

    def __init__(
        self,
        collections: List[list],
        description: str,
        on_change: Optional[Callable[[], None]] = None
    ) -> None:
        self._collections = collections
        self._saved: List[list] = []
        self._description = description
        self._on_change = on_change

    def execute(self) -> None:
        self._saved = [list(items) for items in self._collections]
        for items in self._collections:
            items.clear()
        if self._on_change:
            self._on_change()

    def undo(self) -> None:
        for items, saved in zip(self._collections, self._saved):
            items[:] = saved
        if self._on_change:
            self._on_change()

    @property
    def description(self) -> str:
        return self._description


class BatchCommand(Command):
    """Command grouping several commands into a single undo step."""

    def __init__(
        self,
        commands: List[Command],
        description: str,
        on_change: Optional[Callable[[], None]] = None
    ) -> None:
        """
        Initialize the batch command.

        Args:
            commands: Commands to run in order; undone in reverse order
            description: Description of the whole batch
            on_change: Callback to execute once after the batch
        """
        self._commands = list(commands)
        self._description = description
        self._on_change = on_change

    def execute(self) -> None:
        for command in self._commands:
            command.execute()
        if self._on_change:
            self._on_change()

    def undo(self) -> None:
        for command in reversed(self._commands):
            command.undo()
        if self._on_change:
            self._on_change()

    @property
    def description(self) -> str:
        return self._description


class UndoRedoManager(QObject):
    """
    Manages undo/redo stacks for the editor.

    Emits signals when the undo/redo state changes so UI can update.
    """

    state_changed = pyqtSignal()  # Emitted when undo/redo availability changes

    def __init__(self, max_history: int = 100) -> None:
        """
        Initialize the undo/redo manager.

        Args:
            max_history: Maximum number of commands to keep in history
        """
        super().__init__()
        self._undo_stack: List[Command] = []
        self._redo_stack: List[Command] = []
        self._max_history = max(1, max_history)

    def execute(self, command: Command) -> None:
        """
        Execute a command and add it to the undo stack.

        Args:
            command: The command to execute
        """
        command.execute()
        self._undo_stack.append(command)

        # Clear redo stack when new command is executed
        self._redo_stack.clear()

        # Limit history size
        while len(self._undo_stack) > self._max_history:
            self._undo_stack.pop(0)

        logger.debug(f"Executed: {command.description}")
        self.state_changed.emit()

    def undo(self) -> bool:
        """
        Undo the last command.

        Returns:
            True if a command was undone
        """
        if not self._undo_stack:
            return False

        command = self._undo_stack.pop()
        command.undo()
        self._redo_stack.append(command)

        logger.debug(f"Undone: {command.description}")
        self.state_changed.emit()
        return True

    def redo(self) -> bool:
        """
        Redo the last undone command.

        Returns:
            True if a command was redone
        """
        if not self._redo_stack:
            return False

        command = self._redo_stack.pop()
        command.execute()
        self._undo_stack.append(command)

        logger.debug(f"Redone: {command.description}")
        self.state_changed.emit()
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return len(self._undo_stack) > 0

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return len(self._redo_stack) > 0

    def undo_description(self) -> str:
        """Get description of the command that would be undone."""
        if self._undo_stack:
            return self._undo_stack[-1].description
        return ""

    def redo_description(self) -> str:
        """Get description of the command that would be redone."""
        if self._redo_stack:
            return self._redo_stack[-1].description
        return ""

    def clear(self) -> None:
        """Clear all undo/redo history."""
        self._undo_stack.clear()
        self._redo_stack.clear()
        self.state_changed.emit()

    @property
    def undo_count(self) -> int:
        """Get the number of commands that can be undone."""
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        """Get the number of commands that can be redone."""
        return len(self._redo_stack)

    def set_max_history(self, max_history: int) -> None:
        """
        Update the maximum history size.

        Args:
            max_history: New maximum number of commands to keep
        """
        self._max_history = max(1, max_history)  # Ensure at least 1

        # Trim undo stack if necessary
        while len(self._undo_stack) > self._max_history:
            self._undo_stack.pop(0)

        self.state_changed.emit()
