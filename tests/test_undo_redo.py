"""Tests for the undo/redo journal."""

from PyQt6.QtCore import QPointF

from lashmap.core.models import DrawingPath, LengthLabel, PathKind, Region
from lashmap.core.undo_redo import (
    AddItemCommand,
    BatchCommand,
    ClearCollectionsCommand,
    MoveLabelCommand,
    RemoveItemCommand,
    RotatePathCommand,
    UndoRedoManager,
)


def make_path(x=100.0):
    return DrawingPath(
        region=Region.LEFT,
        points=[QPointF(x, 100), QPointF(x, 150)],
        kind=PathKind.TEMPLATE,
        template_id="short",
    )


class TestCommands:
    """Tests for the individual commands."""

    def test_add_item(self):
        """Test appending and removing an item."""
        items = []
        path = make_path()
        command = AddItemCommand(items, path, "Add Short Line")

        command.execute()
        assert items == [path]

        command.undo()
        assert items == []

    def test_add_item_uses_identity(self):
        """Test that undo removes only the added object, not equal ones."""
        first = make_path()
        second = make_path()
        items = [first]
        command = AddItemCommand(items, second, "Add Short Line")

        command.execute()
        command.undo()

        assert len(items) == 1
        assert items[0] is first

    def test_remove_item_restores_index(self):
        """Test that undoing an erase puts the item back in place."""
        paths = [make_path(100), make_path(150), make_path(200)]
        items = list(paths)
        command = RemoveItemCommand(items, paths[1], 1, "Erase Line")

        command.execute()
        assert items == [paths[0], paths[2]]

        command.undo()
        assert [p is q for p, q in zip(items, paths)] == [True, True, True]

    def test_rotate_path(self):
        """Test applying and reverting a rotation."""
        path = make_path()
        old_points = [QPointF(p) for p in path.points]
        new_points = [QPointF(100, 100), QPointF(150, 100)]
        command = RotatePathCommand(path, old_points, None, new_points, -90.0)

        command.execute()
        assert path.points[1] == QPointF(150, 100)
        assert path.rotation_angle == -90.0

        command.undo()
        assert path.points[1] == QPointF(100, 150)
        assert path.rotation_angle is None

    def test_rotate_path_owns_its_points(self):
        """Test that later edits to the path do not alter the recorded state."""
        path = make_path()
        new_points = [QPointF(100, 100), QPointF(150, 100)]
        command = RotatePathCommand(path, path.points, None, new_points, -90.0)

        command.execute()
        path.points[1].setX(0)
        command.undo()
        command.execute()

        assert path.points[1] == QPointF(150, 100)

    def test_move_label(self):
        """Test moving a label back and forth."""
        label = LengthLabel(region=Region.RIGHT, length=11, x=600, y=200)
        command = MoveLabelCommand(label, QPointF(600, 200), QPointF(650, 120))

        command.execute()
        assert (label.x, label.y) == (650, 120)
        assert command.description == "Move 11mm Label"

        command.undo()
        assert (label.x, label.y) == (600, 200)

    def test_clear_collections(self):
        """Test emptying and restoring several collections."""
        paths = [make_path()]
        labels = [LengthLabel(region=Region.LEFT, length=8, x=200, y=200)]
        command = ClearCollectionsCommand([paths, labels], "Clear Left Eye")

        command.execute()
        assert paths == [] and labels == []

        command.undo()
        assert len(paths) == 1
        assert len(labels) == 1

    def test_on_change_called(self):
        """Test that commands report every change."""
        calls = []
        command = AddItemCommand([], make_path(), "Add", lambda: calls.append(1))

        command.execute()
        command.undo()

        assert len(calls) == 2


class TestUndoRedoManager:
    """Tests for UndoRedoManager."""

    def test_initial_state(self, qapp):
        """Test a fresh manager has nothing to undo or redo."""
        manager = UndoRedoManager()

        assert not manager.can_undo()
        assert not manager.can_redo()
        assert manager.undo_description() == ""
        assert manager.undo() is False
        assert manager.redo() is False

    def test_execute_undo_redo(self, qapp):
        """Test the basic journal round."""
        manager = UndoRedoManager()
        items = []
        path = make_path()

        manager.execute(AddItemCommand(items, path, "Add Short Line"))
        assert items == [path]
        assert manager.undo_description() == "Add Short Line"

        assert manager.undo() is True
        assert items == []
        assert manager.redo_description() == "Add Short Line"

        assert manager.redo() is True
        assert items == [path]

    def test_new_command_clears_redo(self, qapp):
        """Test that executing after an undo drops the redo branch."""
        manager = UndoRedoManager()
        items = []

        manager.execute(AddItemCommand(items, make_path(100), "First"))
        manager.undo()
        manager.execute(AddItemCommand(items, make_path(200), "Second"))

        assert not manager.can_redo()
        assert manager.undo_count == 1

    def test_history_limit(self, qapp):
        """Test that the oldest commands are dropped beyond the limit."""
        manager = UndoRedoManager(max_history=3)
        items = []

        for index in range(5):
            manager.execute(AddItemCommand(items, make_path(index * 10), f"Add {index}"))

        assert manager.undo_count == 3

        manager.set_max_history(1)
        assert manager.undo_count == 1
        assert manager.undo_description() == "Add 4"

    def test_state_changed_signal(self, qapp):
        """Test that availability changes are signalled."""
        manager = UndoRedoManager()
        received = []
        manager.state_changed.connect(lambda: received.append(True))

        manager.execute(AddItemCommand([], make_path(), "Add"))
        manager.undo()
        manager.clear()

        assert len(received) == 3
        assert not manager.can_redo()


class TestBatchCommand:
    """Tests for BatchCommand."""

    def test_batch_is_one_undo_step(self, qapp):
        """Test that a batch is executed and undone as a whole."""
        manager = UndoRedoManager()
        left, right = [], []
        calls = []
        batch = BatchCommand(
            [
                AddItemCommand(left, LengthLabel(region=Region.LEFT, length=12, x=200, y=200), "Add"),
                AddItemCommand(right, LengthLabel(region=Region.RIGHT, length=12, x=600, y=200), "Add"),
            ],
            "Add 12mm Label",
            lambda: calls.append(1),
        )

        manager.execute(batch)
        assert (len(left), len(right)) == (1, 1)
        assert manager.undo_count == 1
        assert manager.undo_description() == "Add 12mm Label"

        manager.undo()
        assert (left, right) == ([], [])
        assert len(calls) == 2
