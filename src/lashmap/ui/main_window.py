"""Main application window for Lash Mapper."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtGui import QAction, QActionGroup, QColor, QIcon, QPixmap
from PyQt6.QtWidgets import (
    QComboBox, QFileDialog, QLabel, QMainWindow, QMessageBox, QSpinBox,
    QStatusBar, QToolBar, QToolButton
)

from ..core.config import ConfigManager, EditorConfig, MAX_STROKE_WIDTH, MIN_STROKE_WIDTH
from ..core.editor import LashMapEditor
from ..core.lash_map_format import LashMapRecord, LashMapStore
from ..core.models import AnnotationSnapshot, LASH_LENGTHS, Region
from ..core.modes import EditorMode
from ..core.templates import TEMPLATE_CATALOG
from .canvas import LashMapCanvas

logger = logging.getLogger(__name__)

MODE_TITLES = {
    EditorMode.TEMPLATE: "Template Lines",
    EditorMode.LABEL: "Length Labels",
    EditorMode.DRAW: "Free Draw",
    EditorMode.ROTATE: "Rotate Lines",
    EditorMode.ERASE: "Erase Lines",
}


class MainWindow(QMainWindow):
    """
    Main application window for Lash Mapper.

    Hosts the canvas, the tool bar for modes, templates, lengths and
    colors, and saves the open lash map record on every emitted snapshot.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        super().__init__()
        self.config_manager = config_manager or ConfigManager()
        self.store: Optional[LashMapStore] = None
        self.record: Optional[LashMapRecord] = None

        self.editor = LashMapEditor(config=self.config, parent=self)
        self.editor.snapshot_ready.connect(self._on_snapshot)
        self.editor.history_changed.connect(self._update_undo_actions)
        self.editor.changed.connect(self._update_undo_actions)

        self._init_ui()

    @property
    def config(self) -> EditorConfig:
        return self.config_manager.config

    def _init_ui(self) -> None:
        """Initialize the user interface."""
        self.setWindowTitle("Lash Mapper")
        self.resize(1000, 600)

        self.canvas = LashMapCanvas(self.editor, self)
        self.setCentralWidget(self.canvas)

        self._create_status_bar()
        self._create_toolbar()
        self._create_menus()
        self._update_undo_actions()

    def _create_status_bar(self) -> None:
        """Create the status bar."""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.file_label = QLabel()
        self.status_bar.addPermanentWidget(self.file_label)

    def _create_toolbar(self) -> None:
        """Create the tool bar."""
        self.toolbar = QToolBar("Tools")
        self.toolbar.setObjectName("MainToolBar")
        self.addToolBar(self.toolbar)

        # Modes
        self.mode_group = QActionGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_actions = {}
        for mode, title in MODE_TITLES.items():
            action = QAction(title, self)
            action.setCheckable(True)
            action.setChecked(mode == self.editor.mode)
            action.triggered.connect(lambda _checked, m=mode: self._set_mode(m))
            self.mode_group.addAction(action)
            self.toolbar.addAction(action)
            self.mode_actions[mode] = action

        self.toolbar.addSeparator()

        # Templates
        self.template_combo = QComboBox()
        self.template_combo.addItem("Select template", None)
        for template in TEMPLATE_CATALOG:
            self.template_combo.addItem(template.name, template.id)
        self.template_combo.currentIndexChanged.connect(self._on_template_changed)
        self.toolbar.addWidget(self.template_combo)

        # Length labels
        self.length_combo = QComboBox()
        for length in LASH_LENGTHS:
            self.length_combo.addItem(f"{length}mm", length)
        self.toolbar.addWidget(self.length_combo)
        add_label_action = QAction("Add Label", self)
        add_label_action.triggered.connect(self._add_label)
        self.toolbar.addAction(add_label_action)

        self.toolbar.addSeparator()

        # Colors
        for color in self.config.palette:
            button = QToolButton()
            pixmap = QPixmap(16, 16)
            pixmap.fill(QColor(color))
            button.setIcon(QIcon(pixmap))
            button.setToolTip(color)
            button.clicked.connect(lambda _checked, c=color: self.editor.set_color(c))
            self.toolbar.addWidget(button)

        self.stroke_spin = QSpinBox()
        self.stroke_spin.setRange(MIN_STROKE_WIDTH, MAX_STROKE_WIDTH)
        self.stroke_spin.setValue(int(self.editor.stroke_width))
        self.stroke_spin.setSuffix("px")
        self.stroke_spin.valueChanged.connect(self.editor.set_stroke_width)
        self.toolbar.addWidget(self.stroke_spin)

        self.toolbar.addSeparator()

        # Undo/Redo
        self.undo_action = QAction("Undo", self)
        self.undo_action.setShortcut("Ctrl+Z")
        self.undo_action.triggered.connect(self.editor.undo)
        self.toolbar.addAction(self.undo_action)

        self.redo_action = QAction("Redo", self)
        self.redo_action.setShortcut("Ctrl+Shift+Z")
        self.redo_action.triggered.connect(self.editor.redo)
        self.toolbar.addAction(self.redo_action)

        # Clearing
        clear_left = QAction("Clear Left", self)
        clear_left.triggered.connect(lambda: self.editor.clear_region(Region.LEFT))
        self.toolbar.addAction(clear_left)

        clear_right = QAction("Clear Right", self)
        clear_right.triggered.connect(lambda: self.editor.clear_region(Region.RIGHT))
        self.toolbar.addAction(clear_right)

        clear_all = QAction("Clear All", self)
        clear_all.triggered.connect(self.editor.clear_all)
        self.toolbar.addAction(clear_all)

    def _create_menus(self) -> None:
        """Create the menu bar."""
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open Client File...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._open_file)
        file_menu.addAction(open_action)

        new_action = QAction("&New Lash Map", self)
        new_action.setShortcut("Ctrl+N")
        new_action.triggered.connect(self._new_map)
        file_menu.addAction(new_action)

        save_action = QAction("&Save", self)
        save_action.setShortcut("Ctrl+S")
        save_action.triggered.connect(self._save)
        file_menu.addAction(save_action)

        background_action = QAction("Set &Background Image...", self)
        background_action.triggered.connect(self._choose_background)
        file_menu.addAction(background_action)

    # === Actions ===

    def _set_mode(self, mode: EditorMode) -> None:
        if not self.editor.set_mode(mode):
            # Keep the tool bar in sync with the mode that stayed active
            self.mode_actions[self.editor.mode].setChecked(True)

    def _on_template_changed(self, index: int) -> None:
        self.editor.select_template(self.template_combo.itemData(index))

    def _add_label(self) -> None:
        self.editor.add_length_label(self.length_combo.currentData())

    def _update_undo_actions(self) -> None:
        self.undo_action.setEnabled(self.editor.can_undo())
        self.redo_action.setEnabled(self.editor.can_redo())
        self.redo_action.setVisible(self.editor.is_chronological_undo)

    def _open_file(self) -> None:
        """Open a client file and load its most recent lash map."""
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Client File", self.config.default_directory, "JSON files (*.json)"
        )
        if not path:
            return

        self.store = LashMapStore(Path(path))
        records = self.store.records
        self.record = records[-1] if records else None
        self.config_manager.update(default_directory=str(Path(path).parent))

        snapshot = self.record.snapshot() if self.record else AnnotationSnapshot()
        self.editor.set_initial_data(snapshot)
        self._update_file_label()

    def _new_map(self) -> None:
        """Start a new lash map in the open client file."""
        self.record = None
        self.editor.set_initial_data(AnnotationSnapshot())
        self._update_file_label()

    def _save(self) -> None:
        if self.store is None:
            path, _ = QFileDialog.getSaveFileName(
                self, "Save Client File", self.config.default_directory, "JSON files (*.json)"
            )
            if not path:
                return
            self.store = LashMapStore(Path(path))
        self._write_snapshot(self.editor.snapshot())

    def _choose_background(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Background Image", self.config.default_directory,
            "Images (*.png *.jpg *.jpeg *.webp)"
        )
        if path:
            self.editor.set_background_image_ref(path)

    def _on_snapshot(self, snapshot: AnnotationSnapshot) -> None:
        """Persist emitted snapshots when autosave is enabled."""
        if self.config.autosave and self.store is not None:
            self._write_snapshot(snapshot)

    def _write_snapshot(self, snapshot: AnnotationSnapshot) -> None:
        if self.store is None:
            return

        if self.record is None:
            self.record = LashMapRecord.from_snapshot(snapshot)
            self.store.add(self.record)
        else:
            self.record.update_snapshot(snapshot)

        if self.store.save():
            self.status_bar.showMessage("Lash map saved", 2000)
        else:
            QMessageBox.warning(self, "Save Failed", f"Could not write {self.store.path}")
        self._update_file_label()

    def _update_file_label(self) -> None:
        if self.store is None:
            self.file_label.setText("")
            return
        name = self.store.path.name
        if self.record is not None:
            name = f"{name} - {self.record.date} ({self.record.appointment_id})"
        self.file_label.setText(name)

    def closeEvent(self, event) -> None:
        self.editor.dispose()
        super().closeEvent(event)
