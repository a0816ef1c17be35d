"""Pytest configuration and fixtures."""

import os
import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Run Qt without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication for tests that need it."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])

    yield app


@pytest.fixture
def saved():
    """Collect snapshots handed to the save callback."""
    return []


@pytest.fixture
def editor(qapp, saved):
    """Editor on an 800x400 surface mapped 1:1 to the logical canvas."""
    from PyQt6.QtCore import QRectF
    from lashmap.core.editor import LashMapEditor

    editor = LashMapEditor(on_save=saved.append)
    editor.set_surface(QRectF(0, 0, 800, 400))
    yield editor
    editor.dispose()


@pytest.fixture
def sample_snapshot_dict():
    """A stored lash map drawing as the client records hold it."""
    return {
        "leftEye": [
            {
                "eye": "left",
                "points": [{"x": 150, "y": 120}, {"x": 150, "y": 200}],
                "color": "#C2185B",
                "strokeWidth": 2,
                "type": "template",
                "templateId": "medium",
            },
        ],
        "rightEye": [
            {
                "eye": "right",
                "points": [{"x": 500, "y": 100}, {"x": 540, "y": 180}],
                "color": "#1565C0",
                "strokeWidth": 3,
            },
        ],
        "leftEyeLabels": [
            {"eye": "left", "length": 10, "x": 200, "y": 200, "id": "label-a"},
        ],
        "rightEyeLabels": [],
        "backgroundImageUrl": "https://example.com/eyes.png",
        "metadata": {
            "created": "2026-01-02T10:00:00.000Z",
            "updated": "2026-01-02T10:05:00.000Z",
            "style": "classic",
        },
    }


@pytest.fixture
def process_events(qapp):
    """Run the Qt event loop for a while so queued timers fire."""
    from PyQt6.QtTest import QTest

    def _process(ms: int = 20) -> None:
        QTest.qWait(ms)

    return _process
