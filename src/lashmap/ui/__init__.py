"""UI components for Lash Mapper."""

from .canvas import LashMapCanvas
from .main_window import MainWindow

__all__ = [
    "LashMapCanvas",
    "MainWindow",
]
