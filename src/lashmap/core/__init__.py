"""Core editing logic for Lash Mapper."""

from .models import AnnotationSnapshot, DrawingPath, LengthLabel, PathKind, Region
from .config import EditorConfig, ConfigManager
from .coordinates import CoordinateMapper, MappedPoint
from .templates import TEMPLATE_CATALOG, Template, get_template
from .modes import EditorMode, ModeController
from .persistence import SnapshotEmitter
from .editor import LashMapEditor
from .lash_map_format import LashMapRecord, LashMapStore

__all__ = [
    "AnnotationSnapshot",
    "DrawingPath",
    "LengthLabel",
    "PathKind",
    "Region",
    "EditorConfig",
    "ConfigManager",
    "CoordinateMapper",
    "MappedPoint",
    "TEMPLATE_CATALOG",
    "Template",
    "get_template",
    "EditorMode",
    "ModeController",
    "SnapshotEmitter",
    "LashMapEditor",
    "LashMapRecord",
    "LashMapStore",
]
