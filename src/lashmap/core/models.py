"""Data models for lash map drawings."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from PyQt6.QtCore import QPointF

logger = logging.getLogger(__name__)

# Lash lengths offered for labels, in millimeters
LASH_LENGTHS = tuple(range(8, 19))
MIN_LASH_LENGTH = LASH_LENGTHS[0]
MAX_LASH_LENGTH = LASH_LENGTHS[-1]

DEFAULT_COLOR = "#C2185B"
DEFAULT_STROKE_WIDTH = 2.0


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string with a 'Z' suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Region(str, Enum):
    """One of the two independent halves of the canvas."""

    LEFT = "left"
    RIGHT = "right"


class PathKind(str, Enum):
    """How a path came to exist."""

    DRAWN = "drawn"
    TEMPLATE = "template"


@dataclass
class DrawingPath:
    """
    A single stroke on one eye.

    Drawn paths are always straightened to two points when finalized.
    Template paths keep the template's point count and remember the
    template id so rotation can be recomputed from the original offsets.
    """

    region: Region
    points: List[QPointF]
    color: str = DEFAULT_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH
    kind: PathKind = PathKind.DRAWN
    template_id: Optional[str] = None
    rotation_angle: Optional[float] = None

    def __post_init__(self) -> None:
        """Normalize enum fields and point types."""
        self.region = Region(self.region)
        self.kind = PathKind(self.kind)
        self.points = [
            QPointF(p) if isinstance(p, QPointF) else QPointF(p[0], p[1])
            for p in self.points
        ]

    @property
    def start(self) -> Optional[QPointF]:
        """The anchor point, or None for an empty path."""
        return self.points[0] if self.points else None

    @property
    def end(self) -> Optional[QPointF]:
        """The terminal point, used as the rotation handle."""
        return self.points[-1] if self.points else None

    @property
    def is_renderable(self) -> bool:
        """A stroke needs at least two points to draw a segment."""
        return len(self.points) >= 2

    @property
    def is_rotatable(self) -> bool:
        """Only template paths can be rotated."""
        return self.kind == PathKind.TEMPLATE and self.is_renderable

    def copy(self) -> DrawingPath:
        """Return an independent copy of this path."""
        return DrawingPath(
            region=self.region,
            points=[QPointF(p) for p in self.points],
            color=self.color,
            stroke_width=self.stroke_width,
            kind=self.kind,
            template_id=self.template_id,
            rotation_angle=self.rotation_angle,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored JSON structure."""
        data: Dict[str, Any] = {
            "eye": self.region.value,
            "points": [{"x": p.x(), "y": p.y()} for p in self.points],
            "color": self.color,
            "strokeWidth": self.stroke_width,
            "type": self.kind.value,
        }
        if self.template_id is not None:
            data["templateId"] = self.template_id
        if self.rotation_angle is not None:
            data["rotationAngle"] = self.rotation_angle
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], region: Optional[Region] = None) -> DrawingPath:
        """
        Create a path from its stored JSON structure.

        Args:
            data: Stored path dictionary
            region: Region of the collection the path was stored in; wins
                over the path's own 'eye' field

        Returns:
            New DrawingPath instance
        """
        return cls(
            region=region or Region(data.get("eye", Region.LEFT.value)),
            points=[QPointF(p.get("x", 0.0), p.get("y", 0.0)) for p in data.get("points", [])],
            color=data.get("color", DEFAULT_COLOR),
            stroke_width=data.get("strokeWidth", DEFAULT_STROKE_WIDTH),
            kind=PathKind(data.get("type", PathKind.DRAWN.value)),
            template_id=data.get("templateId"),
            rotation_angle=data.get("rotationAngle"),
        )


@dataclass
class LengthLabel:
    """A draggable lash length annotation, positioned within one region."""

    region: Region
    length: int
    x: float
    y: float
    id: str = field(default_factory=lambda: LengthLabel.generate_id())

    def __post_init__(self) -> None:
        self.region = Region(self.region)

    @staticmethod
    def generate_id() -> str:
        """Generate a unique label id."""
        return f"label-{uuid.uuid4().hex}"

    @staticmethod
    def is_valid_length(length: Any) -> bool:
        """Check that a length is a whole number of millimeters in range."""
        return (
            isinstance(length, int)
            and not isinstance(length, bool)
            and MIN_LASH_LENGTH <= length <= MAX_LASH_LENGTH
        )

    @property
    def text(self) -> str:
        """Rendered label text."""
        return f"{self.length}mm"

    @property
    def position(self) -> QPointF:
        return QPointF(self.x, self.y)

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def copy(self) -> LengthLabel:
        return LengthLabel(region=self.region, length=self.length, x=self.x, y=self.y, id=self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eye": self.region.value,
            "length": self.length,
            "x": self.x,
            "y": self.y,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], region: Optional[Region] = None) -> LengthLabel:
        return cls(
            region=region or Region(data.get("eye", Region.LEFT.value)),
            length=int(data.get("length", MIN_LASH_LENGTH)),
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            id=data.get("id") or cls.generate_id(),
        )


@dataclass
class SnapshotMetadata:
    """Creation and modification timestamps plus any extra stored keys."""

    created: Optional[str] = None
    updated: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def touch(self) -> None:
        """Refresh the modification timestamp."""
        self.updated = utc_timestamp()

    def copy(self) -> SnapshotMetadata:
        return SnapshotMetadata(created=self.created, updated=self.updated, extra=dict(self.extra))

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        if self.created is not None:
            data["created"] = self.created
        if self.updated is not None:
            data["updated"] = self.updated
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> SnapshotMetadata:
        data = dict(data or {})
        created = data.pop("created", None)
        updated = data.pop("updated", None)
        return cls(created=created, updated=updated, extra=data)


@dataclass
class AnnotationSnapshot:
    """
    Full drawing state of both eyes.

    This is the unit of persistence handed to the save callback. The
    per-region lists are mutated in place by the editor so that undo
    commands holding references to them stay valid.
    """

    left_paths: List[DrawingPath] = field(default_factory=list)
    right_paths: List[DrawingPath] = field(default_factory=list)
    left_labels: List[LengthLabel] = field(default_factory=list)
    right_labels: List[LengthLabel] = field(default_factory=list)
    background_image_ref: Optional[str] = None
    metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)

    def paths_for(self, region: Region) -> List[DrawingPath]:
        """Get the live path list of a region."""
        return self.left_paths if Region(region) == Region.LEFT else self.right_paths

    def labels_for(self, region: Region) -> List[LengthLabel]:
        """Get the live label list of a region."""
        return self.left_labels if Region(region) == Region.LEFT else self.right_labels

    def find_label(self, label_id: str) -> Optional[LengthLabel]:
        """Find a label by id in either region."""
        for label in self.left_labels + self.right_labels:
            if label.id == label_id:
                return label
        return None

    @property
    def is_empty(self) -> bool:
        """True when neither region holds paths or labels."""
        return not (self.left_paths or self.right_paths or self.left_labels or self.right_labels)

    @property
    def path_count(self) -> int:
        return len(self.left_paths) + len(self.right_paths)

    @property
    def label_count(self) -> int:
        return len(self.left_labels) + len(self.right_labels)

    def copy(self) -> AnnotationSnapshot:
        """Return a deep, independent copy."""
        return AnnotationSnapshot(
            left_paths=[p.copy() for p in self.left_paths],
            right_paths=[p.copy() for p in self.right_paths],
            left_labels=[label.copy() for label in self.left_labels],
            right_labels=[label.copy() for label in self.right_labels],
            background_image_ref=self.background_image_ref,
            metadata=self.metadata.copy(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored JSON-compatible structure."""
        data: Dict[str, Any] = {
            "leftEye": [p.to_dict() for p in self.left_paths],
            "rightEye": [p.to_dict() for p in self.right_paths],
            "leftEyeLabels": [label.to_dict() for label in self.left_labels],
            "rightEyeLabels": [label.to_dict() for label in self.right_labels],
            "metadata": self.metadata.to_dict(),
        }
        if self.background_image_ref is not None:
            data["backgroundImageUrl"] = self.background_image_ref
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> AnnotationSnapshot:
        """Create a snapshot from a stored structure, tolerating missing keys."""
        data = data or {}
        return cls(
            left_paths=[DrawingPath.from_dict(p, Region.LEFT) for p in data.get("leftEye") or []],
            right_paths=[DrawingPath.from_dict(p, Region.RIGHT) for p in data.get("rightEye") or []],
            left_labels=[
                LengthLabel.from_dict(l, Region.LEFT) for l in data.get("leftEyeLabels") or []
            ],
            right_labels=[
                LengthLabel.from_dict(l, Region.RIGHT) for l in data.get("rightEyeLabels") or []
            ],
            background_image_ref=data.get("backgroundImageUrl"),
            metadata=SnapshotMetadata.from_dict(data.get("metadata")),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> AnnotationSnapshot:
        return cls.from_dict(json.loads(text))
