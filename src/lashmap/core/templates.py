"""Catalog of premade lash line templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from PyQt6.QtCore import QPointF


@dataclass(frozen=True)
class Template:
    """
    A named stroke shape defined as offsets from an anchor at (0, 0).

    Templates are shared, read-only data. Placed paths receive translated
    copies of the offsets, never the catalog entry itself.
    """

    id: str
    name: str
    points: Tuple[Tuple[float, float], ...]

    def translate(self, x: float, y: float) -> List[QPointF]:
        """Return new points for this template anchored at (x, y)."""
        return [QPointF(x + dx, y + dy) for dx, dy in self.points]


# Vertical lines sized for the 800x400 canvas; each eye area is about 400x400
TEMPLATE_CATALOG: Tuple[Template, ...] = (
    Template("short", "Short Line", ((0, 0), (0, 50))),
    Template("medium", "Medium Line", ((0, 0), (0, 80))),
    Template("long", "Long Line", ((0, 0), (0, 200))),
    Template("diagonal-right", "30° Right", ((0, 0), (115, 200))),
    Template("diagonal-left", "30° Left", ((0, 0), (-115, 200))),
    Template("curve-left", "Curve Left", ((0, 0), (-20, 40), (0, 80))),
    Template("curve-right", "Curve Right", ((0, 0), (20, 40), (0, 80))),
)

_TEMPLATES_BY_ID: Dict[str, Template] = {t.id: t for t in TEMPLATE_CATALOG}


def get_template(template_id: Optional[str]) -> Optional[Template]:
    """Look up a template by id."""
    if template_id is None:
        return None
    return _TEMPLATES_BY_ID.get(template_id)


def template_ids() -> List[str]:
    """Get all template ids in catalog order."""
    return [t.id for t in TEMPLATE_CATALOG]
