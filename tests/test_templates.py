"""Tests for the template catalog."""

import dataclasses

import pytest

from lashmap.core.templates import TEMPLATE_CATALOG, get_template, template_ids


class TestTemplateCatalog:
    """Tests for the premade templates."""

    def test_catalog_order(self):
        """Test the templates offered, in order."""
        assert template_ids() == [
            "short", "medium", "long",
            "diagonal-right", "diagonal-left",
            "curve-left", "curve-right",
        ]

    def test_all_templates_anchor_at_origin(self):
        """Test that every template starts at its anchor."""
        for template in TEMPLATE_CATALOG:
            assert template.points[0] == (0, 0)
            assert len(template.points) >= 2

    def test_long_line(self):
        """Test the full height vertical line."""
        assert get_template("long").points == ((0, 0), (0, 200))

    def test_diagonals_are_mirrored(self):
        """Test that the 30 degree variants mirror each other."""
        right = get_template("diagonal-right").points[1]
        left = get_template("diagonal-left").points[1]

        assert right == (-left[0], left[1])

    def test_unknown_template(self):
        """Test looking up an unknown or missing id."""
        assert get_template("zigzag") is None
        assert get_template(None) is None

    def test_templates_are_immutable(self):
        """Test that catalog entries cannot be modified."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            get_template("short").points = ((0, 0), (0, 1))

    def test_translate_returns_new_points(self):
        """Test that translation copies offsets to the anchor."""
        template = get_template("curve-left")

        points = template.translate(100, 50)
        points[1].setX(0)

        assert [(p.x(), p.y()) for p in template.translate(100, 50)] == [
            (100, 50), (80, 90), (100, 130)
        ]
        assert template.points[1] == (-20, 40)
