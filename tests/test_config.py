"""Tests for configuration management."""

import pytest
from pathlib import Path
import tempfile

from lashmap.core.config import (
    DEFAULT_PALETTE,
    ConfigManager,
    EditorConfig,
)


class TestEditorConfig:
    """Tests for EditorConfig."""

    def test_default_config(self):
        """Test creating config with defaults."""
        config = EditorConfig()

        assert config.canvas_width == 800
        assert config.canvas_height == 400
        assert config.default_color == "#C2185B"
        assert config.palette == DEFAULT_PALETTE
        assert config.stroke_width == 2
        assert config.rotation_save_delay_ms == 500
        assert config.undo_policy == "priority"
        assert config.autosave is True

    def test_palette_not_shared(self):
        """Test that each config gets its own palette list."""
        first = EditorConfig()
        second = EditorConfig()

        first.palette.append("#000000")

        assert "#000000" not in second.palette

    def test_custom_config(self):
        """Test creating config with custom values."""
        config = EditorConfig(
            default_directory="/path/to/dir",
            stroke_width=4,
            undo_policy="chronological",
            hit_tolerance=10.0,
            autosave=False
        )

        assert config.default_directory == "/path/to/dir"
        assert config.stroke_width == 4
        assert config.undo_policy == "chronological"
        assert config.hit_tolerance == 10.0
        assert config.autosave is False

    def test_unknown_undo_policy_falls_back(self, caplog):
        """Test that an unknown undo policy is replaced by the default."""
        config = EditorConfig(undo_policy="random")

        assert config.undo_policy == "priority"
        assert "random" in caplog.text

    @pytest.mark.parametrize("width,expected", [(0, 1), (3, 3), (9, 5)])
    def test_stroke_width_clamped(self, width, expected):
        """Test that stroke width stays within 1-5."""
        assert EditorConfig(stroke_width=width).stroke_width == expected

    def test_to_dict(self):
        """Test converting config to dictionary."""
        config = EditorConfig(
            default_directory="/path/to/dir",
            autosave=False
        )

        data = config.to_dict()

        assert data["defaultDirectory"] == "/path/to/dir"
        assert data["autosave"] is False
        assert data["rotationSaveDelayMs"] == 500
        assert "strokeWidth" in data

    def test_from_dict(self):
        """Test creating config from dictionary."""
        data = {
            "defaultDirectory": "/test/path",
            "defaultColor": "#6A1B9A",
            "strokeWidth": 3,
            "undoPolicy": "chronological",
            "maxHistoryEntries": 20,
            "autosave": False
        }

        config = EditorConfig.from_dict(data)

        assert config.default_directory == "/test/path"
        assert config.default_color == "#6A1B9A"
        assert config.stroke_width == 3
        assert config.undo_policy == "chronological"
        assert config.max_history_entries == 20
        assert config.autosave is False

    def test_from_dict_with_defaults(self):
        """Test creating config from partial dictionary."""
        data = {"defaultDirectory": "/test/path"}

        config = EditorConfig.from_dict(data)

        assert config.default_directory == "/test/path"
        assert config.stroke_width == 2  # default
        assert config.autosave is True  # default


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_load_nonexistent_file(self):
        """Test loading config when file doesn't exist."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "nonexistent.yaml"
            manager = ConfigManager(config_path)

            config = manager.load()

            # Should return default config
            assert config.default_directory == ""
            assert config.stroke_width == 2

    def test_load_invalid_yaml(self):
        """Test that a broken config file falls back to defaults."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            config_path.write_text("strokeWidth: [unclosed\n")
            manager = ConfigManager(config_path)

            config = manager.load()

            assert config.stroke_width == 2

    def test_save_and_load(self):
        """Test saving and loading config."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            manager = ConfigManager(config_path)

            # Create and save config
            config = EditorConfig(
                default_directory="/test/dir",
                undo_policy="chronological",
                autosave=False
            )
            assert manager.save(config) is True

            # Load it back
            loaded = ConfigManager(config_path).load()

            assert loaded.default_directory == "/test/dir"
            assert loaded.undo_policy == "chronological"
            assert loaded.autosave is False

    def test_save_without_config(self):
        """Test that saving before anything is loaded does nothing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            manager = ConfigManager(Path(tmpdir) / "config.yaml")

            assert manager.save() is False

    def test_update(self):
        """Test updating config values."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            manager = ConfigManager(config_path)

            manager.update(default_directory="/new/path", autosave=False, unknown=1)

            assert manager.config.default_directory == "/new/path"
            assert manager.config.autosave is False
            assert config_path.exists()

    def test_config_property(self):
        """Test config property lazy loading."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.yaml"
            manager = ConfigManager(config_path)

            # First access loads config
            config1 = manager.config
            config2 = manager.config

            # Should return same instance
            assert config1 is config2
