"""Configuration management for Lash Mapper."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

# Default configuration file path
DEFAULT_CONFIG_PATH = Path("config.yaml")

UNDO_POLICY_PRIORITY = "priority"
UNDO_POLICY_CHRONOLOGICAL = "chronological"
UNDO_POLICIES = (UNDO_POLICY_PRIORITY, UNDO_POLICY_CHRONOLOGICAL)

DEFAULT_PALETTE = [
    "#C2185B",  # Dark Pink
    "#3E2A20",  # Dark Brown
    "#6A1B9A",  # Dark Purple
    "#E65100",  # Dark Orange
    "#1565C0",  # Dark Blue
]

MIN_STROKE_WIDTH = 1
MAX_STROKE_WIDTH = 5


@dataclass
class EditorConfig:
    """
    Editor configuration settings.

    Stores canvas geometry, drawing defaults and interaction tuning.
    """

    canvas_width: int = 800
    canvas_height: int = 400
    default_color: str = "#C2185B"
    palette: List[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))
    stroke_width: int = 2  # Freehand stroke width (1-5)
    min_point_distance: float = 2.0  # Minimum spacing between recorded freehand samples
    rotation_save_delay_ms: int = 500  # Debounce for saves during a rotation drag
    hit_tolerance: float = 6.0  # Extra slack around strokes and labels for hit-testing
    handle_radius: float = 6.0  # Radius of the rotation handle circle
    undo_policy: str = UNDO_POLICY_PRIORITY  # "priority" or "chronological"
    max_history_entries: int = 100  # Maximum undo/redo history entries (chronological only)
    default_directory: str = ""
    autosave: bool = True  # Write the open lash map file on every emitted snapshot

    def __post_init__(self) -> None:
        if self.undo_policy not in UNDO_POLICIES:
            logger.warning(f"Unknown undo policy '{self.undo_policy}', using '{UNDO_POLICY_PRIORITY}'")
            self.undo_policy = UNDO_POLICY_PRIORITY
        self.stroke_width = max(MIN_STROKE_WIDTH, min(MAX_STROKE_WIDTH, int(self.stroke_width)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "canvasWidth": self.canvas_width,
            "canvasHeight": self.canvas_height,
            "defaultColor": self.default_color,
            "palette": self.palette,
            "strokeWidth": self.stroke_width,
            "minPointDistance": self.min_point_distance,
            "rotationSaveDelayMs": self.rotation_save_delay_ms,
            "hitTolerance": self.hit_tolerance,
            "handleRadius": self.handle_radius,
            "undoPolicy": self.undo_policy,
            "maxHistoryEntries": self.max_history_entries,
            "defaultDirectory": self.default_directory,
            "autosave": self.autosave,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EditorConfig:
        """Create config from dictionary."""
        return cls(
            canvas_width=data.get("canvasWidth", 800),
            canvas_height=data.get("canvasHeight", 400),
            default_color=data.get("defaultColor", "#C2185B"),
            palette=data.get("palette", list(DEFAULT_PALETTE)),
            stroke_width=data.get("strokeWidth", 2),
            min_point_distance=data.get("minPointDistance", 2.0),
            rotation_save_delay_ms=data.get("rotationSaveDelayMs", 500),
            hit_tolerance=data.get("hitTolerance", 6.0),
            handle_radius=data.get("handleRadius", 6.0),
            undo_policy=data.get("undoPolicy", UNDO_POLICY_PRIORITY),
            max_history_entries=data.get("maxHistoryEntries", 100),
            default_directory=data.get("defaultDirectory", ""),
            autosave=data.get("autosave", True),
        )


class ConfigManager:
    """
    Manager for loading and saving editor configuration.

    Handles YAML serialization and provides a clean interface
    for configuration access.
    """

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = config_path
        self._config: Optional[EditorConfig] = None

    @property
    def config(self) -> EditorConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> EditorConfig:
        """
        Load configuration from file.

        Returns:
            EditorConfig instance with loaded or default values
        """
        if not self.config_path.exists():
            logger.info(f"Config file not found at {self.config_path}, using defaults")
            return EditorConfig()

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            logger.info(f"Loaded configuration from {self.config_path}")
            return EditorConfig.from_dict(data)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing config file: {e}")
            return EditorConfig()
        except Exception as e:
            logger.error(f"Error loading config: {e}")
            return EditorConfig()

    def save(self, config: Optional[EditorConfig] = None) -> bool:
        """
        Save configuration to file.

        Args:
            config: Configuration to save, or use current config

        Returns:
            True if save was successful
        """
        if config is not None:
            self._config = config

        if self._config is None:
            logger.warning("No configuration to save")
            return False

        try:
            with open(self.config_path, "w") as f:
                yaml.dump(self._config.to_dict(), f, default_flow_style=False)
            logger.info(f"Saved configuration to {self.config_path}")
            return True
        except Exception as e:
            logger.error(f"Error saving config: {e}")
            return False

    def update(self, **kwargs: Any) -> None:
        """
        Update configuration with new values.

        Args:
            **kwargs: Key-value pairs to update
        """
        config = self.config
        for key, value in kwargs.items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.warning(f"Unknown config key: {key}")
        self.save()
