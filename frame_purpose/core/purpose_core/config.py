"""Settings for frame purposes and their sidebars."""

import os
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "frame-purpose" / "config.json"


def _as_names(value: Any) -> List[str]:
    """Accept a list of names or one comma-separated string."""
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return list(value)


@dataclass
class FramePurposeSettings:
    """Defaults applied to purposes that do not set their own sidebar options."""
    sidebar_side: str = "left"
    sidebar_width: int = 30
    sidebar_auto_update: bool = True
    sidebar_update_interval: float = 0.5  # seconds between sidebar recomputations
    sidebar_sort: List[str] = field(default_factory=lambda: ["modified", "name"])
    sidebar_blacklist_modes: List[str] = field(
        default_factory=lambda: ["minibuffer-inactive-mode", "frame-purpose-sidebar-mode"]
    )
    sidebar_buffer_name_format: str = "*Frame Purpose: {title}*"
    sidebar_mode: str = "frame-purpose-sidebar-mode"

    def __post_init__(self):
        self.sidebar_sort = _as_names(self.sidebar_sort)
        self.sidebar_blacklist_modes = _as_names(self.sidebar_blacklist_modes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FramePurposeSettings":
        """Create settings from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            k: v for k, v in self.__dict__.items()
            if not k.startswith('_')
        }

    def sidebar_buffer_name(self, title: str) -> str:
        """Name of the sidebar buffer for a purpose title."""
        return self.sidebar_buffer_name_format.format(title=title)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(config_path: Optional[Path] = None) -> FramePurposeSettings:
    """Load settings from environment and config file.

    Args:
        config_path: JSON file to read, defaults to ~/.config/frame-purpose/config.json

    Returns:
        Settings with environment and file overrides applied
    """
    settings = FramePurposeSettings()

    # Environment variables
    settings.sidebar_side = os.getenv("FRAME_PURPOSE_SIDEBAR_SIDE", settings.sidebar_side)
    if os.getenv("FRAME_PURPOSE_SIDEBAR_WIDTH"):
        try:
            settings.sidebar_width = int(os.environ["FRAME_PURPOSE_SIDEBAR_WIDTH"])
        except ValueError:
            logger.warning(f"Ignoring invalid FRAME_PURPOSE_SIDEBAR_WIDTH: {os.environ['FRAME_PURPOSE_SIDEBAR_WIDTH']}")
    if os.getenv("FRAME_PURPOSE_SIDEBAR_AUTO_UPDATE"):
        settings.sidebar_auto_update = _env_bool(os.environ["FRAME_PURPOSE_SIDEBAR_AUTO_UPDATE"])
    if os.getenv("FRAME_PURPOSE_UPDATE_INTERVAL"):
        try:
            settings.sidebar_update_interval = float(os.environ["FRAME_PURPOSE_UPDATE_INTERVAL"])
        except ValueError:
            logger.warning(f"Ignoring invalid FRAME_PURPOSE_UPDATE_INTERVAL: {os.environ['FRAME_PURPOSE_UPDATE_INTERVAL']}")
    if os.getenv("FRAME_PURPOSE_SIDEBAR_SORT"):
        settings.sidebar_sort = _as_names(os.environ["FRAME_PURPOSE_SIDEBAR_SORT"])

    # Config file
    config_path = config_path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
            settings = FramePurposeSettings.from_dict({**settings.to_dict(), **file_config})
            logger.info(f"Loaded frame-purpose config from {config_path}")
        except Exception as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")

    return settings
