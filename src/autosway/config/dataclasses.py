"""
Configuration dataclasses for autosway.
"""

from pathlib import Path
from typing import Optional
from dataclasses import dataclass


@dataclass
class IpcConfig:
    """Compositor connection settings."""
    socket_path: Optional[str] = None  # Sway IPC socket; SWAYSOCK wins when set


@dataclass
class StorageConfig:
    """Layout storage settings."""
    layouts_dir: Optional[str] = None  # Defaults to <config dir>/layouts

    def get_layouts_dir(self, config_dir: Path) -> Path:
        """Get absolute layouts directory path."""
        if self.layouts_dir:
            return Path(self.layouts_dir).expanduser()
        return config_dir / "layouts"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
