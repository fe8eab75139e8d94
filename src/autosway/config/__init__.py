"""
Configuration package for autosway.
"""

from .main import Config, SOCKET_ENV, LAYOUTS_DIR_ENV
from .dataclasses import (
    IpcConfig,
    StorageConfig,
    LoggingConfig,
)
