"""
Main Config class for autosway.
"""

import os
import logging
from pathlib import Path
from typing import Mapping, Optional
from dataclasses import dataclass, field

import tomli

from ..exceptions import ConfigError, ConfigValidationError

from .dataclasses import IpcConfig, StorageConfig, LoggingConfig
from .validation import VALID_LOG_LEVELS, validate_toml_structure


SOCKET_ENV = "SWAYSOCK"
LAYOUTS_DIR_ENV = "AUTOSWAY_LAYOUTS_DIR"


@dataclass
class Config:
    """
    Main configuration class for autosway.

    Configuration is loaded from a TOML file with environment variable
    overrides, then handed to the orchestrator. Nothing below the CLI
    reads the environment directly.
    """

    ipc: IpcConfig = field(default_factory=IpcConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    config_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate and post-process configuration."""
        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log level: {self.logging.level}\n"
                f"Must be one of: {VALID_LOG_LEVELS}"
            )

        if self.ipc.socket_path is not None and not self.ipc.socket_path.strip():
            raise ConfigValidationError("Compositor socket path must not be empty.")

    @property
    def socket_path(self) -> str:
        """
        Compositor socket path.

        Raises:
            ConfigError: If no socket path is configured
        """
        if not self.ipc.socket_path:
            raise ConfigError(
                f"No compositor socket configured.\n"
                f"Set {SOCKET_ENV} (Sway exports it to its session) "
                "or [ipc] socket_path in config.toml."
            )
        return self.ipc.socket_path

    @property
    def layouts_dir(self) -> Path:
        """Directory holding stored layouts."""
        return self.storage.get_layouts_dir(self.config_dir or self.get_config_dir())

    @classmethod
    def get_config_dir(cls, environ: Optional[Mapping[str, str]] = None) -> Path:
        """
        Get user configuration directory.

        Uses XDG_CONFIG_HOME if set, otherwise defaults to ~/.config.
        """
        env = os.environ if environ is None else environ
        xdg_config = env.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "autosway"
        return Path.home() / ".config" / "autosway"

    @classmethod
    def load(
        cls,
        config_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'Config':
        """
        Load configuration from TOML file and environment.

        Precedence: environment, then config file, then defaults. A missing
        config file is not an error.

        Args:
            config_file: Optional path to config TOML file
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigError: If the file is invalid or no socket path results
        """
        logger = logging.getLogger(__name__)
        env = os.environ if environ is None else environ
        config_dir = cls.get_config_dir(env)

        if not config_file:
            config_file = config_dir / "config.toml"

        config_dict = {}
        if config_file.exists():
            try:
                with open(config_file, 'rb') as f:
                    config_dict = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {config_file}: {e}") from e
            except OSError as e:
                raise ConfigError(f"Failed to read config {config_file}: {e}") from e

            validate_toml_structure(config_dict, config_file)
            logger.debug(f"Loaded config from {config_file}")
        else:
            logger.debug(f"No config file at {config_file}, using defaults")

        ipc_config = IpcConfig(**config_dict.get('ipc', {}))
        storage_config = StorageConfig(**config_dict.get('storage', {}))
        logging_config = LoggingConfig(**config_dict.get('logging', {}))

        # Environment overrides
        if env.get(SOCKET_ENV):
            ipc_config.socket_path = env[SOCKET_ENV]
        if env.get(LAYOUTS_DIR_ENV):
            storage_config.layouts_dir = env[LAYOUTS_DIR_ENV]

        config = cls(
            ipc=ipc_config,
            storage=storage_config,
            logging=logging_config,
            config_dir=config_dir,
        )
        # Fail early rather than at connect time
        config.socket_path
        return config
