"""
Layout storage.

Stored layouts are JSON arrays of output records, one file per fingerprint,
inside a single layouts directory.

Files are written without locking: two concurrent runs race (the last save
wins), and a save running while another run loads the same fingerprint can
expose a partially written file to the reader.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from .exceptions import (
    LayoutNotFoundError,
    SerializationError,
    StorageError,
    StoragePathError,
)
from .layout import Layout, Output


class LayoutRepository:
    """
    Saves and loads layouts to/from the filesystem.

    Keys are layout fingerprints; values are the output lists.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        """
        Initialize with the layouts directory.

        Args:
            root: Directory holding one file per stored layout
        """
        self.root = Path(root).expanduser()
        self.logger = logging.getLogger(__name__)

    def path_for(self, key: str) -> Path:
        """
        Return the file path for a storage key.

        Raises:
            StoragePathError: If the key is not a plain file name
        """
        if not key or key in (".", "..") or "/" in key or "\\" in key or "\0" in key:
            raise StoragePathError(f"Invalid layout key {key!r}")
        return self.root / key

    def exists(self, key: str) -> bool:
        """Check whether a layout is stored under key."""
        return self.path_for(key).is_file()

    def save(self, key: str, outputs: List[Output]) -> Path:
        """
        Write the outputs under key. Returns the file path.

        Raises:
            StorageError: If the directory or file cannot be written
        """
        path = self.path_for(key)
        content = json.dumps([output.to_dict() for output in outputs], indent=2)

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_text(content + "\n", encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to save layout {path}: {e}") from e

        self.logger.info(f"Saved {len(outputs)} output(s) to {path}")
        return path

    def load(self, key: str) -> List[Output]:
        """
        Read the outputs stored under key.

        Raises:
            LayoutNotFoundError: If nothing is stored under key
            SerializationError: If the stored file is not a valid layout
            StorageError: If the file cannot be read
        """
        path = self.path_for(key)

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise LayoutNotFoundError(f"No layout stored for {key}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read layout {path}: {e}") from e

        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Stored layout {path} is not valid JSON: {e}") from e

        outputs = Layout.from_records(records).outputs
        self.logger.debug(f"Loaded {len(outputs)} output(s) from {path}")
        return outputs
