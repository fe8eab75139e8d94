"""
Output layouts: identity, reconciliation and rendering.

A layout is the list of outputs the compositor reports at one point in time.
Layouts are stored under a fingerprint of their hardware identities, so the
same set of physical monitors finds its stored geometry again even when the
compositor hands out different output names.
"""

import hashlib
import json
import logging
from collections import defaultdict
from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, Iterator, List, Optional, Union

from .exceptions import ReconciliationError, SerializationError


logger = logging.getLogger(__name__)

IDENTITY_SEPARATOR = "|"
FINGERPRINT_SEPARATOR = "+++"
DEFAULT_TRANSFORM = "normal"


@dataclass
class Rect:
    """Position and size of an output in the global coordinate space."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Rect':
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            width=int(data["width"]),
            height=int(data["height"]),
        )


@dataclass
class Output:
    """A single monitor as reported by the compositor."""
    name: str  # Compositor output name (e.g., "eDP-1", "HDMI-A-1")
    make: str
    model: str
    serial: str
    rect: Rect = field(default_factory=Rect)
    active: bool = True
    transform: Optional[str] = None  # "normal", "90", "180", "270", "flipped-*"

    @property
    def identity(self) -> str:
        """Hardware identity; independent of the compositor-assigned name."""
        return IDENTITY_SEPARATOR.join((self.make, self.model, self.serial))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Output':
        """
        Create from a GET_OUTPUTS record or a stored record.

        Sway reports many more keys (modes, scale, current_mode, ...);
        they are ignored.

        Raises:
            SerializationError: If a required key is missing or has the wrong type
        """
        try:
            active = data["active"]
            if not isinstance(active, bool):
                raise TypeError(f"'active' must be a boolean, got {active!r}")
            return cls(
                name=str(data["name"]),
                make=str(data["make"]),
                model=str(data["model"]),
                serial=str(data["serial"]),
                rect=Rect.from_dict(data["rect"]),
                active=active,
                transform=data.get("transform"),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            name = data.get("name", "?") if isinstance(data, dict) else "?"
            raise SerializationError(f"Malformed output record for {name}: {e!r}") from e

    def __repr__(self) -> str:
        return f"Output({self.name}, {self.identity})"


def identity(output: Output) -> str:
    """Return the hardware identity string of an output."""
    return output.identity


def render_command(output: Output, force_active: bool = False) -> str:
    """Render the configuration command for a single output."""
    if not (output.active or force_active):
        return f"output {output.name} disable"

    rect = output.rect
    transform = output.transform or DEFAULT_TRANSFORM
    return (
        f"output {output.name} enable "
        f"res {rect.width}x{rect.height} "
        f"pos {rect.x} {rect.y} "
        f"transform {transform}"
    )


@dataclass
class Layout:
    """The currently available outputs."""
    outputs: List[Output] = field(default_factory=list)

    @classmethod
    def from_json(cls, body: Union[bytes, str]) -> 'Layout':
        """
        Parse a GET_OUTPUTS response body.

        Example body:
        [
          {
            "name": "eDP-1",
            "make": "Samsung",
            "model": "XYZ",
            "serial": "12345",
            "active": true,
            "transform": "normal",
            "rect": {"x": 0, "y": 0, "width": 1920, "height": 1080},
            ...
          }
        ]

        Raises:
            SerializationError: On invalid JSON or malformed records
        """
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SerializationError(f"Output report is not valid UTF-8: {e}") from e

        try:
            records = json.loads(body)
        except json.JSONDecodeError as e:
            raise SerializationError(
                f"Failed to parse output report: {e}\n"
                "The compositor returned invalid JSON. This may indicate a version mismatch."
            ) from e

        return cls.from_records(records)

    @classmethod
    def from_records(cls, records: Any) -> 'Layout':
        """Create from a list of output dicts."""
        if not isinstance(records, list):
            raise SerializationError(
                f"Expected a JSON array of outputs, got {type(records).__name__}"
            )
        return cls(outputs=[Output.from_dict(record) for record in records])

    def to_records(self) -> List[Dict[str, Any]]:
        """Convert outputs to a JSON-serializable list."""
        return [output.to_dict() for output in self.outputs]

    def fingerprint(self) -> str:
        return fingerprint(self)

    def __len__(self) -> int:
        return len(self.outputs)

    def __iter__(self) -> Iterator[Output]:
        return iter(self.outputs)

    def __str__(self) -> str:
        """One command per output, showing each output exactly as reported."""
        return "\n".join(render_command(output) for output in self.outputs)


def fingerprint(layout: Layout) -> str:
    """
    Return a fingerprint that is unique for a given set of monitors.

    Identities are sorted before hashing, so report order, names, geometry
    and enabled state do not affect the result.
    """
    ids = sorted(identity(output) for output in layout.outputs)
    digest = hashlib.sha256(FINGERPRINT_SEPARATOR.join(ids).encode("utf-8"))
    return digest.hexdigest()


def merge(live: Layout, stored: Layout) -> Layout:
    """
    Apply stored geometry to the live layout.

    Each live output takes rect, transform and active state from the stored
    output with the same hardware identity and keeps its live name. Outputs
    sharing one identity are paired in report order: the n-th live copy gets
    the n-th stored copy. Stored outputs that are not connected are ignored.
    Neither input is modified.

    Args:
        live: Layout reported by the compositor
        stored: Previously saved layout for the same fingerprint

    Returns:
        New merged Layout, in live order

    Raises:
        ReconciliationError: If a live output has no stored counterpart
    """
    by_identity: Dict[str, List[Output]] = defaultdict(list)
    for output in stored.outputs:
        by_identity[identity(output)].append(output)

    merged = []
    for output in live.outputs:
        candidates = by_identity.get(identity(output))
        if not candidates:
            raise ReconciliationError(
                f"Incompatible layout: output {output.name} ({identity(output)}) "
                "is not part of the stored layout"
            )
        saved = candidates.pop(0)
        merged.append(replace(
            output,
            rect=replace(saved.rect),
            transform=saved.transform,
            active=saved.active,
        ))
        logger.debug(f"Merged stored geometry of {saved.name} into {output.name}")

    return Layout(outputs=merged)


def render_commands(layout: Layout) -> List[str]:
    """
    Translate a layout into one declarative command per output.

    A lone output is always enabled so the session never ends up without
    a display.
    """
    force_active = len(layout.outputs) == 1
    return [render_command(output, force_active) for output in layout.outputs]
