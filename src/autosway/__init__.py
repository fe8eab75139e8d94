"""
autosway - Restore Sway output layouts per set of monitors.

Remembers output geometry keyed by the hardware identity of the connected
monitors and re-applies it over the Sway IPC socket.
"""

__version__ = "0.1.0"

from .config import Config
from .ipc import Message, SwayTransport
from .layout import Layout, Output, Rect, fingerprint, merge, render_commands
from .orchestrator import Action, Orchestrator
from .repository import LayoutRepository

__all__ = [
    "Action",
    "Config",
    "Layout",
    "LayoutRepository",
    "Message",
    "Orchestrator",
    "Output",
    "Rect",
    "SwayTransport",
    "fingerprint",
    "merge",
    "render_commands",
]
