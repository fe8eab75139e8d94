"""Sway IPC integration module."""

from .message import (
    MAGIC,
    HEADER_SIZE,
    CommandResult,
    Message,
    MessageType,
    decode_header,
    encode,
    parse_command_results,
    read_exact,
)
from .transport import SwayTransport

__all__ = [
    "MAGIC",
    "HEADER_SIZE",
    "CommandResult",
    "Message",
    "MessageType",
    "SwayTransport",
    "decode_header",
    "encode",
    "parse_command_results",
    "read_exact",
]
