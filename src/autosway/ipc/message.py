"""
i3-ipc wire codec.

Frames are: magic string, payload length (u32 LE), message type (u32 LE),
payload. Responses use the same framing; only the length is interpreted.
"""

import json
import logging
import socket
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from ..exceptions import (
    IpcIOError,
    IpcProtocolError,
    InvalidPreambleError,
    SerializationError,
)


logger = logging.getLogger(__name__)

MAGIC = b"i3-ipc"
HEADER_FMT = f"<{len(MAGIC)}sII"
HEADER_SIZE = struct.calcsize(HEADER_FMT)  # 6 (magic) + 4 (length) + 4 (type)


class MessageType(IntEnum):
    """Message types this client sends."""
    RUN_COMMAND = 0
    GET_OUTPUTS = 3


@dataclass(frozen=True)
class Message:
    """
    A single request to the compositor.

    Only two kinds exist: ``GET_OUTPUTS`` with an empty payload and
    ``RUN_COMMAND`` carrying UTF-8 command text. Use the constructors
    below rather than building instances by hand.
    """
    type: MessageType
    payload: bytes = b""

    @classmethod
    def get_outputs(cls) -> 'Message':
        return cls(MessageType.GET_OUTPUTS)

    @classmethod
    def run_command(cls, command: str) -> 'Message':
        return cls(MessageType.RUN_COMMAND, command.encode("utf-8"))

    def __repr__(self) -> str:
        return f"Message({self.type.name}, {self.payload!r})"


@dataclass
class CommandResult:
    """Outcome of one RUN_COMMAND entry as reported by the compositor."""
    success: bool
    error: Optional[str] = None


def encode(message: Message) -> bytes:
    """
    Encode a message into a complete request frame.

    The length field is taken from the payload as given; nothing else is
    checked.
    """
    header = struct.pack(HEADER_FMT, MAGIC, len(message.payload), int(message.type))
    return header + message.payload


def decode_header(header: bytes) -> int:
    """
    Decode a response header and return the announced body length.

    Args:
        header: Exactly HEADER_SIZE bytes read from the socket

    Returns:
        Payload length in bytes

    Raises:
        IpcProtocolError: If the header has the wrong size
        InvalidPreambleError: If the header does not start with the magic string
    """
    if len(header) != HEADER_SIZE:
        raise IpcProtocolError(
            f"Expected a {HEADER_SIZE}-byte response header, got {len(header)} bytes"
        )

    magic, length, _ = struct.unpack(HEADER_FMT, header)
    if magic != MAGIC:
        raise InvalidPreambleError(
            f"Invalid response preamble {magic!r}, expected {MAGIC!r}.\n"
            "Is the socket really a Sway/i3 IPC socket?"
        )
    return length


def read_exact(sock: socket.socket, n: int) -> bytes:
    """
    Read exactly n bytes from a socket.

    Raises:
        IpcIOError: If the socket fails or is closed before n bytes arrived
    """
    buf = bytearray()
    while len(buf) < n:
        try:
            chunk = sock.recv(n - len(buf))
        except OSError as e:
            raise IpcIOError(f"Failed to read from compositor socket: {e}") from e
        if not chunk:
            raise IpcIOError(
                f"Compositor closed the connection after {len(buf)} of {n} bytes"
            )
        buf.extend(chunk)
    return bytes(buf)


def parse_command_results(body: bytes) -> List[CommandResult]:
    """
    Parse the JSON body of a RUN_COMMAND response.

    Example body:
    [{"success": true}, {"success": false, "error": "Unknown output"}]

    Raises:
        SerializationError: On invalid JSON or records without a boolean success
    """
    try:
        records = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SerializationError(f"Failed to parse command response: {e}") from e

    if not isinstance(records, list):
        raise SerializationError(
            f"Command response must be a JSON array, got {type(records).__name__}"
        )

    results = []
    for record in records:
        if not isinstance(record, dict) or not isinstance(record.get("success"), bool):
            raise SerializationError(f"Malformed command result: {record!r}")
        results.append(CommandResult(success=record["success"], error=record.get("error")))

    logger.debug(f"Command results: {results}")
    return results
