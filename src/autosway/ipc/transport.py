"""
Unix socket transport for the Sway IPC protocol.

Handles low-level communication: connecting, one blocking request/response
exchange at a time, and duplicating handles onto the same connection.
"""

import logging
import socket
import threading
from typing import List, Optional

from ..exceptions import IpcConnectionError, IpcIOError
from .message import (
    HEADER_SIZE,
    CommandResult,
    Message,
    decode_header,
    encode,
    parse_command_results,
    read_exact,
)


logger = logging.getLogger(__name__)


class SwayTransport:
    """
    Low-level transport over the compositor's IPC socket.

    Every handle duplicated from the same connection shares one lock, and a
    roundtrip holds it from the first written byte to the last read byte.
    The compositor answers requests strictly in order on a single stream, so
    this is what keeps responses matched to their requests.

    Usage:
        with SwayTransport.connect(socket_path) as transport:
            body = transport.roundtrip(Message.get_outputs())
    """

    def __init__(
        self,
        sock: socket.socket,
        socket_path: str = "",
        lock: Optional[threading.Lock] = None,
    ) -> None:
        self.socket_path = socket_path
        self._sock = sock
        self._lock = lock or threading.Lock()

    @classmethod
    def connect(cls, socket_path: str) -> 'SwayTransport':
        """
        Connect to the compositor socket.

        Raises:
            IpcConnectionError: If the socket is missing or refuses the connection
        """
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(socket_path)
        except OSError as e:
            sock.close()
            raise IpcConnectionError(
                f"Cannot connect to compositor at {socket_path}: {e}\n"
                "Make sure Sway is running and SWAYSOCK points to its socket."
            ) from e

        logger.debug(f"Connected to compositor socket {socket_path}")
        return cls(sock, socket_path)

    def roundtrip(self, message: Message) -> bytes:
        """
        Send a request and return the response body.

        Args:
            message: Request to send

        Returns:
            Raw response payload

        Raises:
            IpcIOError: On socket errors or short reads
            IpcProtocolError: If the response header is malformed
        """
        request = encode(message)
        with self._lock:
            try:
                self._sock.sendall(request)
            except OSError as e:
                raise IpcIOError(f"Failed to send {message.type.name} request: {e}") from e

            length = decode_header(read_exact(self._sock, HEADER_SIZE))
            body = read_exact(self._sock, length)

        logger.debug(f"{message!r} -> {length} bytes")
        return body

    def duplicate(self) -> 'SwayTransport':
        """
        Return an independent handle onto the same connection.

        The new handle owns its own file descriptor and must be closed
        separately; roundtrips on either handle are still serialised.
        """
        try:
            sock = self._sock.dup()
        except OSError as e:
            raise IpcIOError(f"Failed to duplicate compositor connection: {e}") from e
        return SwayTransport(sock, self.socket_path, self._lock)

    def get_outputs(self) -> bytes:
        """Query all outputs via GET_OUTPUTS and return the JSON body."""
        return self.roundtrip(Message.get_outputs())

    def run_command(self, command: str) -> List[CommandResult]:
        """Run a compositor command and return the parsed results."""
        return parse_command_results(self.roundtrip(Message.run_command(command)))

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> 'SwayTransport':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
