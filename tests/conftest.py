"""Test configuration and fixtures."""

import json
import socket
import struct
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple

import pytest

from autosway.config import Config, IpcConfig, StorageConfig
from autosway.ipc import CommandResult
from autosway.layout import Output, Rect


SOCKET_PATH = "/run/user/1000/sway-ipc.1000.1234.sock"


def sway_output(
    name: str,
    make: str,
    model: str,
    serial: str,
    rect: Tuple[int, int, int, int] = (0, 0, 1920, 1080),
    active: bool = True,
    transform: Optional[str] = "normal",
) -> Dict[str, Any]:
    """Build a GET_OUTPUTS record the way Sway reports it."""
    x, y, width, height = rect
    record = {
        "id": 3,
        "type": "output",
        "name": name,
        "make": make,
        "model": model,
        "serial": serial,
        "active": active,
        "dpms": active,
        "primary": False,
        "scale": 1.0,
        "rect": {"x": x, "y": y, "width": width, "height": height},
        "current_mode": {"width": width, "height": height, "refresh": 60000},
        "modes": [],
    }
    if transform is not None:
        record["transform"] = transform
    return record


@pytest.fixture
def sway_record() -> Callable[..., Dict[str, Any]]:
    return sway_output


@pytest.fixture
def laptop_record() -> Dict[str, Any]:
    return sway_output("eDP-1", "Samsung", "XYZ", "12345")


@pytest.fixture
def desk_records() -> List[Dict[str, Any]]:
    """Laptop panel plus an external monitor, as reported by GET_OUTPUTS."""
    return [
        sway_output("eDP-1", "Samsung", "XYZ", "12345"),
        sway_output("DP-3", "Dell Inc.", "DELL U2720Q", "F2BX123", rect=(1920, 0, 3840, 2160)),
    ]


@pytest.fixture
def desk_outputs_json(desk_records) -> bytes:
    return json.dumps(desk_records).encode()


@pytest.fixture
def make_output() -> Callable[..., Output]:
    """Factory for Output instances with sensible defaults."""
    def _make(
        name: str = "eDP-1",
        make: str = "Samsung",
        model: str = "XYZ",
        serial: str = "12345",
        rect: Tuple[int, int, int, int] = (0, 0, 1920, 1080),
        active: bool = True,
        transform: Optional[str] = None,
    ) -> Output:
        return Output(
            name=name,
            make=make,
            model=model,
            serial=serial,
            rect=Rect(*rect),
            active=active,
            transform=transform,
        )
    return _make


@pytest.fixture
def socket_pair() -> Generator[Tuple[socket.socket, socket.socket], None, None]:
    """Connected (client, compositor) socket pair."""
    client, server = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        yield client, server
    finally:
        client.close()
        server.close()


@pytest.fixture
def response_frame() -> Callable[..., bytes]:
    """Build an i3-ipc response frame around a body."""
    def _frame(body: Any, msg_type: int = 0, magic: bytes = b"i3-ipc") -> bytes:
        if not isinstance(body, bytes):
            body = json.dumps(body).encode()
        return struct.pack("<6sII", magic, len(body), msg_type) + body
    return _frame


@pytest.fixture
def layouts_dir(tmp_path: Path) -> Path:
    return tmp_path / "layouts"


@pytest.fixture
def test_config(tmp_path: Path, layouts_dir: Path) -> Config:
    """Config pointing at a fake socket and a temporary layouts directory."""
    return Config(
        ipc=IpcConfig(socket_path=SOCKET_PATH),
        storage=StorageConfig(layouts_dir=str(layouts_dir)),
        config_dir=tmp_path,
    )


class FakeTransport:
    """
    Stand-in for SwayTransport.

    Serves a fixed GET_OUTPUTS body and answers commands from a script of
    results (success by default), recording every command it receives.
    """

    def __init__(self, outputs_body: bytes, results: Optional[List[CommandResult]] = None) -> None:
        self.outputs_body = outputs_body
        self.results = list(results or [])
        self.commands: List[str] = []
        self.closed = False

    def get_outputs(self) -> bytes:
        return self.outputs_body

    def run_command(self, command: str) -> List[CommandResult]:
        self.commands.append(command)
        if self.results:
            return [self.results.pop(0)]
        return [CommandResult(success=True)]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> 'FakeTransport':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@pytest.fixture
def fake_transport(desk_outputs_json) -> FakeTransport:
    return FakeTransport(desk_outputs_json)


@pytest.fixture
def fake_connect(fake_transport) -> Callable[[str], FakeTransport]:
    """Connect function handing out the fake transport and recording the path."""
    def _connect(socket_path: str) -> FakeTransport:
        _connect.socket_paths.append(socket_path)
        return fake_transport
    _connect.socket_paths = []
    return _connect


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    return FakeTransport
