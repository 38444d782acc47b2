"""UNIX socket connection to a userspace WireGuard device.

Userspace implementations (wireguard-go, boringtun) expose one control
socket per interface, usually ``/var/run/wireguard/<iface>.sock``. Each
configuration change is a self-contained exchange on a fresh
connection::

    Idle -> Connecting -> Sending -> AwaitingReply -> Done

Calls block with no timeout. A caller that needs a deadline can pass a
``dial`` factory returning a socket with a timeout set.
"""

from __future__ import annotations

import logging
import socket
from typing import Callable, Protocol

from ..models.config import Config
from ..protocol.encoder import encode_set_request
from ..protocol.errors import (
    DeviceConnectionError,
    ReceiveError,
    TransmissionError,
)
from ..protocol.response import RESPONSE_BUFFER_SIZE, parse_response

logger = logging.getLogger(__name__)


class Channel(Protocol):
    """The part of a connected stream socket the client uses."""

    def sendall(self, data: bytes) -> None: ...

    def recv(self, bufsize: int) -> bytes: ...

    def close(self) -> None: ...


Dialer = Callable[[str], Channel]


def dial_unix(path: str) -> socket.socket:
    """Open a blocking stream connection to the UNIX socket at ``path``."""
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(path)
    except OSError:
        sock.close()
        raise
    return sock


class UAPIConnection:
    """A single connection to a device control socket.

    Usage::

        with UAPIConnection("/var/run/wireguard/wg0.sock") as conn:
            conn.write(request)
            reply = conn.read()
    """

    def __init__(self, path: str, dial: Dialer = dial_unix) -> None:
        self._path = path
        self._dial = dial
        self._channel: Channel | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def connected(self) -> bool:
        return self._channel is not None

    def open(self) -> None:
        """Connect to the control socket.

        Raises:
            DeviceConnectionError: If the socket cannot be opened.
        """
        try:
            self._channel = self._dial(self._path)
        except OSError as e:
            raise DeviceConnectionError(
                f"Could not connect to device socket {self._path}: {e}"
            ) from e
        logger.debug("Connected to %s", self._path)

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        channel.close()
        logger.debug("Disconnected from %s", self._path)

    def write(self, data: bytes) -> None:
        """Send ``data`` in one write.

        Raises:
            ConnectionError: If not connected.
            TransmissionError: If the write fails.
        """
        if self._channel is None:
            raise ConnectionError("Not connected to device")
        try:
            self._channel.sendall(data)
        except OSError as e:
            raise TransmissionError(
                f"Failed to send request to {self._path}: {e}"
            ) from e

    def read(self, bufsize: int = RESPONSE_BUFFER_SIZE) -> bytes:
        """Read a single reply of at most ``bufsize`` bytes.

        Raises:
            ConnectionError: If not connected.
            ReceiveError: If the read fails or the device closed the
                connection without replying.
        """
        if self._channel is None:
            raise ConnectionError("Not connected to device")
        try:
            data = self._channel.recv(bufsize)
        except OSError as e:
            raise ReceiveError(
                f"Failed to read reply from {self._path}: {e}"
            ) from e
        if not data:
            raise ReceiveError(f"{self._path} closed the connection without replying")
        return data

    def __enter__(self) -> UAPIConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def configure_device(path: str, cfg: Config, dial: Dialer = dial_unix) -> None:
    """Apply ``cfg`` to the device listening on the control socket ``path``.

    Args:
        path: Filesystem path of the device's control socket.
        cfg: The configuration to apply.
        dial: Factory returning a connected channel for ``path``.

    Raises:
        DeviceConnectionError: If the socket cannot be opened.
        TransmissionError: If sending the request fails.
        ReceiveError: If reading the reply fails.
        ProtocolError: If the device rejects the configuration.
        UnexpectedResponseError: If the reply is not ``errno=<N>``.
    """
    request = encode_set_request(cfg)
    with UAPIConnection(path, dial=dial) as conn:
        logger.debug(
            "Sending %d-byte set request (%d peers) to %s",
            len(request), len(cfg.peers), path,
        )
        conn.write(request)
        reply = conn.read()
        logger.debug("Reply from %s: %r", path, reply)
    parse_response(reply)
