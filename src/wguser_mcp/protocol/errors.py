"""Errors raised by a configuration exchange.

Each exchange fails with exactly one of these; nothing is retried.
"""

from __future__ import annotations


class WgUserError(Exception):
    """Base class for configuration exchange failures."""


class DeviceConnectionError(WgUserError, ConnectionError):
    """The control socket could not be opened. Nothing was sent."""


class TransmissionError(WgUserError, OSError):
    """Writing the request to the opened socket failed."""


class ReceiveError(WgUserError, OSError):
    """Reading the reply failed, or the device closed without replying."""


class ProtocolError(WgUserError):
    """The device answered ``errno=<code>`` with a non-zero code.

    The code is whatever the device process reports (errno.h values on
    the configuring host) and is passed through unchanged.
    """

    def __init__(self, code: int) -> None:
        super().__init__(f"device returned errno={code}")
        self.code = code


class UnexpectedResponseError(WgUserError):
    """The reply is not an ``errno=<N>`` line at all."""

    def __init__(self, response: bytes) -> None:
        super().__init__(f"unexpected response from device: {response!r}")
        self.response = response
