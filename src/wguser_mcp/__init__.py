"""Client for the WireGuard userspace configuration protocol."""

from .models import Config, Endpoint, Key, PeerConfig
from .protocol import (
    DeviceConnectionError,
    ProtocolError,
    ReceiveError,
    TransmissionError,
    UnexpectedResponseError,
    WgUserError,
)
from .transport.uapi_connection import configure_device

__version__ = "0.1.0"
