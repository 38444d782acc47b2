"""Transport layer: control socket connection and the configure exchange."""

from .uapi_connection import UAPIConnection, configure_device, dial_unix
