"""Protocol layer: set-request encoding, reply classification and errors."""

from .encoder import encode_config, encode_set_request, write_config
from .errors import (
    DeviceConnectionError,
    ProtocolError,
    ReceiveError,
    TransmissionError,
    UnexpectedResponseError,
    WgUserError,
)
from .response import RESPONSE_BUFFER_SIZE, parse_response
