"""Classification of the device's ``errno=<N>`` reply."""

from __future__ import annotations

import re

from .errors import ProtocolError, UnexpectedResponseError

# The only replies are "errno=0\n" or "errno=<small integer>\n".
RESPONSE_BUFFER_SIZE = 32

_ERRNO_RE = re.compile(r"errno=(\d+)")


def parse_response(data: bytes) -> None:
    """Classify the bytes of one bounded reply read.

    Returns:
        ``None`` if the device reported ``errno=0``.

    Raises:
        ProtocolError: If the device reported a non-zero errno.
        UnexpectedResponseError: If the reply is not an ``errno=<N>`` line,
            or filled the read buffer without a terminating newline.
    """
    if len(data) >= RESPONSE_BUFFER_SIZE and not data.endswith(b"\n"):
        raise UnexpectedResponseError(data)

    try:
        text = data.decode("ascii").strip()
    except UnicodeDecodeError as e:
        raise UnexpectedResponseError(data) from e

    match = _ERRNO_RE.fullmatch(text)
    if match is None:
        raise UnexpectedResponseError(data)

    if text != "errno=0":
        raise ProtocolError(int(match.group(1)))
    return None
