"""WireGuard key model.

Private, public and preshared keys are all 32 opaque bytes. The control
protocol always carries them as 64 lowercase hex characters; the base64
form is what ``wg`` and configuration files use.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

KEY_LEN = 32


@dataclass(frozen=True)
class Key:
    """A 32-byte WireGuard key."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != KEY_LEN:
            raise ValueError(
                f"Key must be {KEY_LEN} bytes, got {len(self.data)}"
            )

    def hex(self) -> str:
        """Return the 64-character lowercase hex form used on the wire."""
        return self.data.hex()

    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @classmethod
    def from_hex(cls, text: str) -> Key:
        """Parse a key from its 64-character hex form.

        Raises:
            ValueError: If the text is not hex or decodes to the wrong length.
        """
        try:
            data = bytes.fromhex(text)
        except ValueError as e:
            raise ValueError(f"Invalid hex key {text!r}: {e}") from e
        return cls(data)

    @classmethod
    def from_base64(cls, text: str) -> Key:
        """Parse a key from standard base64 (44 characters, one ``=``)."""
        try:
            data = base64.b64decode(text, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 key {text!r}: {e}") from e
        return cls(data)

    @classmethod
    def parse(cls, text: str) -> Key:
        """Parse a key given in either hex or base64 form."""
        if not isinstance(text, str):
            raise ValueError(f"Key must be a string, got {type(text).__name__}")
        text = text.strip()
        if len(text) == KEY_LEN * 2:
            return cls.from_hex(text)
        return cls.from_base64(text)

    def __str__(self) -> str:
        return self.base64()
