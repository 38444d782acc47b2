"""Data models for device configuration and key material."""

from .key import Key, KEY_LEN
from .config import Config, Endpoint, PeerConfig
