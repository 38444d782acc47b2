"""Device and peer configuration models.

Optional fields use ``None`` for "absent": the encoder omits the line and
the device keeps its current value. ``None`` is never the same as zero,
so ``listen_port=0`` (pick a random port) and an unset listen port are
different requests.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Union

from .key import Key

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass(frozen=True)
class Endpoint:
    """A peer's UDP endpoint: IP address plus port."""

    address: IPAddress
    port: int

    def __str__(self) -> str:
        if self.address.version == 6:
            return f"[{self.address}]:{self.port}"
        return f"{self.address}:{self.port}"

    @classmethod
    def parse(cls, text: str) -> Endpoint:
        """Parse ``a.b.c.d:port`` or ``[v6addr]:port``.

        Raises:
            ValueError: If the host is not an IP literal or the port is
                missing or not a number.
        """
        if not isinstance(text, str):
            raise ValueError(f"Endpoint must be a string, got {type(text).__name__}")
        host, sep, port = text.rpartition(":")
        if not sep or not host:
            raise ValueError(f"Endpoint {text!r} must be in host:port form")
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        elif ":" in host:
            raise ValueError(
                f"IPv6 endpoint {text!r} must put the address in brackets"
            )
        try:
            port_num = int(port)
        except ValueError as e:
            raise ValueError(f"Invalid endpoint port in {text!r}") from e
        return cls(address=ipaddress.ip_address(host), port=port_num)


def _get_bool(d: dict[str, Any], name: str) -> bool:
    value = d.get(name, False)
    if not isinstance(value, bool):
        raise ValueError(f"{name!r} must be true or false, got {value!r}")
    return value


def _get_int(d: dict[str, Any], name: str) -> int | None:
    value = d.get(name)
    if value is None:
        return None
    # bool is an int subclass; "true" is not a port number
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name!r} must be an integer, got {value!r}")
    return value


def _get_list(d: dict[str, Any], name: str) -> list:
    value = d.get(name, [])
    if not isinstance(value, list):
        raise ValueError(f"{name!r} must be a list, got {value!r}")
    return value


def _parse_network(text: Any) -> IPNetwork:
    if not isinstance(text, str):
        raise ValueError(f"Allowed IP must be a CIDR string, got {text!r}")
    return ipaddress.ip_network(text, strict=False)


@dataclass(frozen=True)
class PeerConfig:
    """Changes to apply to a single peer, identified by its public key."""

    public_key: Key
    remove: bool = False
    preshared_key: Key | None = None
    endpoint: Endpoint | None = None
    persistent_keepalive_interval: timedelta | None = None
    replace_allowed_ips: bool = False
    allowed_ips: tuple[IPNetwork, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_ips", tuple(self.allowed_ips))

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PeerConfig:
        """Build a peer from a JSON-shaped dict.

        Keys are base64 or hex strings, ``endpoint`` is ``host:port``,
        ``persistent_keepalive_interval`` is whole seconds and
        ``allowed_ips`` is a list of CIDR strings. Flags must be real
        booleans.

        Raises:
            ValueError: If a field is missing, has the wrong type or fails
                to parse.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Peer must be an object, got {d!r}")
        if "public_key" not in d:
            raise ValueError("Peer is missing required field 'public_key'")

        keepalive = _get_int(d, "persistent_keepalive_interval")
        preshared = d.get("preshared_key")
        endpoint = d.get("endpoint")

        return cls(
            public_key=Key.parse(d["public_key"]),
            remove=_get_bool(d, "remove"),
            preshared_key=Key.parse(preshared) if preshared is not None else None,
            endpoint=Endpoint.parse(endpoint) if endpoint is not None else None,
            persistent_keepalive_interval=(
                timedelta(seconds=keepalive) if keepalive is not None else None
            ),
            replace_allowed_ips=_get_bool(d, "replace_allowed_ips"),
            allowed_ips=tuple(
                _parse_network(ip) for ip in _get_list(d, "allowed_ips")
            ),
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dict. Absent fields are left out."""
        d: dict[str, Any] = {"public_key": self.public_key.base64()}
        if self.remove:
            d["remove"] = True
        if self.preshared_key is not None:
            d["preshared_key"] = self.preshared_key.base64()
        if self.endpoint is not None:
            d["endpoint"] = str(self.endpoint)
        if self.persistent_keepalive_interval is not None:
            d["persistent_keepalive_interval"] = int(
                self.persistent_keepalive_interval.total_seconds()
            )
        if self.replace_allowed_ips:
            d["replace_allowed_ips"] = True
        d["allowed_ips"] = [str(ip) for ip in self.allowed_ips]
        return d


@dataclass(frozen=True)
class Config:
    """Device-level configuration plus an ordered list of peer changes."""

    private_key: Key | None = None
    listen_port: int | None = None
    firewall_mark: int | None = None
    replace_peers: bool = False
    peers: tuple[PeerConfig, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "peers", tuple(self.peers))

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        """Build a configuration from a JSON-shaped dict.

        Raises:
            ValueError: If a field has the wrong type, or a key, endpoint
                or network fails to parse.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Configuration must be an object, got {d!r}")
        private_key = d.get("private_key")
        return cls(
            private_key=Key.parse(private_key) if private_key is not None else None,
            listen_port=_get_int(d, "listen_port"),
            firewall_mark=_get_int(d, "firewall_mark"),
            replace_peers=_get_bool(d, "replace_peers"),
            peers=tuple(PeerConfig.from_dict(p) for p in _get_list(d, "peers")),
        )

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        if self.private_key is not None:
            d["private_key"] = self.private_key.base64()
        if self.listen_port is not None:
            d["listen_port"] = self.listen_port
        if self.firewall_mark is not None:
            d["firewall_mark"] = self.firewall_mark
        if self.replace_peers:
            d["replace_peers"] = True
        d["peers"] = [p.to_dict() for p in self.peers]
        return d

    def __repr__(self) -> str:
        return (
            f"Config(listen_port={self.listen_port!r}, "
            f"firewall_mark={self.firewall_mark!r}, "
            f"replace_peers={self.replace_peers}, peers={len(self.peers)})"
        )
