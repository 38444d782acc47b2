"""Tests for set request encoding."""

import io
import ipaddress
from datetime import timedelta

from wguser_mcp.models.config import Config, Endpoint, PeerConfig
from wguser_mcp.models.key import Key
from wguser_mcp.protocol.encoder import (
    encode_config,
    encode_set_request,
    write_config,
)


def _key(b: int) -> Key:
    return Key(bytes([b]) * 32)


def _full_config() -> Config:
    return Config(
        private_key=_key(0x01),
        listen_port=51820,
        firewall_mark=0x1234,
        replace_peers=True,
        peers=[
            PeerConfig(
                public_key=_key(0x02),
                remove=True,
                preshared_key=_key(0x03),
                endpoint=Endpoint(ipaddress.ip_address("192.0.2.1"), 51820),
                persistent_keepalive_interval=timedelta(seconds=25, milliseconds=900),
                replace_allowed_ips=True,
                allowed_ips=[
                    ipaddress.ip_network("10.0.0.0/24"),
                    ipaddress.ip_network("10.1.0.0/16"),
                ],
            ),
            PeerConfig(
                public_key=_key(0xAB),
                remove=True,
                preshared_key=_key(0xCD),
                endpoint=Endpoint(ipaddress.ip_address("2001:db8::1"), 51821),
                persistent_keepalive_interval=timedelta(seconds=10),
                replace_allowed_ips=True,
                allowed_ips=[
                    ipaddress.ip_network("2001:db8::/64"),
                    ipaddress.ip_network("192.168.1.1/32"),
                ],
            ),
        ],
    )


FULL_REQUEST = (
    "set=1\n"
    f"private_key={'01' * 32}\n"
    "listen_port=51820\n"
    "fwmark=4660\n"
    "replace_peers=true\n"
    f"public_key={'02' * 32}\n"
    "remove=true\n"
    f"preshared_key={'03' * 32}\n"
    "endpoint=192.0.2.1:51820\n"
    "persistent_keepalive_interval=25\n"
    "replace_allowed_ips=true\n"
    "allowed_ip=10.0.0.0/24\n"
    "allowed_ip=10.1.0.0/16\n"
    f"public_key={'ab' * 32}\n"
    "remove=true\n"
    f"preshared_key={'cd' * 32}\n"
    "endpoint=[2001:db8::1]:51821\n"
    "persistent_keepalive_interval=10\n"
    "replace_allowed_ips=true\n"
    "allowed_ip=2001:db8::/64\n"
    "allowed_ip=192.168.1.1/32\n"
    "\n"
).encode()


def test_empty_config():
    """An empty configuration is just the command and the terminator."""
    assert encode_set_request(Config()) == b"set=1\n\n"
    assert encode_config(Config()) == ""


def test_full_config_exact_bytes():
    """Every field, in protocol order, for two fully populated peers."""
    assert encode_set_request(_full_config()) == FULL_REQUEST


def test_encoding_is_deterministic():
    cfg = _full_config()
    assert encode_set_request(cfg) == encode_set_request(cfg)


def test_zero_values_are_emitted():
    """Present-but-zero is different from absent."""
    text = encode_config(Config(listen_port=0, firewall_mark=0))
    assert text == "listen_port=0\nfwmark=0\n"


def test_false_flags_are_omitted():
    """Unset replace/remove flags never produce a "false" line."""
    cfg = Config(replace_peers=False, peers=[PeerConfig(public_key=_key(0x02))])
    text = encode_config(cfg)
    assert text == f"public_key={'02' * 32}\n"
    assert "false" not in text


def test_peer_with_only_allowed_ips():
    cfg = Config(peers=[
        PeerConfig(
            public_key=_key(0x02),
            allowed_ips=[ipaddress.ip_network("10.0.0.2/32")],
        ),
    ])
    assert encode_config(cfg) == (
        f"public_key={'02' * 32}\n"
        "allowed_ip=10.0.0.2/32\n"
    )


def test_keepalive_truncated_to_whole_seconds():
    cfg = Config(peers=[
        PeerConfig(
            public_key=_key(0x02),
            persistent_keepalive_interval=timedelta(seconds=14, microseconds=999999),
        ),
    ])
    assert "persistent_keepalive_interval=14\n" in encode_config(cfg)


def test_zero_keepalive_is_emitted():
    """A zero interval disables keepalives; it is not the same as absent."""
    cfg = Config(peers=[
        PeerConfig(public_key=_key(0x02), persistent_keepalive_interval=timedelta(0)),
    ])
    assert encode_config(cfg).endswith("persistent_keepalive_interval=0\n")


def test_peer_order_preserved():
    keys = [_key(b) for b in (0x09, 0x01, 0x05)]
    cfg = Config(peers=[PeerConfig(public_key=k) for k in keys])
    lines = encode_config(cfg).splitlines()
    assert lines == [f"public_key={k.hex()}" for k in keys]


def test_write_config_to_stream():
    buf = io.StringIO()
    write_config(buf, Config(private_key=_key(0xFF)))
    assert buf.getvalue() == f"private_key={'ff' * 32}\n"


def test_scoped_ipv6_endpoint_encodes_as_utf8():
    """The scope id is passed through inside the brackets."""
    cfg = Config(peers=[
        PeerConfig(
            public_key=_key(0x02),
            endpoint=Endpoint(ipaddress.ip_address("fe80::1%wg-ü"), 51820),
        ),
    ])
    request = encode_set_request(cfg)
    assert "endpoint=[fe80::1%wg-ü]:51820\n".encode("utf-8") in request
