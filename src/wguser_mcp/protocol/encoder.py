"""Encoder for the ``set=1`` request of the userspace control protocol.

Request layout::

    set=1
    private_key=<hex>                         (optional)
    listen_port=<decimal>                     (optional)
    fwmark=<decimal>                          (optional)
    replace_peers=true                        (optional)
    public_key=<hex>                          (per peer, always first)
    remove=true                               (optional)
    preshared_key=<hex>                       (optional)
    endpoint=<ip:port | [ip6]:port>           (optional)
    persistent_keepalive_interval=<seconds>   (optional)
    replace_allowed_ips=true                  (optional)
    allowed_ip=<cidr>                         (zero or more)
    <blank line>

The device treats each ``public_key=`` line as the start of a new peer
block, so it must precede that peer's other fields. Absent fields and
unset flags produce no line; ``false`` is never written.
"""

from __future__ import annotations

import io
from typing import TextIO

from ..models.config import Config

SET_COMMAND = "set=1\n"
REQUEST_TERMINATOR = "\n"


def write_config(w: TextIO, cfg: Config) -> None:
    """Write the ``key=value`` lines for ``cfg`` to a text stream.

    No escaping or range checking is done.
    """
    if cfg.private_key is not None:
        w.write(f"private_key={cfg.private_key.hex()}\n")

    if cfg.listen_port is not None:
        w.write(f"listen_port={cfg.listen_port:d}\n")

    if cfg.firewall_mark is not None:
        w.write(f"fwmark={cfg.firewall_mark:d}\n")

    if cfg.replace_peers:
        w.write("replace_peers=true\n")

    for peer in cfg.peers:
        w.write(f"public_key={peer.public_key.hex()}\n")

        if peer.remove:
            w.write("remove=true\n")

        if peer.preshared_key is not None:
            w.write(f"preshared_key={peer.preshared_key.hex()}\n")

        if peer.endpoint is not None:
            w.write(f"endpoint={peer.endpoint}\n")

        if peer.persistent_keepalive_interval is not None:
            # int() truncates toward zero
            seconds = int(peer.persistent_keepalive_interval.total_seconds())
            w.write(f"persistent_keepalive_interval={seconds}\n")

        if peer.replace_allowed_ips:
            w.write("replace_allowed_ips=true\n")

        for ip in peer.allowed_ips:
            w.write(f"allowed_ip={ip}\n")


def encode_config(cfg: Config) -> str:
    """Return the configuration lines for ``cfg`` as a string."""
    buf = io.StringIO()
    write_config(buf, cfg)
    return buf.getvalue()


def encode_set_request(cfg: Config) -> bytes:
    """Build the complete ``set=1`` request, ready to send in one write.

    Returns:
        UTF-8 bytes: the command line, the configuration lines and the
        terminating blank line.
    """
    buf = io.StringIO()
    buf.write(SET_COMMAND)
    write_config(buf, cfg)
    buf.write(REQUEST_TERMINATOR)
    return buf.getvalue().encode("utf-8")
