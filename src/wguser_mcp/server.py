"""MCP server entry point for configuring userspace WireGuard devices.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .models.config import Config
from .protocol.encoder import encode_set_request
from .protocol.errors import ProtocolError, WgUserError
from .transport.uapi_connection import configure_device as apply_config

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "wguser",
    instructions="Configure userspace WireGuard devices over their control sockets.",
)

SET_GRAMMAR = """\
set=1
[private_key=<64 lowercase hex chars>]
[listen_port=<decimal>]
[fwmark=<decimal>]
[replace_peers=true]
(repeated per peer, in order:)
public_key=<64 lowercase hex chars>
[remove=true]
[preshared_key=<64 lowercase hex chars>]
[endpoint=<ip:port or [ipv6]:port>]
[persistent_keepalive_interval=<decimal seconds>]
[replace_allowed_ips=true]
[allowed_ip=<cidr>]*
<blank line>

Reply: errno=<decimal>, where 0 means success.
"""


# ─── CONFIGURATION TOOLS ─────────────────────────────────────────────

@mcp.tool()
def configure_device(socket_path: str, config: dict[str, Any]) -> dict[str, Any]:
    """Apply a configuration to a userspace WireGuard device.

    Args:
        socket_path: Path to the device control socket,
                     e.g. /var/run/wireguard/wg0.sock.
        config: Configuration dict, e.g.
                {"listen_port": 51820, "peers": [{"public_key": "<base64>",
                 "endpoint": "192.0.2.1:51820", "allowed_ips": ["10.0.0.2/32"]}]}.
                Keys may be base64 or hex.
    """
    try:
        cfg = Config.from_dict(config)
    except ValueError as e:
        return {"error": f"Invalid configuration: {e}"}

    try:
        apply_config(socket_path, cfg)
    except ProtocolError as e:
        return {"error": str(e), "code": e.code}
    except WgUserError as e:
        return {"error": str(e)}

    logger.info("Configured %s (%d peers)", socket_path, len(cfg.peers))
    return {"configured": True, "socket_path": socket_path, "peer_count": len(cfg.peers)}


@mcp.tool()
def preview_set_request(config: dict[str, Any]) -> dict[str, Any]:
    """Show the exact set request a configuration encodes to, without sending it.

    Args:
        config: Configuration dict, same shape as for configure_device.
    """
    try:
        cfg = Config.from_dict(config)
    except ValueError as e:
        return {"error": f"Invalid configuration: {e}"}

    request = encode_set_request(cfg)
    return {"request": request.decode("utf-8"), "length": len(request)}


# ─── RESOURCES ───────────────────────────────────────────────────────

@mcp.resource("wguser://protocol/set-grammar")
def set_grammar() -> str:
    """Grammar of the set request and its reply."""
    return SET_GRAMMAR


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
