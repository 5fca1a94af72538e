# codec.py — /proc/net address tokens, "a.b.c.d:port" rendering, TCP state labels
#
# /proc/net/tcp prints each IPv4 address as "%08X" of the network-order
# 32-bit value loaded as a native integer, so the hex digits follow host
# byte order. Ports are printed already converted, so they read directly.

import re
import sys
from typing import Optional, Tuple

from pinspect.errors import FormatError

TCP = "TCP"
UDP = "UDP"

UNKNOWN_STATE = "UNKNOWN"

TCP_STATE = {
    0x01: "ESTABLISHED",
    0x02: "SYN_SENT",
    0x03: "SYN_RECV",
    0x04: "FIN_WAIT1",
    0x05: "FIN_WAIT2",
    0x06: "TIME_WAIT",
    0x07: "CLOSE",
    0x08: "CLOSE_WAIT",
    0x09: "LAST_ACK",
    0x0A: "LISTEN",
    0x0B: "CLOSING",
}

_HEX = set("0123456789abcdefABCDEF")
_SOCKET_TARGET = re.compile(r"socket:\[([0-9]+)\]")

# ---------------- descriptor targets ----------------

def parse_socket_inode(target: Optional[str]) -> Optional[int]:
    """Return the inode of a "socket:[N]" symlink target, None for anything else."""
    if not target:
        return None
    m = _SOCKET_TARGET.fullmatch(target)
    if m is None:
        return None
    return int(m.group(1))

# ---------------- address tokens ----------------

def _hex_field(text: str, width: int, token: str) -> int:
    if len(text) != width or not set(text) <= _HEX:
        raise FormatError(f"bad hex field {text!r} in {token!r}")
    return int(text, 16)

def decode_address_token(token: Optional[str], byteorder: str = sys.byteorder) -> Tuple[int, int]:
    """Decode "0100007F:1F90" into (address, port).

    The address comes back as a network-order integer (0x7F000001 for
    127.0.0.1), whatever the host byte order. byteorder is the order the
    kernel used when it printed the address; it defaults to this host's.
    """
    if not isinstance(token, str):
        raise FormatError(f"address token must be a string, got {type(token).__name__}")
    fields = token.split(":")
    if len(fields) != 2:
        raise FormatError(f"expected ADDR:PORT, got {token!r}")
    raw = _hex_field(fields[0], 8, token)
    port = _hex_field(fields[1], 4, token)
    address = int.from_bytes(raw.to_bytes(4, byteorder), "big")
    return address, port

# ---------------- rendering ----------------

def format_address(address: int) -> str:
    return ".".join(str((address >> shift) & 0xFF) for shift in (24, 16, 8, 0))

def format_ip_port(address: int, port: int, maxlen: Optional[int] = None) -> str:
    """Render a network-order address and port as "a.b.c.d:port".

    maxlen works like a C buffer size: the text is cut to maxlen - 1
    characters, and a buffer with no room at all yields "?".
    """
    if maxlen is not None and maxlen <= 0:
        return "?"
    text = f"{format_address(address)}:{port}"
    if maxlen is not None:
        text = text[:maxlen - 1]
    return text

def tcp_state_label(code: int) -> str:
    return TCP_STATE.get(code, UNKNOWN_STATE)

def state_label(protocol: str, code: int) -> str:
    # UDP rows carry a state column too, but it has no TCP meaning.
    if protocol != TCP:
        return UNKNOWN_STATE
    return tcp_state_label(code)
