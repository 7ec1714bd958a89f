"""
Display helpers for UDP payloads.

Nothing in here touches a socket, so every function can be fed crafted byte
sequences directly.
"""

from typing import Tuple


def decode_lossy(data: bytes) -> str:
    """Decode UTF-8, replacing every invalid sequence with U+FFFD."""
    return bytes(data).decode("utf-8", errors="replace")


def raw_repr(data: bytes) -> str:
    return repr(bytes(data))


def format_address(addr: Tuple[str, int]) -> str:
    return f"{addr[0]}:{addr[1]}"


def hexdump(buf: bytes, limit: int) -> str:
    if limit <= 0:
        return ""
    shown = buf[:limit]
    return " ".join(f"{b:02x}" for b in shown)


def rate_summary(pkts: int, bytes_rx: int, elapsed: float) -> str:
    pps = pkts / elapsed if elapsed > 0 else 0.0
    return f"{pkts} pkts, {bytes_rx} bytes, {pps:.1f} pkt/s"
