"""
UDP listener that prints every received packet to stderr.

Each packet is logged as its sender address, the payload decoded as UTF-8
(invalid sequences replaced, never fatal), the raw bytes, and a blank line.
"""

import socket
import sys
import time
from dataclasses import dataclass
from typing import Optional, TextIO, Tuple

from payload_format import decode_lossy, format_address, hexdump, raw_repr, rate_summary
from udp_sender import DEFAULT_BIND_IP

# Largest possible UDP payload fits with room to spare.
RECV_BUFFER_SIZE = 65536


@dataclass
class ReceivedPacket:
    source: Tuple[str, int]
    payload: bytes

    @property
    def size(self) -> int:
        return len(self.payload)

    @property
    def source_address(self) -> str:
        return format_address(self.source)

    @property
    def text(self) -> str:
        return decode_lossy(self.payload)

    @property
    def raw(self) -> str:
        return raw_repr(self.payload)


@dataclass
class ListenStats:
    packets: int = 0
    bytes_rx: int = 0

    def account_packet(self, packet: ReceivedPacket) -> None:
        self.packets += 1
        self.bytes_rx += packet.size

    def summary(self, elapsed: float) -> str:
        return rate_summary(self.packets, self.bytes_rx, elapsed)


def open_listener(
    port: int, bind: str = DEFAULT_BIND_IP, rcvbuf: Optional[int] = None
) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        if rcvbuf is not None:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, rcvbuf)
        sock.bind((bind, port))
    except OSError:
        sock.close()
        raise
    return sock


def format_packet(packet: ReceivedPacket, hex_bytes: int = 0) -> str:
    lines = [
        f"from {packet.source_address}, {packet.size} bytes",
        packet.text,
        packet.raw,
    ]
    prefix = hexdump(packet.payload, hex_bytes)
    if prefix:
        lines.append(f"hex[{prefix}]")
    return "\n".join(lines) + "\n\n"


def receive_loop(
    sock: socket.socket,
    out: Optional[TextIO] = None,
    limit_packets: Optional[int] = None,
    hex_bytes: int = 0,
    stats: Optional[ListenStats] = None,
) -> ListenStats:
    """Receive and print packets until ``limit_packets`` is reached.

    Without a limit the loop only ends through an exception: socket errors
    propagate, and KeyboardInterrupt is left to the caller.
    """
    if out is None:
        out = sys.stderr
    if stats is None:
        stats = ListenStats()

    while limit_packets is None or stats.packets < limit_packets:
        data, addr = sock.recvfrom(RECV_BUFFER_SIZE)
        packet = ReceivedPacket(source=addr[:2], payload=data)
        stats.account_packet(packet)
        # one write per packet so entries never interleave
        out.write(format_packet(packet, hex_bytes))
        out.flush()

    return stats


def listen(
    port: int,
    bind: str = DEFAULT_BIND_IP,
    rcvbuf: Optional[int] = None,
    limit_packets: Optional[int] = None,
    hex_bytes: int = 0,
) -> ListenStats:
    sock = open_listener(port, bind, rcvbuf)
    print(f"listening on {bind}:{port} (Ctrl+C to stop)", file=sys.stderr)

    stats = ListenStats()
    start = time.time()
    try:
        receive_loop(sock, limit_packets=limit_packets, hex_bytes=hex_bytes, stats=stats)
    except KeyboardInterrupt:
        pass
    finally:
        sock.close()

    elapsed = max(time.time() - start, 1e-6)
    print(f"stopped after {elapsed:.1f}s: {stats.summary(elapsed)}", file=sys.stderr)
    return stats
