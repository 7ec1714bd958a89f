"""
Send one UDP datagram read from standard input.
"""

import ipaddress
import socket
import sys
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple

DEFAULT_BIND_IP = "0.0.0.0"


@dataclass
class SendRequest:
    host: str
    port: int
    payload: bytes


def read_payload(stream: Optional[BinaryIO] = None) -> bytes:
    if stream is None:
        stream = sys.stdin.buffer
    return stream.read()


def resolve(host: str, port: int) -> Tuple[str, int]:
    try:
        return str(ipaddress.IPv4Address(host)), port
    except ValueError:
        pass

    # raises socket.gaierror when the name has no address
    infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_DGRAM)
    # sockaddr is (ip, port) for AF_INET
    return infos[0][4][:2]


def open_sender_socket() -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind((DEFAULT_BIND_IP, 0))
    except OSError:
        sock.close()
        raise
    return sock


def send_packet(request: SendRequest) -> int:
    """Send ``request.payload`` as exactly one datagram.

    Any failure (resolution, socket setup, a payload too large for one
    datagram) raises OSError; nothing is retried or truncated.
    """
    dest = resolve(request.host, request.port)
    sock = open_sender_socket()
    try:
        return sock.sendto(request.payload, dest)
    finally:
        sock.close()
