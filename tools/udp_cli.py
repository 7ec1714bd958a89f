#!/usr/bin/env python3
"""
A command line UDP testing/debugging utility.

    udp send HOST PORT < packet.bin
    udp listen PORT
"""

import argparse
import sys
from typing import List, Optional

from udp_listener import DEFAULT_BIND_IP, listen
from udp_sender import SendRequest, read_payload, send_packet

VERSION = "0.1.0"
MAX_PORT = 65535


def parse_port(text: str) -> int:
    digits = text[1:] if text.startswith("+") else text
    if not (digits.isascii() and digits.isdigit()) or int(digits) > MAX_PORT:
        raise ValueError(f"invalid port '{text}': expected an integer in 0..{MAX_PORT}")
    return int(digits)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="udp", description="A command line UDP testing/debugging utility"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    send = sub.add_parser("send", help="Send a UDP packet read from stdin")
    send.add_argument("host", metavar="HOST", help="Target host")
    send.add_argument("port", metavar="PORT", help="Target port")

    recv = sub.add_parser("listen", help="Print received UDP packets to stderr")
    recv.add_argument("port", metavar="PORT", help="UDP port to listen on")
    recv.add_argument(
        "--bind", default=DEFAULT_BIND_IP, help=f"IP/interface to bind (default: {DEFAULT_BIND_IP})"
    )
    recv.add_argument("--rcvbuf", type=int, default=None, help="SO_RCVBUF size")
    recv.add_argument(
        "--hex",
        type=int,
        default=0,
        help="Also print this many bytes of payload as hex (default: 0, disabled)",
    )
    recv.add_argument(
        "--limit-packets", type=int, default=None, help="Stop after this many packets"
    )
    return parser


def cmd_send(args: argparse.Namespace, port: int) -> None:
    try:
        payload = read_payload()
    except OSError as exc:
        raise OSError(f"failed reading packet from stdin: {exc}") from exc
    try:
        send_packet(SendRequest(host=args.host, port=port, payload=payload))
    except OSError as exc:
        raise OSError(f"failed to send the packet to {args.host}:{port}: {exc}") from exc


def cmd_listen(args: argparse.Namespace, port: int) -> None:
    listen(
        port,
        bind=args.bind,
        rcvbuf=args.rcvbuf,
        limit_packets=args.limit_packets,
        hex_bytes=args.hex,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stdout)
        return 0

    try:
        port = parse_port(args.port)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        if args.command == "send":
            cmd_send(args, port)
        elif args.command == "listen":
            cmd_listen(args, port)
        else:
            raise AssertionError(f"unhandled command {args.command!r}")
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
