"""Command-line sender and receiver."""

from __future__ import annotations

import argparse
import itertools
import sys

from .comm_dev import CommDeviceError
from .packet import PacketType
from .snail import Snail

_SERVER_MESSAGE = b"james"


def _attempts(count):
    return itertools.count() if count is None else range(count)


def _serve(snail: Snail, count=None, message: bytes = _SERVER_MESSAGE) -> None:
    """Send ``message`` as DATA packets, forever unless ``count`` is given."""
    for _ in _attempts(count):
        try:
            snail.send(PacketType.DATA, message)
        except CommDeviceError as exc:
            print(f"cannot send packet: {exc}", file=sys.stderr)


def _listen(snail: Snail, count=None, out=None) -> None:
    """Receive packets and print each one, forever unless ``count`` is given."""
    out = sys.stdout if out is None else out
    for _ in _attempts(count):
        try:
            packet = snail.recv()
        except CommDeviceError as exc:
            print(f"cannot receive packet: {exc}", file=sys.stderr)
            continue
        print(packet.format(), file=out, flush=True)


def _parse(prog: str, description: str, argv):
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("interface", help="network interface to use")
    parser.add_argument(
        "-n", "--count", type=int, default=None, help="stop after this many packets"
    )
    return parser.parse_args(argv)


def _run(prog: str, description: str, argv, loop) -> int:
    args = _parse(prog, description, argv)
    try:
        snail = Snail(args.interface)
    except CommDeviceError as exc:
        print(f"{prog}: cannot start communication device: {exc}", file=sys.stderr)
        return 1
    with snail:
        try:
            loop(snail, args.count)
        except KeyboardInterrupt:
            return 130
    return 0


def server_main(argv=None) -> int:
    """Keep sending a DATA packet on the given interface."""
    return _run("snail-server", "Send DATA packets.", argv, _serve)


def client_main(argv=None) -> int:
    """Print every packet received on the given interface."""
    return _run("snail-client", "Print received packets.", argv, _listen)