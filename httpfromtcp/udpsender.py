"""Send lines typed on standard input as UDP datagrams."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 42069


def send_lines(lines: Iterable[str], sock: socket.socket, address: tuple) -> int:
    """Send each line as one datagram until a line reading ``exit``.

    Returns the number of datagrams sent; send failures are logged and skipped.
    """
    sent = 0
    for line in lines:
        if line == "exit\n":
            break
        try:
            sock.sendto(line.encode("utf-8"), address)
        except OSError as exc:
            logger.error("Error sending data: %s", exc)
            continue
        sent += 1
    return sent


def _prompted_lines(stream: TextIO) -> Iterator[str]:
    while True:
        print("> ", end="", flush=True)
        line = stream.readline()
        if not line.endswith("\n"):
            logger.info("EOF received, exiting.")
            return
        yield line


def main(argv: list[str] | None = None) -> int:
    """Read lines from standard input and send them to the target address."""
    parser = argparse.ArgumentParser(
        prog="udpsender", description="Send standard input lines over UDP."
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    family, _, _, _, address = socket.getaddrinfo(
        args.host, args.port, type=socket.SOCK_DGRAM
    )[0]
    with socket.socket(family, socket.SOCK_DGRAM) as sock:
        logger.info("Connected to %s:%s", address[0], address[1])
        send_lines(_prompted_lines(sys.stdin), sock, address)
    return 0