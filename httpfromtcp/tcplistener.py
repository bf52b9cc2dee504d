"""A TCP listener that prints every request it receives."""

from __future__ import annotations

import argparse
import logging
import socket

from httpfromtcp.request import Request, RequestError, request_from_reader

logger = logging.getLogger(__name__)

DEFAULT_PORT = 42069


def format_request(request: Request) -> str:
    """Describe a parsed request: its line, headers and body."""
    line = request.request_line
    parts = [
        "Request line: ",
        f" - Method: {line.method}",
        f" - Target: {line.request_target}",
        f" - Version: {line.http_version}",
        "Headers:",
    ]
    parts.extend(f" - {name}: {value}" for name, value in request.headers.items())
    parts.append("Body: ")
    parts.append(f" {request.body.decode('utf-8', errors='replace')}")
    return "\n".join(parts) + "\n"


def main(argv: list[str] | None = None) -> int:
    """Accept connections and print their requests; stop at the first failure."""
    parser = argparse.ArgumentParser(
        prog="tcplistener", description="Print HTTP requests received over TCP."
    )
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    try:
        listener = socket.create_server(("", args.port))
    except OSError as exc:
        logger.error("%s", exc)
        return 1

    with listener:
        print(f"Listening on port {args.port}...", flush=True)
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                logger.error("%s", exc)
                return 1
            with conn, conn.makefile("rb", buffering=0) as reader:
                print("connection accepted", flush=True)
                try:
                    request = request_from_reader(reader)
                except (RequestError, OSError) as exc:
                    logger.error("%s", exc)
                    return 1
                print(format_request(request), end="")
                print("connection closed", flush=True)