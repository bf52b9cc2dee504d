"""The demonstration HTTP server and the routes it answers."""

from __future__ import annotations

import argparse
import hashlib
import logging
import signal
import threading
import urllib.error
import urllib.request
from pathlib import Path

from httpfromtcp.headers import Headers
from httpfromtcp.request import Request
from httpfromtcp.response import (
    StatusCode,
    Writer,
    build_response_body,
    get_default_headers,
)
from httpfromtcp.server import serve

logger = logging.getLogger(__name__)

DEFAULT_PORT = 42069
VIDEO_PATH = Path("assets") / "vim.mp4"
PROXY_BASE_URL = "http://httpbin.org/"
MAX_CHUNK_SIZE = 1024
TRAILER_NAMES = "X-Content-SHA256, X-Content-Length"


def handler(writer: Writer, request: Request) -> None:
    """Route a request to the response it deserves."""
    target = request.request_line.request_target
    if target.startswith("/httpbin"):
        _proxy(writer, request)
    elif target.startswith("/video"):
        _video(writer, request)
    elif target == "/yourproblem":
        _write_html(
            writer, StatusCode.BAD_REQUEST, "Your request honestly kinda sucked."
        )
    elif target == "/myproblem":
        _write_server_error(writer)
    else:
        _write_html(
            writer, StatusCode.SUCCESS, "Your request was an absolute banger."
        )


def _write_html(writer: Writer, status_code: int, message: str) -> None:
    headers = Headers()
    writer.write_status_line(status_code)
    headers.set("Content-Type", "text/html")
    writer.write_headers(headers)
    writer.write_body(build_response_body(status_code, message))


def _write_server_error(writer: Writer) -> None:
    _write_html(
        writer,
        StatusCode.INTERNAL_SERVER_ERROR,
        "Okay, you know what? This one is on me.",
    )


def _video(writer: Writer, request: Request) -> None:
    headers = get_default_headers(0)
    headers.set("Content-Type", "video/mp4")
    try:
        data = VIDEO_PATH.read_bytes()
    except OSError as exc:
        _write_server_error(writer)
        logger.error("Error reading video file: %s", exc)
        return
    headers.set("Content-Length", str(len(data)))
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(headers)
    writer.write_body(data)


def _proxy(writer: Writer, request: Request) -> None:
    target = request.request_line.request_target.removeprefix("/httpbin/")
    url = f"{PROXY_BASE_URL}{target}"
    headers = get_default_headers(0)

    try:
        upstream = urllib.request.urlopen(url)
    except urllib.error.HTTPError as exc:
        upstream = exc
    except OSError as exc:
        _write_server_error(writer)
        logger.error("Error making request to httpbin: %s", exc)
        return

    digest = hashlib.sha256()
    total = 0
    try:
        writer.write_status_line(upstream.status)
        for name, value in upstream.headers.items():
            headers.add(name, value)
        headers.delete("Content-Length")
        headers.set("Transfer-Encoding", "chunked")
        headers.add("Trailer", TRAILER_NAMES)
        writer.write_headers(headers)

        while True:
            try:
                chunk = upstream.read(MAX_CHUNK_SIZE)
            except OSError as exc:
                logger.error("Error reading httpbin response: %s", exc)
                return
            if not chunk:
                break
            digest.update(chunk)
            total += len(chunk)
            written = writer.write_chunked_body(chunk)
            logger.debug("Wrote %d bytes", written)
        writer.write_chunked_body_done()
    finally:
        upstream.close()

    trailers = Headers()
    trailers.add("X-Content-SHA256", digest.hexdigest())
    trailers.add("X-Content-Length", str(total))
    writer.write_trailers(trailers)


def main(argv: list[str] | None = None) -> int:
    """Run the server until SIGINT or SIGTERM arrives."""
    parser = argparse.ArgumentParser(
        prog="httpserver", description="Serve the demonstration routes."
    )
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        server = serve(args.port, handler)
    except OSError as exc:
        logger.error("Error starting server: %s", exc)
        return 1

    stop = threading.Event()

    def _on_signal(signum: int, frame: object) -> None:
        stop.set()

    previous = {
        sig: signal.signal(sig, _on_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        with server:
            logger.info("Server started on port %d", args.port)
            while not stop.wait(0.5):
                pass
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)
    logger.info("Server gracefully stopped")
    return 0