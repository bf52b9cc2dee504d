"""A threaded TCP server that parses requests and hands them to a handler."""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from httpfromtcp.request import Request, RequestError, request_from_reader
from httpfromtcp.response import (
    DEFAULT_TEMPLATE_PATH,
    StatusCode,
    Writer,
    build_response_body,
    get_default_headers,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Writer, Request], None]


@dataclass
class HandlerError:
    """An error response to send instead of calling the handler."""

    status_code: int
    message: str
    template_path: str | Path = DEFAULT_TEMPLATE_PATH

    def write(self, writer: Writer) -> None:
        """Write the complete error response."""
        writer.write_status_line(self.status_code)
        headers = get_default_headers(len(self.message.encode("utf-8")))
        headers.set("Content-Type", "text/html")
        writer.write_headers(headers)
        writer.write_body(
            build_response_body(self.status_code, self.message, self.template_path)
        )


class Server:
    """Accepts connections on a listening socket in a background thread."""

    def __init__(
        self,
        listener: socket.socket,
        handler: Handler,
        template_path: str | Path = DEFAULT_TEMPLATE_PATH,
    ) -> None:
        self._listener = listener
        self.port: int = listener.getsockname()[1]
        self._handler = handler
        self._template_path = template_path
        self._closed = threading.Event()
        self._thread = threading.Thread(
            target=self._listen, name=f"server-{self.port}", daemon=True
        )
        self._thread.start()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop accepting connections and close the listener."""
        if self._closed.is_set():
            return
        self._closed.set()
        try:
            self._listener.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._listener.close()
        self._thread.join(timeout=5)

    def _listen(self) -> None:
        while True:
            try:
                conn, _ = self._listener.accept()
            except OSError as exc:
                if self._closed.is_set():
                    return
                logger.warning("unable to accept connection: %s", exc)
                continue
            threading.Thread(target=self.handle, args=(conn,), daemon=True).start()

    def handle(self, conn: socket.socket) -> None:
        """Serve one request on ``conn`` and close it."""
        with conn:
            reader = conn.makefile("rb", buffering=0)
            out = conn.makefile("wb")
            writer = Writer(out)
            try:
                try:
                    request = request_from_reader(reader)
                except RequestError as exc:
                    HandlerError(
                        StatusCode.BAD_REQUEST, str(exc), self._template_path
                    ).write(writer)
                    return
                self._handler(writer, request)
            except Exception:
                logger.exception("error while handling connection")
            finally:
                try:
                    out.close()
                except OSError as exc:
                    logger.warning("unable to flush response: %s", exc)
                reader.close()


def serve(port: int, handler: Handler) -> Server:
    """Listen on ``port`` on all interfaces and start serving in the background."""
    listener = socket.create_server(("", port))
    return Server(listener, handler)