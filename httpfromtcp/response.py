"""HTTP response writing: status lines, headers, bodies and chunked encoding."""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO

from httpfromtcp.headers import Headers

CRLF = b"\r\n"

DEFAULT_TEMPLATE_PATH = Path("templates") / "response_body.html"

_TEMPLATE_FIELD = re.compile(r"\{\{\s*\.(\w+)\s*\}\}")


class StatusCode(enum.IntEnum):
    """Status codes the server knows a reason phrase for."""

    SUCCESS = 200
    BAD_REQUEST = 400
    INTERNAL_SERVER_ERROR = 500


_DESCRIPTIONS = {
    StatusCode.SUCCESS: "OK",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


class WriterStateError(RuntimeError):
    """Raised when a response part is written out of order."""


class _State(enum.Enum):
    INITIALIZED = 0
    HEADERS = 1
    BODY = 2
    TRAILERS = 3
    DONE = 4


def get_status_description(status_code: int) -> str:
    """Return the reason phrase for a status code."""
    return _DESCRIPTIONS.get(int(status_code), "Internal Server Error")


def get_status_line(status_code: int) -> str:
    """Return the full status line, terminated by CRLF."""
    return f"HTTP/1.1 {int(status_code)} {get_status_description(status_code)}\r\n"


def get_default_headers(content_length: int) -> Headers:
    """Return the headers every plain response starts from."""
    headers = Headers()
    headers.add("Content-Length", str(content_length))
    headers.add("Connection", "close")
    headers.add("Content-Type", "text/plain")
    return headers


def build_response_body(
    status_code: int,
    content: str,
    template_path: str | Path = DEFAULT_TEMPLATE_PATH,
) -> bytes:
    """Fill the HTML body template for a status code and message.

    The template refers to its fields as ``{{.ResponseBodyTitle}}``,
    ``{{.ResponseBodyHeader}}`` and ``{{.ResponseBodyContent}}``.
    """
    template = Path(template_path).read_text(encoding="utf-8")
    description = get_status_description(status_code)
    fields = {
        "ResponseBodyTitle": f"{int(status_code)} {description}",
        "ResponseBodyHeader": description,
        "ResponseBodyContent": content,
    }

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in fields:
            raise ValueError(f"unknown template field: {name}")
        return fields[name]

    return _TEMPLATE_FIELD.sub(substitute, template).encode("utf-8")


class Writer:
    """Writes one response to a binary stream, enforcing the order of its parts."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._state = _State.INITIALIZED

    def _require(self, state: _State, message: str) -> None:
        if self._state is not state:
            raise WriterStateError(message)

    def _write_fields(self, fields: Mapping[str, str]) -> None:
        for name, value in fields.items():
            self._stream.write(
                f"{name}: {value}\r\n".encode("utf-8", errors="surrogateescape")
            )
        self._stream.write(CRLF)

    def write_status_line(self, status_code: int) -> None:
        """Write the status line."""
        self._require(_State.INITIALIZED, "write status line called out of order")
        try:
            self._stream.write(get_status_line(status_code).encode("ascii"))
        finally:
            self._state = _State.HEADERS

    def write_headers(self, headers: Mapping[str, str]) -> None:
        """Write the header block and the blank line that ends it."""
        self._require(_State.HEADERS, "write headers called out of order")
        try:
            self._write_fields(headers)
        finally:
            self._state = _State.BODY

    def write_body(self, data: bytes) -> int:
        """Write the whole body; return the number of bytes written."""
        self._require(_State.BODY, "write body called out of order")
        try:
            self._stream.write(data)
        finally:
            self._state = _State.DONE
        return len(data)

    def write_chunked_body(self, data: bytes) -> int:
        """Write one chunk; return the bytes written including framing."""
        self._require(_State.BODY, "write body called out of order")
        frame = f"{len(data):x}\r\n".encode("ascii") + bytes(data) + CRLF
        self._stream.write(frame)
        return len(frame)

    def write_chunked_body_done(self) -> int:
        """Write the terminating zero-length chunk; return the bytes written."""
        self._require(
            _State.BODY, f"cannot write body in state {self._state.value}"
        )
        terminator = b"0" + CRLF
        self._stream.write(terminator)
        self._state = _State.TRAILERS
        return len(terminator)

    def write_trailers(self, trailers: Mapping[str, str]) -> None:
        """Write the trailer fields after a chunked body."""
        self._require(
            _State.TRAILERS, f"cannot write trailers in state {self._state.value}"
        )
        try:
            self._write_fields(trailers)
        finally:
            self._state = _State.BODY