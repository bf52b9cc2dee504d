"""Incremental parsing of HTTP/1.1 requests from a byte stream."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import BinaryIO

from httpfromtcp.headers import CRLF, HeaderError, Headers

_INITIAL_BUFFER_SIZE = 8

VALID_METHODS = frozenset(
    {"GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "TRACE", "PATCH", "CONNECT"}
)

_INTEGER = re.compile(r"[+-]?[0-9]+")


class RequestError(ValueError):
    """Raised when a request is malformed or incomplete."""


class _State(enum.Enum):
    INITIALIZED = 0
    PARSING_HEADERS = 1
    PARSING_BODY = 2
    DONE = 3


@dataclass
class RequestLine:
    """The method, target and version of a request."""

    http_version: str = ""
    request_target: str = ""
    method: str = ""


@dataclass
class Request:
    """A request being parsed, or a fully parsed one."""

    request_line: RequestLine = field(default_factory=RequestLine)
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    _state: _State = field(default=_State.INITIALIZED, repr=False, compare=False)

    @property
    def done(self) -> bool:
        return self._state is _State.DONE

    def parse(self, data: bytes) -> int:
        """Consume as much of ``data`` as possible; return the bytes consumed."""
        total = 0
        while self._state is not _State.DONE:
            consumed = self._parse_single(data[total:])
            total += consumed
            if consumed == 0:
                break
        return total

    def _parse_single(self, data: bytes) -> int:
        if self._state is _State.INITIALIZED:
            request_line, consumed = parse_request_line(data)
            if request_line is None:
                return 0
            self.request_line = request_line
            self._state = _State.PARSING_HEADERS
            return consumed

        if self._state is _State.PARSING_HEADERS:
            try:
                consumed, done = self.headers.parse(data)
            except HeaderError as exc:
                raise RequestError(str(exc)) from exc
            if done:
                self._state = _State.PARSING_BODY
            return consumed

        if self._state is _State.PARSING_BODY:
            return self._parse_body(data)

        raise RequestError("error: trying to read data in a done state")

    def _parse_body(self, data: bytes) -> int:
        raw_length = self.headers.get("content-length")
        if raw_length is None:
            self._state = _State.DONE
            return len(data)
        if not _INTEGER.fullmatch(raw_length):
            raise RequestError(f"malformed content-length: {raw_length!r}")
        content_length = int(raw_length)
        if content_length < 0:
            raise RequestError(f"malformed content-length: {raw_length!r}")

        take = min(content_length - len(self.body), len(data))
        self.body += bytes(data[:take])
        if len(self.body) == content_length:
            self._state = _State.DONE
        return take


def request_from_reader(reader: BinaryIO) -> Request:
    """Read and parse one request from a binary stream.

    ``reader.read(n)`` must return at most ``n`` bytes and ``b""`` at end of
    stream.
    """
    request = Request()
    buffer = bytearray()
    capacity = _INITIAL_BUFFER_SIZE
    while not request.done:
        if len(buffer) >= capacity:
            capacity *= 2
        chunk = reader.read(capacity - len(buffer))
        if not chunk:
            raise RequestError(
                f"incomplete request, in state: {request._state.name.lower()}"
            )
        buffer += chunk
        consumed = request.parse(bytes(buffer))
        del buffer[:consumed]
    return request


def parse_request_line(data: bytes) -> tuple[RequestLine | None, int]:
    """Parse the request line at the start of ``data``.

    Returns ``(None, 0)`` when no complete line is available yet.
    """
    idx = data.find(CRLF)
    if idx == -1:
        return None, 0
    text = bytes(data[:idx]).decode("utf-8", errors="surrogateescape")
    return request_line_from_string(text), idx + len(CRLF)


def request_line_from_string(text: str) -> RequestLine:
    """Validate and split a request line such as ``GET / HTTP/1.1``."""
    parts = text.split(" ")
    if len(parts) != 3:
        raise RequestError(f"poorly formatted request-line: {text}")
    method, target, version_text = parts

    if method not in VALID_METHODS:
        raise RequestError("incorrect method used")

    version_parts = version_text.split("/")
    if len(version_parts) != 2:
        raise RequestError(f"malformed start-line: {text}")
    protocol, version = version_parts
    if protocol != "HTTP":
        raise RequestError(f"unrecognized HTTP-version: {protocol}")
    if version != "1.1":
        raise RequestError(f"unrecognized HTTP-version: {version}")

    return RequestLine(http_version=version, request_target=target, method=method)