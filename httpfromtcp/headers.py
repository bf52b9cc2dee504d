"""HTTP header field parsing and storage."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

CRLF = b"\r\n"

_TOKEN_PUNCTUATION = frozenset("!#$%&'*+-.^_`|~")


class HeaderError(ValueError):
    """Raised when a header line cannot be parsed."""


def validate_header_name(name: str) -> bool:
    """Return True if ``name`` is a non-empty, lower-case HTTP token."""
    if not name:
        return False
    return all(
        "a" <= ch <= "z" or "0" <= ch <= "9" or ch in _TOKEN_PUNCTUATION
        for ch in name
    )


class Headers(dict):
    """A mapping of lower-case header names to their values."""

    def parse(self, data: bytes) -> tuple[int, bool]:
        """Parse one header line from ``data``.

        Returns the number of bytes consumed and whether the blank line that
        ends the header block was reached. ``(0, False)`` means more data is
        needed.
        """
        idx = data.find(CRLF)
        if idx == -1:
            return 0, False
        if idx == 0:
            return len(CRLF), True

        line = bytes(data[:idx])
        colon = line.find(b":")
        if colon == -1:
            return 0, False

        name = line[:colon].decode("utf-8", errors="surrogateescape").lower()
        if name.endswith(" "):
            raise HeaderError(f"invalid header format: {name}")
        if not validate_header_name(name):
            raise HeaderError(f"invalid header name: {name}")

        value = line[colon + 1:].strip().decode("utf-8", errors="surrogateescape")
        if not value:
            raise HeaderError(f"invalid header value: {value}")

        if name in self:
            self[name] = f"{self[name]},{value}"
        else:
            self[name] = value
        return idx + len(CRLF), False

    def add(self, key: str, value: str) -> None:
        """Add a value, joining it to any existing one with ", "."""
        key = key.lower()
        if key in self:
            value = f"{self[key]}, {value}"
        self[key] = value

    def set(self, key: str, value: str) -> None:
        """Replace the value of a header; invalid names are logged and ignored."""
        key = key.lower()
        if not validate_header_name(key):
            logger.warning("invalid header name: %s", key)
            return
        self[key] = value

    def delete(self, key: str) -> None:
        """Remove a header if present."""
        self.pop(key.lower(), None)