"""HTTP/1.1 request parsing, response writing and a small threaded server over raw TCP."""

__version__ = "0.1.0"

__all__ = ["headers", "request", "response", "server"]