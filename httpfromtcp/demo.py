"""Parse two sample requests and print their request lines."""

from __future__ import annotations

import argparse
import io

from httpfromtcp.request import Request, RequestError, request_from_reader

SAMPLE_REQUESTS = (
    b"GET / HTTP/1.1\r\nHost: localhost:42069\r\n"
    b"User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n",
    b"GET /coffee HTTP/1.1\r\nHost: localhost:42069\r\n"
    b"User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n",
)


def describe_request_line(request: Request) -> str:
    """Render the method, version and target of a request."""
    line = request.request_line
    return (
        f"{{\nMethod: {line.method}\n"
        f"Version: {line.http_version}\n"
        f"Target: {line.request_target}\n}}\n"
    )


def main(argv: list[str] | None = None) -> int:
    """Print the request lines of the sample requests."""
    argparse.ArgumentParser(
        prog="httpfromtcp-demo", description="Parse two sample requests."
    ).parse_args(argv)
    for raw in SAMPLE_REQUESTS:
        try:
            request = request_from_reader(io.BytesIO(raw))
        except RequestError:
            return 0
        print(describe_request_line(request), end="")
    return 0