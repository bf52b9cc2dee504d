import io

import pytest

from httpfromtcp.headers import Headers
from httpfromtcp.response import (
    StatusCode,
    Writer,
    WriterStateError,
    build_response_body,
    get_default_headers,
    get_status_description,
    get_status_line,
)


@pytest.mark.parametrize(
    "code, description",
    [
        (StatusCode.SUCCESS, "OK"),
        (StatusCode.BAD_REQUEST, "Bad Request"),
        (StatusCode.INTERNAL_SERVER_ERROR, "Internal Server Error"),
        (418, "Internal Server Error"),
    ],
)
def test_status_description(code, description):
    assert get_status_description(code) == description


def test_status_line_for_success():
    assert get_status_line(StatusCode.SUCCESS) == "HTTP/1.1 200 OK\r\n"


def test_status_line_for_unknown_code_keeps_number():
    line = get_status_line(404)
    assert line.startswith("HTTP/1.1 404 ")
    assert line.endswith("Internal Server Error\r\n")


def test_default_headers():
    headers = get_default_headers(5)
    assert dict(headers) == {
        "content-length": "5",
        "connection": "close",
        "content-type": "text/plain",
    }


def test_plain_response_bytes():
    stream = io.BytesIO()
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    headers = Headers()
    headers.set("Content-Type", "text/html")
    writer.write_headers(headers)
    written = writer.write_body(b"hello")
    assert written == 5
    assert stream.getvalue() == b"HTTP/1.1 200 OK\r\ncontent-type: text/html\r\n\r\nhello"


def test_body_before_status_line_raises():
    writer = Writer(io.BytesIO())
    with pytest.raises(WriterStateError):
        writer.write_body(b"data")


def test_status_line_twice_raises():
    stream = io.BytesIO()
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    with pytest.raises(WriterStateError):
        writer.write_status_line(StatusCode.SUCCESS)
    assert stream.getvalue() == get_status_line(StatusCode.SUCCESS).encode()


def test_body_after_body_raises():
    writer = Writer(io.BytesIO())
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(Headers())
    writer.write_body(b"x")
    with pytest.raises(WriterStateError):
        writer.write_body(b"y")


def test_chunked_body_framing_and_counts():
    stream = io.BytesIO()
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(Headers())
    before = len(stream.getvalue())
    n = writer.write_chunked_body(b"hello")
    assert n == len(stream.getvalue()) - before
    assert stream.getvalue().endswith(b"5\r\nhello\r\n")

    before = len(stream.getvalue())
    done = writer.write_chunked_body_done()
    assert done == len(stream.getvalue()) - before
    assert stream.getvalue().endswith(b"0\r\n")


def test_trailers_after_done():
    stream = io.BytesIO()
    writer = Writer(stream)
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(Headers())
    writer.write_chunked_body(b"abc")
    writer.write_chunked_body_done()
    trailers = Headers()
    trailers.add("X-Content-Length", "3")
    writer.write_trailers(trailers)
    assert stream.getvalue().endswith(b"0\r\nx-content-length: 3\r\n\r\n")
    # The writer returns to the body state after trailers.
    assert writer.write_chunked_body(b"") == len(b"0\r\n\r\n")


def test_trailers_before_done_raises():
    writer = Writer(io.BytesIO())
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(Headers())
    with pytest.raises(WriterStateError):
        writer.write_trailers(Headers())


def test_chunked_done_before_headers_raises():
    writer = Writer(io.BytesIO())
    writer.write_status_line(StatusCode.SUCCESS)
    with pytest.raises(WriterStateError):
        writer.write_chunked_body_done()


def test_build_response_body_fills_fields(tmp_path):
    template = tmp_path / "body.html"
    template.write_text(
        "{{.ResponseBodyTitle}}|{{ .ResponseBodyHeader }}|{{.ResponseBodyContent}}",
        encoding="utf-8",
    )
    body = build_response_body(StatusCode.BAD_REQUEST, "oops", template)
    assert body == b"400 Bad Request|Bad Request|oops"


def test_build_response_body_unknown_field(tmp_path):
    template = tmp_path / "body.html"
    template.write_text("{{.Missing}}", encoding="utf-8")
    with pytest.raises(ValueError):
        build_response_body(StatusCode.SUCCESS, "x", template)


def test_build_response_body_missing_template(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_response_body(StatusCode.SUCCESS, "x", tmp_path / "absent.html")