import io

from httpfromtcp import demo
from httpfromtcp.request import Request, RequestLine, request_from_reader


def test_describe_parsed_request():
    request = request_from_reader(
        io.BytesIO(
            b"GET / HTTP/1.1\r\nHost: localhost:42069\r\n"
            b"User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n"
        )
    )
    assert demo.describe_request_line(request) == (
        "{\nMethod: GET\nVersion: 1.1\nTarget: /\n}\n"
    )


def test_describe_uses_each_field():
    request = Request(
        request_line=RequestLine(
            http_version="1.1", request_target="/prime/rib", method="OPTIONS"
        )
    )
    text = demo.describe_request_line(request)
    assert text.splitlines() == [
        "{",
        "Method: OPTIONS",
        "Version: 1.1",
        "Target: /prime/rib",
        "}",
    ]


def test_main_prints_both_samples(capsys):
    assert demo.main([]) == 0
    assert capsys.readouterr().out == (
        "{\nMethod: GET\nVersion: 1.1\nTarget: /\n}\n"
        "{\nMethod: GET\nVersion: 1.1\nTarget: /coffee\n}\n"
    )