# httpfromtcp

A small HTTP/1.1 implementation built directly on TCP sockets. It uses only
the standard library.

## What is inside

- `httpfromtcp.headers`: `Headers` is a `dict` of lower-case header names.
  `Headers.parse(data)` reads one header line at a time and returns
  `(bytes_consumed, done)`. A repeated header has its values joined with
  `","`. The `add`, `set` and `delete` methods are case-insensitive. `add`
  joins values with `", "`. `set` ignores an invalid name and logs it.
  `validate_header_name` checks a name against the HTTP token characters.
- `httpfromtcp.request`: `request_from_reader(reader)` reads from any binary
  stream that has `read(n)` and parses one request. It returns a `Request`,
  which has `request_line` (a `RequestLine`), `headers` and `body`. The body
  is read only when there is a `Content-Length` header. Other helpers are
  `parse_request_line` and `request_line_from_string`. The request line must
  use one of the standard methods and `HTTP/1.1`.
- `httpfromtcp.response`: `Writer` writes a response to a binary stream in a
  fixed order: status line, then headers, then either one body or chunked
  bodies followed by trailers. It also provides `StatusCode` (200, 400 and
  500), `get_status_line`, `get_status_description`, `get_default_headers`
  and `build_response_body`.
- `httpfromtcp.server`: `serve(port, handler)` listens on all interfaces and
  accepts connections in a background thread. Each connection is handled in
  its own thread. A request that cannot be parsed gets a 400 response through
  `HandlerError`. `Server` can be used as a context manager, and `close()`
  stops it.

## Installation

```
pip install .
```

## HTML body template

`build_response_body(status_code, content, template_path)` fills a template
file. The template refers to its fields as `{{.ResponseBodyTitle}}`,
`{{.ResponseBodyHeader}}` and `{{.ResponseBodyContent}}`. The default path is
`templates/response_body.html`, relative to the working directory. The
package does not ship this file, so you have to provide it.

The HTML pages from the example server and the 400 responses from `Server`
also use this template. If the template is missing, the server logs the
error and closes the connection, and the response is left incomplete.

Example template:

```html
<html>
  <head><title>{{.ResponseBodyTitle}}</title></head>
  <body>
    <h1>{{.ResponseBodyHeader}}</h1>
    <p>{{.ResponseBodyContent}}</p>
  </body>
</html>
```

## Commands

```
httpfromtcp-server [--port PORT]
```

Runs the example server on port 42069 by default. It keeps running until it
receives SIGINT or SIGTERM. Routes:

- `/yourproblem` returns a 400 page.
- `/myproblem` returns a 500 page.
- Paths starting with `/video` serve `assets/vim.mp4` from the working
  directory as `video/mp4`. If the file cannot be read, the route returns a
  500 page.
- Paths starting with `/httpbin` are fetched from `http://httpbin.org/` with
  the `/httpbin/` prefix removed. The body is sent back chunked, with
  `X-Content-SHA256` and `X-Content-Length` trailers.
- Anything else returns a 200 page.

```
httpfromtcp-tcplistener [--port PORT]
```

Accepts connections on port 42069 by default and prints each parsed request:
its request line, headers and body. It exits on the first error.

```
httpfromtcp-udpsender [--host HOST] [--port PORT]
```

Reads lines from standard input and sends each one as a UDP datagram to
`localhost:42069` by default. It stops at end of input or at a line that
reads `exit`.

```
httpfromtcp-demo
```

Parses two sample requests and prints their method, version and target.

## Using the library

```python
import io

from httpfromtcp.request import request_from_reader

raw = b"GET /coffee HTTP/1.1\r\nHost: localhost:42069\r\n\r\n"
req = request_from_reader(io.BytesIO(raw))
print(req.request_line.method, req.request_line.request_target)
print(req.headers.get("host"))
```

Writing your own server:

```python
from httpfromtcp.response import StatusCode, get_default_headers
from httpfromtcp.server import serve


def handler(writer, request):
    body = b"hello\n"
    writer.write_status_line(StatusCode.SUCCESS)
    writer.write_headers(get_default_headers(len(body)))
    writer.write_body(body)


with serve(8080, handler):
    ...
```

Errors are raised as exceptions:

- `RequestError`: the request is malformed or incomplete.
- `HeaderError`: a header line is invalid when you call `Headers.parse`
  directly.
- `WriterStateError`: the `Writer` methods were called out of order.

## Limitations

- Each connection serves one request and is then closed. There is no
  keep-alive.
- Request bodies are read only by `Content-Length`. Chunked request bodies
  are not decoded.
- Only 200, 400 and 500 have their own reason phrases. Any other code is
  described as "Internal Server Error".

## Tests

```
pip install .[test]
pytest
```