# spritz

Building blocks for HTTP web applications: a status-tracking response
writer, renderers for JSON, XML, HTML and plain bodies, collected request
errors, access-log formatting, redirect helpers, static file systems and
URL path cleaning.

## Install

```
pip install spritz
```

For running the test suite:

```
pip install "spritz[test]"
pytest
```

## What is inside

### Paths

`spritz.path.clean_path` turns a URL path into its canonical form,
dropping `.` and `..` elements and repeated slashes and adding a missing
leading slash:

```python
from spritz.path import clean_path

clean_path("/abc/def/../ghi/../jkl")  # "/abc/jkl"
clean_path("abc//./../def")           # "/def"
clean_path("")                        # "/"
```

### Response writers

`spritz.response_writer.ResponseRecorder` keeps a response's status code,
headers and body in memory. `spritz.response_writer.ResponseWriter` wraps
a recorder (or any object with `header`, `write_header` and `write`),
remembers the status to send, counts the body bytes written and sends the
headers only once:

```python
from spritz.response_writer import ResponseRecorder, ResponseWriter

recorder = ResponseRecorder()
writer = ResponseWriter()
writer.reset(recorder)
writer.write_header(300)
writer.write(b"hola")
writer.status()   # 300
writer.size()     # 4
writer.written()  # True
```

`hijack`, `close_notify` and `flush` are passed on to the wrapped writer
and raise `TypeError` when it does not support them; `pusher` returns the
wrapped writer when it has a `push` method, otherwise `None`.

### Renderers

Every renderer has `render(w)`, which sets a `Content-Type` (unless the
response already has one) and writes the body, and `write_content_type(w)`.

- `spritz.render.base`: `Data` (raw bytes with a given content type),
  `String` (text, `%`-formatted when arguments are given), `Reader` (copies
  a stream, with `Content-Length` and extra headers), `Redirect` (3xx or
  201 only; any other code raises `ValueError`) and `XML` (mappings,
  dataclasses, `ElementTree` elements or objects with `to_xml`).
- `spritz.render.json`: `JSON`, `IndentedJSON`, `SecureJSON` (adds a
  prefix before array output), `JsonpJSON` (wraps the output in a
  JavaScript callback), `AsciiJSON` (escapes every non-ASCII character)
  and `PureJSON` (no HTML escaping, trailing newline). `marshal` gives the
  compact JSON bytes, with sorted keys and `<`, `>` and `&` escaped.
- `spritz.render.html`: `HTMLProduction` renders with templates loaded
  once, `HTMLDebug` reloads them from files, a glob or a file system with
  patterns on every `instance` call. Templates are Jinja templates; the
  expression delimiters are set with `Delims`.

```python
from spritz.render.json import SecureJSON
from spritz.response_writer import ResponseRecorder

recorder = ResponseRecorder()
SecureJSON(prefix="while(1);", data=[{"foo": "bar"}]).render(recorder)
bytes(recorder.body)  # b'while(1);[{"foo":"bar"}]'
```

### Errors

`spritz.errors.ContextError` wraps an error with an `ErrorType` flag and
optional metadata. `spritz.errors.ErrorMessages` is a list of them that can
be filtered with `by_type`, turned into messages with `errors`, into JSON
with `as_json` and `marshal_json`, and printed as numbered lines with
`str()`.

### Access-log lines

`spritz.logger.default_log_formatter` turns a `LogFormatterParams` into one
log line with the time, status, latency, client address, method and path.
Colours are chosen by status and method and are used when the output is a
terminal, or always after `force_console_color()`, or never after
`disable_console_color()`. `format_duration` writes a `timedelta` as
`1.5ms`, `5s` or `2743h29m3s`.

### Redirects

`spritz.redirects.trailing_slash_target` gives the path with its trailing
slash added or removed, under a sanitised `X-Forwarded-Prefix`
(`safe_prefix`); `redirect_code` is 301 for `GET` and 307 otherwise.

### Static files

`spritz.fs.directory(root, list_directory)` returns a file system rooted at
`root`; without listing, it is an `OnlyFilesFS` whose opened files return
no directory entries. Paths are cleaned so they never leave the root.

### Run mode

`spritz.mode.set_mode` and `spritz.mode.mode` switch between the `debug`,
`release` and `test` modes; an unknown mode raises `ValueError`. The
starting mode is read from the `SPRITZ_MODE` environment variable.

### Byte conversion

`spritz.bytesconv.string_to_bytes` and `bytes_to_string` convert between
text and UTF-8 bytes so that any byte sequence round-trips.

## What it does not do

spritz is a set of parts, not a web framework. It has no router, no
application object and no HTTP server, so it does not match requests to
handlers or listen on a socket. It has no logging or panic-recovery
middleware, only the formatting of log lines. It has no trusted-proxy or
client-address handling, and it renders no MessagePack, Protocol Buffers,
TOML or YAML bodies.