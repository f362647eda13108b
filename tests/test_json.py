import re
from dataclasses import dataclass

import pytest

from spritz.render.json import (
    JSON,
    AsciiJSON,
    IndentedJSON,
    JsonpJSON,
    PureJSON,
    SecureJSON,
    js_escape_string,
    marshal,
    write_json,
)
from spritz.response_writer import ResponseRecorder


class ErrorWriter(ResponseRecorder):
    def __init__(self, bad: bytes = b"") -> None:
        super().__init__()
        self.bad = bad

    def write(self, data):
        if bytes(data) == self.bad:
            raise OSError(f'write "{self.bad.decode()}" error')
        return super().write(data)


def test_marshal_sorts_and_escapes():
    assert marshal({"b": 1, "a": "<&>"}) == b'{"a":"\\u003c\\u0026\\u003e","b":1}'


def test_marshal_dataclass_and_bytes():
    @dataclass
    class Item:
        name: str
        raw: bytes

    assert marshal(Item(name="x", raw=b"hi")) == b'{"name":"x","raw":"aGk="}'


def test_marshal_nan_fails():
    with pytest.raises(ValueError):
        marshal(float("nan"))


def test_js_escape_string():
    assert js_escape_string("foo") == "foo"
    assert js_escape_string("a'b\"c\\") == "a\\'b\\\"c\\\\"
    assert js_escape_string("<x=y>&") == "\\u003Cx\\u003Dy\\u003E\\u0026"
    assert js_escape_string("\n") == "\\u000A"


def test_render_json():
    w = ResponseRecorder()
    data = {"foo": "bar", "html": "<b>"}
    JSON(data).write_content_type(w)
    assert w.header().get("Content-Type") == "application/json; charset=utf-8"
    JSON(data).render(w)
    assert bytes(w.body) == b'{"foo":"bar","html":"\\u003cb\\u003e"}'
    assert w.header().get("Content-Type") == "application/json; charset=utf-8"


def test_write_json():
    w = ResponseRecorder()
    write_json(w, [1, 2])
    assert bytes(w.body) == b"[1,2]"


def test_render_json_error():
    with pytest.raises(TypeError):
        JSON(object()).render(ResponseRecorder())


def test_render_indented_json():
    w = ResponseRecorder()
    IndentedJSON({"foo": "bar", "bar": "foo"}).render(w)
    assert bytes(w.body) == b'{\n    "bar": "foo",\n    "foo": "bar"\n}'
    assert w.header().get("Content-Type") == "application/json; charset=utf-8"


def test_render_indented_json_error():
    with pytest.raises(TypeError):
        IndentedJSON(object()).render(ResponseRecorder())


def test_render_secure_json():
    w1 = ResponseRecorder()
    SecureJSON("while(1);", {"foo": "bar"}).write_content_type(w1)
    assert w1.header().get("Content-Type") == "application/json; charset=utf-8"
    SecureJSON("while(1);", {"foo": "bar"}).render(w1)
    assert bytes(w1.body) == b'{"foo":"bar"}'

    w2 = ResponseRecorder()
    SecureJSON("while(1);", [{"foo": "bar"}, {"bar": "foo"}]).render(w2)
    assert bytes(w2.body) == b'while(1);[{"foo":"bar"},{"bar":"foo"}]'
    assert w2.header().get("Content-Type") == "application/json; charset=utf-8"


def test_render_secure_json_fail():
    with pytest.raises(TypeError):
        SecureJSON("while(1);", object()).render(ResponseRecorder())


def test_render_jsonp_json():
    w1 = ResponseRecorder()
    JsonpJSON("x", {"foo": "bar"}).write_content_type(w1)
    assert w1.header().get("Content-Type") == "application/javascript; charset=utf-8"
    JsonpJSON("x", {"foo": "bar"}).render(w1)
    assert bytes(w1.body) == b'x({"foo":"bar"});'

    w2 = ResponseRecorder()
    JsonpJSON("x", [{"foo": "bar"}, {"bar": "foo"}]).render(w2)
    assert bytes(w2.body) == b'x([{"foo":"bar"},{"bar":"foo"}]);'
    assert w2.header().get("Content-Type") == "application/javascript; charset=utf-8"


@pytest.mark.parametrize("bad", [b"foo", b"(", b'{"foo":"bar"}', b");"])
def test_render_jsonp_json_write_errors(bad):
    writer = ErrorWriter(bad)
    jsonp = JsonpJSON(callback="foo", data={"foo": "bar"})
    with pytest.raises(OSError, match=re.escape(f'write "{bad.decode()}" error')):
        jsonp.render(writer)


def test_render_jsonp_json_empty_callback():
    w = ResponseRecorder()
    JsonpJSON("", {"foo": "bar"}).write_content_type(w)
    assert w.header().get("Content-Type") == "application/javascript; charset=utf-8"
    JsonpJSON("", {"foo": "bar"}).render(w)
    assert bytes(w.body) == b'{"foo":"bar"}'


def test_render_jsonp_json_fail():
    with pytest.raises(TypeError):
        JsonpJSON("x", object()).render(ResponseRecorder())


def test_render_ascii_json():
    w1 = ResponseRecorder()
    AsciiJSON({"lang": "GO语言", "tag": "<br>"}).render(w1)
    assert bytes(w1.body) == b'{"lang":"GO\\u8bed\\u8a00","tag":"\\u003cbr\\u003e"}'
    assert w1.header().get("Content-Type") == "application/json"

    w2 = ResponseRecorder()
    AsciiJSON(3.1415926).render(w2)
    assert bytes(w2.body) == b"3.1415926"


def test_render_ascii_json_fail():
    with pytest.raises(TypeError):
        AsciiJSON(object()).render(ResponseRecorder())


def test_render_pure_json():
    w = ResponseRecorder()
    PureJSON({"foo": "bar", "html": "<b>"}).render(w)
    assert bytes(w.body) == b'{"foo":"bar","html":"<b>"}\n'
    assert w.header().get("Content-Type") == "application/json; charset=utf-8"


def test_render_write_error():
    prefix = "my-prefix:"
    renderer = SecureJSON(prefix=prefix, data=["value1", "value2"])
    writer = ErrorWriter(prefix.encode())
    with pytest.raises(OSError, match=re.escape('write "my-prefix:" error')):
        renderer.render(writer)