import dataclasses
import json

from spritz.errors import ContextError, ErrorMessages, ErrorType


def test_error():
    base = ValueError("test error")
    err = ContextError(base, ErrorType.PRIVATE)
    assert str(err) == str(base)
    assert err.as_json() == {"error": "test error"}

    assert err.set_type(ErrorType.PUBLIC) is err
    assert err.type == ErrorType.PUBLIC

    assert err.set_meta("some data") is err
    assert err.meta == "some data"
    assert err.as_json() == {"error": "test error", "meta": "some data"}

    assert json.loads(err.marshal_json()) == {"error": "test error", "meta": "some data"}

    err.set_meta({"status": "200", "data": "some data"})
    assert err.as_json() == {"error": "test error", "status": "200", "data": "some data"}

    err.set_meta({"error": "custom error", "status": "200", "data": "some data"})
    assert err.as_json() == {"error": "custom error", "status": "200", "data": "some data"}


def test_error_struct_meta_returned_as_is():
    @dataclasses.dataclass
    class CustomError:
        status: str
        data: str

    err = ContextError(ValueError("test error"), ErrorType.PRIVATE)
    err.set_meta(CustomError(status="200", data="other data"))
    assert err.as_json() == CustomError(status="200", data="other data")


def _sample():
    return ErrorMessages(
        [
            ContextError(ValueError("first"), ErrorType.PRIVATE),
            ContextError(ValueError("second"), ErrorType.PRIVATE, "some data"),
            ContextError(ValueError("third"), ErrorType.PUBLIC, {"status": "400"}),
        ]
    )


def test_error_slice():
    errs = _sample()
    assert errs.by_type(ErrorType.ANY) is errs
    assert str(errs.last()) == "third"
    assert errs.errors() == ["first", "second", "third"]
    assert errs.by_type(ErrorType.PUBLIC).errors() == ["third"]
    assert errs.by_type(ErrorType.PRIVATE).errors() == ["first", "second"]
    assert errs.by_type(ErrorType.PUBLIC | ErrorType.PRIVATE).errors() == ["first", "second", "third"]
    assert len(errs.by_type(ErrorType.BIND)) == 0
    assert str(errs.by_type(ErrorType.BIND)) == ""

    assert str(errs) == (
        "Error #01: first\n"
        "Error #02: second\n"
        "     Meta: some data\n"
        "Error #03: third\n"
        "     Meta: map[status:400]\n"
    )
    assert errs.as_json() == [
        {"error": "first"},
        {"error": "second", "meta": "some data"},
        {"error": "third", "status": "400"},
    ]
    assert json.loads(errs.marshal_json()) == [
        {"error": "first"},
        {"error": "second", "meta": "some data"},
        {"error": "third", "status": "400"},
    ]


def test_error_slice_single():
    errs = ErrorMessages([ContextError(ValueError("first"), ErrorType.PRIVATE)])
    assert errs.as_json() == {"error": "first"}
    assert json.loads(errs.marshal_json()) == {"error": "first"}


def test_error_slice_empty():
    errs = ErrorMessages()
    assert errs.last() is None
    assert errs.as_json() is None
    assert str(errs) == ""


def test_error_unwrap():
    inner = KeyError("some error")
    err = ContextError(inner, ErrorType.ANY)
    assert err.__cause__ is inner
    assert err.err is inner

    try:
        raise RuntimeError("wrapped") from err
    except RuntimeError as wrapped:
        assert wrapped.__cause__ is err
        assert wrapped.__cause__.__cause__ is inner


def test_is_type():
    err = ContextError(ValueError("x"), ErrorType.PUBLIC)
    assert err.is_type(ErrorType.PUBLIC)
    assert not err.is_type(ErrorType.PRIVATE)
    assert err.is_type(ErrorType.ANY)