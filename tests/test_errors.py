"""Tests for wbem_dump_shared.errors."""

from wbem_dump_shared import DumpError, ErrorKind, describe, is_fatal, is_ignorable


def test_ignorable_kinds():
    assert is_ignorable(DumpError(ErrorKind.NOT_SUPPORTED, "x"))
    assert is_ignorable(DumpError(ErrorKind.EMPTY_RESULT, "x"))
    assert not is_ignorable(DumpError(ErrorKind.OTHER, "x"))
    assert not is_ignorable(ValueError("x"))


def test_fatal_kinds():
    assert is_fatal(DumpError(ErrorKind.TRANSPORT, "x"))
    assert is_fatal(DumpError(ErrorKind.IO, "x"))
    assert not is_fatal(DumpError(ErrorKind.OTHER, "x"))
    assert not is_fatal(RuntimeError("x"))


def test_str_includes_cim_code():
    error = DumpError(ErrorKind.OTHER, "GetClass: CIM_ERR_NOT_FOUND", code=6)
    assert str(error) == "GetClass: CIM_ERR_NOT_FOUND (CIM error 6)"


def test_describe_includes_kind():
    assert describe(DumpError(ErrorKind.OTHER, "boom")) == "[other] boom"
    assert describe(ValueError("bad")) == "[ValueError] bad"
