import pytest
import numpy
from hypothesis import given

from flatarray.api import FlatStr, FlatVec, StrIter
from flatarray.api import ExpectedTypeError, InvalidUTF8Error, InvalidOffsetsError
from flatarray.tests.strategies import strings


@pytest.fixture
def texts():
    return [
        "this is the first sentence",
        "this is the second sentence",
        "this is the third sentence",
    ]


def test_flat_str_from_strings(texts):
    flat_str = FlatStr.from_strings(texts)
    assert flat_str.row_count == len(texts)
    assert flat_str.dtype == numpy.uint8
    assert flat_str.to_strings() == texts
    assert len(list(flat_str.iter_rows())) == len(texts)


def test_flat_str_rows_are_utf8_bytes():
    flat_str = FlatStr(["añb", "€"])
    assert flat_str[0].tobytes() == "añb".encode("utf8")
    assert flat_str.offsets.tolist() == [0, 4, 7]


def test_flat_str_empty_string_is_a_row():
    flat_str = FlatStr(["a", "", "b"])
    assert flat_str.offsets.tolist() == [0, 1, 1, 2]
    assert flat_str.to_strings() == ["a", "", "b"]


def test_flat_str_empty():
    flat_str = FlatStr()
    assert flat_str.offsets.tolist() == [0]
    assert flat_str.to_strings() == []


def test_flat_str_iter_strings(texts):
    flat_str = FlatStr(texts)
    rows = flat_str.iter_strings()
    assert isinstance(rows, StrIter)
    assert rows.__length_hint__() == 3
    assert next(rows) == texts[0]
    assert list(rows) == texts[1:]


def test_flat_str_push_str():
    flat_str = FlatStr()
    flat_str.push_str("héllo")
    flat_str.push_str(b"bytes")
    flat_str.push_str(bytearray(b"more"))
    assert flat_str.to_strings() == ["héllo", "bytes", "more"]


def test_flat_str_rejects_invalid_bytes():
    flat_str = FlatStr(["ok"])
    with pytest.raises(InvalidUTF8Error):
        flat_str.push_str(b"\xc3\x28")
    assert flat_str.to_strings() == ["ok"]


def test_flat_str_rejects_other_types():
    with pytest.raises(ExpectedTypeError):
        FlatStr.from_strings(["ok", 5])


def test_flat_str_from_raw():
    flat_str = FlatStr.from_raw(b"abcde", [0, 2, 5])
    assert flat_str.to_strings() == ["ab", "cde"]
    with pytest.raises(InvalidOffsetsError):
        FlatStr.from_raw(b"abcde", [0, 2, 4])
    with pytest.raises(InvalidUTF8Error):
        FlatStr.from_raw(b"a\xffb", [0, 1, 3])


def test_flat_str_from_rows():
    flat_str = FlatStr.from_rows([list(b"ab"), [], list("é".encode("utf8"))])
    assert flat_str.to_strings() == ["ab", "", "é"]
    assert FlatStr.from_iter(iter([b"xy"])).to_strings() == ["xy"]


@pytest.mark.parametrize("bad", [b"\xff\xfe", b"\xc3\x28", b"ok\xe2\x82"])
def test_flat_str_push_rejects_invalid_bytes(bad):
    flat_str = FlatStr(["ok"])
    with pytest.raises(InvalidUTF8Error):
        flat_str.push(bad)
    with pytest.raises(InvalidUTF8Error):
        flat_str.push_exact_sized(bad)
    with pytest.raises(InvalidUTF8Error):
        flat_str.push_owned(bad)
    with pytest.raises(InvalidUTF8Error):
        flat_str.push_take(bytearray(bad))
    with pytest.raises(InvalidUTF8Error):
        flat_str.extend([b"fine", bad])
    # Only the valid row of the extend call was kept.
    assert flat_str.to_strings() == ["ok", "fine"]
    assert flat_str.size == 6
    assert flat_str.offsets.tolist() == [0, 2, 6]


def test_flat_str_push_valid_bytes():
    flat_str = FlatStr()
    flat_str.push("é".encode("utf8"))
    flat_str.push_exact_sized(b"ab")
    flat_str.push_owned(b"")
    flat_str.extend([b"x", list(b"yz")])
    assert flat_str.to_strings() == ["é", "ab", "", "x", "yz"]


def test_flat_str_push_take_resets_bytes():
    row = bytearray(b"abc")
    flat_str = FlatStr()
    flat_str.push_take(row)
    assert row == bytearray(3)
    assert flat_str.to_strings() == ["abc"]


def test_flat_str_from_token_rows_not_supported():
    with pytest.raises(ExpectedTypeError):
        FlatStr.from_token_rows([["a"]])


def test_flat_str_freeze(texts):
    flat = FlatStr(texts).freeze()
    assert flat.row_count == 3
    assert flat.dtype == numpy.uint8


def test_flat_str_not_equal_to_flat_vec(texts):
    flat_str = FlatStr(texts)
    vec = FlatVec.from_raw(flat_str.content, flat_str.offsets, dtype="uint8")
    assert flat_str != vec
    assert FlatStr.from_vec(vec) == flat_str


@given(values=strings())
def test_flat_str_roundtrip(values):
    flat_str = FlatStr.from_strings(values)
    assert flat_str.to_strings() == values
    assert flat_str.size == sum(len(v.encode("utf8")) for v in values)
