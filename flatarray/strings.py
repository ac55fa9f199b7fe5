from typing import Any, Iterable, List, Optional, Union

from ._registry import registry
from .array import flatten_iter, flatten_rows
from .exceptions import ExpectedTypeError, InvalidUTF8Error
from .iterators import RowIter, StrIter
from .types import DTypeLike, NestedRows, RowLike
from .vector import FlatVec


StrLike = Union[str, bytes, bytearray]


@registry.containers("FlatStr.v1")
class FlatStr(FlatVec[int]):
    """A FlatVec of uint8 where every row holds the UTF-8 encoding of one
    string. Byte rows are validated once, when they enter the container, so
    iter_strings() can decode without further checks failing.
    """

    registry_name = "FlatStr.v1"

    def __init__(self, strings: Optional[Iterable[StrLike]] = None):
        FlatVec.__init__(self, dtype="uint8")
        if strings is not None:
            self.extend_strings(strings)

    @classmethod
    def from_strings(cls, strings: Iterable[StrLike]) -> "FlatStr":
        return cls(strings)

    @classmethod
    def from_vec(cls, vec: FlatVec) -> "FlatStr":
        """Take over the buffers of a uint8 FlatVec, checking its rows."""
        obj = cls.__new__(cls)
        obj._content = vec._content
        obj._offsets = vec._offsets
        obj._validate_utf8()
        return obj

    @classmethod
    def from_rows(cls, rows: NestedRows, dtype: Optional[DTypeLike] = None):
        return cls.from_vec(FlatVec._adopt(*flatten_rows(rows, "uint8")))

    @classmethod
    def from_iter(cls, rows: NestedRows, dtype: Optional[DTypeLike] = None):
        return cls.from_vec(FlatVec._adopt(*flatten_iter(rows, "uint8")))

    @classmethod
    def from_raw(cls, content: Any, offsets: Any, dtype: Optional[DTypeLike] = None):
        obj = super().from_raw(content, offsets, dtype="uint8")
        obj._validate_utf8()
        return obj

    @classmethod
    def from_token_rows(cls, rows):
        # Rows of tokens don't map onto one string per row.
        raise ExpectedTypeError(rows, ["Iterable[str]"])

    def _validate_utf8(self) -> None:
        for i, row in enumerate(RowIter(self)):
            try:
                row.tobytes().decode("utf8")
            except UnicodeDecodeError as e:
                raise InvalidUTF8Error(i, e) from None

    def _check_last_row(self) -> None:
        """Decode the row that was just pushed, dropping it again if it isn't
        valid UTF-8."""
        index = self.row_count - 1
        start = self._offset_at(index)
        try:
            self._content.view()[start:].tobytes().decode("utf8")
        except UnicodeDecodeError as e:
            self._content.truncate(start)
            self._offsets.truncate(index + 1)
            raise InvalidUTF8Error(index, e) from None

    def push(self, row: RowLike) -> None:
        FlatVec.push(self, row)
        self._check_last_row()

    def push_exact_sized(self, row: RowLike) -> None:
        FlatVec.push_exact_sized(self, row)
        self._check_last_row()

    def push_str(self, string: StrLike) -> None:
        if isinstance(string, str):
            data = string.encode("utf8")
        elif isinstance(string, (bytes, bytearray)):
            data = bytes(string)
        else:
            raise ExpectedTypeError(string, ["str", "bytes"])
        self.push_exact_sized(data)

    def extend_strings(self, strings: Iterable[StrLike]) -> None:
        for string in strings:
            self.push_str(string)

    def iter_strings(self) -> StrIter:
        """Iterate over the rows decoded as str."""
        self._check_borrow("iterate strings")
        return StrIter(self)

    def to_strings(self) -> List[str]:
        return list(self.iter_strings())
