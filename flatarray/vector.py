from typing import Any, Callable, Dict, Optional
import copy
import numpy

from ._registry import registry
from .array import FlatArray, flatten_rows
from .buffer import GrowableBuffer
from .collection import FlatBase, validate_offsets
from .exceptions import ExpectedTypeError, RowLengthError
from .types import DTypeLike, NestedRows, Offsets, RowLike, T, TokenRows
from .util import OFFSETS_DTYPE, has_len, resolve_dtype, to_numpy_1d


@registry.containers("FlatVec.v1")
class FlatVec(FlatBase[T]):
    """A ragged array with the same layout as FlatArray, but backed by
    growable buffers, so rows can be appended after construction. Row views
    handed out earlier stay readable, but may stop reflecting the container
    once a push reallocates the content buffer.
    """

    registry_name = "FlatVec.v1"

    _content: GrowableBuffer
    _offsets: GrowableBuffer

    def __init__(
        self, rows: Optional[NestedRows] = None, dtype: Optional[DTypeLike] = None
    ):
        if rows is None:
            self._content = GrowableBuffer(resolve_dtype(dtype))
            self._offsets = GrowableBuffer(OFFSETS_DTYPE, capacity=1)
            self._offsets.append(0)
        else:
            content, offsets = flatten_rows(rows, dtype)
            self._content = GrowableBuffer.from_array(content)
            self._offsets = GrowableBuffer.from_array(offsets)

    @classmethod
    def _adopt(cls, content: numpy.ndarray, offsets: Offsets):
        obj = cls.__new__(cls)
        obj._content = GrowableBuffer.from_array(content)
        obj._offsets = GrowableBuffer.from_array(offsets)
        return obj

    @classmethod
    def from_rows(cls, rows: NestedRows, dtype: Optional[DTypeLike] = None):
        return cls(rows, dtype=dtype)

    @classmethod
    def from_iter(cls, rows: NestedRows, dtype: Optional[DTypeLike] = None):
        vec = cls(dtype=dtype)
        vec.extend(rows)
        return vec

    @classmethod
    def from_raw(cls, content: Any, offsets: Any, dtype: Optional[DTypeLike] = None):
        content = to_numpy_1d(content, dtype)
        return cls._adopt(content, validate_offsets(offsets, content.shape[0]))

    @classmethod
    def from_token_rows(cls, rows: TokenRows) -> "FlatVec":
        from .builder import FlatBuilder

        builder: FlatBuilder[str] = FlatBuilder(dtype=object)
        for row in rows:
            builder.push_owned(row, str)
        return builder.build_as_growable()

    @classmethod
    def from_dict(cls, msg: Dict[str, Any]):
        from .serialize import from_msg

        return from_msg(msg, cls)

    @classmethod
    def from_bytes(cls, bytes_data: bytes):
        from .serialize import from_bytes

        return from_bytes(bytes_data, cls)

    def _content_array(self) -> numpy.ndarray:
        return self._content.view()

    def _offsets_array(self) -> Offsets:
        return self._offsets.view()

    @property
    def capacity(self) -> int:
        return self._content.capacity

    def reserve(self, n_elements: int, n_rows: int = 0) -> None:
        self._check_borrow("reserve")
        self._content.reserve(n_elements)
        self._offsets.reserve(n_rows)

    def push(self, row: RowLike) -> None:
        """Append a row. An empty row is recorded as a zero-length row."""
        self._check_borrow("push a row")
        start = self._content.size
        try:
            self._content.extend(row)
        except Exception:
            self._content.truncate(start)
            raise
        self._offsets.append(self._content.size)

    def push_exact_sized(self, row: RowLike) -> None:
        """Append a row whose length is known up front. The end offset is
        computed and the room for the row reserved before anything is copied.
        """
        self._check_borrow("push a row")
        if not has_len(row):
            raise ExpectedTypeError(row, ["Sized"])
        n = len(row)  # type: ignore
        start = self._content.size
        self._offsets.reserve(1)
        end = start + n
        try:
            written = self._content.extend(row, count=n)
        except Exception:
            self._content.truncate(start)
            raise
        if written != n:
            self._content.truncate(start)
            raise RowLengthError(n, written)
        self._offsets.append(end)

    def push_owned(
        self, row: RowLike, convert: Callable[[Any], Any] = copy.copy
    ) -> None:
        """Append a row, storing convert(item) for every item so that the
        container holds its own copies."""
        self.push(convert(item) for item in row)

    def push_take(self, row: Any) -> None:
        """Move the items of a mutable sequence into a new row. Every slot of
        row is reset to the default value of its item's type."""
        self._check_borrow("push a row")
        if not (has_len(row) and hasattr(row, "__setitem__")):
            raise ExpectedTypeError(row, ["MutableSequence"])
        items = list(row)
        # Build the defaults first, so a type without one leaves row untouched.
        defaults = [type(item)() for item in items]
        self.push_exact_sized(items)
        for i, default in enumerate(defaults):
            row[i] = default

    def extend(self, rows: NestedRows) -> None:
        for row in rows:
            self.push(row)

    def clear(self) -> None:
        """Remove all rows. The buffers keep their capacity."""
        self._check_borrow("clear")
        self._content.truncate(0)
        self._offsets.truncate(1)

    def freeze(self) -> FlatArray:
        """Copy the rows into an exact-size FlatArray."""
        self._check_borrow("freeze")
        return FlatArray._adopt(self._content.to_array(), self._offsets.to_array())

    def copy(self):
        return self._adopt(self._content.to_array(), self._offsets.to_array())
