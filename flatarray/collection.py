from typing import Any, Dict, Generic, List
from abc import ABC, abstractmethod
import numpy
import srsly

from .exceptions import BorrowError, ExpectedTypeError, InvalidOffsetsError
from .exceptions import OutOfBoundsError
from .iterators import RowIter, RowIterMut
from .types import Offsets, Row, T
from .util import OFFSETS_DTYPE, readonly


def validate_offsets(offsets: Any, content_size: int) -> Offsets:
    """Check the offset invariants against a content buffer of the given size
    and return the offsets as a fresh uint64 array.

    The first offset must be 0, the last one must equal the content size and
    offsets must never decrease. Empty offsets are only accepted for empty
    content and come back as [0].
    """
    arr = numpy.asarray(offsets)
    if arr.size == 0:
        if content_size != 0:
            raise InvalidOffsetsError("empty offsets for non-empty content", offsets, content_size)
        return numpy.zeros(1, dtype=OFFSETS_DTYPE)
    if arr.ndim != 1:
        raise InvalidOffsetsError(f"expected 1d offsets, got shape {arr.shape}", offsets, content_size)
    if arr.dtype.kind not in "iu":
        raise InvalidOffsetsError(f"expected integer offsets, got {arr.dtype}", offsets, content_size)
    if arr[0] != 0:
        raise InvalidOffsetsError("first offset must be 0", offsets, content_size)
    if int(arr[-1]) != content_size:
        raise InvalidOffsetsError("last offset must equal the content size", offsets, content_size)
    if arr.size > 1 and (numpy.diff(arr.astype("int64")) < 0).any():
        raise InvalidOffsetsError("offsets must be non-decreasing", offsets, content_size)
    return arr.astype(OFFSETS_DTYPE)


class FlattenedCollection(ABC, Generic[T]):
    """Row access over a flattened ragged array: a content buffer plus an
    offsets array, where row i is content[offsets[i]:offsets[i+1]].

    Subclasses implement the underscored accessors. Those trust the offset
    invariants and do no bounds checking; they are what the row iterators use.
    The public accessors built on top of them are checked.
    """

    _exclusive: bool = False

    @abstractmethod
    def _offsets_len(self) -> int:
        ...

    @abstractmethod
    def _offset_at(self, index: int) -> int:
        ...

    @abstractmethod
    def _content_size(self) -> int:
        ...

    @abstractmethod
    def _content_view(self, start: int, end: int) -> Row:
        ...

    @abstractmethod
    def _content_view_mut(self, start: int, end: int) -> Row:
        ...

    def _is_borrowed(self) -> bool:
        return self._exclusive

    def _set_borrowed(self, value: bool) -> None:
        self._exclusive = value

    def _check_borrow(self, action: str) -> None:
        if self._is_borrowed():
            raise BorrowError(self, action)

    @property
    def row_count(self) -> int:
        n = self._offsets_len()
        return n - 1 if n > 1 else 0

    def __len__(self) -> int:
        return self.row_count

    def get_offset(self, index: int) -> int:
        n = self._offsets_len()
        if not 0 <= index < n:
            raise OutOfBoundsError("offset index", index, (0, n))
        return self._offset_at(index)

    def get_content(self, start: int, end: int) -> Row:
        """Borrow content[start:end] as a read-only view."""
        self._check_borrow("read content")
        self._check_range(start, end)
        return self._content_view(start, end)

    def get_mut_content(self, start: int, end: int) -> Row:
        """Borrow content[start:end] as a writable view."""
        self._check_borrow("write content")
        self._check_range(start, end)
        return self._content_view_mut(start, end)

    def _check_range(self, start: int, end: int) -> None:
        size = self._content_size()
        if not 0 <= start <= end <= size:
            raise OutOfBoundsError("content range", (start, end), (0, size))

    def iter_rows(self) -> RowIter:
        """Iterate over the rows as read-only views into the content."""
        self._check_borrow("iterate rows")
        return RowIter(self)

    def iter_rows_mut(self) -> RowIterMut:
        """Iterate over the rows as writable views into the content. The
        container can't be used in any other way until the iterator is
        exhausted or closed."""
        self._check_borrow("iterate rows mutably")
        return RowIterMut(self)

    def __iter__(self) -> RowIter:
        return self.iter_rows()

    def row(self, index: int) -> Row:
        self._check_borrow("read a row")
        if not isinstance(index, (int, numpy.integer)):
            raise ExpectedTypeError(index, ["int"])
        index = int(index)
        n = self.row_count
        i = index + n if index < 0 else index
        if not 0 <= i < n:
            raise OutOfBoundsError("row index", index, (-n, n))
        return self._content_view(self._offset_at(i), self._offset_at(i + 1))

    def __getitem__(self, index: int) -> Row:
        if isinstance(index, tuple):
            raise IndexError("Flattened arrays do not support 2d indexing.")
        return self.row(index)

    def row_lengths(self) -> numpy.ndarray:
        offsets = [self._offset_at(i) for i in range(self._offsets_len())]
        return numpy.diff(numpy.asarray(offsets, dtype="int64"))

    def to_lists(self) -> List[List[Any]]:
        """Rebuild the nested input, one list per row."""
        return [row.tolist() for row in self.iter_rows()]


class FlatBase(FlattenedCollection[T]):
    """Shared implementation for containers that keep their two buffers as
    numpy arrays. Subclasses provide _content_array() and _offsets_array().
    """

    registry_name: str = ""

    @abstractmethod
    def _content_array(self) -> numpy.ndarray:
        ...

    @abstractmethod
    def _offsets_array(self) -> Offsets:
        ...

    def _offsets_len(self) -> int:
        return self._offsets_array().shape[0]

    def _offset_at(self, index: int) -> int:
        return int(self._offsets_array()[index])

    def _content_size(self) -> int:
        return self._content_array().shape[0]

    def _content_view(self, start: int, end: int) -> Row:
        return readonly(self._content_array()[start:end])

    def _content_view_mut(self, start: int, end: int) -> Row:
        return self._content_array()[start:end]

    @property
    def content(self) -> numpy.ndarray:
        """The whole content buffer, as a read-only view."""
        return readonly(self._content_array())

    @property
    def offsets(self) -> Offsets:
        return readonly(self._offsets_array())

    @property
    def size(self) -> int:
        return self._content_size()

    @property
    def dtype(self) -> numpy.dtype:
        return self._content_array().dtype

    def row_lengths(self) -> numpy.ndarray:
        return numpy.diff(self._offsets_array().astype("int64"))

    def __getitem__(self, index):
        """Index a row, or slice a contiguous run of rows into a new container
        of the same type."""
        if not isinstance(index, slice):
            return FlattenedCollection.__getitem__(self, index)
        self._check_borrow("slice rows")
        start, stop, step = index.indices(self.row_count)
        if step != 1:
            raise IndexError("Flattened arrays only support contiguous slices.")
        stop = max(start, stop)
        offsets = self._offsets_array()[start : stop + 1].astype(OFFSETS_DTYPE)
        content = self._content_array()[int(offsets[0]) : int(offsets[-1])].copy()
        return self._adopt(content, offsets - offsets[0])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the two raw buffers to a dict. Typed content stays a numpy
        array, object content becomes a list."""
        from .serialize import to_msg

        self._check_borrow("serialize")
        return to_msg(self)

    def to_bytes(self) -> bytes:
        """Serialize the container to msgpack bytes."""
        return srsly.msgpack_dumps(self.to_dict())

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, BoxedCollection):
            other = other.inner
        if type(self) is not type(other):
            return NotImplemented
        return numpy.array_equal(
            self._offsets_array(), other._offsets_array()
        ) and numpy.array_equal(self._content_array(), other._content_array())

    __hash__ = None  # type: ignore

    def __getstate__(self) -> Dict[str, Any]:
        state = dict(self.__dict__)
        state.pop("_exclusive", None)
        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(rows={self.row_count}, size={self.size}, "
            f"dtype={self.dtype})"
        )


class BoxedCollection(FlattenedCollection[T]):
    """Pass-through wrapper around another flattened collection. The wrapper
    shares the borrow state of the collection it wraps."""

    inner: FlattenedCollection[T]

    def __init__(self, inner: FlattenedCollection[T]):
        self.inner = inner

    def _offsets_len(self) -> int:
        return self.inner._offsets_len()

    def _offset_at(self, index: int) -> int:
        return self.inner._offset_at(index)

    def _content_size(self) -> int:
        return self.inner._content_size()

    def _content_view(self, start: int, end: int) -> Row:
        return self.inner._content_view(start, end)

    def _content_view_mut(self, start: int, end: int) -> Row:
        return self.inner._content_view_mut(start, end)

    def _is_borrowed(self) -> bool:
        return self.inner._is_borrowed()

    def _set_borrowed(self, value: bool) -> None:
        self.inner._set_borrowed(value)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, BoxedCollection):
            other = other.inner
        return self.inner == other

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return f"BoxedCollection({self.inner!r})"

