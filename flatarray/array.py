from typing import Any, Dict, Optional, Tuple
import numpy

from ._registry import registry
from .buffer import GrowableBuffer
from .collection import FlatBase, validate_offsets
from .exceptions import RowLengthError
from .types import DTypeLike, NestedRows, Offsets, T, TokenRows
from .util import OFFSETS_DTYPE, alloc_content, alloc_offsets, fill, has_len
from .util import resolve_dtype, to_numpy_1d


def flatten_rows(
    rows: NestedRows, dtype: Optional[DTypeLike] = None
) -> Tuple[numpy.ndarray, Offsets]:
    """Flatten nested rows into a (content, offsets) pair. The first pass
    measures the rows, so both buffers are allocated once at their exact
    size; the second pass copies each row and records its end offset. Empty
    rows get a boundary like any other row.
    """
    dtype = resolve_dtype(dtype)
    rows = [row if has_len(row) else list(row) for row in rows]
    total = sum(len(row) for row in rows)
    content = alloc_content(total, dtype)
    offsets = alloc_offsets(len(rows) + 1)
    end = 0
    for i, row in enumerate(rows):
        n = len(row)
        written = fill(content[: end + n], end, row)
        if written != n:
            raise RowLengthError(n, written)
        end += n
        offsets[i + 1] = end
    return content, offsets


def flatten_iter(
    rows: NestedRows, dtype: Optional[DTypeLike] = None
) -> Tuple[numpy.ndarray, Offsets]:
    """Flatten rows in a single pass, for one-shot iterables that can't be
    measured first. The buffers grow as needed and are trimmed at the end."""
    content = GrowableBuffer(resolve_dtype(dtype))
    offsets = GrowableBuffer(OFFSETS_DTYPE)
    offsets.append(0)
    for row in rows:
        content.extend(row)
        offsets.append(content.size)
    return content.to_array(), offsets.to_array()


@registry.containers("FlatArray.v1")
class FlatArray(FlatBase[T]):
    """A ragged array stored as one fixed-size content buffer plus an offsets
    array, built once from complete input. Iterating with iter_rows() gives
    read-only numpy views of each row, in order:

        >>> labels = FlatArray([["O", "B-PER"], ["B-LOC"]])
        >>> [row.tolist() for row in labels.iter_rows()]
        [['O', 'B-PER'], ['B-LOC']]

    The shape never changes after construction. Elements can only be
    overwritten through iter_rows_mut() or get_mut_content().
    """

    registry_name = "FlatArray.v1"

    _content: numpy.ndarray
    _offsets: Offsets

    def __init__(
        self, rows: Optional[NestedRows] = None, dtype: Optional[DTypeLike] = None
    ):
        if rows is None:
            self._content = alloc_content(0, resolve_dtype(dtype))
            self._offsets = alloc_offsets(1)
        else:
            self._content, self._offsets = flatten_rows(rows, dtype)

    @classmethod
    def _adopt(cls, content: numpy.ndarray, offsets: Offsets) -> "FlatArray":
        obj = cls.__new__(cls)
        obj._content = content
        obj._offsets = offsets
        return obj

    @classmethod
    def from_rows(
        cls, rows: NestedRows, dtype: Optional[DTypeLike] = None
    ) -> "FlatArray":
        """Build from a complete nested input. Prefer this over from_iter()
        when the rows can be iterated twice: it allocates exactly once."""
        return cls(rows, dtype=dtype)

    @classmethod
    def from_iter(
        cls, rows: NestedRows, dtype: Optional[DTypeLike] = None
    ) -> "FlatArray":
        return cls._adopt(*flatten_iter(rows, dtype))

    @classmethod
    def from_raw(
        cls, content: Any, offsets: Any, dtype: Optional[DTypeLike] = None
    ) -> "FlatArray":
        """Adopt an existing content buffer and offsets array. The offsets are
        checked against the content once, here."""
        content = to_numpy_1d(content, dtype)
        return cls._adopt(content, validate_offsets(offsets, content.shape[0]))

    @classmethod
    def from_token_rows(cls, rows: TokenRows) -> "FlatArray":
        """Build an object array of owned str tokens. Empty rows are kept."""
        from .builder import FlatBuilder

        builder: FlatBuilder[str] = FlatBuilder(dtype=object)
        for row in rows:
            builder.push_owned(row, str)
        return builder.build_as_fixed()

    @classmethod
    def from_dict(cls, msg: Dict[str, Any]) -> "FlatArray":
        from .serialize import from_msg

        return from_msg(msg, cls)

    @classmethod
    def from_bytes(cls, bytes_data: bytes) -> "FlatArray":
        from .serialize import from_bytes

        return from_bytes(bytes_data, cls)

    def _content_array(self) -> numpy.ndarray:
        return self._content

    def _offsets_array(self) -> Offsets:
        return self._offsets

    def copy(self) -> "FlatArray":
        return self._adopt(self._content.copy(), self._offsets.copy())

    def to_vec(self):
        """Copy into a growable FlatVec."""
        from .vector import FlatVec

        return FlatVec._adopt(self._content.copy(), self._offsets.copy())
