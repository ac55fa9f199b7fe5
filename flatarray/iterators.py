from typing import TYPE_CHECKING, Iterator
from .types import Row

if TYPE_CHECKING:
    from .collection import FlattenedCollection
    from .strings import FlatStr


class RowIter(Iterator[Row]):
    """Lazy iterator over the rows of a flattened collection, yielding
    read-only views into the content buffer.

    The iterator is finite and can't be restarted: create a new one with
    collection.iter_rows() to iterate again.
    """

    def __init__(self, collection: "FlattenedCollection"):
        self._collection = collection
        self._cursor = 0

    def _next_bounds(self):
        collection = self._collection
        n = collection._offsets_len()
        # n < 2 means no rows, whether offsets is [0] or empty.
        if n < 2 or self._cursor >= n - 1:
            return None
        start = collection._offset_at(self._cursor)
        end = collection._offset_at(self._cursor + 1)
        self._cursor += 1
        return start, end

    def __iter__(self) -> "RowIter":
        return self

    def __next__(self) -> Row:
        bounds = self._next_bounds()
        if bounds is None:
            raise StopIteration
        return self._collection._content_view(*bounds)

    def __length_hint__(self) -> int:
        return max(self._collection.row_count - self._cursor, 0)


class RowIterMut(RowIter):
    """Iterator yielding writable, non-overlapping views of each row.

    The collection is exclusively borrowed while the iterator is live: any
    other iteration, content access or push raises BorrowError. The borrow is
    released when the iterator is exhausted, closed, exits a with-block or is
    garbage collected.
    """

    def __init__(self, collection: "FlattenedCollection"):
        RowIter.__init__(self, collection)
        collection._set_borrowed(True)
        self._live = True

    def __iter__(self) -> "RowIterMut":
        return self

    def __next__(self) -> Row:
        bounds = self._next_bounds() if self._live else None
        if bounds is None:
            self.close()
            raise StopIteration
        return self._collection._content_view_mut(*bounds)

    def close(self) -> None:
        if self._live:
            self._live = False
            self._collection._set_borrowed(False)

    def __enter__(self) -> "RowIterMut":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __del__(self):
        # __init__ may have failed before _live was set.
        if getattr(self, "_live", False):
            self.close()


class StrIter(Iterator[str]):
    """Iterator over the rows of a FlatStr, decoded as str."""

    def __init__(self, flat_str: "FlatStr"):
        self._rows = RowIter(flat_str)

    def __iter__(self) -> "StrIter":
        return self

    def __next__(self) -> str:
        return next(self._rows).tobytes().decode("utf8")

    def __length_hint__(self) -> int:
        return self._rows.__length_hint__()
