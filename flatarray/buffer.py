from typing import Any, Iterable, Optional
import itertools
import numpy

from .types import DTypeLike
from .util import alloc_content, fill


MIN_CAPACITY = 8


class GrowableBuffer:
    """A one-dimensional numpy buffer with spare capacity at the end, so that
    appends are amortized O(1). Only data[:size] is in use.
    """

    data: numpy.ndarray
    size: int

    def __init__(self, dtype: DTypeLike, capacity: int = 0):
        self.data = alloc_content(capacity, numpy.dtype(dtype))
        self.size = 0

    @classmethod
    def from_array(cls, arr: numpy.ndarray) -> "GrowableBuffer":
        """Adopt arr as the buffer, without copying."""
        buf = cls.__new__(cls)
        buf.data = arr
        buf.size = arr.shape[0]
        return buf

    @property
    def dtype(self) -> numpy.dtype:
        return self.data.dtype

    @property
    def capacity(self) -> int:
        return self.data.shape[0]

    def __len__(self) -> int:
        return self.size

    def view(self) -> numpy.ndarray:
        return self.data[: self.size]

    def last(self) -> Any:
        return self.data[self.size - 1]

    def reserve(self, additional: int) -> None:
        needed = self.size + additional
        if needed > self.capacity:
            self._realloc(max(self.capacity * 2, needed, MIN_CAPACITY))

    def _realloc(self, new_size: int) -> None:
        new_data = alloc_content(new_size, self.dtype)
        new_data[: self.size] = self.data[: self.size]
        self.data = new_data

    def append(self, value: Any) -> None:
        if self.size == self.capacity:
            self.reserve(1)
        self.data[self.size] = value
        self.size += 1

    def extend(self, values: Iterable[Any], count: Optional[int] = None) -> int:
        """Append values and return how many were written. If count is given,
        room is reserved up front and the values are copied in one go. At most
        count + 1 values are consumed then, so callers can detect a source that
        yields more than it announced."""
        if count is None:
            start = self.size
            for value in values:
                self.append(value)
            return self.size - start
        self.reserve(count + 1)
        if not isinstance(values, (numpy.ndarray, bytes, bytearray, list, tuple)):
            values = itertools.islice(values, count + 1)
        written = fill(self.data, self.size, values)
        self.size += written
        return written

    def truncate(self, size: int) -> None:
        if size < self.size:
            if self.dtype.kind == "O":
                # Drop references held by the removed slots.
                self.data[size : self.size] = None
            self.size = size

    def to_array(self) -> numpy.ndarray:
        """Copy the used part into an exact-size array."""
        return self.data[: self.size].copy()
