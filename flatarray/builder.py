from typing import Any, Callable, Generic, Optional
import copy

import numpy

from .array import FlatArray
from .exceptions import BuilderFinalizedError, ExpectedTypeError
from .strings import FlatStr
from .types import DTypeLike, NestedRows, RowLike, T
from .vector import FlatVec


class FlatBuilder(Generic[T]):
    """Accumulate rows one at a time, then finalize them into a FlatArray,
    a FlatVec or a FlatStr. A builder can only be finalized once.

        >>> builder = FlatBuilder()
        >>> builder.push(["B-PER", "I-PER"])
        >>> builder.push([])
        >>> builder.build_as_fixed().offsets.tolist()
        [0, 2, 2]
    """

    def __init__(self, dtype: Optional[DTypeLike] = None):
        self._vec: Optional[FlatVec[T]] = FlatVec(dtype=dtype)

    def _target(self, action: str) -> FlatVec[T]:
        if self._vec is None:
            raise BuilderFinalizedError(action)
        return self._vec

    def _finalize(self, action: str) -> FlatVec[T]:
        vec = self._target(action)
        self._vec = None
        return vec

    @property
    def is_finalized(self) -> bool:
        return self._vec is None

    @property
    def row_count(self) -> int:
        return self._target("count rows").row_count

    @property
    def dtype(self) -> numpy.dtype:
        return self._target("read the dtype").dtype

    def push(self, row: RowLike) -> None:
        self._target("push a row").push(row)

    def push_exact_sized(self, row: RowLike) -> None:
        self._target("push a row").push_exact_sized(row)

    def push_owned(
        self, row: RowLike, convert: Callable[[Any], Any] = copy.copy
    ) -> None:
        self._target("push a row").push_owned(row, convert)

    def push_take(self, row: Any) -> None:
        self._target("push a row").push_take(row)

    def extend(self, rows: NestedRows) -> None:
        self._target("push rows").extend(rows)

    def build_as_fixed(self) -> FlatArray[T]:
        return self._finalize("build a FlatArray").freeze()

    def build_as_growable(self) -> FlatVec[T]:
        return self._finalize("build a FlatVec")

    def build_as_string(self) -> FlatStr:
        """Finalize a uint8 builder into a FlatStr. Every row is checked to
        be valid UTF-8."""
        vec = self._target("build a FlatStr")
        if vec.dtype != numpy.dtype("uint8"):
            raise ExpectedTypeError(str(vec.dtype), ["uint8"])
        self._finalize("build a FlatStr")
        return FlatStr.from_vec(vec)

    def copy(self) -> "FlatBuilder[T]":
        builder = FlatBuilder.__new__(FlatBuilder)
        builder._vec = self._target("copy").copy()
        return builder
