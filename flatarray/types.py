from typing import Any, Iterable, Sequence, TypeVar, Union
import numpy


T = TypeVar("T")

# Anything numpy.dtype() accepts: "i", "uint8", numpy.int32, object...
DTypeLike = Union[str, type, numpy.dtype]

# One-dimensional uint64 array of row boundaries.
Offsets = numpy.ndarray

# A row is a numpy view into the content buffer.
Row = numpy.ndarray

RowLike = Iterable[Any]
NestedRows = Iterable[RowLike]
TokenRows = Iterable[Sequence[str]]
