from typing import Any, Iterable, Optional, Sized
import contextlib
import threading
from contextvars import ContextVar
import numpy

from .types import DTypeLike, Offsets


OFFSETS_DTYPE = "uint64"

_SLICEABLE = (numpy.ndarray, bytes, bytearray, list, tuple)

context_dtype: ContextVar[Optional[DTypeLike]] = ContextVar(
    "context_dtype", default=None
)


def get_default_dtype() -> numpy.dtype:
    """Return the content dtype used when a constructor gets dtype=None.
    Unless configured otherwise, content holds arbitrary Python objects.
    """
    dtype = context_dtype.get()
    return numpy.dtype(object) if dtype is None else numpy.dtype(dtype)


def set_default_dtype(dtype: Optional[DTypeLike]) -> None:
    """Set the default content dtype for the current context. None restores
    the object dtype."""
    if dtype is not None:
        # Fail early on bad values rather than on the next construction.
        numpy.dtype(dtype)
    context_dtype.set(dtype)


@contextlib.contextmanager
def use_dtype(dtype: Optional[DTypeLike]):
    """Change the default content dtype within a block."""
    with threading.Lock():
        prev = context_dtype.get()
        set_default_dtype(dtype)
        try:
            yield
        finally:
            context_dtype.set(prev)


def resolve_dtype(dtype: Optional[DTypeLike]) -> numpy.dtype:
    return get_default_dtype() if dtype is None else numpy.dtype(dtype)


def is_object_dtype(dtype: numpy.dtype) -> bool:
    return dtype.kind == "O"


def has_len(obj: Any) -> bool:
    return isinstance(obj, Sized)


def alloc_content(size: int, dtype: numpy.dtype) -> numpy.ndarray:
    if is_object_dtype(dtype):
        # Unused object slots hold None rather than int 0.
        return numpy.empty(size, dtype=dtype)
    return numpy.zeros(size, dtype=dtype)


def alloc_offsets(size: int) -> Offsets:
    return numpy.zeros(size, dtype=OFFSETS_DTYPE)


def fill(dst: numpy.ndarray, start: int, items: Iterable[Any]) -> int:
    """Copy items into dst from position start on, returning the number of
    items written. Object arrays are filled element-wise, so that items which
    are themselves sequences (tuples, lists) are stored as single elements
    instead of being broadcast.
    """
    if not is_object_dtype(dst.dtype) and isinstance(items, _SLICEABLE):
        if isinstance(items, (bytes, bytearray)):
            items = numpy.frombuffer(items, dtype="uint8")
        n = len(items)
        dst[start : start + n] = items
        return n
    i = start
    for item in items:
        dst[i] = item
        i += 1
    return i - start


def readonly(arr: numpy.ndarray) -> numpy.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view


def to_numpy_1d(arr: Any, dtype: Optional[DTypeLike] = None) -> numpy.ndarray:
    """Convert a flat sequence to a 1d numpy array, element-wise for the
    object dtype."""
    dtype = resolve_dtype(dtype)
    if isinstance(arr, numpy.ndarray) and arr.ndim == 1 and arr.dtype == dtype:
        return arr.copy()
    if isinstance(arr, (bytes, bytearray, memoryview)) and dtype == numpy.dtype("uint8"):
        return numpy.frombuffer(bytes(arr), dtype="uint8").copy()
    items = list(arr)
    out = alloc_content(len(items), dtype)
    fill(out, 0, items)
    return out
