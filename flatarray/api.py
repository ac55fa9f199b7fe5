from ._registry import registry
from .array import FlatArray
from .buffer import GrowableBuffer
from .builder import FlatBuilder
from .collection import FlattenedCollection, BoxedCollection, validate_offsets
from .exceptions import InvalidOffsetsError, OutOfBoundsError, RowLengthError
from .exceptions import ExpectedTypeError, BorrowError, BuilderFinalizedError
from .exceptions import InvalidUTF8Error, DeserializationError
from .iterators import RowIter, RowIterMut, StrIter
from .serialize import deserialize
from .strings import FlatStr
from .util import get_default_dtype, set_default_dtype, use_dtype, OFFSETS_DTYPE
from .vector import FlatVec

# fmt: off
__all__ = [
    # .array, .vector, .strings, .builder
    "FlatArray", "FlatVec", "FlatStr", "FlatBuilder",
    # .collection, .buffer
    "FlattenedCollection", "BoxedCollection", "validate_offsets", "GrowableBuffer",
    # .iterators
    "RowIter", "RowIterMut", "StrIter",
    # .exceptions
    "InvalidOffsetsError", "OutOfBoundsError", "RowLengthError",
    "ExpectedTypeError", "BorrowError", "BuilderFinalizedError",
    "InvalidUTF8Error", "DeserializationError",
    # .util
    "get_default_dtype", "set_default_dtype", "use_dtype", "OFFSETS_DTYPE",
    # other
    "registry", "deserialize",
]
# fmt: on
