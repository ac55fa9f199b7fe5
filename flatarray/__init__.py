from .about import __version__
from ._registry import registry
from .array import FlatArray
from .vector import FlatVec
from .strings import FlatStr
from .builder import FlatBuilder

# fmt: off
__all__ = [
    "registry",
    "FlatArray",
    "FlatVec",
    "FlatStr",
    "FlatBuilder",
    "__version__",
]
# fmt: on
