from typing import Any, Dict, List, Optional, Type
import numpy
import srsly
from pydantic import BaseModel, ValidationError, conint

from ._registry import get_container_class, registry
from .collection import FlatBase
from .exceptions import DeserializationError
from .util import OFFSETS_DTYPE, is_object_dtype


class FlatMsg(BaseModel):
    """Schema of a serialized container: its registered kind, the content
    dtype and the two raw buffers."""

    kind: str
    dtype: str
    content: Any
    offsets: List[conint(ge=0)]  # type: ignore


def to_msg(container: FlatBase) -> Dict[str, Any]:
    content = container._content_array()
    offsets = container._offsets_array()
    return {
        "kind": container.registry_name,
        "dtype": content.dtype.str,
        "content": content.tolist() if is_object_dtype(content.dtype) else content.copy(),
        "offsets": offsets.tolist(),
    }


def from_msg(msg: Dict[str, Any], cls: Optional[Type[FlatBase]] = None) -> FlatBase:
    """Rebuild a container from the output of to_dict(). The class is looked
    up from msg["kind"] in registry.containers; if cls is given, the kind
    must name that class."""
    name = cls.__name__ if cls is not None else "container"
    if not isinstance(msg, dict):
        raise DeserializationError(name, [{"loc": [], "msg": f"expected a dict, got {type(msg)}"}])
    try:
        parsed = FlatMsg(**msg)
    except ValidationError as e:
        raise DeserializationError(name, e.errors()) from None
    if not registry.has("containers", parsed.kind):
        err = f"unknown container kind '{parsed.kind}'"
        raise DeserializationError(name, [{"loc": ["kind"], "msg": err}])
    kind_cls = get_container_class(parsed.kind)
    if cls is not None and kind_cls is not cls:
        err = f"expected '{cls.registry_name}', got '{parsed.kind}'"
        raise DeserializationError(name, [{"loc": ["kind"], "msg": err}])
    try:
        dtype = numpy.dtype(parsed.dtype)
    except TypeError:
        err = f"unknown dtype '{parsed.dtype}'"
        raise DeserializationError(name, [{"loc": ["dtype"], "msg": err}]) from None
    offsets = numpy.asarray(parsed.offsets, dtype=OFFSETS_DTYPE)
    return kind_cls.from_raw(parsed.content, offsets, dtype=dtype)


def from_bytes(bytes_data: bytes, cls: Optional[Type[FlatBase]] = None) -> FlatBase:
    msg = srsly.msgpack_loads(bytes_data)
    return from_msg(msg, cls)


def deserialize(bytes_data: bytes) -> FlatBase:
    """Load any registered container kind from to_bytes() output."""
    return from_bytes(bytes_data)
