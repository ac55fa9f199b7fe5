import pytest
import numpy
import srsly

from flatarray.api import FlatArray, FlatVec, FlatStr, deserialize, registry
from flatarray.api import DeserializationError, InvalidOffsetsError


def test_to_dict_object_content(label_rows):
    msg = FlatArray(label_rows).to_dict()
    assert msg["kind"] == "FlatArray.v1"
    assert msg["content"] == [x for row in label_rows for x in row]
    assert msg["offsets"] == [0, 7, 10]
    assert numpy.dtype(msg["dtype"]) == numpy.dtype(object)


def test_to_dict_typed_content():
    msg = FlatVec([[1, 2], [3]], dtype="int32").to_dict()
    assert msg["kind"] == "FlatVec.v1"
    assert isinstance(msg["content"], numpy.ndarray)
    assert msg["content"].tolist() == [1, 2, 3]
    assert numpy.dtype(msg["dtype"]) == numpy.int32


@pytest.mark.parametrize(
    "container",
    [
        FlatArray([["O", "B-PER"], [], ["I-PER"]]),
        FlatArray([[1, 2, 3], [4]], dtype="int32"),
        FlatVec([["a"], ["b", "c"]]),
        FlatVec([[0.5], []], dtype="float32"),
        FlatStr(["héllo", "", "wörld"]),
        FlatArray(),
    ],
)
def test_serialize_roundtrip_bytes(container):
    data = container.to_bytes()
    loaded = type(container).from_bytes(data)
    assert type(loaded) is type(container)
    assert loaded == container
    assert loaded.dtype == container.dtype
    # Serialization should be stable.
    assert loaded.to_bytes() == data


def test_serialize_roundtrip_dict(label_rows):
    flat = FlatArray(label_rows)
    assert FlatArray.from_dict(flat.to_dict()) == flat


def test_deserialize_picks_kind(label_rows):
    for container in (FlatArray(label_rows), FlatVec(label_rows), FlatStr(["x"])):
        loaded = deserialize(container.to_bytes())
        assert type(loaded) is type(container)
        assert loaded == container


def test_deserialized_vec_is_growable(label_rows):
    vec = FlatVec.from_bytes(FlatVec(label_rows).to_bytes())
    vec.push(["O"])
    assert vec.row_count == 3


def test_from_bytes_wrong_kind(label_rows):
    data = FlatVec(label_rows).to_bytes()
    with pytest.raises(DeserializationError):
        FlatArray.from_bytes(data)


def test_from_dict_unknown_kind(label_rows):
    msg = FlatArray(label_rows).to_dict()
    msg["kind"] = "FlatTree.v1"
    with pytest.raises(DeserializationError):
        deserialize(srsly.msgpack_dumps(msg))


@pytest.mark.parametrize(
    "field,value",
    [("offsets", [0, -7, 10]), ("offsets", "0,7,10"), ("kind", None), ("dtype", "nope")],
)
def test_from_dict_invalid_fields(label_rows, field, value):
    msg = FlatArray(label_rows).to_dict()
    msg[field] = value
    with pytest.raises(DeserializationError):
        FlatArray.from_dict(msg)


def test_from_dict_missing_field(label_rows):
    msg = FlatArray(label_rows).to_dict()
    del msg["offsets"]
    with pytest.raises(DeserializationError):
        FlatArray.from_dict(msg)
    with pytest.raises(DeserializationError):
        FlatArray.from_dict(["not", "a", "dict"])


def test_from_dict_broken_offsets(label_rows):
    msg = FlatArray(label_rows).to_dict()
    msg["offsets"] = [0, 11, 10]
    with pytest.raises(InvalidOffsetsError):
        FlatArray.from_dict(msg)


def test_pickle_roundtrip(label_rows):
    for container in (FlatArray(label_rows), FlatVec(label_rows), FlatStr(["x", ""])):
        loaded = srsly.pickle_loads(srsly.pickle_dumps(container))
        assert loaded == container


def test_pickle_drops_borrow(label_rows):
    flat = FlatArray(label_rows)
    rows = flat.iter_rows_mut()
    loaded = srsly.pickle_loads(srsly.pickle_dumps(flat))
    assert loaded.to_lists() == label_rows
    rows.close()


def test_registry_knows_containers():
    assert registry.has("containers", "FlatArray.v1")
    assert registry.get("containers", "FlatVec.v1") is FlatVec
    assert registry.get("containers", "FlatStr.v1") is FlatStr
    with pytest.raises(ValueError):
        registry.get("containers", "FlatTree.v1")
    with pytest.raises(ValueError):
        registry.get("layouts", "FlatArray.v1")


def test_registry_custom_container():
    @registry.containers("LabelArray.v1")
    class LabelArray(FlatArray):
        registry_name = "LabelArray.v1"

    labels = LabelArray([["B-PER"], []])
    loaded = deserialize(labels.to_bytes())
    assert type(loaded) is LabelArray
    assert loaded.to_lists() == [["B-PER"], []]
