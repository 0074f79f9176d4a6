import pytest

from lifebook.core.storage.json_text import decode_list, decode_object, encode_list, encode_object

pytestmark = pytest.mark.unit


def test_decode_list_reads_json_arrays():
    assert decode_list('["magnesium", "vitamin d"]') == ["magnesium", "vitamin d"]


def test_decode_list_accepts_legacy_comma_text():
    assert decode_list("magnesium, vitamin d ,zinc") == ["magnesium", "vitamin d", "zinc"]


@pytest.mark.parametrize("value", [None, "", "   ", "null", b""])
def test_decode_list_empty_values(value):
    assert decode_list(value) == []


def test_decode_list_wraps_scalars():
    assert decode_list('"walk"') == ["walk"]
    assert decode_list(5) == [5]
    assert decode_list(("a", "b")) == ["a", "b"]


def test_decode_list_never_raises_on_malformed_json():
    assert decode_list('["unterminated') == ['["unterminated']


def test_encode_list_normalises_legacy_text():
    assert encode_list("a,b") == '["a", "b"]'
    assert encode_list(None) == "[]"


def test_decode_object():
    assert decode_object('{"q1": "yes"}') == {"q1": "yes"}
    assert decode_object(None) == {}
    assert decode_object("not json") == {"raw": "not json"}
    assert decode_object("[1, 2]") == {"value": [1, 2]}
    assert encode_object({"a": 1}) == '{"a": 1}'
