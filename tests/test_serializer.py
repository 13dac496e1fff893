"""tests/test_serializer.py: canonical binary encoding"""
import struct

import msgpack
import pytest

from hlsign.services.serializer import CanonicalSerializer, EncodingError, serialize


class TestScalars:
    def test_nil_and_bools(self):
        assert serialize(None) == b"\xc0"
        assert serialize(True) == b"\xc3"
        assert serialize(False) == b"\xc2"

    def test_bool_is_not_an_integer(self):
        assert serialize(True) != serialize(1)
        assert serialize(False) != serialize(0)

    @pytest.mark.parametrize("value,expected", [
        (0, b"\x00"),
        (127, b"\x7f"),
        (128, b"\xcc\x80"),
        (255, b"\xcc\xff"),
        (256, b"\xcd\x01\x00"),
        (65535, b"\xcd\xff\xff"),
        (65536, b"\xce\x00\x01\x00\x00"),
        (2 ** 32, b"\xcf\x00\x00\x00\x01\x00\x00\x00\x00"),
        (2 ** 64 - 1, b"\xcf" + b"\xff" * 8),
    ])
    def test_unsigned_widths(self, value, expected):
        assert serialize(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (-1, b"\xff"),
        (-32, b"\xe0"),
        (-33, b"\xd0\xdf"),
        (-128, b"\xd0\x80"),
        (-129, b"\xd1\xff\x7f"),
        (-(2 ** 31), b"\xd2\x80\x00\x00\x00"),
        (-(2 ** 31) - 1, b"\xd3" + (-(2 ** 31) - 1).to_bytes(8, "big", signed=True)),
    ])
    def test_negative_widths(self, value, expected):
        assert serialize(value) == expected

    @pytest.mark.parametrize("value", [2 ** 64, -(2 ** 63) - 1])
    def test_integer_out_of_range(self, value):
        with pytest.raises(EncodingError):
            serialize(value)

    def test_integral_float_uses_integer_path(self):
        assert serialize(5.0) == serialize(5) == b"\x05"
        assert serialize(-2.0) == serialize(-2)
        assert serialize(300.0) == b"\xcd\x01\x2c"

    def test_fractional_float_uses_float64(self):
        encoded = serialize(5.5)
        assert encoded == b"\xcb" + struct.pack(">d", 5.5)
        assert len(encoded) == 9

    def test_non_finite_floats_use_float64(self):
        assert serialize(float("inf")) == b"\xcb" + struct.pack(">d", float("inf"))
        assert serialize(float("nan"))[:1] == b"\xcb"


class TestStrings:
    def test_fixstr(self):
        assert serialize("") == b"\xa0"
        assert serialize("abc") == b"\xa3abc"
        assert serialize("x" * 31) == b"\xbf" + b"x" * 31

    def test_str8_str16(self):
        assert serialize("x" * 32) == b"\xd9\x20" + b"x" * 32
        assert serialize("x" * 255)[:2] == b"\xd9\xff"
        assert serialize("x" * 256)[:3] == b"\xda\x01\x00"
        assert serialize("x" * 65536)[:5] == b"\xdb\x00\x01\x00\x00"

    def test_length_counts_utf8_bytes(self):
        assert serialize("é") == b"\xa2\xc3\xa9"


class TestContainers:
    def test_arrays(self):
        assert serialize([]) == b"\x90"
        assert serialize([1, 2]) == b"\x92\x01\x02"
        assert serialize(list(range(16))) == b"\xdc\x00\x10" + bytes(range(16))

    def test_tuple_encodes_as_array(self):
        assert serialize((1, "a", None)) == serialize([1, "a", None])

    def test_array_keeps_item_order(self):
        assert serialize([1, 2]) != serialize([2, 1])

    def test_map_header_widths(self):
        assert serialize({}) == b"\x80"
        big = {f"k{i:02d}": i for i in range(16)}
        assert serialize(big)[:3] == b"\xde\x00\x10"

    def test_keys_sorted(self):
        assert serialize({"b": 1, "a": 2}) == serialize({"a": 2, "b": 1})
        assert serialize({"b": 1, "a": 2}) == b"\x82\xa1a\x02\xa1b\x01"

    def test_keys_sorted_bytewise(self):
        # "B" (0x42) sorts before "a" (0x61)
        assert serialize({"a": 1, "B": 2}) == b"\x82\xa1B\x02\xa1a\x01"

    def test_nested_maps_are_deterministic(self):
        a = {"outer": {"y": [1, {"q": True, "p": None}], "x": "s"}, "alpha": 1.5}
        b = {"alpha": 1.5, "outer": {"x": "s", "y": [1, {"p": None, "q": True}]}}
        assert serialize(a) == serialize(b)

    def test_key_order_mode_keeps_insertion_order(self):
        assert serialize({"b": 1, "a": 2}, sort_keys=False) == b"\x82\xa1b\x01\xa1a\x02"
        assert CanonicalSerializer(sort_keys=False).serialize({"b": 1, "a": 2}) == \
            serialize({"b": 1, "a": 2}, sort_keys=False)


class TestNormalize:
    def test_plain_types_for_packing(self):
        normalized = CanonicalSerializer().normalize({"b": (1, 2.0), "a": [5.5, None]})
        assert normalized == {"a": [5.5, None], "b": [1, 2]}
        assert list(normalized) == ["a", "b"]
        assert type(normalized["b"]) is list
        assert type(normalized["b"][1]) is int

    def test_key_order_mode_keeps_order(self):
        normalized = CanonicalSerializer(sort_keys=False).normalize({"b": 1, "a": 2})
        assert list(normalized) == ["b", "a"]

    def test_large_integral_float_stays_float(self):
        assert serialize(1e20)[:1] == b"\xcb"


class TestUnsupported:
    @pytest.mark.parametrize("value", [object(), b"raw", {1, 2}, lambda: None])
    def test_unsupported_types(self, value):
        with pytest.raises(EncodingError):
            serialize(value)

    def test_unsupported_nested(self):
        with pytest.raises(EncodingError, match="Unsupported value type"):
            serialize({"orders": [{"p": object()}]})

    def test_lone_surrogate(self):
        with pytest.raises(EncodingError):
            serialize("\ud800")

    def test_non_string_keys(self):
        with pytest.raises(EncodingError):
            serialize({1: "a"})

    def test_encoding_error_is_value_error(self):
        assert issubclass(EncodingError, ValueError)


class TestMatchesMsgpack:
    """Key-order mode must equal the reference MessagePack encoder"""

    @pytest.mark.parametrize("value", [
        None,
        True,
        0,
        200,
        70000,
        2 ** 40,
        -5,
        -200,
        -70000,
        -(2 ** 40),
        0.0147,
        -1670.1,
        "",
        "Ioc",
        "a" * 40,
        "b" * 300,
        [1, "two", None, [3.5]],
        list(range(20)),
        {"type": "order", "orders": [], "grouping": "na"},
        {f"key{i}": i for i in range(20)},
    ])
    def test_matches_packb(self, value):
        assert serialize(value, sort_keys=False) == msgpack.packb(value)

    def test_reference_action_matches_packb(self, reference_action):
        assert serialize(reference_action, sort_keys=False) == msgpack.packb(reference_action)
