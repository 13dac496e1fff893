"""
Canonical binary serializer for Hyperliquid L1 actions

Values are normalised into plain msgpack-ready types and packed with
``msgpack``, the encoder used by the official Hyperliquid Python SDK, so
that action hashes computed here are accepted by the exchange's signature
recovery.
"""
from typing import Any, Dict, List, Union

import msgpack

JSONValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

INT64_MIN = -(2 ** 63)
UINT64_MAX = 2 ** 64 - 1


class EncodingError(ValueError):
    """Raised when a value cannot be represented in the wire format"""


class CanonicalSerializer:
    """
    Deterministic encoder for JSON-like values.

    With ``sort_keys`` enabled, map keys are emitted in byte-wise order of
    their UTF-8 encoding, so logically equal values always encode to the
    same bytes. With it disabled, maps keep the caller's key order, which
    is the layout the exchange reproduces when it re-hashes an action.
    Integral floats are packed as integers, so 5.0 encodes exactly like 5.
    """

    def __init__(self, sort_keys: bool = True):
        self.sort_keys = sort_keys

    def serialize(self, value: Any) -> bytes:
        normalized = self.normalize(value)
        try:
            return msgpack.packb(normalized, use_bin_type=True, strict_types=True)
        except (TypeError, OverflowError, ValueError) as e:
            raise EncodingError(f"Cannot encode value: {e}") from e

    def normalize(self, value: Any) -> Any:
        """Convert ``value`` into plain types with the final map key order"""
        # bool is a subclass of int, check it first
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, int):
            return _check_int_range(int(value))
        if isinstance(value, float):
            if value.is_integer() and INT64_MIN <= value <= UINT64_MAX:
                return int(value)
            return float(value)
        if isinstance(value, str):
            return _check_utf8(str(value))
        if isinstance(value, (list, tuple)):
            return [self.normalize(item) for item in value]
        if isinstance(value, dict):
            return self._normalize_map(value)
        raise EncodingError(f"Unsupported value type: {type(value).__name__}")

    def _normalize_map(self, value: Dict[Any, Any]) -> Dict[str, Any]:
        keys = list(value.keys())
        for key in keys:
            if not isinstance(key, str):
                raise EncodingError(f"Map keys must be strings, got {type(key).__name__}")
        if self.sort_keys:
            keys.sort(key=_utf8_key)
        return {_check_utf8(str(key)): self.normalize(value[key]) for key in keys}


def _check_int_range(value: int) -> int:
    if value > UINT64_MAX:
        raise EncodingError(f"Integer too large to encode: {value}")
    if value < INT64_MIN:
        raise EncodingError(f"Integer too small to encode: {value}")
    return value


def _check_utf8(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"String is not valid UTF-8: {e}") from e
    return value


def _utf8_key(key: str) -> bytes:
    try:
        return key.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Map key is not valid UTF-8: {e}") from e


canonical_serializer = CanonicalSerializer(sort_keys=True)
wire_serializer = CanonicalSerializer(sort_keys=False)


def serialize(value: JSONValue, sort_keys: bool = True) -> bytes:
    """Encode a JSON-like value; see CanonicalSerializer"""
    if sort_keys:
        return canonical_serializer.serialize(value)
    return wire_serializer.serialize(value)
