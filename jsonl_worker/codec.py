#!/usr/bin/env python3
"""Default JSON codec: ijson for decoding single records, stdlib json for encoding."""
import dataclasses, io, json, logging
import ijson
from typing import Any, Callable, Optional

from jsonl_worker.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes], Any]
Encoder = Callable[[Any], bytes]

# Shapes checked with isinstance instead of being called on the decoded tree.
JSON_TYPES = (dict, list, str, int, float, bool)


def decode_json(raw: bytes) -> Any:
    """Parse exactly one top-level JSON value out of ``raw``."""
    try:
        values = list(ijson.items(io.BytesIO(raw), '', use_float=True))
    except ijson.JSONError as e:
        raise DecodeError(f"malformed JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise DecodeError(f"record is not valid UTF-8: {e}") from e
    if len(values) != 1:
        raise DecodeError(f"expected one JSON value, found {len(values)}")
    return values[0]


def encode_json(value: Any) -> bytes:
    """Serialize ``value`` as compact UTF-8 JSON."""
    try:
        text = json.dumps(value, separators=(',', ':'), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise EncodeError(f"cannot encode {type(value).__name__}: {e}") from e
    return text.encode('utf-8')


def convert(value: Any, into: Optional[Callable[..., Any]]) -> Any:
    """Shape a decoded JSON tree into ``into``.

    ``None`` keeps the tree as is. JSON-native types only check the value
    (an int is accepted where a float is asked for, a bool never counts as an
    int). Dataclasses and other classes get the members of an object as
    keyword arguments; any other callable receives the tree itself.
    """
    if into is None:
        return value
    if into in JSON_TYPES:
        if into is float and isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        if isinstance(value, bool) and into is not bool:
            raise DecodeError(f"expected {into.__name__}, got bool")
        if not isinstance(value, into):
            raise DecodeError(f"expected {into.__name__}, got {type(value).__name__}")
        return value
    try:
        if isinstance(value, dict) and (dataclasses.is_dataclass(into) or isinstance(into, type)):
            return into(**value)
        return into(value)
    except (TypeError, ValueError, KeyError) as e:
        name = getattr(into, '__name__', repr(into))
        raise DecodeError(f"cannot convert to {name}: {e}") from e
