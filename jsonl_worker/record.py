#!/usr/bin/env python3
"""A single undecoded JSON Lines record."""
from typing import Any, Callable, Optional

from jsonl_worker.codec import Decoder, convert, decode_json


class Record:
    """Immutable bytes of one JSON value, trailing whitespace already trimmed."""

    __slots__ = ('_raw', '_decoder')

    def __init__(self, raw: bytes, decoder: Optional[Decoder] = None):
        # Always a copy: the scanner reuses its buffer after advancing.
        object.__setattr__(self, '_raw', bytes(raw))
        object.__setattr__(self, '_decoder', decoder)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def raw(self) -> bytes:
        return self._raw

    def decode(self, into: Optional[Callable[..., Any]] = None, decoder: Optional[Decoder] = None) -> Any:
        """Decode the record, optionally shaping the result with ``into``.

        ``decoder`` overrides the one the record was created with, which in
        turn defaults to the ijson-based decode_json. Raises DecodeError for
        malformed content; the scanner that produced the record is unaffected.
        """
        value = (decoder or self._decoder or decode_json)(self._raw)
        return convert(value, into)

    def __bytes__(self) -> bytes:
        return self._raw

    def __str__(self) -> str:
        return self._raw.decode('utf-8', errors='replace')

    def __repr__(self) -> str:
        return f"Record({self._raw!r})"

    def __len__(self) -> int:
        return len(self._raw)

    def __eq__(self, other):
        if isinstance(other, Record):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self):
        return hash(self._raw)
