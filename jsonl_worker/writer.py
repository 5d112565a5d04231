#!/usr/bin/env python3
"""Incremental JSON Lines writer."""
import logging
from typing import Any, BinaryIO, Optional, Union

from jsonl_worker.codec import Encoder, encode_json
from jsonl_worker.errors import EncodeError, SinkError

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = '\n'


class Writer:
    """Append values to a binary sink as JSON lines.

    The separator goes *between* records: never before the first one, never
    after the last. Nothing is buffered; every call hits the sink directly.
    """

    def __init__(self, sink: BinaryIO, separator: Union[str, bytes] = DEFAULT_SEPARATOR,
                 encoder: Optional[Encoder] = None):
        if isinstance(separator, str):
            separator = separator.encode('utf-8')
        self.separator = bytes(separator)
        self._sink = sink
        self._encode = encoder or encode_json
        self._records = 0
        self._written = 0

    @property
    def records_written(self) -> int:
        return self._records

    def written_bytes(self) -> int:
        """Total bytes appended to the sink over the lifetime of this writer."""
        return self._written

    def write(self, *values: Any) -> int:
        """Encode and append each value in order, returning the bytes written by this call.

        On failure the raised EncodeError/SinkError carries ``written``, the
        bytes appended by this call before it stopped. Those bytes stay in the
        sink.
        """
        n = 0
        for value in values:
            try:
                payload = self._encode(value)
            except EncodeError as e:
                e.written = n
                logger.error(f"encode failed for record {self._records + 1}: {e}")
                raise
            except (TypeError, ValueError, RecursionError) as e:
                logger.error(f"encode failed for record {self._records + 1}: {e}")
                raise EncodeError(str(e), n) from e
            if isinstance(payload, str):
                payload = payload.encode('utf-8')

            if self._records > 0:
                n += self._append(self.separator, n)
            n += self._append(payload, n)
            self._records += 1
        return n

    def _append(self, data: bytes, written: int) -> int:
        try:
            count = self._sink.write(data)
        except Exception as e:
            logger.error(f"sink write failed after {self._written} bytes: {e}")
            raise SinkError(f"jsonl: write failed: {e}", written) from e
        if count is None:
            count = len(data)
        elif count < len(data):
            # the accepted part still reached the sink
            self._written += count
            logger.error(f"short write: {count} of {len(data)} bytes")
            raise SinkError(f"jsonl: short write ({count} of {len(data)} bytes)", written + count)
        self._written += count
        return count
