#!/usr/bin/env python3
"""Whole-stream helpers built on Scanner and Writer."""
import logging
from typing import Any, BinaryIO, Callable, Iterable, Iterator, List, Optional

from jsonl_worker.codec import Decoder, Encoder
from jsonl_worker.errors import DecodeError, ReadError
from jsonl_worker.scanner import DEFAULT_COMMENT_PREFIXES, Scanner
from jsonl_worker.writer import DEFAULT_SEPARATOR, Writer

logger = logging.getLogger(__name__)


def iter_values(source: BinaryIO, into: Optional[Callable[..., Any]] = None,
                decoder: Optional[Decoder] = None, skip_blank: bool = True,
                comment_prefixes: Iterable[str] = DEFAULT_COMMENT_PREFIXES,
                **scanner_options) -> Iterator[Any]:
    """Yield decoded values without loading the whole stream.

    Raises ReadError tagged with the offending line on the first framing,
    source or decode failure.
    """
    s = Scanner(source, skip_blank=skip_blank, comment_prefixes=comment_prefixes, **scanner_options)
    while s.advance():
        try:
            yield s.current().decode(into, decoder)
        except DecodeError as e:
            logger.error(f"scanning error (line: {s.position}): {e}")
            raise ReadError(f"jsonl: scanning error (line: {s.position}): {e}", s.position) from e
    err = s.last_error()
    if err is not None:
        logger.error(f"reading error (line: {s.position}): {err}")
        raise ReadError(f"jsonl: reading error (line: {s.position}): {err}", s.position) from err


def read_all(source: BinaryIO, into: Optional[Callable[..., Any]] = None,
             decoder: Optional[Decoder] = None) -> List[Any]:
    """Return every value in ``source``, skipping blank lines and ``//`` / ``#`` comments."""
    return list(iter_values(source, into, decoder))


def write_all(sink: BinaryIO, values: Iterable[Any], separator=DEFAULT_SEPARATOR,
              encoder: Optional[Encoder] = None) -> int:
    """Write every value as one JSON line and return the number of bytes written."""
    w = Writer(sink, separator=separator, encoder=encoder)
    for value in values:
        w.write(value)
    return w.written_bytes()
