#!/usr/bin/env python3
"""Incremental JSON Lines scanner with blank-line and comment policies."""
import enum, logging
from typing import BinaryIO, Iterable, Iterator, Optional, Tuple, Union

from jsonl_worker.codec import Decoder
from jsonl_worker.errors import FramingError, JSONLError, ScannerError, SourceError
from jsonl_worker.record import Record

logger = logging.getLogger(__name__)

DEFAULT_TERMINATOR = b'\n'
DEFAULT_COMMENT_PREFIXES = ('//', '#')
DEFAULT_BUFFER_SIZE = 64 * 1024

# Unicode White_Space: ASCII controls \t..\r, space, NEL, NBSP and the Z* spaces.
# Unlike str.isspace, the separators U+001C..U+001F are not included.
WHITESPACE = (
    '\t\n\v\f\r \x85\xa0\u1680'
    '\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a'
    '\u2028\u2029\u202f\u205f\u3000'
)


class ScannerState(enum.Enum):
    READY = 'ready'
    EXHAUSTED = 'exhausted'
    FAILED = 'failed'


def _terminator_byte(terminator: Union[bytes, str, int]) -> bytes:
    if isinstance(terminator, int):
        terminator = bytes([terminator])
    elif isinstance(terminator, str):
        terminator = terminator.encode('utf-8')
    if len(terminator) != 1:
        raise ValueError(f"terminator must be a single byte, got {terminator!r}")
    return terminator


def trim_trailing_space(chunk: bytes) -> bytes:
    """Strip trailing Unicode whitespace, keeping any bytes that are not valid UTF-8."""
    text = chunk.decode('utf-8', errors='surrogateescape').rstrip(WHITESPACE)
    return text.encode('utf-8', errors='surrogateescape')


class Scanner:
    """Read JSON lines from a binary source, one record at a time.

    Drive it with ``advance()`` and read the record with ``current()``::

        scanner = Scanner(f, skip_blank=True)
        while scanner.advance():
            item = scanner.current().decode()
        if scanner.last_error():
            ...

    Failures are latched: once ``advance()`` returns False because of an
    error, every later call returns False and ``current()`` raises that same
    error. Reaching the end of the stream is not an error.
    """

    def __init__(self, source: BinaryIO, terminator: Union[bytes, str, int] = DEFAULT_TERMINATOR,
                 skip_blank: bool = False, comment_prefixes: Iterable[str] = (),
                 buffer_size: int = DEFAULT_BUFFER_SIZE, decoder: Optional[Decoder] = None):
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.terminator = _terminator_byte(terminator)
        self.decoder = decoder
        self.skip_blank = skip_blank
        self.comment_prefixes: Tuple[str, ...] = tuple(
            p.decode('utf-8') if isinstance(p, bytes) else p for p in comment_prefixes)
        self.buffer_size = buffer_size
        self._source = source
        self._buffer = bytearray()
        self._eof = False
        self._position = 0
        self._record: Optional[Record] = None
        self._state = ScannerState.READY
        self._error: Optional[JSONLError] = None

    @property
    def position(self) -> int:
        """1-based number of the last line consumed, comments and blanks included."""
        return self._position

    @property
    def state(self) -> ScannerState:
        return self._state

    def last_error(self) -> Optional[JSONLError]:
        """The latched failure, or None while readable or once cleanly exhausted."""
        if self._state is ScannerState.FAILED:
            return self._error
        return None

    def has_current(self) -> bool:
        return self._state is not ScannerState.FAILED and self._record is not None

    def current(self) -> Record:
        if self._state is ScannerState.FAILED:
            raise self._error
        if self._record is None:
            raise ScannerError("jsonl: advance must be called first")
        return self._record

    def advance(self) -> bool:
        """Move to the next data record; False on end of stream or failure."""
        if self._state is not ScannerState.READY:
            return False
        while True:
            try:
                chunk = self._read_chunk()
            except Exception as e:
                logger.error(f"source read failed after line {self._position}: {e}")
                return self._fail(SourceError(self._position, e))
            if chunk is None:
                self._state = ScannerState.EXHAUSTED
                return False
            self._position += 1

            raw = trim_trailing_space(chunk)
            if not raw:
                if self.skip_blank:
                    continue
                logger.warning(f"blank line #{self._position}")
                return self._fail(FramingError(self._position))
            if self.comment_prefixes and self._is_comment(raw):
                logger.debug(f"skipping comment line #{self._position}")
                continue

            self._record = Record(raw, decoder=self.decoder)
            return True

    def __iter__(self) -> Iterator[Record]:
        """Yield records until the stream ends or fails; check last_error() afterwards."""
        while self.advance():
            yield self.current()

    def _is_comment(self, raw: bytes) -> bool:
        text = raw.decode('utf-8', errors='replace')
        return text.startswith(self.comment_prefixes)

    def _fail(self, error: JSONLError) -> bool:
        self._state = ScannerState.FAILED
        self._error = error
        return False

    def _read_chunk(self) -> Optional[bytes]:
        """Return the bytes before the next terminator, the unterminated tail, or None at end of stream."""
        start = 0
        while True:
            idx = self._buffer.find(self.terminator, start)
            if idx >= 0:
                chunk = bytes(self._buffer[:idx])
                del self._buffer[:idx + 1]
                return chunk
            if self._eof:
                if not self._buffer:
                    return None
                chunk = bytes(self._buffer)
                self._buffer.clear()
                return chunk
            start = len(self._buffer)
            data = self._source.read(self.buffer_size)
            if isinstance(data, str):
                data = data.encode('utf-8')
            elif data is None:
                # non-blocking source with nothing ready
                raise BlockingIOError("source returned no data")
            elif not isinstance(data, (bytes, bytearray, memoryview)):
                raise TypeError(f"source.read returned {type(data).__name__}, expected bytes")
            if not data:
                self._eof = True
            else:
                self._buffer += data
