"""Read and write JSON Lines streams."""
from jsonl_worker.codec import decode_json, encode_json
from jsonl_worker.errors import (
    DecodeError, EncodeError, FramingError, JSONLError, ReadError,
    ScannerError, SinkError, SourceError,
)
from jsonl_worker.reader import iter_values, read_all, write_all
from jsonl_worker.record import Record
from jsonl_worker.scanner import (
    DEFAULT_BUFFER_SIZE, DEFAULT_COMMENT_PREFIXES, DEFAULT_TERMINATOR,
    Scanner, ScannerState,
)
from jsonl_worker.writer import DEFAULT_SEPARATOR, Writer

__all__ = [
    'DEFAULT_BUFFER_SIZE', 'DEFAULT_COMMENT_PREFIXES', 'DEFAULT_SEPARATOR',
    'DEFAULT_TERMINATOR', 'DecodeError', 'EncodeError', 'FramingError',
    'JSONLError', 'ReadError', 'Record', 'Scanner', 'ScannerError',
    'ScannerState', 'SinkError', 'SourceError', 'Writer', 'decode_json',
    'encode_json', 'iter_values', 'read_all', 'write_all',
]
