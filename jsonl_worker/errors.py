#!/usr/bin/env python3
"""Exceptions raised by the JSON Lines scanner, writer and codec."""
from typing import Optional


class JSONLError(Exception):
    """Base class for every jsonl_worker failure."""


class ScannerError(JSONLError):
    """The scanner cannot produce a record."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class FramingError(ScannerError):
    """A record violates the line-structure policy (e.g. an unexpected blank line)."""

    def __init__(self, position: int):
        super().__init__(f"jsonl: invalid line (#{position})", position)


class SourceError(ScannerError):
    """Reading from the byte source failed."""

    def __init__(self, position: int, cause: BaseException):
        super().__init__(f"jsonl: read failed after line {position}: {cause}", position)
        self.__cause__ = cause


class DecodeError(JSONLError, ValueError):
    """A well-framed record does not hold the expected JSON value."""


class EncodeError(JSONLError, ValueError):
    """A value could not be serialized; ``written`` counts bytes appended before the failure."""

    def __init__(self, message: str, written: int = 0):
        super().__init__(message)
        self.written = written


class SinkError(JSONLError, OSError):
    """Appending to the byte sink failed; ``written`` counts bytes appended before the failure."""

    def __init__(self, message: str, written: int = 0):
        super().__init__(message)
        self.written = written


class ReadError(JSONLError):
    """Raised by the bulk readers, tagged with the 1-based line of the failure."""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position
