"""Exception hierarchy for the extraction pipeline."""

from __future__ import annotations

from typing import Optional


class MindfulExportError(Exception):
    """Base class for every fatal pipeline failure."""


class ParseError(MindfulExportError):
    """The source document is not well-formed XML."""

    def __init__(
        self, message: str, line: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class InputReadError(MindfulExportError):
    """The source document could not be opened or read."""


class FormatError(MindfulExportError, ValueError):
    """A timestamp does not match ``YYYY-MM-DD HH:MM:SS +HHMM``."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Unrecognized timestamp {value!r}")
        self.value = value


class RangeError(MindfulExportError, ArithmeticError):
    """A session duration does not fit the exported integer width."""


class OutputError(MindfulExportError):
    """Writing the tabular output failed."""


class OutputWriteError(OutputError):
    """The destination could not be opened or written."""


class SerializationError(OutputError):
    """A row could not be encoded."""
