"""Exception hierarchy for sample reading.

Fatal errors end a processing run. ``ParsingError`` and its subclasses are
row level: the driving loop logs them, drops the row and carries on.
End of input is not an error and is signalled by returning ``None``.
"""
from __future__ import annotations


class SampleError(Exception):
    """Base error for this package."""


class FatalError(SampleError):
    """An error that aborts the current processing run."""


class OpenError(FatalError):
    """The sample file could not be opened."""


class ReadError(FatalError):
    """Reading from an open sample file failed."""


class WriteError(FatalError):
    """Writing to an open file failed."""


class EmptyInputError(FatalError):
    """The sample file has no header line."""


class CloseError(SampleError):
    """Closing the sample file failed. Does not affect completed work."""


class ParsingError(SampleError):
    """A single line could not be turned into a record."""


class MissingFieldError(ParsingError):
    def __init__(self, field: str) -> None:
        super().__init__(f"missing {field}")
        self.field = field


class MalformedLineError(ParsingError):
    """Line exceeds the buffer capacity and has no terminator."""


class NameTooLongError(ParsingError):
    def __init__(self, length: int, capacity: int) -> None:
        super().__init__(
            f"name of {length} characters does not fit capacity {capacity}"
        )
        self.length = length
        self.capacity = capacity


class DecodeError(ParsingError):
    """A field slice could not be decoded into a typed value."""


class EmptyFieldError(DecodeError):
    def __init__(self) -> None:
        super().__init__("empty field")


class InvalidDigitError(DecodeError):
    def __init__(self, text: str, position: int) -> None:
        super().__init__(f"invalid digit {text[position]!r} at position {position} in {text!r}")
        self.text = text
        self.position = position


class IntegerOverflowError(DecodeError):
    def __init__(self, text: str, maximum: int) -> None:
        super().__init__(f"{text!r} exceeds maximum {maximum}")
        self.text = text
        self.maximum = maximum


class FieldDecodeError(ParsingError):
    """Decoding a named field failed; ``reason`` holds the decoder error."""

    def __init__(self, field: str, raw: str, reason: DecodeError) -> None:
        super().__init__(f"parsing {field} from {raw!r}: {reason}")
        self.field = field
        self.raw = raw
        self.reason = reason
