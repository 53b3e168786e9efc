"""Streaming field splitter for one delimited line.

Fields come back as ``FieldSlice`` views into the line; no substring is
built until a decoder asks for ``FieldSlice.text``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from ..errors import MalformedLineError
from ..io.source import Line

_TERMINATOR = "\n"


@dataclass(frozen=True)
class FieldSlice:
    """Non-owning ``[offset, offset + length)`` view into a line."""

    line: str
    offset: int
    length: int

    def __post_init__(self) -> None:
        if self.offset < 0 or self.length < 0 or self.offset + self.length > len(self.line):
            raise ValueError(
                f"slice [{self.offset}, {self.offset + self.length}) "
                f"out of bounds for line of length {len(self.line)}"
            )

    @property
    def text(self) -> str:
        return self.line[self.offset:self.offset + self.length]

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, index: int) -> str:
        if not 0 <= index < self.length:
            raise IndexError(index)
        return self.line[self.offset + index]

    def __iter__(self) -> Iterator[str]:
        for i in range(self.offset, self.offset + self.length):
            yield self.line[i]

    def __str__(self) -> str:
        return self.text


class CsvLineParser:
    """Split a single line on ``sep`` one field at a time.

    The cursor (``first``) only moves forward. A separator at the cursor
    yields an empty field. When no separator or terminator is left, the
    line end closes the last field, unless the line was cut short by the
    line source, in which case ``MalformedLineError`` is raised.

    Usage::

        parser = CsvLineParser("Alice,30,170\\n", ",")
        name = parser.get_value()      # FieldSlice('Alice')
        rest = [f.text for f in parser.fields()]   # ['30', '170']
    """

    def __init__(self, line: str | Line, sep: str = ",") -> None:
        if len(sep) != 1 or sep == _TERMINATOR:
            raise ValueError(f"separator must be one character other than newline, got {sep!r}")
        if isinstance(line, Line):
            self._line = line.text
            self._truncated = line.truncated
        else:
            self._line = line
            self._truncated = False
        self._sep = sep
        self.first = 0

    @property
    def line(self) -> str:
        return self._line

    @property
    def sep(self) -> str:
        return self._sep

    @property
    def exhausted(self) -> bool:
        return self.first >= len(self._line)

    def get_value(self) -> FieldSlice | None:
        """Return the next field, or ``None`` once the line is consumed.

        Raises:
            MalformedLineError: the line overflowed its buffer and the
                remaining text has no separator or terminator.
        """
        size = len(self._line)
        if self.first >= size:
            if self._truncated:
                raise MalformedLineError(
                    f"truncated line of length {size} ends after a separator"
                )
            return None
        for last in range(self.first, size):
            ch = self._line[last]
            if ch == self._sep or ch == _TERMINATOR:
                value = FieldSlice(self._line, self.first, last - self.first)
                self.first = last + 1
                return value
        if self._truncated:
            raise MalformedLineError(
                f"no separator or terminator found after position {self.first} "
                f"in truncated line of length {size}"
            )
        value = FieldSlice(self._line, self.first, size - self.first)
        self.first = size
        return value

    def fields(self) -> Iterator[FieldSlice]:
        """Lazily yield the remaining fields."""
        while (value := self.get_value()) is not None:
            yield value

    def __repr__(self) -> str:
        return f"CsvLineParser(first={self.first}, sep={self._sep!r}, size={len(self._line)})"
