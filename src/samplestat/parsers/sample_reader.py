"""Read ``name,age,height`` samples one line at a time."""
from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import Iterator

from ..config import Settings
from ..errors import EmptyInputError
from ..io.source import Line, LineSource
from ..records import Person
from .csv_line import CsvLineParser

logger = logging.getLogger(__name__)


class CsvSampleReader:
    """Turn lines from a ``LineSource`` into ``Person`` records.

    ``read_sample`` returns ``None`` at end of input. It raises
    ``ReadError`` when the source fails and a ``ParsingError`` subclass
    when a single line is bad; the latter leaves the reader positioned on
    the next line.

    Usage::

        with CsvSampleReader.open("samples.csv") as reader:
            reader.read_header()
            while (person := reader.read_sample()) is not None:
                ...
    """

    def __init__(self, source: LineSource, settings: Settings | None = None) -> None:
        self._source = source
        self._settings = settings or Settings()
        self.line_number = 0

    @classmethod
    def open(cls, path: str | Path, settings: Settings | None = None) -> "CsvSampleReader":
        """Open ``path`` for reading. Raises ``OpenError``."""
        return cls(LineSource.open(path, "r"), settings)

    @property
    def source(self) -> LineSource:
        return self._source

    @property
    def settings(self) -> Settings:
        return self._settings

    def _next_line(self) -> Line | None:
        line = self._source.read_line(self._settings.line_capacity)
        if line is not None:
            self.line_number += 1
        return line

    def read_header(self) -> str:
        """Read and discard the header line; return its text.

        Raises:
            EmptyInputError: the input has no lines at all.
            ReadError: the read failed.
        """
        line = self._next_line()
        if line is None:
            logger.error("empty sample file provided")
            raise EmptyInputError(f"{self._source.path} has no header line")
        logger.info("csv header read")
        return line.text.rstrip("\n")

    def read_sample(self) -> Person | None:
        """Read one line and parse it, or return ``None`` at end of input."""
        line = self._next_line()
        if line is None:
            return None
        logger.debug("line %d read: %r", self.line_number, line.text)

        s = self._settings
        parser = CsvLineParser(line, s.separator)
        return Person.from_fields(
            parser,
            name_capacity=s.name_capacity,
            name_policy=s.name_policy,
            integer_max=s.integer_max,
            overflow=s.overflow,
        )

    def __iter__(self) -> Iterator[Person]:
        """Yield samples until end of input; every error propagates."""
        while (person := self.read_sample()) is not None:
            yield person

    def close(self) -> None:
        self._source.close()

    def __enter__(self) -> "CsvSampleReader":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
