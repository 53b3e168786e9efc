"""Line source: fixed-capacity line reads over a text file handle.

Reads behave like ``fgets`` with a ``capacity``-sized buffer: at most
``capacity - 1`` characters come back per call. A physical line that does
not fit is returned with ``truncated=True`` and the rest of it is skipped,
so the next read starts on the following line.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Literal, TextIO

from ..errors import CloseError, OpenError, ReadError, WriteError

logger = logging.getLogger(__name__)

Mode = Literal["r", "w"]


@dataclass(frozen=True)
class Line:
    """One line as read from the source, terminator included if it fit."""

    text: str
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text


class LineSource:
    """Own a single file handle and hand out one line per ``read_line`` call.

    Usage::

        with LineSource.open("samples.csv") as source:
            while (line := source.read_line(256)) is not None:
                ...
    """

    def __init__(self, handle: TextIO, path: str = "<stream>") -> None:
        self._handle = handle
        self._path = path
        self._closed = False

    @classmethod
    def open(cls, path: str | Path, mode: Mode = "r") -> "LineSource":
        if mode not in ("r", "w"):
            raise ValueError(f"unsupported mode {mode!r}")
        try:
            handle = open(path, mode, encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.error("opening file %s: %s", path, exc.strerror or exc)
            raise OpenError(f"cannot open {path}: {exc.strerror or exc}") from exc
        logger.debug("opened %s (mode=%s)", path, mode)
        return cls(handle, str(path))

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def read_line(self, capacity: int) -> Line | None:
        """Read the next line, or return ``None`` at end of stream.

        Raises:
            ReadError: if the underlying read fails.
        """
        if capacity < 2:
            raise ValueError("capacity must leave room for at least one character")
        try:
            text = self._handle.readline(capacity - 1)
            if not text:
                logger.info("reached end of file")
                return None
            truncated = False
            if not text.endswith("\n") and len(text) == capacity - 1:
                truncated = self._skip_rest(capacity)
        except (OSError, ValueError) as exc:
            logger.error("reading line from %s: %s", self._path, exc)
            raise ReadError(f"reading {self._path}: {exc}") from exc
        return Line(text, truncated)

    def _skip_rest(self, capacity: int) -> bool:
        """Consume the remainder of an over-long line. True if any text was lost."""
        lost = False
        while True:
            chunk = self._handle.readline(capacity)
            if not chunk:
                return lost
            if chunk.endswith("\n"):
                return lost or len(chunk) > 1
            lost = True

    def write_line(self, text: str) -> None:
        try:
            self._handle.write(text if text.endswith("\n") else text + "\n")
        except (OSError, ValueError) as exc:
            raise WriteError(f"writing {self._path}: {exc}") from exc

    def close(self) -> None:
        """Release the handle. Safe to call more than once.

        Raises:
            CloseError: if the underlying close fails.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._handle.close()
        except OSError as exc:
            logger.error("closing file %s: %s", self._path, exc)
            raise CloseError(f"closing {self._path}: {exc}") from exc

    def __enter__(self) -> "LineSource":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"LineSource(path={self._path!r}, closed={self._closed})"
