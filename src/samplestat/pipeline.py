"""Driving loop: read every sample, skip bad rows, stop on I/O failure.

Row-level ``ParsingError``s are logged, counted and dropped; the loop moves
on to the next line. A ``ReadError`` stops the loop but keeps whatever was
accumulated so far. End of input stops it cleanly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .aggregators.statistics import PersonStatistics, StatisticsSummary, summarize, update
from .config import Settings
from .errors import CloseError, ParsingError, ReadError
from .parsers.sample_reader import CsvSampleReader
from .records import Person

logger = logging.getLogger(__name__)

RecordCallback = Callable[[Person], None]
ErrorCallback = Callable[[int, ParsingError], None]


@dataclass
class RowError:
    line_number: int
    error: ParsingError

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.error}"


@dataclass
class ProcessingReport:
    """Outcome of one processing run."""

    stats: PersonStatistics = field(default_factory=PersonStatistics)
    accepted: int = 0
    errors: list[RowError] = field(default_factory=list)
    fatal: ReadError | None = None
    close_error: CloseError | None = None
    header: str | None = None

    @property
    def discarded(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return self.fatal is None

    @property
    def summary(self) -> StatisticsSummary | None:
        return summarize(self.stats)


def process_samples(
    reader: CsvSampleReader,
    stats: PersonStatistics | None = None,
    on_record: RecordCallback | None = None,
    on_error: ErrorCallback | None = None,
) -> ProcessingReport:
    """Read samples from ``reader`` until end of input or a read failure."""
    report = ProcessingReport(stats=stats if stats is not None else PersonStatistics())
    logger.info("started processing")

    while True:
        try:
            person = reader.read_sample()
        except ParsingError as exc:
            logger.error("parsing sample on line %d: %s", reader.line_number, exc)
            report.errors.append(RowError(reader.line_number, exc))
            if on_error is not None:
                on_error(reader.line_number, exc)
            continue
        except ReadError as exc:
            logger.critical("reading sample after line %d: %s", reader.line_number, exc)
            report.fatal = exc
            break

        if person is None:
            logger.info("no more samples to read")
            break

        logger.debug("sample read: %s", person)
        update(report.stats, person)
        report.accepted += 1
        if on_record is not None:
            on_record(person)

    logger.info(
        "finished processing: %d accepted, %d discarded", report.accepted, report.discarded
    )
    return report


def run(
    path: str | Path,
    settings: Settings | None = None,
    on_record: RecordCallback | None = None,
    on_error: ErrorCallback | None = None,
) -> ProcessingReport:
    """Open ``path``, skip its header and process every sample.

    Raises:
        OpenError: the file cannot be opened. Nothing is processed.
        EmptyInputError: the file has no header line.
        ReadError: the header could not be read.

    A read failure after the header does not raise; it is reported in
    ``ProcessingReport.fatal``. A failure to close the file is logged and
    stored in ``ProcessingReport.close_error``.
    """
    reader = CsvSampleReader.open(path, settings)
    report: ProcessingReport | None = None
    try:
        header = reader.read_header()
        report = process_samples(reader, on_record=on_record, on_error=on_error)
        report.header = header
    finally:
        try:
            reader.close()
        except CloseError as exc:
            logger.error("failed to close reader: %s", exc)
            if report is not None:
                report.close_error = exc
    return report
