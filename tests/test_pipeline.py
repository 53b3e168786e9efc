"""End-to-end tests for the driving loop."""
from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from samplestat.config import Settings
from samplestat.errors import (
    CloseError,
    EmptyInputError,
    FieldDecodeError,
    InvalidDigitError,
    OpenError,
    ReadError,
)
from samplestat.io.source import LineSource
from samplestat.parsers.sample_reader import CsvSampleReader
from samplestat.pipeline import process_samples, run
from samplestat.records import Person


class TestScenarios:
    def test_two_valid_records(self, tmp_sample_file) -> None:
        path = tmp_sample_file("name,age,height\nAlice,30,170\nBob,25,180\n")
        seen: list[Person] = []
        report = run(path, on_record=seen.append)

        assert seen == [Person("Alice", 30, 170), Person("Bob", 25, 180)]
        assert report.ok
        assert report.accepted == 2
        assert report.discarded == 0
        s = report.summary
        assert s is not None
        assert (s.age.minimum, s.age.maximum, s.age.mean) == (25, 30, 27.5)
        assert (s.height.minimum, s.height.maximum, s.height.mean) == (170, 180, 175.0)

    def test_header_only(self, tmp_sample_file) -> None:
        path = tmp_sample_file("name,age,height\n")
        report = run(path)
        assert report.ok
        assert report.accepted == 0
        assert report.stats.count == 0
        assert report.summary is None
        assert report.header == "name,age,height"

    def test_malformed_age_is_skipped(self, tmp_sample_file) -> None:
        path = tmp_sample_file("name,age,height\nCarl,oops,190\nDan,40,160\n")
        errors: list[tuple[int, Exception]] = []
        report = run(path, on_error=lambda n, exc: errors.append((n, exc)))

        assert report.accepted == 1
        assert report.discarded == 1
        assert report.errors[0].line_number == 2
        assert isinstance(report.errors[0].error, FieldDecodeError)
        assert isinstance(report.errors[0].error.reason, InvalidDigitError)
        assert errors[0][0] == 2
        s = report.summary
        assert s is not None
        assert (s.age.minimum, s.age.maximum, s.age.mean) == (40, 40, 40.0)
        assert (s.height.minimum, s.height.maximum, s.height.mean) == (160, 160, 160.0)

    def test_nonexistent_path(self, tmp_path: Path) -> None:
        seen: list[Person] = []
        with pytest.raises(OpenError):
            run(tmp_path / "nope.txt", on_record=seen.append)
        assert seen == []

    def test_empty_file(self, tmp_sample_file) -> None:
        with pytest.raises(EmptyInputError):
            run(tmp_sample_file(""))

    def test_every_kind_of_bad_row_is_survived(self, tmp_sample_file) -> None:
        path = tmp_sample_file(
            "name,age,height\n"
            "\n"
            "OnlyName\n"
            "NoHeight,1\n"
            "EmptyAge,,3\n"
            "Neg,-1,3\n"
            "Huge,1,99999999999\n"
            "Good,20,150\n"
        )
        report = run(path)
        assert report.accepted == 1
        assert report.discarded == 6
        assert [e.line_number for e in report.errors] == [2, 3, 4, 5, 6, 7]

    def test_saturate_overflow_keeps_row(self, tmp_sample_file) -> None:
        path = tmp_sample_file("h\nHuge,1,99999999999\n")
        report = run(path, Settings(overflow="saturate", integer_max=300))
        assert report.accepted == 1
        assert report.summary.height.maximum == 300

    def test_reject_long_names(self, tmp_sample_file) -> None:
        path = tmp_sample_file("h\nBartholomew,1,2\nAl,3,4\n")
        report = run(path, Settings(name_capacity=5, name_policy="reject"))
        assert report.accepted == 1
        assert report.discarded == 1

    def test_source_closed_after_run(self, tmp_sample_file) -> None:
        path = tmp_sample_file("h\nA,1,2\n")
        with patch.object(LineSource, "close", autospec=True, side_effect=LineSource.close) as close:
            run(path)
        assert close.call_count == 1


class TestFatalErrors:
    def test_read_error_stops_loop_but_keeps_stats(self, tmp_sample_file) -> None:
        path = tmp_sample_file("h\nA,1,2\nB,3,4\nC,5,6\n")
        reader = CsvSampleReader.open(path)
        reader.read_header()
        original = reader.source.read_line
        calls = {"n": 0}

        def flaky(capacity: int):
            calls["n"] += 1
            if calls["n"] == 2:
                raise ReadError("device gone")
            return original(capacity)

        with reader, patch.object(reader.source, "read_line", side_effect=flaky):
            report = process_samples(reader)

        assert not report.ok
        assert isinstance(report.fatal, ReadError)
        assert report.accepted == 1
        assert report.summary is not None
        assert report.summary.count == 1

    def test_header_read_error_propagates_and_closes(self, tmp_sample_file) -> None:
        path = tmp_sample_file("h\nA,1,2\n")
        with patch.object(LineSource, "read_line", side_effect=ReadError("boom")), \
                patch.object(LineSource, "close", autospec=True, side_effect=LineSource.close) as close:
            with pytest.raises(ReadError):
                run(path)
        assert close.call_count == 1

    def test_close_error_does_not_change_outcome(self, tmp_sample_file) -> None:
        path = tmp_sample_file("h\nA,1,2\n")
        with patch.object(LineSource, "close", side_effect=CloseError("EIO")):
            report = run(path)
        assert report.ok
        assert report.accepted == 1
        assert isinstance(report.close_error, CloseError)


class TestProcessSamples:
    def test_uses_given_accumulator(self, tmp_sample_file) -> None:
        from samplestat.aggregators.statistics import PersonStatistics

        stats = PersonStatistics()
        stats.add(Person("Prior", 99, 99))
        path = tmp_sample_file("h\nA,1,2\n")
        with CsvSampleReader.open(path) as reader:
            reader.read_header()
            report = process_samples(reader, stats)
        assert report.stats is stats
        assert stats.count == 2
        assert report.accepted == 1

    def test_errors_are_logged(self, tmp_sample_file, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_sample_file("h\nCarl,oops,190\n")
        with caplog.at_level("ERROR", logger="samplestat.pipeline"):
            run(path)
        assert "line 2" in caplog.text
