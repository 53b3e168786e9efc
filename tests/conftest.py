"""Shared pytest fixtures for samplestat tests."""
from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def tmp_sample_file(tmp_path: Path):
    """Return a factory that writes raw text to a temporary sample file."""

    def _make(text: str, name: str = "samples.txt") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _make
