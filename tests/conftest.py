"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path
from typing import Callable, Dict

import pytest


@pytest.fixture
def in_dir(tmp_path: Path) -> Path:
    """Empty input directory."""
    d = tmp_path / "in"
    d.mkdir()
    return d


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Empty destination directory."""
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def write_corpus(in_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{name: content}`` into the input directory."""

    def _write(files: Dict[str, str]) -> Path:
        for name, content in files.items():
            (in_dir / name).write_text(content, encoding="utf-8")
        return in_dir

    return _write


@pytest.fixture
def namespaced_xml() -> str:
    """Document with one element in the urn:test namespace."""
    return '<r xmlns:p="urn:test"><p:x/></r>'
