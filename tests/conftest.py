"""Shared fixtures: temp directories and data files in the preprocessed layout."""

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest
from datafiles import FunctionSpec, build_datafile

from grindreader.core.datafile.layout import FILE_FORMAT_VERSION


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def write_datafile(temp_dir: Path) -> Callable[..., Path]:
    """Return a factory that writes a data file and returns its path."""

    def _write(
        functions: list[FunctionSpec],
        headers: list[str] | None = None,
        version: int = FILE_FORMAT_VERSION,
        name: str = "profile.dat",
    ) -> Path:
        path = temp_dir / name
        path.write_bytes(build_datafile(functions, headers or [], version))
        return path

    return _write


@pytest.fixture
def call_graph_file(write_datafile: Callable[..., Path]) -> Path:
    """A small profile: main -> {load, render}, render -> load."""
    functions = [
        FunctionSpec(
            name="{main}",
            file="/srv/app/index.php",
            line=0,
            self_cost=1_000,
            inclusive_cost=10_000,
            invocations=1,
            sub_calls=[(1, 12, 1, 3_000), (2, 14, 1, 6_000)],
        ),
        FunctionSpec(
            name="load",
            file="/srv/app/lib.php",
            line=5,
            self_cost=4_000,
            inclusive_cost=4_000,
            invocations=2,
            called_from=[(0, 12, 1, 3_000), (2, 30, 1, 1_000)],
        ),
        FunctionSpec(
            name="render",
            file="/srv/app/view.php",
            line=20,
            self_cost=5_000,
            inclusive_cost=6_000,
            invocations=1,
            called_from=[(0, 14, 1, 6_000)],
            sub_calls=[(1, 30, 1, 1_000)],
        ),
    ]
    headers = [
        "version: 1",
        "creator: xdebug 3.2.0 (PHP 8.2.0)",
        "cmd: /srv/app/index.php",
        "part: 1",
        "positions: line",
        "events: Time_(µs) Memory_(bytes)",
        "summary: 10000 2097152",
    ]
    return write_datafile(functions, headers)
