"""Pytest configuration and shared fixtures for dirtally tests."""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Keep tests away from the real cwd, home config and DIRTALLY_* env vars."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in (
        "DIRTALLY_OUTPUT_FORMAT",
        "DIRTALLY_INDENT",
        "DIRTALLY_QUIET",
        "DIRTALLY_FOLLOW_SYMLINKS",
        "DIRTALLY_SORT_ENTRIES",
        "DIRTALLY_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


def _materialize(base: Path, layout: dict) -> None:
    for name, value in layout.items():
        target = base / name
        if isinstance(value, dict):
            target.mkdir()
            _materialize(target, value)
        elif isinstance(value, int):
            target.write_bytes(b"x" * value)
        else:
            target.write_text(value)


@pytest.fixture
def make_tree(tmp_path):
    """Build a directory tree from a nested dict and return its root.

    Dict values are subdirectories, ints are files of that many bytes and
    strings are file contents:

        make_tree({"A": {"file.txt": 10, "B": {}}})
    """
    def _make(layout: dict, name: str = "root") -> Path:
        root = tmp_path / name
        root.mkdir()
        _materialize(root, layout)
        return root

    return _make
