"""Tests for summary renderers."""

import json
from pathlib import Path

import pytest

from dirtally.render import (
    ASCIIRenderer,
    JSONRenderer,
    OutputFormat,
    TextRenderer,
    format_summary_line,
    get_renderer,
)
from dirtally.walk.models import SummaryRecord, WalkFailure

ROOT = Path("/data")


def _record(name, level=0, total_bytes=0, file_count=0, subfolder_count=0,
            subtree_directories=1, complete=True):
    return SummaryRecord(
        path=ROOT / name,
        name=name,
        level=level,
        total_bytes=total_bytes,
        file_count=file_count,
        subfolder_count=subfolder_count,
        subtree_directories=subtree_directories,
        complete=complete,
    )


@pytest.fixture
def groups():
    return [
        [
            _record("src", 0, 2048, 3, 1, subtree_directories=2),
            _record("lib", 1, 1024, 2, 0, subtree_directories=2, complete=False),
        ],
        [_record("docs", 0, 10, 1, 0)],
    ]


class TestFormatSummaryLine:
    """Tests for the summary line format."""

    def test_bytes_only(self):
        assert format_summary_line(_record("A", total_bytes=10, file_count=1)) == (
            "[A] - 10 bytes [end]"
        )

    def test_all_clauses(self):
        record = _record("A", 0, 1234567, 1200, 3, subtree_directories=4)
        assert format_summary_line(record) == (
            "[A] - 1,234,567 bytes, 1,200 files, 3 subfolders [end]"
        )

    def test_indent_repeats_per_level(self):
        record = _record("C", level=2, total_bytes=5, file_count=1, subtree_directories=3)
        assert format_summary_line(record) == "\t\t[C] - 5 bytes, 1 files [end]"

    def test_custom_indent(self):
        record = _record("B", level=1, subtree_directories=2)
        assert format_summary_line(record, indent="  ") == "  [B] - 0 bytes, 0 files [end]"


class TestTextRenderer:
    """Tests for TextRenderer."""

    def test_render_group(self, groups):
        lines = TextRenderer().render_group(groups[0])
        assert lines == [
            "[src] - 2,048 bytes, 3 files, 1 subfolders [end]",
            "\t[lib] - 1,024 bytes, 2 files [end]",
        ]

    def test_render_group_custom_indent(self, groups):
        renderer = TextRenderer(indent="--")
        assert renderer.render_group(groups[0])[1] == "--[lib] - 1,024 bytes, 2 files [end]"
        assert renderer.render_group(groups[1]) == ["[docs] - 10 bytes [end]"]


class TestJSONRenderer:
    """Tests for JSONRenderer."""

    def test_render_structure(self, groups):
        failures = [WalkFailure(path=ROOT / "src" / "lib" / "x", message="Permission denied")]
        data = json.loads(JSONRenderer().render(groups, root=ROOT, failures=failures))

        assert data["root"] == str(ROOT)
        assert len(data["subtrees"]) == 2
        assert data["subtrees"][0][0]["name"] == "src"
        assert data["subtrees"][0][0]["totalBytes"] == 2048
        assert data["subtrees"][0][1]["complete"] is False
        assert data["failures"][0]["message"] == "Permission denied"

    def test_render_without_failures(self):
        data = json.loads(JSONRenderer().render([], root=ROOT))
        assert data["subtrees"] == []
        assert data["failures"] == []


class TestASCIIRenderer:
    """Tests for ASCIIRenderer."""

    def test_render_contains_nodes(self, groups):
        output = ASCIIRenderer().render(groups, root=ROOT)
        assert str(ROOT) in output
        assert "src" in output
        assert "lib" in output
        assert "docs" in output
        assert "2.00 KB" in output
        assert "10 B" in output
        assert "incomplete" in output

    def test_nesting_follows_levels(self, groups):
        output = ASCIIRenderer().render(groups, root=ROOT)
        lines = output.splitlines()
        src_line = next(line for line in lines if "src" in line)
        lib_line = next(line for line in lines if "lib" in line)
        assert lib_line.index("lib") > src_line.index("src")

    def test_depth_limit(self, groups):
        output = ASCIIRenderer().render(groups, root=ROOT, depth=0)
        assert "src" in output
        assert "lib" not in output

    def test_failure_count(self, groups):
        failures = [WalkFailure(path=ROOT / "x", message="boom")]
        output = ASCIIRenderer().render(groups, root=ROOT, failures=failures)
        assert "1 entries could not be read" in output

    def test_format_size(self):
        renderer = ASCIIRenderer()
        assert renderer._format_size(0) == "0 B"
        assert renderer._format_size(1023) == "1023 B"
        assert renderer._format_size(1536) == "1.50 KB"
        assert renderer._format_size(5 * 1024 ** 3) == "5.00 GB"


@pytest.mark.parametrize(
    "fmt, expected",
    [
        (OutputFormat.TEXT, TextRenderer),
        (OutputFormat.TREE, ASCIIRenderer),
        (OutputFormat.JSON, JSONRenderer),
    ],
)
def test_get_renderer(fmt, expected):
    assert isinstance(get_renderer(fmt), expected)


def test_get_renderer_passes_indent():
    renderer = get_renderer(OutputFormat.TEXT, indent="  ")
    assert renderer.indent == "  "
