"""Base renderer and output format definitions."""

from enum import Enum
from pathlib import Path
from typing import Protocol

from dirtally.walk.models import SummaryRecord, WalkFailure


DEFAULT_INDENT = "\t"


class OutputFormat(str, Enum):
    """Output format for rendering."""

    TEXT = "text"
    TREE = "tree"
    JSON = "json"


def format_summary_line(record: SummaryRecord, indent: str = DEFAULT_INDENT) -> str:
    """Format one record as a summary line.

    Example:
        \t[src] - 12,345 bytes, 3 files, 1 subfolders [end]
    """
    line = f"{indent * record.level}[{record.name}] - {record.total_bytes:,} bytes"
    if record.reports_files:
        line += f", {record.file_count:,} files"
    if record.reports_subfolders:
        line += f", {record.subfolder_count:,} subfolders"
    return line + " [end]"


class RecordRenderer(Protocol):
    """Protocol for renderers that take a finished walk (tree, JSON)."""

    format: OutputFormat

    def render(
        self,
        groups: list[list[SummaryRecord]],
        *,
        root: Path,
        failures: list[WalkFailure] | None = None,
        **options,
    ) -> str:
        """Render all record groups of a finished walk.

        Args:
            groups: One list of records per direct child of the root
            root: The walk root
            failures: Non-fatal failures recorded during the walk
            **options: Additional format-specific options

        Returns:
            Rendered output
        """
        ...
