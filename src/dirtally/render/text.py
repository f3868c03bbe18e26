"""Plain text renderer, one summary line per directory."""

from dirtally.render.base import DEFAULT_INDENT, OutputFormat, format_summary_line
from dirtally.walk.models import SummaryRecord


class TextRenderer:
    """Renders record groups as indented summary lines.

    Unlike the tree and JSON renderers it works one group at a time, so
    lines can be printed while the rest of the walk is still running.
    """

    format = OutputFormat.TEXT

    def __init__(self, indent: str = DEFAULT_INDENT):
        self.indent = indent

    def render_group(self, group: list[SummaryRecord]) -> list[str]:
        """Lines for one level-1 subtree, ready to print as it completes."""
        return [format_summary_line(record, self.indent) for record in group]
