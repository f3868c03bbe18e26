"""Renderers for walk summaries."""

from dirtally.render.base import (
    DEFAULT_INDENT,
    OutputFormat,
    RecordRenderer,
    format_summary_line,
)
from dirtally.render.ascii import ASCIIRenderer
from dirtally.render.json_renderer import JSONRenderer
from dirtally.render.text import TextRenderer


def get_renderer(
    format: OutputFormat = OutputFormat.TEXT,
    *,
    indent: str = DEFAULT_INDENT,
) -> TextRenderer | RecordRenderer:
    """Return the renderer for an output format.

    Text output is streamed group by group through TextRenderer.render_group();
    the other formats render a finished walk in one go.
    """
    if format == OutputFormat.TREE:
        return ASCIIRenderer()
    elif format == OutputFormat.JSON:
        return JSONRenderer()
    return TextRenderer(indent=indent)


__all__ = [
    "DEFAULT_INDENT",
    "OutputFormat",
    "RecordRenderer",
    "format_summary_line",
    "ASCIIRenderer",
    "JSONRenderer",
    "TextRenderer",
    "get_renderer",
]
