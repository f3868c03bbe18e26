"""ASCII tree renderer using Rich for terminal output."""

import io
from pathlib import Path

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from dirtally.render.base import OutputFormat
from dirtally.walk.models import SummaryRecord, WalkFailure


class ASCIIRenderer:
    """Renders record groups as a Rich tree rooted at the walk root."""

    format = OutputFormat.TREE

    SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]

    def render(
        self,
        groups: list[list[SummaryRecord]],
        *,
        root: Path,
        failures: list[WalkFailure] | None = None,
        depth: int | None = None,
        **options,
    ) -> str:
        """Render the walk as an ASCII tree.

        Args:
            groups: One list of records per direct child of the root
            root: The walk root, used as the tree label
            failures: Non-fatal failures, counted under the tree
            depth: Maximum record level to render
            **options: Additional options (width, etc.)

        Returns:
            ASCII string representation of the tree
        """
        rich_tree = Tree(Text(str(root), style="bold"))

        for group in groups:
            self._add_group(rich_tree, group, max_depth=depth)

        console = Console(
            file=io.StringIO(),
            force_terminal=True,
            width=options.get("width", 120),
            record=True,
        )
        console.print(rich_tree)
        if failures:
            console.print(Text(f"{len(failures)} entries could not be read", style="yellow"))

        return console.export_text()

    def _add_group(
        self,
        parent: Tree,
        group: list[SummaryRecord],
        *,
        max_depth: int | None,
    ) -> None:
        """Attach one level-1 group, rebuilding nesting from record levels.

        Records arrive in pre-order, so the branch for level N is always
        the most recent node at level N - 1.
        """
        branches: list[Tree] = [parent]
        for record in group:
            if max_depth is not None and record.level > max_depth:
                continue
            del branches[record.level + 1:]
            node = branches[-1].add(self._build_label(record))
            branches.append(node)

    def _build_label(self, record: SummaryRecord) -> Text:
        parts = [(record.name, "bold" if record.level == 0 else "")]
        parts.append((f"  {self._format_size(record.total_bytes)}", "cyan"))

        counts = []
        if record.file_count:
            counts.append(f"{record.file_count:,} files")
        if record.subfolder_count:
            counts.append(f"{record.subfolder_count:,} subfolders")
        if counts:
            parts.append((f" ({', '.join(counts)})", "dim"))

        if not record.complete:
            parts.append((" incomplete", "red"))

        text = Text()
        for content, style in parts:
            text.append(content, style=style if style else None)
        return text

    def _format_size(self, num: int) -> str:
        """Format a byte count as a human-readable size."""
        size = float(num)
        for unit in self.SIZE_UNITS:
            if size < 1024.0 or unit == self.SIZE_UNITS[-1]:
                if unit == "B":
                    return f"{int(size)} {unit}"
                return f"{size:.2f} {unit}"
            size /= 1024.0
        return f"{size:.2f} {self.SIZE_UNITS[-1]}"
