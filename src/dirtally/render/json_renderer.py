"""JSON renderer for walk summaries."""

import json
from pathlib import Path
from typing import Any

from dirtally.render.base import OutputFormat
from dirtally.walk.models import SummaryRecord, WalkFailure


class JSONRenderer:
    """Renders record groups as a single JSON document."""

    format = OutputFormat.JSON

    def render(
        self,
        groups: list[list[SummaryRecord]],
        *,
        root: Path,
        failures: list[WalkFailure] | None = None,
        **options,
    ) -> str:
        """Render the walk as JSON.

        Args:
            groups: One list of records per direct child of the root
            root: The walk root
            failures: Non-fatal failures recorded during the walk
            **options: Additional options (indent, etc.)

        Returns:
            JSON string with root, per-subtree records and failures
        """
        data: dict[str, Any] = {
            "root": str(root),
            "subtrees": [[record.to_dict() for record in group] for group in groups],
            "failures": [failure.to_dict() for failure in failures or []],
        }

        indent = options.get("indent", 2)
        return json.dumps(data, indent=indent, default=str)
