"""Data models for the directory walk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class DirectoryAccumulator:
    """Running totals for one directory.

    Holds the directory's own files at first, then grows as each child
    directory finishes and is merged in. Only exists while the level-1
    subtree containing it is being walked.
    """

    path: Path
    level: int

    total_bytes: int = 0
    file_count: int = 0
    subfolder_count: int = 0

    # False once any enumeration or stat below this directory failed
    complete: bool = True

    def add_file(self, size: int) -> None:
        """Attribute one file of `size` bytes to this directory."""
        self.total_bytes += size
        self.file_count += 1

    def add_subfolder(self) -> None:
        """Count one immediate child directory."""
        self.subfolder_count += 1

    def merge_child(self, child: "DirectoryAccumulator") -> None:
        """Fold a finished child directory's totals into this one.

        The child itself was already counted by add_subfolder() when it
        was entered, so only its own descendants are added here.
        """
        self.total_bytes += child.total_bytes
        self.file_count += child.file_count
        self.subfolder_count += child.subfolder_count
        if not child.complete:
            self.complete = False

    def to_record(self, subtree_directories: int) -> "SummaryRecord":
        return SummaryRecord(
            path=self.path,
            name=self.path.name or str(self.path),
            level=self.level,
            total_bytes=self.total_bytes,
            file_count=self.file_count,
            subfolder_count=self.subfolder_count,
            subtree_directories=subtree_directories,
            complete=self.complete,
        )


@dataclass
class SubtreeContext:
    """Bookkeeping for the level-1 subtree currently being walked.

    A new context is created each time the walk enters a direct child of
    the root and is dropped once its records have been emitted, so no
    accumulator outlives its own subtree.
    """

    top: Path
    accumulators: dict[Path, DirectoryAccumulator] = field(default_factory=dict)

    def track(self, path: Path, level: int) -> DirectoryAccumulator:
        """Start a zeroed accumulator for a directory just entered."""
        acc = DirectoryAccumulator(path=path, level=level)
        self.accumulators[path] = acc
        return acc

    def get(self, path: Path) -> DirectoryAccumulator | None:
        return self.accumulators.get(path)

    def __len__(self) -> int:
        return len(self.accumulators)

    def records(self) -> list["SummaryRecord"]:
        """Records for every tracked directory, in pre-order."""
        count = len(self.accumulators)
        return [acc.to_record(count) for acc in self.accumulators.values()]


@dataclass(frozen=True)
class SummaryRecord:
    """Final totals for one reported directory."""

    path: Path
    name: str
    level: int  # 0 for direct children of the walk root
    total_bytes: int
    file_count: int
    subfolder_count: int

    # Number of directories reported in the same level-1 group
    subtree_directories: int = 1
    complete: bool = True

    @property
    def reports_files(self) -> bool:
        """Whether the file count is shown next to the byte total.

        A group made of a single directory shows only its size. In larger
        groups every directory reports its count, including `0 files`.
        """
        return self.subtree_directories > 1

    @property
    def reports_subfolders(self) -> bool:
        return (
            self.subtree_directories > 1
            and self.level >= 0
            and self.subfolder_count > 0
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": str(self.path),
            "name": self.name,
            "level": self.level,
            "totalBytes": self.total_bytes,
            "fileCount": self.file_count,
            "subfolderCount": self.subfolder_count,
            "complete": self.complete,
        }


@dataclass(frozen=True)
class WalkFailure:
    """A directory or file that could not be read during a walk."""

    path: Path
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": str(self.path), "message": self.message}
