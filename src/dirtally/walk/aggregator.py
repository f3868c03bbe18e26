"""Depth-first walk that rolls directory totals up to level-1 subtrees."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from dirtally.walk.models import SubtreeContext, SummaryRecord, WalkFailure

logger = logging.getLogger(__name__)


class IOFailure(Exception):
    """A directory could not be enumerated or a file could not be stat'ed."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class TraversalStateError(Exception):
    """Raised when an aggregator is asked to walk a second time."""


@dataclass
class _OpenDirectory:
    """A directory that has been entered and still has entries to visit."""

    path: Path
    key: tuple[int, int] | None
    entries: Iterator[os.DirEntry]


class TreeAggregator:
    """Walks one directory tree and reports each direct child of the root.

    The walk is depth-first. Every directory goes through three steps:
    _pre_visit_directory() when it is entered, _visit_file() for each
    file inside it, and _post_visit_directory() once all of its children
    are done. A direct child of the root opens a fresh SubtreeContext;
    when that child is left, the records for it and every directory
    below it are yielded and the context is dropped.

    Open directories are kept on an explicit stack, so nesting depth is
    not bounded by the interpreter recursion limit.

    An aggregator walks exactly once. Create a new one for each walk.
    """

    def __init__(
        self,
        root: str | os.PathLike,
        *,
        follow_symlinks: bool = False,
        sort_entries: bool = True,
    ):
        self.root = Path(os.path.abspath(root))
        self.follow_symlinks = follow_symlinks
        self.sort_entries = sort_entries

        self.root_depth: int | None = None
        self.context: SubtreeContext | None = None
        self.peak_tracked = 0
        self.subtrees_emitted = 0
        self.failures: list[WalkFailure] = []
        self.finished = False

        self._started = False
        self._active: set[tuple[int, int]] = set()

    def aggregate(self) -> Iterator[SummaryRecord]:
        """Start the walk and return a lazy stream of records.

        Raises:
            TraversalStateError: If this aggregator has already walked
        """
        self._start()
        return self._flatten(self._walk())

    def aggregate_groups(self) -> Iterator[list[SummaryRecord]]:
        """Start the walk and yield one record list per direct child of the root.

        Each list is yielded as soon as that child's subtree is complete.

        Raises:
            TraversalStateError: If this aggregator has already walked
        """
        self._start()
        return self._walk()

    def _start(self) -> None:
        if self._started:
            raise TraversalStateError(
                f"Aggregator for {self.root} has already been used; create a new one"
            )
        self._started = True

    @staticmethod
    def _flatten(groups: Iterator[list[SummaryRecord]]) -> Iterator[SummaryRecord]:
        for group in groups:
            yield from group

    def _walk(self) -> Iterator[list[SummaryRecord]]:
        logger.info("Walking %s", self.root)
        # Directories entered but not yet post-visited, innermost last
        stack: list[_OpenDirectory] = []
        self._enter_directory(self.root, stack)

        while stack:
            current = stack[-1]
            entry = next(current.entries, None)
            if entry is None:
                stack.pop()
                if current.key is not None:
                    self._active.discard(current.key)
                records = self._post_visit_directory(current.path)
                if records:
                    yield records
                continue

            child = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=self.follow_symlinks)
            except OSError as e:
                self._record_failure(child, e.strerror or str(e))
                continue

            if is_dir:
                self._enter_directory(child, stack)
                continue

            try:
                size = entry.stat(follow_symlinks=self.follow_symlinks).st_size
            except OSError as e:
                self._record_failure(child, e.strerror or str(e))
                continue
            self._visit_file(child, size)

        logger.info(
            "Walk finished: %d subtrees, %d failures",
            self.subtrees_emitted,
            len(self.failures),
        )

    def _enter_directory(self, path: Path, stack: list[_OpenDirectory]) -> None:
        """Pre-visit `path` and push it so its entries are walked next.

        Raises:
            IOFailure: If `path` is the root and cannot be enumerated
        """
        key = self._directory_key(path)
        if key is not None and key in self._active:
            self._record_failure(path, "filesystem loop detected")
            return
        self._pre_visit_directory(path)

        try:
            entries = self._list_entries(path)
        except IOFailure as e:
            if path == self.root:
                raise
            self._record_failure(path, e.message)
            entries = []

        if key is not None:
            self._active.add(key)
        stack.append(_OpenDirectory(path=path, key=key, entries=iter(entries)))

    def _list_entries(self, path: Path) -> list[os.DirEntry]:
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            raise IOFailure(path, e.strerror or str(e)) from e
        if self.sort_entries:
            entries.sort(key=lambda entry: entry.name)
        return entries

    def _directory_key(self, path: Path) -> tuple[int, int] | None:
        """Identity of a directory for loop detection when following links."""
        if not self.follow_symlinks:
            return None
        try:
            st = os.stat(path)
        except OSError:
            # Reported by _list_entries() when the directory is read
            return None
        return (st.st_dev, st.st_ino)

    def _pre_visit_directory(self, path: Path) -> None:
        if self.root_depth is None:
            self.root_depth = len(path.parts)
            return

        relative_level = len(path.parts) - self.root_depth
        if relative_level == 1:
            logger.debug("Entering subtree %s", path)
            self.context = SubtreeContext(top=path)

        self.context.track(path, relative_level - 1)
        parent = self.context.get(path.parent)
        if parent is not None:
            parent.add_subfolder()
        self.peak_tracked = max(self.peak_tracked, len(self.context))

    def _visit_file(self, path: Path, size: int) -> None:
        # Files directly under the root belong to no subtree
        if self.context is None:
            return
        parent = self.context.get(path.parent)
        if parent is not None:
            parent.add_file(size)

    def _post_visit_directory(self, path: Path) -> list[SummaryRecord]:
        if path == self.root:
            self.finished = True
            return []

        relative_level = len(path.parts) - self.root_depth
        if relative_level == 1:
            records = self.context.records()
            logger.debug("Emitting %d records for %s", len(records), self.context.top)
            self.context = None
            self.subtrees_emitted += 1
            return records

        acc = self.context.get(path)
        parent = self.context.get(path.parent)
        if acc is not None and parent is not None:
            parent.merge_child(acc)
        return []

    def _record_failure(self, path: Path, message: str) -> None:
        logger.warning("Skipping %s: %s", path, message)
        self.failures.append(WalkFailure(path=path, message=message))
        if self.context is None:
            return
        acc = self.context.get(path) or self.context.get(path.parent)
        if acc is not None:
            acc.complete = False


def aggregate_tree(
    root: str | os.PathLike,
    *,
    follow_symlinks: bool = False,
    sort_entries: bool = True,
) -> Iterator[SummaryRecord]:
    """Walk `root` with a fresh aggregator and stream its records.

    Args:
        root: Directory to walk, relative paths resolve against the cwd
        follow_symlinks: Descend into symlinked directories
        sort_entries: Visit entries sorted by name instead of OS order

    Returns:
        Lazy iterator of SummaryRecord, grouped per direct child of root

    Raises:
        IOFailure: While iterating, when the root itself cannot be enumerated
    """
    aggregator = TreeAggregator(
        root, follow_symlinks=follow_symlinks, sort_entries=sort_entries
    )
    return aggregator.aggregate()
