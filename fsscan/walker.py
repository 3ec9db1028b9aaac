from __future__ import annotations
import logging
import os
import time
from typing import List, Optional

from .aggregator import ScanAggregator
from .classifier import classify
from .config import ScanConfig, is_hidden_name
from .dirsize import dir_size
from .errors import DirectoryIteratorError, ScanError, UnclassifiableEntry, from_os_error
from .matcher import NameMatcher
from .models import DirectoryTally, EmittedEntry, EntryInfo, EntryKind, RollUp, ScanReport
from .sinks import ReportSink

logger = logging.getLogger(__name__)


class _Frame:
    """One open directory on the walk stack."""

    __slots__ = ("path", "depth", "it", "tally")

    def __init__(self, path: str, depth: int, it):
        self.path = path
        self.depth = depth
        self.it = it
        self.tally = DirectoryTally()

    def close(self) -> None:
        self.it.close()


class TreeWalker:
    """Depth-first walk of one directory tree.

    Listing mode emits every entry whose kind is shown (directories always)
    and rolls the rest up per directory. Search mode emits only entries whose
    name matches, but still counts and descends through everything.

    Directories are walked with an explicit stack of open iterators rather
    than recursion, so tree depth is bounded by the filesystem, not the
    interpreter. A directory is still emitted before its contents and folded
    after them.
    """

    def __init__(self, config: ScanConfig, aggregator: ScanAggregator, sink: ReportSink):
        self.config = config
        self.aggregator = aggregator
        self.sink = sink
        self.matcher = NameMatcher.from_config(config) if config.searching else None

    def _report(self, err: ScanError) -> None:
        logger.debug("%s", err)
        if self.config.show_errors:
            self.sink.error(err)

    def _shown(self, kind: EntryKind) -> bool:
        cfg = self.config
        if kind is EntryKind.FILE:
            return cfg.show_files
        if kind is EntryKind.SYMLINK:
            return cfg.show_symlinks
        if kind is EntryKind.SPECIAL:
            return cfg.show_special
        return kind is EntryKind.DIRECTORY

    def walk(self, path: str, depth: int = 0) -> bool:
        """Scan ``path`` at ``depth``; return False if any part of the subtree could not be read."""
        failed_before = len(self.aggregator.failed_dirs)
        root = self._open(path, depth)
        if root is None:
            return False

        stack: List[_Frame] = [root]
        try:
            while stack:
                frame = stack[-1]
                info = self._next_info(frame)
                if info is None:
                    stack.pop()
                    frame.close()
                    self._finish(frame)
                    continue

                frame.tally.count(info.kind, info.size)
                self._visit(info, frame.depth)
                if info.kind is EntryKind.DIRECTORY and self._descends(info, frame.depth):
                    child = self._open(info.path, frame.depth + 1)
                    if child is not None:
                        stack.append(child)
        finally:
            for frame in stack:
                frame.close()
        return len(self.aggregator.failed_dirs) == failed_before

    def _open(self, path: str, depth: int) -> Optional[_Frame]:
        logger.debug("enter %s (depth %d)", path, depth)
        try:
            it = os.scandir(path)
        except OSError as e:
            self._report(from_os_error(DirectoryIteratorError, e, path))
            self.aggregator.mark_incomplete(path)
            return None
        return _Frame(path, depth, it)

    def _next_info(self, frame: _Frame) -> Optional[EntryInfo]:
        """Classify the next visible entry of ``frame``; None once the directory is exhausted."""
        while True:
            try:
                entry = next(frame.it)
            except StopIteration:
                return None
            except OSError as e:
                # keep what was counted so far; the directory is folded as-is
                self._report(from_os_error(DirectoryIteratorError, e, frame.path))
                self.aggregator.mark_incomplete(frame.path)
                return None

            if not self.config.show_hidden and is_hidden_name(entry.name):
                continue

            try:
                info = classify(entry.path, entry.name)
            except UnclassifiableEntry as e:
                self._report(e)
                continue
            for err in info.errors:
                self._report(err)
            return info

    def _finish(self, frame: _Frame) -> None:
        if not self.config.searching:
            self._emit_rollups(frame.path, frame.depth, frame.tally)
        self.aggregator.fold(frame.tally, frame.depth)
        self.sink.end_directory(frame.path, frame.depth, frame.tally)

    def _visit(self, info: EntryInfo, depth: int) -> None:
        kind = info.kind
        if self.matcher is None:
            if self._shown(kind):
                self.sink.entry(self._emitted(info, depth))
        elif self.matcher.matches(info.name, info.stem) and self._shown(kind):
            # directories pass _shown unconditionally, so they count as matched on name alone
            self.aggregator.record_match(kind, info.size)
            self.sink.entry(self._emitted(info, depth, matched=True))

    def _descends(self, info: EntryInfo, depth: int) -> bool:
        if self.config.may_descend(depth):
            return True
        if self.config.recursive:
            logger.debug("depth limit reached at %s", info.path)
        return False

    def _emitted(self, info: EntryInfo, depth: int, matched: bool = False) -> EmittedEntry:
        size = None
        if info.kind is EntryKind.DIRECTORY and self.config.show_dir_size:
            size = dir_size(info.path, on_error=self._report)
        return EmittedEntry(info, depth, dir_size=size, matched=matched)

    def _emit_rollups(self, path: str, depth: int, tally: DirectoryTally) -> None:
        if tally.file_count and not self.config.show_files:
            self.sink.rollup(RollUp(path, depth, EntryKind.FILE, tally.file_count, tally.total_file_bytes))
        if tally.symlink_count and not self.config.show_symlinks:
            self.sink.rollup(RollUp(path, depth, EntryKind.SYMLINK, tally.symlink_count))
        if tally.special_count and not self.config.show_special:
            self.sink.rollup(RollUp(path, depth, EntryKind.SPECIAL, tally.special_count))


def scan(root: str, config: ScanConfig, sink: Optional[ReportSink] = None) -> ScanReport:
    """Walk ``root`` (an existing directory) and hand the summary to ``sink``."""
    t0 = time.time()
    sink = sink or ReportSink()
    aggregator = ScanAggregator(search=config.searching)
    walker = TreeWalker(config, aggregator, sink)
    walker.walk(root, 0)

    cumulative = aggregator.cumulative_tally.copy()
    report = ScanReport(
        root=root,
        root_tally=aggregator.root_tally.copy(),
        cumulative_tally=cumulative,
        matched_tally=aggregator.matched_tally.copy() if aggregator.matched_tally is not None else None,
        traversed_tally=cumulative.copy() if config.searching else None,
        recursive=config.recursive,
        complete=aggregator.complete,
        failed_dirs=list(aggregator.failed_dirs),
        elapsed_sec=time.time() - t0,
    )
    logger.debug("scan of %s finished in %.2fs, %d directories", root, report.elapsed_sec, aggregator.folds)
    sink.summary(report)
    return report
