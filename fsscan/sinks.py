from __future__ import annotations
import os
import sys
from typing import List, Optional, TextIO, Tuple

from .config import INDENT_COL_WIDTH, SIZE_COL_WIDTH, ScanConfig
from .errors import ScanError
from .models import DirectoryTally, EmittedEntry, EntryKind, RollUp, ScanReport
from .utils import format_mtime, format_permissions, format_size, format_bytes

ROLLUP_LABELS = {
    EntryKind.FILE: "files",
    EntryKind.SYMLINK: "symlinks",
    EntryKind.SPECIAL: "special entries",
}


class ReportSink:
    """Receives what the walker produces. All hooks are optional."""

    def entry(self, item: EmittedEntry) -> None:
        pass

    def rollup(self, item: RollUp) -> None:
        pass

    def error(self, err: ScanError) -> None:
        pass

    def end_directory(self, path: str, depth: int, tally: DirectoryTally) -> None:
        pass

    def summary(self, report: ScanReport) -> None:
        pass


class CollectingSink(ReportSink):
    def __init__(self):
        self.entries: List[EmittedEntry] = []
        self.rollups: List[RollUp] = []
        self.errors: List[ScanError] = []
        self.directories: List[Tuple[str, int, DirectoryTally]] = []
        # entries and roll-ups in emission order
        self.events: List[object] = []
        self.report: Optional[ScanReport] = None

    def entry(self, item: EmittedEntry) -> None:
        self.entries.append(item)
        self.events.append(item)

    def rollup(self, item: RollUp) -> None:
        self.rollups.append(item)
        self.events.append(item)

    def error(self, err: ScanError) -> None:
        self.errors.append(err)

    def end_directory(self, path: str, depth: int, tally: DirectoryTally) -> None:
        self.directories.append((path, depth, tally.copy()))

    def summary(self, report: ScanReport) -> None:
        self.report = report

    def names(self, kind: Optional[EntryKind] = None) -> List[str]:
        return [e.name for e in self.entries if kind is None or e.kind is kind]


class TextReportSink(ReportSink):
    """Column report in the classic fss layout.

    ``<perms>  <mtime>  <size:20>    <indent><name>``; the first two columns
    only when enabled in the config.
    """

    def __init__(self, config: ScanConfig, root: str,
                 stream: Optional[TextIO] = None, err_stream: Optional[TextIO] = None,
                 human_sizes: bool = False):
        self.config = config
        self.root = root
        self.stream = stream or sys.stdout
        self.err_stream = err_stream or sys.stderr
        self.human_sizes = human_sizes

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")

    def _prefix(self, mode: Optional[int] = None, mtime: Optional[float] = None, blank: bool = False) -> str:
        out = ""
        if self.config.show_permissions:
            out += (" " * 10 if blank else format_permissions(mode)) + "  "
        if self.config.show_mtime:
            out += (" " * 19 if blank else format_mtime(mtime)) + "  "
        return out

    def _display(self, path: str, name: str, depth: int) -> str:
        if self.config.searching or self.config.abs_paths:
            return os.path.abspath(path)
        if self.config.rel_paths:
            return os.path.relpath(path, self.root)
        return " " * (INDENT_COL_WIDTH * depth) + name

    def _size_col(self, item: EmittedEntry) -> str:
        kind = item.kind
        if kind is EntryKind.SYMLINK:
            return "SYMLINK"
        if kind is EntryKind.SPECIAL:
            return item.info.special.value if item.info.special else "SPECIAL"
        if kind is EntryKind.DIRECTORY:
            if not self.config.show_dir_size:
                return "0"
            return format_size(item.dir_size, self.human_sizes)
        return format_size(item.info.size, self.human_sizes)

    def entry(self, item: EmittedEntry) -> None:
        disp = self._display(item.path, item.name, item.depth)
        if item.kind is EntryKind.DIRECTORY and not (self.config.searching or self.config.abs_paths
                                                      or self.config.rel_paths):
            disp = disp[:len(disp) - len(item.name)] + f"<{item.name}>"
        elif item.kind is EntryKind.SYMLINK:
            disp += f" -> {item.info.target if item.info.target is not None else '?'}"
        line = f"{self._prefix(item.info.mode, item.info.mtime)}{self._size_col(item):>{SIZE_COL_WIDTH}}    {disp}"
        self._write(line)

    def rollup(self, item: RollUp) -> None:
        label = f"<{item.count} {ROLLUP_LABELS.get(item.kind, item.kind.value)}>"
        if self.config.abs_paths or self.config.rel_paths:
            where = self._display(item.directory, "", 0)
            body = label if where in ("", ".") else os.path.join(where, label)
        else:
            body = " " * (INDENT_COL_WIDTH * item.depth) + label
        if item.kind is EntryKind.FILE and item.total_bytes is not None:
            size = format_size(item.total_bytes, self.human_sizes)
        else:
            size = "-"
        self._write(f"{self._prefix(blank=True)}{size:>{SIZE_COL_WIDTH}}    {body}")

    def error(self, err: ScanError) -> None:
        self.err_stream.write(f"error: {err}\n")

    def summary(self, report: ScanReport) -> None:
        self._write("")
        if not report.complete:
            n = len(report.failed_dirs)
            self._write(f"Summary unavailable: {n} director{'y' if n == 1 else 'ies'} could not be read")
            return
        self._write(self.format_tally("Root", report.root_tally))
        if report.recursive:
            self._write(self.format_tally("Cumulative", report.cumulative_tally))
        if report.search:
            self._write(self.format_tally("Matched", report.matched_tally))
            self._write(self.format_tally("Traversed", report.traversed_tally))

    def format_tally(self, label: str, t: DirectoryTally) -> str:
        size = format_bytes(t.total_file_bytes) if self.human_sizes else f"{t.total_file_bytes} bytes"
        return (f"{label + ':':<12}{t.file_count} files ({size}), {t.symlink_count} symlinks, "
                f"{t.special_count} special, {t.subdir_count} subdirectories, {t.total} total")


def describe_report(report: ScanReport) -> str:
    """One-line summary of ``report`` for status bars."""
    if not report.complete:
        return f"Incomplete: {len(report.failed_dirs)} unreadable directories"

    def fmt(label: str, t: DirectoryTally) -> str:
        return (f"{label}: {t.file_count} files, {t.symlink_count} symlinks, "
                f"{t.special_count} special, {t.subdir_count} dirs ({t.total})")

    parts = [fmt("Root", report.root_tally)]
    if report.recursive:
        parts.append(fmt("All", report.cumulative_tally))
    if report.search:
        parts.append(fmt("Matched", report.matched_tally))
        parts.append(fmt("Traversed", report.traversed_tally))
    return " | ".join(parts)
