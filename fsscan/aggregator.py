from __future__ import annotations
from typing import List, Optional

from .models import DirectoryTally, EntryKind, Scope


class ScanAggregator:
    """Counters for one top-level scan.

    Every directory's tally is folded in once its iteration is over. The tally
    folded at depth 0 is the root tally; the sum of all of them is the
    cumulative one, which is also what search mode reports as traversed.
    """

    def __init__(self, search: bool = False):
        self.root_tally = DirectoryTally()
        self.cumulative_tally = DirectoryTally()
        self.matched_tally: Optional[DirectoryTally] = DirectoryTally() if search else None
        self.folds = 0
        self.failed_dirs: List[str] = []

    @property
    def complete(self) -> bool:
        return not self.failed_dirs

    def fold(self, tally: DirectoryTally, depth: int) -> None:
        if depth == 0:
            self.root_tally = tally.copy()
        self.cumulative_tally.add(tally)
        self.folds += 1

    def record_match(self, kind: EntryKind, size: Optional[int] = None) -> None:
        if self.matched_tally is not None:
            self.matched_tally.count(kind, size)

    def mark_incomplete(self, path: str) -> None:
        self.failed_dirs.append(path)

    def summary(self, scope: Scope) -> DirectoryTally:
        if scope is Scope.ROOT:
            return self.root_tally.copy()
        if scope is Scope.CUMULATIVE or scope is Scope.TRAVERSED:
            return self.cumulative_tally.copy()
        if scope is Scope.MATCHED:
            if self.matched_tally is None:
                raise ValueError("matched tally is only kept in search mode")
            return self.matched_tally.copy()
        raise ValueError(f"unknown scope {scope!r}")
