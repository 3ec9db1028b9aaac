from __future__ import annotations

import pytest

from fsscan.aggregator import ScanAggregator
from fsscan.models import DirectoryTally, EntryKind, Scope


def _tally(files=0, links=0, special=0, dirs=0, size=0) -> DirectoryTally:
    return DirectoryTally(file_count=files, symlink_count=links, special_count=special,
                          subdir_count=dirs, total_file_bytes=size)


def test_fold_keeps_root_and_sums_everything():
    agg = ScanAggregator()
    agg.fold(_tally(files=1, size=4), depth=2)
    agg.fold(_tally(files=2, dirs=1, size=6), depth=1)
    agg.fold(_tally(files=3, links=1, dirs=1, size=10), depth=0)

    assert agg.summary(Scope.ROOT) == _tally(files=3, links=1, dirs=1, size=10)
    assert agg.summary(Scope.CUMULATIVE) == _tally(files=6, links=1, dirs=2, size=20)
    assert agg.summary(Scope.CUMULATIVE).total == 9
    assert agg.folds == 3


def test_summary_returns_copies():
    agg = ScanAggregator()
    agg.fold(_tally(files=1), depth=0)
    agg.summary(Scope.ROOT).file_count = 99
    assert agg.root_tally.file_count == 1


def test_matched_tracking_only_in_search_mode():
    agg = ScanAggregator(search=True)
    agg.record_match(EntryKind.FILE, 12)
    agg.record_match(EntryKind.DIRECTORY)
    agg.fold(_tally(files=2, dirs=1), depth=0)
    assert agg.summary(Scope.MATCHED).as_dict() == {
        "files": 1, "symlinks": 0, "special": 0, "subdirectories": 1, "total": 2}
    assert agg.summary(Scope.TRAVERSED) == agg.summary(Scope.CUMULATIVE)

    plain = ScanAggregator()
    plain.record_match(EntryKind.FILE, 1)
    with pytest.raises(ValueError):
        plain.summary(Scope.MATCHED)


def test_incomplete_flag():
    agg = ScanAggregator()
    assert agg.complete
    agg.mark_incomplete("/nope")
    assert not agg.complete
    assert agg.failed_dirs == ["/nope"]


def test_tally_count_ignores_unknown_sizes():
    t = DirectoryTally()
    t.count(EntryKind.FILE, None)
    t.count(EntryKind.FILE, 5)
    t.count(EntryKind.SPECIAL)
    t.count(EntryKind.UNKNOWN)
    assert (t.file_count, t.total_file_bytes, t.special_count, t.total) == (2, 5, 1, 3)
