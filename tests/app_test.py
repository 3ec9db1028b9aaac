from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtWidgets")

from fsscan import app  # noqa: E402
from fsscan.config import ScanConfig  # noqa: E402


def test_scan_thread_delivers_report(sample_tree: Path):
    thread = app.ScanThread(str(sample_tree), ScanConfig(show_files=True))
    done, errors = [], []
    thread.done.connect(lambda report, sink: done.append((report, sink)))
    thread.error.connect(errors.append)
    thread.run()
    assert errors == []
    ((report, sink),) = done
    assert report.root_tally.total == 3
    assert sorted(sink.names()) == ["f1.txt", "f2.txt", "sub"]


def test_scan_thread_reports_any_exception(sample_tree: Path, monkeypatch):
    def broken_scan(root, config, sink=None):
        raise RuntimeError("walker blew up")

    monkeypatch.setattr(app, "scan", broken_scan)
    thread = app.ScanThread(str(sample_tree), ScanConfig())
    done, errors = [], []
    thread.done.connect(lambda report, sink: done.append(report))
    thread.error.connect(errors.append)
    thread.run()
    assert done == []
    assert errors == ["walker blew up"]
