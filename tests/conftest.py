from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """root/f1.txt (5 bytes), root/f2.txt (10 bytes), root/sub/ (empty)."""
    (tmp_path / "f1.txt").write_bytes(b"x" * 5)
    (tmp_path / "f2.txt").write_bytes(b"x" * 10)
    (tmp_path / "sub").mkdir()
    return tmp_path


@pytest.fixture
def deep_tree(tmp_path: Path) -> Path:
    """root/a/b/c with one file at every level."""
    c = tmp_path / "a" / "b" / "c"
    c.mkdir(parents=True)
    (tmp_path / "top.txt").write_bytes(b"1")
    (tmp_path / "a" / "a.txt").write_bytes(b"22")
    (tmp_path / "a" / "b" / "b.txt").write_bytes(b"333")
    (c / "c.txt").write_bytes(b"4444")
    return tmp_path


class _FailingScandir:
    """Wraps a real scandir iterator and raises OSError after ``after`` entries."""

    def __init__(self, it, after: int):
        self._it = it
        self._left = after

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __iter__(self):
        return self

    def __next__(self):
        if self._left == 0:
            raise OSError(5, "Input/output error")
        self._left -= 1
        return next(self._it)

    def close(self):
        self._it.close()


@pytest.fixture
def failing_scandir(monkeypatch):
    """Make ``os.scandir(path)`` yield ``after`` entries of ``path`` and then fail."""
    real_scandir = os.scandir

    def install(path: Path, after: int = 1) -> None:
        target = str(path)

        def fake_scandir(p):
            it = real_scandir(p)
            return _FailingScandir(it, after) if str(p) == target else it

        monkeypatch.setattr(os, "scandir", fake_scandir)

    return install


@pytest.fixture
def chain_tree(tmp_path: Path):
    """root/d/d/.../d, ``levels`` directories deep, one 1-byte file in the innermost."""

    def build(levels: int) -> Path:
        leaf = tmp_path.joinpath(*["d"] * levels)
        leaf.mkdir(parents=True)
        (leaf / "leaf.bin").write_bytes(b"x")
        return tmp_path

    return build
