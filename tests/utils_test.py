from __future__ import annotations

import stat
from pathlib import Path

from fsscan import utils
from fsscan.utils import format_bytes, format_permissions, format_size, reveal_command


def test_format_bytes():
    assert format_bytes(0) == "0 B"
    assert format_bytes(1023) == "1023 B"
    assert format_bytes(1536) == "1.50 KB"
    assert format_bytes(5 * 1024 ** 3) == "5.00 GB"
    assert format_bytes(3 * 1024 ** 6) == "3072.00 PB"
    assert format_bytes(-1) == "-1"


def test_format_size_unknown():
    assert format_size(None) == "?"
    assert format_size(2048) == "2048"
    assert format_size(2048, human=True) == "2.00 KB"


def test_format_permissions():
    assert format_permissions(stat.S_IFDIR | 0o755) == "drwxr-xr-x"
    assert format_permissions(None) == "?" * 10


def test_reveal_command(sample_tree: Path):
    f = str(sample_tree / "f1.txt")
    d = str(sample_tree / "sub")
    assert reveal_command(f, "linux") == ["xdg-open", str(sample_tree)]
    assert reveal_command(d, "linux") == ["xdg-open", d]
    assert reveal_command(f, "darwin") == ["open", "-R", f]
    assert reveal_command(f, "win32") == ["explorer", "/select,", f]
    assert reveal_command(d, "win32") == ["explorer", d]


def test_reveal_in_file_manager(sample_tree: Path, monkeypatch):
    launched = []
    monkeypatch.setattr(utils.subprocess, "Popen", lambda cmd: launched.append(cmd))
    assert utils.reveal_in_file_manager(str(sample_tree / "f1.txt"))
    assert len(launched) == 1
    assert not utils.reveal_in_file_manager("")
    assert len(launched) == 1


def test_reveal_without_file_manager(sample_tree: Path, monkeypatch):
    def missing(cmd):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(utils.subprocess, "Popen", missing)
    assert not utils.reveal_in_file_manager(str(sample_tree))
