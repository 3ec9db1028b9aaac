from __future__ import annotations

from pathlib import Path

import pytest

from fsscan import cli, drives


def test_listing(sample_tree: Path, capsys):
    assert cli.main([str(sample_tree), "-f"]) == cli.EXIT_OK
    out = capsys.readouterr().out.splitlines()
    assert f"{'5':>20}    f1.txt" in out
    assert f"{'0':>20}    <sub>" in out
    assert any(l.startswith("Root:") for l in out)


def test_search(sample_tree: Path, capsys):
    assert cli.main([str(sample_tree), "-f", "--contains", "f2"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert str(sample_tree / "f2.txt") in out
    assert "f1.txt" not in out
    assert "Traversed:" in out


def test_recursive_depth(deep_tree: Path, capsys):
    assert cli.main([str(deep_tree), "-r", "1"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "<b>" in out
    assert "<c>" not in out
    assert "Cumulative:" in out


def test_conflicting_search_modes(sample_tree: Path, capsys):
    assert cli.main([str(sample_tree), "-S", "a", "--contains", "b"]) == cli.EXIT_CONFIG
    captured = capsys.readouterr()
    assert "one search mode" in captured.err
    assert captured.out == ""


def test_absolute_and_relative_rejected(sample_tree: Path):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(sample_tree), "-a", "-R"])
    assert exc.value.code == 2


def test_bad_depth(sample_tree: Path):
    with pytest.raises(SystemExit):
        cli.main([str(sample_tree), "-r", "deep"])


def test_missing_root(tmp_path: Path, capsys):
    assert cli.main([str(tmp_path / "nope")]) == cli.EXIT_BAD_PATH
    assert "does not exist" in capsys.readouterr().err


def test_root_is_a_file(sample_tree: Path, capsys):
    assert cli.main([str(sample_tree / "f1.txt")]) == cli.EXIT_BAD_PATH
    assert "not to a directory" in capsys.readouterr().err


def test_list_drives(monkeypatch, capsys):
    monkeypatch.setattr(drives, "list_drives", lambda: [
        drives.Volume("/data", "ext4", total=2048, used=1024, free=1024, percent=50.0),
    ])
    assert cli.main(["--list-drives"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "/data" in out and "ext4" in out and "(50%)" in out
