from __future__ import annotations

import os

import pytest

from fsscan.config import SearchMode
from fsscan.matcher import NameMatcher, build_prefix_table, kmp_find


def _m(mode: SearchMode, pattern: str, name: str) -> bool:
    return NameMatcher(mode, pattern).matches(name, os.path.splitext(name)[0])


def test_prefix_table():
    assert build_prefix_table("") == []
    assert build_prefix_table("abab") == [0, 0, 1, 2]
    assert build_prefix_table("aabaaab") == [0, 1, 0, 1, 2, 2, 3]


@pytest.mark.parametrize("text,pattern", [
    ("hello world", "world"),
    ("aaaaab", "aab"),
    ("abcabcabd", "abcabd"),
    ("report.txt", "xyz"),
    ("", ""),
    ("abc", ""),
    ("ab", "abc"),
])
def test_kmp_find_agrees_with_str_find(text, pattern):
    assert kmp_find(text, pattern) == text.find(pattern)


def test_exact_requires_full_name():
    assert _m(SearchMode.EXACT, "notes.txt", "notes.txt")
    assert not _m(SearchMode.EXACT, "notes", "notes.txt")
    assert not _m(SearchMode.EXACT, "notes.txt", "Notes.txt")


def test_no_extension_drops_only_final_extension():
    assert _m(SearchMode.EXACT_NO_EXTENSION, "file.tar", "file.tar.gz")
    assert not _m(SearchMode.EXACT_NO_EXTENSION, "file", "file.tar.gz")
    assert _m(SearchMode.EXACT_NO_EXTENSION, "Makefile", "Makefile")


def test_contains():
    assert _m(SearchMode.CONTAINS, "f1", "f1.txt")
    assert _m(SearchMode.CONTAINS, "f1.txt", "f1.txt")
    assert not _m(SearchMode.CONTAINS, "f3", "f1.txt")


def test_empty_pattern_matches_everything():
    assert _m(SearchMode.CONTAINS, "", "anything")
    assert _m(SearchMode.CONTAINS, "", "")
    assert _m(SearchMode.EXACT, "", "")


def test_no_search_mode_never_matches():
    assert not NameMatcher(SearchMode.NONE, None).matches("a", "a")
