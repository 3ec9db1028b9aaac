from __future__ import annotations
from typing import List, Optional, Sequence

from .config import ScanConfig, SearchMode


def build_prefix_table(pattern: str) -> List[int]:
    """Longest proper prefix that is also a suffix, for every prefix of ``pattern``."""
    table = [0] * len(pattern)
    k = 0
    for i in range(1, len(pattern)):
        while k > 0 and pattern[i] != pattern[k]:
            k = table[k - 1]
        if pattern[i] == pattern[k]:
            k += 1
        table[i] = k
    return table


def kmp_find(text: str, pattern: str, table: Optional[Sequence[int]] = None) -> int:
    """Index of the first occurrence of ``pattern`` in ``text``, or -1.

    Same result as ``str.find``; runs in O(len(text) + len(pattern)).
    """
    if not pattern:
        return 0
    if table is None:
        table = build_prefix_table(pattern)
    k = 0
    for i, ch in enumerate(text):
        while k > 0 and ch != pattern[k]:
            k = table[k - 1]
        if ch == pattern[k]:
            k += 1
            if k == len(pattern):
                return i - k + 1
    return -1


class NameMatcher:
    """Name predicate for search mode. The prefix table is built once per scan."""

    def __init__(self, mode: SearchMode, pattern: Optional[str]):
        self.mode = mode
        self.pattern = pattern or ""
        self._table = build_prefix_table(self.pattern) if mode is SearchMode.CONTAINS else None

    @classmethod
    def from_config(cls, config: ScanConfig) -> "NameMatcher":
        return cls(config.search_mode, config.search_pattern)

    def matches(self, name: str, stem: str) -> bool:
        if self.mode is SearchMode.EXACT:
            return name == self.pattern
        if self.mode is SearchMode.EXACT_NO_EXTENSION:
            return stem == self.pattern
        if self.mode is SearchMode.CONTAINS:
            return kmp_find(name, self.pattern, self._table) >= 0
        return False
