from __future__ import annotations
import argparse
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ConfigError

INDENT_COL_WIDTH = 4
SIZE_COL_WIDTH = 20
HIDDEN_PREFIX = "."


class SearchMode(Enum):
    NONE = "none"
    EXACT = "exact"
    EXACT_NO_EXTENSION = "noext"
    CONTAINS = "contains"


@dataclass(frozen=True)
class ScanConfig:
    """Resolved options for one scan. Validated on construction, never mutated."""
    recursive: bool = False
    max_depth: int = 0                  # 0 = unlimited
    show_permissions: bool = False
    show_mtime: bool = False
    show_hidden: bool = False
    show_files: bool = False
    show_symlinks: bool = False
    show_special: bool = False
    show_dir_size: bool = False
    show_errors: bool = False
    abs_paths: bool = False
    rel_paths: bool = False
    search_mode: SearchMode = SearchMode.NONE
    search_pattern: Optional[str] = None

    def __post_init__(self):
        if self.abs_paths and self.rel_paths:
            raise ConfigError("absolute and relative path output are mutually exclusive")
        if self.max_depth < 0:
            raise ConfigError(f"invalid recursion depth {self.max_depth}; use a positive whole number")
        if self.search_mode is not SearchMode.NONE and self.search_pattern is None:
            raise ConfigError(f"no search pattern provided for search mode '{self.search_mode.value}'")
        if self.search_mode is SearchMode.NONE and self.search_pattern is not None:
            raise ConfigError("search pattern given without a search mode")

    @property
    def searching(self) -> bool:
        return self.search_mode is not SearchMode.NONE

    def may_descend(self, depth: int) -> bool:
        return self.recursive and (self.max_depth == 0 or depth < self.max_depth)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ScanConfig":
        modes = [
            (SearchMode.EXACT, getattr(args, "search", None)),
            (SearchMode.EXACT_NO_EXTENSION, getattr(args, "search_noext", None)),
            (SearchMode.CONTAINS, getattr(args, "contains", None)),
        ]
        given = [(m, p) for m, p in modes if p is not None]
        if len(given) > 1:
            raise ConfigError("Can only set one search mode at a time")
        mode, pattern = given[0] if given else (SearchMode.NONE, None)

        depth = getattr(args, "recursive", None)
        return cls(
            recursive=depth is not None,
            max_depth=depth or 0,
            show_permissions=bool(getattr(args, "permissions", False)),
            show_mtime=bool(getattr(args, "mtime", False)),
            show_hidden=bool(getattr(args, "hidden", False)),
            show_files=bool(getattr(args, "files", False)),
            show_symlinks=bool(getattr(args, "symlinks", False)),
            show_special=bool(getattr(args, "special", False)),
            show_dir_size=bool(getattr(args, "dir_size", False)),
            show_errors=bool(getattr(args, "errors", False)),
            abs_paths=bool(getattr(args, "absolute", False)),
            rel_paths=bool(getattr(args, "relative", False)),
            search_mode=mode,
            search_pattern=pattern,
        )


def is_hidden_name(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)
