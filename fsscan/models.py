from __future__ import annotations
import os
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, Optional

from .errors import EntryMetadataError


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    SPECIAL = "special"
    UNKNOWN = "unknown"


class SpecialKind(Enum):
    SOCKET = "SOCKET"
    BLOCK_DEVICE = "BLOCK DEVICE"
    FIFO_PIPE = "FIFO PIPE"
    GENERIC = "SPECIAL"


class Scope(Enum):
    ROOT = "root"
    CUMULATIVE = "cumulative"
    MATCHED = "matched"
    TRAVERSED = "traversed"


@dataclass
class EntryInfo:
    """Result of classifying one path. Built fresh on every visit."""
    path: str
    name: str
    kind: EntryKind
    size: Optional[int] = None          # None = unknown
    target: Optional[str] = None        # symlinks only
    target_is_dir: Optional[bool] = None
    special: Optional[SpecialKind] = None
    mode: Optional[int] = None
    mtime: Optional[float] = None
    errors: List[EntryMetadataError] = field(default_factory=list)

    @property
    def stem(self) -> str:
        return os.path.splitext(self.name)[0]


@dataclass
class DirectoryTally:
    file_count: int = 0
    symlink_count: int = 0
    special_count: int = 0
    subdir_count: int = 0
    total_file_bytes: int = 0

    @property
    def total(self) -> int:
        return self.file_count + self.symlink_count + self.special_count + self.subdir_count

    def count(self, kind: EntryKind, size: Optional[int] = None) -> None:
        if kind is EntryKind.FILE:
            self.file_count += 1
            if size is not None:
                self.total_file_bytes += size
        elif kind is EntryKind.SYMLINK:
            self.symlink_count += 1
        elif kind is EntryKind.SPECIAL:
            self.special_count += 1
        elif kind is EntryKind.DIRECTORY:
            self.subdir_count += 1

    def get(self, kind: EntryKind) -> int:
        return {
            EntryKind.FILE: self.file_count,
            EntryKind.SYMLINK: self.symlink_count,
            EntryKind.SPECIAL: self.special_count,
            EntryKind.DIRECTORY: self.subdir_count,
        }.get(kind, 0)

    def add(self, other: "DirectoryTally") -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def copy(self) -> "DirectoryTally":
        return DirectoryTally(**{f.name: getattr(self, f.name) for f in fields(self)})

    def as_dict(self) -> dict:
        return {
            "files": self.file_count,
            "symlinks": self.symlink_count,
            "special": self.special_count,
            "subdirectories": self.subdir_count,
            "total": self.total,
        }


@dataclass
class EmittedEntry:
    info: EntryInfo
    depth: int
    # directories only: recursive size when requested, None when unknown or not computed
    dir_size: Optional[int] = None
    matched: bool = False

    @property
    def kind(self) -> EntryKind:
        return self.info.kind

    @property
    def path(self) -> str:
        return self.info.path

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def size(self) -> Optional[int]:
        if self.info.kind is EntryKind.DIRECTORY:
            return self.dir_size
        return self.info.size


@dataclass
class RollUp:
    """Stand-in line for entries of a kind that is not shown individually."""
    directory: str
    depth: int
    kind: EntryKind
    count: int
    total_bytes: Optional[int] = None   # files only


@dataclass
class ScanReport:
    root: str
    root_tally: DirectoryTally
    cumulative_tally: DirectoryTally
    matched_tally: Optional[DirectoryTally] = None
    traversed_tally: Optional[DirectoryTally] = None
    recursive: bool = False
    complete: bool = True
    failed_dirs: List[str] = field(default_factory=list)
    elapsed_sec: float = 0.0

    @property
    def search(self) -> bool:
        return self.matched_tally is not None
