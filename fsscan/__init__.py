from __future__ import annotations

from .config import ScanConfig, SearchMode
from .errors import (
    ConfigError, DirectoryIteratorError, EntryMetadataError, ScanError, UnclassifiableEntry,
)
from .models import DirectoryTally, EmittedEntry, EntryInfo, EntryKind, RollUp, ScanReport, Scope, SpecialKind
from .walker import TreeWalker, scan

__version__ = "1.0.0"
