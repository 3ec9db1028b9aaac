from __future__ import annotations
from typing import Optional


class ScanError(Exception):
    """Base for everything the scanner reports about the filesystem or its own setup."""

    def __init__(self, message: str, path: Optional[str] = None, cause: Optional[OSError] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ConfigError(ScanError):
    """Contradictory or incomplete options. Raised before any traversal."""


class EntryMetadataError(ScanError):
    """One metadata field (size, target, mtime, ...) of one entry could not be read."""

    def __init__(self, message: str, path: Optional[str] = None,
                 cause: Optional[OSError] = None, field: str = "status"):
        super().__init__(message, path, cause)
        self.field = field


class DirectoryIteratorError(ScanError):
    """A directory could not be opened or iterated."""


class UnclassifiableEntry(ScanError):
    """Entry is neither file, directory, symlink nor special node."""


def from_os_error(cls, exc: OSError, path: Optional[str] = None, **kw) -> ScanError:
    msg = exc.strerror or str(exc)
    return cls(msg, path=path or exc.filename, cause=exc, **kw)
