from __future__ import annotations
import logging
import os
import stat as statmod
from typing import Callable, List, Optional

from .errors import DirectoryIteratorError, EntryMetadataError, ScanError, from_os_error

logger = logging.getLogger(__name__)

ErrorCb = Callable[[ScanError], None]


def dir_size(path: str, on_error: Optional[ErrorCb] = None) -> Optional[int]:
    """Apparent size in bytes of everything below ``path``.

    Symlinks are never followed, so a link back to an ancestor cannot loop.
    Returns None only when ``path`` itself cannot be listed; unreadable entries
    and subdirectories further down are reported through ``on_error`` and the
    partial sum is kept.
    """
    try:
        it = os.scandir(path)
    except OSError as e:
        _report(on_error, from_os_error(DirectoryIteratorError, e, path))
        return None

    # subdirectories still to be listed; one directory handle is open at a time
    pending: List[str] = []
    with it:
        total = _sum_entries(path, it, pending, on_error)
    while pending:
        sub = pending.pop()
        try:
            it = os.scandir(sub)
        except OSError as e:
            _report(on_error, from_os_error(DirectoryIteratorError, e, sub))
            continue
        with it:
            total += _sum_entries(sub, it, pending, on_error)
    return total


def _sum_entries(path: str, it, pending: List[str], on_error: Optional[ErrorCb]) -> int:
    total = 0
    while True:
        try:
            entry = next(it)
        except StopIteration:
            break
        except OSError as e:
            _report(on_error, from_os_error(DirectoryIteratorError, e, path))
            break

        try:
            st = entry.stat(follow_symlinks=False)
        except OSError as e:
            _report(on_error, from_os_error(EntryMetadataError, e, entry.path, field="size"))
            continue

        mode = st.st_mode
        if statmod.S_ISLNK(mode):
            continue
        if statmod.S_ISREG(mode):
            total += int(st.st_size)
        elif statmod.S_ISDIR(mode):
            pending.append(entry.path)
    return total


def _report(on_error: Optional[ErrorCb], err: ScanError) -> None:
    logger.debug("dir_size: %s", err)
    if on_error:
        on_error(err)
