from __future__ import annotations
import logging
import os
import stat as statmod
from typing import Optional

from .errors import EntryMetadataError, UnclassifiableEntry, from_os_error
from .models import EntryInfo, EntryKind, SpecialKind

logger = logging.getLogger(__name__)


def special_kind(mode: int) -> SpecialKind:
    if statmod.S_ISSOCK(mode):
        return SpecialKind.SOCKET
    if statmod.S_ISBLK(mode):
        return SpecialKind.BLOCK_DEVICE
    if statmod.S_ISFIFO(mode):
        return SpecialKind.FIFO_PIPE
    return SpecialKind.GENERIC


def classify(path: str, name: Optional[str] = None) -> EntryInfo:
    """Classify ``path`` without following it first.

    Precedence: symlink, regular file, special node, directory. A symlink is a
    symlink whatever it points to; its target is read and followed only to fill
    display fields. Raises UnclassifiableEntry when the entry's status cannot be
    read or its type is not recognised.
    """
    if name is None:
        name = os.path.basename(path.rstrip("\\/")) or path
    try:
        st = os.lstat(path)
    except OSError as e:
        raise from_os_error(UnclassifiableEntry, e, path)

    mode = st.st_mode
    info = EntryInfo(path=path, name=name, kind=EntryKind.UNKNOWN, mode=mode)
    info.mtime = getattr(st, "st_mtime", None)

    if statmod.S_ISLNK(mode):
        info.kind = EntryKind.SYMLINK
        try:
            info.target = os.readlink(path)
        except OSError as e:
            info.errors.append(from_os_error(EntryMetadataError, e, path, field="target"))
        try:
            info.target_is_dir = statmod.S_ISDIR(os.stat(path).st_mode)
        except OSError as e:
            # dangling or looping link
            info.errors.append(from_os_error(EntryMetadataError, e, path, field="target_status"))
    elif statmod.S_ISREG(mode):
        info.kind = EntryKind.FILE
        size = getattr(st, "st_size", None)
        if size is None or size < 0:
            info.errors.append(EntryMetadataError("size unavailable", path, field="size"))
        else:
            info.size = int(size)
    elif statmod.S_ISDIR(mode):
        info.kind = EntryKind.DIRECTORY
    elif statmod.S_IFMT(mode) != 0:
        info.kind = EntryKind.SPECIAL
        info.special = special_kind(mode)
    else:
        raise UnclassifiableEntry("file type can not be determined", path)

    if info.errors:
        logger.debug("classify %s: %d metadata error(s)", path, len(info.errors))
    return info
