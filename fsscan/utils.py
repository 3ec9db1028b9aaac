from __future__ import annotations
import logging
import os
import stat as statmod
import subprocess
import sys
import time
from typing import List, Optional

logger = logging.getLogger(__name__)

UNKNOWN = "?"
_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(num: int) -> str:
    """``1536`` -> ``"1.50 KB"``. Counts under 1 KB stay whole bytes."""
    if num < 0:
        return str(num)
    value, unit = float(num), 0
    while value >= 1024.0 and unit < len(_UNITS) - 1:
        value /= 1024.0
        unit += 1
    if unit == 0:
        return f"{num} B"
    return f"{value:.2f} {_UNITS[unit]}"


def format_size(num: Optional[int], human: bool = False) -> str:
    if num is None:
        return UNKNOWN
    return format_bytes(num) if human else str(num)


def format_permissions(mode: Optional[int]) -> str:
    if mode is None:
        return UNKNOWN * 10
    return statmod.filemode(mode)


def format_mtime(mtime: Optional[float]) -> str:
    if mtime is None:
        return UNKNOWN.ljust(19)
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(mtime))


def reveal_command(path: str, platform: str = sys.platform) -> List[str]:
    """Command line that shows ``path`` (an absolute path) in the platform file manager."""
    if platform.startswith("win"):
        return ["explorer", path] if os.path.isdir(path) else ["explorer", "/select,", path]
    if platform == "darwin":
        return ["open", "-R", path]
    # xdg-open can't select a file, so open its folder
    return ["xdg-open", path if os.path.isdir(path) else os.path.dirname(path)]


def reveal_in_file_manager(path: str) -> bool:
    """Open the file manager at ``path``. Returns False if nothing could be launched."""
    if not path:
        return False
    cmd = reveal_command(os.path.abspath(path))
    try:
        subprocess.Popen(cmd)
    except OSError as e:
        logger.debug("could not launch %s: %s", cmd[0], e)
        return False
    return True
