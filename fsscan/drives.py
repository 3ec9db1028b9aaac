from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List

import psutil

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Volume:
    mountpoint: str
    fstype: str
    total: int
    used: int
    free: int
    percent: float


def list_drives() -> List[Volume]:
    """Mounted volumes that can serve as scan roots, sorted by mountpoint.

    Partitions mounted more than once are listed once; volumes whose usage
    can't be read (unmounted media, no permission) are left out.
    """
    volumes: Dict[str, Volume] = {}
    for part in psutil.disk_partitions(all=False):
        if not part.mountpoint:
            continue
        mountpoint = os.path.abspath(part.mountpoint)
        if mountpoint in volumes:
            continue
        try:
            usage = psutil.disk_usage(mountpoint)
        except OSError as e:
            logger.debug("skipping %s: %s", mountpoint, e)
            continue
        volumes[mountpoint] = Volume(mountpoint, part.fstype, int(usage.total), int(usage.used),
                                     int(usage.free), float(usage.percent))
    return sorted(volumes.values(), key=lambda v: v.mountpoint.lower())


def estimate_total_bytes(paths: Iterable[str]) -> int:
    # Upper bound for a progress bar: a folder can't hold more than its volume's used bytes.
    total = 0
    for p in paths:
        try:
            total += int(psutil.disk_usage(p).used)
        except OSError:
            pass
    return total
