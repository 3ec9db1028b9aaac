from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import ScanConfig
from .errors import ConfigError
from .sinks import TextReportSink
from .utils import format_bytes
from .walker import scan

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_PATH = 1
EXIT_CONFIG = 2


def _depth(value: str) -> int:
    if not value.isdigit():
        raise argparse.ArgumentTypeError(
            f'Invalid value for recursion depth "{value}". Please provide a positive whole number')
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsscan",
        description="Scan through the filesystem starting from PATH.",
        epilog='Example: fsscan ".." --recursive --files',
    )
    parser.add_argument("path", nargs="?", default=".", help="Directory to start from (default: current directory).")
    parser.add_argument("-r", "--recursive", nargs="?", const=0, default=None, type=_depth, metavar="N",
                        help="Recursively go through directories, at most N levels deep (0 or omitted: no limit).")
    parser.add_argument("-p", "--permissions", action="store_true", help="Show permissions of each entry.")
    parser.add_argument("-t", "--mtime", action="store_true", help="Show modification time of each entry.")
    parser.add_argument("-H", "--hidden", action="store_true", help="Show hidden entries.")

    kinds = parser.add_argument_group("entry kinds")
    kinds.add_argument("-f", "--files", action="store_true", help="Show regular files (normally rolled up).")
    kinds.add_argument("-l", "--symlinks", action="store_true", help="Show symlinks.")
    kinds.add_argument("-s", "--special", action="store_true",
                       help="Show special files such as sockets, pipes, etc. (normally rolled up).")
    kinds.add_argument("-d", "--dir-size", action="store_true", help="Compute and show the size of each directory.")

    search = parser.add_argument_group("search")
    search.add_argument("-S", "--search", metavar="PATTERN",
                        help="Only log entries whose name matches PATTERN exactly.")
    search.add_argument("--search-noext", metavar="PATTERN",
                        help="Only log entries whose name, excluding extension, matches PATTERN exactly.")
    search.add_argument("--contains", metavar="PATTERN", help="Only log entries whose name contains PATTERN.")

    out = parser.add_argument_group("output")
    paths = out.add_mutually_exclusive_group()
    paths.add_argument("-a", "--absolute", action="store_true", help="Print absolute paths instead of indented names.")
    paths.add_argument("-R", "--relative", action="store_true",
                       help="Print paths relative to PATH instead of indented names.")
    out.add_argument("--human", action="store_true", help="Human readable sizes.")
    out.add_argument("-e", "--errors", action="store_true", help="Report entries and directories that could not be read.")
    out.add_argument("-v", "--verbose", action="store_true", help="Verbose logging.")

    parser.add_argument("--list-drives", action="store_true", help="List mounted volumes and exit.")
    parser.add_argument("--gui", action="store_true", help="Open the desktop viewer.")
    return parser


def print_drives() -> None:
    from .drives import list_drives

    for v in list_drives():
        print(f"{v.mountpoint:<30} {v.fstype:<8} total {format_bytes(v.total):>10}  "
              f"used {format_bytes(v.used):>10}  free {format_bytes(v.free):>10}  ({v.percent:.0f}%)")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.list_drives:
        print_drives()
        return EXIT_OK

    if args.gui:
        from .app import run
        run(args.path)
        return EXIT_OK

    try:
        config = ScanConfig.from_args(args)
    except ConfigError as e:
        print(f"{e}\nTerminating...", file=sys.stderr)
        return EXIT_CONFIG

    root = args.path
    if not os.path.exists(root):
        print(f'The given path "{root}" does not exist\nTerminating...', file=sys.stderr)
        return EXIT_BAD_PATH
    if not os.path.isdir(root):
        print("The given path is not to a directory\nTerminating...", file=sys.stderr)
        return EXIT_BAD_PATH

    logger.debug("config: %s", config)
    sink = TextReportSink(config, root, human_sizes=args.human)
    scan(root, config, sink)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
