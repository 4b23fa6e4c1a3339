import sys
import os
import curses
import logging
from types import SimpleNamespace

from config_paths import LOG_PATH, ensure_config_dirs, load_config
from grid_schema import FREE_GRID_SCHEMA, PROJECT_SCHEMA
from logging_config import setup_logging

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

try:
    from _version import __version__
except ImportError:
    __version__ = "0.0.0"


USAGE = (
    "sheetlite - terminal-native project sheet\n\n"
    "Usage:\n"
    "  sheetlite [path]          open the project grid, importing path (.csv/.json)\n"
    "  sheetlite --free [path]   open the free A..Z grid\n"
    "  sheetlite -v\n"
)


def parse_args(args):
    opts = SimpleNamespace(version=False, help=False, free=False, path=None, error=None)
    for arg in args:
        if arg in ("-v", "-V", "--version"):
            opts.version = True
        elif arg in ("-h", "--help"):
            opts.help = True
        elif arg == "--free":
            opts.free = True
        elif arg.startswith("-"):
            opts.error = f"Unknown option: {arg}"
        elif opts.path is None:
            opts.path = arg
        else:
            opts.error = "Only one path may be given"
    return opts


def main():
    opts = parse_args(sys.argv[1:])

    if opts.version:
        print(__version__)
        return

    if opts.help:
        print(USAGE)
        return

    if opts.error:
        print(opts.error, file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    config = load_config()
    ensure_config_dirs()
    setup_logging(getattr(logging, config["LOG_LEVEL"], logging.INFO), log_file=LOG_PATH)

    schema = FREE_GRID_SCHEMA if opts.free else PROJECT_SCHEMA

    def curses_main(stdscr):
        Orchestrator(stdscr, schema, config=config, initial_path=opts.path).run()

    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
