"""Command-line front door for permview.

Parses CLI options, resolves the starting directory and logging, then either
prints a one-shot listing or launches the interactive browser.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .app import run_browser
from .config import load_margin, load_theme_name
from .loader import DirectoryLoader
from .render import CHROME_LINES, render_entry_row
from .theme import available_theme_names, resolve_theme

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _margin(value: str) -> int:
    """argparse type for chrome margins; the header and footer need four lines."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < CHROME_LINES:
        raise argparse.ArgumentTypeError(f"value must be >= {CHROME_LINES}")
    return parsed


def configure_logging(log_file: Path | None, verbose: bool = False) -> None:
    """Send package logs to ``log_file``; without one they stay silent.

    The interactive UI owns the terminal, so logs never go to stderr.
    """
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("permview")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def render_listing(path: Path, theme_name: str | None, no_color: bool) -> str:
    """Render every entry of ``path`` once, without selection highlight."""
    theme = resolve_theme(theme_name, no_color=no_color)
    result = DirectoryLoader().load_sync("listing", path)
    out: list[str] = []
    for entry in result.entries:
        out.append(render_entry_row(entry, theme))
        out.append("\n")
    return "".join(out)


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and browse a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = argparse.ArgumentParser(
        description="Browse a directory in the terminal with coloured permissions."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to browse. Defaults to current directory.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"Theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--margin",
        type=_margin,
        default=None,
        help=f"Lines reserved for header and footer chrome (minimum {CHROME_LINES}).",
    )
    parser.add_argument("--list", action="store_true", help="Print the listing once and exit.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug log to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages.")
    args = parser.parse_args()

    configure_logging(args.log_file, args.verbose)

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")
    path = path.resolve()

    theme_name = args.theme if args.theme is not None else load_theme_name()
    no_color = args.no_color or "NO_COLOR" in os.environ

    if args.list or not os.isatty(sys.stdin.fileno()):
        sys.stdout.write(render_listing(path, theme_name, no_color))
        return

    margin = args.margin if args.margin is not None else load_margin()
    run_browser(path, theme_name, no_color, margin)


if __name__ == "__main__":
    main()
