"""
Logging setup for the mdmshell command line.

Library modules only do ``logger = logging.getLogger(__name__)`` and never
touch handlers. The CLI calls configure_logging() once per invocation.

The console level comes from the first of: --debug, --verbose, --quiet,
MDMSHELL_LOG_LEVEL, WARNING. MDMSHELL_LOG_FILE adds a file that always
receives DEBUG records.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LEVEL_ENV = "MDMSHELL_LOG_LEVEL"
FILE_ENV = "MDMSHELL_LOG_FILE"

# Most detailed format first; the first entry at or above the level wins.
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_FILE_FORMAT = logging.Formatter(
    "%(asctime)s %(process)d %(levelname)s %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Pick the console level from the CLI switches, then the environment."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    env = os.environ if environ is None else environ
    name = env.get(LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    # getLevelName() hands back a string for names it doesn't know
    return level if isinstance(level, int) else logging.WARNING


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter("%(message)s")


def configure_logging(level: int = logging.WARNING, log_file: str | os.PathLike[str] | None = None) -> None:
    """
    Replace the root logger's handlers.

    Args:
        level: Console threshold.
        log_file: Extra destination that records everything from DEBUG up.
    """
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(_console_formatter(level))
    handlers: list[logging.Handler] = [console]

    if log_file:
        to_file = logging.FileHandler(log_file, encoding="utf-8")
        to_file.setLevel(logging.DEBUG)
        to_file.setFormatter(_FILE_FORMAT)
        handlers.append(to_file)

    logging.basicConfig(
        level=logging.DEBUG if log_file else level,
        handlers=handlers,
        force=True,
    )
