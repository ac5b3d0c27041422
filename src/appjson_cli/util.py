from __future__ import annotations

import logging
import os
import sys
from typing import Dict, Iterable, List, Optional

import typer

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_stdio() -> None:
    """Make CLI output robust across Windows console encodings.

    Some Windows terminals use a non-UTF8 encoding (e.g., cp1252). Configure
    stdout/stderr to replace unencodable characters instead of crashing.
    """

    if os.name != "nt":
        return

    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(errors="replace")


def configure_logging(level: str) -> None:
    name = level.upper()
    if name not in LOG_LEVELS:
        raise typer.BadParameter(f"log level must be one of {', '.join(LOG_LEVELS)}")
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    root.setLevel(getattr(logging, name))


def parse_pairs(pairs: Optional[Iterable[str]], option: str) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` option values into a dict (later pairs win)."""
    result: Dict[str, str] = {}
    for pair in pairs or ():
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=option)
        result[key] = value
    return result


def to_command_line_args(pairs: Optional[Iterable[str]]) -> List[str]:
    return [pair if pair.startswith("--") else f"--{pair}" for pair in pairs or ()]
