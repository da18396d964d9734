"""Operator-facing messages — all on stderr, coloured when it is a terminal."""

import sys

_GREEN = "\033[0;32m"
_YELLOW = "\033[0;33m"
_RED = "\033[0;31m"
_RESET = "\033[0m"

PREFIX = "[k2s]"


def _prefix(colour: str) -> str:
    if sys.stderr.isatty():
        return f"{colour}{PREFIX}{_RESET}"
    return PREFIX


def info(message: str) -> None:
    print(f"{_prefix(_GREEN)} {message}", file=sys.stderr)


def warn(message: str) -> None:
    print(f"{_prefix(_YELLOW)} ⚠ {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"{_prefix(_RED)} {message}", file=sys.stderr)


def section(title: str) -> None:
    """Blank line followed by a ``--- title ---`` banner."""
    print(file=sys.stderr)
    info(f"--- {title} ---")


def emit_warnings(warnings: list[str]) -> None:
    """Print collected warnings."""
    for w in warnings:
        warn(w)
