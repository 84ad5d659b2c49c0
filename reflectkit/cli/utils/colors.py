"""
reflectkit CLI - styled output primitives built on Click.

    success(), error(), warning(), info(), dim(), bold()
    section()  - section divider with title
    kv()       - aligned key-value pair
    badge()    - inline status badge  [OK]  [FAIL]  [SKIP]

click.style handles NO_COLOR / TERM=dumb.
"""

from __future__ import annotations

import shutil
from typing import Optional

import click

_TERM_WIDTH: Optional[int] = None


def _tw() -> int:
    """Terminal width, cached and clamped to a sane range."""
    global _TERM_WIDTH
    if _TERM_WIDTH is None:
        _TERM_WIDTH = max(40, min(shutil.get_terminal_size((80, 24)).columns, 120))
    return _TERM_WIDTH


def success(message: str) -> None:
    click.echo(click.style(message, fg="green"))


def error(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)


def warning(message: str) -> None:
    click.echo(click.style(message, fg="yellow"))


def info(message: str) -> None:
    click.echo(click.style(message, fg="cyan"))


def dim(message: str) -> None:
    click.echo(click.style(message, dim=True))


def bold(message: str) -> str:
    """Return bold-styled text (does not echo)."""
    return click.style(message, bold=True)


_L_H = "\u2500"        # ─
_CHECK = "\u2713"      # ✓
_CROSS = "\u2717"      # ✗
_CIRCLE = "\u25cb"     # ○


def section(title: str, *, width: Optional[int] = None, fg: str = "cyan") -> None:
    """
    Print a section header with a ruled line.

        ── Members ─────────────────────────────────
    """
    w = width or _tw()
    dashes = max(4, w - len(title) - 6)
    click.echo(click.style(f"{_L_H}{_L_H} {title} {_L_H * dashes}", fg=fg, bold=True))


def kv(
    key: str,
    value: str,
    *,
    key_width: int = 20,
    indent: int = 2,
    key_fg: str = "white",
    val_fg: str = "cyan",
) -> None:
    """
    Print an aligned key-value pair.

        Namespace:        app.plugins
        Found:            3
    """
    prefix = " " * indent
    k = click.style(f"{key}:", fg=key_fg)
    v = click.style(str(value), fg=val_fg)
    padding = " " * max(1, key_width - len(key) - 1)
    click.echo(f"{prefix}{k}{padding}{v}")


def badge(label: str, *, style: str = "ok") -> str:
    """Return an inline badge string (not echoed)."""
    colours = {
        "ok":   ("green",  f" {_CHECK} "),
        "fail": ("red",    f" {_CROSS} "),
        "skip": ("yellow", f" {_CIRCLE} "),
    }
    fg, icon = colours.get(style, ("white", " "))
    return click.style(f"[{icon}{label}]", fg=fg)
