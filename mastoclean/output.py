#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Console output helpers for mastoclean (rich based).
"""

from __future__ import annotations
from typing import List, Optional, Tuple, Union

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from mastoclean.constants import BANNER, PROJECT_URL, TAGLINE

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

Cell = Union[str, Text]


def p(text: str = "") -> None:
    """Print a plain line to stdout."""
    console.print(Text(text), soft_wrap=True)


def print_banner(banner_style: Optional[str] = None, url_style: Optional[str] = None) -> None:
    console.print(BANNER, style=banner_style, highlight=False, markup=False)
    p("")
    console.print(PROJECT_URL, style=url_style, highlight=False, markup=False)
    p("")
    p(TAGLINE)
    p("")


def kv_table(title_str: str, rows: List[Tuple[str, Cell]]) -> None:
    t = Table(title=title_str, box=box.SIMPLE_HEAVY, show_header=False, title_style="bold")
    t.add_column("Key", style="bold")
    t.add_column("Value")
    for k, v in rows:
        t.add_row(k, v)
    console.print(t)


def table(title_str: str, headers: List[str], rows: List[List[Cell]]) -> None:
    t = Table(title=title_str, box=box.SIMPLE_HEAVY, header_style="bold", title_style="bold")
    for h in headers:
        t.add_column(h, overflow="fold")
    for r in rows:
        t.add_row(*r)
    console.print(t)


def status_text(ok: bool) -> Text:
    """Green OK / red FAILED cell for result tables."""
    return Text("OK", style="green") if ok else Text("FAILED", style="bold red")
