#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utilities module for wg-quick.
This module contains the CLI error helper and the name/token validation shared across modules.
"""
import re
from typing import Iterable, List, Pattern

import typer

from ..errors import PatternError


def fail(msg: str, code: int = 1) -> None:
    """Print a one-line error to stderr and exit with `code`."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(code=code)


def compile_pattern(regex: str, flags: int = 0) -> Pattern[str]:
    """Compile a regex, turning a compile failure into a fatal PatternError."""
    try:
        return re.compile(regex, flags)
    except re.error as e:
        raise PatternError(f"Regex compilation error: {e}") from e


INTERFACE_NAME_RE = compile_pattern(r"^[a-zA-Z0-9_=+.-]{1,16}$")


def is_interface_name(name: str) -> bool:
    """True when `name` is a valid interface name (1-16 of [A-Za-z0-9_=+.-])."""
    return bool(INTERFACE_NAME_RE.match(name or ""))


def split_list(value: str) -> List[str]:
    """Split a comma/whitespace separated config value, dropping empty items."""
    return [item for item in re.split(r"[,\s]+", value or "") if item]


def is_safe_token(token: str) -> bool:
    """Reject tokens that could break out of quoting (quote or backslash)."""
    return "'" not in token and "\\" not in token


def sanitize_tokens(tokens: Iterable[str]) -> List[str]:
    """Drop unsafe tokens, keeping the rest in order."""
    return [t for t in tokens if t and is_safe_token(t)]
