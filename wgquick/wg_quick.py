#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.
from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

import click
import typer

from wgquick.cli import CLICommands
from wgquick.config import ConfigManager
from wgquick.errors import WgQuickError
from wgquick.utils import privileges
from wgquick.utils.validation import fail

# Global variables
logger = logging.getLogger("wg-quick")
logger.setLevel(logging.INFO)
PROG_NAME = "wg-quick"
HELP_ARGS = ("help", "--help", "-h")
COMMANDS = ("up", "down")
USAGE = """Usage: {prog} [ up | down ] [ CONFIG_FILE | INTERFACE ]

  CONFIG_FILE is a configuration file, whose filename is the interface name
  followed by `.conf'. Otherwise, INTERFACE is an interface name, with
  configuration found at {config_dir}/INTERFACE.conf. It is to be readable
  by wg(8)'s `setconf' sub-command, with the exception of the following additions
  to the [Interface] section, which are handled by {prog}:

  - Address: may be specified one or more times and contains one or more
    IP addresses (with an optional CIDR mask) to be set for the interface.
  - MTU: an optional MTU for the interface; if unspecified, auto-calculated.
  - DNS: an optional DNS server to use while the device is up.

See wg-quick(8) for more info and examples."""
# Global configuration
TOOL_CFG: Dict[str, Any] = {}
_HANDLER_TAG = "_wg_quick_handler"


class _BelowLevel(logging.Filter):
    """Pass records strictly below `level` (stdout gets INFO, stderr gets the rest)."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _apply_logging_from_cfg(cfg: Dict[str, Any]) -> None:
    """Apply logging configuration from tool config."""
    log_cfg = cfg.get("logging", {}) or {}
    level = str(log_cfg.get("level", "INFO")).upper()
    try:
        logger.setLevel(getattr(logging, level))
    except AttributeError:
        logger.setLevel(logging.INFO)
    formatter = logging.Formatter(log_cfg.get("format") or "%(message)s")
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
    out = logging.StreamHandler(sys.stdout)
    out.addFilter(_BelowLevel(logging.WARNING))
    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.WARNING)
    for handler in (out, err):
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)


def usage(cfg: Optional[Dict[str, Any]] = None) -> str:
    config_dir = (cfg or TOOL_CFG).get("config_dir") or "/data/misc/wireguard"
    return USAGE.format(prog=PROG_NAME, config_dir=config_dir)


def _elevate(args: Sequence[str]) -> None:
    """Re-run the whole invocation under su unless already root."""
    if privileges.is_privileged():
        return
    try:
        code = privileges.run_elevated([sys.executable, "-m", "wgquick", *args])
    except WgQuickError as e:
        fail(str(e), e.exit_code)
    raise typer.Exit(code=code)


# CLI interface
cli = typer.Typer(add_completion=False, context_settings={"help_option_names": []})


@cli.command()
def up(target: str):
    """Bring an interface up."""
    _elevate(["up", target])
    CLICommands(TOOL_CFG).up(target)


@cli.command()
def down(target: str):
    """Tear an interface down."""
    _elevate(["down", target])
    CLICommands(TOOL_CFG).down(target)


@cli.command("help")
def help_():
    """Print usage."""
    typer.echo(usage())


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    global TOOL_CFG
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        TOOL_CFG = ConfigManager().load_tool_config()
    except RuntimeError as e:
        typer.echo(f"Error: {e}", err=True)
        return 1
    _apply_logging_from_cfg(TOOL_CFG)
    if len(args) == 1 and args[0] in HELP_ARGS:
        typer.echo(usage())
        return 0
    if len(args) != 2 or args[0] not in COMMANDS:
        typer.echo(usage())
        return 1
    try:
        # "--" keeps a target such as "-x.conf" from being parsed as an option
        return cli(args=[args[0], "--", args[1]], prog_name=PROG_NAME, standalone_mode=False) or 0
    except click.ClickException:
        typer.echo(usage())
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
