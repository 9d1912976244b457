#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error types for wg-quick.
Every error carries the process exit code the CLI reports for it.
"""
import errno
from typing import Optional


class WgQuickError(Exception):
    """Base error; `exit_code` is what the process exits with."""

    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InterfaceExistsError(WgQuickError):
    exit_code = 92

    def __init__(self, name: str):
        super().__init__(f"{name} already exists")
        self.name = name


class NotManagedInterfaceError(WgQuickError):
    exit_code = 43

    def __init__(self, name: str):
        super().__init__(f"{name} is not a WireGuard interface")
        self.name = name


class InvalidConfigNameError(WgQuickError):
    exit_code = 77

    def __init__(self):
        super().__init__("The config file must be a valid interface name, followed by .conf")


class PatternError(WgQuickError):
    """A built-in pattern failed to compile."""

    exit_code = 88


class ConfigOpenError(WgQuickError):
    """The configuration file could not be opened; exits with the OS errno."""

    def __init__(self, path: str, err: OSError):
        super().__init__(f"Unable to open configuration file `{path}': {err.strerror}", err.errno or 1)
        self.path = path


class CommandError(WgQuickError):
    """An external tool exited nonzero; its status becomes ours."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
        # killed by a signal: report 128 + signo, as a shell would
        code = 128 - returncode if returncode < 0 else (returncode or 1)
        super().__init__(f"`{command}' exited with status {returncode}{detail}", code)
        self.command = command
        self.returncode = returncode


class CommandTooLongError(WgQuickError):
    exit_code = errno.E2BIG

    def __init__(self, command: str, limit: int):
        super().__init__(f"command of {len(command)} bytes exceeds the {limit} byte limit: {command[:64]}...")


class NdcError(WgQuickError):
    """netd answered something other than `200 0`."""

    exit_code = 29

    def __init__(self, command: str, reply: str):
        super().__init__(reply.strip() if reply and reply.strip() else f"no reply to `{command}'")
        self.command = command
        self.reply = reply
