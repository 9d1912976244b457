"""
Command Runner
==============
Synchronous execution of the external tools wg-quick drives (`wg`, `ip`, `ndc`).
Mutating commands are echoed as `[#] <command>`; queries are not.
"""

from __future__ import annotations

import contextlib
import logging
import shlex
import subprocess
from typing import Iterator, List, Optional, Sequence

from ..errors import CommandError, CommandTooLongError

logger = logging.getLogger("wg-quick")

MAX_COMMAND_LENGTH = 8192


def format_command(argv: Sequence[str]) -> str:
    """Shell-quoted rendering of argv, used for echoing and length checks."""
    return shlex.join([str(a) for a in argv])


class CommandRunner:
    """Runs commands one at a time; nonzero exits are fatal unless a cleanup is unwinding."""

    def __init__(self, max_length: int = MAX_COMMAND_LENGTH):
        self.max_length = max_length
        self.cleaning_up = False

    @contextlib.contextmanager
    def suppress_failures(self) -> Iterator[None]:
        """Swallow command failures while the block runs (cleanup path)."""
        previous = self.cleaning_up
        self.cleaning_up = True
        try:
            yield
        finally:
            self.cleaning_up = previous

    def check_length(self, argv: Sequence[str]) -> str:
        line = format_command(argv)
        if len(line.encode("utf-8")) >= self.max_length:
            raise CommandTooLongError(line, self.max_length)
        return line

    def echo(self, line: str) -> None:
        logger.info("[#] %s", line)

    def run(self, argv: Sequence[str], input: Optional[str] = None) -> str:
        """Run a mutating command, echoing it first. Returns stdout."""
        line = self.check_length(argv)
        self.echo(line)
        result = self._execute(argv, line, input)
        if result.returncode != 0:
            error = CommandError(line, result.returncode, result.stderr)
            if self.cleaning_up:
                logger.warning("Ignoring failure during cleanup: %s", error)
                return result.stdout or ""
            raise error
        return result.stdout or ""

    def output(self, argv: Sequence[str]) -> List[str]:
        """Run a query and return its stdout lines; a failing query yields what it printed."""
        line = self.check_length(argv)
        result = self._execute(argv, line, None)
        if result.returncode != 0:
            logger.debug("Query `%s' exited %d: %s", line, result.returncode, (result.stderr or "").strip())
        return (result.stdout or "").splitlines()

    def _execute(self, argv: Sequence[str], line: str, input: Optional[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [str(a) for a in argv],
                input=input,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
            )
        except OSError as e:
            if self.cleaning_up:
                logger.warning("Ignoring failure during cleanup: %s: %s", line, e)
                return subprocess.CompletedProcess(list(argv), e.errno or 1, "", str(e))
            raise CommandError(line, e.errno or 1, e.strerror or str(e)) from e
