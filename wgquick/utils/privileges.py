"""
Privilege elevation for wg-quick.
"""
import logging
import shlex
import subprocess
from typing import Sequence

import psutil

from ..errors import WgQuickError

logger = logging.getLogger("wg-quick")


def is_privileged() -> bool:
    """True when the real uid is root."""
    return psutil.Process().uids().real == 0


def run_elevated(argv: Sequence[str]) -> int:
    """Run `argv` again under `su -p -c` and return the child's exit status."""
    logger.info("[$] su -p -c wg-quick")
    try:
        result = subprocess.run(["su", "-p", "-c", shlex.join(argv)], check=False)
    except OSError as e:
        raise WgQuickError(f"su: {e.strerror or e}", e.errno or 1) from e
    return result.returncode
