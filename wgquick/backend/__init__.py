from __future__ import annotations

from typing import Dict, Optional, Tuple, Type

from .base import NetworkingBackend, PolicyBackend
from .commands import CommandRunner
from .linux import LinuxNetworkingBackend
from .ndc import NdcPolicyBackend

# Map of supported policy daemons
_POLICY_BACKENDS: Dict[str, Type[PolicyBackend]] = {
    "ndc": NdcPolicyBackend,
}


def get_backends(driver: str = "ndc", runner: Optional[CommandRunner] = None) -> Tuple[NetworkingBackend, PolicyBackend]:
    """
    Returns the (networking, policy) backend pair sharing one CommandRunner.
    """
    key = (driver or "").strip().lower()
    cls = _POLICY_BACKENDS.get(key)
    if not cls:
        raise ValueError(f"Unsupported policy driver '{driver}'")
    runner = runner or CommandRunner()
    return LinuxNetworkingBackend(runner), cls(runner)


__all__ = [
    "CommandRunner",
    "LinuxNetworkingBackend",
    "NdcPolicyBackend",
    "NetworkingBackend",
    "PolicyBackend",
    "get_backends",
]
