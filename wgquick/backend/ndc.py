"""
ndc Policy Backend
==================
Talks to Android's netd through `ndc`. netd answers each command with a status line;
anything other than `200 0` on the first line is fatal.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..errors import CommandError, NdcError
from .base import PolicyBackend
from .commands import CommandRunner

logger = logging.getLogger("wg-quick")

NDC_OK = "200 0"


class NdcPolicyBackend(PolicyBackend):
    """PolicyBackend implemented with `ndc` commands."""

    def __init__(self, runner: CommandRunner, ndc_bin: str = "ndc"):
        self.runner = runner
        self.ndc_bin = ndc_bin

    def call(self, *args) -> str:
        """Run `ndc <args>` and return netd's reply line."""
        argv: List[str] = [self.ndc_bin, *[str(a) for a in args]]
        line = self.runner.check_length(argv)
        self.runner.echo(line)
        try:
            reply = self.runner.output(argv)
        except CommandError as e:
            if self.runner.cleaning_up:
                logger.warning("Ignoring failure during cleanup: %s", e)
                return ""
            raise
        first = reply[0] if reply else ""
        if NDC_OK not in first:
            if self.runner.cleaning_up:
                logger.warning("Ignoring netd reply during cleanup: %s", first or "(none)")
                return first
            raise NdcError(line, first)
        return first

    def interface_up(self, name: str) -> None:
        self.call("interface", "setcfg", name, "up")

    def set_mtu(self, name: str, mtu: int) -> None:
        self.call("interface", "setmtu", name, mtu)

    def enable_ipv6(self, name: str) -> None:
        self.call("interface", "ipv6", name, "enable")

    def set_ipv4_address(self, name: str, host: str, prefix: int) -> None:
        self.call("interface", "setcfg", name, host, prefix)

    def create_vpn_network(self, network_id: int) -> None:
        # secure=1, bypassable=1
        self.call("network", "create", network_id, "vpn", 1, 1)

    def add_network_interface(self, network_id: int, name: str) -> None:
        self.call("network", "interface", "add", network_id, name)

    def add_network_users(self, network_id: int, uid_range: str) -> None:
        self.call("network", "users", "add", network_id, uid_range)

    def set_dns(self, network_id: int, servers: Sequence[str]) -> None:
        # empty search-domain list precedes the servers
        self.call("resolver", "setnetdns", network_id, "", *servers)

    def add_route(self, network_id: int, name: str, cidr: str) -> None:
        self.call("network", "route", "add", network_id, name, cidr)

    def destroy_network(self, network_id: int) -> None:
        self.call("network", "destroy", network_id)
