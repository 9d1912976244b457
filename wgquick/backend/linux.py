"""
Linux Networking Backend
========================
Links, addresses and route lookups through pyroute2; WireGuard state through `wg(8)`;
netd's per-network routing rules through `ip rule show`.
"""

from __future__ import annotations

import logging
import re
import socket
from typing import List, Optional

from pyroute2 import IPRoute, NetlinkError

from ..errors import CommandError
from ..models import Endpoint, Route
from ..utils.validation import compile_pattern
from .base import NetworkingBackend
from .commands import CommandRunner

logger = logging.getLogger("wg-quick")

ENDPOINT_RE = compile_pattern(r"^\[?([a-z0-9:.]+)\]?:([0-9]+)$")


def parse_endpoints(lines: List[str]) -> List[Endpoint]:
    """Parse `wg show <iface> endpoints` output (`<pubkey>\\t<host>:<port>` per peer)."""
    endpoints: List[Endpoint] = []
    for line in lines:
        _, sep, value = line.partition("\t")
        if not sep:
            continue
        m = ENDPOINT_RE.match(value.strip())
        if not m:
            continue
        endpoints.append(Endpoint(host=m.group(1), port=int(m.group(2))))
    return endpoints


def parse_allowed_ips(lines: List[str]) -> List[str]:
    """Parse `wg show <iface> allowed-ips` output (`<pubkey>\\t<cidr> <cidr> ...` per peer)."""
    ranges: List[str] = []
    for line in lines:
        _, sep, value = line.partition("\t")
        if not sep:
            continue
        for cidr in value.split():
            if cidr == "(none)":
                continue
            ranges.append(cidr)
    return ranges


def parse_network_id(lines: List[str], name: str) -> Optional[int]:
    """Find netd's `fwmark 0xc<id>/0xcffff lookup <name>` rule and decode the network id."""
    regex = compile_pattern(r"0xc([0-9a-f]+)/0xcffff lookup " + re.escape(name) + r"(?:\s|$)")
    for line in lines:
        m = regex.search(line)
        if m:
            return int(m.group(1), 16)
    return None


def _route_from_message(msg) -> Route:
    mtu = None
    metrics = msg.get_attr("RTA_METRICS")
    if metrics is not None:
        mtu = metrics.get_attr("RTAX_MTU")
    oif = msg.get_attr("RTA_OIF")
    if oif is None:
        # multipath routes carry the device on each nexthop; take the first
        hops = msg.get_attr("RTA_MULTIPATH") or []
        if hops:
            oif = hops[0].get("oif")
    return Route(device_index=oif, mtu=mtu or None)


class LinuxNetworkingBackend(NetworkingBackend):
    """Networking backend for a Linux/Android host."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def _echo(self, *argv: str) -> None:
        self.runner.echo(self.runner.check_length(argv))

    def _index(self, ip: IPRoute, name: str) -> Optional[int]:
        idx = ip.link_lookup(ifname=name)
        return idx[0] if idx else None

    def interface_exists(self, name: str) -> bool:
        ip = IPRoute()
        try:
            return self._index(ip, name) is not None
        finally:
            ip.close()

    def create_interface(self, name: str) -> None:
        self._echo("ip", "link", "add", name, "type", "wireguard")
        ip = IPRoute()
        try:
            ip.link("add", ifname=name, kind="wireguard")
        except NetlinkError as e:
            raise CommandError(f"ip link add {name} type wireguard", e.code, str(e)) from e
        finally:
            ip.close()

    def delete_interface(self, name: str) -> None:
        self._echo("ip", "link", "del", name)
        ip = IPRoute()
        try:
            idx = self._index(ip, name)
            if idx is None:
                raise NetlinkError(19, f"Cannot find device {name}")
            ip.link("del", index=idx)
        except NetlinkError as e:
            if self.runner.cleaning_up:
                logger.warning("Ignoring failure during cleanup: ip link del %s: %s", name, e)
                return
            raise CommandError(f"ip link del {name}", e.code, str(e)) from e
        finally:
            ip.close()

    def wireguard_interfaces(self) -> List[str]:
        names: List[str] = []
        for line in self.runner.output(["wg", "show", "interfaces"]):
            names.extend(line.split())
        return names

    def set_config(self, name: str, body: str) -> None:
        self.runner.run(["wg", "setconf", name, "/proc/self/fd/0"], input=body)

    def set_fwmark(self, name: str, mark: int) -> None:
        self.runner.run(["wg", "set", name, "fwmark", f"0x{mark:x}"])

    def peer_endpoints(self, name: str) -> List[Endpoint]:
        return parse_endpoints(self.runner.output(["wg", "show", name, "endpoints"]))

    def allowed_ips(self, name: str) -> List[str]:
        return parse_allowed_ips(self.runner.output(["wg", "show", name, "allowed-ips"]))

    def default_route(self) -> Optional[Route]:
        ip = IPRoute()
        try:
            routes = list(ip.get_default_routes(family=socket.AF_INET))
        except NetlinkError as e:
            logger.debug("default route lookup failed: %s", e)
            return None
        finally:
            ip.close()
        return _route_from_message(routes[0]) if routes else None

    def route_to(self, address: str) -> Optional[Route]:
        family = socket.AF_INET6 if ":" in address else socket.AF_INET
        ip = IPRoute()
        try:
            routes = list(ip.route("get", dst=address, family=family))
        except NetlinkError as e:
            logger.debug("route lookup for %s failed: %s", address, e)
            return None
        finally:
            ip.close()
        return _route_from_message(routes[0]) if routes else None

    def device_mtu(self, index: int) -> Optional[int]:
        ip = IPRoute()
        try:
            links = ip.get_links(index)
        except NetlinkError as e:
            logger.debug("link lookup for index %s failed: %s", index, e)
            return None
        finally:
            ip.close()
        if not links:
            return None
        mtu = links[0].get_attr("IFLA_MTU")
        return mtu if mtu and mtu > 0 else None

    def add_ipv6_address(self, name: str, address: str) -> None:
        self._echo("ip", "-6", "addr", "add", address, "dev", name)
        host, _, prefix = address.partition("/")
        ip = IPRoute()
        try:
            idx = self._index(ip, name)
            if idx is None:
                raise NetlinkError(19, f"Cannot find device {name}")
            ip.addr("add", index=idx, address=host, prefixlen=int(prefix) if prefix.isdigit() else 128)
        except NetlinkError as e:
            if self.runner.cleaning_up:
                logger.warning("Ignoring failure during cleanup: ip -6 addr add %s: %s", address, e)
                return
            raise CommandError(f"ip -6 addr add {address} dev {name}", e.code, str(e)) from e
        finally:
            ip.close()

    def network_id_for(self, name: str) -> Optional[int]:
        return parse_network_id(self.runner.output(["ip", "rule", "show"]), name)
