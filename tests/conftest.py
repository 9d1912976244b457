from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set

import pytest

from wgquick.backend.base import NetworkingBackend, PolicyBackend
from wgquick.backend.commands import CommandRunner
from wgquick.errors import CommandError, NdcError
from wgquick.models import Endpoint, Route


@pytest.fixture(autouse=True)
def _isolate_tool_config(monkeypatch, tmp_path):
    """Keep tests away from /data/misc/wireguard and drop CLI log handlers afterwards."""
    monkeypatch.setenv("WG_QUICK_CONFIG", str(tmp_path / "no-such-wg-quick.json"))
    monkeypatch.delenv("WG_QUICK_CONFIG_DIR", raising=False)
    yield
    logger = logging.getLogger("wg-quick")
    for handler in list(logger.handlers):
        if getattr(handler, "_wg_quick_handler", False):
            logger.removeHandler(handler)


class FakeHost:
    """In-memory host: links, netd networks and routing rules, plus a call journal."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.links: Set[str] = set()
        self.wg_links: Set[str] = set()
        self.configs: Dict[str, str] = {}
        self.mtus: Dict[str, int] = {}
        self.ipv4: Dict[str, List[tuple]] = {}
        self.ipv6: Dict[str, List[str]] = {}
        self.networks: Dict[int, dict] = {}
        self.rules: Dict[str, int] = {}
        self.endpoints: Dict[str, List[Endpoint]] = {}
        self.allowed: Dict[str, List[str]] = {}
        self.default: Optional[Route] = Route(device_index=1)
        self.routes: Dict[str, Route] = {}
        self.device_mtus: Dict[int, int] = {1: 1500}
        self.fail_on: Set[str] = set()


class FakeNetworking(NetworkingBackend):
    def __init__(self, host: FakeHost, runner: CommandRunner):
        self.host = host
        self.runner = runner

    def _op(self, op: str, *args) -> bool:
        """Record the call; False when the op is failing and a cleanup swallowed it."""
        self.host.calls.append((op, *args))
        if op in self.host.fail_on:
            if self.runner.cleaning_up:
                return False
            raise CommandError(op, 2)
        return True

    def interface_exists(self, name):
        return name in self.host.links

    def create_interface(self, name):
        if self._op("create_interface", name):
            self.host.links.add(name)
            self.host.wg_links.add(name)

    def delete_interface(self, name):
        if self._op("delete_interface", name):
            self.host.links.discard(name)
            self.host.wg_links.discard(name)
            for addrs in (self.host.ipv4, self.host.ipv6, self.host.mtus, self.host.configs):
                addrs.pop(name, None)

    def wireguard_interfaces(self):
        return sorted(self.host.wg_links)

    def set_config(self, name, body):
        if self._op("set_config", name, body):
            self.host.configs[name] = body

    def set_fwmark(self, name, mark):
        self._op("set_fwmark", name, mark)

    def peer_endpoints(self, name):
        return list(self.host.endpoints.get(name, []))

    def allowed_ips(self, name):
        return list(self.host.allowed.get(name, []))

    def default_route(self):
        return self.host.default

    def route_to(self, address):
        return self.host.routes.get(address)

    def device_mtu(self, index):
        return self.host.device_mtus.get(index)

    def add_ipv6_address(self, name, address):
        if self._op("add_ipv6_address", name, address):
            self.host.ipv6.setdefault(name, []).append(address)

    def network_id_for(self, name):
        return self.host.rules.get(name)


class FakePolicy(PolicyBackend):
    def __init__(self, host: FakeHost, runner: CommandRunner):
        self.host = host
        self.runner = runner

    def _op(self, op: str, *args) -> bool:
        self.host.calls.append((op, *args))
        if op in self.host.fail_on:
            if self.runner.cleaning_up:
                return False
            raise NdcError(op, "400 0 Failed")
        return True

    def interface_up(self, name):
        self._op("interface_up", name)

    def set_mtu(self, name, mtu):
        if self._op("set_mtu", name, mtu):
            self.host.mtus[name] = mtu

    def enable_ipv6(self, name):
        self._op("enable_ipv6", name)

    def set_ipv4_address(self, name, host, prefix):
        if self._op("set_ipv4_address", name, host, prefix):
            self.host.ipv4.setdefault(name, []).append((host, prefix))

    def create_vpn_network(self, network_id):
        if self._op("create_vpn_network", network_id):
            self.host.networks[network_id] = {"interfaces": [], "dns": [], "routes": []}

    def add_network_interface(self, network_id, name):
        if self._op("add_network_interface", network_id, name):
            self.host.networks[network_id]["interfaces"].append(name)
            self.host.rules[name] = network_id

    def add_network_users(self, network_id, uid_range):
        self._op("add_network_users", network_id, uid_range)

    def set_dns(self, network_id, servers: Sequence[str]):
        if self._op("set_dns", network_id, list(servers)):
            self.host.networks[network_id]["dns"] = list(servers)

    def add_route(self, network_id, name, cidr):
        if self._op("add_route", network_id, name, cidr):
            self.host.networks[network_id]["routes"].append(cidr)

    def destroy_network(self, network_id):
        if self._op("destroy_network", network_id):
            self.host.networks.pop(network_id, None)
            for name, nid in list(self.host.rules.items()):
                if nid == network_id:
                    del self.host.rules[name]


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def runner():
    return CommandRunner()


@pytest.fixture
def networking(host, runner):
    return FakeNetworking(host, runner)


@pytest.fixture
def policy(host, runner):
    return FakePolicy(host, runner)
