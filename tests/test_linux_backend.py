from __future__ import annotations

import pytest
from pyroute2 import NetlinkError

from wgquick.backend import linux
from wgquick.backend.commands import CommandRunner
from wgquick.backend.linux import LinuxNetworkingBackend, parse_allowed_ips, parse_endpoints, parse_network_id
from wgquick.errors import CommandError
from wgquick.models import Endpoint


class Msg:
    def __init__(self, **attrs):
        self.attrs = attrs

    def get_attr(self, name):
        return self.attrs.get(name)

    def get(self, name):
        return self.attrs.get(name)


class FakeIPRoute:
    links = {"lo": (1, 65536), "eth0": (2, 1500)}
    routes = {}
    default = [Msg(RTA_OIF=2)]
    ops = []

    def link_lookup(self, ifname):
        return [self.links[ifname][0]] if ifname in self.links else []

    def link(self, cmd, **kwargs):
        FakeIPRoute.ops.append(("link", cmd, kwargs))
        if cmd == "add":
            if kwargs["ifname"] in self.links:
                raise NetlinkError(17, "File exists")
            self.links[kwargs["ifname"]] = (len(self.links) + 1, 1420)
        elif cmd == "del":
            for name, (idx, _) in list(self.links.items()):
                if idx == kwargs["index"]:
                    del self.links[name]

    def addr(self, cmd, **kwargs):
        FakeIPRoute.ops.append(("addr", cmd, kwargs))

    def get_default_routes(self, family):
        return list(self.default)

    def route(self, cmd, dst, family):
        if dst not in self.routes:
            raise NetlinkError(101, "Network is unreachable")
        return [self.routes[dst]]

    def get_links(self, index):
        return [Msg(IFLA_MTU=mtu) for idx, mtu in self.links.values() if idx == index]

    def close(self):
        pass


@pytest.fixture
def backend(monkeypatch):
    FakeIPRoute.links = {"lo": (1, 65536), "eth0": (2, 1500)}
    FakeIPRoute.routes = {}
    FakeIPRoute.default = [Msg(RTA_OIF=2)]
    FakeIPRoute.ops = []
    monkeypatch.setattr(linux, "IPRoute", FakeIPRoute)
    return LinuxNetworkingBackend(CommandRunner())


def test_parse_endpoints_strips_brackets_and_port():
    lines = [
        "pubA=\t192.0.2.1:51820",
        "pubB=\t[2001:db8::1]:443",
        "pubC=\t(none)",
        "garbage",
    ]
    assert parse_endpoints(lines) == [Endpoint("192.0.2.1", 51820), Endpoint("2001:db8::1", 443)]


def test_parse_allowed_ips():
    lines = ["pubA=\t10.0.0.0/24 10.1.0.0/16", "pubB=\t(none)", "pubC=\t::/0"]
    assert parse_allowed_ips(lines) == ["10.0.0.0/24", "10.1.0.0/16", "::/0"]


def test_parse_network_id_matches_exact_interface():
    lines = [
        "0:\tfrom all lookup local",
        "13000:\tfrom all fwmark 0xc1066/0xcffff lookup wg0x",
        "13000:\tfrom all fwmark 0xc1000/0xcffff lookup wg0",
    ]
    assert parse_network_id(lines, "wg0") == 0x1000
    assert parse_network_id(lines, "wg1") is None


def test_interface_exists(backend):
    assert backend.interface_exists("eth0")
    assert not backend.interface_exists("wg0")


def test_create_and_delete(backend):
    backend.create_interface("wg0")
    assert backend.interface_exists("wg0")
    assert FakeIPRoute.ops[0] == ("link", "add", {"ifname": "wg0", "kind": "wireguard"})
    backend.delete_interface("wg0")
    assert not backend.interface_exists("wg0")


def test_create_failure_becomes_command_error(backend):
    with pytest.raises(CommandError) as exc:
        backend.create_interface("eth0")
    assert exc.value.exit_code == 17


def test_delete_missing_interface(backend):
    with pytest.raises(CommandError):
        backend.delete_interface("wg7")
    with backend.runner.suppress_failures():
        backend.delete_interface("wg7")


def test_default_route_device_mtu(backend):
    route = backend.default_route()
    assert route.device_index == 2 and route.mtu is None
    assert backend.device_mtu(route.device_index) == 1500


def test_route_with_explicit_mtu(backend):
    FakeIPRoute.routes["192.0.2.1"] = Msg(RTA_OIF=2, RTA_METRICS=Msg(RTAX_MTU=1400))
    assert backend.route_to("192.0.2.1").mtu == 1400


def test_multipath_route_uses_first_nexthop_device(backend):
    FakeIPRoute.routes["192.0.2.7"] = Msg(RTA_MULTIPATH=[Msg(oif=2), Msg(oif=1)])
    route = backend.route_to("192.0.2.7")
    assert route.device_index == 2
    assert backend.device_mtu(route.device_index) == 1500


def test_multipath_default_route(backend):
    FakeIPRoute.default = [Msg(RTA_MULTIPATH=[Msg(oif=2)])]
    assert backend.default_route().device_index == 2


def test_unreachable_route_is_none(backend):
    assert backend.route_to("203.0.113.9") is None


def test_ipv6_address_default_prefix(backend):
    backend.create_interface("wg0")
    backend.add_ipv6_address("wg0", "fd00::2")
    assert FakeIPRoute.ops[-1][2]["prefixlen"] == 128
    backend.add_ipv6_address("wg0", "fd00::3/64")
    assert FakeIPRoute.ops[-1][2] == {"index": 3, "address": "fd00::3", "prefixlen": 64}
