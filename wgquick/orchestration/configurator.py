#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Address, network, DNS and route configuration for an interface that already exists.
"""
import logging
from typing import List, Optional, Sequence

from wgquick.backend.base import NetworkingBackend, PolicyBackend
from wgquick.models import NetworkBinding
from wgquick.utils.validation import is_safe_token, sanitize_tokens
from .netid import NetworkIdAllocator

logger = logging.getLogger("wg-quick")

DEFAULT_FWMARK = 0x20000
DEFAULT_NETWORK_USERS = "0-99999"


class DnsRouteConfigurator:
    """Applies descriptor addresses and DNS plus tunnel-reported routes through netd."""

    def __init__(
        self,
        networking: NetworkingBackend,
        policy: PolicyBackend,
        allocator: Optional[NetworkIdAllocator] = None,
        fwmark: int = DEFAULT_FWMARK,
        network_users: str = DEFAULT_NETWORK_USERS,
    ):
        self.networking = networking
        self.policy = policy
        self.allocator = allocator or NetworkIdAllocator()
        self.fwmark = fwmark
        self.network_users = network_users

    def apply_addresses(self, interface_name: str, addresses: Sequence[str]) -> List[str]:
        """Assign every safe address; returns the addresses actually applied."""
        applied: List[str] = []
        for address in addresses:
            if not address or not is_safe_token(address):
                logger.debug("Skipping unsafe address %r", address)
                continue
            if ":" in address:
                self.policy.enable_ipv6(interface_name)
                self.networking.add_ipv6_address(interface_name, address)
            else:
                host, _, prefix = address.partition("/")
                self.policy.set_ipv4_address(interface_name, host, int(prefix) if prefix.isdigit() else 32)
            applied.append(address)
        return applied

    def bind_network(self, interface_name: str) -> NetworkBinding:
        """Allocate a network id and bind the interface into a new netd VPN network."""
        network_id = self.allocator.allocate()
        self.networking.set_fwmark(interface_name, self.fwmark)
        self.policy.interface_up(interface_name)
        self.policy.create_vpn_network(network_id)
        self.policy.add_network_interface(network_id, interface_name)
        self.policy.add_network_users(network_id, self.network_users)
        return NetworkBinding(network_id=network_id, interface_name=interface_name)

    def apply_dns(self, binding: NetworkBinding, servers: Sequence[str]) -> List[str]:
        """Install the safe DNS servers on the network; no call when none survive."""
        safe = sanitize_tokens(servers)
        if len(safe) != len([s for s in servers if s]):
            logger.debug("Dropped unsafe DNS entries from %r", list(servers))
        if not safe:
            return []
        self.policy.set_dns(binding.network_id, safe)
        return safe

    def apply_routes(self, binding: NetworkBinding) -> List[str]:
        """Route every allowed-IP range the tunnel reports into the network."""
        routes = self.networking.allowed_ips(binding.interface_name)
        for cidr in routes:
            self.policy.add_route(binding.network_id, binding.interface_name, cidr)
        return routes
