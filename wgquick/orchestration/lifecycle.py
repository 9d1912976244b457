#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Interface lifecycle module for wg-quick.
This module sequences bringing an interface up and down, and removes a half-configured
interface when any step after its creation fails.
"""
import logging
from typing import Optional

from wgquick.backend.base import NetworkingBackend, PolicyBackend
from wgquick.backend.commands import CommandRunner
from wgquick.errors import InterfaceExistsError, NotManagedInterfaceError, WgQuickError
from wgquick.models import InterfaceDescriptor, LifecycleState, NetworkBinding
from .configurator import DnsRouteConfigurator
from .mtu import RouteMtuResolver

logger = logging.getLogger("wg-quick")


class InterfaceGuard:
    """Holds a freshly created interface; tears it down on exit unless committed."""

    def __init__(self, lifecycle: "InterfaceLifecycle", name: str):
        self.lifecycle = lifecycle
        self.name = name
        self.committed = False

    def commit(self) -> None:
        """Keep the interface: the guard's exit becomes a no-op."""
        self.committed = True
        self.lifecycle.pending_cleanup = None

    def __enter__(self) -> "InterfaceGuard":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self.committed:
            if exc is not None:
                logger.debug("Step failed in state %s: %s", self.lifecycle.state.value, exc)
            self.lifecycle.cleanup(self.name)
        return False


class InterfaceLifecycle:
    """Manager for interface up/down operations."""

    def __init__(
        self,
        networking: NetworkingBackend,
        policy: PolicyBackend,
        runner: CommandRunner,
        resolver: Optional[RouteMtuResolver] = None,
        configurator: Optional[DnsRouteConfigurator] = None,
    ):
        self.networking = networking
        self.policy = policy
        self.runner = runner
        self.resolver = resolver or RouteMtuResolver(networking)
        self.configurator = configurator or DnsRouteConfigurator(networking, policy)
        self.state = LifecycleState.ABSENT
        self.pending_cleanup: Optional[str] = None

    def _advance(self, state: LifecycleState) -> None:
        logger.debug("%s -> %s", self.state.value, state.value)
        self.state = state

    def up(self, descriptor: InterfaceDescriptor) -> NetworkBinding:
        """Create and fully configure the interface described by `descriptor`."""
        name = descriptor.name
        if self.networking.interface_exists(name):
            raise InterfaceExistsError(name)
        with self.create_interface(name) as guard:
            self.networking.set_config(name, descriptor.config_body)
            self._advance(LifecycleState.TUNNEL_CONFIGURED)
            self.policy.set_mtu(name, self.resolver.resolve(descriptor.mtu, name))
            self._advance(LifecycleState.MTU_SET)
            self.configurator.apply_addresses(name, descriptor.addresses)
            self._advance(LifecycleState.ADDRESSED)
            binding = self.configurator.bind_network(name)
            self._advance(LifecycleState.NETWORK_BOUND)
            self.configurator.apply_dns(binding, descriptor.dns_servers)
            self._advance(LifecycleState.DNS_SET)
            self.configurator.apply_routes(binding)
            self._advance(LifecycleState.ROUTED)
            guard.commit()
        self._advance(LifecycleState.COMPLETE)
        return binding

    def create_interface(self, name: str) -> InterfaceGuard:
        """Create the link and register it as the single pending cleanup."""
        if self.pending_cleanup is not None:
            raise RuntimeError(f"{self.pending_cleanup} is already pending cleanup")
        self.networking.create_interface(name)
        self.pending_cleanup = name
        self._advance(LifecycleState.CREATED)
        return InterfaceGuard(self, name)

    def down(self, name: str) -> None:
        """Tear down a WireGuard interface; refuses names wg does not report."""
        if name not in self.networking.wireguard_interfaces():
            raise NotManagedInterfaceError(name)
        self.teardown(name)
        self._advance(LifecycleState.DESTROYED)

    def teardown(self, name: str) -> None:
        """Delete the link, then destroy the netd network still routed to it."""
        self.networking.delete_interface(name)
        network_id = self.networking.network_id_for(name)
        if network_id is not None:
            self.policy.destroy_network(network_id)

    def cleanup(self, name: str) -> None:
        """Best-effort teardown after a failed `up`; never raises."""
        try:
            with self.runner.suppress_failures():
                self.teardown(name)
        except (WgQuickError, OSError) as e:
            logger.warning("Cleanup of %s incomplete: %s", name, e)
        finally:
            self.pending_cleanup = None
            self._advance(LifecycleState.DESTROYED)
