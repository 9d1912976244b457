#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Route-derived MTU inference for wg-quick.
The interface MTU is the smallest path MTU towards the default route and every peer
endpoint, minus the WireGuard encapsulation overhead.
"""
import logging
from typing import List, Optional

from wgquick.backend.base import NetworkingBackend
from wgquick.models import Route, RouteSample

logger = logging.getLogger("wg-quick")

DEFAULT_MTU = 1500
WIREGUARD_OVERHEAD = 80


class RouteMtuResolver:
    """Resolves the interface MTU from live routing information."""

    def __init__(self, networking: NetworkingBackend, overhead: int = WIREGUARD_OVERHEAD):
        self.networking = networking
        self.overhead = overhead

    def resolve(self, mtu_override: int, interface_name: str) -> int:
        """Return the MTU to install: the override when set, otherwise min(samples) - overhead."""
        if mtu_override:
            return mtu_override
        default = self.sample("default")
        samples: List[RouteSample] = [default] if default.mtu > 0 else [RouteSample("default", DEFAULT_MTU)]
        for endpoint in self.networking.peer_endpoints(interface_name):
            sample = self.sample(endpoint.host)
            if sample.mtu > 0:
                samples.append(sample)
            else:
                logger.debug("No MTU for endpoint %s", endpoint.host)
        tightest = min(samples, key=lambda s: s.mtu)
        logger.debug("Path MTU %d (via %s) across %d samples", tightest.mtu, tightest.endpoint, len(samples))
        return tightest.mtu - self.overhead

    def sample(self, destination: str) -> RouteSample:
        """MTU of the route towards `destination` ("default" for the default route)."""
        if destination == "default":
            route = self.networking.default_route()
        else:
            route = self.networking.route_to(destination)
        mtu = self._route_mtu(route)
        return RouteSample(destination, mtu if mtu else -1)

    def _route_mtu(self, route: Optional[Route]) -> Optional[int]:
        if route is None:
            return None
        if route.mtu:
            return route.mtu
        if route.device_index is None:
            return None
        return self.networking.device_mtu(route.device_index)
