#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for wg-quick.
This module contains the dataclasses passed between the loader, the backends and the orchestrator.
"""
import dataclasses
import enum
from typing import Optional, Tuple


@dataclasses.dataclass(frozen=True)
class InterfaceDescriptor:
    """Interface description loaded from a wg-quick config file."""

    name: str
    config_body: str = ""
    addresses: Tuple[str, ...] = ()
    dns_servers: Tuple[str, ...] = ()
    mtu: int = 0
    config_path: str = ""


@dataclasses.dataclass(frozen=True)
class NetworkBinding:
    """netd network the interface is bound to while it is up."""

    network_id: int
    interface_name: str


@dataclasses.dataclass(frozen=True)
class Endpoint:
    """Peer endpoint reported by the tunnel engine."""

    host: str
    port: int


@dataclasses.dataclass(frozen=True)
class Route:
    """Route selected by the kernel for a destination."""

    device_index: Optional[int] = None
    mtu: Optional[int] = None


@dataclasses.dataclass(frozen=True)
class RouteSample:
    """MTU sample for one destination; mtu is -1 when unresolvable."""

    endpoint: str
    mtu: int = -1


class LifecycleState(str, enum.Enum):
    ABSENT = "absent"
    CREATED = "created"
    TUNNEL_CONFIGURED = "tunnel-configured"
    MTU_SET = "mtu-set"
    ADDRESSED = "addressed"
    NETWORK_BOUND = "network-bound"
    DNS_SET = "dns-set"
    ROUTED = "routed"
    COMPLETE = "complete"
    DESTROYED = "destroyed"
