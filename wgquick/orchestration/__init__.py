# Orchestration module for interface lifecycle management
from .configurator import DnsRouteConfigurator
from .lifecycle import InterfaceGuard, InterfaceLifecycle
from .mtu import RouteMtuResolver
from .netid import NetworkIdAllocator

__all__ = ["DnsRouteConfigurator", "InterfaceGuard", "InterfaceLifecycle", "NetworkIdAllocator", "RouteMtuResolver"]
