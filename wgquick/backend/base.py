from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models import Endpoint, Route


class NetworkingBackend(ABC):
    """Kernel links/routes and the WireGuard tool, as typed queries and mutations."""

    @abstractmethod
    def interface_exists(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def create_interface(self, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_interface(self, name: str) -> None:
        """Remove the link. Must tolerate an already-absent link during cleanup."""
        raise NotImplementedError

    @abstractmethod
    def wireguard_interfaces(self) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def set_config(self, name: str, body: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_fwmark(self, name: str, mark: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def peer_endpoints(self, name: str) -> List[Endpoint]:
        raise NotImplementedError

    @abstractmethod
    def allowed_ips(self, name: str) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def default_route(self) -> Optional[Route]:
        raise NotImplementedError

    @abstractmethod
    def route_to(self, address: str) -> Optional[Route]:
        raise NotImplementedError

    @abstractmethod
    def device_mtu(self, index: int) -> Optional[int]:
        raise NotImplementedError

    @abstractmethod
    def add_ipv6_address(self, name: str, address: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def network_id_for(self, name: str) -> Optional[int]:
        """netd network id whose routing rule points at `name`, if any."""
        raise NotImplementedError


class PolicyBackend(ABC):
    """Network policy daemon operations (netd through `ndc` on Android)."""

    @abstractmethod
    def interface_up(self, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_mtu(self, name: str, mtu: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def enable_ipv6(self, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_ipv4_address(self, name: str, host: str, prefix: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def create_vpn_network(self, network_id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def add_network_interface(self, network_id: int, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def add_network_users(self, network_id: int, uid_range: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_dns(self, network_id: int, servers: Sequence[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def add_route(self, network_id: int, name: str, cidr: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def destroy_network(self, network_id: int) -> None:
        raise NotImplementedError
