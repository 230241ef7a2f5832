"""VPC, subnet and network definitions for cluster configuration."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


class SubnetTopology(str, Enum):
    """Routing topology of a subnet."""

    PRIVATE = "Private"
    PUBLIC = "Public"

    def __str__(self) -> str:
        return self.value


class SubnetMismatchError(ValueError):
    """Raised when an imported subnet conflicts with one already known."""


def subnet_topologies() -> list[SubnetTopology]:
    """Return all subnet topologies, private first."""
    return [SubnetTopology.PRIVATE, SubnetTopology.PUBLIC]


def default_cidr() -> IPNetwork:
    """Return the default global CIDR of a cluster VPC."""
    return ipaddress.ip_network("192.168.0.0/16")


def _parse_cidr(cidr: str) -> Optional[IPNetwork]:
    try:
        return ipaddress.ip_network(cidr, strict=False)
    except ValueError:
        return None


@dataclass
class Network:
    """An identifier together with a CIDR block."""

    id: str = ""
    cidr: Optional[IPNetwork] = None


@dataclass
class ClusterSubnets:
    """Private and public subnets, keyed by availability zone."""

    private: dict[str, Network] = field(default_factory=dict)
    public: dict[str, Network] = field(default_factory=dict)

    def private_ids(self) -> list[str]:
        """IDs of all private subnets."""
        return [network.id for network in self.private.values()]

    def public_ids(self) -> list[str]:
        """IDs of all public subnets."""
        return [network.id for network in self.public.values()]

    def import_subnet(
        self,
        topology: Union[SubnetTopology, str],
        az: str,
        subnet_id: str,
        cidr: str,
    ) -> None:
        """Record a subnet for an availability zone, merging with what is known.

        Raises SubnetMismatchError when the zone already holds a different
        subnet ID or CIDR, and ValueError for an unknown topology.
        """
        try:
            kind = SubnetTopology(topology)
        except ValueError:
            raise ValueError(f"unexpected subnet topology: {topology}") from None

        subnets = self.private if kind is SubnetTopology.PRIVATE else self.public
        subnet_cidr = _parse_cidr(cidr)

        existing = subnets.get(az)
        if existing is None:
            subnets[az] = Network(id=subnet_id, cidr=subnet_cidr)
            return

        new_id = existing.id
        if not new_id:
            new_id = subnet_id
        elif new_id != subnet_id:
            raise SubnetMismatchError(
                f'subnet ID "{existing.id}" is not the same as "{subnet_id}"'
            )

        new_cidr = existing.cidr
        if new_cidr is None:
            new_cidr = subnet_cidr
        elif str(new_cidr) != str(subnet_cidr):
            raise SubnetMismatchError(
                f'subnet CIDR "{existing.cidr}" is not the same as "{subnet_cidr}"'
            )

        subnets[az] = Network(id=new_id, cidr=new_cidr)


@dataclass
class ClusterVPC:
    """Global VPC network with its subnets and security groups."""

    network: Network = field(default_factory=Network)
    security_group: str = ""
    subnets: Optional[ClusterSubnets] = None
    extra_cidrs: list[IPNetwork] = field(default_factory=list)
    shared_node_security_group: str = ""