"""Selection of availability zones for a cluster."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ekstools.api.types import MIN_REQUIRED_SUBNETS, RECOMMENDED_SUBNETS

RECOMMENDED_AVAILABILITY_ZONES = RECOMMENDED_SUBNETS
MIN_REQUIRED_AVAILABILITY_ZONES = MIN_REQUIRED_SUBNETS


class ZoneLookupError(Exception):
    """Availability zones could not be queried."""


@dataclass
class RequiredNumberRandomStrategy:
    """Selects zones at random until the required number is reached.

    When fewer zones are available than required, zones are repeated.
    """

    required_availability_zones: int

    @classmethod
    def recommended(cls) -> "RequiredNumberRandomStrategy":
        """Strategy selecting the recommended number of zones."""
        return cls(RECOMMENDED_AVAILABILITY_ZONES)

    @classmethod
    def min_required(cls) -> "RequiredNumberRandomStrategy":
        """Strategy selecting the minimum required number of zones."""
        return cls(MIN_REQUIRED_AVAILABILITY_ZONES)

    def select(self, available_zones: list[str]) -> list[str]:
        """Pick the required number of zones from those available."""
        if not available_zones and self.required_availability_zones > 0:
            raise ValueError("no availability zones to select from")
        zones: list[str] = []
        while len(zones) < self.required_availability_zones:
            for zone in random.sample(available_zones, len(available_zones)):
                zones.append(zone)
                if len(zones) == self.required_availability_zones:
                    break
        return zones


@dataclass
class ZonesToAvoidRule:
    """Rejects zones known to be unsuitable, such as overpopulated ones."""

    zones_to_avoid: set[str] = field(default_factory=set)

    def can_use_zone(self, zone: dict[str, Any]) -> bool:
        """Whether the zone is not one of those to avoid."""
        return zone["ZoneName"] not in self.zones_to_avoid


class AvailabilityZoneSelector:
    """Chooses availability zones of a region using a strategy and usage rules."""

    def __init__(
        self,
        ec2: Any,
        strategy: RequiredNumberRandomStrategy,
        rules: Optional[Iterable[ZonesToAvoidRule]] = None,
    ):
        self.ec2 = ec2
        self.strategy = strategy
        self.rules = list(rules or [])

    @classmethod
    def with_defaults(cls, ec2: Any) -> "AvailabilityZoneSelector":
        """Selector choosing the recommended number of zones."""
        return cls(ec2, RequiredNumberRandomStrategy.recommended(), [ZonesToAvoidRule()])

    @classmethod
    def with_min_required(cls, ec2: Any) -> "AvailabilityZoneSelector":
        """Selector choosing the minimum required number of zones."""
        return cls(ec2, RequiredNumberRandomStrategy.min_required(), [ZonesToAvoidRule()])

    def select_zones(self, region_name: str) -> list[str]:
        """Return the zones to use in the given region."""
        available = self._zones_for_region(region_name)
        usable = [
            zone["ZoneName"]
            for zone in available
            if all(rule.can_use_zone(zone) for rule in self.rules)
        ]
        return self.strategy.select(usable)

    def _zones_for_region(self, region_name: str) -> list[dict[str, Any]]:
        filters = [
            {"Name": "region-name", "Values": [region_name]},
            {"Name": "state", "Values": ["available"]},
        ]
        try:
            output = self.ec2.describe_availability_zones(Filters=filters)
        except Exception as err:
            raise ZoneLookupError(f"getting availability zones for {region_name}") from err
        return list(output.get("AvailabilityZones") or [])