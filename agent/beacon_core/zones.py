"""
Zone resolution: region id + gate flags -> activity label or None.

Gate policy (strict, the default):
  both gates on   → first zone (priority order) containing the region
  one gate on     → that zone only; the other zone is NOT reported
  no gates        → whichever zone contains the region
Anything outside every zone resolves to None.

The "open" area gate reproduces an older release whose area check always
passed: gates are ignored and the no-gate fallback applies.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    ACTIVITY_BA, ACTIVITY_CORP, BA_REGIONS, CORP_REGIONS,
    AREA_GATE_STRICT, AREA_GATE_OPEN,
)


@dataclass(frozen=True)
class Zone:
    activity: str
    regions: frozenset

    def __contains__(self, region_id) -> bool:
        return region_id in self.regions


@dataclass(frozen=True)
class ZoneTable:
    """Ordered zones: (zone A, zone B). Order is resolution priority."""

    zone_a: Zone
    zone_b: Zone

    def __post_init__(self):
        overlap = self.zone_a.regions & self.zone_b.regions
        if overlap:
            raise ValueError(f"Zones overlap on regions {sorted(overlap)}")

    @property
    def zones(self) -> Tuple[Zone, Zone]:
        return (self.zone_a, self.zone_b)


@dataclass(frozen=True)
class ZoneConfig:
    gate_a: bool = True
    gate_b: bool = True
    area_gate: str = AREA_GATE_STRICT

    @classmethod
    def from_beacon_config(cls, config):
        return cls(
            gate_a=config.onlyAtBA,
            gate_b=config.onlyAtCorp,
            area_gate=config.areaGate,
        )


DEFAULT_ZONES = ZoneTable(
    zone_a=Zone(ACTIVITY_BA, frozenset(BA_REGIONS)),
    zone_b=Zone(ACTIVITY_CORP, frozenset(CORP_REGIONS)),
)


def zones_containing(region_id, table=DEFAULT_ZONES):
    """Raw membership per zone, ignoring gates. {activity: bool}."""
    return {zone.activity: region_id in zone for zone in table.zones}


def _first_match(region_id, table):
    for zone in table.zones:
        if region_id in zone:
            return zone.activity
    return None


def resolve(region_id, zone_config, table=DEFAULT_ZONES) -> Optional[str]:
    """Activity to report for this region, or None."""
    if region_id is None or region_id < 0:
        return None

    if zone_config.area_gate == AREA_GATE_OPEN:
        return _first_match(region_id, table)

    gate_a, gate_b = zone_config.gate_a, zone_config.gate_b

    if gate_a and region_id in table.zone_a:
        return table.zone_a.activity
    if gate_b and region_id in table.zone_b:
        return table.zone_b.activity

    if not gate_a and not gate_b:
        return _first_match(region_id, table)
    return None
