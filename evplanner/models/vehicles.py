"""
Static vehicle and charger tables for the EV route planner.
Both tables are read-only mappings built once at import time.
"""

from types import MappingProxyType
from typing import List, Mapping

from evplanner.models.planner_models import VehicleProfile

DEFAULT_VEHICLE = "Tesla Model 3 Long Range"

_COMMON_CONNECTORS = ["Type 2", "CCS"]

VEHICLE_PROFILES: Mapping[str, VehicleProfile] = MappingProxyType({
    "Tesla Model 3 Long Range": VehicleProfile(
        battery_capacity_kwh=82,
        efficiency_kwh_per_km=0.139,
        charge_rate_kw=250,
        min_charge_level_percent=10,
        rated_range_km=602,
        connector_types=_COMMON_CONNECTORS,
    ),
    "Hyundai IONIQ 5": VehicleProfile(
        battery_capacity_kwh=77.4,
        efficiency_kwh_per_km=0.171,
        charge_rate_kw=220,
        min_charge_level_percent=10,
        rated_range_km=507,
        connector_types=_COMMON_CONNECTORS,
    ),
    "Volkswagen ID.4": VehicleProfile(
        battery_capacity_kwh=77,
        efficiency_kwh_per_km=0.168,
        charge_rate_kw=135,
        min_charge_level_percent=10,
        rated_range_km=516,
        connector_types=_COMMON_CONNECTORS,
    ),
    "Ford Mustang Mach-E": VehicleProfile(
        battery_capacity_kwh=88,
        efficiency_kwh_per_km=0.172,
        charge_rate_kw=150,
        min_charge_level_percent=10,
        rated_range_km=490,
        connector_types=_COMMON_CONNECTORS,
    ),
    "Kia EV6": VehicleProfile(
        battery_capacity_kwh=77.4,
        efficiency_kwh_per_km=0.171,
        charge_rate_kw=240,
        min_charge_level_percent=10,
        rated_range_km=528,
        connector_types=_COMMON_CONNECTORS,
    ),
    "BMW i4": VehicleProfile(
        battery_capacity_kwh=83.9,
        efficiency_kwh_per_km=0.165,
        charge_rate_kw=200,
        min_charge_level_percent=10,
        rated_range_km=521,
        connector_types=_COMMON_CONNECTORS,
    ),
    "Tata Nexon EV Max": VehicleProfile(
        battery_capacity_kwh=40.5,
        efficiency_kwh_per_km=0.145,
        charge_rate_kw=50,
        min_charge_level_percent=10,
        rated_range_km=437,
        connector_types=_COMMON_CONNECTORS,
    ),
    "MG ZS EV": VehicleProfile(
        battery_capacity_kwh=50.3,
        efficiency_kwh_per_km=0.173,
        charge_rate_kw=76,
        min_charge_level_percent=10,
        rated_range_km=461,
        connector_types=_COMMON_CONNECTORS,
    ),
})

# Charger type -> power range, typical charging time, supported connectors
CHARGER_TYPES: Mapping[str, Mapping[str, object]] = MappingProxyType({
    "DC Fast": MappingProxyType({
        "power": "50-350kW",
        "charging_time": "20-40 minutes",
        "connectors": ("CCS", "CHAdeMO"),
    }),
    "AC Level 2": MappingProxyType({
        "power": "7-22kW",
        "charging_time": "4-8 hours",
        "connectors": ("Type 2", "Type 1"),
    }),
    "Tesla Supercharger": MappingProxyType({
        "power": "250kW",
        "charging_time": "15-25 minutes",
        "connectors": ("Tesla",),
    }),
})


def list_vehicles() -> List[str]:
    return list(VEHICLE_PROFILES)


def get_vehicle_profile(name: str) -> VehicleProfile:
    """
    Look up a vehicle profile by its display name

    Raises:
        ValueError: If the vehicle is not in the registry
    """
    try:
        return VEHICLE_PROFILES[name]
    except KeyError:
        raise ValueError(
            f"Unknown vehicle '{name}'. Known vehicles: {', '.join(VEHICLE_PROFILES)}"
        ) from None
