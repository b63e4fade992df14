"""
Shared pytest fixtures for the EV Route Planner test suite.
"""

import pytest

from evplanner.models.planner_models import LatLng, RoutePath, VehicleProfile
from evplanner.models.vehicles import get_vehicle_profile
from evplanner.optimization.charging_planner import ChargingPlanner
from evplanner.services.station_details import StationDetailsCache
from evplanner.services.station_lookup import NullStationLookup

# Kilometres per degree of latitude on a 6371 km sphere
KM_PER_DEGREE = 111.19492664455873


def make_path(total_km, n_points=101, start=LatLng(lat=0.0, lng=0.0)):
    """Straight northbound path with evenly spaced points."""
    spacing_deg = total_km / (n_points - 1) / KM_PER_DEGREE
    return [LatLng(lat=start.lat + i * spacing_deg, lng=start.lng) for i in range(n_points)]


def make_route(total_km, n_points=101):
    return RoutePath(path=make_path(total_km, n_points), total_km=total_km)


@pytest.fixture
def tesla():
    """Tesla Model 3 Long Range: 82 kWh, 0.139 kWh/km, 250 kW."""
    return get_vehicle_profile("Tesla Model 3 Long Range")


@pytest.fixture
def small_vehicle():
    """A 10 kWh vehicle with 100 km of range at full charge."""
    return VehicleProfile(
        battery_capacity_kwh=10,
        efficiency_kwh_per_km=0.1,
        charge_rate_kw=50,
        min_charge_level_percent=10,
        rated_range_km=100,
        connector_types=["Type 2"],
    )


@pytest.fixture
def details_cache():
    return StationDetailsCache()


@pytest.fixture
def fallback_planner(details_cache):
    """Planner whose station lookup never finds anything."""
    return ChargingPlanner(NullStationLookup(), details_cache)
