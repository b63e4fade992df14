"""
Unit tests for the vehicle and charger tables.
"""

import pytest
from pydantic import ValidationError

from evplanner.models.planner_models import VehicleProfile
from evplanner.models.vehicles import (
    CHARGER_TYPES,
    DEFAULT_VEHICLE,
    VEHICLE_PROFILES,
    get_vehicle_profile,
    list_vehicles,
)


class TestVehicleRegistry:
    def test_contains_all_vehicles(self):
        assert len(list_vehicles()) == 8
        assert DEFAULT_VEHICLE in list_vehicles()

    def test_lookup_by_name(self):
        profile = get_vehicle_profile("Kia EV6")
        assert profile.battery_capacity_kwh == 77.4
        assert profile.efficiency_kwh_per_km == 0.171
        assert profile.charge_rate_kw == 240

    def test_unknown_vehicle_raises(self):
        with pytest.raises(ValueError, match="Unknown vehicle"):
            get_vehicle_profile("DeLorean")

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            VEHICLE_PROFILES["New Car"] = get_vehicle_profile(DEFAULT_VEHICLE)

    def test_profiles_are_frozen(self):
        profile = get_vehicle_profile(DEFAULT_VEHICLE)
        with pytest.raises(ValidationError):
            profile.battery_capacity_kwh = 1

    def test_all_profiles_have_positive_energy_figures(self):
        for profile in VEHICLE_PROFILES.values():
            assert profile.battery_capacity_kwh > 0
            assert profile.efficiency_kwh_per_km > 0
            assert profile.charge_rate_kw > 0
            assert profile.connector_types == ["Type 2", "CCS"]

    def test_non_positive_efficiency_rejected(self):
        with pytest.raises(ValidationError):
            VehicleProfile(
                battery_capacity_kwh=50,
                efficiency_kwh_per_km=0,
                charge_rate_kw=50,
                min_charge_level_percent=10,
                rated_range_km=300,
                connector_types=[],
            )


class TestChargerTypes:
    def test_known_types(self):
        assert set(CHARGER_TYPES) == {"DC Fast", "AC Level 2", "Tesla Supercharger"}

    def test_connectors(self):
        assert CHARGER_TYPES["DC Fast"]["connectors"] == ("CCS", "CHAdeMO")
        assert CHARGER_TYPES["Tesla Supercharger"]["connectors"] == ("Tesla",)
