"""
Unit tests for StationSelector.

Covers:
- search radius escalation (5 km, then min(range, 20 km))
- fallback when nothing is found or nothing passes the detour filter
- smallest-detour selection, tie-breaking by lookup order
- proportional along-route distance estimate
- path window limits and candidates without a location
"""

import pytest

from conftest import KM_PER_DEGREE, make_path
from evplanner.models.planner_models import LatLng, StationCandidate
from evplanner.optimization.station_selector import StationSelector
from evplanner.services.station_lookup import StaticStationLookup


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

PATH = make_path(100, 101)  # 1 km between points
IDEAL_INDEX = 50


class RecordingLookup:
    """Wraps a lookup and records every requested radius."""

    def __init__(self, inner):
        self.inner = inner
        self.radii = []

    def nearby_search(self, center, radius_m):
        self.radii.append(radius_m)
        return self.inner.nearby_search(center, radius_m)


class FixedLookup:
    """Returns the same candidates regardless of location or radius."""

    def __init__(self, stations):
        self.stations = list(stations)

    def nearby_search(self, center, radius_m):
        return list(self.stations)


def station_beside(index, offset_km, name="station"):
    """A station offset_km east (negative: west) of PATH[index]."""
    point = PATH[index]
    return StationCandidate(
        place_id=name,
        name=name,
        location=LatLng(lat=point.lat, lng=point.lng + offset_km / KM_PER_DEGREE),
    )


def select(lookup, remaining_range_km, index=IDEAL_INDEX):
    return StationSelector(lookup).select_station(PATH[index], remaining_range_km, PATH, index)


# ---------------------------------------------------------------------------
# Radius escalation
# ---------------------------------------------------------------------------

class TestSearchRadius:
    def test_empty_lookup_queries_twice_and_falls_back(self):
        lookup = RecordingLookup(StaticStationLookup([]))
        selection = select(lookup, 12.0)
        assert selection.station is None
        assert selection.distance_km == 0
        assert lookup.radii == [5000, 12000]

    def test_second_radius_capped_at_20_km(self):
        lookup = RecordingLookup(StaticStationLookup([]))
        select(lookup, 45.0)
        assert lookup.radii == [5000, 20000]

    def test_no_second_query_when_first_finds_stations(self):
        lookup = RecordingLookup(StaticStationLookup([station_beside(50, 1.0)]))
        selection = select(lookup, 40.0)
        assert selection.station is not None
        assert lookup.radii == [5000]

    def test_wider_search_finds_distant_station(self):
        lookup = RecordingLookup(StaticStationLookup([station_beside(50, 7.0, "far")]))
        selection = select(lookup, 45.0)
        assert selection.station.name == "far"
        assert lookup.radii == [5000, 20000]
        assert selection.distance_km == pytest.approx(50 / 101 * 45.0)


# ---------------------------------------------------------------------------
# Detour filtering and selection
# ---------------------------------------------------------------------------

class TestSelection:
    def test_close_station_selected_with_proportional_distance(self):
        selection = select(StaticStationLookup([station_beside(50, 0.5)]), 40.0)
        assert selection.station.place_id == "station"
        assert selection.distance_km == pytest.approx(50 / 101 * 40.0)

    def test_distance_uses_closest_window_point(self):
        selection = select(FixedLookup([station_beside(55, 0.3)]), 40.0)
        assert selection.distance_km == pytest.approx(55 / 101 * 40.0)

    def test_detour_too_large_falls_back(self):
        # 0.2 * 20 km = 4 km allowed detour
        selection = select(StaticStationLookup([station_beside(50, 4.5)]), 20.0)
        assert selection.station is None
        assert selection.distance_km == 0

    def test_smallest_detour_wins(self):
        stations = [station_beside(50, 2.0, "two"), station_beside(50, 1.0, "one")]
        selection = select(FixedLookup(stations), 40.0)
        assert selection.station.name == "one"

    def test_tie_goes_to_first_candidate(self):
        stations = [station_beside(50, 1.0, "east"), station_beside(50, -1.0, "west")]
        selection = select(FixedLookup(stations), 40.0)
        assert selection.station.name == "east"

    def test_station_outside_path_window_rejected(self):
        # On the route, but 20 km past the edge of the +/-10 point window
        selection = select(FixedLookup([station_beside(80, 0.2)]), 45.0)
        assert selection.station is None

    def test_station_beyond_reachable_fraction_rejected(self):
        # 9 km away exceeds 0.8 * 10 km
        selection = select(FixedLookup([station_beside(50, 9.0)]), 10.0)
        assert selection.station is None

    def test_candidate_without_location_ignored(self):
        stations = [StationCandidate(name="ghost"), station_beside(50, 1.0, "real")]
        selection = select(FixedLookup(stations), 40.0)
        assert selection.station.name == "real"

    def test_window_clamped_at_path_start(self):
        selection = select(FixedLookup([station_beside(0, 0.5)]), 40.0, index=0)
        assert selection.station is not None
        assert selection.distance_km == 0.0

    def test_window_clamped_at_path_end(self):
        last = len(PATH) - 1
        selection = select(FixedLookup([station_beside(last, 0.5)]), 40.0, index=last)
        assert selection.distance_km == pytest.approx(last / len(PATH) * 40.0)
