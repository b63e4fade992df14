"""
Nearest-feasible charging station selection around an ideal stop point.
"""

import logging
import math
from typing import List, NamedTuple, Optional, Tuple

from evplanner.config import PlannerSettings
from evplanner.models.planner_models import LatLng, StationCandidate
from evplanner.services.station_lookup import StationLookup
from evplanner.utils.geo import haversine_km

logger = logging.getLogger(__name__)


class StationSelection(NamedTuple):
    station: Optional[StationCandidate]
    distance_km: float


NO_STATION = StationSelection(None, 0.0)


class StationSelector:
    """Picks the candidate station with the smallest detour from the route"""

    def __init__(self, lookup: StationLookup, settings: Optional[PlannerSettings] = None):
        self.lookup = lookup
        self.settings = settings or PlannerSettings()

    def select_station(
        self,
        ideal_point: LatLng,
        remaining_range_km: float,
        path: List[LatLng],
        path_index: int
    ) -> StationSelection:
        """
        Find the best station to stop at near ideal_point

        Args:
            ideal_point: Route point where charging became necessary
            remaining_range_km: Range left in the battery at that point
            path: Full route path
            path_index: Index of ideal_point in path

        Returns:
            StationSelection with the chosen station and its estimated
            along-route distance, or (None, 0) when nothing is suitable
        """
        stations = self._find_candidates(ideal_point, remaining_range_km)
        if not stations:
            logger.info(f"No charging stations near ({ideal_point.lat:.4f}, {ideal_point.lng:.4f})")
            return NO_STATION

        scored = [
            (station,) + self._score_candidate(station, remaining_range_km, path, path_index)
            for station in stations
        ]

        valid = [
            (station, distance, detour)
            for station, distance, detour in scored
            if distance < remaining_range_km
            and detour < remaining_range_km * self.settings.max_detour_fraction
        ]
        if not valid:
            logger.info(f"{len(stations)} stations found but none within detour limits")
            return NO_STATION

        # min() keeps the first of equal detours, so ties go to lookup order
        station, distance, detour = min(valid, key=lambda item: item[2])
        logger.debug(f"Selected station {station.name or station.place_id} with detour {detour:.2f} km")
        return StationSelection(station, distance)

    def _find_candidates(self, center: LatLng, remaining_range_km: float) -> List[StationCandidate]:
        stations = self.lookup.nearby_search(center, self.settings.initial_search_radius_m)
        if not stations:
            radius_m = min(remaining_range_km * 1000, self.settings.max_search_radius_m)
            logger.debug(f"Widening station search to {radius_m:.0f} m")
            stations = self.lookup.nearby_search(center, radius_m)
        return stations

    def _score_candidate(
        self,
        station: StationCandidate,
        remaining_range_km: float,
        path: List[LatLng],
        path_index: int
    ) -> Tuple[float, float]:
        """
        Return (along-route distance estimate, detour) for one station.

        The along-route estimate is proportional to the path index of the
        closest window point, scaled to the remaining range. It is a
        heuristic, not a path-integrated distance.
        """
        if station.location is None:
            return 0.0, math.inf

        min_detour = math.inf
        best_distance = 0.0
        window = self.settings.path_window
        start_idx = max(0, path_index - window)
        end_idx = min(len(path) - 1, path_index + window)
        max_direct = remaining_range_km * self.settings.max_window_distance_fraction

        for i in range(start_idx, end_idx + 1):
            direct = haversine_km(path[i], station.location)
            if direct < min_detour and direct <= max_direct:
                min_detour = direct
                best_distance = (i / len(path)) * remaining_range_km

        return best_distance, min_detour
