"""
Station candidate lookups used by the charging-stop selector.

Any object with a ``nearby_search(center, radius_m)`` method qualifies;
GoogleMapsService is the production implementation.
"""

import logging
from typing import Iterable, List, Protocol

from evplanner.models.planner_models import LatLng, StationCandidate
from evplanner.utils.geo import haversine_km

logger = logging.getLogger(__name__)


class StationLookup(Protocol):
    def nearby_search(self, center: LatLng, radius_m: float) -> List[StationCandidate]:
        """Return stations within radius_m of center; empty on no results or failure"""
        ...


class NullStationLookup:
    """Lookup that never finds anything. Every required stop becomes a fallback stop."""

    def nearby_search(self, center: LatLng, radius_m: float) -> List[StationCandidate]:
        return []


class StaticStationLookup:
    """In-memory lookup over a fixed list of stations"""

    def __init__(self, stations: Iterable[StationCandidate]):
        self.stations = [s for s in stations if s.location is not None]

    def nearby_search(self, center: LatLng, radius_m: float) -> List[StationCandidate]:
        radius_km = radius_m / 1000.0
        found = [s for s in self.stations if haversine_km(center, s.location) <= radius_km]
        logger.debug(f"Static lookup found {len(found)} stations within {radius_km:.1f} km")
        return found
