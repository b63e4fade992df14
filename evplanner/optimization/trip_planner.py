"""
EV Trip Planner
Resolves addresses into a driving route with Google Maps and plans charging stops along it
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import List, Optional

from evplanner.config import Config, PlannerSettings
from evplanner.models.planner_models import LatLng, PlanResult, StationCandidate, TripRequest
from evplanner.models.vehicles import get_vehicle_profile
from evplanner.optimization.charging_planner import ChargingPlanner
from evplanner.services.google_maps import DirectionsError, GoogleMapsService
from evplanner.services.station_details import StationDetailsCache
from evplanner.services.station_lookup import StationLookup

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Route planning timed out. Please try again."


class PlanningCancelled(Exception):
    """Raised inside a planning run that was abandoned after a timeout"""


class CancellableLookup:
    """Station lookup that refuses further searches once its run is cancelled"""

    def __init__(self, lookup: StationLookup, cancelled: threading.Event):
        self.lookup = lookup
        self.cancelled = cancelled

    def nearby_search(self, center: LatLng, radius_m: float) -> List[StationCandidate]:
        if self.cancelled.is_set():
            raise PlanningCancelled()
        return self.lookup.nearby_search(center, radius_m)


class TripPlanner:
    """Main planning entry point combining Google Maps with the charging planner"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        details_cache: Optional[StationDetailsCache] = None,
        settings: Optional[PlannerSettings] = None,
        gmaps_service: Optional[GoogleMapsService] = None
    ):
        """
        Initialize the trip planner

        Args:
            api_key: Google Maps API key (optional, will use env var if not provided)
            details_cache: Shared station details cache, a fresh one when omitted
            settings: Charging heuristic constants
            gmaps_service: Pre-built maps service, mainly for tests
        """
        self.settings = settings or PlannerSettings()
        self.details_cache = details_cache if details_cache is not None else StationDetailsCache()
        self.gmaps_service = gmaps_service or GoogleMapsService(api_key, details_cache=self.details_cache)
        self.charging_planner = ChargingPlanner(self.gmaps_service, self.details_cache, self.settings)

    def plan_trip(self, request: TripRequest, timeout_s: Optional[float] = Config.PLANNING_TIMEOUT_S) -> PlanResult:
        """
        Plan a trip from addresses

        Args:
            request: Trip request with addresses, vehicle and charge level
            timeout_s: Give up after this many seconds, discarding partial work.
                The abandoned run stops before its next Maps request.

        Returns:
            PlanResult; invalid with a user-facing error when planning was not possible
        """
        if timeout_s is None:
            return self._plan(request)

        cancelled = threading.Event()
        pool = ThreadPoolExecutor(max_workers=1)
        future = pool.submit(self._plan_cancellable, request, cancelled)
        try:
            return future.result(timeout=timeout_s)
        except FutureTimeoutError:
            cancelled.set()
            logger.error(f"Planning '{request.source}' -> '{request.destination}' exceeded {timeout_s}s")
            return PlanResult(is_valid=False, errors=[TIMEOUT_MESSAGE])
        finally:
            # Do not block on an abandoned run
            pool.shutdown(wait=False)

    def _plan_cancellable(self, request: TripRequest, cancelled: threading.Event) -> PlanResult:
        # Station searches of this run check the flag before every request
        charging_planner = ChargingPlanner(
            CancellableLookup(self.gmaps_service, cancelled), self.details_cache, self.settings
        )
        try:
            return self._plan(request, charging_planner, cancelled)
        except PlanningCancelled:
            logger.info(f"Abandoned planning run for '{request.source}' -> '{request.destination}' stopped")
            return PlanResult(is_valid=False, errors=[TIMEOUT_MESSAGE])

    def _plan(
        self,
        request: TripRequest,
        charging_planner: Optional[ChargingPlanner] = None,
        cancelled: Optional[threading.Event] = None
    ) -> PlanResult:
        try:
            vehicle = get_vehicle_profile(request.vehicle_name)
        except ValueError as e:
            return PlanResult(is_valid=False, errors=[str(e)])

        try:
            route = self.gmaps_service.get_directions(request.source, request.destination)
        except DirectionsError as e:
            logger.warning(f"No route for '{request.source}' -> '{request.destination}': {e.status}")
            return PlanResult(is_valid=False, errors=[e.message])

        if cancelled is not None and cancelled.is_set():
            raise PlanningCancelled()

        if request.is_round_trip:
            route = route.as_round_trip()

        return (charging_planner or self.charging_planner).plan(
            vehicle, request.current_charge_percent, request.is_round_trip, route
        )

    def find_chargers_near(self, address: str, radius_m: float = Config.DEFAULT_SEARCH_RADIUS_M) -> List[StationCandidate]:
        """
        Find charging stations around an address

        Raises:
            ValueError: If the address cannot be geocoded
        """
        location = self.gmaps_service.geocode_address(address)
        stations = self.gmaps_service.nearby_search(location, radius_m)
        logger.info(f"Found {len(stations)} charging stations near '{address}'")
        return stations
