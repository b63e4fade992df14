"""
Google Maps API Service for the EV Route Planner
Handles directions, geocoding and charging station search
"""

import os
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Dict, Any
from functools import lru_cache
import time

from evplanner.config import Config
from evplanner.models.planner_models import LatLng, RoutePath, StationCandidate
from evplanner.services.station_details import StationDetailsCache

logger = logging.getLogger(__name__)

DIRECTIONS_ERROR_MESSAGES: Dict[str, str] = {
    "NOT_FOUND": "Could not find a route between these locations. Please check if the addresses are correct.",
    "ZERO_RESULTS": "No driving route found between these locations.",
    "MAX_WAYPOINTS_EXCEEDED": "Too many waypoints in the route.",
    "MAX_ROUTE_LENGTH_EXCEEDED": "The route is too long.",
    "INVALID_REQUEST": "Please enter both source and destination locations.",
    "OVER_QUERY_LIMIT": "Too many requests. Please try again later.",
    "REQUEST_DENIED": "Route request was denied. Please check your API key configuration.",
}
DEFAULT_DIRECTIONS_ERROR = "Could not calculate the route. Please try again."

PLACE_DETAIL_FIELDS = ["name", "formatted_address", "rating", "opening_hours", "geometry", "place_id"]


class DirectionsError(ValueError):
    """Directions request failed; message is suitable for showing to the user"""

    def __init__(self, status: str):
        self.status = status
        self.message = DIRECTIONS_ERROR_MESSAGES.get(status, DEFAULT_DIRECTIONS_ERROR)
        super().__init__(self.message)


class GoogleMapsService:
    """Service for interacting with Google Maps API for directions, geocoding and places"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        details_cache: Optional[StationDetailsCache] = None
    ):
        """
        Initialize Google Maps client

        Args:
            api_key: Google Maps API key. If None, will try to get from environment
            details_cache: Optional cache that receives charger details for every station found
        """
        self.api_key = api_key or os.getenv("GOOGLE_MAPS_API_KEY") or Config.GOOGLE_MAPS_API_KEY
        if self.api_key:
            self.api_key = self.api_key.strip()
        if not self.api_key:
            raise ValueError("Google Maps API key not provided. Set GOOGLE_MAPS_API_KEY in secrets or environment")
        # Guard against hidden invalid characters that can break libraries
        if any((c == "\x00" or ord(c) < 32) for c in self.api_key):
            raise ValueError("Google Maps API key contains invalid characters. Please paste a clean plain-text key.")

        # Lazy import to avoid app startup failures when dependency is missing
        try:
            import googlemaps  # type: ignore
            from googlemaps.convert import decode_polyline  # type: ignore
            from googlemaps.exceptions import ApiError, TransportError, Timeout  # type: ignore
        except ImportError as e:
            raise ImportError("googlemaps package not found. Install with: pip install googlemaps") from e

        self._api_error = ApiError
        self._api_exceptions = (ApiError, TransportError, Timeout)
        self._decode_polyline = decode_polyline
        # Over-quota responses surface as ApiError("OVER_QUERY_LIMIT") instead of being retried
        self.client = googlemaps.Client(key=self.api_key, retry_over_query_limit=False)
        self.details_cache = details_cache

        # Rate limiting: Google Maps allows 40 requests per second
        self.last_request_time = 0
        self.min_request_interval = 1.0 / Config.MAX_REQUESTS_PER_SECOND
        self._rate_lock = threading.Lock()

    def _rate_limit(self):
        """Enforce rate limiting across worker threads"""
        with self._rate_lock:
            current_time = time.time()
            time_since_last = current_time - self.last_request_time
            if time_since_last < self.min_request_interval:
                sleep_time = self.min_request_interval - time_since_last
                time.sleep(sleep_time)
            self.last_request_time = time.time()

    def get_directions(self, source: str, destination: str) -> RoutePath:
        """
        Resolve a driving route between two addresses

        Args:
            source: Start address
            destination: End address

        Returns:
            RoutePath with the decoded overview path and total distance in km

        Raises:
            DirectionsError: If no route could be calculated
        """
        if not source or not source.strip() or not destination or not destination.strip():
            raise DirectionsError("INVALID_REQUEST")

        try:
            self._rate_limit()
            routes = self.client.directions(source, destination, mode="driving")
        except self._api_error as e:  # type: ignore[misc]
            logger.error(f"Directions request failed with status {e.status}: {e}")
            raise DirectionsError(e.status) from e
        except self._api_exceptions as e:  # type: ignore[misc]
            logger.error(f"Google Maps transport error for directions '{source}' -> '{destination}': {e}")
            raise DirectionsError("UNKNOWN_ERROR") from e

        if not routes:
            raise DirectionsError("ZERO_RESULTS")

        route = routes[0]
        # Sum across legs; a leg without a distance counts as zero
        total_m = sum((leg.get("distance") or {}).get("value", 0) for leg in route.get("legs", []))
        points = self._decode_polyline(route["overview_polyline"]["points"])
        path = [LatLng.from_dict(point) for point in points]

        logger.info(f"Resolved route '{source}' -> '{destination}': {total_m / 1000:.1f} km, {len(path)} points")
        return RoutePath(path=path, total_km=total_m / 1000)

    @lru_cache(maxsize=1000)
    def geocode_address(self, address: str) -> LatLng:
        """
        Geocode a single address to latitude, longitude

        Args:
            address: Full address string

        Returns:
            LatLng of the first match

        Raises:
            ValueError: If address cannot be geocoded
        """
        try:
            self._rate_limit()
            result = self.client.geocode(address)

            if not result:
                raise ValueError(f"Could not geocode address: {address}")

            return LatLng.from_dict(result[0]["geometry"]["location"])

        except self._api_exceptions as e:  # type: ignore[misc]
            logger.error(f"Google Maps API error geocoding '{address}': {e}")
            raise ValueError(f"Failed to geocode address '{address}': {e}")

    def nearby_search(self, center: LatLng, radius_m: float = Config.DEFAULT_SEARCH_RADIUS_M) -> List[StationCandidate]:
        """
        Find charging stations around a point, enriched with place details

        Args:
            center: Search center
            radius_m: Search radius in meters

        Returns:
            List of StationCandidate, empty when nothing was found or the API failed
        """
        try:
            self._rate_limit()
            response = self.client.places_nearby(
                location=(center.lat, center.lng),
                radius=int(radius_m),
                keyword=Config.STATION_SEARCH_KEYWORD,
                type="establishment",
            )
        except self._api_exceptions as e:  # type: ignore[misc]
            logger.warning(f"Nearby station search failed at ({center.lat}, {center.lng}): {e}")
            return []

        results = response.get("results") or []
        if response.get("status", "OK") != "OK" or not results:
            return []

        # Detail fetches are independent of each other; results keep search order
        with ThreadPoolExecutor(max_workers=Config.DETAIL_FETCH_WORKERS) as pool:
            places = list(pool.map(self._fetch_place_details, results))

        return [StationCandidate.from_place(place) for place in places]

    def _fetch_place_details(self, result: Dict[str, Any]) -> Dict[str, Any]:
        """Fetch full details for a nearby-search result, falling back to the result itself"""
        place_id = result.get("place_id")
        if not place_id:
            return result

        try:
            self._rate_limit()
            response = self.client.place(place_id, fields=PLACE_DETAIL_FIELDS)
        except self._api_exceptions as e:  # type: ignore[misc]
            logger.warning(f"Failed to fetch details for place {place_id}: {e}")
            return result

        place = response.get("result")
        if response.get("status", "OK") != "OK" or not place:
            return result

        if self.details_cache is not None and place.get("place_id"):
            self.details_cache.get_details(place["place_id"])
        return place
