"""
Charger details for charging stations.

The Places API carries no charger metadata, so details are synthesized the
first time a station id is seen and cached for the life of the process.
"""

import hashlib
import logging
import random
import threading
from typing import Callable, Dict, Optional

from evplanner.models.planner_models import StationDetails
from evplanner.models.vehicles import CHARGER_TYPES

logger = logging.getLogger(__name__)

BASE_CHARGER_TYPES = ("DC Fast", "AC Level 2")
FAST_NETWORK_TYPE = "Tesla Supercharger"
FAST_NETWORK_PROBABILITY = 0.3


def seeded_rng(station_id: str) -> random.Random:
    """Random generator seeded from the station id, stable across runs"""
    digest = hashlib.sha256(station_id.encode("utf-8")).digest()
    return random.Random(int.from_bytes(digest[:8], "big"))


def synthesize_details(rng: random.Random) -> StationDetails:
    charger_types = list(BASE_CHARGER_TYPES)
    if rng.random() < FAST_NETWORK_PROBABILITY:
        charger_types.append(FAST_NETWORK_TYPE)

    # Ordered union of the connector sets
    connectors: Dict[str, None] = {}
    for charger_type in charger_types:
        for connector in CHARGER_TYPES[charger_type]["connectors"]:
            connectors[connector] = None

    power = CHARGER_TYPES["DC Fast"]["power"] if "DC Fast" in charger_types else CHARGER_TYPES["AC Level 2"]["power"]
    return StationDetails(charger_types=charger_types, connectors=list(connectors), power=power)


class StationDetailsCache:
    """Thread-safe, generate-once store of station details keyed by station id"""

    def __init__(self, rng_factory: Callable[[str], random.Random] = seeded_rng):
        self._rng_factory = rng_factory
        self._details: Dict[str, StationDetails] = {}
        self._lock = threading.Lock()

    def get_details(self, station_id: str) -> StationDetails:
        with self._lock:
            cached = self._details.get(station_id)
            if cached is not None:
                return cached
            details = synthesize_details(self._rng_factory(station_id))
            self._details[station_id] = details
        logger.debug(f"Generated charger details for station {station_id}: {details.charger_types}")
        return details

    def peek(self, station_id: str) -> Optional[StationDetails]:
        with self._lock:
            return self._details.get(station_id)

    def snapshot(self) -> Dict[str, StationDetails]:
        with self._lock:
            return dict(self._details)

    def __contains__(self, station_id: object) -> bool:
        with self._lock:
            return station_id in self._details

    def __len__(self) -> int:
        with self._lock:
            return len(self._details)
