"""Configuration settings for the EV route planner."""
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


class Config:
    # Google Maps
    GOOGLE_MAPS_API_KEY: Optional[str] = os.getenv("GOOGLE_MAPS_API_KEY")
    MAX_REQUESTS_PER_SECOND: float = 40.0

    # Station search
    STATION_SEARCH_KEYWORD: str = "electric vehicle charging station"
    DEFAULT_SEARCH_RADIUS_M: int = 10000
    DETAIL_FETCH_WORKERS: int = 8

    # Overall planning timeout in seconds (unset = no timeout)
    PLANNING_TIMEOUT_S: Optional[float] = _optional_float(os.getenv("EV_PLANNER_TIMEOUT_S"))

    # Logging
    LOG_LEVEL: str = os.getenv("EV_PLANNER_LOG_LEVEL", "INFO")


class PlannerSettings(BaseModel):
    """Tunable constants of the charging-stop heuristic"""

    model_config = ConfigDict(frozen=True)

    # Stop is inserted when remaining range drops below this...
    trigger_range_km: float = 50.0
    # ...unless the rest of the leg is at most this long
    min_remaining_leg_km: float = 50.0
    target_charge_fraction: float = 0.8
    step_range_fraction: float = 0.8
    average_speed_kmh: float = 80.0

    initial_search_radius_m: float = 5000.0
    max_search_radius_m: float = 20000.0
    path_window: int = 10
    max_window_distance_fraction: float = 0.8
    max_detour_fraction: float = 0.2
