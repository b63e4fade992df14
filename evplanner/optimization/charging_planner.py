"""
EV Charging Stop Planner
Greedy forward simulation of battery use along a route, inserting charging
stops whenever the remaining range runs low
"""

import logging
import math
from typing import Dict, List, Optional

from evplanner.config import PlannerSettings
from evplanner.models.planner_models import (
    ChargingStop,
    Direction,
    LatLng,
    LegResult,
    PlanResult,
    RoutePath,
    StationDetails,
    VehicleProfile,
)
from evplanner.optimization.station_selector import StationSelector
from evplanner.services.station_details import StationDetailsCache
from evplanner.services.station_lookup import StationLookup

logger = logging.getLogger(__name__)


class ChargingPlanner:
    """Computes charging stops for one-way and round trips"""

    def __init__(
        self,
        lookup: StationLookup,
        details_cache: Optional[StationDetailsCache] = None,
        settings: Optional[PlannerSettings] = None
    ):
        """
        Args:
            lookup: Source of nearby charging station candidates
            details_cache: Cache used to attach charger details to chosen stations
            settings: Heuristic constants, defaults when omitted
        """
        self.settings = settings or PlannerSettings()
        self.selector = StationSelector(lookup, self.settings)
        self.details_cache = details_cache if details_cache is not None else StationDetailsCache()

    def plan(
        self,
        vehicle: VehicleProfile,
        current_charge_percent: float,
        is_round_trip: bool,
        route: RoutePath
    ) -> PlanResult:
        """
        Plan charging stops along a route

        Args:
            vehicle: Energy profile of the vehicle
            current_charge_percent: Battery level at departure, 0-100
            is_round_trip: Whether route covers the way back as well
            route: Route path and total distance (both directions for round trips)

        Returns:
            PlanResult with ordered stops and trip totals, or an invalid
            result listing configuration errors
        """
        errors = self._validate(current_charge_percent, route)
        if errors:
            logger.warning(f"Refusing to plan route: {'; '.join(errors)}")
            distance = route.total_km if math.isfinite(route.total_km) and route.total_km > 0 else 0.0
            return PlanResult(total_distance_km=_round(distance), is_valid=False, errors=errors)

        initial_battery = current_charge_percent / 100 * vehicle.battery_capacity_kwh
        one_way_km = route.total_km / (2 if is_round_trip else 1)
        total_minutes = route.total_km / self.settings.average_speed_kmh * 60

        outward = self.simulate_leg(
            vehicle, 0.0, one_way_km, "outward", initial_battery, route.total_km, route.path
        )
        stops = list(outward.stops)
        total_minutes += outward.charging_minutes

        if is_round_trip:
            # Return leg continues with whatever charge the outward leg ended on
            inbound = self.simulate_leg(
                vehicle, one_way_km, route.total_km, "return",
                outward.ending_battery_kwh, route.total_km, route.path
            )
            stops.extend(inbound.stops)
            total_minutes += inbound.charging_minutes

        result = PlanResult(
            stops=stops,
            total_time_minutes=math.floor(total_minutes),
            total_distance_km=_round(route.total_km),
            station_details=self._collect_station_details(stops),
        )
        logger.info(
            f"Planned {len(stops)} charging stops over {result.total_distance_km} km "
            f"({result.total_time_minutes} min)"
        )
        return result

    def simulate_leg(
        self,
        vehicle: VehicleProfile,
        start_km: float,
        end_km: float,
        direction: Direction,
        initial_battery_kwh: float,
        route_total_km: float,
        path: List[LatLng]
    ) -> LegResult:
        """
        Walk one direction of the route and record required charging stops

        Returns:
            LegResult with the leg's stops, the battery left at end_km and
            the unrounded charging time spent in the leg
        """
        settings = self.settings
        stops: List[ChargingStop] = []
        charging_minutes = 0.0
        current_km = start_km
        battery = initial_battery_kwh
        path_index = _path_index(current_km, route_total_km, len(path))

        while current_km < end_km:
            range_left = battery / vehicle.efficiency_kwh_per_km

            if range_left < settings.trigger_range_km and (end_km - current_km) > settings.min_remaining_leg_km:
                ideal_point = path[path_index]
                selection = self.selector.select_station(ideal_point, range_left, path, path_index)

                target_charge = vehicle.battery_capacity_kwh * settings.target_charge_fraction
                minutes = (target_charge - battery) / (vehicle.charge_rate_kw / 60)

                if selection.station is None:
                    stop = ChargingStop(
                        location=ideal_point,
                        duration_minutes=_round(minutes),
                        charge_amount_kwh=_round(target_charge),
                        distance_km=_round(current_km),
                        original_distance_km=_round(current_km),
                        direction=direction,
                    )
                else:
                    stop = ChargingStop(
                        location=selection.station.location,
                        duration_minutes=_round(minutes),
                        charge_amount_kwh=_round(target_charge),
                        distance_km=_round(selection.distance_km),
                        original_distance_km=_round(current_km),
                        station=selection.station,
                        direction=direction,
                    )
                logger.debug(
                    f"{direction} stop at km {stop.distance_km} (needed at km {stop.original_distance_km}), "
                    f"{stop.duration_minutes} min"
                )
                stops.append(stop)
                charging_minutes += minutes
                battery = target_charge

            remaining_km = end_km - current_km
            if remaining_km <= settings.min_remaining_leg_km:
                # No stop can be inserted this close to the end; the rest is assumed coverable
                step = remaining_km
            else:
                # Step with the pre-charge range so the vehicle never drains between checks
                step = min(max(range_left, 0.0) * settings.step_range_fraction, remaining_km)
            current_km += step
            path_index = _path_index(current_km, route_total_km, len(path))
            battery -= step * vehicle.efficiency_kwh_per_km

        return LegResult(stops=stops, ending_battery_kwh=battery, charging_minutes=charging_minutes)

    def _validate(self, current_charge_percent: float, route: RoutePath) -> List[str]:
        errors = []
        if not route.path:
            errors.append("Route has no path points.")
        if not math.isfinite(route.total_km):
            errors.append("Route distance must be a finite number.")
        elif route.total_km <= 0:
            errors.append("Route distance must be greater than zero.")
        if not 0 <= current_charge_percent <= 100:
            errors.append("Current charge must be between 0 and 100 percent.")
        return errors

    def _collect_station_details(self, stops: List[ChargingStop]) -> Dict[str, StationDetails]:
        details: Dict[str, StationDetails] = {}
        for stop in stops:
            if stop.station is not None and stop.station.place_id:
                details[stop.station.place_id] = self.details_cache.get_details(stop.station.place_id)
        return details


def _path_index(distance_km: float, route_total_km: float, path_length: int) -> int:
    index = math.floor(distance_km / route_total_km * (path_length - 1))
    return max(0, min(index, path_length - 1))


def _round(value: float) -> int:
    """Round half up, matching how distances and durations are displayed"""
    return math.floor(value + 0.5)
