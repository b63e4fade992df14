from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Direction = Literal["outward", "return"]


class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LatLng":
        return cls(lat=data["lat"], lng=data["lng"])


class VehicleProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    battery_capacity_kwh: float = Field(gt=0)
    efficiency_kwh_per_km: float = Field(gt=0)
    charge_rate_kw: float = Field(gt=0)
    min_charge_level_percent: float = Field(ge=0, le=100)
    rated_range_km: float
    connector_types: List[str]


class RoutePath(BaseModel):
    path: List[LatLng]
    total_km: float

    def as_round_trip(self) -> "RoutePath":
        """Out-and-back route: outward path, then the same points reversed."""
        return RoutePath(
            path=list(self.path) + list(reversed(self.path[:-1])),
            total_km=self.total_km * 2,
        )


class StationCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    place_id: Optional[str] = None
    name: str = ""
    address: str = ""
    location: Optional[LatLng] = None
    rating: Optional[float] = None
    open_now: Optional[bool] = None

    @classmethod
    def from_place(cls, place: Dict[str, Any]) -> "StationCandidate":
        """Build a candidate from a Places API result or details record"""
        location = None
        geometry = place.get("geometry") or {}
        if geometry.get("location"):
            location = LatLng.from_dict(geometry["location"])
        opening_hours = place.get("opening_hours") or {}
        return cls(
            place_id=place.get("place_id"),
            name=place.get("name", ""),
            address=place.get("formatted_address") or place.get("vicinity", ""),
            location=location,
            rating=place.get("rating"),
            open_now=opening_hours.get("open_now"),
        )


class StationDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    charger_types: List[str]
    connectors: List[str]
    power: str


class ChargingStop(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: LatLng
    duration_minutes: int
    charge_amount_kwh: int
    distance_km: int
    original_distance_km: int
    station: Optional[StationCandidate] = None
    direction: Direction


class LegResult(BaseModel):
    stops: List[ChargingStop] = []
    ending_battery_kwh: float
    charging_minutes: float = 0.0


class PlanResult(BaseModel):
    stops: List[ChargingStop] = []
    total_time_minutes: int = 0
    total_distance_km: int = 0
    station_details: Dict[str, StationDetails] = {}
    is_valid: bool = True
    errors: List[str] = []


class TripRequest(BaseModel):
    source: str
    destination: str
    vehicle_name: str
    current_charge_percent: float = Field(default=80, ge=0, le=100)
    is_round_trip: bool = False
