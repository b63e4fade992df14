"""
Great-circle distance helpers.
"""

import math

from evplanner.models.planner_models import LatLng

EARTH_RADIUS_KM = 6371.0


def haversine_km(point_a: LatLng, point_b: LatLng) -> float:
    """
    Compute the great-circle distance in kilometres between two points

    Args:
        point_a: origin
        point_b: destination

    Returns:
        Distance in kilometres, 0.0 for identical points
    """
    lat1, lng1 = math.radians(point_a.lat), math.radians(point_a.lng)
    lat2, lng2 = math.radians(point_b.lat), math.radians(point_b.lng)

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # Clamp to guard against floating point overshoot for antipodal points
    c = 2 * math.asin(math.sqrt(min(1.0, a)))
    return EARTH_RADIUS_KM * c
