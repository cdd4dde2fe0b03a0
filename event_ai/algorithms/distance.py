"""
Distance Algorithm
Great-circle distance between two locations using the Haversine formula

    a = sin²(Δφ/2) + cos φ1 · cos φ2 · sin²(Δλ/2)
    c = 2 · asin(√a)
    d = R · c          (R = 6371 km)

The formula handles antimeridian and polar wraparound as-is.
"""

from abc import ABC, abstractmethod
from math import asin, cos, radians, sin, sqrt
from typing import Optional

from ..schemas.ai_schemas import Location


EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance in kilometers between two points

    Args:
        lat1: Latitude of the first point (degrees)
        lon1: Longitude of the first point (degrees)
        lat2: Latitude of the second point (degrees)
        lon2: Longitude of the second point (degrees)

    Returns:
        float: Distance in kilometers

    Example:
        >>> round(haversine_km(0.0, 0.0, 0.0, 1.0), 1)  # one degree on the equator
        111.2
    """
    phi1 = radians(lat1)
    phi2 = radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = radians(lon2) - radians(lon1)

    a = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    # rounding can push a marginally above 1 for antipodal points
    c = 2 * asin(sqrt(min(1.0, a)))
    return EARTH_RADIUS_KM * c


class DistanceCalculator(ABC):
    """Computes the distance between two locations"""

    @abstractmethod
    def distance_km(self, from_location: Location, to_location: Location) -> Optional[float]:
        """
        Distance in kilometers, or None if it cannot be computed
        (either location is missing latitude or longitude).
        """


class HaversineDistanceCalculator(DistanceCalculator):
    """DistanceCalculator backed by haversine_km"""

    def distance_km(self, from_location: Location, to_location: Location) -> Optional[float]:
        if not from_location.has_coordinates() or not to_location.has_coordinates():
            return None

        return haversine_km(
            from_location.latitude,
            from_location.longitude,
            to_location.latitude,
            to_location.longitude,
        )
