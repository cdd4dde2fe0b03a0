# tests/test_distance.py
import math

import pytest

from event_ai.algorithms.distance import EARTH_RADIUS_KM, HaversineDistanceCalculator, haversine_km
from event_ai.schemas.ai_schemas import Location


calculator = HaversineDistanceCalculator()

LAUSANNE = Location(name="Lausanne", latitude=46.5197, longitude=6.6323)
GENEVA = Location(name="Geneva", latitude=46.2044, longitude=6.1432)
ZURICH = Location(name="Zurich", latitude=47.3769, longitude=8.5417)
NEW_YORK = Location(name="New York", latitude=40.7128, longitude=-74.0060)
SYDNEY = Location(name="Sydney", latitude=-33.8688, longitude=151.2093)

PAIRS = [
    (LAUSANNE, GENEVA),
    (LAUSANNE, ZURICH),
    (GENEVA, NEW_YORK),
    (NEW_YORK, SYDNEY),
    (Location(name="W", latitude=0.0, longitude=179.5), Location(name="E", latitude=0.0, longitude=-179.5)),
    (Location(name="N", latitude=89.9, longitude=0.0), Location(name="N2", latitude=89.9, longitude=180.0)),
]


@pytest.mark.parametrize("a,b", PAIRS)
def test_distance_is_symmetric(a, b):
    assert calculator.distance_km(a, b) == pytest.approx(calculator.distance_km(b, a), abs=0.01)


@pytest.mark.parametrize("loc", [LAUSANNE, NEW_YORK, SYDNEY])
def test_distance_to_self_is_zero(loc):
    assert calculator.distance_km(loc, loc) == pytest.approx(0.0, abs=0.01)


def test_known_city_distances():
    assert calculator.distance_km(LAUSANNE, GENEVA) == pytest.approx(51.0, abs=2.0)
    assert calculator.distance_km(NEW_YORK, SYDNEY) == pytest.approx(15990, rel=0.01)


def test_one_degree_on_equator():
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(EARTH_RADIUS_KM * math.pi / 180, rel=1e-9)


def test_antimeridian_wraparound_is_short():
    d = haversine_km(0.0, 179.5, 0.0, -179.5)
    assert d == pytest.approx(111.19, abs=0.05)


def test_across_the_pole():
    d = haversine_km(89.0, 0.0, 89.0, 180.0)
    assert d == pytest.approx(2 * 111.19, abs=0.1)


def test_antipodal_points_half_circumference():
    assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-9)


def test_missing_coordinates_returns_none():
    no_lat = Location(name="Somewhere", latitude=None, longitude=6.6)
    no_lon = Location(name="Somewhere", latitude=46.5, longitude=None)
    assert calculator.distance_km(no_lat, LAUSANNE) is None
    assert calculator.distance_km(LAUSANNE, no_lon) is None
    assert calculator.distance_km(Location.undefined(), Location.undefined()) is None


def test_missing_name_is_tolerated():
    unnamed = Location(latitude=46.5197, longitude=6.6323)
    assert calculator.distance_km(unnamed, LAUSANNE) == pytest.approx(0.0, abs=0.01)
    assert not unnamed.is_defined()
    assert unnamed.has_coordinates()
