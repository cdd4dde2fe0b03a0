"""
AI Algorithms Module
Distance computation and candidate selection
"""

from .distance import haversine_km, DistanceCalculator, HaversineDistanceCalculator, EARTH_RADIUS_KM
from .candidate_selector import (
    CandidateSelector,
    to_ai_event_summary,
    DEFAULT_MAX_CANDIDATES,
    DEFAULT_MAX_DISTANCE_KM
)

__all__ = [
    "haversine_km",
    "DistanceCalculator",
    "HaversineDistanceCalculator",
    "EARTH_RADIUS_KM",
    "CandidateSelector",
    "to_ai_event_summary",
    "DEFAULT_MAX_CANDIDATES",
    "DEFAULT_MAX_DISTANCE_KM"
]
