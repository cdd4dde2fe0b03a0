# tests/conftest.py
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from event_ai.agents.orchestrator import RecommendationOrchestrator
from event_ai.algorithms.candidate_selector import CandidateSelector
from event_ai.algorithms.distance import HaversineDistanceCalculator
from event_ai.interfaces.event_store import InMemoryEventStore
from event_ai.llm.recommender import FakeRecommendationService
from event_ai.schemas.ai_schemas import Event, Location


BASE_TIME = datetime(2026, 11, 2, 18, 0, tzinfo=timezone.utc)

# Lausanne area; one degree of latitude is ~111.2 km
USER_LOCATION = Location(name="EPFL", latitude=46.5197, longitude=6.5668)


def location_north_of(origin: Location, km: float, name: str = "Venue") -> Location:
    """A point `km` kilometers due north of origin"""
    return Location(name=name, latitude=origin.latitude + km / 111.195, longitude=origin.longitude)


def make_event(
    event_id: str,
    hours_from_base: float = 0,
    location: Optional[Location] = None,
    capacity: Optional[int] = None,
    participants: Optional[List[str]] = None,
    tags: Optional[List[str]] = None,
    price: float = 0.0,
) -> Event:
    return Event(
        id=event_id,
        title=f"Event {event_id}",
        description=f"Description of {event_id}",
        start_time=BASE_TIME + timedelta(hours=hours_from_base),
        location=location if location is not None else Location.undefined(),
        tags=tags or ["Music"],
        capacity=capacity,
        participant_ids=participants or [],
        price=price,
    )


@pytest.fixture
def selector():
    return CandidateSelector(
        distance_calculator=HaversineDistanceCalculator(),
        max_candidates=30,
        max_distance_km=100.0,
    )


@pytest.fixture
def event_store():
    return InMemoryEventStore([
        make_event("e1", 1, location_north_of(USER_LOCATION, 5, "Near")),
        make_event("e2", 2, location_north_of(USER_LOCATION, 15, "Mid"), capacity=10, participants=["a", "b"]),
        make_event("e3", 3, location_north_of(USER_LOCATION, 60, "Far")),
    ])


@pytest.fixture
def orchestrator(event_store):
    return RecommendationOrchestrator(
        recommendation_service=FakeRecommendationService(),
        event_store=event_store,
        candidate_selector=CandidateSelector(HaversineDistanceCalculator(), max_candidates=30, max_distance_km=20.0),
    )
