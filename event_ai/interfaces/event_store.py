# interfaces/event_store.py
"""
Event Store - filtered event retrieval and participation edits
The orchestrator depends only on the EventStore contract; InMemoryEventStore
is a deterministic implementation for development, demos and tests.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from loguru import logger

from ..algorithms.distance import haversine_km
from ..schemas.ai_schemas import Event, Filters, Location


def utc_date(value: datetime) -> date:
    """Calendar date of a timestamp in UTC (naive values are taken as UTC)"""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(timezone.utc).date()


class EventNotFoundError(LookupError):
    """Raised when an event id is unknown to the store"""

    def __init__(self, event_id: str):
        super().__init__(f"Event not found (id={event_id})")
        self.event_id = event_id


class EventFullError(RuntimeError):
    """Raised when joining an event that has reached its capacity"""

    def __init__(self, event_id: str, capacity: int):
        super().__init__(f"Event is full (id={event_id}, capacity={capacity})")
        self.event_id = event_id
        self.capacity = capacity


class EventStore(ABC):
    """Queryable store of events"""

    @abstractmethod
    async def get_filtered_events(self, filters: Filters, user_id: str = "") -> List[Event]:
        """Return events matching the filters"""

    @abstractmethod
    async def edit_event_as_user(self, event_id: str, user_id: str, join: bool) -> None:
        """
        Add (join=True) or remove (join=False) user_id from the event's participants.
        Must raise EventNotFoundError for unknown events.
        """

    @abstractmethod
    async def get_event(self, event_id: str) -> Event:
        """Return one event or raise EventNotFoundError"""


def matches_filters(event: Event, filters: Filters) -> bool:
    """
    Check an event against Filters

    - start/end date are inclusive and compared with the event's UTC start date
    - place + radius drops events whose distance is known and too large;
      events without coordinates are kept
    - tags match case-insensitively if any tag overlaps
    """
    event_date = utc_date(event.start_time)
    if filters.start_date is not None and event_date < filters.start_date:
        return False
    if filters.end_date is not None and event_date > filters.end_date:
        return False

    if filters.max_price is not None and event.price > filters.max_price:
        return False

    if filters.tags:
        wanted = {tag.strip().lower() for tag in filters.tags}
        if not any(tag.strip().lower() in wanted for tag in event.tags):
            return False

    place = filters.place
    if (
        place is not None
        and filters.radius_km is not None
        and place.has_coordinates()
        and event.location.has_coordinates()
    ):
        distance = haversine_km(
            place.latitude, place.longitude,
            event.location.latitude, event.location.longitude
        )
        if distance > filters.radius_km:
            return False

    return True


class InMemoryEventStore(EventStore):
    """
    In-memory EventStore backed by a dict.
    Seeded with sample events around the EPFL campus unless events are given.
    """

    def __init__(self, initial_events: Optional[Iterable[Event]] = None):
        events = list(initial_events) if initial_events is not None else default_sample_events()
        self._events: Dict[str, Event] = {}
        for event in events:
            self._events[event.id] = _with_owner_participant(event)
        self._lock = asyncio.Lock()
        logger.info(f"InMemoryEventStore initialized with {len(self._events)} events")

    async def get_filtered_events(self, filters: Filters, user_id: str = "") -> List[Event]:
        matched = [e for e in self._events.values() if matches_filters(e, filters)]
        matched.sort(key=lambda e: e.start_time)
        logger.debug(f"get_filtered_events: {len(matched)}/{len(self._events)} events matched")
        return matched

    async def get_event(self, event_id: str) -> Event:
        event = self._events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def edit_event_as_user(self, event_id: str, user_id: str, join: bool) -> None:
        async with self._lock:
            event = await self.get_event(event_id)
            is_participant = user_id in event.participant_ids

            if join:
                if is_participant:
                    return
                if event.capacity is not None and len(event.participant_ids) >= event.capacity:
                    raise EventFullError(event_id, event.capacity)
                participants = event.participant_ids + [user_id]
            else:
                if not is_participant:
                    return
                participants = [p for p in event.participant_ids if p != user_id]

            self._events[event_id] = event.model_copy(update={"participant_ids": participants})

        logger.info(f"User {user_id} {'joined' if join else 'left'} event {event_id}")

    async def add_event(self, event: Event) -> None:
        self._events[event.id] = _with_owner_participant(event)

    def __len__(self) -> int:
        return len(self._events)


def _with_owner_participant(event: Event) -> Event:
    """Owners always count as participants"""
    if event.owner_id and event.owner_id not in event.participant_ids:
        return event.model_copy(update={"participant_ids": event.participant_ids + [event.owner_id]})
    return event


def _participants(owner_id: str, additional: int) -> List[str]:
    return [owner_id] + [f"{owner_id}_guest{i}" for i in range(1, additional + 1)]


def default_sample_events(now: Optional[datetime] = None) -> List[Event]:
    """Deterministic sample events positioned around the EPFL campus"""
    now = now or datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    day = timedelta(days=1)

    return [
        Event(
            id="event1",
            title="Music Festival",
            description="Live music and food trucks on the lawn",
            start_time=now + timedelta(hours=4),
            end_time=now + timedelta(hours=10),
            location=Location(name="EPFL Campus", latitude=46.5197, longitude=6.5668),
            tags=["Music", "Festival"],
            owner_id="user1",
            participant_ids=_participants("user1", 45),
        ),
        Event(
            id="event2",
            title="Tech Conference",
            description="Latest technology trends and startup pitches",
            start_time=now + day,
            end_time=now + day + timedelta(hours=8),
            location=Location(name="Rolex Learning Center", latitude=46.5187, longitude=6.5659),
            tags=["Technology", "Conference"],
            owner_id="user2",
            capacity=500,
            participant_ids=_participants("user2", 385),
            price=25.0,
        ),
        Event(
            id="event3",
            title="Food Festival",
            description="International cuisine from student associations",
            start_time=now + day + timedelta(hours=3),
            location=Location(name="EPFL Plaza", latitude=46.5192, longitude=6.5662),
            tags=["Food", "Festival"],
            owner_id="user3",
            capacity=400,
            participant_ids=_participants("user3", 120),
        ),
        Event(
            id="event4",
            title="Basketball Game",
            description="Friendly basketball match",
            start_time=now + 2 * day,
            location=Location(name="EPFL Sports Center", latitude=46.5217, longitude=6.5688),
            tags=["Sports", "Basketball"],
            owner_id="user4",
            capacity=20,
            participant_ids=_participants("user4", 14),
        ),
        Event(
            id="event5",
            title="Art Exhibition",
            description="Contemporary art showcase",
            start_time=now + 3 * day,
            end_time=now + 10 * day,
            location=Location(name="EPFL ArtLab", latitude=46.5177, longitude=6.5653),
            tags=["Art", "Culture"],
            owner_id="user5",
            price=10.0,
        ),
        Event(
            id="event6",
            title="Lakeside Wine Tasting",
            description="Local wines from the Lavaux terraces",
            start_time=now + 4 * day,
            location=Location(name="Ouchy", latitude=46.5065, longitude=6.6267),
            tags=["Food", "Wine"],
            owner_id="user6",
            capacity=30,
            participant_ids=_participants("user6", 12),
            price=35.0,
        ),
        Event(
            id="event7",
            title="Geneva Jazz Night",
            description="Jazz quartet in the old town",
            start_time=now + 5 * day,
            location=Location(name="Geneva Old Town", latitude=46.2010, longitude=6.1480),
            tags=["Music", "Jazz"],
            owner_id="user7",
            capacity=80,
            participant_ids=_participants("user7", 40),
            price=20.0,
        ),
        Event(
            id="event8",
            title="Online Coding Workshop",
            description="Intro to Python, streamed live",
            start_time=now + 2 * day + timedelta(hours=6),
            location=Location.undefined(),
            tags=["Technology", "Workshop"],
            owner_id="user8",
        ),
    ]
