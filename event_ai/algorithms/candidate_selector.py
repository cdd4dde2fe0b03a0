"""
Candidate Selector - narrows the event universe for the reasoning service

Selection steps, in order:
1. Time filter     - keep events starting inside [start, end] (only if a window is given)
2. Distance filter - drop events farther than max_distance_km (only with a user location)
3. Ordering        - nearest first with a user location, otherwise soonest first
4. Truncation      - clip to max_candidates
5. Mapping         - project each survivor to an AiEventSummary

Events whose own location has no coordinates get distance_km=None and are
never dropped by the distance rule: unknown distance is not "too far".
"""

from typing import Dict, List, Optional, Sequence

from loguru import logger

from ..schemas.ai_schemas import AiEventSummary, Event, Location, TimeWindow
from .distance import DistanceCalculator


DEFAULT_MAX_CANDIDATES = 30
DEFAULT_MAX_DISTANCE_KM = 20.0


def to_ai_event_summary(event: Event, distance_km: Optional[float] = None) -> AiEventSummary:
    """
    Project an Event onto the compact summary sent to the reasoning service

    capacity_remaining is reported as-is (capacity minus participants);
    callers must keep participant lists within capacity upstream.
    """
    capacity_remaining = None
    if event.capacity is not None:
        capacity_remaining = event.capacity - len(event.participant_ids)

    return AiEventSummary(
        id=event.id,
        title=event.title,
        description=event.description or None,
        start_time=event.start_time,
        end_time=event.end_time,
        tags=list(event.tags),
        distance_km=distance_km,
        location_description=event.location.name,
        capacity_remaining=capacity_remaining,
        price=event.price,
    )


class CandidateSelector:
    """
    Selects and ranks candidate events

    Usage:
        selector = CandidateSelector(HaversineDistanceCalculator(), max_candidates=30)
        summaries = selector.select_candidates(
            all_events=events,
            user_location=Location(name="EPFL", latitude=46.52, longitude=6.57),
            time_window=(start, end)
        )
    """

    def __init__(
        self,
        distance_calculator: Optional[DistanceCalculator] = None,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM
    ):
        """
        Initialize Candidate Selector

        Args:
            distance_calculator: Calculator used for distance filtering/sorting;
                None disables distance mode entirely
            max_candidates: Default cap on returned summaries
            max_distance_km: Default distance cutoff in kilometers
        """
        self.distance_calculator = distance_calculator
        self.max_candidates = max_candidates
        self.max_distance_km = max_distance_km

    def select_candidates(
        self,
        all_events: Sequence[Event],
        user_location: Optional[Location] = None,
        time_window: Optional[TimeWindow] = None,
        max_distance_km: Optional[float] = None,
        max_candidates: Optional[int] = None
    ) -> List[AiEventSummary]:
        """
        Select candidate events based on user context

        Args:
            all_events: Complete list of events to select from
            user_location: Optional user location for distance filtering and sorting
            time_window: Optional (start, end) window; None means no time constraint
            max_distance_km: Override for the configured distance cutoff
            max_candidates: Override for the configured candidate cap

        Returns:
            List[AiEventSummary]: Ranked, size-bounded candidate summaries
        """
        if max_distance_km is None:
            max_distance_km = self.max_distance_km
        if max_candidates is None:
            max_candidates = self.max_candidates

        candidates = list(all_events)

        if time_window is not None:
            window_start, window_end = time_window
            candidates = [e for e in candidates if window_start <= e.start_time <= window_end]
            logger.debug(f"After time filter: {len(candidates)}/{len(all_events)} events")

        distance_mode = (
            user_location is not None
            and user_location.has_coordinates()
            and self.distance_calculator is not None
        )

        distances: Dict[str, Optional[float]] = {}
        if distance_mode:
            kept = []
            for event in candidates:
                distance = self.distance_calculator.distance_km(user_location, event.location)
                if distance is not None and distance > max_distance_km:
                    continue
                distances[event.id] = distance
                kept.append(event)
            candidates = kept
            logger.debug(f"After distance filter (<= {max_distance_km} km): {len(candidates)} events")

            # Unknown distances sort last; sort is stable otherwise
            candidates.sort(key=lambda e: (distances[e.id] is None, distances[e.id] or 0.0))
        else:
            candidates.sort(key=lambda e: e.start_time)

        candidates = candidates[:max(0, max_candidates)]

        return [to_ai_event_summary(e, distances.get(e.id)) for e in candidates]
