# agents/orchestrator.py
"""
Recommendation Orchestrator (one per conversation)
Pipeline per query:
1. Fetch events from the event store using Filters built from the context
2. Narrow them with the CandidateSelector
3. Build the AiRecommendationRequest
4. Call the reasoning service
5. Keep the response as the session's last result

Follow-up actions ("join the second one") resolve against the last result.
The orchestrator does no recovery of its own: collaborator errors propagate
and leave the last result untouched.
"""

import asyncio
from datetime import datetime
from typing import Optional

from loguru import logger

from ..algorithms.candidate_selector import CandidateSelector
from ..interfaces.event_store import EventStore, utc_date
from ..llm.recommender import RecommendationService
from ..schemas.ai_schemas import (
    AiRecommendationRequest,
    AiRecommendationResponse,
    AiUserContext,
    Filters,
    Location,
)


class NoPreviousResultError(RuntimeError):
    """Join requested before any query (or after a reset)"""

    def __init__(self):
        super().__init__("No previous query result available")


class RecommendationIndexError(IndexError):
    """Join index outside the last result's recommended events"""

    def __init__(self, index: int, size: int):
        super().__init__(f"Index {index} is out of bounds for {size} recommended events")
        self.index = index
        self.size = size


class RecommendationOrchestrator:
    """
    Coordinates event store, candidate selector and reasoning service
    for a single conversation session.

    Not meant to be shared between conversations; calls on one instance
    are serialized by an internal lock.
    """

    def __init__(
        self,
        recommendation_service: RecommendationService,
        event_store: EventStore,
        candidate_selector: Optional[CandidateSelector] = None,
        response_language: str = "en"
    ):
        self.recommendation_service = recommendation_service
        self.event_store = event_store
        self.candidate_selector = candidate_selector or CandidateSelector()
        self.response_language = response_language

        self._last_result: Optional[AiRecommendationResponse] = None
        self._last_conversation_id: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def last_conversation_id(self) -> Optional[str]:
        return self._last_conversation_id

    def get_last_result(self) -> Optional[AiRecommendationResponse]:
        """Last successful response, or None when idle"""
        return self._last_result

    def _build_filters(
        self,
        user_location: Optional[Location],
        time_window_start: Optional[datetime],
        time_window_end: Optional[datetime],
        max_distance_km: Optional[float]
    ) -> Filters:
        place = user_location if user_location is not None and user_location.has_coordinates() else None
        return Filters(
            start_date=utc_date(time_window_start) if time_window_start is not None else None,
            end_date=utc_date(time_window_end) if time_window_end is not None else None,
            place=place,
            radius_km=max_distance_km if place is not None else None,
        )

    async def process_query(
        self,
        user_query: str,
        user_location: Optional[Location] = None,
        time_window_start: Optional[datetime] = None,
        time_window_end: Optional[datetime] = None,
        max_distance_km: Optional[float] = None,
        user_id: str = "",
        conversation_id: Optional[str] = None
    ) -> AiRecommendationResponse:
        """
        Run a user query through the recommendation pipeline.

        Args:
            user_query: Free-text query (passed through as-is)
            user_location: Optional location for proximity filtering and ranking
            time_window_start: Optional window start; forms a window with time_window_end
            time_window_end: Optional window end
            max_distance_km: Optional distance cutoff; selector default when None
            user_id: Requesting user, forwarded to the event store
            conversation_id: Conversation to continue; defaults to the last one

        Returns:
            AiRecommendationResponse, also stored as the last result

        Raises:
            Any exception from the event store or reasoning service, unchanged
        """
        async with self._lock:
            current_conversation_id = conversation_id or self._last_conversation_id

            filters = self._build_filters(user_location, time_window_start, time_window_end, max_distance_km)
            all_events = await self.event_store.get_filtered_events(filters, user_id=user_id)

            time_window = None
            if time_window_start is not None and time_window_end is not None:
                time_window = (time_window_start, time_window_end)

            candidates = self.candidate_selector.select_candidates(
                all_events=all_events,
                user_location=user_location,
                time_window=time_window,
                max_distance_km=max_distance_km,
            )

            request = AiRecommendationRequest(
                user_query=user_query,
                user_context=AiUserContext(
                    approx_location=user_location.name if user_location is not None else None,
                    max_distance_km=max_distance_km,
                    time_window_start=time_window_start,
                    time_window_end=time_window_end,
                ),
                events=candidates,
                response_language=self.response_language,
            )

            logger.info(
                f"Processing query: {len(all_events)} events fetched, "
                f"{len(candidates)} candidates, conversation={current_conversation_id}"
            )

            response = await self.recommendation_service.recommend_events(
                request, conversation_id=current_conversation_id
            )

            self._last_result = response
            self._last_conversation_id = current_conversation_id

            logger.info(f"Query processed: {len(response.recommended_events)} recommended events")
            return response

    async def join_recommended_event_by_index(self, index: int, user_id: str) -> str:
        """
        Join one of the last result's recommended events by 0-based index.

        Returns:
            The joined event id

        Raises:
            NoPreviousResultError: No query has been made since creation or reset
            RecommendationIndexError: index outside [0, len(recommended_events))
        """
        async with self._lock:
            result = self._last_result
            if result is None:
                raise NoPreviousResultError()

            size = len(result.recommended_events)
            if index < 0 or index >= size:
                raise RecommendationIndexError(index, size)

            event_id = result.recommended_events[index].id
            await self.event_store.edit_event_as_user(event_id, user_id, join=True)

        logger.info(f"User {user_id} joined recommended event #{index} ({event_id})")
        return event_id

    async def join_recommended_event_by_id(self, event_id: str, user_id: str) -> None:
        """Join an event directly by its id"""
        await self.event_store.edit_event_as_user(event_id, user_id, join=True)
        logger.info(f"User {user_id} joined event {event_id}")

    async def reset_conversation(self):
        """
        Forget the last result and conversation id.
        Waits for an in-flight query, so a reset issued during one still wins.
        """
        async with self._lock:
            self._last_result = None
            self._last_conversation_id = None
