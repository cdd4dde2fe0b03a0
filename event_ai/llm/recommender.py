# llm/recommender.py
"""
Recommendation Services - the external reasoning step
Takes an AiRecommendationRequest (query + coarse context + ranked candidates)
and returns an AiRecommendationResponse.

Implementations:
- OpenAIRecommendationService: chat completions with a JSON-only prompt
- FakeRecommendationService: deterministic, no network (development/tests)
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from loguru import logger
from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from ..schemas.ai_schemas import (
    AiRecommendationRequest,
    AiRecommendationResponse,
    AiRecommendedEvent,
    AiUserContext,
)
from .prompts import RECOMMENDATION_SYSTEM_PROMPT, RECOMMENDATION_USER_PROMPT


class RecommendationServiceError(RuntimeError):
    """The reasoning service could not produce a response"""


class RecommendationService(ABC):
    """Reasoning service contract consumed by the orchestrator"""

    @abstractmethod
    async def recommend_events(
        self,
        request: AiRecommendationRequest,
        conversation_id: Optional[str] = None
    ) -> AiRecommendationResponse:
        """Return recommendations for the request"""


# ============================================
# Fake (deterministic)
# ============================================

class FakeRecommendationService(RecommendationService):
    """
    Deterministic service: recommends the first two candidates.
    Lets the API and orchestrator run without an LLM.
    """

    async def recommend_events(
        self,
        request: AiRecommendationRequest,
        conversation_id: Optional[str] = None
    ) -> AiRecommendationResponse:
        if not request.events:
            return AiRecommendationResponse(
                assistant_message=(
                    "I couldn't find any events matching your criteria. "
                    "Try adjusting your search filters or location."
                ),
                recommended_events=[],
                followup_questions=[
                    "Can you expand the search radius?",
                    "Would you like to see events from different categories?"
                ]
            )

        picked = request.events[:2]
        reasons = [
            "This event matches your interests and is happening soon",
            "Popular event in your area with available spots"
        ]
        recommended = [
            AiRecommendedEvent(id=event.id, reason=reasons[min(i, 1)])
            for i, event in enumerate(picked)
        ]

        titles = " and ".join(f'"{event.title}"' for event in picked)
        if len(picked) == 1:
            message = (
                f"Based on your query, I recommend checking out {titles}. "
                "It looks like a great match for what you're looking for!"
            )
        else:
            message = f"I found {len(picked)} events that might interest you: {titles}. Both look exciting!"

        return AiRecommendationResponse(
            assistant_message=message,
            recommended_events=recommended,
            followup_questions=[
                "Would you like more details about these events?",
                "Are you interested in similar events?",
                "Do you want to see events at different times?"
            ]
        )


# ============================================
# OpenAI
# ============================================

PARSING_FALLBACK = AiRecommendationResponse(
    assistant_message="Sorry, I couldn't properly analyze the available events. Can you rephrase your request?",
    recommended_events=[],
    followup_questions=[
        "Would you like to see all available events?",
        "Can you specify your preferences?"
    ]
)


def format_events_for_prompt(request: AiRecommendationRequest) -> List[Dict[str, str]]:
    """Flatten candidate summaries into human-readable fields for the prompt"""
    formatted = []
    for event in request.events:
        if event.start_time is not None:
            date_str = event.start_time.strftime("%m/%d/%Y %H:%M")
        else:
            date_str = "Date not specified"

        if event.distance_km is not None:
            distance_str = f"{event.distance_km:.1f} km"
        else:
            distance_str = "Distance unknown"

        if event.capacity_remaining is not None:
            places_str = f"{event.capacity_remaining} places remaining"
        else:
            places_str = "Unlimited capacity"

        formatted.append({
            "id": event.id,
            "title": event.title,
            "description": event.description or "No description",
            "date": date_str,
            "tags": ", ".join(event.tags),
            "location": event.location_description or "Location not specified",
            "distance": distance_str,
            "price": "Free" if event.price == 0 else f"{event.price:g} CHF",
            "places": places_str,
        })
    return formatted


def describe_user_context(context: AiUserContext) -> str:
    parts = []
    if context.approx_location:
        parts.append(f"near {context.approx_location}")
    if context.max_distance_km is not None:
        parts.append(f"within {context.max_distance_km:g} km")
    if context.time_window_start is not None:
        parts.append(f"from {context.time_window_start.strftime('%m/%d/%Y %H:%M')}")
    if context.time_window_end is not None:
        parts.append(f"until {context.time_window_end.strftime('%m/%d/%Y %H:%M')}")
    return ", ".join(parts) if parts else "none"


def clean_response(text: str) -> str:
    """Strip markdown code fences the model sometimes adds"""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_response_content(content: str) -> AiRecommendationResponse:
    """
    Parse the model's JSON answer.
    An unparseable answer yields PARSING_FALLBACK (no recommendations).
    """
    cleaned = clean_response(content)
    try:
        response = AiRecommendationResponse.model_validate_json(cleaned)
    except ValidationError as e:
        logger.warning(f"Failed to parse AI response JSON ({e.error_count()} errors): {cleaned[:200]}")
        return PARSING_FALLBACK.model_copy(deep=True)

    logger.debug(f"Parsed {len(response.recommended_events)} recommended events")
    return response


class OpenAIRecommendationService(RecommendationService):
    """
    Reasoning service backed by the OpenAI chat completions API.
    Transport and API failures raise RecommendationServiceError.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 500,
        client: Optional[AsyncOpenAI] = None
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise RecommendationServiceError("OpenAI API key is not configured (OPENAI_API_KEY)")
            self._client = AsyncOpenAI(api_key=self.api_key)
            logger.info(f"OpenAIRecommendationService: client initialized, model={self.model}")
        return self._client

    def build_messages(
        self,
        request: AiRecommendationRequest,
        now: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        now = now or datetime.now()
        system_prompt = RECOMMENDATION_SYSTEM_PROMPT.format(
            current_date=now.strftime("%Y-%m-%d"),
            current_time=now.strftime("%H:%M:%S"),
            response_language=request.response_language,
        )

        if request.events:
            events_header = f"{len(request.events)} event(s):"
        else:
            events_header = "No events available."

        user_prompt = RECOMMENDATION_USER_PROMPT.format(
            user_query=request.user_query,
            user_context=describe_user_context(request.user_context),
            events_header=events_header,
            events_json=json.dumps(format_events_for_prompt(request), ensure_ascii=False),
        )

        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    async def recommend_events(
        self,
        request: AiRecommendationRequest,
        conversation_id: Optional[str] = None
    ) -> AiRecommendationResponse:
        logger.info(
            f"Requesting recommendations: {len(request.events)} candidates, "
            f"conversation={conversation_id}"
        )
        messages = self.build_messages(request)

        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise RecommendationServiceError(f"OpenAI API call failed: {e}") from e

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            raise RecommendationServiceError("API returned no valid choices with message content")

        return parse_response_content(content)
