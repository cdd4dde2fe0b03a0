# schemas/__init__.py
"""
Pydantic Schemas Package

Contains all Pydantic v2 models for:
- Event data (Location, Event, Filters)
- The reasoning-service contract
- API requests/responses
"""

from .ai_schemas import (
    # Events
    TimeWindow, Location, Event, Filters,
    # Reasoning service
    AiEventSummary, AiUserContext, AiRecommendationRequest,
    AiRecommendedEvent, AiRecommendationResponse,
    # API
    AssistantQueryRequest, AssistantQueryResponse, JoinByIndexRequest,
    JoinResponse, LastResultResponse, HealthResponse
)

__all__ = [
    # Events
    "TimeWindow", "Location", "Event", "Filters",
    # Reasoning service
    "AiEventSummary", "AiUserContext", "AiRecommendationRequest",
    "AiRecommendedEvent", "AiRecommendationResponse",
    # API
    "AssistantQueryRequest", "AssistantQueryResponse", "JoinByIndexRequest",
    "JoinResponse", "LastResultResponse", "HealthResponse"
]
