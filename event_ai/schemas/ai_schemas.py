# schemas/ai_schemas.py
"""
Pydantic v2 schemas for the Event Recommendation Assistant
Covers event data, the reasoning-service contract and the API surface
"""

from datetime import date, datetime
from typing import Optional, List, Tuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# A closed [start, end] window; None means "no time constraint"
TimeWindow = Tuple[datetime, datetime]


# ============================================
# Location
# ============================================

class Location(BaseModel):
    """
    Geographic point with a human-readable name.
    All fields are optional so that an all-null value can stand for
    an unknown place (see Location.undefined()).
    """
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def is_defined(self) -> bool:
        """True when name, latitude and longitude are all set"""
        return self.name is not None and self.has_coordinates()

    def has_coordinates(self) -> bool:
        """True when a distance can be computed from this location"""
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def undefined(cls) -> "Location":
        return cls()


# ============================================
# Events (owned by the event store)
# ============================================

class Event(BaseModel):
    """Event record as returned by the event store"""
    id: str
    title: str
    description: str = ""
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Location = Field(default_factory=Location.undefined)
    tags: List[str] = Field(default_factory=list)
    public: bool = True
    owner_id: str = ""
    capacity: Optional[int] = None
    participant_ids: List[str] = Field(default_factory=list)
    price: float = 0.0


class Filters(BaseModel):
    """
    Structural event filters understood by the event store.
    Every field is optional; an empty Filters matches everything.
    """
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    place: Optional[Location] = None
    radius_km: Optional[float] = None
    max_price: Optional[float] = None
    tags: List[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return (
            self.start_date is None
            and self.end_date is None
            and self.place is None
            and self.radius_km is None
            and self.max_price is None
            and not self.tags
        )


# ============================================
# Reasoning-service contract
# ============================================

class _AiModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AiEventSummary(_AiModel):
    """Compact projection of an Event sent to the reasoning service"""
    id: str
    title: str
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    distance_km: Optional[float] = None  # None = unknown, not zero
    location_description: Optional[str] = None
    capacity_remaining: Optional[int] = None  # None = unlimited
    price: float = 0.0


class AiUserContext(_AiModel):
    """Coarse user context; never carries raw coordinates"""
    approx_location: Optional[str] = None
    max_distance_km: Optional[float] = None
    time_window_start: Optional[datetime] = None
    time_window_end: Optional[datetime] = None


class AiRecommendationRequest(_AiModel):
    """Request to the reasoning service. Event order is the ranking signal."""
    user_query: str
    user_context: AiUserContext = Field(default_factory=AiUserContext)
    events: List[AiEventSummary] = Field(default_factory=list)
    response_language: str = "en"


class AiRecommendedEvent(_AiModel):
    """One highlighted event, in the order the service returned it"""
    id: str
    reason: str = ""


class AiRecommendationResponse(_AiModel):
    """Structured answer from the reasoning service"""
    assistant_message: str
    recommended_events: List[AiRecommendedEvent] = Field(default_factory=list)
    followup_questions: Optional[List[str]] = None


# ============================================
# API Request/Response
# ============================================

class AssistantQueryRequest(BaseModel):
    """POST /api/ai/assistant/query"""
    query: str = Field(..., max_length=2000, description="User's free-text query")
    user_id: str = Field("", description="User identifier")
    session_id: Optional[str] = Field(None, description="Session ID for context continuity")
    conversation_id: Optional[str] = Field(None, description="Conversation ID forwarded to the AI service")
    location: Optional[Location] = None
    time_window_start: Optional[AwareDatetime] = Field(None, description="Window start; must carry a UTC offset")
    time_window_end: Optional[AwareDatetime] = Field(None, description="Window end; must carry a UTC offset")
    max_distance_km: Optional[float] = Field(None, ge=0)


class AssistantQueryResponse(BaseModel):
    """Result of a processed query"""
    session_id: str
    result: AiRecommendationResponse
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class JoinByIndexRequest(BaseModel):
    """POST /api/ai/assistant/join"""
    session_id: str
    user_id: str
    index: int


class JoinResponse(BaseModel):
    """Joined event confirmation"""
    session_id: Optional[str] = None
    event_id: str
    user_id: str
    joined: bool = True


class LastResultResponse(BaseModel):
    """Last result held by a session (None when idle)"""
    session_id: str
    result: Optional[AiRecommendationResponse] = None


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    llm_provider: str
    llm_model: str
    active_sessions: int
    timestamp: datetime = Field(default_factory=datetime.utcnow)
