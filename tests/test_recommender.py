# tests/test_recommender.py
import json
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from event_ai.llm.recommender import (
    PARSING_FALLBACK,
    FakeRecommendationService,
    OpenAIRecommendationService,
    RecommendationServiceError,
    clean_response,
    describe_user_context,
    format_events_for_prompt,
    parse_response_content,
)
from event_ai.schemas.ai_schemas import AiEventSummary, AiRecommendationRequest, AiUserContext


def summary(event_id: str, **kwargs) -> AiEventSummary:
    return AiEventSummary(id=event_id, title=f"Title {event_id}", **kwargs)


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def mock_client(result=None, error=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=result, side_effect=error)
    return client


VALID_JSON = json.dumps({
    "assistantMessage": "Two great picks!",
    "recommendedEvents": [
        {"id": "a", "reason": "Close by"},
        {"id": "b", "reason": "Cheap"},
    ],
    "followupQuestions": ["Want more?"],
})


# ============================================
# Fake service
# ============================================

@pytest.mark.asyncio
async def test_fake_service_with_no_events():
    response = await FakeRecommendationService().recommend_events(AiRecommendationRequest(user_query="x"))
    assert response.recommended_events == []
    assert len(response.followup_questions) == 2


@pytest.mark.asyncio
async def test_fake_service_recommends_first_two():
    request = AiRecommendationRequest(user_query="x", events=[summary("a"), summary("b"), summary("c")])
    response = await FakeRecommendationService().recommend_events(request)
    assert [e.id for e in response.recommended_events] == ["a", "b"]
    assert '"Title a" and "Title b"' in response.assistant_message
    assert len(response.followup_questions) == 3


@pytest.mark.asyncio
async def test_fake_service_single_event():
    request = AiRecommendationRequest(user_query="x", events=[summary("only")])
    response = await FakeRecommendationService().recommend_events(request)
    assert [e.id for e in response.recommended_events] == ["only"]
    assert "I recommend checking out" in response.assistant_message


# ============================================
# Parsing helpers
# ============================================

def test_clean_response_strips_code_fences():
    assert clean_response("```json\n{\"a\": 1}\n```") == '{"a": 1}'
    assert clean_response("```\n{}\n```") == "{}"
    assert clean_response("  {}  ") == "{}"


def test_parse_response_content_reads_camel_case():
    response = parse_response_content(f"```json\n{VALID_JSON}\n```")
    assert response.assistant_message == "Two great picks!"
    assert [(e.id, e.reason) for e in response.recommended_events] == [("a", "Close by"), ("b", "Cheap")]
    assert response.followup_questions == ["Want more?"]


def test_parse_response_content_followups_optional():
    response = parse_response_content('{"assistantMessage": "hi", "recommendedEvents": []}')
    assert response.followup_questions is None


def test_parse_response_content_falls_back_on_garbage():
    response = parse_response_content("Sure! Here are some events: ...")
    assert response == PARSING_FALLBACK
    assert response is not PARSING_FALLBACK


def test_format_events_for_prompt():
    request = AiRecommendationRequest(
        user_query="x",
        events=[
            summary("a", start_time=datetime(2026, 3, 7, 19, 30), distance_km=2.345,
                    capacity_remaining=4, price=12.5, tags=["Jazz", "Live"], location_description="Cellar"),
            summary("b"),
        ],
    )

    first, second = format_events_for_prompt(request)

    assert first["date"] == "03/07/2026 19:30"
    assert first["distance"] == "2.3 km"
    assert first["places"] == "4 places remaining"
    assert first["price"] == "12.5 CHF"
    assert first["tags"] == "Jazz, Live"
    assert first["location"] == "Cellar"
    assert second["date"] == "Date not specified"
    assert second["distance"] == "Distance unknown"
    assert second["places"] == "Unlimited capacity"
    assert second["price"] == "Free"
    assert second["location"] == "Location not specified"
    assert second["description"] == "No description"


def test_describe_user_context():
    assert describe_user_context(AiUserContext()) == "none"
    context = AiUserContext(approx_location="Lausanne", max_distance_km=10.0)
    assert describe_user_context(context) == "near Lausanne, within 10 km"


def test_request_serializes_camel_case():
    request = AiRecommendationRequest(user_query="q", events=[summary("a", distance_km=1.0)])
    data = request.model_dump(by_alias=True)
    assert "userQuery" in data and "userContext" in data
    assert data["events"][0]["distanceKm"] == 1.0


# ============================================
# OpenAI service
# ============================================

def test_build_messages_contains_query_and_events():
    service = OpenAIRecommendationService(api_key="test", client=mock_client())
    request = AiRecommendationRequest(
        user_query="jazz please",
        events=[summary("evt-42")],
        response_language="fr",
    )

    system, user = service.build_messages(request, now=datetime(2026, 1, 2, 3, 4, 5))

    assert system["role"] == "system"
    assert "2026-01-02" in system["content"] and "03:04:05" in system["content"]
    assert '"fr"' in system["content"]
    assert user["role"] == "user"
    assert "jazz please" in user["content"]
    assert "1 event(s):" in user["content"]
    assert "evt-42" in user["content"]


def test_build_messages_without_events():
    service = OpenAIRecommendationService(api_key="test", client=mock_client())
    _, user = service.build_messages(AiRecommendationRequest(user_query="q"))
    assert "No events available." in user["content"]


@pytest.mark.asyncio
async def test_openai_service_parses_completion():
    client = mock_client(result=completion(VALID_JSON))
    service = OpenAIRecommendationService(api_key="test", model="gpt-test", temperature=0.2, max_tokens=123, client=client)

    response = await service.recommend_events(AiRecommendationRequest(user_query="q", events=[summary("a")]))

    assert [e.id for e in response.recommended_events] == ["a", "b"]
    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["temperature"] == 0.2
    assert kwargs["max_tokens"] == 123
    assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]


@pytest.mark.asyncio
async def test_openai_service_unparseable_content_falls_back():
    service = OpenAIRecommendationService(api_key="test", client=mock_client(result=completion("not json")))
    response = await service.recommend_events(AiRecommendationRequest(user_query="q"))
    assert response.recommended_events == []
    assert response.assistant_message == PARSING_FALLBACK.assistant_message


@pytest.mark.asyncio
async def test_openai_service_api_error_raises():
    service = OpenAIRecommendationService(api_key="test", client=mock_client(error=OpenAIError("rate limited")))
    with pytest.raises(RecommendationServiceError):
        await service.recommend_events(AiRecommendationRequest(user_query="q"))


@pytest.mark.asyncio
@pytest.mark.parametrize("result", [completion(None), completion(""), SimpleNamespace(choices=[])])
async def test_openai_service_empty_content_raises(result):
    service = OpenAIRecommendationService(api_key="test", client=mock_client(result=result))
    with pytest.raises(RecommendationServiceError):
        await service.recommend_events(AiRecommendationRequest(user_query="q"))


@pytest.mark.asyncio
async def test_openai_service_without_key_raises():
    service = OpenAIRecommendationService(api_key="")
    with pytest.raises(RecommendationServiceError):
        await service.recommend_events(AiRecommendationRequest(user_query="q"))
