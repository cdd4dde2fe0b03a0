# event_ai/__init__.py
"""
Event Recommendation Assistant Package

Turns a free-text query plus location/time context into a small,
AI-reasoned set of recommended events, and lets the user act on
them ("join the second one") without querying again.
"""

__version__ = "1.0.0"
__author__ = "Map-In Team"

# Package structure:
# event_ai/
# ├── __init__.py           <- This file
# ├── main.py               <- FastAPI application entry
# ├── config.py             <- Configuration settings + factories
# │
# ├── agents/
# │   └── orchestrator.py   <- RecommendationOrchestrator (session state)
# │
# ├── algorithms/
# │   ├── distance.py       <- Haversine distance
# │   └── candidate_selector.py <- Filter / rank / truncate candidates
# │
# ├── api/
# │   └── assistant.py      <- /api/ai/assistant
# │
# ├── interfaces/
# │   ├── event_store.py    <- Event store contract + in-memory store
# │   └── session_store.py  <- One orchestrator per conversation
# │
# ├── llm/
# │   ├── prompts.py        <- Prompt templates
# │   └── recommender.py    <- Reasoning services (OpenAI, fake)
# │
# └── schemas/
#     └── ai_schemas.py     <- Pydantic models
