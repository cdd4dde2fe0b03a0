# interfaces/__init__.py
"""
Interfaces Package

Contains the assistant's collaborators and stores:
- event_store: Event store contract + in-memory implementation
- session_store: One orchestrator per conversation session
"""

from .event_store import (
    EventStore,
    InMemoryEventStore,
    EventNotFoundError,
    EventFullError,
    matches_filters,
    default_sample_events,
    utc_date
)
from .session_store import OrchestratorSessionStore, SessionEntry

__all__ = [
    "EventStore",
    "InMemoryEventStore",
    "EventNotFoundError",
    "EventFullError",
    "matches_filters",
    "default_sample_events",
    "utc_date",
    "OrchestratorSessionStore",
    "SessionEntry"
]
