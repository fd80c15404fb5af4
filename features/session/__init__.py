"""Recording session loading."""

from features.session.event_log import load_pointer_events, load_session

__all__ = [
    "load_pointer_events",
    "load_session",
]
