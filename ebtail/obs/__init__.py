"""
Observability module: Live Tail streaming and console links.
"""

from .cw_links import CloudWatchLinkBuilder
from .frames import (
    Closed,
    LiveTailFrame,
    SessionStarted,
    SessionUpdate,
    TransportError,
    UnrecognizedFrame,
    classify_frame,
    next_frame,
)
from .livetail import LiveTailSession, SessionState

__all__ = [
    "CloudWatchLinkBuilder",
    "Closed",
    "LiveTailFrame",
    "SessionStarted",
    "SessionUpdate",
    "TransportError",
    "UnrecognizedFrame",
    "classify_frame",
    "next_frame",
    "LiveTailSession",
    "SessionState",
]
