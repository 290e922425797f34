"""
Live Tail stream frames and their classification.

boto3 exposes the StartLiveTail response stream as an iterator of dicts,
each keyed by the event type. Modeled stream exceptions are raised by the
iterator itself; exhaustion of the iterator means the stream was closed.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

from botocore.exceptions import BotoCoreError, ClientError
from urllib3.exceptions import HTTPError


@dataclass(frozen=True)
class SessionStarted:
    request_id: Optional[str] = None
    session_id: Optional[str] = None
    log_group_identifiers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionUpdate:
    lines: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class TransportError:
    cause: BaseException


@dataclass(frozen=True)
class UnrecognizedFrame:
    type_name: str
    raw: Any = None


LiveTailFrame = Union[SessionStarted, SessionUpdate, Closed, TransportError, UnrecognizedFrame]

STREAM_EXCEPTION_KEYS = ("SessionTimeoutException", "SessionStreamingException")


def classify_frame(raw: Any) -> LiveTailFrame:
    """Map one raw event from the response stream to a LiveTailFrame."""
    if not isinstance(raw, dict) or len(raw) != 1:
        return UnrecognizedFrame(type_name=type(raw).__name__, raw=raw)

    (key, body), = raw.items()
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return UnrecognizedFrame(type_name=f"{key} ({type(body).__name__} body)", raw=raw)

    if key == "sessionStart":
        return SessionStarted(
            request_id=body.get("requestId"),
            session_id=body.get("sessionId"),
            log_group_identifiers=tuple(body.get("logGroupIdentifiers") or ()),
        )
    if key == "sessionUpdate":
        results = body.get("sessionResults", [])
        if not isinstance(results, list) or not all(isinstance(r, dict) for r in results):
            return UnrecognizedFrame(type_name=f"{key} (malformed sessionResults)", raw=raw)
        return SessionUpdate(lines=tuple(result.get("message", "") for result in results))
    if key in STREAM_EXCEPTION_KEYS:
        return TransportError(cause=RuntimeError(f"{key}: {body.get('message', '')}"))

    return UnrecognizedFrame(type_name=key, raw=raw)


def next_frame(events: Iterator[Any]) -> LiveTailFrame:
    """
    Block until the next frame arrives on the stream.

    Returns:
        The classified frame; Closed once the stream is exhausted
    """
    try:
        raw = next(events)
    except StopIteration:
        return Closed()
    except (ClientError, BotoCoreError, HTTPError, OSError) as e:
        return TransportError(cause=e)
    return classify_frame(raw)
