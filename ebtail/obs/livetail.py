"""
CloudWatch Logs Live Tail session for a single log group.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Iterator, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import (
    DestinationNotFoundError,
    EbtailError,
    StreamHandlerError,
    StreamStartError,
    StreamTransportError,
    UnrecognizedFrameError,
)
from .frames import (
    Closed,
    SessionStarted,
    SessionUpdate,
    TransportError,
    UnrecognizedFrame,
    next_frame,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a Live Tail session."""
    RESOLVING = "resolving"
    STARTING = "starting"
    STREAMING = "streaming"
    CLOSED = "closed"
    FAILED = "failed"


class LiveTailSession:
    """Resolves a log group, starts Live Tail on it and consumes the stream."""

    def __init__(self, client, log_group_name: str, on_line: Optional[Callable[[str], None]] = None):
        self.client = client
        self.log_group_name = log_group_name
        self.on_line = on_line or (lambda line: logger.info(line))
        self.state = SessionState.RESOLVING
        self.log_group_arn: Optional[str] = None
        self.failure: Optional[EbtailError] = None
        self.finished = threading.Event()
        self.thread: Optional[threading.Thread] = None

    def resolve(self) -> str:
        """
        Find the ARN of the first log group whose name starts with ``log_group_name``.

        Raises:
            DestinationNotFoundError: If no log group matches or the lookup fails
        """
        self.state = SessionState.RESOLVING
        try:
            response = self.client.describe_log_groups(logGroupNamePrefix=self.log_group_name)
        except (ClientError, BotoCoreError) as e:
            self.state = SessionState.FAILED
            raise DestinationNotFoundError(f"Error fetching log group {self.log_group_name}: {e}") from e

        groups = response.get("logGroups", [])
        if not groups:
            self.state = SessionState.FAILED
            raise DestinationNotFoundError(f"Requested log group not found: {self.log_group_name}")

        group = groups[0]
        # Live Tail rejects the ":*" suffix DescribeLogGroups puts on logGroupArn
        arn = group.get("logGroupArn") or group.get("arn", "")
        if arn.endswith(":*"):
            arn = arn[:-2]
        self.log_group_arn = arn
        return arn

    def start(self) -> Iterator[Any]:
        """
        Open a Live Tail subscription on the resolved log group.

        Returns:
            Iterator over raw stream events

        Raises:
            StreamStartError: If the service rejects the session
        """
        if self.log_group_arn is None:
            self.resolve()

        self.state = SessionState.STARTING
        try:
            response = self.client.start_live_tail(logGroupIdentifiers=[self.log_group_arn])
        except (ClientError, BotoCoreError) as e:
            self.state = SessionState.FAILED
            raise StreamStartError(f"Failed to start Live Tail on {self.log_group_name}: {e}") from e

        self.state = SessionState.STREAMING
        return iter(response["responseStream"])

    def consume(self, events: Iterator[Any]) -> None:
        """
        Consume frames until the stream closes.

        Raises:
            StreamTransportError: If the stream reports a transport failure
            UnrecognizedFrameError: If a frame of unknown type arrives
            StreamHandlerError: If ``on_line`` fails
        """
        self.state = SessionState.STREAMING
        while True:
            frame = next_frame(events)

            if isinstance(frame, SessionStarted):
                logger.info("Live Tail session started")
            elif isinstance(frame, SessionUpdate):
                for line in frame.lines:
                    try:
                        self.on_line(line)
                    except Exception as e:
                        self.state = SessionState.FAILED
                        raise StreamHandlerError(e) from e
            elif isinstance(frame, Closed):
                self.state = SessionState.CLOSED
                logger.info("Stream is closed")
                return
            elif isinstance(frame, TransportError):
                self.state = SessionState.FAILED
                raise StreamTransportError(frame.cause)
            elif isinstance(frame, UnrecognizedFrame):
                self.state = SessionState.FAILED
                raise UnrecognizedFrameError(frame.type_name)

    def run(self) -> None:
        """Resolve, start and consume on the calling thread."""
        self.consume(self.start())

    def _consume_worker(self, events: Iterator[Any]) -> None:
        try:
            self.consume(events)
        except EbtailError as e:
            self.failure = e
            logger.error(f"Live Tail failed: {e}")
        except Exception as e:
            self.state = SessionState.FAILED
            self.failure = StreamHandlerError(e)
            logger.error(f"Live Tail failed: {self.failure}")
        finally:
            self.finished.set()

    def start_background(self) -> threading.Thread:
        """
        Resolve and start on the calling thread, then stream on a daemon thread.

        Resolution and start failures raise immediately. Streaming failures
        are stored on ``failure``; ``finished`` is set when streaming ends.
        """
        events = self.start()
        logger.info("Beginning Live Tail...")
        self.thread = threading.Thread(target=self._consume_worker, args=(events,), daemon=True)
        self.thread.start()
        return self.thread
