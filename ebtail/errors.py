"""
Exception types raised across discovery and live tailing.
"""


class EbtailError(Exception):
    """Base class for all ebtail errors."""

    stage = "ebtail"


class ConfigError(EbtailError):
    """Configuration could not be loaded or an AWS session could not be built."""

    stage = "config"


class UpstreamListError(EbtailError):
    """A page of a paginated listing failed; the whole listing is abandoned."""

    stage = "list"


class InventoryFetchError(EbtailError):
    """An inventory could not be listed at all."""

    stage = "inventory"


class PatternParseError(EbtailError):
    """A rule's event pattern has no usable detail-type."""

    stage = "rule"


class NoTargetsError(EbtailError):
    """A rule has no targets to correlate against."""

    stage = "rule"


class EventNotFoundError(EbtailError):
    """No correlated event carries the requested name."""

    stage = "lookup"


class DestinationNotFoundError(EbtailError):
    """No log group matches the requested name."""

    stage = "resolve"


class StreamStartError(EbtailError):
    """The Live Tail session was rejected."""

    stage = "start"


class StreamTransportError(EbtailError):
    """The Live Tail stream failed while streaming."""

    stage = "stream"

    def __init__(self, cause: BaseException):
        super().__init__(f"Error occurred during streaming: {cause}")
        self.cause = cause


class StreamHandlerError(EbtailError):
    """Handling a streamed frame failed, e.g. writing a line to a closed pipe."""

    stage = "stream"

    def __init__(self, cause: BaseException):
        super().__init__(f"Error handling stream output: {type(cause).__name__}: {cause}")
        self.cause = cause


class UnrecognizedFrameError(EbtailError):
    """The Live Tail stream produced a frame we do not understand."""

    stage = "stream"

    def __init__(self, type_name: str):
        super().__init__(f"Unknown event type when handling stream: {type_name}")
        self.type_name = type_name
