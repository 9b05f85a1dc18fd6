"""ChainMind exception hierarchy.

Every error raised by the client derives from ``ChainMindError`` and
carries a correlation_id so failures can be matched across log lines.

Usage:
    from chainmind.exceptions import TransportError, UpstreamHTTPError

    try:
        answer = await client.ask_agent("What is trending?")
    except UpstreamHTTPError as e:
        logger.error("Upstream failed (%s): %s", e.status_code, e)
"""

import uuid


class ChainMindError(Exception):
    """Base exception for all ChainMind client errors.

    Carries a correlation_id for tracing errors across layers.
    """

    def __init__(self, message: str, *, correlation_id: str | None = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        super().__init__(message)


class ConfigurationError(ChainMindError):
    """Invalid client configuration. Raised at construction, never retried."""

    pass


class TransportError(ChainMindError):
    """Socket or HTTP connection failure, including mid-stream read failures."""

    def __init__(self, message: str, *, provider: str | None = None, **kwargs):
        self.provider = provider
        super().__init__(message, **kwargs)


class UpstreamHTTPError(ChainMindError):
    """The upstream answered with a non-success HTTP status.

    The response body text is kept on ``body`` and is part of the message.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str = "",
        provider: str | None = None,
        correlation_id: str | None = None,
    ):
        self.status_code = status_code
        self.body = body
        self.provider = provider
        super().__init__(message, correlation_id=correlation_id)


class StreamUnreadableError(ChainMindError):
    """A streaming response was announced but its body can't be read."""

    pass


class StreamDecodeError(ChainMindError):
    """A subscription message could not be decoded into a stream event."""

    def __init__(self, message: str, *, raw: str = "", **kwargs):
        self.raw = raw
        super().__init__(message, **kwargs)


class InvalidResponseError(ChainMindError):
    """A successful response whose body is not the JSON the provider promised."""

    def __init__(self, message: str, *, provider: str | None = None, **kwargs):
        self.provider = provider
        super().__init__(message, **kwargs)
