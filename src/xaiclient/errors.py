"""Exception hierarchy for the xAI client.

Every failure the client can produce is one of these typed exceptions so
callers never have to inspect raw ``httpx`` or ``pydantic`` internals.
"""


class XAIClientError(Exception):
    """Base exception for all xAI client errors.

    Attributes:
        message: Human-readable error description.
        original_error: The upstream exception that caused this error, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class MalformedValue(XAIClientError):
    """Raised when a value cannot be represented as JSON.

    Attributes:
        fragment: The offending input, truncated for display.
    """

    def __init__(
        self,
        message: str,
        fragment: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error=original_error)
        self.fragment = fragment


class InvalidURLError(XAIClientError):
    """Raised when a base URL and path do not form an absolute http(s) URL."""


class EncodingError(XAIClientError):
    """Raised when a request variant has no wire encoding."""


class ConnectionFailedError(XAIClientError):
    """Raised when the transport cannot reach the provider or loses the connection."""


class TimeoutError(XAIClientError):  # noqa: A001 - intentionally shadows the built-in
    """Raised when the provider does not respond within ``seconds_to_wait``."""


class APIError(XAIClientError):
    """Raised for a non-2xx response carrying a structured error body.

    Attributes:
        status: HTTP status code.
        provider_message: The message extracted from the error envelope, when
            the envelope had one.
    """

    def __init__(self, status: int, provider_message: str | None = None) -> None:
        super().__init__(f"xAI returned {status}: {provider_message or '<no message>'}")
        self.status = status
        self.provider_message = provider_message


class UnexpectedHTTPStatusError(XAIClientError):
    """Raised for a non-2xx response whose body is not a provider error envelope.

    Attributes:
        status: HTTP status code.
        raw_body: The response body as text.
    """

    def __init__(self, status: int, raw_body: str) -> None:
        super().__init__(f"xAI returned unexpected status {status}: {raw_body[:200]}")
        self.status = status
        self.raw_body = raw_body


class DeserializationError(XAIClientError):
    """Raised when a 2xx response body does not match the expected response type.

    Attributes:
        raw_body: The response body as text.
    """

    def __init__(self, raw_body: str, cause: Exception) -> None:
        super().__init__(f"Could not deserialize response body: {cause}", original_error=cause)
        self.raw_body = raw_body


class DecodeError(XAIClientError):
    """Raised when one server-sent event frame cannot be parsed into a chunk.

    Terminates the stream; chunks yielded before it remain valid.

    Attributes:
        raw_frame: The text of the offending frame as received, ``data:``
            prefixes included.
    """

    def __init__(self, raw_frame: str, cause: Exception) -> None:
        super().__init__(
            f"Could not decode stream frame {raw_frame[:200]!r}: {cause}",
            original_error=cause,
        )
        self.raw_frame = raw_frame
