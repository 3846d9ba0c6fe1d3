"""
Error taxonomy for the edge adapters.

Configuration errors are raised at startup and are fatal to serving.
Request-construction and downstream-response errors are returned as
values from ``make_requests`` / ``make_bids`` so the dispatcher can map
them to HTTP statuses. Transport errors belong to the dispatcher.
"""


class AdapterError(Exception):
    """Base exception for edge adapter errors."""
    pass


# Configuration


class ConfigError(AdapterError):
    """Raised when no working adapter can be built from configuration."""
    pass


class ConfigParseError(ConfigError):
    """Raised when the raw configuration cannot be decoded."""
    pass


class AdapterDisabledError(ConfigError):
    """Raised when the adapter is not enabled in configuration."""
    pass


class UnknownBidderError(ConfigError):
    """Raised when no builder is registered under a bidder name."""
    pass


# Request construction


class RequestBuildError(AdapterError):
    """Base for errors while building the outbound wire request."""
    pass


class NoImpressionsError(RequestBuildError):
    """The bid request carries no impressions."""

    def __init__(self, message: str = "no impressions in bid request"):
        super().__init__(message)


class ExtensionEncodeError(RequestBuildError):
    """The bidder-specific imp.ext could not be serialized."""
    pass


class RequestEncodeError(RequestBuildError):
    """The enriched bid request could not be serialized."""
    pass


# Downstream response


class ResponseError(AdapterError):
    """Base for errors in the exchange's response."""
    pass


class StatusError(ResponseError):
    """
    The exchange answered with a status that carries no bids.

    Attributes:
        status_code: HTTP status returned by the exchange
        body: Raw response body, kept for diagnostics
    """

    def __init__(self, status_code: int, body: bytes, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def body_text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class BadRequestError(StatusError):
    """The exchange rejected the request (400)."""

    def __init__(self, body: bytes):
        super().__init__(400, body, f"Bad request: {body.decode('utf-8', errors='replace')}")


class NotFoundError(StatusError):
    """The exchange endpoint or placement was not found (404)."""

    def __init__(self, body: bytes):
        super().__init__(404, body, f"404 Not Found: {body.decode('utf-8', errors='replace')}")


class UnexpectedStatusError(StatusError):
    """Any other non-200 status."""

    def __init__(self, status_code: int, body: bytes):
        super().__init__(
            status_code,
            body,
            f"Unexpected status code: {status_code}. Body: {body.decode('utf-8', errors='replace')}",
        )


class ResponseDecodeError(ResponseError):
    """A 200 response whose body is not a valid bid response."""
    pass


# Transport


class SendError(AdapterError):
    """The dispatcher could not complete a round trip to the exchange."""
    pass
