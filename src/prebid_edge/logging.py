"""
Structured logging for the edge service.

Every auction is logged inside an AuctionLogContext, which stamps each
entry with the auction's request id, the route and the bidder. The id
comes from the caller's ``X-Request-Id`` header when present so edge
logs can be joined with upstream logs.
"""

import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

SERVICE_NAME = "prebid-edge"
REQUEST_ID_HEADER = "X-Request-Id"

# Request ids longer than this are replaced, not truncated
MAX_REQUEST_ID_LENGTH = 128

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get the current auction's request ID, or "" outside an auction."""
    return request_id_var.get()


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return f"{int(time.time())}-{uuid.uuid4().hex[:8]}"


def add_request_id(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor to add the auction request ID to log entries."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_service_info(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor to add service info to log entries."""
    event_dict["service"] = SERVICE_NAME
    return event_dict


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structured logging once at process startup.

    Args:
        level: Default log level; LOG_LEVEL overrides it. LOG_FORMAT
            selects 'json' (default) or 'console' output.
    """
    level = os.getenv("LOG_LEVEL", level).upper()
    output = os.getenv("LOG_FORMAT", "json").lower()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    processors: list[structlog.typing.Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        add_request_id,
        add_service_info,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if output == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def auction_logger() -> structlog.stdlib.BoundLogger:
    """Logger for inbound auction handling."""
    return structlog.get_logger("prebid_edge.auction")


def bidder_logger(bidder_code: str) -> structlog.stdlib.BoundLogger:
    """Logger for one exchange adapter."""
    return structlog.get_logger("prebid_edge.bidder").bind(bidder=bidder_code)


def http_logger() -> structlog.stdlib.BoundLogger:
    """Logger for outbound sends to the exchange."""
    return structlog.get_logger("prebid_edge.http")


def _usable_request_id(candidate: str | None) -> str | None:
    if not candidate:
        return None
    candidate = candidate.strip()
    if not candidate or len(candidate) > MAX_REQUEST_ID_LENGTH or not candidate.isprintable():
        return None
    return candidate


class AuctionLogContext:
    """
    Scope for logging one inbound auction.

    Binds request_id, route and bidder for every log entry emitted while
    the auction is handled, including entries from the adapter and the
    sender.
    """

    def __init__(self, route: str, bidder_code: str, request_id: str | None = None):
        """
        Args:
            route: Inbound path being served
            bidder_code: Adapter handling the auction
            request_id: Caller-supplied id; generated when missing or unusable
        """
        self.route = route
        self.bidder_code = bidder_code
        self.request_id = _usable_request_id(request_id) or generate_request_id()
        self.token = None

    def __enter__(self) -> "AuctionLogContext":
        self.token = request_id_var.set(self.request_id)
        structlog.contextvars.bind_contextvars(route=self.route, bidder=self.bidder_code)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        request_id_var.reset(self.token)
        structlog.contextvars.unbind_contextvars("route", "bidder")
