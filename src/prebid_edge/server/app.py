"""
Edge dispatcher - accepts OpenRTB auctions over HTTP and relays them
to the configured exchange.

Run with: python run_server.py --config config/pbs.yaml

Flow per request:
    POST /openrtb2/auction -> Bidder.make_requests -> BackendSender.send
    -> exchange response relayed verbatim to the caller

Status mapping:
    - unreadable body / invalid bid request: 400
    - make_requests errors: 500
    - every send failed: 500
    - otherwise: the exchange's status and body
"""

from typing import Any, Optional

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import ClientDisconnected

from ..adapters import Bidder, get_builder
from ..config import ServerSettings, read_config_file
from ..errors import SendError
from ..logging import REQUEST_ID_HEADER, AuctionLogContext, auction_logger, configure_logging
from ..openrtb import BidRequest, OpenRTBDecodeError
from .sender import BackendSender

AUCTION_PATH = "/openrtb2/auction"


def create_app(bidder: Bidder, sender: Any) -> Flask:
    """
    Create the dispatcher application.

    Args:
        bidder: Adapter built at startup, shared by all requests
        sender: Object with ``send(HttpRequest) -> HttpResponse`` raising
            SendError on transport failure

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    app.config["BIDDER"] = bidder
    app.config["SENDER"] = sender
    logger = auction_logger()

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "bidder": bidder.bidder_code})

    @app.route(AUCTION_PATH, methods=["POST"])
    def auction():
        with AuctionLogContext(
            AUCTION_PATH, bidder.bidder_code, request.headers.get(REQUEST_ID_HEADER)
        ) as ctx:
            response = _handle_auction(logger, bidder, sender)
            response.headers[REQUEST_ID_HEADER] = ctx.request_id
            return response

    return app


def _handle_auction(logger, bidder: Bidder, sender: Any) -> Response:
    logger.info("Received auction request")

    try:
        body = request.get_data(cache=False)
    except (ClientDisconnected, OSError) as e:
        logger.error("Failed to read request body", error=str(e))
        return Response(status=400)

    try:
        bid_request = BidRequest.from_json(body)
    except OpenRTBDecodeError as e:
        logger.error("Failed to parse bid request", error=str(e))
        return Response(status=400)

    wire_requests, errors = bidder.make_requests(bid_request)
    if errors:
        logger.error(
            "Failed to make requests",
            errors=[f"{type(e).__name__}: {e}" for e in errors],
        )
        return Response(status=500)

    logger.info("Created wire requests", count=len(wire_requests))

    for i, wire_request in enumerate(wire_requests, start=1):
        try:
            wire_response = sender.send(wire_request)
        except SendError as e:
            logger.error("Failed to send request", index=i, error=str(e))
            continue

        _log_outcome(logger, bidder, bid_request, wire_response)
        # First successful send wins
        return Response(
            wire_response.body,
            status=wire_response.status_code,
            content_type="application/json",
        )

    logger.error("No request was sent successfully", attempted=len(wire_requests))
    return Response(status=500)


def _log_outcome(logger, bidder: Bidder, bid_request: BidRequest, wire_response) -> None:
    """
    Classify the exchange response for logs.

    Never affects the relayed response: a failure here is logged and
    swallowed so the exchange's status and body still reach the caller.
    """
    try:
        bidder_response, errors = bidder.make_bids(bid_request, wire_response)
    except Exception:
        logger.exception(
            "Failed to classify exchange response",
            status_code=wire_response.status_code,
        )
        return

    if errors:
        logger.warning(
            "Exchange returned no usable bids",
            status_code=wire_response.status_code,
            errors=[f"{type(e).__name__}: {e}" for e in errors],
        )
    else:
        logger.info(
            "Exchange responded",
            status_code=wire_response.status_code,
            bid_count=len(bidder_response),
        )


def build_app(settings: Optional[ServerSettings] = None, sender: Any = None) -> Flask:
    """
    Build the bidder from configuration on disk and wrap it in the app.

    Raises:
        ConfigError: If the configuration is unreadable or the adapter
            cannot be built. Fatal: the process must not accept traffic.
    """
    settings = settings or ServerSettings.from_env()
    logger = auction_logger()

    raw_config = read_config_file(settings.config_path)
    logger.info("Loaded PBS config", path=settings.config_path, size=len(raw_config))

    bidder = get_builder(settings.bidder).build_bidder(raw_config)
    logger.info("Built bidder", bidder=bidder.bidder_code)

    if sender is None:
        sender = BackendSender(
            backend_name=settings.backend_name,
            timeout_seconds=settings.backend_timeout_seconds,
        )
    return create_app(bidder, sender)


def run_server(
    host: str = "0.0.0.0",
    port: int = 7676,
    debug: bool = False,
    settings: Optional[ServerSettings] = None,
):
    """
    Run the edge dispatcher.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 7676)
        debug: Enable debug mode (default: False)
        settings: Server settings (read from the environment if omitted)

    Environment variables:
        PBS_CONFIG_PATH, PBS_BIDDER, BACKEND_NAME, BACKEND_TIMEOUT_MS,
        LOG_LEVEL, LOG_FORMAT
    """
    configure_logging(level="DEBUG" if debug else "INFO")
    app = build_app(settings)
    app.run(host=host, port=port, debug=debug)
