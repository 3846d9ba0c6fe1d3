"""Tests for auction-scoped structured logging."""

import structlog

from prebid_edge.logging import (
    AuctionLogContext,
    add_request_id,
    add_service_info,
    generate_request_id,
    get_request_id,
)


class TestAuctionLogContext:
    """Tests for the per-auction log scope."""

    def test_uses_caller_request_id(self):
        assert get_request_id() == ""

        with AuctionLogContext("/openrtb2/auction", "smartadserver", "abc-123") as ctx:
            assert ctx.request_id == "abc-123"
            assert get_request_id() == "abc-123"

        assert get_request_id() == ""

    def test_generates_request_id_when_missing(self):
        with AuctionLogContext("/openrtb2/auction", "smartadserver") as ctx:
            assert ctx.request_id
            assert get_request_id() == ctx.request_id

    def test_replaces_unusable_request_id(self):
        """Blank, oversized or non-printable ids are not trusted."""
        for candidate in ("   ", "x" * 500, "bad\nid"):
            ctx = AuctionLogContext("/openrtb2/auction", "smartadserver", candidate)
            assert ctx.request_id != candidate
            assert ctx.request_id

    def test_binds_route_and_bidder(self):
        with AuctionLogContext("/openrtb2/auction", "smartadserver", "r-1"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["route"] == "/openrtb2/auction"
            assert bound["bidder"] == "smartadserver"

        bound = structlog.contextvars.get_contextvars()
        assert "route" not in bound
        assert "bidder" not in bound

    def test_generated_ids_unique(self):
        assert generate_request_id() != generate_request_id()


class TestProcessors:
    """Tests for structlog processors."""

    def test_add_request_id(self):
        with AuctionLogContext("/openrtb2/auction", "smartadserver", "req-9"):
            event = add_request_id(None, "info", {"event": "x"})
        assert event["request_id"] == "req-9"

    def test_add_request_id_outside_auction(self):
        assert "request_id" not in add_request_id(None, "info", {"event": "x"})

    def test_add_service_info(self):
        assert add_service_info(None, "info", {})["service"] == "prebid-edge"
