"""
Exchange Bidder Adapters

Components:
- base.py: Bidder/Builder contract and HTTP/bid value types
- smartadserver.py: Smart AdServer integration

Usage:
    from prebid_edge.adapters import get_builder

    bidder = get_builder("smartadserver").build_bidder(config_bytes)
    requests, errors = bidder.make_requests(bid_request)
"""

from ..errors import UnknownBidderError
from .base import Bidder, BidderResponse, Builder, HttpRequest, HttpResponse, TypedBid
from .smartadserver import SmartAdServerAdapter, SmartAdServerBuilder

BUILDERS: dict[str, type[Builder]] = {
    SmartAdServerAdapter.bidder_code: SmartAdServerBuilder,
}


def get_builder(bidder_code: str) -> Builder:
    """
    Get the builder registered for a bidder code.

    Raises:
        UnknownBidderError: If no builder is registered under that code
    """
    try:
        return BUILDERS[bidder_code.lower()]()
    except KeyError:
        raise UnknownBidderError(
            f"Unknown bidder: {bidder_code} (available: {', '.join(sorted(BUILDERS))})"
        ) from None


__all__ = [
    "Bidder",
    "BidderResponse",
    "Builder",
    "HttpRequest",
    "HttpResponse",
    "TypedBid",
    "SmartAdServerAdapter",
    "SmartAdServerBuilder",
    "BUILDERS",
    "get_builder",
]
