"""
OpenRTB 2.5 object model used on both sides of the edge adapters.
"""

from .models import (
    AuctionType,
    Banner,
    Bid,
    BidRequest,
    BidResponse,
    Format,
    Imp,
    MediaType,
    OpenRTBDecodeError,
    SeatBid,
    Site,
    decode_json,
    encode_json,
)

__all__ = [
    "AuctionType",
    "Banner",
    "Bid",
    "BidRequest",
    "BidResponse",
    "Format",
    "Imp",
    "MediaType",
    "OpenRTBDecodeError",
    "SeatBid",
    "Site",
    "decode_json",
    "encode_json",
]
