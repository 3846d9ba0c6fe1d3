"""
Bidder adapter contract.

Every exchange integration provides a Builder (configuration bytes in,
Bidder out) and a Bidder with two phases: ``make_requests`` turns a
bid request into outbound HTTP requests, ``make_bids`` turns the
exchange's HTTP response into typed bids. Neither phase performs I/O;
the dispatcher owns the network send.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..errors import AdapterError
from ..openrtb import Bid, BidRequest, MediaType


@dataclass
class HttpRequest:
    """An outgoing HTTP request to an exchange."""

    method: str
    uri: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class HttpResponse:
    """A response from an exchange, as received by the dispatcher."""

    status_code: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class TypedBid:
    """A bid tagged with its creative media type."""

    bid: Bid
    bid_type: MediaType = MediaType.BANNER


@dataclass
class BidderResponse:
    """Typed bids unpacked from one exchange response."""

    bids: list[TypedBid] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.bids)

    def __iter__(self):
        return iter(self.bids)


class Bidder(ABC):
    """Translation core for one exchange."""

    bidder_code: str = ""

    @abstractmethod
    def make_requests(
        self, request: BidRequest
    ) -> tuple[list[HttpRequest] | None, list[AdapterError]]:
        """
        Build the HTTP requests to send to the exchange.

        Returns either a non-empty request list and no errors, or None
        and a non-empty error list.
        """

    @abstractmethod
    def make_bids(
        self, request: BidRequest, response: HttpResponse
    ) -> tuple[BidderResponse | None, list[AdapterError]]:
        """
        Unpack the exchange's response into typed bids.

        Returns either a BidderResponse (possibly empty) and no errors,
        or None and a non-empty error list.
        """


class Builder(ABC):
    """Builds a Bidder from raw configuration bytes."""

    @abstractmethod
    def build_bidder(self, raw_config: bytes) -> Bidder:
        """
        Raises:
            ConfigError: If no working bidder can be built
        """
