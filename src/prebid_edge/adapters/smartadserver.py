"""
Smart AdServer bidder adapter.

Rewrites an incoming OpenRTB request into the shape the Smart AdServer
OpenRTB endpoint accepts: only the first impression is sent, enriched
with the network's placement identifiers, a default banner size and a
fixed floor, and the request is flagged as a first-price test auction.
"""

import dataclasses
from dataclasses import dataclass

from ..config import SmartAdServerConfig, parse_smartadserver_config
from ..errors import (
    AdapterDisabledError,
    AdapterError,
    BadRequestError,
    ExtensionEncodeError,
    NoImpressionsError,
    NotFoundError,
    RequestEncodeError,
    ResponseDecodeError,
    UnexpectedStatusError,
)
from ..logging import bidder_logger
from ..openrtb import (
    AuctionType,
    Banner,
    BidRequest,
    BidResponse,
    Format,
    MediaType,
    OpenRTBDecodeError,
    Site,
    encode_json,
)
from .base import Bidder, BidderResponse, Builder, HttpRequest, HttpResponse, TypedBid

BIDDER_CODE = "smartadserver"

TEST_TARGETING = "testing=prebid"
DEFAULT_BANNER_FORMAT = (728, 90)
FORCED_BID_FLOOR = 0.01
FORCED_BID_FLOOR_CURRENCY = "USD"
TMAX_MS = 1000
OPENRTB_VERSION = "2.5"

REQUEST_HEADERS = {
    "Content-Type": "application/json;charset=utf-8",
    "Accept": "application/json",
    "X-Openrtb-Version": OPENRTB_VERSION,
}

NOT_FOUND_CAUSES = (
    "Incorrect endpoint URL path",
    "Invalid or missing caller ID",
    "Invalid site ID, page ID, or format ID",
    "Request not properly formatted",
)


@dataclass(frozen=True)
class SmartAdServerImpExt:
    """
    Bidder parameters carried in ``imp.ext.prebid.bidder.smartadserver``.

    Field names on the wire are camelCase; ``domain`` is omitted when the
    request has no site domain.
    """

    site_id: int
    network_id: int
    page_id: int
    format_id: int
    target: str = TEST_TARGETING
    domain: str = ""

    def to_dict(self) -> dict:
        params = {
            "siteId": self.site_id,
            "networkId": self.network_id,
            "pageId": self.page_id,
            "formatId": self.format_id,
            "target": self.target,
        }
        if self.domain:
            params["domain"] = self.domain
        return {"prebid": {"bidder": {BIDDER_CODE: params}}}


class SmartAdServerAdapter(Bidder):
    """Bidder implementation for the Smart AdServer exchange."""

    bidder_code = BIDDER_CODE

    def __init__(self, config: SmartAdServerConfig):
        """
        Initialize the adapter.

        Args:
            config: Parsed adapter configuration

        Raises:
            AdapterDisabledError: If the configuration is not enabled
        """
        if not config.enabled:
            raise AdapterDisabledError("SmartAdServer adapter is not enabled in config")
        self.config = config
        self.logger = bidder_logger(BIDDER_CODE)

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def _imp_ext(self, request: BidRequest) -> SmartAdServerImpExt:
        defaults = self.config.default_config
        return SmartAdServerImpExt(
            site_id=defaults.site_id,
            network_id=self.config.platform_id,
            page_id=defaults.page_id,
            format_id=defaults.format_id,
            domain=request.site.domain if request.site is not None else "",
        )

    def make_requests(
        self, request: BidRequest
    ) -> tuple[list[HttpRequest] | None, list[AdapterError]]:
        """
        Build the single outbound request for this auction.

        Impressions after the first are dropped. The caller's request is
        never modified; all rewrites apply to copies.
        """
        self.logger.debug(
            "Building bid request",
            endpoint=self.endpoint,
            site_id=self.config.default_config.site_id,
            page_id=self.config.default_config.page_id,
            format_id=self.config.default_config.format_id,
            network_id=self.config.platform_id,
        )

        if not request.imp:
            return None, [NoImpressionsError()]

        # Fields are reassigned, never mutated, so shallow copies suffice
        imp = dataclasses.replace(request.imp[0])

        ext = self._imp_ext(request).to_dict()
        try:
            encode_json(ext)
        except (TypeError, ValueError) as e:
            return None, [ExtensionEncodeError(f"error marshaling imp.ext: {e}")]
        imp.ext = ext

        if imp.banner is None:
            w, h = DEFAULT_BANNER_FORMAT
            imp.banner = Banner(format=[Format(w=w, h=h)])

        imp.bidfloor = FORCED_BID_FLOOR
        imp.bidfloorcur = FORCED_BID_FLOOR_CURRENCY

        site = dataclasses.replace(request.site) if request.site is not None else Site()
        if not site.page and site.domain:
            site.page = f"https://{site.domain}"

        enriched = dataclasses.replace(
            request,
            imp=[imp],
            site=site,
            test=1,
            tmax=TMAX_MS,
            at=int(AuctionType.FIRST_PRICE),
        )

        try:
            body = enriched.to_json()
        except (TypeError, ValueError, RecursionError) as e:
            return None, [RequestEncodeError(f"error marshaling bid request: {e}")]

        headers = dict(REQUEST_HEADERS)
        self.logger.debug(
            "Built bid request",
            method="POST",
            uri=self.endpoint,
            headers=headers,
            body_bytes=len(body),
            dropped_imps=len(request.imp) - 1,
        )

        return [HttpRequest(method="POST", uri=self.endpoint, body=body, headers=headers)], []

    def make_bids(
        self, request: BidRequest, response: HttpResponse
    ) -> tuple[BidderResponse | None, list[AdapterError]]:
        """
        Classify the exchange's response and unpack its bids.

        204 is a valid no-bid. 400, 404 and any other non-200 status are
        errors carrying the raw body. Every bid is tagged as banner.
        """
        status = response.status_code
        self.logger.debug(
            "Received exchange response",
            status_code=status,
            headers=response.headers,
            body_bytes=len(response.body),
        )

        if status == 204:
            self.logger.debug("No content in response")
            return BidderResponse(), []

        if status == 400:
            self.logger.warning("Bad request error", status_code=status)
            return None, [BadRequestError(response.body)]

        if status == 404:
            self.logger.warning(
                "404 Not Found error",
                status_code=status,
                common_causes=list(NOT_FOUND_CAUSES),
            )
            return None, [NotFoundError(response.body)]

        if status != 200:
            self.logger.warning("Unexpected status code", status_code=status)
            return None, [UnexpectedStatusError(status, response.body)]

        try:
            bid_response = BidResponse.from_json(response.body)
        except OpenRTBDecodeError as e:
            return None, [ResponseDecodeError(f"error decoding bid response: {e}")]

        bidder_response = BidderResponse()
        for seat_bid in bid_response.seatbid:
            for bid in seat_bid.bid:
                bidder_response.bids.append(TypedBid(bid=bid, bid_type=MediaType.BANNER))

        self.logger.debug("Parsed bids", bid_count=len(bidder_response.bids))
        return bidder_response, []


class SmartAdServerBuilder(Builder):
    """Builds a SmartAdServerAdapter from YAML configuration bytes."""

    def build_bidder(self, raw_config: bytes) -> SmartAdServerAdapter:
        """
        Parse the configuration and build the adapter.

        Raises:
            ConfigParseError: If the configuration cannot be decoded
            AdapterDisabledError: If the adapter is not enabled
        """
        config = parse_smartadserver_config(raw_config)
        return SmartAdServerAdapter(config)
