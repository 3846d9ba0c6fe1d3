"""
OpenRTB 2.5 Models

Dataclasses for the parts of the OpenRTB bid request and bid response
that the edge adapters read or rewrite. Every other field is carried
through untouched in ``extra`` so a request survives a decode/encode
pass without losing data the adapters do not model.

Reference: https://github.com/InteractiveAdvertisingBureau/openrtb2.x
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OpenRTBDecodeError(ValueError):
    """Raised when a document does not match the OpenRTB structure."""
    pass


class MediaType(str, Enum):
    """Creative media types per OpenRTB 2.5."""

    BANNER = "banner"
    VIDEO = "video"
    AUDIO = "audio"
    NATIVE = "native"


class AuctionType(int, Enum):
    """OpenRTB auction types."""

    FIRST_PRICE = 1
    SECOND_PRICE = 2


def _expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise OpenRTBDecodeError(f"{what}: expected object, got {type(data).__name__}")
    return data


def _get(data: dict[str, Any], key: str, kind: type | tuple, default: Any, what: str) -> Any:
    """Read a typed field, rejecting values of the wrong JSON type."""
    value = data.get(key)
    if value is None:
        return default
    # bool is an int subclass; JSON true is never a number
    if isinstance(value, bool) and kind is not bool:
        raise OpenRTBDecodeError(f"{what}.{key}: unexpected boolean")
    if not isinstance(value, kind):
        raise OpenRTBDecodeError(
            f"{what}.{key}: expected {getattr(kind, '__name__', kind)}, got {type(value).__name__}"
        )
    return value


def _get_float(data: dict[str, Any], key: str, what: str) -> float:
    """Read a numeric field as a finite float."""
    value = _get(data, key, (int, float), 0.0, what)
    try:
        number = float(value)
    except OverflowError as e:
        raise OpenRTBDecodeError(f"{what}.{key}: number out of range") from e
    if not math.isfinite(number):
        raise OpenRTBDecodeError(f"{what}.{key}: number out of range")
    return number


def _get_list(data: dict[str, Any], key: str, what: str) -> list[Any]:
    return _get(data, key, list, [], what)


def _extra(data: dict[str, Any], known: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


def _compact(result: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    """Drop zero-valued optional fields, then append pass-through fields."""
    out = {k: v for k, v in result.items() if v not in (None, "", 0, 0.0, [])}
    for key, value in extra.items():
        out.setdefault(key, value)
    return out


@dataclass
class Format:
    """Allowed banner size."""

    w: int = 0
    h: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("w", "h")

    def to_dict(self) -> dict[str, Any]:
        return _compact({"w": self.w, "h": self.h}, self.extra)

    @classmethod
    def from_dict(cls, data: Any) -> "Format":
        data = _expect_object(data, "format")
        return cls(
            w=_get(data, "w", int, 0, "format"),
            h=_get(data, "h", int, 0, "format"),
            extra=_extra(data, cls._FIELDS),
        )


@dataclass
class Banner:
    """Banner impression object."""

    format: list[Format] = field(default_factory=list)
    w: int = 0
    h: int = 0
    id: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("format", "w", "h", "id")

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "format": [f.to_dict() for f in self.format],
                "w": self.w,
                "h": self.h,
                "id": self.id,
            },
            self.extra,
        )

    @classmethod
    def from_dict(cls, data: Any) -> "Banner":
        data = _expect_object(data, "banner")
        return cls(
            format=[Format.from_dict(f) for f in _get_list(data, "format", "banner")],
            w=_get(data, "w", int, 0, "banner"),
            h=_get(data, "h", int, 0, "banner"),
            id=_get(data, "id", str, "", "banner"),
            extra=_extra(data, cls._FIELDS),
        )


@dataclass
class Imp:
    """
    A single ad slot being auctioned.

    Attributes:
        id: Impression identifier, unique within the request
        banner: Banner object, None when the slot is not a banner
        bidfloor: Minimum bid in CPM
        bidfloorcur: Currency of the floor (ISO 4217)
        tagid: Placement identifier
        ext: Opaque extension object
    """

    id: str = ""
    banner: Banner | None = None
    bidfloor: float = 0.0
    bidfloorcur: str = ""
    tagid: str = ""
    ext: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("id", "banner", "bidfloor", "bidfloorcur", "tagid", "ext")

    def to_dict(self) -> dict[str, Any]:
        result = _compact(
            {
                "banner": self.banner.to_dict() if self.banner else None,
                "tagid": self.tagid,
                "bidfloor": self.bidfloor,
                "bidfloorcur": self.bidfloorcur,
                "ext": self.ext or None,
            },
            self.extra,
        )
        return {"id": self.id, **result}

    @classmethod
    def from_dict(cls, data: Any) -> "Imp":
        data = _expect_object(data, "imp")
        banner = data.get("banner")
        return cls(
            id=_get(data, "id", str, "", "imp"),
            banner=Banner.from_dict(banner) if banner is not None else None,
            bidfloor=_get_float(data, "bidfloor", "imp"),
            bidfloorcur=_get(data, "bidfloorcur", str, "", "imp"),
            tagid=_get(data, "tagid", str, "", "imp"),
            ext=_get(data, "ext", dict, None, "imp"),
            extra=_extra(data, cls._FIELDS),
        )


@dataclass
class Site:
    """Website on which the impressions are shown."""

    id: str = ""
    name: str = ""
    domain: str = ""
    page: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("id", "name", "domain", "page")

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "domain": self.domain,
                "page": self.page,
            },
            self.extra,
        )

    @classmethod
    def from_dict(cls, data: Any) -> "Site":
        data = _expect_object(data, "site")
        return cls(
            id=_get(data, "id", str, "", "site"),
            name=_get(data, "name", str, "", "site"),
            domain=_get(data, "domain", str, "", "site"),
            page=_get(data, "page", str, "", "site"),
            extra=_extra(data, cls._FIELDS),
        )


@dataclass
class BidRequest:
    """
    Top-level OpenRTB bid request.

    Attributes:
        id: Auction identifier
        imp: Impressions offered, in order
        site: Site object, None for app traffic
        test: 1 when the auction is in test mode
        at: Auction type (see AuctionType)
        tmax: Maximum time in milliseconds for bids to be received
        cur: Allowed bid currencies
    """

    id: str = ""
    imp: list[Imp] = field(default_factory=list)
    site: Site | None = None
    test: int = 0
    at: int = 0
    tmax: int = 0
    cur: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("id", "imp", "site", "test", "at", "tmax", "cur")

    def to_dict(self) -> dict[str, Any]:
        result = _compact(
            {
                "site": self.site.to_dict() if self.site is not None else None,
                "test": self.test,
                "at": self.at,
                "tmax": self.tmax,
                "cur": self.cur,
            },
            self.extra,
        )
        return {"id": self.id, "imp": [i.to_dict() for i in self.imp], **result}

    @classmethod
    def from_dict(cls, data: Any) -> "BidRequest":
        data = _expect_object(data, "request")
        site = data.get("site")
        return cls(
            id=_get(data, "id", str, "", "request"),
            imp=[Imp.from_dict(i) for i in _get_list(data, "imp", "request")],
            site=Site.from_dict(site) if site is not None else None,
            test=_get(data, "test", int, 0, "request"),
            at=_get(data, "at", int, 0, "request"),
            tmax=_get(data, "tmax", int, 0, "request"),
            cur=_get_list(data, "cur", "request"),
            extra=_extra(data, cls._FIELDS),
        )

    def to_json(self) -> bytes:
        """
        Encode as compact UTF-8 JSON.

        Raises:
            ValueError: If a value is NaN/Infinity
            TypeError: If a value is not JSON serializable
        """
        return encode_json(self.to_dict())

    @classmethod
    def from_json(cls, raw: bytes | str) -> "BidRequest":
        """Decode from JSON; raises OpenRTBDecodeError on any failure."""
        return cls.from_dict(decode_json(raw))


@dataclass
class Bid:
    """A bid for one impression."""

    id: str = ""
    impid: str = ""
    price: float = 0.0
    adid: str = ""
    adm: str = ""
    crid: str = ""
    w: int = 0
    h: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("id", "impid", "price", "adid", "adm", "crid", "w", "h")

    def to_dict(self) -> dict[str, Any]:
        result = _compact(
            {
                "adid": self.adid,
                "adm": self.adm,
                "crid": self.crid,
                "w": self.w,
                "h": self.h,
            },
            self.extra,
        )
        return {"id": self.id, "impid": self.impid, "price": self.price, **result}

    @classmethod
    def from_dict(cls, data: Any) -> "Bid":
        data = _expect_object(data, "bid")
        return cls(
            id=_get(data, "id", str, "", "bid"),
            impid=_get(data, "impid", str, "", "bid"),
            price=_get_float(data, "price", "bid"),
            adid=_get(data, "adid", str, "", "bid"),
            adm=_get(data, "adm", str, "", "bid"),
            crid=_get(data, "crid", str, "", "bid"),
            w=_get(data, "w", int, 0, "bid"),
            h=_get(data, "h", int, 0, "bid"),
            extra=_extra(data, cls._FIELDS),
        )


@dataclass
class SeatBid:
    """Bids made on behalf of one buyer seat."""

    bid: list[Bid] = field(default_factory=list)
    seat: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("bid", "seat")

    def to_dict(self) -> dict[str, Any]:
        result = _compact({"seat": self.seat}, self.extra)
        return {"bid": [b.to_dict() for b in self.bid], **result}

    @classmethod
    def from_dict(cls, data: Any) -> "SeatBid":
        data = _expect_object(data, "seatbid")
        return cls(
            bid=[Bid.from_dict(b) for b in _get_list(data, "bid", "seatbid")],
            seat=_get(data, "seat", str, "", "seatbid"),
            extra=_extra(data, cls._FIELDS),
        )


@dataclass
class BidResponse:
    """Top-level OpenRTB bid response."""

    id: str = ""
    seatbid: list[SeatBid] = field(default_factory=list)
    cur: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("id", "seatbid", "cur")

    def to_dict(self) -> dict[str, Any]:
        result = _compact(
            {"seatbid": [s.to_dict() for s in self.seatbid], "cur": self.cur},
            self.extra,
        )
        return {"id": self.id, **result}

    @classmethod
    def from_dict(cls, data: Any) -> "BidResponse":
        data = _expect_object(data, "response")
        return cls(
            id=_get(data, "id", str, "", "response"),
            seatbid=[SeatBid.from_dict(s) for s in _get_list(data, "seatbid", "response")],
            cur=_get(data, "cur", str, "", "response"),
            extra=_extra(data, cls._FIELDS),
        )

    @classmethod
    def from_json(cls, raw: bytes | str) -> "BidResponse":
        """Decode from JSON; raises OpenRTBDecodeError on any failure."""
        return cls.from_dict(decode_json(raw))


def encode_json(value: Any) -> bytes:
    """Compact, deterministic JSON encoding that rejects NaN and Infinity."""
    return json.dumps(value, separators=(",", ":"), allow_nan=False).encode("utf-8")


def _reject_constant(name: str) -> Any:
    raise OpenRTBDecodeError(f"invalid JSON: {name} is not a valid value")


def _parse_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise OpenRTBDecodeError(f"invalid JSON: {text} is out of range")
    return number


def decode_json(raw: bytes | str) -> Any:
    """Strict JSON decoding: NaN and Infinity are rejected."""
    try:
        return json.loads(raw, parse_constant=_reject_constant, parse_float=_parse_float)
    except OpenRTBDecodeError:
        raise
    except (ValueError, TypeError, RecursionError) as e:
        raise OpenRTBDecodeError(f"invalid JSON: {e}") from e
