"""
Tests for the edge dispatcher

These tests drive the Flask app with a fake sender and verify the
HTTP status mapping around the adapter.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from prebid_edge.adapters import HttpResponse, SmartAdServerBuilder
from prebid_edge.config import ServerSettings
from prebid_edge.errors import AdapterDisabledError, ConfigParseError, SendError
from prebid_edge.openrtb import BidRequest
from prebid_edge.server import AUCTION_PATH, BackendSender, build_app, create_app


CONFIG = b"""
adapters:
  smartadserver:
    enabled: true
    endpoint: "https://prg.smartadserver.com/ortb"
    platform-id: 4016
    default-config:
      site-id: 1
      page-id: 2
      format-id: 3
"""

BID_REQUEST = {"id": "req-1", "imp": [{"id": "1"}], "site": {"domain": "example.com"}}


@pytest.fixture
def bidder():
    return SmartAdServerBuilder().build_bidder(CONFIG)


@pytest.fixture
def sender():
    fake = MagicMock()
    fake.send.return_value = HttpResponse(
        status_code=200,
        body=b'{"id":"req-1","seatbid":[{"bid":[{"id":"b1","impid":"1","price":1.5}]}]}',
    )
    return fake


@pytest.fixture
def client(bidder, sender):
    app = create_app(bidder, sender)
    app.config["TESTING"] = True
    return app.test_client()


class TestAuctionRoute:
    """Tests for POST /openrtb2/auction."""

    def test_relays_exchange_response(self, client, sender):
        """Status and body are relayed verbatim as JSON."""
        resp = client.post(AUCTION_PATH, data=json.dumps(BID_REQUEST))

        assert resp.status_code == 200
        assert resp.content_type == "application/json"
        assert json.loads(resp.data)["seatbid"][0]["bid"][0]["id"] == "b1"
        sender.send.assert_called_once()

    def test_sends_enriched_request(self, client, sender):
        client.post(AUCTION_PATH, data=json.dumps(BID_REQUEST))

        wire = sender.send.call_args[0][0]
        assert wire.method == "POST"
        assert wire.uri == "https://prg.smartadserver.com/ortb"
        body = json.loads(wire.body)
        assert body["site"]["page"] == "https://example.com"
        assert body["imp"][0]["bidfloor"] == 0.01

    def test_relays_no_content(self, client, sender):
        sender.send.return_value = HttpResponse(status_code=204)

        resp = client.post(AUCTION_PATH, data=json.dumps(BID_REQUEST))

        assert resp.status_code == 204
        assert resp.data == b""

    def test_relays_exchange_error_status(self, client, sender):
        """A 404 from the exchange reaches the caller unchanged."""
        sender.send.return_value = HttpResponse(status_code=404, body=b"unknown site")

        resp = client.post(AUCTION_PATH, data=json.dumps(BID_REQUEST))

        assert resp.status_code == 404
        assert resp.data == b"unknown site"

    def test_invalid_json(self, client, sender):
        resp = client.post(AUCTION_PATH, data=b"{not json")

        assert resp.status_code == 400
        sender.send.assert_not_called()

    def test_structurally_invalid_request(self, client, sender):
        resp = client.post(AUCTION_PATH, data=json.dumps({"imp": "nope"}))

        assert resp.status_code == 400
        sender.send.assert_not_called()

    def test_no_impressions(self, client, sender):
        """make_requests errors map to 500."""
        resp = client.post(AUCTION_PATH, data=json.dumps({"id": "req-1", "imp": []}))

        assert resp.status_code == 500
        sender.send.assert_not_called()

    def test_send_failure(self, client, sender):
        """Every send failing maps to 500."""
        sender.send.side_effect = SendError("connection refused")

        resp = client.post(AUCTION_PATH, data=json.dumps(BID_REQUEST))

        assert resp.status_code == 500

    def test_unknown_path(self, client, sender):
        resp = client.post("/openrtb2/amp", data=json.dumps(BID_REQUEST))

        assert resp.status_code == 404
        sender.send.assert_not_called()

    def test_wrong_method(self, client):
        assert client.get(AUCTION_PATH).status_code == 405

    def test_health(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok", "bidder": "smartadserver"}


class TestBackendSender:
    """Tests for the requests-based sender."""

    def test_send_maps_response(self, bidder):
        session = MagicMock()
        session.request.return_value = MagicMock(
            status_code=200, content=b"{}", headers={"Content-Type": "application/json"}
        )
        sender = BackendSender("smartadserver_backend", 0.5, session=session)
        wire_requests, _ = bidder.make_requests(BidRequest.from_dict(BID_REQUEST))

        resp = sender.send(wire_requests[0])

        assert resp == HttpResponse(
            status_code=200, body=b"{}", headers={"Content-Type": "application/json"}
        )
        session.request.assert_called_once_with(
            "POST",
            "https://prg.smartadserver.com/ortb",
            data=wire_requests[0].body,
            headers=wire_requests[0].headers,
            timeout=0.5,
        )

    def test_transport_error_raises_send_error(self, bidder):
        session = MagicMock()
        session.request.side_effect = requests.ConnectionError("refused")
        sender = BackendSender("smartadserver_backend", 0.5, session=session)
        wire_requests, _ = bidder.make_requests(BidRequest.from_dict(BID_REQUEST))

        with pytest.raises(SendError):
            sender.send(wire_requests[0])


class TestBuildApp:
    """Tests for startup-time construction from configuration on disk."""

    def test_builds_from_file(self, tmp_path, sender):
        path = tmp_path / "pbs.yaml"
        path.write_bytes(CONFIG)

        app = build_app(ServerSettings(config_path=str(path)), sender=sender)

        assert app.config["BIDDER"].bidder_code == "smartadserver"
        assert app.config["SENDER"] is sender

    def test_disabled_adapter_is_fatal(self, tmp_path, sender):
        path = tmp_path / "pbs.yaml"
        path.write_bytes(CONFIG.replace(b"enabled: true", b"enabled: false"))

        with pytest.raises(AdapterDisabledError):
            build_app(ServerSettings(config_path=str(path)), sender=sender)

    def test_missing_config_is_fatal(self, tmp_path, sender):
        with pytest.raises(ConfigParseError):
            build_app(ServerSettings(config_path=str(tmp_path / "nope.yaml")), sender=sender)


class TestAuctionInputValidation:
    """Bodies that are not valid OpenRTB JSON are rejected with 400."""

    @pytest.mark.parametrize(
        "body",
        [
            b'{"imp":[{"id":"1"}],"ext":{"r":NaN}}',
            b'{"imp":[{"id":"1","bidfloor":1' + b"0" * 400 + b"}]}",
            b'{"imp":[{"id":"1"}],"ext":' + b"[" * 100000 + b"]" * 100000 + b"}",
        ],
    )
    def test_rejected_before_adapter(self, client, sender, body):
        resp = client.post(AUCTION_PATH, data=body)

        assert resp.status_code == 400
        sender.send.assert_not_called()


class TestAuctionRelay:
    """The exchange's response reaches the caller regardless of classification."""

    def test_relays_when_classification_raises(self, bidder, sender):
        sender.send.return_value = HttpResponse(status_code=200, body=b'{"seatbid":"odd"}')
        bidder.make_bids = MagicMock(side_effect=RuntimeError("classification failed"))
        client = create_app(bidder, sender).test_client()

        resp = client.post(AUCTION_PATH, data=json.dumps(BID_REQUEST))

        assert resp.status_code == 200
        assert resp.data == b'{"seatbid":"odd"}'
        bidder.make_bids.assert_called_once()

    def test_relays_undecodable_exchange_body(self, client, sender):
        """Garbage from the exchange is logged as a decode error and relayed."""
        body = b'{"seatbid":[{"bid":[{"id":"a","impid":"1","price":1' + b"0" * 400 + b"}]}]}"
        sender.send.return_value = HttpResponse(status_code=200, body=body)

        resp = client.post(AUCTION_PATH, data=json.dumps(BID_REQUEST))

        assert resp.status_code == 200
        assert resp.data == body

    def test_echoes_caller_request_id(self, client):
        resp = client.post(
            AUCTION_PATH, data=json.dumps(BID_REQUEST), headers={"X-Request-Id": "edge-42"}
        )

        assert resp.headers["X-Request-Id"] == "edge-42"

    def test_generates_request_id(self, client):
        resp = client.post(AUCTION_PATH, data=b"{not json")

        assert resp.status_code == 400
        assert resp.headers["X-Request-Id"]
