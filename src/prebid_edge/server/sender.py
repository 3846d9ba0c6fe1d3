"""
Outbound transport to the exchange backend.
"""

import time

import requests

from ..adapters import HttpRequest, HttpResponse
from ..errors import SendError
from ..logging import http_logger


class BackendSender:
    """
    Sends wire requests to the exchange over a pooled requests session.

    One send per call; no retries.
    """

    def __init__(
        self,
        backend_name: str,
        timeout_seconds: float,
        session: requests.Session | None = None,
    ):
        self.backend_name = backend_name
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.logger = http_logger().bind(backend=backend_name)

    def send(self, wire_request: HttpRequest) -> HttpResponse:
        """
        Perform one HTTP round trip.

        Raises:
            SendError: On connection failure or timeout
        """
        self.logger.debug(
            "Sending request to backend",
            method=wire_request.method,
            uri=wire_request.uri,
            headers=wire_request.headers,
            body_bytes=len(wire_request.body),
        )
        start = time.perf_counter()
        try:
            resp = self.session.request(
                wire_request.method,
                wire_request.uri,
                data=wire_request.body,
                headers=wire_request.headers,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            raise SendError(
                f"failed to send request to backend '{self.backend_name}': {e}"
            ) from e

        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.info(
            "Backend responded",
            status_code=resp.status_code,
            duration_ms=round(duration_ms, 2),
            body_bytes=len(resp.content),
        )
        return HttpResponse(
            status_code=resp.status_code,
            body=resp.content,
            headers=dict(resp.headers),
        )

    def close(self) -> None:
        self.session.close()
