"""
REST HTTP client for a pdu node: fetch the latest envelope of an address and
publish signed envelopes.
"""

import logging
from typing import Any, Optional

import httpx

from pdum.errors import ConnectionError, EnvelopeError, HttpError
from pdum.models.envelope import Envelope, parse_envelope

DEFAULT_BASE_URL = "http://127.0.0.1:1323"

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "pdum/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @staticmethod
    def _envelope(json_data: Any) -> Envelope:
        envelope = parse_envelope(json_data)
        if envelope is None:
            raise EnvelopeError("response is not a signed envelope", {"response": str(json_data)[:200]})
        return envelope

    async def _request(self, method: str, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        logger.debug("%s %s%s", method, self._base_url, path)
        try:
            resp = await self._client.request(method, path, json=body)
        except httpx.TransportError as e:
            raise ConnectionError(f"{method} {self._base_url}{path} failed: {e}")
        if resp.status_code >= 400:
            raise HttpError(resp.status_code, f"HTTP {resp.status_code}: {resp.text[:200]}")
        try:
            return resp.json()
        except ValueError:
            raise EnvelopeError("response is not JSON", {"response": resp.text[:200]})

    async def fetch_latest_envelope(self, address: str) -> Envelope:
        """GET /info/latest/{address}"""
        return self._envelope(await self._request("GET", f"/info/latest/{address}"))

    async def publish_envelope(self, envelope: Envelope) -> Envelope:
        """POST the envelope; the node answers with the envelope it stored."""
        return self._envelope(await self._request("POST", "/", envelope.to_wire()))

    async def close(self) -> None:
        await self._client.aclose()
