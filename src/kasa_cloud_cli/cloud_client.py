"""Async HTTP transport for the Kasa cloud API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import CloudConfig
from .exception import TransportError
from .schemas import ApiEnvelope

logger = logging.getLogger(__name__)


class CloudClient:
    """Posts JSON requests to the cloud endpoint and decodes the envelope.

    Use as an async context manager so the underlying connection pool is
    closed when the invocation ends::

        async with CloudClient.from_config(config) as client:
            envelope = await client.post({"method": "getDeviceList"}, token)
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Create a client for ``base_url``; ``transport`` is for tests."""
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: CloudConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "CloudClient":
        """Create a client from a CloudConfig."""
        return cls(config.base_url, timeout=config.timeout, transport=transport)

    async def __aenter__(self) -> "CloudClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the connection pool."""
        await self._client.aclose()

    async def post(
        self, payload: dict[str, Any], token: str | None = None
    ) -> ApiEnvelope:
        """Send one request and return the decoded response envelope.

        Args:
            payload: JSON request body carrying a ``method`` field
            token: Session token, sent as the ``token`` query parameter

        Raises:
            TransportError: On network failure, non-2xx status or a body
                that is not a valid envelope
        """
        params = {"token": token} if token is not None else None
        method = payload.get("method", "?")
        logger.debug(
            "POST %s method=%s (authenticated=%s)",
            self.base_url,
            method,
            token is not None,
        )
        try:
            response = await self._client.post(
                self.base_url, json=payload, params=params
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"Cloud returned HTTP {exc.response.status_code} for {method}"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Request {method} failed: {exc}") from exc

        envelope = ApiEnvelope.from_text(response.text)
        logger.debug("Response to %s: error_code=%s", method, envelope.error_code)
        return envelope
