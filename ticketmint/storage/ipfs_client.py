"""IPFS HTTP API Client for Ticket Artifacts.

Publishes ticket images and token documents through an IPFS HTTP API
provider (Infura by default) and returns their content addresses.

One instance is created at application startup and shared by every request;
it wraps a single httpx.AsyncClient, which is safe for concurrent use.

Usage:
    client = IpfsClient(api_url, username, password)
    cid = await client.publish(image_bytes, filename="ticket.png")
    await client.aclose()
"""

import json
import logging
from typing import Optional

import httpx

from ticketmint.config import Settings
from ticketmint.errors import PublishError

logger = logging.getLogger(__name__)

ADD_ENDPOINT = "/api/v0/add"


class IpfsClient:
    """Async client for the IPFS ``add`` endpoint with basic auth."""

    def __init__(
        self,
        api_url: str,
        username: str,
        password: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.strip().rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            auth=httpx.BasicAuth(username, password),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "IpfsClient":
        return cls(
            api_url=settings.IPFS_API_URL,
            username=settings.IPFS_USERNAME,
            password=settings.IPFS_PASSWORD,
            timeout=settings.IPFS_TIMEOUT_SECONDS,
        )

    async def publish(self, data: bytes, filename: str = "file") -> str:
        """Add and pin a byte stream.

        Args:
            data: Content to publish
            filename: Name sent with the multipart upload

        Returns:
            Content address (CID) of the published bytes

        Raises:
            PublishError: transport failure, non-2xx response or missing hash
        """
        try:
            resp = await self._client.post(
                ADD_ENDPOINT,
                params={"pin": "true"},
                files={"file": (filename, data, "application/octet-stream")},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PublishError(
                f"IPFS add rejected: {e.response.status_code} - {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise PublishError(f"IPFS add failed: {e}") from e

        address = _parse_add_response(resp.text)
        logger.info(f"IPFS: Published {filename} ({len(data)} bytes) -> {address}")
        return address

    async def aclose(self) -> None:
        await self._client.aclose()


def _parse_add_response(text: str) -> str:
    """Extract the hash from an ``add`` response.

    The endpoint streams one JSON object per line; the last one describes
    the uploaded file.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise PublishError("IPFS add returned an empty response")
    try:
        payload = json.loads(lines[-1])
    except json.JSONDecodeError as e:
        raise PublishError(f"IPFS add returned invalid JSON: {lines[-1][:200]}") from e

    address = payload.get("Hash") if isinstance(payload, dict) else None
    if not address:
        raise PublishError(f"IPFS add response has no Hash: {lines[-1][:200]}")
    return address
