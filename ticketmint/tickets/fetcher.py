"""Team logo downloads.

Logos are fetched with the shared httpx client and written to the request's
scratch directory under a name derived from the downloaded bytes.
"""

import asyncio
import logging
from pathlib import Path

import httpx

from ticketmint.errors import FetchError
from ticketmint.tickets.naming import hashed_filename

logger = logging.getLogger(__name__)

LOGO_EXTENSION = "png"


async def download_bytes(client: httpx.AsyncClient, url: str, max_bytes: int) -> bytes:
    """GET a URL and return the full body.

    Raises:
        FetchError: transport error, timeout, non-2xx status or oversized body
    """
    try:
        resp = await client.get(url, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(f"Logo download failed: {url} -> HTTP {e.response.status_code}") from e
    except httpx.TimeoutException as e:
        raise FetchError(f"Logo download timed out: {url}") from e
    except httpx.HTTPError as e:
        raise FetchError(f"Logo download failed: {url}: {e}") from e

    body = resp.content
    if len(body) > max_bytes:
        raise FetchError(f"Logo too large: {url} ({len(body)} > {max_bytes} bytes)")
    return body


def _write_file(path: Path, data: bytes) -> None:
    path.write_bytes(data)


async def fetch_logo(
    client: httpx.AsyncClient,
    url: str,
    dest_dir: Path,
    max_bytes: int = 10 * 1024 * 1024,
) -> Path:
    """Download a logo into ``dest_dir`` and return its local path.

    The file is named by the digest of its bytes with a fixed ``.png``
    extension. The caller owns the file and is responsible for deleting it.

    Args:
        client: Shared async HTTP client
        url: Logo URL
        dest_dir: Existing directory to write into
        max_bytes: Reject bodies larger than this

    Returns:
        Path of the written file

    Raises:
        FetchError: download or local write failed
    """
    body = await download_bytes(client, url, max_bytes)
    path = dest_dir / hashed_filename(body, LOGO_EXTENSION)

    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, _write_file, path, body)
    except OSError as e:
        raise FetchError(f"Failed to store logo from {url} at {path}: {e}") from e

    logger.debug(f"Fetched logo {url} -> {path.name} ({len(body)} bytes)")
    return path
