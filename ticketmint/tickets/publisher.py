"""Render-and-publish pipeline for match tickets.

Per request, strictly in order:

    fetch logos -> compose image -> publish image -> build token -> publish token

The token embeds the gateway URL of the published image, so the image must be
published before the token is built. Every request works in its own scratch
directory, removed when the request finishes whatever the outcome.
"""

import asyncio
import logging
import shutil
from functools import partial
from pathlib import Path
from typing import Union
from uuid import uuid4

import httpx

from ticketmint.config import Settings
from ticketmint.errors import FilesystemError, TicketError
from ticketmint.storage.ipfs_client import IpfsClient
from ticketmint.tickets.compositor import compose_ticket_image
from ticketmint.tickets.fetcher import fetch_logo
from ticketmint.tickets.models import ErrorResponse, Ticket, UploadMatchResponse
from ticketmint.tickets.naming import content_digest
from ticketmint.tickets.token import write_token

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "internal error"


def discard(path: Path) -> None:
    """Delete a local file; failures are logged, not raised."""
    try:
        path.unlink(missing_ok=True)
        logger.debug(f"Removed {path.name}")
    except OSError as e:
        logger.warning(f"Failed to remove {path}: {e}")


def remove_workdir(workdir: Path) -> None:
    """Delete a request scratch directory and anything left in it."""
    try:
        shutil.rmtree(workdir)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove scratch dir {workdir}: {e}")


def _read_file(path: Path) -> bytes:
    return path.read_bytes()


def _make_workdir(workdir: Path) -> None:
    workdir.mkdir(parents=True)


async def discard_async(path: Path) -> None:
    """Run `discard` off the event loop."""
    await asyncio.get_running_loop().run_in_executor(None, discard, path)


class TicketPublisher:
    """Runs the pipeline with shared HTTP and storage clients.

    Holds no per-request state, so one instance serves all requests.
    """

    def __init__(self, http_client: httpx.AsyncClient, storage: IpfsClient, settings: Settings):
        self.http_client = http_client
        self.storage = storage
        self.settings = settings

    # ==========================================================================
    # Pipeline
    # ==========================================================================

    async def publish(self, ticket: Ticket) -> str:
        """Render and publish a ticket.

        Returns:
            Gateway URL of the published token document

        Raises:
            TicketError: any step failed; nothing was returned to the client
        """
        request_id = uuid4().hex
        workdir = Path(self.settings.TICKETS_WORK_DIR) / request_id
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _make_workdir, workdir)
        except OSError as e:
            raise FilesystemError(f"Failed to create scratch dir {workdir}: {e}") from e

        logger.info(f"Ticket {ticket.id}: publishing (request {request_id})")
        try:
            token_uri = await self._run(ticket, workdir)
        finally:
            await loop.run_in_executor(None, remove_workdir, workdir)

        logger.info(f"Ticket {ticket.id}: published token {token_uri}")
        return token_uri

    async def _run(self, ticket: Ticket, workdir: Path) -> str:
        loop = asyncio.get_running_loop()
        # Fails fast on a bad date before anything is downloaded
        score_text = ticket.score_text
        date_text = ticket.date_text

        home_logo, guest_logo = await self._fetch_logos(ticket, workdir)
        try:
            image_path = await loop.run_in_executor(
                None,
                partial(
                    compose_ticket_image,
                    home_logo,
                    guest_logo,
                    score_text,
                    date_text,
                    workdir,
                    content_digest(ticket),
                    score_font_path=self.settings.SCORE_FONT_PATH,
                    date_font_path=self.settings.DATE_FONT_PATH,
                ),
            )
        finally:
            await asyncio.gather(discard_async(home_logo), discard_async(guest_logo))

        image_address = await self._publish_file(image_path)
        image_uri = self.settings.gateway_url(image_address)

        token_path = await loop.run_in_executor(None, write_token, ticket, image_uri, workdir)
        token_address = await self._publish_file(token_path)
        return self.settings.gateway_url(token_address)

    async def _fetch_logos(self, ticket: Ticket, workdir: Path) -> tuple[Path, Path]:
        """Download both logos concurrently.

        Both downloads settle before returning. On failure any logo that was
        written is removed and the first error is raised.
        """
        max_bytes = self.settings.LOGO_MAX_BYTES
        results = await asyncio.gather(
            fetch_logo(self.http_client, ticket.host_team.logo_url, workdir, max_bytes),
            fetch_logo(self.http_client, ticket.guest_team.logo_url, workdir, max_bytes),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            await asyncio.gather(*(discard_async(r) for r in results if isinstance(r, Path)))
            raise errors[0]

        home_logo, guest_logo = results
        return home_logo, guest_logo

    async def _publish_file(self, path: Path) -> str:
        """Publish a local file and delete it once published."""
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, _read_file, path)
        except OSError as e:
            raise FilesystemError(f"Failed to read {path}: {e}") from e

        address = await self.storage.publish(data, filename=path.name)
        await discard_async(path)
        return address

    # ==========================================================================
    # Envelope mapping
    # ==========================================================================

    async def publish_envelope(
        self, ticket: Ticket
    ) -> tuple[int, Union[UploadMatchResponse, ErrorResponse]]:
        """Run the pipeline and map the outcome to (status_code, envelope).

        Never raises for pipeline failures; the process keeps serving.
        """
        try:
            token_uri = await self.publish(ticket)
        except TicketError as e:
            logger.error(f"Ticket {ticket.id}: {type(e).__name__}: {e}")
            return e.status_code, ErrorResponse.for_message(e.public_message)
        except Exception:
            logger.exception(f"Ticket {ticket.id}: unexpected failure")
            return 500, ErrorResponse.for_message(INTERNAL_ERROR_MESSAGE)

        return 200, UploadMatchResponse.for_uri(token_uri)
