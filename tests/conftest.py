"""Shared fixtures for ticket pipeline tests."""

import io
import os

# Required settings must exist before ticketmint.main is imported
os.environ.setdefault("PORT", "8080")
os.environ.setdefault("IPFS_USERNAME", "test-user")
os.environ.setdefault("IPFS_PASSWORD", "test-password")
os.environ.setdefault("SENTRY_ENABLED", "false")

import httpx
import pytest
from PIL import Image

from ticketmint.config import Settings
from ticketmint.tickets.models import FinishedScore, FinishedStatus, Team, Ticket

HOME_LOGO_URL = "https://logos.example.com/home.png"
GUEST_LOGO_URL = "https://logos.example.com/guest.png"


def png_bytes(size=(64, 64), color=(255, 0, 0, 255)) -> bytes:
    img = Image.new("RGBA", size, color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def make_ticket(status="active", date=1700000000, ticket_id="match-1") -> Ticket:
    return Ticket(
        id=ticket_id,
        host_team=Team(name="Boca Juniors", logo_url=HOME_LOGO_URL),
        guest_team=Team(name="River Plate", logo_url=GUEST_LOGO_URL),
        date=date,
        status=status,
    )


def finished(home: int, away: int) -> FinishedStatus:
    return FinishedStatus(finished=FinishedScore(home_score=home, away_score=away))


class FakeStorage:
    """Storage stub returning queued addresses (or a fixed one)."""

    def __init__(self, *addresses: str, error: Exception | None = None):
        self.addresses = list(addresses) or ["Qmtest"]
        self.error = error
        self.published: list[tuple[str, bytes]] = []

    async def publish(self, data: bytes, filename: str = "file") -> str:
        if self.error is not None:
            raise self.error
        self.published.append((filename, data))
        if len(self.addresses) > 1:
            return self.addresses.pop(0)
        return self.addresses[0]


@pytest.fixture
def work_root(tmp_path):
    return tmp_path / "work"


@pytest.fixture
def settings(work_root):
    return Settings(
        _env_file=None,
        PORT=8080,
        IPFS_USERNAME="test-user",
        IPFS_PASSWORD="test-password",
        TICKETS_WORK_DIR=str(work_root),
    )


@pytest.fixture
def logo_responses():
    """URL -> (status, body) served by the mocked HTTP client."""
    return {
        HOME_LOGO_URL: (200, png_bytes(color=(255, 0, 0, 255))),
        GUEST_LOGO_URL: (200, png_bytes(color=(0, 255, 0, 255))),
    }


@pytest.fixture
def http_client(logo_responses):
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = logo_responses.get(str(request.url), (404, b"not found"))
        return httpx.Response(status, content=body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
