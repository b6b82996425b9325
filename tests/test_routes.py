"""Tests for the HTTP surface (publisher replaced via dependency override)."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeStorage
from ticketmint.main import app
from ticketmint.tickets.publisher import TicketPublisher
from ticketmint.tickets.routes import get_publisher

TICKET_JSON = {
    "id": "match-1",
    "host_team": {"name": "Boca Juniors", "logo_url": "https://logos.example.com/home.png"},
    "guest_team": {"name": "River Plate", "logo_url": "https://logos.example.com/guest.png"},
    "date": 1700000000,
    "status": {"finished": {"_0": 2, "_1": 2}},
}


@pytest.fixture
def client(http_client, settings):
    publisher = TicketPublisher(http_client, FakeStorage("Qmtest"), settings)
    app.dependency_overrides[get_publisher] = lambda: publisher
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestUploadMatch:

    def test_success_envelope(self, client, work_root):
        resp = client.post("/upload_match", json=TICKET_JSON)
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        assert resp.json() == {"response": {"token_uri": "https://ipfs.io/ipfs/Qmtest"}}
        assert list(work_root.rglob("*")) == []

    def test_active_ticket(self, client):
        payload = dict(TICKET_JSON, status="active")
        resp = client.post("/upload_match", json=payload)
        assert resp.status_code == 200

    def test_pipeline_error_envelope(self, client, logo_responses):
        logo_responses.clear()
        resp = client.post("/upload_match", json=TICKET_JSON)
        assert resp.status_code == 502
        assert resp.json() == {"error": {"msg": "failed to download team logo"}}

    def test_malformed_ticket_error_envelope(self, client):
        payload = dict(TICKET_JSON)
        del payload["host_team"]
        resp = client.post("/upload_match", json=payload)
        assert resp.status_code == 422
        body = resp.json()
        assert set(body) == {"error"}
        assert "host_team" in body["error"]["msg"]

    def test_missing_status_error_envelope(self, client):
        payload = dict(TICKET_JSON)
        del payload["status"]
        resp = client.post("/upload_match", json=payload)
        assert resp.status_code == 422
        body = resp.json()
        assert set(body) == {"error"}
        assert body["error"]["msg"].startswith("invalid ticket: status:")

    def test_non_json_body(self, client):
        resp = client.post(
            "/upload_match",
            content=b"not json",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 422
        assert "error" in resp.json()


class TestHealth:

    def test_health(self):
        resp = TestClient(app).get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
