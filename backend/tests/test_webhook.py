"""HTTP-level tests for the inbound webhook and health endpoints."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from mailrelay import main
from mailrelay.config import get_settings
from mailrelay.deps import get_relay_service
from mailrelay.services.discord import DiscordWebhookClient
from mailrelay.services.orchestration.relay_pipeline import RelayPipelineService
from mailrelay.services.verification import compute_signature

KEY = "hook-secret"
PATH = "/" + main.settings.WEBHOOK_PATH


@pytest.fixture
def relay(make_settings):
    """Wire the app to test settings and a recording Discord transport."""
    state = {"contents": [], "status": 204}

    def handler(request: httpx.Request) -> httpx.Response:
        if state["status"] >= 400:
            return httpx.Response(state["status"])
        state["contents"].append(json.loads(request.content)["content"])
        return httpx.Response(state["status"])

    settings = make_settings(WEBHOOK_SIGNATURE_KEY=KEY)
    client = DiscordWebhookClient(settings.DISCORD_WEBHOOK_URL, transport=httpx.MockTransport(handler))
    service = RelayPipelineService(settings, original_client=client)
    main.app.dependency_overrides[get_settings] = lambda: settings
    main.app.dependency_overrides[get_relay_service] = lambda: service
    state["http"] = TestClient(main.app)
    yield state
    main.app.dependency_overrides.clear()


def _post(http, payload, *, key=KEY, raw=None):
    body = raw if raw is not None else json.dumps(payload).encode("utf-8")
    headers = {"Content-Type": "application/json"}
    if key:
        headers["X-Webhook-Signature"] = compute_signature(key, body)
    return http.post(PATH, content=body, headers=headers)


class TestWebhook:
    """Tests for POST /{WEBHOOK_PATH}."""

    def test_relays_signed_email(self, relay, dkim_pass):
        resp = _post(relay["http"], {"html": "<p>Hi there</p>", "subject": "Hello", "dkim": dkim_pass})
        assert resp.status_code == 200
        assert resp.json()["blocksSent"] == 1
        assert relay["contents"] == ["**Hello**\n\nHi there"]

    def test_bad_signature_is_forbidden(self, relay, dkim_pass):
        resp = _post(relay["http"], {"html": "<p>x</p>", "dkim": dkim_pass}, key="wrong-key")
        assert resp.status_code == 403
        assert relay["contents"] == []

    def test_missing_signature_is_forbidden(self, relay, dkim_pass):
        resp = _post(relay["http"], {"html": "<p>x</p>", "dkim": dkim_pass}, key="")
        assert resp.status_code == 403

    def test_invalid_json(self, relay):
        resp = _post(relay["http"], None, raw=b"{not json")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid request body"

    def test_invalid_payload_shape(self, relay):
        resp = _post(relay["http"], {"dkim": "nope"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid email payload"

    def test_dkim_failure(self, relay):
        dkim = {"envelopeFrom": "x@evil.test", "results": [{"status": {"result": "pass"}}]}
        resp = _post(relay["http"], {"html": "<p>x</p>", "dkim": dkim})
        assert resp.status_code == 403
        assert resp.json()["detail"] == "DKIM verification failed: Envelope from x@evil.test not in allowed list"

    def test_delivery_failure(self, relay, dkim_pass):
        relay["status"] = 400
        resp = _post(relay["http"], {"html": "<p>x</p>", "dkim": dkim_pass})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Error delivering email"


def test_healthz(relay):
    resp = relay["http"].get("/healthz")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["dryRun"] is False
