"""Tests for RelayPipelineService.process_email."""

import asyncio
import json

import httpx
import pytest

from mailrelay.exceptions import DKIMVerificationError
from mailrelay.models import InboundEmail
from mailrelay.services.discord import DiscordWebhookClient
from mailrelay.services.orchestration.relay_pipeline import RelayPipelineService, body_html
from mailrelay.services.rewriter import DISCLAIMERS


class FakeRewriter:
    def __init__(self, result: str = "yo team") -> None:
        self.result = result
        self.calls = []

    async def rewrite_async(self, text: str) -> str:
        self.calls.append(text)
        return self.result


def _client(url, contents, label="original"):
    def handler(request: httpx.Request) -> httpx.Response:
        contents.append(json.loads(request.content)["content"])
        return httpx.Response(204)

    return DiscordWebhookClient(url, label=label, transport=httpx.MockTransport(handler))


@pytest.fixture
def sent():
    return {"original": [], "stylized": []}


def _service(settings, sent, rewriter=None):
    return RelayPipelineService(
        settings,
        rewriter=rewriter or FakeRewriter(),
        original_client=_client(settings.DISCORD_WEBHOOK_URL, sent["original"]),
        stylized_client=_client(settings.DISCORD_WEBHOOK_URL_STYLIZED, sent["stylized"], label="stylized"),
    )


class TestProcessEmail:
    """Tests for the verify/render/deliver flow."""

    def test_relays_rendered_blocks(self, make_settings, sent, dkim_pass):
        service = _service(make_settings(), sent)
        email = InboundEmail(html="<p>Hello <b>World</b></p>", subject="Greeting", dkim=dkim_pass)
        response = asyncio.run(service.process_email(email))
        assert response.ok
        assert response.blocksSent == 1
        assert response.stylizedBlocksSent == 0
        assert len(response.relayId) == 12
        assert sent["original"] == ["**Greeting**\n\nHello **World**"]
        assert sent["stylized"] == []

    def test_dkim_failure_sends_nothing(self, make_settings, sent):
        service = _service(make_settings(), sent)
        email = InboundEmail(html="<p>x</p>", dkim={"envelopeFrom": "x@evil.test", "results": []})
        with pytest.raises(DKIMVerificationError, match="not in allowed list"):
            asyncio.run(service.process_email(email))
        assert sent["original"] == []

    def test_dkim_check_can_be_disabled(self, make_settings, sent):
        service = _service(make_settings(VERIFY_DKIM="false"), sent)
        response = asyncio.run(service.process_email(InboundEmail(html="<p>x</p>")))
        assert response.blocksSent == 1

    def test_small_limit_splits_into_several_messages(self, make_settings, sent, dkim_pass):
        service = _service(make_settings(MSG_CHAR_LIMIT="40"), sent)
        html = "".join(f"<p>Paragraph {i} has some words.</p>" for i in range(6))
        response = asyncio.run(service.process_email(InboundEmail(html=html, dkim=dkim_pass)))
        assert response.blocksSent == len(sent["original"]) > 1
        assert all(len(block) <= 40 for block in sent["original"])

    def test_stylized_copy_gets_disclaimer(self, make_settings, sent, dkim_pass):
        settings = make_settings(ENABLE_STYLIZED="true", DISCORD_WEBHOOK_URL_STYLIZED="https://discord.test/stylized")
        rewriter = FakeRewriter("yo team")
        service = _service(settings, sent, rewriter)
        response = asyncio.run(service.process_email(InboundEmail(html="<p>Dear team</p>", dkim=dkim_pass)))
        assert response.stylizedBlocksSent == 1
        assert rewriter.calls == ["Dear team"]
        head, _, disclaimer = sent["stylized"][0].partition("\n\n---\n")
        assert head == "yo team"
        assert disclaimer in DISCLAIMERS

    def test_stylized_needs_a_destination(self, make_settings, sent, dkim_pass):
        rewriter = FakeRewriter()
        service = _service(make_settings(ENABLE_STYLIZED="true"), sent, rewriter)
        response = asyncio.run(service.process_email(InboundEmail(html="<p>x</p>", dkim=dkim_pass)))
        assert response.stylizedBlocksSent == 0
        assert rewriter.calls == []


class TestBodyHtml:
    """Tests for choosing the body to render."""

    def test_prefers_html(self):
        assert body_html(InboundEmail(html="<p>a</p>", text="b")) == "<p>a</p>"

    def test_escapes_plain_text_fallback(self):
        assert body_html(InboundEmail(html="  ", text="a < b\nc")) == "a &lt; b<br>c"

    def test_plain_text_renders_verbatim(self, make_settings, sent):
        service = _service(make_settings(VERIFY_DKIM="false"), sent)
        asyncio.run(service.process_email(InboundEmail(text="a < b\nc")))
        assert sent["original"] == ["a < b\nc"]

    def test_no_body(self):
        assert body_html(InboundEmail()) == ""
