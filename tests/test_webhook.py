import json
import httpx
import pytest
from aiohttp import test_utils
from maq_bot.config import Settings
from maq_bot.funnel import messages
from maq_bot.loader import load_whatsapp_app
from maq_bot.transports.whatsapp import WhatsAppCloudTransport


@pytest.fixture
def settings():
    return Settings(
        WHATSAPP_TOKEN="wa-token",
        WHATSAPP_PHONE_NUMBER_ID="10987",
        WHATSAPP_VERIFY_TOKEN="maq-verify",
        TYPING_DELAY_ENABLED=False,
        LOG_FILE=None,
        _env_file=None,
    )


@pytest.fixture
def outbox():
    return []


@pytest.fixture
def wa_transport(settings, outbox):
    def handler(request: httpx.Request) -> httpx.Response:
        outbox.append(json.loads(request.content))
        return httpx.Response(200, json={"messages": [{"id": "wamid.out"}]})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WhatsAppCloudTransport(settings, client=client)


def _text_event(sender: str, body: str, name: str = "Paulo Henrique"):
    return {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"field": "messages", "value": {
            "contacts": [{"wa_id": sender, "profile": {"name": name}}],
            "messages": [{"from": sender, "id": "wamid.in", "type": "text", "text": {"body": body}}],
        }}]}],
    }


@pytest.mark.asyncio
async def test_webhook_handshake(settings, wa_transport):
    app = load_whatsapp_app(settings, transport=wa_transport)

    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        ok = await client.get("/webhook", params={
            "hub.mode": "subscribe", "hub.verify_token": "maq-verify", "hub.challenge": "4242",
        })
        assert ok.status == 200
        assert await ok.text() == "4242"

        denied = await client.get("/webhook", params={
            "hub.mode": "subscribe", "hub.verify_token": "nope", "hub.challenge": "4242",
        })
        assert denied.status == 403


@pytest.mark.asyncio
async def test_webhook_message_gets_reply(settings, wa_transport, outbox):
    app = load_whatsapp_app(settings, transport=wa_transport)

    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        resp = await client.post("/webhook", json=_text_event("5511988887777", "menu"))
        assert resp.status == 200
        assert (await resp.json())["processed"] == 1

        await client.post("/webhook", json=_text_event("5511988887777", "1"))

    assert [m["to"] for m in outbox] == ["5511988887777", "5511988887777"]
    assert outbox[0]["text"]["body"] == messages.render_main_menu("Paulo")
    assert outbox[1]["text"]["body"] == messages.APPLIANCE_PROMPT


@pytest.mark.asyncio
async def test_webhook_full_intake(settings, wa_transport, outbox):
    app = load_whatsapp_app(settings, transport=wa_transport)

    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        for body in ["1", "Ventilador", "Mondial", "Não liga"]:
            await client.post("/webhook", json=_text_event("5511988887777", body))

    summary = outbox[-1]["text"]["body"]
    assert "*Eletrodoméstico:* Ventilador" in summary
    assert "*Marca/Modelo:* Mondial" in summary
    assert "*Problema:* Não liga" in summary


@pytest.mark.asyncio
async def test_webhook_ignores_statuses_and_bad_json(settings, wa_transport, outbox):
    app = load_whatsapp_app(settings, transport=wa_transport)

    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        status_only = {"entry": [{"changes": [{"value": {"statuses": [{"id": "wamid.0"}]}}]}]}
        resp = await client.post("/webhook", json=status_only)
        assert resp.status == 200
        assert (await resp.json())["processed"] == 0

        bad = await client.post("/webhook", data="not json", headers={"Content-Type": "application/json"})
        assert bad.status == 400

    assert outbox == []
