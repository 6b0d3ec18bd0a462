from aiohttp import web
from loguru import logger
from maq_bot.config import Settings
from maq_bot.services.intake import IntakeService
from maq_bot.transports.whatsapp import parse_webhook, verify_webhook

SETTINGS_KEY = web.AppKey("settings", Settings)
INTAKE_SERVICE_KEY = web.AppKey("intake_service", IntakeService)


async def handle_verify(request: web.Request) -> web.Response:
    """
    GET: Meta subscription handshake (hub.mode / hub.verify_token / hub.challenge).
    """
    challenge = verify_webhook(
        request.app[SETTINGS_KEY],
        request.query.get("hub.mode"),
        request.query.get("hub.verify_token"),
        request.query.get("hub.challenge"),
    )
    if challenge is None:
        return web.Response(status=403, text="Forbidden")
    return web.Response(text=challenge)


async def handle_event(request: web.Request) -> web.Response:
    """
    POST: every text message in the payload goes through the intake funnel.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return web.Response(status=400, text="Invalid JSON")

    intake_service = request.app[INTAKE_SERVICE_KEY]
    inbound = parse_webhook(payload)
    for message in inbound:
        logger.debug(f"Inbound from {message.sender_id}: {message.text[:100]}")
        await intake_service.handle_message(message)

    return web.json_response({"status": "ok", "processed": len(inbound)})


def create_webhook_app(settings: Settings, intake_service: IntakeService) -> web.Application:
    app = web.Application()
    app[SETTINGS_KEY] = settings
    app[INTAKE_SERVICE_KEY] = intake_service
    app.router.add_get(settings.WHATSAPP_WEBHOOK_PATH, handle_verify)
    app.router.add_post(settings.WHATSAPP_WEBHOOK_PATH, handle_event)
    return app
