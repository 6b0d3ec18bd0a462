from aiogram import Bot, Dispatcher
from aiogram.types import Update
from aiohttp import web
from typing import Any, Awaitable, Callable, Optional
from maq_bot.config import Settings
from maq_bot.fsm.store import SessionStore
from maq_bot.funnel.router import FunnelRouter
from maq_bot.services.intake import IntakeService
from maq_bot.transports.base import ChatTransport
from maq_bot.transports.telegram import TelegramTransport
from maq_bot.transports.whatsapp import WhatsAppCloudTransport
from maq_bot.utils.logging import setup_logging
from maq_bot.utils.scheduler import scheduler, schedule_idle_eviction
from maq_bot.webhook import create_webhook_app
from maq_bot.handlers import intake
from loguru import logger


class DependencyMiddleware:
    """Middleware to inject dependencies into handlers."""

    def __init__(self, intake_service: IntakeService):
        self.intake_service = intake_service

    async def __call__(
        self,
        handler: Callable[[Update, dict[str, Any]], Awaitable[Any]],
        event: Update,
        data: dict[str, Any]
    ) -> Any:
        data["intake_service"] = self.intake_service
        return await handler(event, data)


def build_intake_service(settings: Settings, transport: ChatTransport) -> IntakeService:
    """
    One store + router per transport, plus the idle sweep when configured.
    """
    # Conversation state lives here, one store per bot instance
    store = SessionStore()
    intake_service = IntakeService(
        router=FunnelRouter(store),
        transport=transport,
        owner_chat_id=settings.OWNER_CHAT_ID,
        typing_delay_enabled=settings.TYPING_DELAY_ENABLED,
    )

    if schedule_idle_eviction(
        store,
        settings.SESSION_IDLE_TIMEOUT_MINUTES,
        settings.SESSION_SWEEP_INTERVAL_SECONDS,
    ) and not scheduler.running:
        logger.info("⏰ Starting AsyncIOScheduler...")
        scheduler.start()

    return intake_service


def load_bot(settings: Optional[Settings] = None) -> tuple[Bot, Dispatcher]:
    """
    Load bot, dispatcher, and register all handlers.
    Returns (bot, dispatcher) tuple.
    """
    if settings is None:
        settings = Settings()

    setup_logging(settings.LOG_FILE, settings.LOG_LEVEL)
    logger.info(f"Settings loaded for {settings.BUSINESS_NAME}")

    if not settings.BOT_TOKEN:
        raise ValueError("BOT_TOKEN is required to run the Telegram bot")

    bot = Bot(token=settings.BOT_TOKEN)
    dp = Dispatcher()

    intake_service = build_intake_service(settings, TelegramTransport(bot))

    dp.message.middleware(DependencyMiddleware(intake_service))
    dp.include_router(intake.router)

    logger.info("All handlers registered")

    return bot, dp


def load_whatsapp_app(
    settings: Optional[Settings] = None,
    transport: Optional[WhatsAppCloudTransport] = None,
) -> web.Application:
    """
    Build the aiohttp app serving the WhatsApp Cloud API webhook.
    """
    if settings is None:
        settings = Settings()

    setup_logging(settings.LOG_FILE, settings.LOG_LEVEL)
    logger.info(f"Settings loaded for {settings.BUSINESS_NAME} (WhatsApp)")

    if transport is None:
        transport = WhatsAppCloudTransport(settings)

    app = create_webhook_app(settings, build_intake_service(settings, transport))

    async def close_transport(_app: web.Application) -> None:
        await transport.close()

    app.on_cleanup.append(close_transport)

    logger.info(f"Webhook registered at {settings.WHATSAPP_WEBHOOK_PATH}")
    return app
