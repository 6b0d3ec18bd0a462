import asyncio
from aiohttp import web
from maq_bot.config import Settings
from maq_bot.loader import load_bot, load_whatsapp_app
from maq_bot.utils.scheduler import scheduler
from loguru import logger


def stop_scheduler():
    if scheduler.running:
        logger.info("⏰ Stopping AsyncIOScheduler...")
        scheduler.shutdown(wait=False)


async def main():
    """
    Telegram: load bot and poll until stopped.
    """
    bot, dp = load_bot()
    try:
        logger.info("Starting Telegram polling...")
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
        stop_scheduler()


async def main_whatsapp():
    """
    WhatsApp: serve the Cloud API webhook until stopped.
    """
    settings = Settings()
    app = load_whatsapp_app(settings)
    runner = web.AppRunner(app)
    await runner.setup()
    try:
        site = web.TCPSite(runner, settings.WHATSAPP_WEBHOOK_HOST, settings.WHATSAPP_WEBHOOK_PORT)
        await site.start()
        logger.info(
            f"WhatsApp webhook listening on "
            f"{settings.WHATSAPP_WEBHOOK_HOST}:{settings.WHATSAPP_WEBHOOK_PORT}{settings.WHATSAPP_WEBHOOK_PATH}"
        )
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        stop_scheduler()


def _run(coro):
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.exception(f"Bot error: {e}")


def run():
    _run(main())


def run_whatsapp():
    _run(main_whatsapp())


if __name__ == "__main__":
    run()
