from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Telegram bot (maq-bot); not needed when only the WhatsApp webhook runs
    BOT_TOKEN: Optional[str] = None

    BUSINESS_NAME: str = "MAQ SERVICE"

    # Chat id that receives finished requests and "talk to the owner" pings
    OWNER_CHAT_ID: Optional[str] = None

    # Idle sessions (disabled when unset)
    SESSION_IDLE_TIMEOUT_MINUTES: Optional[int] = None
    SESSION_SWEEP_INTERVAL_SECONDS: int = 60

    # "Typing..." pauses before some replies
    TYPING_DELAY_ENABLED: bool = True

    LOG_FILE: Optional[str] = "bot.log"
    LOG_LEVEL: str = "INFO"

    # WhatsApp Cloud API access
    WHATSAPP_TOKEN: Optional[str] = None
    WHATSAPP_PHONE_NUMBER_ID: Optional[str] = None
    WHATSAPP_VERIFY_TOKEN: Optional[str] = None
    WHATSAPP_API_URL: str = "https://graph.facebook.com/v20.0"

    # Webhook endpoint served by maq-bot-whatsapp
    WHATSAPP_WEBHOOK_HOST: str = "0.0.0.0"
    WHATSAPP_WEBHOOK_PORT: int = 8080
    WHATSAPP_WEBHOOK_PATH: str = "/webhook"

    class Config:
        env_file = ".env"
