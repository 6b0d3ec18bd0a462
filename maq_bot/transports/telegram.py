from aiogram import Bot
from aiogram.enums import ChatAction


class TelegramTransport:
    """
    Sends replies through an aiogram Bot. Recipient ids are chat ids.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_text(self, recipient_id: str, text: str) -> None:
        await self.bot.send_message(chat_id=recipient_id, text=text)

    async def send_typing(self, recipient_id: str) -> None:
        await self.bot.send_chat_action(chat_id=recipient_id, action=ChatAction.TYPING)
