from aiogram import Router, F
from aiogram.enums import ChatType
from aiogram.types import Message
from maq_bot.models.dto import InboundMessage
from maq_bot.services.intake import IntakeService
from loguru import logger

router = Router()


@router.message(F.chat.type == ChatType.PRIVATE, F.text)
async def handle_text(message: Message, intake_service: IntakeService):
    """
    Every private text message goes through the intake funnel.
    Groups and non-text messages never reach this handler.
    """
    display_name = message.from_user.full_name if message.from_user else None
    inbound = InboundMessage(
        sender_id=str(message.chat.id),
        text=message.text,
        display_name=display_name,
    )
    logger.debug(f"Inbound from {inbound.sender_id}: {inbound.text[:100]}")
    await intake_service.handle_message(inbound)
