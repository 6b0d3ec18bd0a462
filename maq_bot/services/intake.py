import asyncio
from typing import Dict, List, Optional
from loguru import logger
from maq_bot.funnel.messages import format_lead_message, format_owner_request
from maq_bot.funnel.router import FunnelRouter
from maq_bot.models.dto import InboundMessage, IntakeLead, Reply, Transition
from maq_bot.transports.base import ChatTransport
from maq_bot.utils import first_name


class IntakeService:
    """
    Glue between a transport and the funnel router.

    Messages from one sender are handled strictly one after another (per-user
    lock); different senders never wait for each other, typing pauses included.
    """

    def __init__(
        self,
        router: FunnelRouter,
        transport: ChatTransport,
        owner_chat_id: Optional[str] = None,
        typing_delay_enabled: bool = True,
    ):
        self.router = router
        self.transport = transport
        self.owner_chat_id = owner_chat_id
        self.typing_delay_enabled = typing_delay_enabled
        self._locks: Dict[str, asyncio.Lock] = {}
        self._pending: Dict[str, int] = {}

    async def handle_message(self, message: InboundMessage) -> Transition:
        user_id = message.sender_id
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._pending[user_id] = self._pending.get(user_id, 0) + 1
        try:
            async with lock:
                transition = self.router.handle(user_id, message.text, message.display_name)
                await self._deliver(user_id, transition.replies)
                await self._notify_owner(message, transition)
                return transition
        finally:
            self._pending[user_id] -= 1
            if self._pending[user_id] == 0:
                del self._pending[user_id]
                del self._locks[user_id]

    async def _deliver(self, user_id: str, replies: List[Reply]) -> None:
        for reply in replies:
            try:
                if reply.typing_delay and self.typing_delay_enabled:
                    await self.transport.send_typing(user_id)
                    await asyncio.sleep(reply.typing_delay)
                await self.transport.send_text(user_id, reply.text)
            except Exception as e:
                logger.error(f"Failed to send reply to {user_id}: {type(e).__name__}: {e}")
                return

    async def _notify_owner(self, message: InboundMessage, transition: Transition) -> None:
        if not self.owner_chat_id:
            return

        name = first_name(message.display_name)
        if transition.completed is not None:
            lead = IntakeLead(
                sender_id=message.sender_id,
                name=name,
                **transition.completed.model_dump(),
            )
            text = format_lead_message(lead)
        elif transition.owner_requested:
            text = format_owner_request(name, message.sender_id)
        else:
            return

        try:
            await self.transport.send_text(self.owner_chat_id, text)
            logger.info(f"Owner notified about {message.sender_id}")
        except Exception as e:
            logger.error(f"Failed to notify owner {self.owner_chat_id}: {type(e).__name__}: {e}")
