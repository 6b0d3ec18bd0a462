from typing import Protocol


class ChatTransport(Protocol):
    """
    What the intake service needs from a chat backend.
    """

    async def send_text(self, recipient_id: str, text: str) -> None:
        ...

    async def send_typing(self, recipient_id: str) -> None:
        ...
