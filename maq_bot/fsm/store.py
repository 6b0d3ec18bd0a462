from datetime import datetime, timedelta, timezone
from typing import Dict, Iterator, List, Optional
from loguru import logger
from maq_bot.models.dto import ConversationRecord


class SessionStore:
    """
    In-memory per-user conversation records.

    A user without a record is not in the funnel. Records live only as long
    as the process; nothing is written to disk.
    """

    def __init__(self):
        self._records: Dict[str, ConversationRecord] = {}

    def get(self, user_id: str) -> Optional[ConversationRecord]:
        return self._records.get(user_id)

    def put(self, user_id: str, record: ConversationRecord, now: Optional[datetime] = None) -> None:
        record.updated_at = now or datetime.now(timezone.utc)
        self._records[user_id] = record

    def delete(self, user_id: str) -> bool:
        return self._records.pop(user_id, None) is not None

    def evict_idle(self, max_idle: timedelta, now: Optional[datetime] = None) -> List[str]:
        """
        Drop records untouched for longer than max_idle.
        Returns ids of evicted users.
        """
        now = now or datetime.now(timezone.utc)
        expired = [
            user_id for user_id, record in self._records.items()
            if now - record.updated_at > max_idle
        ]
        for user_id in expired:
            stage = self._records.pop(user_id).stage
            logger.info(f"Evicted idle session for user {user_id} at stage {stage.value}")
        return expired

    def snapshot(self) -> Dict[str, ConversationRecord]:
        return {user_id: record.model_copy(deep=True) for user_id, record in self._records.items()}

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._records))
