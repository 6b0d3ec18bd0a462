from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import List, Optional
from maq_bot.fsm.states import IntakeStage


class IntakeData(BaseModel):
    appliance: Optional[str] = None
    model: Optional[str] = None
    problem: Optional[str] = None


class ConversationRecord(BaseModel):
    stage: IntakeStage = IntakeStage.AWAITING_APPLIANCE
    data: IntakeData = Field(default_factory=IntakeData)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class InboundMessage(BaseModel):
    sender_id: str
    text: str
    display_name: Optional[str] = None


class Reply(BaseModel):
    text: str
    typing_delay: float = 0.0


class Transition(BaseModel):
    record: Optional[ConversationRecord] = None
    replies: List[Reply] = []
    completed: Optional[IntakeData] = None
    owner_requested: bool = False


class IntakeLead(BaseModel):
    sender_id: str
    name: str
    appliance: Optional[str] = None
    model: Optional[str] = None
    problem: Optional[str] = None
