from datetime import datetime
from typing import Optional
from loguru import logger
from maq_bot.fsm.states import IntakeStage
from maq_bot.fsm.store import SessionStore
from maq_bot.funnel import messages
from maq_bot.models.dto import ConversationRecord, IntakeData, Reply, Transition
from maq_bot.utils.text_parsers import is_greeting, is_reset_command, normalize_text


# Seconds of "typing..." before the reply goes out
RESET_DELAY = 1.0
GREETING_DELAY = 1.5
OPTION_DELAY = 1.5
SUMMARY_DELAY = 2.0


def route(record: Optional[ConversationRecord], raw_text: str, display_name: Optional[str]) -> Transition:
    """
    Compute the next record and the replies for one inbound message.

    Does not touch any store: `record` is the user's current record (None when
    the user is not in the funnel) and the returned Transition carries the
    record to keep (None to drop it).
    """
    text = normalize_text(raw_text)

    # 1. Reset keywords win over everything, including an open funnel
    if is_reset_command(text):
        return Transition(
            record=None,
            replies=[Reply(text=messages.render_main_menu(display_name), typing_delay=RESET_DELAY)],
        )

    # 2. Open funnel: whatever was typed is the answer for the current stage
    if record is not None:
        return _advance(record, text, display_name)

    # 3. Greeting or the "I'm interested" link text
    if is_greeting(text):
        return Transition(
            record=None,
            replies=[Reply(text=messages.render_main_menu(display_name), typing_delay=GREETING_DELAY)],
        )

    # 4. Numeric menu options
    if text == "1":
        return Transition(
            record=ConversationRecord(stage=IntakeStage.AWAITING_APPLIANCE, data=IntakeData()),
            replies=[Reply(text=messages.APPLIANCE_PROMPT)],
        )
    if text == "2":
        return Transition(replies=[Reply(text=messages.SERVICES_MESSAGE, typing_delay=OPTION_DELAY)])
    if text == "3":
        return Transition(
            replies=[Reply(text=messages.OWNER_FORWARD_MESSAGE, typing_delay=OPTION_DELAY)],
            owner_requested=True,
        )

    return Transition(replies=[Reply(text=messages.FALLBACK_MESSAGE)])


def _advance(record: ConversationRecord, text: str, display_name: Optional[str]) -> Transition:
    record = record.model_copy(deep=True)

    if record.stage == IntakeStage.AWAITING_APPLIANCE:
        record.data.appliance = text
        record.stage = IntakeStage.AWAITING_MODEL
        return Transition(record=record, replies=[Reply(text=messages.MODEL_PROMPT)])

    if record.stage == IntakeStage.AWAITING_MODEL:
        record.data.model = text
        record.stage = IntakeStage.AWAITING_PROBLEM
        return Transition(record=record, replies=[Reply(text=messages.PROBLEM_PROMPT)])

    if record.stage == IntakeStage.AWAITING_PROBLEM:
        record.data.problem = text
        return Transition(
            record=None,
            replies=[Reply(text=messages.render_summary(record.data), typing_delay=SUMMARY_DELAY)],
            completed=record.data,
        )

    # NONE is never stored; treat a stray one as "not in the funnel"
    logger.warning(f"Unexpected stored stage {record.stage!r}, dropping record")
    return route(None, text, display_name)


class FunnelRouter:
    """
    Applies `route` to the records kept in a SessionStore.
    """

    def __init__(self, store: SessionStore):
        self.store = store

    def handle(self, user_id: str, raw_text: str, display_name: Optional[str] = None,
               now: Optional[datetime] = None) -> Transition:
        """
        Read the user's record, compute the transition and write it back.

        No awaits happen between the read and the write, so two messages from
        the same user can never be routed against the same stale stage.
        """
        current = self.store.get(user_id)
        transition = route(current, raw_text, display_name)

        if transition.record is None:
            if current is not None:
                self.store.delete(user_id)
        else:
            self.store.put(user_id, transition.record, now=now)

        before = current.stage.value if current else IntakeStage.NONE.value
        after = transition.record.stage.value if transition.record else IntakeStage.NONE.value
        logger.info(f"User {user_id}: {before} -> {after} (text={normalize_text(raw_text)[:50]!r})")

        return transition
