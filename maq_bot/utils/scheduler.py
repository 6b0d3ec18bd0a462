from datetime import timedelta
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from maq_bot.fsm.store import SessionStore

scheduler = AsyncIOScheduler()

EVICTION_JOB_ID = "evict_idle_sessions"


async def sweep_idle_sessions(store: SessionStore, max_idle: timedelta):
    """Drops sessions abandoned mid-funnel. Runs on the event loop, like the handlers."""
    evicted = store.evict_idle(max_idle)
    if evicted:
        logger.info(f"Idle sweep evicted {len(evicted)} session(s)")


def schedule_idle_eviction(
    store: SessionStore,
    idle_minutes: Optional[int],
    interval_seconds: int = 60,
    sched: Optional[AsyncIOScheduler] = None,
) -> bool:
    """
    Register the periodic idle sweep. Returns False when eviction is disabled.
    """
    sched = sched or scheduler
    if not idle_minutes:
        logger.info("Idle session eviction disabled")
        return False

    if sched.get_job(EVICTION_JOB_ID):
        sched.remove_job(EVICTION_JOB_ID)

    sched.add_job(
        sweep_idle_sessions,
        'interval',
        seconds=interval_seconds,
        args=[store, timedelta(minutes=idle_minutes)],
        id=EVICTION_JOB_ID,
    )
    logger.info(f"Idle session eviction every {interval_seconds}s, timeout {idle_minutes} min")
    return True
