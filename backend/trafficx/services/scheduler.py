import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.events import EVENT_JOB_MISSED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from trafficx import config
from trafficx.core.exceptions import NotFoundError
from trafficx.models import SessionStatus
from trafficx.storage.base import Storage

logger = logging.getLogger(__name__)

RESTART_JOB_PREFIX = "restart_"
RESET_JOB_ID = "reset_today_hits"


def restart_job_id(session_id: int) -> str:
    return f"{RESTART_JOB_PREFIX}{session_id}"


class SessionScheduler:
    """
    Owns the timed parts of the session state machine.

    A restart puts the session in "Restarting" and schedules a settle job
    that applies the desired active flag once the delay has passed. Settle
    jobs are cancellable, bounded by a misfire grace period, and sessions
    left in "Restarting" by a previous process are settled on start.
    """

    def __init__(
        self,
        storage: Storage,
        restart_delay: float = None,
        restart_timeout: int = None,
        reset_daily: bool = None,
    ):
        self.storage = storage
        self.restart_delay = config.RESTART_DELAY_SECONDS if restart_delay is None else restart_delay
        self.restart_timeout = config.RESTART_TIMEOUT_SECONDS if restart_timeout is None else restart_timeout
        self.reset_daily = config.TODAY_HITS_RESET_ENABLED if reset_daily is None else reset_daily
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self.scheduler.add_listener(self._on_missed, EVENT_JOB_MISSED)

    async def restart(self, session_id: int, active: Optional[bool] = None) -> bool:
        """
        Start a restart cycle for a session.

        Args:
            session_id: Session to restart
            active: Desired end state; defaults to the session's current flag

        Returns:
            The active flag the session will settle to
        """
        session = await self.storage.get_session(session_id)
        if session is None:
            raise NotFoundError("Session not found")

        target = session.active if active is None else active

        # A second restart replaces the pending one
        self.cancel_restart(session_id)
        await self.storage.set_session_status(session_id, SessionStatus.RESTARTING.value)

        run_at = datetime.now(timezone.utc) + timedelta(seconds=self.restart_delay)
        self.scheduler.add_job(
            self.settle,
            trigger=DateTrigger(run_date=run_at),
            id=restart_job_id(session_id),
            args=[session_id, target],
            name=f"Restart session {session_id}",
            misfire_grace_time=self.restart_timeout,
        )
        logger.info(f"[Scheduler] Restarting session {session_id} (settles to active={target} in {self.restart_delay}s)")
        return target

    def cancel_restart(self, session_id: int) -> bool:
        """Drop a pending settle job. Returns True if one was pending."""
        job_key = restart_job_id(session_id)
        if self.scheduler.get_job(job_key):
            self.scheduler.remove_job(job_key)
            logger.info(f"[Scheduler] Cancelled pending restart of session {session_id}")
            return True
        return False

    def has_pending_restart(self, session_id: int) -> bool:
        return self.scheduler.get_job(restart_job_id(session_id)) is not None

    async def settle(self, session_id: int, active: Optional[bool] = None):
        """Finish a restart: apply the desired flag, or the stored one if None."""
        session = await self.storage.get_session(session_id)
        if session is None:
            logger.warning(f"[Scheduler] Session {session_id} vanished before restart settled")
            return

        target = session.active if active is None else active
        await self.storage.set_session_active(session_id, target)
        logger.info(f"[Scheduler] Session {session_id} settled (active={target})")

    def _on_missed(self, event: JobExecutionEvent):
        if not event.job_id.startswith(RESTART_JOB_PREFIX):
            return
        session_id = int(event.job_id[len(RESTART_JOB_PREFIX):])
        logger.warning(f"[Scheduler] Restart of session {session_id} timed out, applying fallback")
        self.scheduler.add_job(self.settle, args=[session_id, None], name=f"Fallback settle {session_id}")

    async def recover_stuck_sessions(self) -> int:
        """Settle sessions left in "Restarting" without a pending job."""
        stuck = await self.storage.get_sessions_by_status(SessionStatus.RESTARTING.value)
        recovered = 0
        for session in stuck:
            if self.has_pending_restart(session.id):
                continue
            await self.settle(session.id)
            recovered += 1

        if recovered:
            logger.info(f"[Scheduler] Recovered {recovered} session(s) stuck in Restarting")
        return recovered

    async def reset_today_hits(self):
        try:
            count = await self.storage.reset_today_hits()
            logger.info(f"[Scheduler] Reset today's hits on {count} url(s)")
        except Exception as e:
            logger.error(f"[Scheduler] Daily reset failed: {e}")

    async def start(self):
        """Start the scheduler"""
        try:
            await self.recover_stuck_sessions()
            if self.reset_daily:
                self.scheduler.add_job(
                    self.reset_today_hits,
                    trigger=CronTrigger(hour=0, minute=0, timezone=timezone.utc),
                    id=RESET_JOB_ID,
                    name="Reset today's url hits",
                    replace_existing=True,
                )
            self.scheduler.start()
            logger.info("[Scheduler] Started")
        except Exception as e:
            logger.error(f"[Scheduler] Failed to start: {e}")
            raise

    async def shutdown(self):
        """Shutdown the scheduler"""
        try:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            logger.info("[Scheduler] Shutdown complete")
        except Exception as e:
            logger.error(f"[Scheduler] Shutdown error: {e}")
