from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Generator, Optional

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy import delete
from sqlalchemy.orm import Session
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import Settings, get_settings
from app.database import SessionLocal
from app.models import ListCanceled

logger = logging.getLogger(__name__)

PURGE_JOB_ID = "canceled-list-retention"


def _as_naive_utc(value: datetime) -> datetime:
    # LIST_CANCELED stores naive UTC timestamps
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def purge_canceled_before(db: Session, cutoff: datetime) -> int:
    """Delete canceled-list rows whose cancellation happened before ``cutoff``.

    Rows without a cancellation date are left alone. Returns the number of
    deleted rows; the caller commits.
    """

    stmt = (
        delete(ListCanceled)
        .where(ListCanceled.app_canceled_date.is_not(None))
        .where(ListCanceled.app_canceled_date < _as_naive_utc(cutoff))
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    deleted = result.rowcount or 0
    logger.info("Purged %s canceled request(s) canceled before %s", deleted, cutoff.isoformat())
    return deleted


class CanceledListRetentionEngine:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        settings_provider: Callable[[], Settings] = get_settings,
    ) -> None:
        self._session_factory = session_factory
        self._settings_provider = settings_provider
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def purge_job(self) -> Job | None:
        if self._scheduler is None:
            return None
        return self._scheduler.get_job(PURGE_JOB_ID)

    def start(self) -> None:
        settings = self._settings_provider()
        if not settings.canceled_list_retention_days:
            logger.debug("Canceled list retention disabled; scheduler not started")
            return
        if self.running:
            return

        try:
            trigger = self._build_trigger(
                settings.canceled_list_purge_cron, settings.canceled_list_purge_timezone
            )
        except ValueError as exc:
            logger.warning("Canceled list purge not scheduled due to invalid cron expression: %s", exc)
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.run_purge,
            trigger=trigger,
            id=PURGE_JOB_ID,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Scheduled canceled list purge (%s, retention %s days)",
            settings.canceled_list_purge_cron,
            settings.canceled_list_retention_days,
        )

    def shutdown(self) -> None:
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

    def run_purge(self, now: Optional[datetime] = None) -> int:
        settings = self._settings_provider()
        retention_days = settings.canceled_list_retention_days
        if not retention_days:
            return 0
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=retention_days)
        with self._session_scope() as session:
            return purge_canceled_before(session, cutoff)

    def _build_trigger(self, expression: str, tz_name: str | None) -> CronTrigger:
        tz = timezone.utc
        if tz_name:
            try:
                tz = ZoneInfo(tz_name)
            except ZoneInfoNotFoundError:
                logger.warning("Unknown timezone '%s' for canceled list purge; defaulting to UTC", tz_name)
        return CronTrigger.from_crontab(expression, timezone=tz)

    @contextmanager
    def _session_scope(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


canceled_list_retention_engine = CanceledListRetentionEngine()
