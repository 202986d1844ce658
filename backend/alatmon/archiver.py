"""Monitoring to history transition.

A device's live rows in ``monitoring`` pile up while its reading does not
change. When an outside caller reports that the reading stayed the same for
``duration`` seconds, the streak is closed: one ``history`` row is written,
stamped with the WIB wall clock of the earliest live row, and every live row of
the device is deleted. Both writes share one transaction.

The delete has no timestamp bound, so a reading that lands while the archive is
running is purged with the rest. Callers must not expect every reading to end up
in history.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from dataclasses import dataclass
from datetime import datetime
import logging

from .models import Monitoring, History
from .errors import NoMonitoringData, PurgeFailed, HistoryNotFound
from .timeutil import to_wib

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakStart:
    idalat: str
    row_id: int
    started_at: datetime


async def streak_start(db: AsyncSession, idalat: str) -> StreakStart | None:
    """Earliest live row of the device, locked until the transaction ends.

    The lock makes a second archive of the same device wait and then see no rows
    (PostgreSQL). SQLite ignores FOR UPDATE.
    """
    res = await db.execute(
        select(Monitoring.id, Monitoring.updated_at)
        .where(Monitoring.idalat == idalat)
        .order_by(Monitoring.updated_at.asc(), Monitoring.id.asc())
        .limit(1)
        .with_for_update()
    )
    row = res.first()
    if row is None:
        return None
    return StreakStart(idalat=idalat, row_id=row.id, started_at=row.updated_at)


async def archive(db: AsyncSession, idalat: str, duration: int) -> History:
    try:
        start = await streak_start(db, idalat)
        if start is None:
            raise NoMonitoringData()

        record = History(idalat=idalat, created_at=to_wib(start.started_at), duration=duration)
        db.add(record)
        await db.flush()

        res = await db.execute(delete(Monitoring).where(Monitoring.idalat == idalat))
        if res.rowcount == 0:
            logger.error(
                "purge of monitoring rows for %s affected no rows after reading streak start %s; "
                "history insert rolled back, reconcile this device",
                idalat, start.started_at,
            )
            raise PurgeFailed(idalat)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("archived %s: %d live rows, streak from %s, duration %ss",
                idalat, res.rowcount, record.created_at, duration)
    return record


async def list_history(db: AsyncSession, idalat: str) -> list[History]:
    res = await db.execute(
        select(History)
        .where(History.idalat == idalat)
        .order_by(History.created_at.asc(), History.id.asc())
    )
    rows = list(res.scalars().all())
    if not rows:
        raise HistoryNotFound()
    return rows
