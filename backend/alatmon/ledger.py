from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import Any

from .models import Monitoring


async def append_reading(db: AsyncSession, idalat: str, payload: Any,
                         updated_at: datetime | None = None) -> Monitoring:
    """Write seam for the ingester that feeds ``monitoring``.

    Readings arrive through a separate ingestion process, not through this API,
    so nothing in the HTTP routes calls this. Each call appends a row; rows
    pile up until the archiver closes the streak. ``updated_at`` defaults to the
    database clock.
    """
    row = Monitoring(idalat=idalat, payload=payload)
    if updated_at is not None:
        row.updated_at = updated_at
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row

async def get_latest(db: AsyncSession, idalat: str) -> Monitoring | None:
    res = await db.execute(
        select(Monitoring)
        .where(Monitoring.idalat == idalat)
        .order_by(Monitoring.updated_at.desc(), Monitoring.id.desc())
        .limit(1)
    )
    return res.scalar_one_or_none()
