from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
import logging

from .models import DataAlat
from .errors import DuplicateDeviceId

logger = logging.getLogger(__name__)


async def add_device(db: AsyncSession, owner: str, nama_anak: str, usia: int | None,
                     jeniskelamin: str | None, idalat: str) -> DataAlat:
    # idalat is unique across all users, not per owner
    res = await db.execute(select(DataAlat.id).where(DataAlat.idalat == idalat))
    if res.first() is not None:
        raise DuplicateDeviceId()
    alat = DataAlat(username=owner, nama_anak=nama_anak, usia=usia, jeniskelamin=jeniskelamin, idalat=idalat)
    db.add(alat)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateDeviceId()
    logger.info("alat %s added by %s", idalat, owner)
    return alat

async def list_devices(db: AsyncSession, owner: str) -> list[DataAlat]:
    """Devices owned by ``owner`` sorted by child name; empty list means none."""
    res = await db.execute(
        select(DataAlat)
        .where(DataAlat.username == owner)
        .order_by(DataAlat.nama_anak.asc(), DataAlat.id.asc())
    )
    return list(res.scalars().all())
