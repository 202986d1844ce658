from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool
import logging

from .models import User
from .auth import hash_password, verify_password
from .errors import DuplicateEmail, UserNotFound, InvalidPassword

logger = logging.getLogger(__name__)


async def get_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()

async def register(db: AsyncSession, username: str, email: str, no_telp: str | None, password: str) -> User:
    if await get_by_email(db, email):
        raise DuplicateEmail()
    # slow hash; keep it off the event loop
    password_hash = await run_in_threadpool(hash_password, password)
    user = User(username=username, email=email, no_telp=no_telp, password_hash=password_hash)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration
        await db.rollback()
        raise DuplicateEmail()
    logger.info("registered user %s <%s>", username, email)
    return user

async def verify(db: AsyncSession, email: str, password: str) -> User:
    user = await get_by_email(db, email)
    if not user:
        raise UserNotFound()
    if not await run_in_threadpool(verify_password, password, user.password_hash):
        logger.warning("invalid password for %s", email)
        raise InvalidPassword()
    return user
