from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from .config import DATABASE_URL

def make_engine(url: str) -> AsyncEngine:
    return create_async_engine(url, echo=False, pool_pre_ping=True)

def make_sessionmaker(bind: AsyncEngine):
    return sessionmaker(bind, expire_on_commit=False, class_=AsyncSession)

# one pool per process; sessions are per request
engine = make_engine(DATABASE_URL)
SessionLocal = make_sessionmaker(engine)

class Base(DeclarativeBase):
    pass

async def get_db():
    async with SessionLocal() as session:
        yield session
