from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from inventory.config import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict:
    """Pick pool settings for the configured backend."""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # An in-memory database only lives as long as its single connection
        if ":memory:" in url or url.endswith("://"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
    }


# Create async SQLAlchemy engine
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create session factory. Objects stay readable after commit so the
# service can build response projections without another round trip.
SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


async def get_db():
    """
    Dependency to get database session.
    Yields a database session and closes it after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        await db.close()
