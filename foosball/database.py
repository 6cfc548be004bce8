from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
import logging
import os
from dotenv import load_dotenv

load_dotenv()  # Optional .env file next to the app

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./foosball.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")


def enable_sqlite_foreign_keys(async_engine):
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection."""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ✅ One async engine per process
engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)
enable_sqlite_foreign_keys(engine)

# ✅ Create an async session
SessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)

# ✅ Define Base for models
Base = declarative_base()


# ✅ Dependency to get the async session
async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_db(bind=engine):
    """Create the players and games tables if they are missing."""
    # Registers the tables on Base.metadata
    from foosball import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Players and games tables are ready.")
