import asyncio

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from foosball.database import enable_sqlite_foreign_keys, get_db, init_db
from foosball.errors import NotFound
from foosball.main import app
from foosball.models import Player


class InMemoryRatingStore:
    """Rating store double; every call yields to the event loop like real I/O."""

    def __init__(self, ratings=None):
        self.ratings = dict(ratings or {})
        self.writes = []

    async def get_rating(self, player_id):
        await asyncio.sleep(0)
        if player_id not in self.ratings:
            raise NotFound(f"Player with ID {player_id} not found.")
        return self.ratings[player_id]

    async def set_rating(self, player_id, rating):
        await asyncio.sleep(0)
        if player_id not in self.ratings:
            raise NotFound(f"Player with ID {player_id} not found.")
        self.ratings[player_id] = rating
        self.writes.append((player_id, rating))


@pytest.fixture
def make_rating_store():
    return InMemoryRatingStore


@pytest.fixture
def rating_store():
    # Players 1..8, all at the starting rating
    return InMemoryRatingStore({pid: 1500.0 for pid in range(1, 9)})


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return sessionmaker(bind=db_engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seed_players(session_factory):
    async def seed(players):
        """Insert ``(name, rating)`` pairs and return their ids in order."""
        async with session_factory() as session:
            rows = [Player(name=name, rating=rating) for name, rating in players]
            session.add_all(rows)
            await session.commit()
            return [row.id for row in rows]

    return seed
