import pytest
from sqlalchemy.exc import IntegrityError

from foosball.database import init_db
from foosball.errors import DuplicateName, InvalidInput, NotFound
from foosball.schemas import parse_int
from foosball.store import GameStore, PlayerStore


@pytest.mark.parametrize("value,expected", [
    (7, 7), ("7", 7), (" 12 ", 12), ("+3", 3), ("-4", -4), (0, 0),
    (2**63 - 1, 2**63 - 1), (str(-(2**63)), -(2**63)),
])
def test_parse_int_accepts(value, expected):
    assert parse_int(value, "bad") == expected


@pytest.mark.parametrize("value", [
    1.0, "1.0", "1e3", "0x10", True, False, [], {}, "4 5",
    2**63, -(2**63) - 1, 10**20, "100000000000000000000", "١٢", "１２",
])
def test_parse_int_rejects(value):
    with pytest.raises(ValueError, match="bad"):
        parse_int(value, "bad")


@pytest.mark.asyncio
async def test_player_store_round_trip(session_factory):
    async with session_factory() as db:
        players = PlayerStore(db)
        ann = await players.create("  Ann ")
        await db.commit()

        assert ann.name == "Ann"
        assert await players.get_rating(ann.id) == 1500

        await players.set_rating(ann.id, 1523.25)
        await db.commit()
        assert await players.get_rating(ann.id) == 1523.25


@pytest.mark.asyncio
async def test_player_store_errors(session_factory):
    async with session_factory() as db:
        players = PlayerStore(db)
        with pytest.raises(InvalidInput):
            await players.create("   ")

        await players.create("Ann")
        await db.commit()
        with pytest.raises(DuplicateName):
            await players.create("Ann")

    async with session_factory() as db:
        players = PlayerStore(db)
        with pytest.raises(NotFound):
            await players.get_rating(404)
        with pytest.raises(NotFound):
            await players.set_rating(404, 1600)
        with pytest.raises(NotFound, match="ID 405"):
            await players.require([1, 405])


@pytest.mark.asyncio
async def test_game_store_validates_before_insert(session_factory, seed_players):
    ids = await seed_players([("A", 1500), ("B", 1500), ("C", 1500), ("D", 1500)])

    async with session_factory() as db:
        games = GameStore(db)
        with pytest.raises(InvalidInput):
            await games.create(ids[:2], [ids[2], ids[1]], 10, 5)
        with pytest.raises(InvalidInput):
            await games.create(ids[:2], ids[2:], 10, -1)

        game = await games.create(ids[:2], ids[2:], 10, 5)
        await db.commit()
        assert game.team1_ids == ids[:2]
        assert game.team2_ids == ids[2:]

        rows = await games.list_with_player_names()
        assert len(rows) == 1
        assert tuple(rows[0])[1:] == ("A", "B", "C", "D")


@pytest.mark.asyncio
async def test_init_db_keeps_existing_rows(db_engine, session_factory, seed_players):
    ids = await seed_players([("A", 1516), ("B", 1484)])

    await init_db(db_engine)
    await init_db(db_engine)

    async with session_factory() as db:
        players = await PlayerStore(db).list()
        assert [(p.id, p.name, p.rating) for p in players] == [(ids[0], "A", 1516), (ids[1], "B", 1484)]


@pytest.mark.asyncio
async def test_games_require_existing_players(session_factory, seed_players):
    ids = await seed_players([("A", 1500), ("B", 1500), ("C", 1500)])

    async with session_factory() as db:
        with pytest.raises(IntegrityError):
            await GameStore(db).create(ids[:2], [ids[2], 999], 10, 5)
        await db.rollback()

        assert await GameStore(db).list_with_player_names() == []
