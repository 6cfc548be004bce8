from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging
import os
import pytz

from foosball.schemas import GameCreate, GameCreated, GameResponse
from foosball.database import get_db
from foosball.elo import apply_match_result
from foosball.errors import FoosballError, StorageFailure
from foosball.store import GameStore, PlayerStore

router = APIRouter()
logger = logging.getLogger(__name__)
display_tz = pytz.timezone(os.getenv("TIMEZONE", "UTC"))


def localize_timestamp(timestamp):
    """Database timestamps are UTC; naive ones get tagged before conversion."""
    if timestamp is None:
        return None
    if timestamp.tzinfo is None:
        timestamp = pytz.utc.localize(timestamp)
    return timestamp.astimezone(display_tz)


@router.post("", response_model=GameCreated)
async def submit_game(game: GameCreate, db: AsyncSession = Depends(get_db)):
    logger.info("Received game submission: %s", game.model_dump())

    players = PlayerStore(db)
    try:
        await players.require(game.player_ids)
        new_game = await GameStore(db).create(
            game.team1_ids, game.team2_ids, game.score_team1, game.score_team2
        )
        await apply_match_result(
            players, game.team1_ids, game.team2_ids, game.score_team1, game.score_team2
        )
        await db.commit()
    except FoosballError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error committing game: %s", e, exc_info=True)
        raise StorageFailure("Database error") from e

    logger.info(f"Game {new_game.id} recorded")
    return {"id": new_game.id}


@router.get("", response_model=List[GameResponse])
async def get_games(db: AsyncSession = Depends(get_db)):
    rows = await GameStore(db).list_with_player_names()
    return [
        {
            "id": g.id,
            "score_team1": g.score_team1,
            "score_team2": g.score_team2,
            "timestamp": localize_timestamp(g.timestamp),
            "team1_player1_name": t1p1,
            "team1_player2_name": t1p2,
            "team2_player1_name": t2p1,
            "team2_player2_name": t2p2,
        }
        for g, t1p1, t1p2, t2p1, t2p2 in rows
    ]
