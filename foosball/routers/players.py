from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from foosball.schemas import MAX_DB_INT, MIN_DB_INT, PlayerCreate, PlayerResponse
from foosball.database import get_db
from foosball.store import PlayerStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
async def add_player(player: PlayerCreate, db: AsyncSession = Depends(get_db)):
    new_player = await PlayerStore(db).create(player.name)
    await db.commit()

    logger.info(f"Registered player {new_player.name} (ID: {new_player.id})")
    return new_player


@router.get("", response_model=List[PlayerResponse])
async def get_players(db: AsyncSession = Depends(get_db)):
    return await PlayerStore(db).list()


@router.get("/{player_id}", response_model=PlayerResponse)
async def get_player(
    player_id: int = Path(ge=MIN_DB_INT, le=MAX_DB_INT),
    db: AsyncSession = Depends(get_db),
):
    logger.info(f"Fetching player with ID: {player_id}")
    return await PlayerStore(db).get(player_id)
