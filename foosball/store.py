"""Player and game persistence on top of an async SQLAlchemy session.

Both stores are handed the request's session explicitly; neither commits.
Committing (or rolling back) is left to the caller so that a game row and the
rating writes it triggers can share one transaction.
"""
from typing import List, Sequence
import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import aliased

from foosball.errors import DuplicateName, InvalidInput, NotFound
from foosball.models import DEFAULT_RATING, Game, Player

logger = logging.getLogger(__name__)


class PlayerStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, name: str) -> Player:
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Name is required")

        player = Player(name=name, rating=DEFAULT_RATING)
        self.db.add(player)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Rejected duplicate player name %r", name)
            raise DuplicateName("Player name must be unique")
        return player

    async def get(self, player_id: int) -> Player:
        result = await self.db.execute(select(Player).where(Player.id == player_id))
        player = result.scalars().first()
        if not player:
            logger.warning(f"Player {player_id} not found.")
            raise NotFound(f"Player with ID {player_id} not found.")
        return player

    async def get_rating(self, player_id: int) -> float:
        result = await self.db.execute(select(Player.rating).where(Player.id == player_id))
        rating = result.scalar_one_or_none()
        if rating is None:
            logger.warning(f"Player {player_id} not found.")
            raise NotFound(f"Player with ID {player_id} not found.")
        return rating

    async def set_rating(self, player_id: int, rating: float) -> None:
        result = await self.db.execute(
            update(Player).where(Player.id == player_id).values(rating=rating)
        )
        if result.rowcount == 0:
            raise NotFound(f"Player with ID {player_id} not found.")

    async def require(self, player_ids: Sequence[int]) -> None:
        """Raise NotFound for the first id in ``player_ids`` with no player."""
        result = await self.db.execute(select(Player.id).where(Player.id.in_(player_ids)))
        found = set(result.scalars().all())
        for player_id in player_ids:
            if player_id not in found:
                logger.warning(f"Player {player_id} not found.")
                raise NotFound(f"Player with ID {player_id} not found.")

    async def list(self) -> List[Player]:
        result = await self.db.execute(select(Player).order_by(Player.name.asc()))
        return result.scalars().all()

    async def list_by_rating_desc(self) -> List[Player]:
        result = await self.db.execute(
            select(Player).order_by(Player.rating.desc(), Player.name.asc())
        )
        return result.scalars().all()


class GameStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, team1_ids, team2_ids, score_team1: int, score_team2: int) -> Game:
        player_ids = list(team1_ids) + list(team2_ids)
        if len(player_ids) != 4 or len(set(player_ids)) != 4:
            raise InvalidInput("All players must be unique")
        if score_team1 < 0 or score_team2 < 0:
            raise InvalidInput("Scores must be non-negative integers")

        game = Game(
            team1_player1=player_ids[0],
            team1_player2=player_ids[1],
            team2_player1=player_ids[2],
            team2_player2=player_ids[3],
            score_team1=score_team1,
            score_team2=score_team2,
        )
        self.db.add(game)
        await self.db.flush()  # Ensure game.id is available
        return game

    async def list_with_player_names(self):
        """Return (game, four player names) rows, most recent game first."""
        p1, p2, p3, p4 = (aliased(Player) for _ in range(4))
        stmt = (
            select(
                Game,
                p1.name.label("team1_player1_name"),
                p2.name.label("team1_player2_name"),
                p3.name.label("team2_player1_name"),
                p4.name.label("team2_player2_name"),
            )
            .join(p1, Game.team1_player1 == p1.id)
            .join(p2, Game.team1_player2 == p2.id)
            .join(p3, Game.team2_player1 == p3.id)
            .join(p4, Game.team2_player2 == p4.id)
            # SQLite timestamps only have one-second resolution
            .order_by(Game.timestamp.desc(), Game.id.desc())
        )
        result = await self.db.execute(stmt)
        return result.all()
