from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, func
from .database import Base

DEFAULT_RATING = 1500.0


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    rating = Column(Float, nullable=False, default=DEFAULT_RATING, server_default=str(DEFAULT_RATING))


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, index=True)
    team1_player1 = Column(Integer, ForeignKey("players.id"), nullable=False)
    team1_player2 = Column(Integer, ForeignKey("players.id"), nullable=False)
    team2_player1 = Column(Integer, ForeignKey("players.id"), nullable=False)
    team2_player2 = Column(Integer, ForeignKey("players.id"), nullable=False)
    score_team1 = Column(Integer, nullable=False)
    score_team2 = Column(Integer, nullable=False)
    timestamp = Column(DateTime, nullable=False, server_default=func.now())

    @property
    def team1_ids(self):
        return [self.team1_player1, self.team1_player2]

    @property
    def team2_ids(self):
        return [self.team2_player1, self.team2_player2]
