"""Elo rating updates for two-against-two foosball games.

Each team is rated by the mean of its two players' ratings. Both players on a
team move by the same amount, computed from the pre-game averages.
"""
from typing import Dict, List, Sequence, Tuple
import logging
import math

from foosball.errors import InvalidInput

K = 32  # Elo K-factor
TEAM_SIZE = 2

logger = logging.getLogger(__name__)


def expected_score(rating, opponent_rating):
    return 1 / (1 + math.pow(10, (opponent_rating - rating) / 400))


def actual_scores(score_team1: int, score_team2: int) -> Tuple[int, int]:
    # A drawn game counts as a loss for both teams.
    return (
        1 if score_team1 > score_team2 else 0,
        1 if score_team2 > score_team1 else 0,
    )


def team_average(ratings: Sequence[float]) -> float:
    return sum(ratings) / len(ratings)


def calculate_elo(
    team1_ratings: Sequence[float],
    team2_ratings: Sequence[float],
    score_team1: int,
    score_team2: int,
    k: float = K,
) -> Tuple[List[float], List[float]]:
    """Return the new ratings of both teams, in the order they were given."""
    team1_avg = team_average(team1_ratings)
    team2_avg = team_average(team2_ratings)

    expected_team1 = expected_score(team1_avg, team2_avg)
    expected_team2 = expected_score(team2_avg, team1_avg)
    actual_team1, actual_team2 = actual_scores(score_team1, score_team2)

    new_team1 = [r + k * (actual_team1 - expected_team1) for r in team1_ratings]
    new_team2 = [r + k * (actual_team2 - expected_team2) for r in team2_ratings]
    return new_team1, new_team2


def _check_game(team1_ids, team2_ids, score_team1, score_team2):
    if len(team1_ids) != TEAM_SIZE or len(team2_ids) != TEAM_SIZE:
        raise InvalidInput("Each team must have exactly two players")
    if len(set(team1_ids) | set(team2_ids)) != 2 * TEAM_SIZE:
        raise InvalidInput("All players must be unique")
    if score_team1 < 0 or score_team2 < 0:
        raise InvalidInput("Scores must be non-negative integers")


async def apply_match_result(store, team1_ids, team2_ids, score_team1, score_team2) -> Dict[int, float]:
    """Update the four players' ratings for a finished game.

    ``store`` needs ``get_rating(player_id)`` and ``set_rating(player_id, rating)``
    coroutines. Every rating is read before the first write, so a missing
    player leaves all ratings untouched. Reads take no locks: two games sharing
    a player that are applied concurrently can lose one of the updates.
    """
    team1_ids, team2_ids = list(team1_ids), list(team2_ids)
    _check_game(team1_ids, team2_ids, score_team1, score_team2)

    team1_ratings = [await store.get_rating(pid) for pid in team1_ids]
    team2_ratings = [await store.get_rating(pid) for pid in team2_ids]

    new_team1, new_team2 = calculate_elo(team1_ratings, team2_ratings, score_team1, score_team2)

    new_ratings = dict(zip(team1_ids + team2_ids, new_team1 + new_team2))
    old_ratings = dict(zip(team1_ids + team2_ids, team1_ratings + team2_ratings))
    for pid, rating in new_ratings.items():
        await store.set_rating(pid, rating)
        logger.info("Player %s rating %.2f -> %.2f", pid, old_ratings[pid], rating)

    return new_ratings
