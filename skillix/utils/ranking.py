"""rank bookkeeping for teams in a single match"""
from collections import Counter
from typing import List, Optional, Sequence


def calculate_rankings(teams: Sequence, ranks: Optional[Sequence[float]] = None) -> List[int]:
    """
    Convert raw ranks (or the team order when no ranks are given) into competition ranks.

    Every group of equal values receives the position its first member takes once the values
    are sorted ascending, so ties share a rank and the next distinct value skips past the group.
    e.g. [1, 1, 1, 4] -> [0, 0, 0, 3]

    Parameters:
        teams (Sequence): the teams in the match, only their count is used
        ranks (Sequence[float], optional): lower is better. Defaults to the order of teams.

    Returns:
        List[int]: one competition rank per team, 0 is best
    """
    if len(teams) == 0:
        return []
    if ranks is None:
        team_scores = list(range(len(teams)))
    else:
        team_scores = list(ranks[: len(teams)])

    rank_map = {}
    for idx, score in enumerate(sorted(team_scores)):
        rank_map.setdefault(score, idx)
    return [rank_map[score] for score in team_scores]


def count_rank_occurrences(team_ratings: Sequence) -> List[int]:
    """for each team, how many teams (itself included) share its rank"""
    rank_counts = Counter(team_rating.rank for team_rating in team_ratings)
    return [rank_counts[team_rating.rank] for team_rating in team_ratings]
