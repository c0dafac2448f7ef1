"""base class for Bayesian online rating models over teams"""
import logging
import math
from collections import defaultdict
from typing import Callable, List, Optional, Sequence
import numpy as np
from scipy.stats import norm
from skillix.core.errors import ConflictingInputsError, LengthMismatchError
from skillix.core.rating import Rating, TeamRating
from skillix.utils.constants import BETA, KAPPA, MARGIN, MU, SIGMA, TAU, WEIGHT_MAX, WEIGHT_MIN
from skillix.utils.math_utils import norm_ppf
from skillix.utils.ranking import calculate_rankings
from skillix.utils.sequence import normalize, unwind

logger = logging.getLogger(__name__)


def default_gamma(c, k, mu, sigma_sq, team, q_rank, weights):
    """
    Default uncertainty decay: the team's standard deviation relative to the match scale.

    Parameters:
        c (float): scale of the comparison, the pooled deviation for full pairing or the pairwise one otherwise
        k (int): number of teams in the match
        mu (float): summed mu of the team
        sigma_sq (float): summed variance of the team
        team (Sequence[Rating]): the team's players
        q_rank (int): the team's rank
        weights (Sequence[float], optional): normalized player weights of the team

    Returns:
        float: sqrt(sigma_sq) / c
    """
    return math.sqrt(sigma_sq) / c


class OnlineRatingModel:
    """
    Base class for team based Bayesian online rating models. Each player is a Gaussian belief (mu, sigma)
    and every call to rate() turns one match outcome into updated beliefs for everyone involved.

    Subclasses provide compute(), which receives teams sorted by rank and returns their updated players.

    Attributes:
        mu (float): initial mean of a new player's belief
        sigma (float): initial standard deviation of a new player's belief
        beta (float): performance noise, how far a single performance may stray from skill
        kappa (float): floor on the variance shrink factor so sigma stays positive
        tau (float): dynamics noise added to every sigma before an update
        margin (float): score difference beyond which a win counts as more decisive, 0 disables margins
        limit_sigma (bool): never let an update raise a player's sigma
        balance (bool): weight weaker teammates more heavily when summing a team
        gamma (Callable): uncertainty decay, see default_gamma for the signature
    """

    def __init__(
        self,
        mu: float = MU,
        sigma: float = SIGMA,
        beta: float = BETA,
        kappa: float = KAPPA,
        tau: float = TAU,
        margin: float = MARGIN,
        limit_sigma: bool = False,
        balance: bool = False,
        gamma: Callable = default_gamma,
    ):
        self.mu = mu
        self.sigma = sigma
        self.beta = beta
        self.beta_squared = beta**2.0
        self.kappa = kappa
        self.tau = tau
        self.margin = margin
        self.limit_sigma = limit_sigma
        self.balance = balance
        self.gamma = gamma

    def rating(self, mu: Optional[float] = None, sigma: Optional[float] = None) -> Rating:
        """a new player belief, falling back on the model's priors"""
        return Rating(
            mu=self.mu if mu is None else mu,
            sigma=self.sigma if sigma is None else sigma,
        )

    def compute(
        self,
        teams: List[List[Rating]],
        ranks: Optional[List[int]] = None,
        scores: Optional[List[float]] = None,
        weights: Optional[List[List[float]]] = None,
    ) -> List[List[Rating]]:
        """
        Computes updated players for teams which are already sorted by rank.

        Parameters:
            teams: teams sorted from best to worst placement
            ranks: competition ranks aligned with teams
            scores: scores aligned with teams, used for margin of victory
            weights: normalized player weights aligned with teams
        """
        raise NotImplementedError

    def rate(
        self,
        teams: Sequence[Sequence[Rating]],
        ranks: Optional[Sequence[float]] = None,
        scores: Optional[Sequence[float]] = None,
        weights: Optional[Sequence[Sequence[float]]] = None,
        tau: Optional[float] = None,
    ) -> List[List[Rating]]:
        """
        Updates the beliefs of every player after a match.

        Parameters:
            teams: one sequence of player ratings per team
            ranks (optional): one value per team, lower is better, equal values are ties
            scores (optional): one value per team, higher is better, cannot be combined with ranks
            weights (optional): per team, one contribution weight per player
            tau (float, optional): overrides the model's dynamics noise for this call

        Returns:
            List[List[Rating]]: new ratings in the same shape and order as teams.
            When neither ranks nor scores are given the first team is treated as the winner.
        """
        self._validate(teams, ranks, scores, weights)
        if len(teams) == 0:
            return []

        tau = self.tau if tau is None else tau
        tau_squared = tau**2.0
        # fresh beliefs so the caller's teams are never touched
        working_teams = [
            [Rating(mu=player.mu, sigma=math.sqrt((player.sigma**2.0) + tau_squared)) for player in team]
            for team in teams
        ]

        if ranks is None and scores is not None:
            ranks = [-score for score in scores]
        ranks = calculate_rankings(working_teams, ranks)

        if weights is not None:
            weights = [normalize(team_weights, WEIGHT_MIN, WEIGHT_MAX) for team_weights in weights]

        sorted_teams, order = unwind(ranks, working_teams)
        sorted_ranks = [ranks[idx] for idx in order]
        sorted_scores = None if scores is None else [scores[idx] for idx in order]
        sorted_weights = None if weights is None else [weights[idx] for idx in order]

        computed = self.compute(sorted_teams, ranks=sorted_ranks, scores=sorted_scores, weights=sorted_weights)
        result, _ = unwind(order, computed)

        if self.limit_sigma:
            result = [
                [
                    Rating(mu=player.mu, sigma=min(player.sigma, original.sigma))
                    for player, original in zip(team, original_team)
                ]
                for team, original_team in zip(result, teams)
            ]

        logger.debug('rated %d teams with ranks %s', len(teams), ranks)
        return result

    def _validate(self, teams, ranks, scores, weights):
        if ranks is not None and scores is not None:
            raise ConflictingInputsError("Cannot accept both 'ranks' and 'scores' at the same time.")
        if ranks is not None and len(ranks) != len(teams):
            raise LengthMismatchError("Arguments 'ranks' and 'teams' must be of equal length.")
        if scores is not None and len(scores) != len(teams):
            raise LengthMismatchError("Arguments 'scores' and 'teams' must be of equal length.")
        if weights is not None:
            if len(weights) != len(teams):
                raise LengthMismatchError("Arguments 'weights' and 'teams' must be of equal length.")
            for idx, (team_weights, team) in enumerate(zip(weights, teams)):
                if len(team_weights) != len(team):
                    raise LengthMismatchError(f'Size of team weights at index {idx} does not match the size of the team.')
        for idx, team in enumerate(teams):
            if len(team) == 0:
                raise ValueError(f'Team at index {idx} has no players.')

    def predict_win(self, teams: Sequence[Sequence[Rating]]) -> np.ndarray:
        """
        Probability of each team winning the match.

        Every ordered pair of teams contributes cdf((mu_a - mu_b) / sqrt(n * beta^2 + sigma_sq_a + sigma_sq_b))
        and the totals are normalized by the number of unordered pairs, so the probabilities sum to 1.
        """
        if len(teams) < 2:
            raise ValueError('At least two teams are required to predict a winner.')
        team_ratings = self.calculate_team_ratings(teams)
        num_teams = len(team_ratings)
        mus = np.array([team_rating.mu for team_rating in team_ratings])
        sigma_sqs = np.array([team_rating.sigma_sq for team_rating in team_ratings])

        combined_devs = np.sqrt(num_teams * self.beta_squared + sigma_sqs[:, None] + sigma_sqs[None, :])
        pairwise_probs = norm.cdf((mus[:, None] - mus[None, :]) / combined_devs)
        np.fill_diagonal(pairwise_probs, 0.0)
        return pairwise_probs.sum(axis=1) / (num_teams * (num_teams - 1) / 2.0)

    def predict_draw(self, teams: Sequence[Sequence[Rating]]) -> float:
        """probability that the match ends in a draw, averaged over every pair of teams"""
        if len(teams) < 2:
            raise ValueError('At least two teams are required to predict a draw.')
        team_ratings = self.calculate_team_ratings(teams)
        mus = np.array([team_rating.mu for team_rating in team_ratings])
        sigma_sqs = np.array([team_rating.sigma_sq for team_rating in team_ratings])

        player_count = sum(len(team_rating.players) for team_rating in team_ratings)
        draw_probability = 1.0 / player_count
        draw_margin = math.sqrt(player_count) * self.beta * norm_ppf((1.0 + draw_probability) / 2.0)

        idx_a, idx_b = np.triu_indices(len(team_ratings), k=1)
        combined_devs = np.sqrt(player_count * self.beta_squared + sigma_sqs[idx_a] + sigma_sqs[idx_b])
        upper = norm.cdf((draw_margin - mus[idx_a] + mus[idx_b]) / combined_devs)
        lower = norm.cdf((mus[idx_b] - mus[idx_a] - draw_margin) / combined_devs)
        return float(np.mean(upper - lower))

    def calculate_team_ratings(
        self,
        teams: Sequence[Sequence[Rating]],
        ranks: Optional[Sequence[float]] = None,
    ) -> List[TeamRating]:
        """
        Sums each team's players into a single belief.

        With balance enabled every player is weighted by 1 + (max_ordinal - ordinal) / (max_ordinal + kappa)
        so the strongest player keeps weight 1 and weaker teammates count for more.

        Parameters:
            teams: one sequence of player ratings per team
            ranks (optional): rank of each team, derived from the team order when omitted

        Returns:
            List[TeamRating]: summed mu, summed variance and rank for each team
        """
        if ranks is None:
            ranks = calculate_rankings(teams)

        team_ratings = []
        for team, rank in zip(teams, ranks):
            ordinals = [player.ordinal() for player in team]
            max_ordinal = max(ordinals)
            team_mu = 0.0
            team_sigma_sq = 0.0
            for player, ordinal in zip(team, ordinals):
                if self.balance:
                    balance_weight = 1.0 + (max_ordinal - ordinal) / (max_ordinal + self.kappa)
                else:
                    balance_weight = 1.0
                team_mu += player.mu * balance_weight
                team_sigma_sq += (player.sigma * balance_weight) ** 2.0
            team_ratings.append(TeamRating(players=tuple(team), mu=team_mu, sigma_sq=team_sigma_sq, rank=int(rank)))
        return team_ratings

    def calculate_team_sqrt_sigma(self, team_ratings: Sequence[TeamRating]) -> float:
        """pooled deviation of the whole match, sqrt(sum(sigma_sq + beta^2))"""
        return math.sqrt(sum(team_rating.sigma_sq + self.beta_squared for team_rating in team_ratings))

    def margin_factor(self, score_diff: float) -> float:
        """how much more decisive a win by score_diff is, 1 unless the difference exceeds the margin"""
        if self.margin > 0.0 and score_diff > self.margin:
            return math.log(1.0 + score_diff / self.margin)
        return 1.0

    def calculate_margin_adjusted_mu(
        self,
        team_ratings: Sequence[TeamRating],
        scores: Optional[Sequence[float]] = None,
    ) -> np.ndarray:
        """
        Team mus shifted by the average margin of victory correction against every team with a different score.
        Without scores (or with scores that do not line up with the teams) the team mus are returned as is.
        """
        mus = np.array([team_rating.mu for team_rating in team_ratings], dtype=np.float64)
        if scores is None or len(scores) != len(team_ratings):
            return mus

        adjusted_mus = mus.copy()
        for idx_i in range(len(team_ratings)):
            adjustments = []
            for idx_j in range(len(team_ratings)):
                score_diff = abs(scores[idx_i] - scores[idx_j])
                if idx_i == idx_j or score_diff <= 0.0:
                    continue
                direction = 1.0 if scores[idx_i] > scores[idx_j] else -1.0
                adjustments.append((mus[idx_i] - mus[idx_j]) * (self.margin_factor(score_diff) - 1.0) * direction)
            if adjustments:
                adjusted_mus[idx_i] += sum(adjustments) / len(adjustments)
        return adjusted_mus

    def calculate_sum_q(
        self,
        team_ratings: Sequence[TeamRating],
        c: float,
        scores: Optional[Sequence[float]] = None,
    ) -> np.ndarray:
        """for each team q, the sum of exp(mu / c) over every team ranked at or below q"""
        adjusted_mus = self.calculate_margin_adjusted_mu(team_ratings, scores)
        ranks = np.array([team_rating.rank for team_rating in team_ratings])
        exp_mus = np.exp(adjusted_mus / c)
        return np.array([exp_mus[ranks >= rank].sum() for rank in ranks])

    def update_players(
        self,
        team_rating: TeamRating,
        omega: float,
        delta: float,
        weights: Optional[Sequence[float]] = None,
    ) -> List[Rating]:
        """spread a team's mean shift omega and variance shrink delta over its players"""
        players = []
        for idx, player in enumerate(team_rating.players):
            weight = 1.0 if weights is None else weights[idx]
            scalar = weight if omega >= 0.0 else 1.0 / weight
            share = (player.sigma**2.0) / team_rating.sigma_sq
            mu = player.mu + share * omega * scalar
            sigma = player.sigma * math.sqrt(max(1.0 - share * delta * scalar, self.kappa))
            players.append(Rating(mu=mu, sigma=sigma))
        return players

    @staticmethod
    def adjust_player_mu_change_for_tie(
        original_teams: Sequence[Sequence[Rating]],
        team_ratings: Sequence[TeamRating],
        processed_teams: Sequence[Sequence[Rating]],
    ) -> List[List[Rating]]:
        """
        Gives every team in a tied group the same mu change, the average of the change
        seen by the first player of each team in the group.
        """
        rank_groups = defaultdict(list)
        for idx, team_rating in enumerate(team_ratings):
            rank_groups[team_rating.rank].append(idx)

        adjusted_teams = [list(team) for team in processed_teams]
        for team_indices in rank_groups.values():
            if len(team_indices) < 2:
                continue
            mu_changes = [processed_teams[idx][0].mu - original_teams[idx][0].mu for idx in team_indices]
            avg_mu_change = sum(mu_changes) / len(mu_changes)
            for idx in team_indices:
                adjusted_teams[idx] = [
                    Rating(mu=original.mu + avg_mu_change, sigma=player.sigma)
                    for player, original in zip(processed_teams[idx], original_teams[idx])
                ]
        return adjusted_teams
