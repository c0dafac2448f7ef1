"""Weng/Lin Bayesian Online Rating system for multi team matches"""
import logging
import math
from typing import Callable, List, Optional
import numpy as np
from skillix.core.base import OnlineRatingModel, default_gamma
from skillix.core.rating import Rating
from skillix.utils.constants import BETA, KAPPA, MARGIN, MU, SIGMA, TAU, WINDOW_SIZE
from skillix.utils.math_utils import sigmoid_scalar
from skillix.utils.ranking import count_rank_occurrences

logger = logging.getLogger(__name__)


class WengLin(OnlineRatingModel):
    """The Bayesian Online Rating System introduced by Weng and Lin"""

    def __init__(
        self,
        model: str = 'pl',
        mu: float = MU,
        sigma: float = SIGMA,
        beta: float = BETA,
        kappa: float = KAPPA,
        tau: float = TAU,
        margin: float = MARGIN,
        limit_sigma: bool = False,
        balance: bool = False,
        window_size: int = WINDOW_SIZE,
        gamma: Callable = default_gamma,
    ):
        """
        Initializes the rating model with the given parameters.

        Parameters:
            model (str, optional): 'pl' compares every team with every other team (Plackett-Luce),
                                   'bt' compares each team only with its neighbours in the ranking
                                   (Bradley-Terry with partial pairing). Defaults to 'pl'.
            mu (float, optional): initial mean of a new player's belief. Defaults to 25.
            sigma (float, optional): initial standard deviation of a new player's belief. Defaults to 25 / 3.
            beta (float, optional): performance noise. Defaults to 25 / 6.
            kappa (float, optional): floor on the variance shrink factor. Defaults to 0.0001.
            tau (float, optional): dynamics noise added before each update. Defaults to 25 / 300.
            margin (float, optional): score difference beyond which wins are scaled as more decisive. Defaults to 0.
            limit_sigma (bool, optional): prevent updates from increasing sigma. Defaults to False.
            balance (bool, optional): weight weaker teammates more when summing a team. Defaults to False.
            window_size (int, optional): how many neighbouring teams on each side are compared in 'bt' mode. Defaults to 4.
            gamma (Callable, optional): uncertainty decay function. Defaults to default_gamma.
        """
        super().__init__(
            mu=mu,
            sigma=sigma,
            beta=beta,
            kappa=kappa,
            tau=tau,
            margin=margin,
            limit_sigma=limit_sigma,
            balance=balance,
            gamma=gamma,
        )
        if window_size < 0:
            raise ValueError(f'window_size must be non-negative, got {window_size}')
        self.window_size = window_size
        self.model = model

        if model == 'pl':
            self.compute = self.plackett_luce_compute
        elif model == 'bt':
            self.compute = self.bradley_terry_part_compute
        else:
            raise ValueError(f'Invalid model {model}')
        logger.debug('initialized WengLin with model=%s', model)

    def plackett_luce_compute(
        self,
        teams: List[List[Rating]],
        ranks: Optional[List[int]] = None,
        scores: Optional[List[float]] = None,
        weights: Optional[List[List[float]]] = None,
    ) -> List[List[Rating]]:
        """full pairing, every team is compared with every team placed at or above it"""
        team_ratings = self.calculate_team_ratings(teams, ranks)
        num_teams = len(team_ratings)
        c = self.calculate_team_sqrt_sigma(team_ratings)
        sum_q = self.calculate_sum_q(team_ratings, c, scores)
        adjusted_mus = self.calculate_margin_adjusted_mu(team_ratings, scores)
        rank_counts = np.array(count_rank_occurrences(team_ratings), dtype=np.float64)
        team_ranks = np.array([team_rating.rank for team_rating in team_ratings])
        team_idxs = np.arange(num_teams)

        result = []
        for idx_i, team_i in enumerate(team_ratings):
            team_weights = None if weights is None else weights[idx_i]
            q_mask = team_ranks <= team_i.rank
            probs = math.exp(adjusted_mus[idx_i] / c) / sum_q[q_mask]
            counts = rank_counts[q_mask]

            omega = np.sum(np.where(team_idxs[q_mask] == idx_i, 1.0 - probs, -probs) / counts)
            delta = np.sum(probs * (1.0 - probs) / counts)

            omega *= team_i.sigma_sq / c
            delta *= team_i.sigma_sq / (c**2.0)
            delta *= self.gamma(c, num_teams, team_i.mu, team_i.sigma_sq, team_i.players, team_i.rank, team_weights)

            result.append(self.update_players(team_i, float(omega), float(delta), team_weights))

        return self.adjust_player_mu_change_for_tie(teams, team_ratings, result)

    def bradley_terry_part_compute(
        self,
        teams: List[List[Rating]],
        ranks: Optional[List[int]] = None,
        scores: Optional[List[float]] = None,
        weights: Optional[List[List[float]]] = None,
    ) -> List[List[Rating]]:
        """partial pairing, each team is compared only with the teams within window_size places of it"""
        team_ratings = self.calculate_team_ratings(teams, ranks)
        num_teams = len(team_ratings)

        result = []
        for idx_i, team_i in enumerate(team_ratings):
            team_weights = None if weights is None else weights[idx_i]
            omega = 0.0
            delta = 0.0
            num_compared = 0

            start = max(0, idx_i - self.window_size)
            end = min(num_teams, idx_i + self.window_size + 1)
            for idx_q in range(start, end):
                if idx_q == idx_i:
                    continue
                team_q = team_ratings[idx_q]

                margin_factor = 1.0
                if scores is not None and team_q.rank < team_i.rank:
                    margin_factor = self.margin_factor(abs(scores[idx_q] - scores[idx_i]))

                c_iq = math.sqrt(team_i.sigma_sq + team_q.sigma_sq + 2.0 * self.beta_squared)
                prob = sigmoid_scalar((team_i.mu - team_q.mu) * margin_factor / c_iq)
                sigma_to_c_iq = team_i.sigma_sq / c_iq

                if team_q.rank > team_i.rank:
                    outcome = 1.0
                elif team_q.rank == team_i.rank:
                    outcome = 0.5
                else:
                    outcome = 0.0

                omega += sigma_to_c_iq * (outcome - prob)
                gamma = self.gamma(c_iq, num_teams, team_i.mu, team_i.sigma_sq, team_i.players, team_i.rank, team_weights)
                delta += gamma * sigma_to_c_iq / c_iq * prob * (1.0 - prob)
                num_compared += 1

            if num_compared > 0:
                omega /= num_compared
                delta /= num_compared

            result.append(self.update_players(team_i, omega, delta, team_weights))

        return result


class PlackettLuce(WengLin):
    """Weng-Lin with full pairing, every team is compared with every other team"""

    def __init__(self, **kwargs):
        super().__init__(model='pl', **kwargs)


class BradleyTerryPart(WengLin):
    """Weng-Lin with logistic pairwise comparisons restricted to a sliding window of nearby ranks"""

    def __init__(self, **kwargs):
        super().__init__(model='bt', **kwargs)
