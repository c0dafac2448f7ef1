"""
team aggregation, pooled deviation, sum q and gamma
reference values from the OpenSkill test suites
"""
import math
import pytest
from skillix.core.rating import Rating
from skillix.models import PlackettLuce
from skillix.utils.ranking import count_rank_occurrences


def test_team_sqrt_sigma():
    model = PlackettLuce()
    team_ratings = model.calculate_team_ratings([[model.rating()], [model.rating(), model.rating()]])
    assert model.calculate_team_sqrt_sigma(team_ratings) == pytest.approx(15.590239, abs=1e-6)


def test_team_sqrt_sigma_5v5():
    model = PlackettLuce()
    teams = [[model.rating() for _ in range(5)] for _ in range(2)]
    team_ratings = model.calculate_team_ratings(teams)
    assert model.calculate_team_sqrt_sigma(team_ratings) == pytest.approx(27.003, abs=1e-3)


def test_sum_q():
    model = PlackettLuce()
    team_ratings = model.calculate_team_ratings([[model.rating()], [model.rating(), model.rating()]])
    c = model.calculate_team_sqrt_sigma(team_ratings)
    sum_q = model.calculate_sum_q(team_ratings, c)
    assert sum_q.tolist() == pytest.approx([29.67892702634643, 24.70819334370875])


def test_sum_q_5v5():
    model = PlackettLuce()
    teams = [[model.rating() for _ in range(5)] for _ in range(2)]
    team_ratings = model.calculate_team_ratings(teams)
    c = model.calculate_team_sqrt_sigma(team_ratings)
    sum_q = model.calculate_sum_q(team_ratings, c)
    assert sum_q[0] == pytest.approx(204.8437881, abs=1e-4)
    assert sum_q[1] == pytest.approx(102.421894, abs=1e-4)


@pytest.mark.parametrize(
    'c,k,mu,sigma_sq,q_rank,expected',
    [
        (2.0, 2, 3.0, 4.0, 0, 1.0),
        (2.0, 2, 3.0, 16.0, 0, 2.0),
        (2.0, 2, 3.0, 64.0, 1, 4.0),
    ],
)
def test_default_gamma(c, k, mu, sigma_sq, q_rank, expected):
    model = PlackettLuce()
    team = [model.rating() for _ in range(5)]
    assert model.gamma(c, k, mu, sigma_sq, team, q_rank, None) == expected


def test_team_ratings_ranks():
    model = PlackettLuce()
    teams = [[model.rating()], [model.rating(), model.rating()], [model.rating(), model.rating()], [model.rating()]]
    assert count_rank_occurrences(model.calculate_team_ratings(teams[:2])) == [1, 1]
    assert count_rank_occurrences(model.calculate_team_ratings(teams)) == [1, 1, 1, 1]
    assert count_rank_occurrences(model.calculate_team_ratings(teams, [1, 1, 1, 4])) == [3, 3, 3, 1]


def test_team_ratings_sums():
    model = PlackettLuce()
    team_rating = model.calculate_team_ratings([[Rating(30.0, 1.0), Rating(20.0, 2.0)]])[0]
    assert team_rating.mu == 50.0
    assert team_rating.sigma_sq == 5.0
    assert team_rating.rank == 0
    assert len(team_rating.players) == 2


def test_team_ratings_balance():
    model = PlackettLuce(balance=True)
    team_rating = model.calculate_team_ratings([[Rating(30.0, 1.0), Rating(20.0, 1.0)]])[0]
    # ordinals are 27 and 17, the weaker player is weighted by 1 + 10 / (27 + kappa)
    assert team_rating.mu == pytest.approx(57.4073726, rel=1e-6)
    assert team_rating.sigma_sq == pytest.approx(2.8779101, rel=1e-5)


def test_margin_adjusted_mu():
    model = PlackettLuce(margin=2.0)
    team_ratings = model.calculate_team_ratings([[Rating(30.0, 1.0)], [Rating(20.0, 1.0)]])
    # a win by 8 with margin 2 scales by log(5)
    adjusted = model.calculate_margin_adjusted_mu(team_ratings, [10.0, 2.0])
    assert adjusted[0] == pytest.approx(30.0 + 10.0 * (math.log(5.0) - 1.0))
    assert adjusted[1] == pytest.approx(20.0 + 10.0 * (math.log(5.0) - 1.0))


def test_margin_adjusted_mu_without_scores():
    model = PlackettLuce(margin=2.0)
    team_ratings = model.calculate_team_ratings([[Rating(30.0, 1.0)], [Rating(20.0, 1.0)]])
    assert model.calculate_margin_adjusted_mu(team_ratings).tolist() == [30.0, 20.0]
    assert model.calculate_margin_adjusted_mu(team_ratings, [1.0, 1.0]).tolist() == [30.0, 20.0]
