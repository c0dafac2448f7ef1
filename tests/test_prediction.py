"""
win and draw probabilities
draw reference values from the OpenSkill test suites
"""
import pytest
from skillix.core.rating import Rating
from skillix.models import BradleyTerryPart, PlackettLuce


def test_predict_draw_even_teams():
    model = PlackettLuce()
    teams = [[Rating(25.0, 1.0), Rating(25.0, 1.0)], [Rating(25.0, 1.0), Rating(25.0, 1.0)]]
    assert model.predict_draw(teams) == pytest.approx(0.243318, abs=1e-6)


def test_predict_draw_uneven_teams():
    model = PlackettLuce()
    teams = [[Rating(35.0, 1.0), Rating(35.0, 1.0)], [Rating(35.0, 1.0), Rating(35.0, 1.0), Rating(35.0, 1.0)]]
    assert model.predict_draw(teams) == pytest.approx(0.00028074, abs=1e-6)


def test_predict_win_even_teams():
    model = PlackettLuce()
    probs = model.predict_win([[model.rating()], [model.rating()]])
    assert probs.tolist() == pytest.approx([0.5, 0.5])


@pytest.mark.parametrize('model_class', [PlackettLuce, BradleyTerryPart])
def test_predict_win_sums_to_one(model_class):
    model = model_class()
    teams = [
        [Rating(30.0, 4.0), Rating(22.0, 6.0)],
        [Rating(25.0, 8.0)],
        [Rating(18.0, 2.0), Rating(27.0, 3.0), Rating(24.0, 5.0)],
        [Rating(40.0, 7.0)],
    ]
    probs = model.predict_win(teams)
    assert len(probs) == 4
    assert probs.sum() == pytest.approx(1.0, abs=1e-4)
    assert probs[2] == max(probs)


def test_predict_win_favours_stronger_team():
    model = PlackettLuce()
    probs = model.predict_win([[Rating(30.0, 2.0)], [Rating(20.0, 2.0)]])
    assert probs[0] > 0.5 > probs[1]


def test_predictions_need_two_teams():
    model = PlackettLuce()
    with pytest.raises(ValueError):
        model.predict_win([[model.rating()]])
    with pytest.raises(ValueError):
        model.predict_draw([[model.rating()]])
