import pytest

from chemlab.domain.rules import MasteryRules, average_score, is_passed, quiz_percentage


@pytest.mark.parametrize("score, total, expected", [
    (3, 4, 75),
    (0, 5, 0),
    (5, 5, 100),
    (1, 8, 13),
    (2, 3, 67),
    (1, 3, 33),
])
def test_quiz_percentage(score, total, expected):
    assert quiz_percentage(score, total) == expected


def test_quiz_percentage_requires_questions():
    with pytest.raises(ValueError):
        quiz_percentage(0, 0)


def test_pass_mark_is_inclusive():
    assert is_passed(60)
    assert not is_passed(59)
    assert is_passed(100)


def test_custom_pass_mark():
    assert not is_passed(75, MasteryRules(pass_mark_percent=80))


def test_average_score():
    assert average_score(0, 0) == 0
    assert average_score(150, 2) == 75
    assert average_score(100, 3) == 33
