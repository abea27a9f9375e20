import random

from utils.functions import (
    get_max_xp, fmt_num, life_bar, percent, random_number, random_array, match_name, edit_distance,
    dodge_threshold, get_defense_ratio,
)


class _F:
    def __init__(self, level=1, **sp):
        self.level = level
        self.skill_points = sp


def test_max_xp_grows_with_level():
    assert get_max_xp(1) == 1250
    assert get_max_xp(0) == get_max_xp(1)
    assert get_max_xp(10) > get_max_xp(9)


def test_fmt_num_rounds_half_up():
    assert fmt_num(1234567) == "1,234,567"
    assert fmt_num(2.5) == "3"
    assert fmt_num(0) == "0"


def test_life_bar():
    assert life_bar(5, 10) == "[█████░░░░░]"
    assert life_bar(0, 10) == "[░░░░░░░░░░]"
    assert life_bar(None, 10) == "[??????????]"


def test_percent_and_random_helpers():
    rng = random.Random(1)
    assert percent(100, rng)
    assert not percent(0, rng)
    for _ in range(50):
        assert 3 <= random_number(7, 3, rng) <= 7
    assert random_array([], rng) is None
    assert random_array(["a"], rng) == "a"


def test_match_name():
    names = ["Pizza", "Pizza Box", "Coffee"]
    assert match_name(names, "coffee") == ("Coffee", [])
    assert match_name(names, "piz") == (None, ["Pizza", "Pizza Box"])
    assert match_name(names, "Cofee")[0] == "Coffee"
    assert match_name(names, "") == (None, [])


def test_match_name_tries_word_starts_before_substrings():
    names = ["Bandit", "Bandit Leader", "Stand Arrow", "Rare Stand Arrow"]
    assert match_name(names, "leader") == ("Bandit Leader", [])
    assert match_name(names, "bandit") == ("Bandit", [])
    assert match_name(names, "arrow") == (None, ["Stand Arrow", "Rare Stand Arrow"])
    assert match_name(names, "kakyoin's") == (None, [])


def test_edit_distance():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3
    assert edit_distance("same", "same") == 0


def test_defense_ratio_never_reaches_one():
    assert get_defense_ratio(_F(defense=0)) == 0
    assert 0 < get_defense_ratio(_F(defense=10 ** 6)) < 1


def test_dodge_threshold_is_a_probability():
    t = dodge_threshold(_F(perception=0, speed=0), _F(perception=0, speed=0))
    assert 0 < t < 1
    assert dodge_threshold(_F(perception=100), _F()) > t
