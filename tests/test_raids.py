import random

import pytest

from rpg.fight import FightError
from rpg.raids import (
    RAIDS, find_raid, raid_level, build_raid_fight, raid_on_cooldown, mark_raid_cooldown, raid_rewards,
)
from tests.conftest import NOON, make_user


def test_find_raid():
    assert find_raid("dio") is RAIDS["dio"]
    assert find_raid("Bandit Lead") is RAIDS["bandit_leader"]
    assert find_raid("zzzzzzzz") is None


def test_raid_level_is_clamped():
    bandits = RAIDS["bandit_leader"]
    assert raid_level(bandits, [make_user(1, level=10), make_user(2, level=20)]) == 15
    assert raid_level(bandits, [make_user(1, level=90)]) == 25
    assert raid_level(RAIDS["requiem_polnareff"], [make_user(1, level=3)]) == 50


def test_minions_scale_with_participants():
    raid = RAIDS["bandit_leader"]
    fight = build_raid_fight(raid, [make_user(i, level=5) for i in (1, 2, 3)], random.Random(0))
    assert fight.type == "raid"
    assert [f.id for f in fight.teams[0]] == ["1", "2", "3"]
    assert [f.id for f in fight.teams[1]] == ["bandit_leader", "bandit", "bandit_2"]
    assert {f.level for f in fight.teams[1]} == {5}


def test_build_errors():
    raid = RAIDS["kakyoin"]
    with pytest.raises(FightError):
        build_raid_fight(raid, [])
    with pytest.raises(FightError):
        build_raid_fight(raid, [make_user(i) for i in range(raid.max_players + 1)])


def test_cooldown():
    raid = RAIDS["dio"]
    data = make_user()
    assert raid_on_cooldown(data, raid, NOON) == 0
    mark_raid_cooldown(data, raid, NOON)
    assert raid_on_cooldown(data, raid, NOON + 60) == raid.cooldown - 60
    assert raid_on_cooldown(data, raid, NOON + raid.cooldown) == 0


def test_rewards_only_for_winners():
    raid = RAIDS["bandit_leader"]
    fight = build_raid_fight(raid, [make_user(1, level=5)], random.Random(0))
    assert raid_rewards(raid, fight, "1") is None
    for boss in fight.teams[1]:
        boss.health = 0
    fight.defend()
    assert fight.ended and fight.winners == 0
    assert raid_rewards(raid, fight, "1") is raid.base_rewards


def test_abandoned_raid_ends_for_everyone():
    raid = RAIDS["dio"]
    fight = build_raid_fight(raid, [make_user(1, level=5), make_user(2, level=5)], random.Random(0))
    assert [f.id for f in fight.abandon()] == ["1", "2"]
    assert fight.ended and fight.winners == 1
    assert raid_rewards(raid, fight, "1") is None
    assert raid_rewards(raid, fight, "2") is None


def test_dio_raid_rolls_four_arrows():
    items = RAIDS["dio"].base_rewards.items
    assert [i.item for i in items].count("stand_arrow") == 4
    assert all(i.chance == 300 for i in items if i.item == "stand_arrow")
