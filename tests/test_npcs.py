from rpg import npcs
from rpg.fight import Fighter
from rpg.npcs import FIGHTABLE_NPCS, balance_npc, npc_rewards
from utils.settings import SETTINGS


def test_every_npc_has_the_skill_points_of_its_level():
    for npc in FIGHTABLE_NPCS.values():
        assert sum(npc.skill_points.values()) == npc.level * SETTINGS.skill_points_per_level, npc.id


def test_module_names_point_at_the_balanced_npcs():
    assert npcs.Kakyoin is FIGHTABLE_NPCS["kakyoin"]
    assert npcs.Dio is FIGHTABLE_NPCS["dio"]


def test_balancing_keeps_the_build():
    assert npcs.Polnareff.skill_points == {
        "defense": 10, "strength": 10, "speed": 10, "perception": 10, "stamina": 0,
    }
    # kakyoin is level 0, but his build is still all perception
    assert sum(npcs.Kakyoin.skill_points.values()) == 0
    assert balance_npc(npcs.Kakyoin, 10).skill_points == {
        "defense": 0, "strength": 0, "speed": 0, "perception": 40, "stamina": 0,
    }


def test_missing_rewards_come_from_the_level():
    assert npcs.Bandit.rewards.coins == npc_rewards(0).coins == 100
    assert npcs.Bandit.rewards.xp == npc_rewards(0).xp
    assert [r.item for r in npcs.Bandit.rewards.items] == ["pizza"]
    assert npcs.HarryLester.rewards == npc_rewards(1)
    # hand-set rewards stay
    assert npcs.Jotaro.rewards.coins == 25000


def test_fighting_at_another_level_rebalances():
    f = Fighter.from_npc(npcs.Bandit, level=5)
    assert f.level == 5
    assert sum(f.skill_points.values()) == 5 * SETTINGS.skill_points_per_level
