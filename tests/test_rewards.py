from rpg.rewards import apply_rewards, format_granted, roll_item_rewards
from rpg.types import ItemReward, Rewards
from tests.conftest import FixedRng


def test_roll_guaranteed_and_remainder():
    items = [ItemReward(item="pizza", amount=2, chance=250)]
    # 2 guaranteed drops, then the 50% remainder roll
    assert roll_item_rewards(items, FixedRng(0.99)) == {"pizza": 4}
    assert roll_item_rewards(items, FixedRng(0.0)) == {"pizza": 6}


def test_roll_missed_chance_drops_nothing():
    items = [ItemReward(item="pizza", chance=10)]
    assert roll_item_rewards(items, FixedRng(0.5)) == {}
    assert roll_item_rewards(items, FixedRng(0.05)) == {"pizza": 1}


def test_roll_merges_same_item():
    items = [ItemReward(item="pizza"), ItemReward(item="pizza", amount=3)]
    assert roll_item_rewards(items, FixedRng(0.99)) == {"pizza": 4}


def test_apply_rewards(user):
    rewards = Rewards(coins=500, xp=10, items=[ItemReward(item="pizza")])
    granted = apply_rewards(user, rewards, FixedRng(0.99))
    assert granted == {"coins": 500, "xp": 10, "items": {"pizza": 1}}
    assert user["coins"] == 500
    assert user["xp"] == 10
    assert user["inventory"]["pizza"] == 1


def test_apply_no_rewards(user):
    assert apply_rewards(user, None) == {"coins": 0, "xp": 0, "items": {}}


def test_format_granted():
    lines = format_granted({"coins": 1500, "xp": 0, "items": {"pizza": 2, "xyzzyq": 1}})
    assert lines == ["🪙 +1,500 coins", "🍕 +2x Pizza", "+1x xyzzyq"]
