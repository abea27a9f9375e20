import random

import pytest

from rpg.player import add_item
from rpg.quests import (
    QuestError, base_quest, fight_quest, claim_x_quest, claim_item_quest, use_command_quest, wait_quest,
    action_quest, quest_progress, quest_label, validate_quests, on_npc_defeated, on_claim, on_command_used,
    run_action, claim_daily, reset_daily_quests_if_needed, grant_claimed,
)
from utils.settings import SETTINGS
from tests.conftest import NOON

DAY = 24 * 3600


def test_base_quest_progress(user):
    q = base_quest("reach_level_5")
    assert quest_progress(q, user) == 20
    user["level"] = 7
    assert quest_progress(q, user) == 100
    assert quest_progress(base_quest("get_a_stand"), user) == 0
    assert quest_progress(base_quest("unknown"), user) == 0


def test_fight_hook_completes_one_quest_per_list(user):
    user["chapter"]["quests"] = [fight_quest("bandit"), fight_quest("bandit")]
    user["daily"]["quests"] = [fight_quest("bandit")]
    assert on_npc_defeated(user, "bandit") == 2
    assert [q["completed"] for q in user["chapter"]["quests"]] == [True, False]
    assert on_npc_defeated(user, "dio") == 0


def test_counters(user):
    user["chapter"]["quests"] = [
        claim_x_quest("coin", 1000), use_command_quest("raid", 2), claim_item_quest("pizza", 2),
    ]
    grant_claimed(user, coins=600, items={"pizza": 1})
    on_claim(user, "coin", 600)
    on_command_used(user, "raid")
    coin, raid, pizza = user["chapter"]["quests"]
    assert quest_progress(coin, user) == 100
    assert quest_progress(raid, user) == 50
    assert quest_progress(pizza, user) == 50
    assert user["coins"] == 600
    assert "(1/2)" in quest_label(raid, user)


def test_labels_mark_completion(user):
    q = fight_quest("bandit", completed=True)
    assert quest_label(q, user).startswith("✅")
    assert "Bandit" in quest_label(q, user)
    assert quest_label(base_quest("get_a_stand"), user).startswith("⬛")


def test_action_quest(user):
    q = action_quest("visit_speedwagon")
    user["chapter"]["quests"] = [q]
    user["health"] = 1
    assert run_action(user, q["id"])
    assert user["health"] > 1
    with pytest.raises(QuestError):
        run_action(user, q["id"])
    with pytest.raises(QuestError):
        run_action(user, "missing")


def test_follow_ups_fire_once(user):
    user["chapter"]["quests"] = [
        fight_quest("bandit", completed=True,
                    push_quest_when_completed=fight_quest("dio"),
                    push_item_when_completed=[{"item": "pizza", "amount": 2, "chance": 100}]),
    ]
    notes = validate_quests(user, NOON, random.Random(0))
    assert user["inventory"] == {"pizza": 2}
    assert [q["npc"] for q in user["chapter"]["quests"]] == ["bandit", "dio"]
    assert notes
    validate_quests(user, NOON, random.Random(0))
    assert user["inventory"] == {"pizza": 2}
    assert len(user["chapter"]["quests"]) == 2


def test_email_follow_up_with_must_read(user):
    user["chapter"]["quests"] = [
        fight_quest("bandit", completed=True,
                    push_email_when_completed={"email": "jolyne_warning", "must_read": True}),
    ]
    notes = validate_quests(user, NOON)
    assert [e["id"] for e in user["emails"]] == ["jolyne_warning"]
    assert user["chapter"]["quests"][-1]["type"] == "mustRead"
    assert any("jolyne_warning" in n for n in notes)


def test_delayed_email_waits(user):
    user["chapter"]["quests"] = [
        fight_quest("bandit", completed=True,
                    push_email_when_completed={"email": "pucci_letter", "timeout": 3600}),
    ]
    validate_quests(user, NOON)
    wait = user["chapter"]["quests"][-1]
    assert wait["type"] == "wait"
    assert not user["emails"]
    assert quest_progress(wait, user, NOON + 10) == 0
    validate_quests(user, NOON + 3600)
    assert [e["id"] for e in user["emails"]] == ["pucci_letter"]
    assert user["emails"][0]["date"] == NOON + 3600


def test_wait_quest_can_push_a_quest(user):
    user["chapter"]["quests"] = [wait_quest(NOON, quest=fight_quest("kakyoin"))]
    validate_quests(user, NOON)
    assert user["chapter"]["quests"][-1]["npc"] == "kakyoin"


def test_daily_claim_once_per_day(user):
    user["chapter"]["quests"] = [claim_x_quest("daily", 1)]
    out = claim_daily(user, NOON)
    assert out["streak"] == 1
    assert out["coins"] == SETTINGS.daily_base_coins + SETTINGS.daily_streak_bonus
    assert user["coins"] == out["coins"]
    assert quest_progress(user["chapter"]["quests"][0], user) == 100
    with pytest.raises(QuestError):
        claim_daily(user, NOON + 3600)


def test_daily_streak(user):
    claim_daily(user, NOON)
    assert claim_daily(user, NOON + DAY)["streak"] == 2
    assert claim_daily(user, NOON + 5 * DAY)["streak"] == 1


def test_daily_quests_reset_once_a_day(user):
    rng = random.Random(4)
    assert reset_daily_quests_if_needed(user, NOON, rng)
    assert len(user["daily"]["quests"]) >= SETTINGS.daily_quests
    assert not reset_daily_quests_if_needed(user, NOON + 60, rng)

    user["daily"]["quests"] = [claim_x_quest("coin", 1, amount=1)]
    assert reset_daily_quests_if_needed(user, NOON + DAY, rng)
    assert user["daily"]["quests_streak"] == 1
    assert reset_daily_quests_if_needed(user, NOON + 2 * DAY, rng)
    assert user["daily"]["quests_streak"] == 0


def test_item_hook_from_loot(user):
    user["chapter"]["quests"] = [claim_item_quest("pizza", 1)]
    add_item(user, "pizza")
    # plain add_item does not count as a claim
    assert quest_progress(user["chapter"]["quests"][0], user) == 0
