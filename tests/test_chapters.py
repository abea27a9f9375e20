import random

import pytest

from rpg.chapters import (
    CHAPTERS, EMAILS, load_chapter, chapter_completed, advance_chapter, send_email, read_email,
    archive_email, inbox, start_side_quest, claim_side_quest,
)
from rpg.player import invest_skill_points
from rpg.quests import QuestError, on_npc_defeated, on_claim, claim_daily, validate_quests, run_action
from tests.conftest import NOON


def test_every_email_author_and_chapter_is_wired():
    for chapter in CHAPTERS.values():
        if chapter.reward_email:
            assert chapter.reward_email in EMAILS


def test_emails(user):
    assert send_email(user, "pucci_letter", NOON)
    assert not send_email(user, "pucci_letter", NOON + 1)
    send_email(user, "jolyne_warning", NOON + 5)
    assert [m.id for _, m in inbox(user)] == ["jolyne_warning", "pucci_letter"]

    granted = read_email(user, "pucci_letter")
    assert granted["xp"] == 10000
    assert user["level"] > 1
    assert read_email(user, "pucci_letter") == {"coins": 0, "xp": 0, "items": {}}

    archive_email(user, "pucci_letter")
    assert [m.id for _, m in inbox(user, archived=True)] == ["pucci_letter"]
    with pytest.raises(QuestError):
        read_email(user, "speedwagon_welcome")
    with pytest.raises(QuestError):
        send_email(user, "spam", NOON)


def test_chapter_one_walkthrough(user):
    rng = random.Random(0)
    load_chapter(user, 1)
    assert not chapter_completed(user, NOON)
    with pytest.raises(QuestError):
        advance_chapter(user, rng, NOON)

    on_npc_defeated(user, "security_guard")
    validate_quests(user, NOON, rng)
    assert [e["id"] for e in user["emails"]] == ["speedwagon_welcome"]

    claim_daily(user, NOON)
    invest_skill_points(user, "strength", 1)
    assert not chapter_completed(user, NOON)

    granted = read_email(user, "speedwagon_welcome", rng)
    assert granted["coins"] == 2000
    assert granted["items"] == {"pizza": 3}
    action = next(q for q in user["chapter"]["quests"] if q["type"] == "action")
    run_action(user, action["id"])
    validate_quests(user, NOON, rng)
    assert chapter_completed(user, NOON)

    coins = user["coins"]
    advance_chapter(user, rng, NOON)
    assert user["chapter"]["id"] == 2
    assert len(user["chapter"]["quests"]) == len(CHAPTERS[2].quests)
    assert user["coins"] == coins + 5000
    assert user["inventory"]["stand_arrow"] == 1
    assert "speedwagon_chapter_1" in [e["id"] for e in user["emails"]]


def test_last_chapter_is_to_be_continued(user):
    load_chapter(user, max(CHAPTERS))
    for q in user["chapter"]["quests"]:
        q["completed"] = True
        q["amount"] = q.get("goal", 0)
    user["level"] = 99
    with pytest.raises(QuestError, match="continued"):
        advance_chapter(user, now=NOON)


def test_side_quest_lifecycle(user):
    with pytest.raises(QuestError, match="level 5"):
        start_side_quest(user, "kakyoin_challenge")
    start_side_quest(user, "bandit_hunt")
    with pytest.raises(QuestError, match="already started"):
        start_side_quest(user, "bandit_hunt")
    with pytest.raises(QuestError, match="haven't completed"):
        claim_side_quest(user, "bandit_hunt")

    for _ in range(3):
        on_npc_defeated(user, "bandit")
    on_claim(user, "coin", 5000)
    granted = claim_side_quest(user, "bandit_hunt", random.Random(0), NOON)
    assert granted["coins"] == 5000
    assert user["coins"] == 5000
    with pytest.raises(QuestError, match="already claimed"):
        claim_side_quest(user, "bandit_hunt")

    # redoable
    start_side_quest(user, "bandit_hunt")
    assert len(user["side_quests"]) == 1
    assert not user["side_quests"][0]["claimed_prize"]


def test_requiem_trial_requires_the_right_stand(user):
    with pytest.raises(QuestError, match="Gold Experience"):
        start_side_quest(user, "requiem_trial")
    user["stand"] = "silver_chariot"
    start_side_quest(user, "requiem_trial")
