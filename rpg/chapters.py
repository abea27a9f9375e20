"""Story content (chapters, side quests, emails) and the operations on them."""
import random
import time

from rpg import npcs
from rpg.quests import (
    QuestError, base_quest, fight_quest, claim_x_quest, claim_item_quest, use_command_quest,
    action_quest, instantiate, all_completed, on_email_read, grant_claimed,
)
from rpg.rewards import roll_item_rewards
from rpg.types import Chapter, SideQuest, Email, Rewards, ItemReward

# ---------------------------------------------------------------------------
# emails
# ---------------------------------------------------------------------------

WelcomeEmail = Email(
    id="speedwagon_welcome",
    author=npcs.SpeedwagonFoundation,
    subject="Welcome, stand user",
    content="We have been watching the strange events around you. Take this, you will need it. "
            "Rest at our office whenever you are hurt.",
    rewards=Rewards(coins=2000, items=[ItemReward(item="pizza", amount=3)]),
    chapter_quests=[action_quest("visit_speedwagon")],
)

JolyneWarning = Email(
    id="jolyne_warning",
    author=npcs.Jolyne,
    subject="Bandits",
    content="Some bandits have been asking about you. Watch your back.",
    emoji="🦋",
    chapter_quests=[fight_quest("bandit")],
)

ChapterOneReport = Email(
    id="speedwagon_chapter_1",
    author=npcs.SpeedwagonFoundation,
    subject="Good work",
    content="You handled yourself well. Here is a little something for your next steps.",
    rewards=Rewards(items=[ItemReward(item="box")]),
)

ChapterTwoReport = Email(
    id="speedwagon_chapter_2",
    author=npcs.SpeedwagonFoundation,
    subject="A dangerous man",
    content="A man called DIO is gathering stand users. Train hard.",
    footer="Speedwagon Foundation",
    rewards=Rewards(coins=10000, items=[ItemReward(item="stand_arrow")]),
)

PucciLetter = Email(
    id="pucci_letter",
    author=npcs.Pucci,
    subject="Heaven",
    content="Count the prime numbers. 2, 3, 5, 7, 11, 13...",
    emoji="✝️",
    rewards=Rewards(xp=10000),
)

EMAILS = {e.id: e for e in (WelcomeEmail, JolyneWarning, ChapterOneReport, ChapterTwoReport, PucciLetter)}


def send_email(data: dict, email_id: str, now: float | None = None) -> bool:
    """Deliver an email once. Returns False if the user already has it."""
    if email_id not in EMAILS:
        raise QuestError(f"Unknown email `{email_id}`.")
    if any(e["id"] == email_id for e in data["emails"]):
        return False
    data["emails"].append({
        "id": email_id,
        "read": False,
        "archived": False,
        "date": time.time() if now is None else now,
    })
    return True


def _user_email(data: dict, email_id: str) -> dict:
    for e in data["emails"]:
        if e["id"] == email_id:
            return e
    raise QuestError("You don't have this email.")


def read_email(data: dict, email_id: str, rng: random.Random | None = None) -> dict:
    """Mark read. The first read grants the rewards and chapter quests. Returns what was granted."""
    entry = _user_email(data, email_id)
    email = EMAILS[email_id]
    granted = {"coins": 0, "xp": 0, "items": {}}
    if entry["read"]:
        return granted
    entry["read"] = True
    if email.rewards:
        items = roll_item_rewards(email.rewards.items, rng)
        granted["xp"] = grant_claimed(data, coins=email.rewards.coins, xp=email.rewards.xp, items=items)
        granted["coins"] = email.rewards.coins
        granted["items"] = items
    for q in email.chapter_quests:
        data["chapter"]["quests"].append(instantiate(q))
    on_email_read(data, email_id)
    return granted


def archive_email(data: dict, email_id: str):
    entry = _user_email(data, email_id)
    entry["archived"] = True


def inbox(data: dict, archived: bool = False) -> list[tuple[dict, Email]]:
    """Newest first."""
    rows = [(e, EMAILS[e["id"]]) for e in data["emails"] if e["id"] in EMAILS and e["archived"] == archived]
    return sorted(rows, key=lambda r: r[0]["date"], reverse=True)


# ---------------------------------------------------------------------------
# chapters
# ---------------------------------------------------------------------------

CHAPTERS = {
    1: Chapter(
        id=1,
        title="A Bizarre Beginning",
        description="Strange people start following you around town...",
        quests=[
            fight_quest("security_guard",
                        push_email_when_completed={"email": "speedwagon_welcome", "must_read": True}),
            claim_x_quest("daily", 1),
            base_quest("invest_skill_points"),
        ],
        dialogs=["???: Hey you! What are you doing here?"],
        rewards_when_complete=Rewards(coins=5000, xp=2000, items=[ItemReward(item="stand_arrow")]),
        reward_email="speedwagon_chapter_1",
        hints=["Use `/fight npc` to fight the security guard.", "Use `/daily claim` every day."],
    ),
    2: Chapter(
        id=2,
        title="Awakening",
        description="The arrow pierced you. Something is standing behind you.",
        quests=[
            base_quest("get_a_stand"),
            fight_quest("harry_lester",
                        push_email_when_completed={"email": "jolyne_warning", "timeout": 60 * 60}),
            claim_item_quest("pizza", 3),
            base_quest("reach_level_5"),
        ],
        rewards_when_complete=Rewards(coins=10000, xp=8000),
        reward_email="speedwagon_chapter_2",
        hints=["Use your Stand Arrow with `/inventory use`.", "Pizzas can be bought in `/shop`."],
    ),
    3: Chapter(
        id=3,
        title="Crusaders",
        description="Two stand users want to test you.",
        quests=[
            fight_quest("polnareff"),
            fight_quest("kakyoin"),
            use_command_quest("raid", 1),
            base_quest("reach_level_10"),
        ],
        rewards_when_complete=Rewards(coins=25000, xp=20000, items=[ItemReward(item="rare_stand_arrow")]),
        hints=["Kakyoin dodges a lot. Invest in speed."],
    ),
}


def get_chapter(chapter_id: int) -> Chapter | None:
    return CHAPTERS.get(chapter_id)


def load_chapter(data: dict, chapter_id: int):
    chapter = CHAPTERS[chapter_id]
    data["chapter"] = {"id": chapter_id, "quests": [instantiate(q) for q in chapter.quests]}


def chapter_completed(data: dict, now: float | None = None) -> bool:
    return all_completed(data["chapter"]["quests"], data, now)


def advance_chapter(data: dict, rng: random.Random | None = None, now: float | None = None) -> dict:
    """Grant the chapter rewards and move on. Raises QuestError when not done or nothing comes next."""
    chapter = get_chapter(data["chapter"]["id"])
    if chapter is None:
        raise QuestError("To be continued...")
    if not chapter_completed(data, now):
        raise QuestError("You haven't completed every quest of this chapter yet.")
    nxt = get_chapter(chapter.id + 1)
    if nxt is None:
        raise QuestError("To be continued... You finished every chapter for now.")
    granted = {"coins": 0, "xp": 0, "items": {}}
    if chapter.rewards_when_complete:
        r = chapter.rewards_when_complete
        items = roll_item_rewards(r.items, rng)
        granted = {"coins": r.coins, "xp": grant_claimed(data, coins=r.coins, xp=r.xp, items=items), "items": items}
    if chapter.reward_email:
        send_email(data, chapter.reward_email, now)
    load_chapter(data, nxt.id)
    return granted


# ---------------------------------------------------------------------------
# side quests
# ---------------------------------------------------------------------------

SIDE_QUESTS = {
    sq.id: sq for sq in (
        SideQuest(
            id="bandit_hunt",
            title="Bandit Hunt",
            emoji="🥷",
            description="Bandits are everywhere. Teach them a lesson.",
            quests=[fight_quest("bandit"), fight_quest("bandit"), fight_quest("bandit"),
                    claim_x_quest("coin", 5000)],
            rewards=Rewards(coins=5000, xp=3000, items=[ItemReward(item="broken_arrow", chance=50)]),
            can_redo=True,
        ),
        SideQuest(
            id="kakyoin_challenge",
            title="Cherry Challenge",
            emoji="🍒",
            description="Kakyoin wants a rematch and asked for some arrow fragments.",
            quests=[fight_quest("kakyoin"), claim_item_quest("broken_arrow", 3)],
            rewards=Rewards(coins=15000, xp=10000, items=[ItemReward(item="kakyoins_snazzy_shades", chance=50)]),
            requirements=lambda data: data["level"] >= 5,
            requirements_message="You need to be level 5.",
        ),
        SideQuest(
            id="requiem_trial",
            title="Requiem Trial",
            emoji="🌑",
            description="Polnareff's Requiem roams the Colosseum. Defeat it.",
            quests=[fight_quest("requiem_polnareff"), base_quest("reach_level_25")],
            rewards=Rewards(coins=50000, xp=100000, items=[ItemReward(item="requiem_arrow", chance=25)]),
            requirements=lambda data: data.get("stand") in ("gold_experience", "silver_chariot"),
            requirements_message="Only Gold Experience and Silver Chariot users can take this trial.",
        ),
    )
}


def _user_side_quest(data: dict, sq_id: str) -> dict | None:
    for sq in data["side_quests"]:
        if sq["id"] == sq_id:
            return sq
    return None


def start_side_quest(data: dict, sq_id: str):
    sq = SIDE_QUESTS.get(sq_id)
    if sq is None:
        raise QuestError(f"Unknown side quest `{sq_id}`.")
    if not sq.requirements(data):
        raise QuestError(sq.requirements_message or "You don't meet the requirements.")
    entry = _user_side_quest(data, sq_id)
    if entry is not None:
        if not entry["claimed_prize"]:
            raise QuestError("You already started this side quest.")
        if not sq.can_redo:
            raise QuestError("You can't redo this side quest.")
        data["side_quests"].remove(entry)
    data["side_quests"].append({
        "id": sq_id,
        "quests": [instantiate(q) for q in sq.quests],
        "claimed_prize": False,
    })


def claim_side_quest(data: dict, sq_id: str, rng: random.Random | None = None, now: float | None = None) -> dict:
    sq = SIDE_QUESTS.get(sq_id)
    entry = _user_side_quest(data, sq_id)
    if sq is None or entry is None:
        raise QuestError("You haven't started this side quest.")
    if entry["claimed_prize"]:
        raise QuestError("You already claimed this side quest's prize.")
    if not all_completed(entry["quests"], data, now):
        raise QuestError("You haven't completed every quest of this side quest yet.")
    entry["claimed_prize"] = True
    entry["quests"] = []
    items = roll_item_rewards(sq.rewards.items, rng)
    xp = grant_claimed(data, coins=sq.rewards.coins, xp=sq.rewards.xp, items=items)
    return {"coins": sq.rewards.coins, "xp": xp, "items": items}
