"""
Quest records, progress, event hooks and the daily loop.

Quests are plain dicts stored inside the user record. Every quest has an
`id` and a `type`:

  baseQuest         progress computed from the record by BASE_QUESTS[id]
  fight             beat `npc`                             (completed flag)
  claimX            claim `goal` coin/xp/daily             (amount/goal)
  ClaimXQuest       obtain `goal` copies of `item`         (amount/goal)
  UseXCommandQuest  use `command` `goal` times             (amount/goal)
  wait              done once `end` has passed; may deliver an email or quest
  mustRead          read `email`                           (completed flag)
  action            run the action registered under ACTIONS[`action`]

Optional follow-ups fire once, the first time a quest reaches 100%:
  push_quest_when_completed   quest dict appended to the same list
  push_email_when_completed   {"email", "timeout" (seconds), "must_read"}
  push_item_when_completed    [{"item", "amount", "chance"}]
"""
import copy
import datetime
import random
import time

from rpg.player import add_coins, add_item, add_xp, heal_full, skill_points_left
from rpg.rewards import roll_item_rewards
from rpg.types import ItemReward, SKILL_KEYS
from utils.functions import generate_random_id, get_max_xp, percent
from utils.settings import SETTINGS


class QuestError(Exception):
    pass


# ---------------------------------------------------------------------------
# constructors
# ---------------------------------------------------------------------------

def base_quest(base_id: str, **extra) -> dict:
    return {"id": base_id, "type": "baseQuest", **extra}


def fight_quest(npc_id: str, **extra) -> dict:
    return {"id": generate_random_id(), "type": "fight", "npc": npc_id, "completed": False, **extra}


def claim_x_quest(x: str, goal: int, **extra) -> dict:
    return {"id": generate_random_id(), "type": "claimX", "x": x, "amount": 0, "goal": goal, **extra}


def claim_item_quest(item_id: str, goal: int, **extra) -> dict:
    return {"id": generate_random_id(), "type": "ClaimXQuest", "item": item_id, "amount": 0, "goal": goal, **extra}


def use_command_quest(command: str, goal: int, **extra) -> dict:
    return {"id": generate_random_id(), "type": "UseXCommandQuest", "command": command,
            "amount": 0, "goal": goal, **extra}


def wait_quest(end: float, email: str | None = None, quest: dict | None = None,
               must_read: bool = False, **extra) -> dict:
    return {"id": generate_random_id(), "type": "wait", "end": end, "email": email, "quest": quest,
            "claimed": False, "mustRead": must_read, **extra}


def must_read_quest(email_id: str, **extra) -> dict:
    return {"id": generate_random_id(), "type": "mustRead", "email": email_id, "completed": False, **extra}


def action_quest(action_id: str, **extra) -> dict:
    return {"id": generate_random_id(), "type": "action", "action": action_id, "completed": False, **extra}


def instantiate(quest: dict) -> dict:
    """Fresh copy of a template quest with its own id (base quests keep theirs)."""
    q = copy.deepcopy(quest)
    if q["type"] != "baseQuest":
        q["id"] = generate_random_id()
    return q


# ---------------------------------------------------------------------------
# base quests: progress derived from the record itself
# ---------------------------------------------------------------------------

def _reach_level(n: int):
    return lambda data: min(100, data["level"] / n * 100)


def _have_coins(n: int):
    return lambda data: min(100, data["coins"] / n * 100)


BASE_QUESTS = {
    "get_a_stand": lambda data: 100 if data.get("stand") else 0,
    "invest_skill_points": lambda data: 100 if any(data["skill_points"].get(k, 0) for k in SKILL_KEYS) else 0,
    "no_skill_points_left": lambda data: 100 if skill_points_left(data) <= 0 else 0,
    "equip_an_item": lambda data: 100 if data.get("equipped_items") else 0,
    "reach_level_5": _reach_level(5),
    "reach_level_10": _reach_level(10),
    "reach_level_25": _reach_level(25),
    "have_100k_coins": _have_coins(100000),
}


# action quests: action(data) -> bool (True completes the quest)

def _visit_speedwagon(data: dict) -> bool:
    heal_full(data)
    return True


ACTIONS = {
    "visit_speedwagon": _visit_speedwagon,
}


# ---------------------------------------------------------------------------
# progress
# ---------------------------------------------------------------------------

def quest_progress(quest: dict, data: dict, now: float | None = None) -> float:
    """0-100."""
    kind = quest.get("type")
    if kind == "baseQuest":
        fn = BASE_QUESTS.get(quest["id"])
        return max(0, min(100, fn(data))) if fn else 0
    if kind in ("fight", "mustRead", "action"):
        return 100 if quest.get("completed") else 0
    if kind in ("claimX", "ClaimXQuest", "UseXCommandQuest"):
        goal = quest.get("goal") or 1
        return min(100, quest.get("amount", 0) / goal * 100)
    if kind == "wait":
        now = time.time() if now is None else now
        return 100 if now >= quest["end"] else 0
    return 0


_BASE_LABELS = {
    "get_a_stand": "Get a stand",
    "invest_skill_points": "Invest some skill points",
    "no_skill_points_left": "Spend all your skill points",
    "equip_an_item": "Equip an item",
    "reach_level_5": "Reach level 5",
    "reach_level_10": "Reach level 10",
    "reach_level_25": "Reach level 25",
    "have_100k_coins": "Have 100,000 coins",
}


def quest_label(quest: dict, data: dict, now: float | None = None) -> str:
    from rpg.catalog import find_npc, find_item

    kind = quest.get("type")
    if kind == "baseQuest":
        text = _BASE_LABELS.get(quest["id"], quest["id"])
    elif kind == "fight":
        npc = find_npc(quest["npc"])
        text = f"Defeat {npc.emoji} **{npc.name}**" if npc else f"Defeat `{quest['npc']}`"
    elif kind == "claimX":
        what = {"coin": "coins", "xp": "XP", "daily": "daily rewards"}.get(quest["x"], quest["x"])
        text = f"Claim {quest['goal']:,} {what} ({min(quest.get('amount', 0), quest['goal']):,}/{quest['goal']:,})"
    elif kind == "ClaimXQuest":
        item = find_item(quest["item"])
        name = f"{item.emoji} {item.name}" if item else quest["item"]
        text = f"Obtain {quest['goal']}x {name} ({min(quest.get('amount', 0), quest['goal'])}/{quest['goal']})"
    elif kind == "UseXCommandQuest":
        text = f"Use `/{quest['command']}` {quest['goal']} time(s) ({min(quest.get('amount', 0), quest['goal'])}/{quest['goal']})"
    elif kind == "wait":
        now = time.time() if now is None else now
        text = "Wait..." if now < quest["end"] else "Done waiting"
        if now < quest["end"]:
            text += f" <t:{int(quest['end'])}:R>"
    elif kind == "mustRead":
        text = f"Read the email `{quest['email']}` (`/emails read`)"
    elif kind == "action":
        text = f"Do `{quest['action']}` (`/chapter action`)"
    else:
        text = str(kind)
    mark = "✅" if quest_progress(quest, data, now) >= 100 else "⬛"
    return f"{mark} {text}"


def quest_lists(data: dict) -> list[list[dict]]:
    """Every live quest list on the record: chapter, daily, then side quests."""
    lists = [data["chapter"]["quests"], data["daily"]["quests"]]
    lists.extend(sq["quests"] for sq in data.get("side_quests", []))
    return lists


def all_completed(quests: list[dict], data: dict, now: float | None = None) -> bool:
    return all(quest_progress(q, data, now) >= 100 for q in quests)


# ---------------------------------------------------------------------------
# event hooks
# ---------------------------------------------------------------------------

def on_npc_defeated(data: dict, npc_id: str) -> int:
    """Complete the first open fight quest for `npc_id` in each list. Returns how many."""
    hits = 0
    for quests in quest_lists(data):
        for q in quests:
            if q["type"] == "fight" and q["npc"] == npc_id and not q["completed"]:
                q["completed"] = True
                hits += 1
                break
    return hits


def _bump(data: dict, match, amount: int):
    for quests in quest_lists(data):
        for q in quests:
            if match(q):
                q["amount"] = q.get("amount", 0) + amount


def on_claim(data: dict, x: str, amount: int):
    """x: 'coin', 'xp' or 'daily'."""
    _bump(data, lambda q: q["type"] == "claimX" and q["x"] == x, amount)


def on_item_claimed(data: dict, item_id: str, amount: int = 1):
    _bump(data, lambda q: q["type"] == "ClaimXQuest" and q["item"] == item_id, amount)


def on_command_used(data: dict, command: str):
    _bump(data, lambda q: q["type"] == "UseXCommandQuest" and q["command"] == command, 1)


def on_email_read(data: dict, email_id: str):
    for quests in quest_lists(data):
        for q in quests:
            if q["type"] == "mustRead" and q["email"] == email_id:
                q["completed"] = True


def run_action(data: dict, quest_id: str) -> bool:
    for quests in quest_lists(data):
        for q in quests:
            if q["id"] == quest_id and q["type"] == "action":
                if q["completed"]:
                    raise QuestError("This action is already done.")
                fn = ACTIONS.get(q["action"])
                if fn is None:
                    raise QuestError(f"Unknown action `{q['action']}`.")
                q["completed"] = bool(fn(data))
                return q["completed"]
    raise QuestError("No such action quest.")


def grant_claimed(data: dict, coins: int = 0, xp: int = 0, items: dict | None = None) -> int:
    """Give coins/xp/items and feed the claim hooks. Returns the XP actually added."""
    if coins:
        add_coins(data, coins)
        on_claim(data, "coin", coins)
    gained = 0
    if xp:
        gained = add_xp(data, xp)
        on_claim(data, "xp", gained)
    for item_id, n in (items or {}).items():
        add_item(data, item_id, n)
        on_item_claimed(data, item_id, n)
    return gained


def record_granted(data: dict, granted: dict):
    """Feed rewards that were already applied (see rewards.apply_rewards) to the claim hooks."""
    if granted.get("coins"):
        on_claim(data, "coin", granted["coins"])
    if granted.get("xp"):
        on_claim(data, "xp", granted["xp"])
    for item_id, n in (granted.get("items") or {}).items():
        on_item_claimed(data, item_id, n)


# ---------------------------------------------------------------------------
# follow-ups
# ---------------------------------------------------------------------------

def _deliver_email(data: dict, quests: list[dict], email_id: str, must_read: bool, now: float, notes: list[str]):
    from rpg.chapters import send_email

    if send_email(data, email_id, now):
        notes.append(f"📧 New email: `{email_id}`")
    if must_read:
        quests.append(must_read_quest(email_id))


def validate_quests(data: dict, now: float | None = None, rng: random.Random | None = None) -> list[str]:
    """
    Fire the follow-ups of every newly completed quest, exactly once each.
    Follow-ups may complete instantly, so loop until nothing changes.
    Returns human-readable notes.
    """
    now = time.time() if now is None else now
    rng = rng or random.Random()
    notes: list[str] = []
    changed = True
    while changed:
        changed = False
        for quests in quest_lists(data):
            for q in list(quests):
                if q.get("pushed") or quest_progress(q, data, now) < 100:
                    continue
                q["pushed"] = True
                changed = True
                if q["type"] == "wait" and not q.get("claimed"):
                    q["claimed"] = True
                    if q.get("email"):
                        _deliver_email(data, quests, q["email"], q.get("mustRead", False), now, notes)
                    if q.get("quest"):
                        quests.append(instantiate(q["quest"]))
                follow = q.get("push_quest_when_completed")
                if follow:
                    quests.append(instantiate(follow))
                mail = q.get("push_email_when_completed")
                if mail:
                    if mail.get("timeout"):
                        quests.append(wait_quest(now + mail["timeout"], email=mail["email"],
                                                 must_read=mail.get("must_read", False)))
                    else:
                        _deliver_email(data, quests, mail["email"], mail.get("must_read", False), now, notes)
                loot = q.get("push_item_when_completed")
                if loot:
                    rolled = roll_item_rewards([ItemReward(**r) for r in loot], rng)
                    for item_id, n in rolled.items():
                        add_item(data, item_id, n)
                        notes.append(f"🎁 +{n}x `{item_id}`")
    return notes


# ---------------------------------------------------------------------------
# daily
# ---------------------------------------------------------------------------

def _utc_day(ts: float) -> datetime.date:
    return datetime.datetime.fromtimestamp(ts, tz=datetime.timezone.utc).date()


def claim_daily(data: dict, now: float | None = None) -> dict:
    """Once per UTC day. The streak survives gaps shorter than the reset window."""
    now = time.time() if now is None else now
    daily = data["daily"]
    last = daily.get("last_claimed") or 0
    if last and _utc_day(last) == _utc_day(now):
        raise QuestError("You already claimed your daily reward today. Come back tomorrow!")
    if last and now - last > SETTINGS.daily_streak_reset_hours * 3600:
        daily["claim_streak"] = 0
    daily["claim_streak"] = daily.get("claim_streak", 0) + 1
    daily["last_claimed"] = now

    streak = daily["claim_streak"]
    coins = SETTINGS.daily_base_coins + SETTINGS.daily_streak_bonus * min(streak, 30)
    xp = get_max_xp(data["level"]) // 20
    gained = grant_claimed(data, coins=coins, xp=xp)
    on_claim(data, "daily", 1)
    return {"coins": coins, "xp": gained, "streak": streak}


def generate_daily_quests(data: dict, rng: random.Random | None = None) -> list[dict]:
    from rpg.npcs import FIGHTABLE_NPCS

    rng = rng or random.Random()
    npcs = [n for n in FIGHTABLE_NPCS.values() if n.level <= data["level"] + 5] or [FIGHTABLE_NPCS["bandit"]]
    makers = [
        lambda: fight_quest(rng.choice(npcs).id),
        lambda: fight_quest(rng.choice(npcs).id),
        lambda: claim_x_quest("coin", 1000 * max(1, data["level"])),
        lambda: claim_x_quest("xp", max(500, get_max_xp(data["level"]) // 10)),
        lambda: use_command_quest("fight npc", rng.randint(2, 5)),
        lambda: use_command_quest("shop buy", 1),
        lambda: claim_x_quest("daily", 1),
    ]
    quests = [rng.choice(makers)() for _ in range(SETTINGS.daily_quests)]
    if percent(10, rng):
        quests.append(claim_item_quest("pizza", rng.randint(1, 3)))
    return quests


def reset_daily_quests_if_needed(data: dict, now: float | None = None, rng: random.Random | None = None) -> bool:
    """Regenerate the daily quests once per UTC day and keep the completion streak."""
    now = time.time() if now is None else now
    daily = data["daily"]
    last = daily.get("last_daily_quests_reset") or 0
    if last and _utc_day(last) == _utc_day(now):
        return False
    if daily.get("quests") and all_completed(daily["quests"], data, now):
        daily["quests_streak"] = daily.get("quests_streak", 0) + 1
    else:
        daily["quests_streak"] = 0
    daily["quests"] = generate_daily_quests(data, rng)
    daily["last_daily_quests_reset"] = now
    return True
