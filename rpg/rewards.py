import random

from rpg.player import add_coins, add_item, add_xp
from rpg.types import ItemReward, Rewards
from utils.functions import fmt_num, percent


def roll_item_rewards(items: list[ItemReward], rng: random.Random | None = None) -> dict[str, int]:
    """
    Resolve drop chances into {item_id: amount}.
    chance >= 100 gives chance // 100 guaranteed drops plus a roll on the remainder.
    """
    rng = rng or random.Random()
    out: dict[str, int] = {}
    for reward in items:
        drops = int(reward.chance // 100)
        remainder = reward.chance - drops * 100
        if remainder > 0 and percent(remainder, rng):
            drops += 1
        if drops:
            out[reward.item] = out.get(reward.item, 0) + drops * reward.amount
    return out


def apply_rewards(data: dict, rewards: Rewards | None, rng: random.Random | None = None) -> dict:
    """Grant coins, XP and rolled items. Returns what was actually granted."""
    granted = {"coins": 0, "xp": 0, "items": {}}
    if rewards is None:
        return granted
    if rewards.coins:
        add_coins(data, rewards.coins)
        granted["coins"] = rewards.coins
    if rewards.xp:
        granted["xp"] = add_xp(data, rewards.xp)
    granted["items"] = roll_item_rewards(rewards.items, rng)
    for item_id, n in granted["items"].items():
        add_item(data, item_id, n)
    return granted


def format_granted(granted: dict) -> list[str]:
    from rpg.catalog import find_item

    lines = []
    if granted.get("coins"):
        lines.append(f"🪙 +{fmt_num(granted['coins'])} coins")
    if granted.get("xp"):
        lines.append(f"⭐ +{fmt_num(granted['xp'])} XP")
    for item_id, n in (granted.get("items") or {}).items():
        item = find_item(item_id)
        lines.append(f"{item.emoji} +{n}x {item.name}" if item else f"+{n}x {item_id}")
    return lines
