"""
Operations on a user record (the dict stored in players.json).

Most helpers also accept a FightableNPC so the fight engine can compute stats
for players and NPCs the same way.
"""
import copy
import time

from rpg.types import (
    SKILL_KEYS, EQUIP_SLOT_LIMITS, EQUIP_SLOT_NAMES, Consumable, EquipableItem, Weapon, skill_points,
)
from utils.functions import get_max_xp, max_health_for, max_stamina_for, fmt_num
from utils.settings import SETTINGS


class PlayerError(Exception):
    pass


class InventoryError(PlayerError):
    pass


def get_field(data, key, default=None):
    if isinstance(data, dict):
        return data.get(key, default)
    return getattr(data, key, default)


def new_user_data(user_id, tag: str, now: float | None = None) -> dict:
    now = time.time() if now is None else now
    data = {
        "id": str(user_id),
        "tag": tag,
        "level": 1,
        "health": 0,
        "stamina": 0,
        "xp": 0,
        "coins": 0,
        "language": "en-US",
        "stand": None,
        "adventure_started_at": now,
        "chapter": {"id": 1, "quests": []},
        "daily": {
            "claim_streak": 0,
            "last_claimed": 0,
            "quests": [],
            "quests_streak": 0,
            "last_daily_quests_reset": 0,
        },
        "side_quests": [],
        "skill_points": skill_points(),
        "inventory": {},
        "emails": [],
        "stands_evolved": {},
        "learned_items": [],
        "equipped_items": {},
        "raid_cooldowns": {},
    }
    heal_full(data)
    return data


# ---------------------------------------------------------------------------
# derived stats
# ---------------------------------------------------------------------------

def get_stand(data):
    from rpg.catalog import find_stand

    stand_id = get_field(data, "stand")
    if not stand_id:
        return None
    tier = (get_field(data, "stands_evolved") or {}).get(stand_id, 0)
    return find_stand(stand_id, tier)


def get_equipped(data) -> list[EquipableItem]:
    from rpg.catalog import find_item

    out = []
    for item_id in (get_field(data, "equipped_items") or {}):
        item = find_item(item_id)
        if isinstance(item, EquipableItem):
            out.append(item)
    return out


def get_weapon(data) -> Weapon | None:
    for item in get_equipped(data):
        if isinstance(item, Weapon):
            return item
    return None


def get_skill_points(data) -> dict:
    """Invested points + stand bonus + equipment bonus."""
    base = get_field(data, "skill_points") or {}
    sp = {k: base.get(k, 0) for k in SKILL_KEYS}
    stand = get_stand(data)
    if stand:
        for k in SKILL_KEYS:
            sp[k] += stand.skill_points.get(k, 0)
    for item in get_equipped(data):
        for k, v in (item.effects.get("skill_points") or {}).items():
            if k in sp:
                sp[k] += v
    return sp


def _bonus(value, base: int) -> int:
    """Equipment effects are a flat int or a 'N%' string of `base`."""
    if isinstance(value, str) and value.strip().endswith("%"):
        return round(base * float(value.strip()[:-1]) / 100)
    return int(value or 0)


def get_max_health(data) -> int:
    sp = get_skill_points(data)
    base = max_health_for(get_field(data, "level", 1), sp["defense"])
    return base + sum(_bonus(i.effects["health"], base) for i in get_equipped(data) if "health" in i.effects)


def get_max_stamina(data) -> int:
    sp = get_skill_points(data)
    base = max_stamina_for(get_field(data, "level", 1), sp["stamina"])
    return base + sum(_bonus(i.effects["stamina"], base) for i in get_equipped(data) if "stamina" in i.effects)


def get_xp_boost(data) -> float:
    return sum(i.effects.get("xp_boost", 0) for i in get_equipped(data))


def heal_full(data: dict):
    data["health"] = get_max_health(data)
    data["stamina"] = get_max_stamina(data)


def _clamp_vitals(data: dict):
    data["health"] = max(0, min(data["health"], get_max_health(data)))
    data["stamina"] = max(0, min(data["stamina"], get_max_stamina(data)))


# ---------------------------------------------------------------------------
# progression
# ---------------------------------------------------------------------------

def add_xp(data: dict, amount: int) -> int:
    """Add XP (boosted by equipment) and roll over level-ups. Returns the XP added."""
    if amount <= 0:
        return 0
    gained = round(amount * (1 + get_xp_boost(data) / 100))
    data["xp"] += gained
    leveled = False
    while data["xp"] >= get_max_xp(data["level"]):
        data["xp"] -= get_max_xp(data["level"])
        data["level"] += 1
        leveled = True
    if leveled:
        heal_full(data)
    return gained


def add_coins(data: dict, amount: int) -> int:
    data["coins"] = max(0, data["coins"] + int(amount))
    return data["coins"]


def has_item(data: dict, item_id: str, amount: int = 1) -> bool:
    return data["inventory"].get(item_id, 0) >= amount


def add_item(data: dict, item_id: str, amount: int = 1):
    if amount <= 0:
        return
    data["inventory"][item_id] = data["inventory"].get(item_id, 0) + amount


def remove_item(data: dict, item_id: str, amount: int = 1):
    owned = data["inventory"].get(item_id, 0)
    if amount <= 0 or owned < amount:
        raise InventoryError(f"You don't have {amount}x `{item_id}` (you have {owned}).")
    if owned == amount:
        del data["inventory"][item_id]
    else:
        data["inventory"][item_id] = owned - amount


# ---------------------------------------------------------------------------
# skill points
# ---------------------------------------------------------------------------

def skill_points_left(data: dict) -> int:
    total = data["level"] * SETTINGS.skill_points_per_level
    return total - sum(data["skill_points"].get(k, 0) for k in SKILL_KEYS)


def invest_skill_points(data: dict, stat: str, amount: int):
    if stat not in SKILL_KEYS:
        raise PlayerError(f"Unknown skill `{stat}`. Pick one of: {', '.join(SKILL_KEYS)}.")
    if amount <= 0:
        raise PlayerError("Amount must be positive.")
    left = skill_points_left(data)
    if amount > left:
        raise PlayerError(f"You only have {left} skill point(s) left.")
    data["skill_points"][stat] = data["skill_points"].get(stat, 0) + amount
    _clamp_vitals(data)


def reset_skill_points(data: dict):
    data["skill_points"] = skill_points()
    _clamp_vitals(data)


# ---------------------------------------------------------------------------
# equipment
# ---------------------------------------------------------------------------

def _check_requirements(data: dict, item: EquipableItem):
    req = item.requirements or {}
    if data["level"] < req.get("level", 0):
        raise InventoryError(f"{item.name} requires level {req['level']}.")
    sp = get_skill_points(data)
    for k, v in (req.get("skill_points") or {}).items():
        if v and sp.get(k, 0) < v:
            raise InventoryError(f"{item.name} requires {v} {k}.")


def equip_item(data: dict, item: EquipableItem):
    if not isinstance(item, EquipableItem):
        raise InventoryError(f"{item.name} can't be equipped.")
    if item.id in data["equipped_items"]:
        raise InventoryError(f"{item.name} is already equipped.")
    if not has_item(data, item.id):
        raise InventoryError(f"You don't have {item.name}.")
    used = sum(1 for slot in data["equipped_items"].values() if slot == item.type)
    if used >= EQUIP_SLOT_LIMITS.get(item.type, 1):
        raise InventoryError(f"Your {EQUIP_SLOT_NAMES.get(item.type, 'item').lower()} slot is full.")
    _check_requirements(data, item)
    remove_item(data, item.id)
    data["equipped_items"][item.id] = item.type


def unequip_item(data: dict, item_id: str):
    if item_id not in data["equipped_items"]:
        raise InventoryError(f"`{item_id}` isn't equipped.")
    del data["equipped_items"][item_id]
    add_item(data, item_id)
    _clamp_vitals(data)


# ---------------------------------------------------------------------------
# consumables & crafting
# ---------------------------------------------------------------------------

def use_consumable(data: dict, item: Consumable, amount: int = 1) -> dict:
    """Apply `amount` uses of a consumable. Returns what was actually restored/granted."""
    if not isinstance(item, Consumable):
        raise InventoryError(f"{item.name} isn't a consumable.")
    remove_item(data, item.id, amount)
    out = {"health": 0, "stamina": 0, "items": {}}
    for key, get_max in (("health", get_max_health), ("stamina", get_max_stamina)):
        if key not in item.effects:
            continue
        mx = get_max(data)
        old = data[key]
        data[key] = min(mx, old + _bonus(item.effects[key], mx) * amount)
        out[key] = data[key] - old
    for item_id, n in (item.effects.get("items") or {}).items():
        add_item(data, item_id, n * amount)
        out["items"][item_id] = n * amount
    return out


def craft_item(data: dict, item, amount: int = 1):
    if not item.craft:
        raise InventoryError(f"{item.name} can't be crafted.")
    if amount <= 0:
        raise InventoryError("Amount must be positive.")
    missing = [
        f"{n * amount - data['inventory'].get(i, 0)}x `{i}`"
        for i, n in item.craft.items() if not has_item(data, i, n * amount)
    ]
    if missing:
        raise InventoryError("Missing ingredients: " + ", ".join(missing))
    for i, n in item.craft.items():
        remove_item(data, i, n * amount)
    add_item(data, item.id, amount)


def sync_after_fight(data: dict, fighter):
    """Copy the fighter's remaining health/stamina back onto the record."""
    data["health"] = max(0, min(int(fighter.health), get_max_health(data)))
    data["stamina"] = max(0, min(int(fighter.stamina), get_max_stamina(data)))


def rewards_compare(old: dict, new: dict) -> list[str]:
    from rpg.catalog import find_item

    lines = []
    if new["coins"] != old["coins"]:
        lines.append(f"🪙 {'+' if new['coins'] > old['coins'] else '-'}{fmt_num(abs(new['coins'] - old['coins']))} coins")
    if new["level"] > old["level"]:
        lines.append(f"⬆️ Level {old['level']} → **{new['level']}**")
    elif new["xp"] != old["xp"]:
        lines.append(f"⭐ {'+' if new['xp'] > old['xp'] else '-'}{fmt_num(abs(new['xp'] - old['xp']))} XP")
    for item_id in sorted(set(old["inventory"]) | set(new["inventory"])):
        diff = new["inventory"].get(item_id, 0) - old["inventory"].get(item_id, 0)
        if not diff:
            continue
        item = find_item(item_id)
        label = f"{item.emoji} {item.name}" if item else item_id
        lines.append(f"{'+' if diff > 0 else '-'}{abs(diff)}x {label}")
    if new.get("stand") != old.get("stand") and new.get("stand"):
        stand = get_stand(new)
        lines.append(f"{stand.emoji} New stand: **{stand.name}**" if stand else f"New stand: {new['stand']}")
    return lines


def snapshot(data: dict) -> dict:
    return copy.deepcopy(data)
