"""Lookup tables over every piece of content."""
from rpg.abilities import ALL_ABILITIES
from rpg.items import ITEMS, CONSUMABLES, EQUIPABLES
from rpg.npcs import NPCS, FIGHTABLE_NPCS
from rpg.special_items import SPECIAL_ITEMS
from rpg.stands import STANDS, EVOLUTION_STANDS
from utils.functions import match_name

_ALL_ITEMS = {**ITEMS, **CONSUMABLES, **EQUIPABLES, **SPECIAL_ITEMS}


def all_items() -> dict:
    return dict(_ALL_ITEMS)


def find_item(query: str):
    """By id, or by (partial) name."""
    if not query:
        return None
    if query in _ALL_ITEMS:
        return _ALL_ITEMS[query]
    by_name = {i.name: i for i in _ALL_ITEMS.values()}
    hit, _ = match_name(list(by_name), query)
    return by_name.get(hit) if hit else None


def find_stand(stand_id: str, tier: int = 0):
    if stand_id in STANDS:
        return STANDS[stand_id]
    if stand_id in EVOLUTION_STANDS:
        return EVOLUTION_STANDS[stand_id].tier(tier)
    return None


def find_npc(npc_id: str):
    return NPCS.get(npc_id) or FIGHTABLE_NPCS.get(npc_id)


def find_fightable_npc(query: str):
    if query in FIGHTABLE_NPCS:
        return FIGHTABLE_NPCS[query]
    by_name = {n.name: n for n in FIGHTABLE_NPCS.values()}
    hit, _ = match_name(list(by_name), query or "")
    return by_name.get(hit) if hit else None


def find_ability(name: str):
    return ALL_ABILITIES.get(name)
