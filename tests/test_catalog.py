from rpg.catalog import all_items, find_ability, find_fightable_npc, find_item, find_npc, find_stand
from rpg.npcs import FIGHTABLE_NPCS
from rpg.types import FACE


def test_find_item_by_id_and_partial_name():
    assert find_item("pizza").name == "Pizza"
    assert find_item("Pizza B").id == "pizza_box"
    assert find_item("Pizz") is None  # Pizza and Pizza Box
    assert find_item("") is None


def test_find_stand_tiers():
    assert find_stand("silver_chariot").name == "Silver Chariot"
    assert find_stand("silver_chariot", 1).name == "Silver Chariot Requiem"
    # out-of-range tiers clamp to the last evolution
    assert find_stand("silver_chariot", 9).name == "Silver Chariot Requiem"
    assert find_stand("nope") is None


def test_find_npcs():
    assert find_npc("speedwagon_foundation").name == "Speedwagon Foundation"
    assert find_npc("jotaro").name == "Jotaro Kujo"
    assert find_fightable_npc("bandit").id == "bandit"
    assert find_fightable_npc("speedwagon_foundation") is None


def test_find_ability():
    assert find_ability("Road Roller").name == "Road Roller"
    assert find_ability("road roller") is None


def test_all_items_is_a_copy():
    items = all_items()
    items.pop("pizza")
    assert find_item("pizza") is not None


def test_npc_equipment_sits_in_its_own_slot():
    for npc in FIGHTABLE_NPCS.values():
        for item_id, slot in npc.equipped_items.items():
            assert find_item(item_id).type == slot, npc.id
    assert FIGHTABLE_NPCS["kakyoin"].equipped_items == {"kakyoins_snazzy_shades": FACE}
