import pytest

from rpg import items as I
from rpg.player import (
    PlayerError, InventoryError, new_user_data, get_max_health, get_max_stamina, get_skill_points,
    add_xp, add_item, remove_item, has_item, skill_points_left, invest_skill_points, reset_skill_points,
    equip_item, unequip_item, use_consumable, craft_item, sync_after_fight, rewards_compare, snapshot,
)
from rpg.special_items import StandArrow
from tests.conftest import make_user


def test_new_user_starts_full(user):
    assert user["id"] == "1"
    assert user["level"] == 1
    assert user["health"] == get_max_health(user) == 110
    assert user["stamina"] == get_max_stamina(user) == 62
    assert user["chapter"] == {"id": 1, "quests": []}


def test_stand_adds_skill_points():
    data = make_user(stand="star_platinum", strength=2)
    assert get_skill_points(data)["strength"] == 7


def test_add_xp_levels_up_and_heals(user):
    user["health"] = 1
    assert add_xp(user, 1300) == 1300
    assert user["level"] == 2
    assert user["xp"] == 50
    assert user["health"] == get_max_health(user)


def test_xp_boost_from_equipment(user):
    add_item(user, "lucky_charm")
    equip_item(user, I.LuckyCharm)
    assert add_xp(user, 100) == 110


def test_inventory(user):
    add_item(user, "pizza", 2)
    remove_item(user, "pizza")
    assert has_item(user, "pizza")
    remove_item(user, "pizza")
    assert "pizza" not in user["inventory"]
    with pytest.raises(InventoryError):
        remove_item(user, "pizza")


def test_skill_points(user):
    assert skill_points_left(user) == 4
    invest_skill_points(user, "defense", 3)
    assert skill_points_left(user) == 1
    with pytest.raises(PlayerError):
        invest_skill_points(user, "defense", 2)
    with pytest.raises(PlayerError):
        invest_skill_points(user, "charisma", 1)
    reset_skill_points(user)
    assert skill_points_left(user) == 4
    # max health shrank back, health is clamped
    assert user["health"] <= get_max_health(user)


def test_equip_and_unequip(user):
    add_item(user, "leather_jacket")
    equip_item(user, I.LeatherJacket)
    assert "leather_jacket" not in user["inventory"]
    assert user["equipped_items"] == {"leather_jacket": I.LeatherJacket.type}
    assert get_max_health(user) == 100 + 10 + 2 * 5 + 25
    with pytest.raises(InventoryError):
        equip_item(user, I.LeatherJacket)
    unequip_item(user, "leather_jacket")
    assert user["inventory"]["leather_jacket"] == 1
    with pytest.raises(InventoryError):
        unequip_item(user, "leather_jacket")


def test_equip_slot_limit_and_requirements(user):
    add_item(user, "car_keys")
    add_item(user, "gasoline_revolver")
    add_item(user, "katana")
    equip_item(user, I.CarKeys)
    with pytest.raises(InventoryError, match="slot is full"):
        equip_item(user, I.GasolineRevolver)
    unequip_item(user, "car_keys")
    with pytest.raises(InventoryError, match="level 10"):
        equip_item(user, I.Katana)
    assert has_item(user, "katana")


def test_use_consumable(user):
    add_item(user, "pizza", 2)
    user["health"] = 100
    out = use_consumable(user, I.Pizza)
    assert out["health"] == 10
    assert user["health"] == 110
    with pytest.raises(InventoryError):
        use_consumable(user, I.Pizza, 5)


def test_percent_consumable_and_item_effect(user):
    add_item(user, "energy_drink")
    add_item(user, "pizza_box", 2)
    user["stamina"] = 0
    use_consumable(user, I.EnergyDrink)
    assert user["stamina"] == get_max_stamina(user)
    out = use_consumable(user, I.PizzaBox, 2)
    assert out["items"] == {"pizza": 6}
    assert user["inventory"]["pizza"] == 6


def test_craft(user):
    add_item(user, "broken_arrow", 4)
    craft_item(user, StandArrow)
    assert user["inventory"] == {"broken_arrow": 1, "stand_arrow": 1}
    with pytest.raises(InventoryError, match="Missing"):
        craft_item(user, StandArrow)
    with pytest.raises(InventoryError):
        craft_item(user, I.Pizza)


def test_sync_after_fight_clamps(user):
    class F:
        health = 10 ** 6
        stamina = -5

    sync_after_fight(user, F)
    assert user["health"] == get_max_health(user)
    assert user["stamina"] == 0


def test_rewards_compare(user):
    old = snapshot(user)
    user["coins"] += 500
    add_item(user, "pizza", 2)
    user["stand"] = "star_platinum"
    lines = rewards_compare(old, user)
    assert lines[0] == "🪙 +500 coins"
    assert any("Pizza" in line for line in lines)
    assert any("Star Platinum" in line for line in lines)
