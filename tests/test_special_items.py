import random

import pytest

from rpg.player import InventoryError, add_item, get_stand
from rpg.special_items import (
    SPECIAL_ITEMS, DISCS, disc_id, use_special, StandArrow, RareStandArrow, RequiemArrow, Box, MoneyBox,
    PatronBox, BoosterBox, ChristmasGift, SpookyArrow, SkillPointsResetPotion,
)
from rpg.stands import STANDS
from utils.functions import fmt_num, get_max_xp
from tests.conftest import FixedRng, make_user


def test_arrow_grants_a_stand(user):
    add_item(user, "stand_arrow", 2)
    result = use_special(StandArrow, user, rng=random.Random(1))
    assert result.consumed == 1
    assert user["stand"]
    assert user["inventory"]["stand_arrow"] == 1


def test_arrow_refuses_when_user_has_a_stand(user):
    user["stand"] = "star_platinum"
    add_item(user, "stand_arrow")
    result = use_special(StandArrow, user, rng=random.Random(1))
    assert result.consumed == 0
    assert user["stand"] == "star_platinum"
    assert user["inventory"]["stand_arrow"] == 1


def test_rare_arrow_never_rolls_c(user):
    rng = random.Random(5)
    for _ in range(60):
        user["stand"] = None
        add_item(user, "rare_stand_arrow")
        use_special(RareStandArrow, user, rng=rng)
        assert get_stand(user).rarity != "C"


def test_using_what_you_dont_own(user):
    with pytest.raises(InventoryError):
        use_special(Box, user)
    add_item(user, "box")
    with pytest.raises(InventoryError):
        use_special(Box, user, amount=2)
    with pytest.raises(InventoryError):
        use_special(Box, user, amount=0)


def test_box_gives_coins_and_xp_even_without_loot(user):
    add_item(user, "box")
    result = use_special(Box, user, rng=FixedRng(0.99))
    assert 1000 <= user["coins"] <= 5000
    assert user["xp"] > 0
    assert user["inventory"] == {}
    assert len(result.lines) == 2


def test_box_rolls_each_pool_entry_once(user):
    add_item(user, "box")
    use_special(Box, user, rng=FixedRng(0.0))
    inv = user["inventory"]
    # common consumables, C items and C stand discs
    assert inv["pizza"] == 1
    assert inv["rock"] == 1
    assert inv[disc_id("hermit_purple")] == 1
    # B stand discs, A/B items and the arrow
    assert inv[disc_id("sex_pistols")] == 1
    assert inv["diamond"] == 1
    assert inv["stand_arrow"] == 1
    assert "candy_cane" not in inv
    assert disc_id("star_platinum") not in inv
    assert disc_id("king_crimson") not in inv


def test_money_boxes_stack(user):
    add_item(user, "money_box", 3)
    use_special(MoneyBox, user, amount=3, rng=random.Random(0))
    assert 60000 <= user["coins"] <= 150000
    assert user["xp"] > 0 or user["level"] > 1
    assert "money_box" not in user["inventory"]


def test_spooky_arrow(user):
    add_item(user, "spooky_arrow_2023")
    use_special(SpookyArrow, user)
    assert user["stand"] == "skeletal_spectre"


def test_requiem_arrow():
    data = make_user(stand="gold_experience", level=49)
    add_item(data, "requiem_arrow")
    assert use_special(RequiemArrow, data).consumed == 0
    data["level"] = 50
    result = use_special(RequiemArrow, data)
    assert result.consumed == 1
    assert data["stands_evolved"] == {"gold_experience": 1}
    assert get_stand(data).name == "Gold Experience Requiem"


def test_requiem_arrow_needs_the_right_stand():
    data = make_user(stand="star_platinum", level=80)
    add_item(data, "requiem_arrow")
    assert use_special(RequiemArrow, data).consumed == 0
    assert data["inventory"]["requiem_arrow"] == 1


def test_discs():
    assert disc_id("star_platinum") == "star_platinum.$disc$"
    assert set(STANDS) | {"silver_chariot", "gold_experience"} <= {i.split(".")[0] for i in DISCS}
    assert not DISCS[disc_id("king_crimson")].tradable
    data = make_user()
    add_item(data, disc_id("the_world"))
    use_special(SPECIAL_ITEMS[disc_id("the_world")], data)
    assert data["stand"] == "the_world"
    assert not data["inventory"]


def test_skill_points_reset_potion():
    data = make_user(strength=4)
    add_item(data, "skill_points_reset_potion")
    use_special(SkillPointsResetPotion, data)
    assert data["skill_points"]["strength"] == 0


def test_patron_box_xp_covers_several_levels():
    data = make_user(level=3)
    add_item(data, "patron_box")
    result = use_special(PatronBox, data, rng=random.Random(0))
    xp = 2 * get_max_xp(3) + get_max_xp(4) + get_max_xp(5) + get_max_xp(6)
    assert f"⭐ +{fmt_num(xp)} XP" in result.lines
    assert data["level"] == 7
    assert data["coins"] == 100000
    assert data["inventory"]["rare_stand_arrow"] == 30
    disc = next(i for i in data["inventory"] if i.endswith(".$disc$"))
    assert STANDS[disc.split(".")[0]].rarity == "S"


def test_booster_box():
    data = make_user(level=3)
    add_item(data, "booster_box")
    result = use_special(BoosterBox, data, rng=random.Random(0))
    xp = get_max_xp(3) + get_max_xp(4)
    assert f"⭐ +{fmt_num(xp)} XP" in result.lines
    assert data["inventory"]["stand_arrow"] == 30
    assert (BoosterBox.rarity, BoosterBox.price) == ("A", 5000)


def test_christmas_gift():
    data = make_user()
    add_item(data, "christmas_gift", 2)
    use_special(ChristmasGift, data, amount=2, rng=FixedRng(0.0))
    inv = data["inventory"]
    assert inv["rare_stand_arrow"] == 2
    assert inv["candy_cane"] == 10
    discs = {i: n for i, n in inv.items() if i.endswith(".$disc$")}
    assert sum(discs.values()) == 6
    assert all(STANDS[i.split(".")[0]].rarity in ("C", "B", "A") for i in discs)
    assert ChristmasGift.tradable

    data = make_user()
    add_item(data, "christmas_gift")
    use_special(ChristmasGift, data, rng=FixedRng(0.99))
    # only the guaranteed disc drops
    assert sum(n for i, n in data["inventory"].items() if i.endswith(".$disc$")) == 1


def test_arrow_prices():
    assert (StandArrow.rarity, StandArrow.price) == ("A", 35000)
    assert (RareStandArrow.rarity, RareStandArrow.price) == ("A", 35000)
