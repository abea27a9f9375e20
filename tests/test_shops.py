import pytest

from rpg.quests import claim_item_quest
from rpg.shops import SHOPS, ShopError, buy_item, sell_item, sell_price, shop_items
from rpg.catalog import find_item


def test_shop_prices_with_override():
    prices = {item.id: price for item, price in shop_items(SHOPS["speedwagon_store"])}
    assert prices["broken_arrow"] == 7500
    assert prices["stand_arrow"] == find_item("stand_arrow").price


def test_buy(user):
    user["coins"] = 1000
    user["chapter"]["quests"].append(claim_item_quest("pizza", 3))
    assert buy_item(user, SHOPS["trattoria"], "pizza", 3) == 900
    assert user["coins"] == 100
    assert user["inventory"]["pizza"] == 3
    assert user["chapter"]["quests"][0]["amount"] == 3


def test_buy_by_name(user):
    user["coins"] = 1000
    buy_item(user, SHOPS["trattoria"], "Coffee")
    assert user["inventory"] == {"coffee": 1}


def test_buy_errors(user):
    user["coins"] = 100
    with pytest.raises(ShopError, match="need"):
        buy_item(user, SHOPS["trattoria"], "pizza")
    with pytest.raises(ShopError, match="doesn't sell"):
        buy_item(user, SHOPS["trattoria"], "katana")
    with pytest.raises(ShopError):
        buy_item(user, SHOPS["trattoria"], "pizza", 0)
    assert user["coins"] == 100


def test_sell(user):
    user["inventory"] = {"pizza": 2, "candy_cane": 1}
    assert sell_price(find_item("pizza")) == 150
    assert sell_item(user, "pizza", 2) == 300
    assert user["coins"] == 300
    assert "pizza" not in user["inventory"]
    with pytest.raises(ShopError, match="can't be sold"):
        sell_item(user, "candy_cane")
    with pytest.raises(ShopError):
        sell_item(user, "pizza")
    with pytest.raises(ShopError, match="Unknown"):
        sell_item(user, "xyzzyq")
