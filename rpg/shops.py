from rpg import npcs
from rpg.player import add_coins, add_item, remove_item, InventoryError
from rpg.quests import on_item_claimed
from rpg.types import Shop
from utils.settings import SETTINGS


class ShopError(Exception):
    pass


SHOPS = {
    s.id: s for s in (
        Shop(
            id="trattoria", name="Trattoria Trussardi", emoji="🍝", owner=npcs.Tonio,
            items=[("pizza", None), ("spaghetti_bowl", None), ("coffee", None), ("ramen_bowl", None),
                   ("pizza_box", None), ("energy_drink", None)],
        ),
        Shop(
            id="speedwagon_store", name="Speedwagon Foundation Store", emoji="🏛️",
            owner=npcs.SpeedwagonFoundation,
            items=[("bandage", None), ("box", None), ("money_box", None), ("stand_arrow", None),
                   ("skill_points_reset_potion", None), ("broken_arrow", 7500)],
        ),
        Shop(
            id="clothes", name="Morioh Clothes", emoji="👕",
            items=[("leather_jacket", None), ("jeans", None), ("sneakers", None), ("boxing_gloves", None),
                   ("lucky_charm", None), ("gold_ring", None), ("katana", None), ("car_keys", None)],
        ),
    )
}


def _catalog():
    from rpg.catalog import find_item
    return find_item


def shop_items(shop: Shop) -> list[tuple]:
    """[(item, price)] with per-shop price overrides applied."""
    find_item = _catalog()
    out = []
    for item_id, price in shop.items:
        item = find_item(item_id)
        if item is not None:
            out.append((item, item.price if price is None else price))
    return out


def buy_item(data: dict, shop: Shop, item_id: str, amount: int = 1) -> int:
    """Returns the total paid."""
    if amount <= 0:
        raise ShopError("Amount must be positive.")
    for item, price in shop_items(shop):
        if item.id == item_id or item.name.lower() == str(item_id).lower():
            total = price * amount
            if data["coins"] < total:
                raise ShopError(f"You need {total:,} coins but you only have {data['coins']:,}.")
            add_coins(data, -total)
            add_item(data, item.id, amount)
            on_item_claimed(data, item.id, amount)
            print(f"[shop] {data['id']} bought {amount}x {item.id} for {total}")
            return total
    raise ShopError(f"{shop.name} doesn't sell `{item_id}`.")


def sell_price(item) -> int:
    return int(item.price * SETTINGS.sell_ratio)


def sell_item(data: dict, item_id: str, amount: int = 1) -> int:
    """Returns the coins earned."""
    item = _catalog()(item_id)
    if item is None:
        raise ShopError(f"Unknown item `{item_id}`.")
    if not item.tradable or item.price <= 0:
        raise ShopError(f"{item.name} can't be sold.")
    if amount <= 0:
        raise ShopError("Amount must be positive.")
    try:
        remove_item(data, item.id, amount)
    except InventoryError as e:
        raise ShopError(str(e)) from e
    earned = sell_price(item) * amount
    add_coins(data, earned)
    print(f"[shop] {data['id']} sold {amount}x {item.id} for {earned}")
    return earned
