"""
Items with custom `use` logic: loot boxes, arrows and stand discs.

A `use(user_data, amount, rng)` call mutates the record and returns an
ItemUse telling the caller how many copies were consumed and what to print.
It never touches the inventory count of the used item itself.
"""
import random

from rpg import items as I
from rpg.player import (
    InventoryError, add_coins, add_item, add_xp, has_item, remove_item, reset_skill_points, get_stand,
)
from rpg.stands import STANDS, EVOLUTION_STANDS, arrow_pool
from rpg.types import Special, ItemUse
from utils.functions import get_max_xp, random_number, random_array, percent, fmt_num


def _coins(data, amount, lines):
    add_coins(data, amount)
    lines.append(f"🪙 +{fmt_num(amount)} coins")


def _xp(data, amount, lines):
    gained = add_xp(data, amount)
    lines.append(f"⭐ +{fmt_num(gained)} XP")


def _items(data, item, amount, lines):
    add_item(data, item.id, amount)
    lines.append(f"{item.emoji} +{amount}x **{item.name}**")


# ---------------------------------------------------------------------------
# boxes
# ---------------------------------------------------------------------------

def _box_stands(*excluded):
    return [s for s in STANDS.values() if s.available and s.rarity not in ("SS", "T") + excluded]


def _box_pools(stands):
    """(mid, rare) loot a box rolls through: common goods and C discs, then B discs and gems."""
    consumables = [
        i for i in I.CONSUMABLES.values()
        if i.tradable and i.storable and i.rarity not in ("SS", "S", "T")
    ]
    plain = [i for i in I.ITEMS.values() if i.tradable and i.storable]
    mid = consumables + [i for i in plain if i.rarity not in ("A", "B", "SS", "T")]
    mid += [DISCS[disc_id(s.id)] for s in stands if s.rarity == "C"]
    rare = [DISCS[disc_id(s.id)] for s in stands if s.rarity == "B"]
    rare += [i for i in plain if i.rarity in ("B", "A")]
    rare.append(StandArrow)
    return mid, rare


def _use_box(data, amount, rng):
    lines = []
    mid, rare = _box_pools(_box_stands())
    max_xp = get_max_xp(data["level"])
    _coins(data, sum(random_number(1000, 5000, rng) for _ in range(amount)), lines)
    _xp(data, sum(random_number(max_xp / 100, max_xp / 50, rng) for _ in range(amount)), lines)
    won = {}
    for _ in range(amount):
        for item in mid:
            if percent(70, rng) and percent(30, rng):
                won[item.id] = won.get(item.id, 0) + 1
        for item in rare:
            if percent(30, rng) and percent(30, rng):
                won[item.id] = won.get(item.id, 0) + 1
    by_id = {i.id: i for i in mid + rare}
    for item_id, count in won.items():
        _items(data, by_id[item_id], count, lines)
    return ItemUse(consumed=amount, lines=lines)


Box = Special(
    id="box", name="Box", emoji="📦", rarity="B", price=5000,
    description="Contains coins, XP and some random loot.", use=_use_box,
)


def _use_money_box(data, amount, rng):
    lines = []
    max_xp = get_max_xp(data["level"])
    _coins(data, sum(random_number(20000, 50000, rng) for _ in range(amount)), lines)
    _xp(data, sum(random_number(max_xp / 100, max_xp / 50, rng) for _ in range(amount)), lines)
    return ItemUse(consumed=amount, lines=lines)


MoneyBox = Special(
    id="money_box", name="Money Box", emoji="💰", rarity="B", price=35000,
    description="Contains 20,000 to 50,000 coins and a bit of XP.", use=_use_money_box,
)


def _s_disc(rng):
    stand = random_array([s for s in STANDS.values() if s.rarity == "S" and s.available], rng)
    return DISCS[disc_id(stand.id)]


def _levels_xp(level, *offsets):
    return sum(get_max_xp(level + o) for o in offsets)


def _use_patron_box(data, amount, rng):
    lines = []
    for _ in range(amount):
        _coins(data, 100000, lines)
        # twice the current level, then the next three
        _xp(data, _levels_xp(data["level"], 0, 0, 1, 2, 3), lines)
        _items(data, _s_disc(rng), 1, lines)
        _items(data, RareStandArrow, 30, lines)
    return ItemUse(consumed=amount, lines=lines, color=0xF96854)


PatronBox = Special(
    id="patron_box", name="Patron Box", emoji="🎁", rarity="S", price=200000, tradable=False,
    description="100k coins, several levels of XP, a random S stand disc and 30 rare stand arrows.",
    use=_use_patron_box,
)


def _use_booster_box(data, amount, rng):
    lines = []
    for _ in range(amount):
        _coins(data, 100000, lines)
        _xp(data, _levels_xp(data["level"], 0, 1), lines)
        _items(data, _s_disc(rng), 1, lines)
        _items(data, StandArrow, 30, lines)
    return ItemUse(consumed=amount, lines=lines)


BoosterBox = Special(
    id="booster_box", name="Booster Box", emoji="🚀", rarity="A", price=5000,
    description="100k coins, two levels of XP, a random S stand disc and 30 stand arrows.",
    use=_use_booster_box,
)


def _use_christmas_gift(data, amount, rng):
    lines = []
    stands = _box_stands("S")
    for _ in range(amount):
        for chance in (100, 85, 25):
            if percent(chance, rng):
                _items(data, DISCS[disc_id(random_array(stands, rng).id)], 1, lines)
        _items(data, RareStandArrow, 1, lines)
        _items(data, I.CandyCane, 5, lines)
    return ItemUse(consumed=amount, lines=lines, color=0xC41E3A)


ChristmasGift = Special(
    id="christmas_gift", name="Christmas Gift", emoji="🎄", rarity="T", price=5000,
    description="A gift that was available during Christmas: stand discs, a rare arrow and candy canes.",
    use=_use_christmas_gift,
)


# ---------------------------------------------------------------------------
# arrows
# ---------------------------------------------------------------------------

def _grant_stand(data, stand, lines):
    data["stand"] = stand.id
    lines.append(f"{stand.emoji} You got **{stand.name}** ({stand.rarity})!")


def _already_has_stand(data):
    stand = get_stand(data)
    name = stand.name if stand else data["stand"]
    return ItemUse(consumed=0, lines=[f"❌ You already have a stand ({name}). Delete it first with `/stand delete`."])


def _roll_stand(rng, table, include_unavailable=()):
    """`table` is [(upper bound in %, rarity)]; the last entry catches everything else."""
    roll = rng.random() * 100
    rarity = table[-1][1]
    for bound, r in table:
        if roll <= bound:
            rarity = r
            break
    pool = arrow_pool(include_unavailable)
    return random_array([s for s in pool if s.rarity == rarity], rng) or random_array(pool, rng)


def _arrow(table, include_unavailable=()):
    def use(data, amount, rng):
        if data.get("stand"):
            return _already_has_stand(data)
        lines = ["🏹 The arrow pierces you..."]
        _grant_stand(data, _roll_stand(rng, table, include_unavailable), lines)
        return ItemUse(consumed=1, lines=lines)
    return use


StandArrow = Special(
    id="stand_arrow", name="Stand Arrow", emoji="🏹", rarity="A", price=35000,
    description="Pierce yourself to awaken a random stand.",
    craft={"broken_arrow": 3},
    use=_arrow([(4, "S"), (20, "A"), (40, "B"), (100, "C")]),
)

RareStandArrow = Special(
    id="rare_stand_arrow", name="Rare Stand Arrow", emoji="🎯", rarity="A", price=35000,
    description="A much better arrow. Never rolls C stands, and might even roll an SS.",
    craft={"stand_arrow": 10},
    use=_arrow([(0.75, "SS"), (16, "S"), (40, "A"), (100, "B")], include_unavailable=("king_crimson",)),
)


def _use_spooky_arrow(data, amount, rng):
    if data.get("stand"):
        return _already_has_stand(data)
    lines = ["🎃 Something spooky happens..."]
    _grant_stand(data, STANDS["skeletal_spectre"], lines)
    return ItemUse(consumed=1, lines=lines, color=0xFF7518)


SpookyArrow = Special(
    id="spooky_arrow_2023", name="Spooky Arrow", emoji="🎃", rarity="T", price=0, tradable=False,
    description="Halloween 2023 arrow. Grants Skeletal Spectre.", use=_use_spooky_arrow,
)

REQUIEM_STANDS = ("gold_experience", "silver_chariot")
REQUIEM_MIN_LEVEL = 50


def _use_requiem_arrow(data, amount, rng):
    stand_id = data.get("stand")
    if stand_id not in REQUIEM_STANDS:
        return ItemUse(consumed=0, lines=["❌ Nothing happens. Only Gold Experience and Silver Chariot can evolve."])
    if data["level"] < REQUIEM_MIN_LEVEL:
        return ItemUse(consumed=0, lines=[f"❌ You need to be level {REQUIEM_MIN_LEVEL} to use this arrow."])
    if data["stands_evolved"].get(stand_id, 0) >= 1:
        return ItemUse(consumed=0, lines=["❌ Your stand already reached its Requiem form."])
    data["stands_evolved"][stand_id] = 1
    stand = get_stand(data)
    return ItemUse(consumed=1, lines=[f"{stand.emoji} Your stand evolved into **{stand.name}**!"], stand=stand, color=stand.color)


RequiemArrow = Special(
    id="requiem_arrow", name="Requiem Arrow", emoji="🌟", rarity="SS", price=500000,
    description="Evolves Gold Experience or Silver Chariot into their Requiem form. Requires level 50.",
    craft={"ancient_scroll": 300, "stand_arrow": 500, "broken_arrow": 1000},
    use=_use_requiem_arrow,
)


def _use_sp_reset(data, amount, rng):
    reset_skill_points(data)
    return ItemUse(consumed=1, lines=["🧪 Your skill points have been reset."])


SkillPointsResetPotion = Special(
    id="skill_points_reset_potion", name="Skill Points Reset Potion", emoji="🧪", rarity="A",
    price=59000, description="Refunds every skill point you invested.", use=_use_sp_reset,
)


# ---------------------------------------------------------------------------
# stand discs
# ---------------------------------------------------------------------------

def disc_id(stand_id: str) -> str:
    return f"{stand_id}.$disc$"


def _disc_use(stand):
    def use(data, amount, rng):
        if data.get("stand"):
            return _already_has_stand(data)
        lines = ["💿 You insert the disc into your head..."]
        _grant_stand(data, stand, lines)
        return ItemUse(consumed=1, lines=lines, stand=stand, color=stand.color)
    return use


def _make_disc(stand) -> Special:
    return Special(
        id=disc_id(stand.id), name=f"{stand.name} Disc", emoji="💿", rarity=stand.rarity,
        price={"C": 5000, "B": 25000, "A": 100000, "S": 500000}.get(stand.rarity, 1000000),
        tradable=stand.available,
        description=f"A stand disc containing {stand.name}.", use=_disc_use(stand),
    )


DISCS = {
    d.id: d for d in (
        [_make_disc(s) for s in STANDS.values()]
        + [_make_disc(e.tier(0)) for e in EVOLUTION_STANDS.values()]
    )
}

SPECIAL_ITEMS = {
    i.id: i for i in (
        Box, MoneyBox, PatronBox, BoosterBox, ChristmasGift, StandArrow, RareStandArrow,
        SpookyArrow, RequiemArrow, SkillPointsResetPotion,
    )
}
SPECIAL_ITEMS.update(DISCS)


def use_special(item: Special, data: dict, amount: int = 1, rng: random.Random | None = None) -> ItemUse:
    """Run the item's effect and remove the copies it consumed from the inventory."""
    if amount <= 0:
        raise InventoryError("Amount must be positive.")
    if not has_item(data, item.id, amount):
        raise InventoryError(f"You don't have {amount}x {item.name}.")
    result = item.use(data, amount, rng or random.Random())
    if result.consumed:
        remove_item(data, item.id, result.consumed)
    return result
