from rpg import abilities as A
from rpg.types import (
    Item, Consumable, EquipableItem, Weapon, skill_points,
    HEAD, CHEST, LEGS, FEET, HANDS, ACCESSORY, FACE,
)

# ---------------------------------------------------------------------------
# plain items (crafting material, loot)
# ---------------------------------------------------------------------------

BrokenArrow = Item(
    id="broken_arrow", name="Broken Arrow", emoji="🏹",
    description="The broken tip of a mysterious arrow. Three of them could make a new one.",
    rarity="C", price=5000,
)

Diamond = Item(
    id="diamond", name="Diamond", emoji="💎",
    description="Shiny. Sells well.", rarity="A", price=100000,
)

AncientScroll = Item(
    id="ancient_scroll", name="Ancient Scroll", emoji="📜",
    description="A scroll covered in forgotten writing.", rarity="A", price=30000,
)

Rock = Item(
    id="rock", name="Rock", emoji="🪨",
    description="Just a rock. Or is it Angelo?", rarity="C", price=50,
)

ITEMS = {i.id: i for i in (BrokenArrow, Diamond, AncientScroll, Rock)}


# ---------------------------------------------------------------------------
# consumables: health/stamina are flat ints or "N%" of the max
# ---------------------------------------------------------------------------

Pizza = Consumable(
    id="pizza", name="Pizza", emoji="🍕", description="Restores 50 health.",
    rarity="C", price=300, effects={"health": 50},
)

Spaghetti = Consumable(
    id="spaghetti_bowl", name="Spaghetti Bowl", emoji="🍝",
    description="Tonio's specialty. Restores 25% of your health and stamina.",
    rarity="B", price=1500, effects={"health": "25%", "stamina": "25%"},
)

Coffee = Consumable(
    id="coffee", name="Coffee", emoji="☕", description="Restores 30 stamina.",
    rarity="C", price=250, effects={"stamina": 30},
)

EnergyDrink = Consumable(
    id="energy_drink", name="Energy Drink", emoji="🥤", description="Restores all of your stamina.",
    rarity="A", price=8000, effects={"stamina": "100%"},
)

Bandage = Consumable(
    id="bandage", name="Bandage", emoji="🩹", description="Restores 15% of your health.",
    rarity="C", price=600, effects={"health": "15%"},
)

Ramen = Consumable(
    id="ramen_bowl", name="Ramen Bowl", emoji="🍜", description="Restores 100 health and 30 stamina.",
    rarity="B", price=1800, effects={"health": 100, "stamina": 30},
)

CandyCane = Consumable(
    id="candy_cane", name="Candy Cane", emoji="🍬",
    description="Christmas treat. Restores 10% health.", rarity="T", price=1000,
    tradable=False, effects={"health": "10%"},
)

PizzaBox = Consumable(
    id="pizza_box", name="Pizza Box", emoji="📦", description="Contains 3 pizzas.",
    rarity="B", price=850, effects={"items": {"pizza": 3}},
)

CONSUMABLES = {i.id: i for i in (Pizza, Spaghetti, Coffee, EnergyDrink, Bandage, Ramen, CandyCane, PizzaBox)}


# ---------------------------------------------------------------------------
# equipables
# ---------------------------------------------------------------------------

KakyoinsSnazzyShades = EquipableItem(
    id="kakyoins_snazzy_shades", name="Kakyoin's Snazzy Shades", emoji="🕶️",
    description="Rerorerorero.", rarity="S", price=250000, type=FACE,
    effects={"skill_points": skill_points(perception=10, speed=5), "xp_boost": 5},
    requirements={"level": 10},
)

JotarosHat = EquipableItem(
    id="jotaros_hat", name="Jotaro's Hat", emoji="🧢",
    description="Yare yare daze.", rarity="A", price=50000, type=HEAD,
    effects={"skill_points": skill_points(defense=5), "health": "5%"},
)

LeatherJacket = EquipableItem(
    id="leather_jacket", name="Leather Jacket", emoji="🧥",
    description="Looks tough.", rarity="C", price=3000, type=CHEST,
    effects={"skill_points": skill_points(defense=2), "health": 25},
)

Jeans = EquipableItem(
    id="jeans", name="Jeans", emoji="👖", description="Comfortable.",
    rarity="C", price=2000, type=LEGS,
    effects={"skill_points": skill_points(speed=1, defense=1)},
)

Sneakers = EquipableItem(
    id="sneakers", name="Sneakers", emoji="👟", description="Run faster.",
    rarity="C", price=2500, type=FEET,
    effects={"skill_points": skill_points(speed=3)},
)

BoxingGloves = EquipableItem(
    id="boxing_gloves", name="Boxing Gloves", emoji="🥊", description="Ora ora.",
    rarity="B", price=9000, type=HANDS,
    effects={"skill_points": skill_points(strength=4)},
)

LuckyCharm = EquipableItem(
    id="lucky_charm", name="Lucky Charm", emoji="🍀", description="+10% XP.",
    rarity="B", price=25000, type=ACCESSORY, effects={"xp_boost": 10},
)

GoldRing = EquipableItem(
    id="gold_ring", name="Gold Ring", emoji="💍", description="+10% stamina.",
    rarity="B", price=20000, type=ACCESSORY, effects={"stamina": "10%"},
)

# ---------------------------------------------------------------------------
# weapons
# ---------------------------------------------------------------------------

DiosKnives = Weapon(
    id="dios_knives", name="Dio's Knives", emoji="🔪",
    description="A bundle of throwing knives. MUDA MUDA.", rarity="S", price=400000,
    abilities=[A.KnivesThrow], attack_name="Knife Stab", use_message_attack="stabs",
    stamina_cost=2, color=0xFFD700,
    effects={"skill_points": skill_points(strength=8, speed=4)},
    requirements={"level": 25},
)

Katana = Weapon(
    id="katana", name="Katana", emoji="🗡️", description="Sharp.",
    rarity="A", price=60000, abilities=[A.SwiftStrike], attack_name="Slash",
    use_message_attack="slashes", stamina_cost=2, color=0xB0C4DE,
    effects={"skill_points": skill_points(strength=5)},
    requirements={"level": 10},
)

BerserkerAxe = Weapon(
    id="berserker_axe", name="Berserker Axe", emoji="🪓", description="BLOOD FOR THE AXE.",
    rarity="S", price=300000, abilities=[A.BerserkersFury, A.BerserkersRampage],
    attack_name="Cleave", use_message_attack="cleaves", stamina_cost=3, color=0x8B0000,
    effects={"skill_points": skill_points(strength=10)},
    requirements={"level": 30, "skill_points": skill_points(strength=20)},
)

GasolineRevolver = Weapon(
    id="gasoline_revolver", name="Gasoline Revolver", emoji="🔫",
    description="Ghiaccio would not approve.", rarity="A", price=80000,
    abilities=[A.GasolineBullets], attack_name="Shoot", use_message_attack="shoots",
    stamina_cost=2, color=0xFF8C00,
    effects={"skill_points": skill_points(perception=4)},
)

CarKeys = Weapon(
    id="car_keys", name="Car Keys", emoji="🚗", description="Vroom.",
    rarity="B", price=15000, abilities=[A.CarCrash], attack_name="Punch",
    use_message_attack="punches", stamina_cost=1, color=0x708090,
)

RageGauntlet = Weapon(
    id="rage_gauntlet", name="Rage Gauntlet", emoji="🧤",
    description="The angrier you get the harder you hit.", rarity="A", price=90000,
    abilities=[A.Rage], attack_name="Smash", use_message_attack="smashes",
    stamina_cost=2, color=0xB22222,
    effects={"skill_points": skill_points(strength=3, defense=3)},
)

SpookyScythe = Weapon(
    id="spooky_scythe", name="Spooky Scythe", emoji="🎃", description="Halloween 2023 memento.",
    rarity="T", price=0, tradable=False, abilities=[A.ScytheSlash], attack_name="Reap",
    use_message_attack="reaps", stamina_cost=1, color=0xFF7518,
)

EQUIPABLES = {
    i.id: i for i in (
        KakyoinsSnazzyShades, JotarosHat, LeatherJacket, Jeans, Sneakers, BoxingGloves,
        LuckyCharm, GoldRing, DiosKnives, Katana, BerserkerAxe, GasolineRevolver, CarKeys,
        RageGauntlet, SpookyScythe,
    )
}
