from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

SKILL_KEYS = ("defense", "strength", "speed", "perception", "stamina")
RARITIES = ("C", "B", "A", "S", "SS", "T")

# ability targeting modes
TARGET_ENEMY = "enemy"
TARGET_ALLY = "ally"          # anyone on the user's side, user included
TARGET_ONLY_ALLY = "onlyAlly"  # user's side, user excluded
TARGET_SELF = "self"
TARGET_ANY = "any"

# equip slots
HEAD, CHEST, LEGS, FEET, HANDS, WEAPON, ACCESSORY, FACE = 1, 2, 3, 4, 5, 6, 7, 8

EQUIP_SLOT_LIMITS = {
    HEAD: 1, CHEST: 1, LEGS: 1, FEET: 1, HANDS: 1, WEAPON: 1, ACCESSORY: 2, FACE: 1,
}

EQUIP_SLOT_NAMES = {
    HEAD: "Head", FACE: "Face", CHEST: "Chest", LEGS: "Legs",
    FEET: "Feet", HANDS: "Hands", WEAPON: "Weapon", ACCESSORY: "Accessory",
}


def skill_points(defense=0, strength=0, speed=0, perception=0, stamina=0) -> Dict[str, float]:
    return {"defense": defense, "strength": strength, "speed": speed,
            "perception": perception, "stamina": stamina}


# ---------------------------------------------------------------------------
# stands & abilities
# ---------------------------------------------------------------------------

# effect(fight, user, target, damage) -> None
AbilityEffect = Callable[[Any, Any, Any, int], None]


@dataclass(frozen=True, kw_only=True)
class Ability:
    name: str
    description: str
    cooldown: int
    extra_turns: int
    damage: float
    stamina: int
    dodge_score: int
    target: str = TARGET_ENEMY
    special: bool = False
    thumbnail: Optional[str] = None
    effect: Optional[AbilityEffect] = None


@dataclass(frozen=True, kw_only=True)
class CustomAttack:
    name: str
    emoji: str
    # handle_attack(fight, user, target, damage) -> None
    handle_attack: Optional[AbilityEffect] = None


@dataclass(frozen=True, kw_only=True)
class Stand:
    id: str
    name: str
    description: str
    rarity: str
    emoji: str
    abilities: List[Ability]
    skill_points: Dict[str, float]
    color: int = 0x70926C
    available: bool = True
    image: str = ""
    custom_attack: Optional[CustomAttack] = None


@dataclass(frozen=True, kw_only=True)
class EvolutionStand:
    """A stand whose stats depend on the owner's `stands_evolved[id]` tier."""
    id: str
    evolutions: List[Stand]

    def tier(self, tier: int) -> Stand:
        tier = max(0, min(int(tier or 0), len(self.evolutions) - 1))
        return self.evolutions[tier]


# ---------------------------------------------------------------------------
# items
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class Item:
    id: str
    name: str
    description: str
    rarity: str
    emoji: str
    price: int = 0
    tradable: bool = True
    storable: bool = True
    craft: Optional[Dict[str, int]] = None


@dataclass(frozen=True, kw_only=True)
class Consumable(Item):
    # health/stamina: int or "N%"; items: {item_id: amount}
    effects: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ItemUse:
    """What a special item did. `consumed` is how many copies to remove."""
    consumed: int
    lines: List[str] = field(default_factory=list)
    color: Optional[int] = None
    stand: Optional[Stand] = None


# use(user_data, amount, rng) -> ItemUse
SpecialUse = Callable[[dict, int, Any], ItemUse]


@dataclass(frozen=True, kw_only=True)
class Special(Item):
    use: SpecialUse


@dataclass(frozen=True, kw_only=True)
class EquipableItem(Item):
    type: int
    # skill_points: dict, health/stamina: int or "N%", xp_boost: percent
    effects: Dict[str, Any] = field(default_factory=dict)
    requirements: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class Weapon(EquipableItem):
    type: int = WEAPON
    abilities: List[Ability] = field(default_factory=list)
    attack_name: str = "Attack"
    use_message_attack: str = "attacks"
    stamina_cost: int = 0
    color: int = 0x8B0000
    handle_attack: Optional[AbilityEffect] = None


# ---------------------------------------------------------------------------
# npcs, rewards, raids
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class ItemReward:
    item: str
    amount: int = 1
    chance: float = 100


@dataclass(frozen=True, kw_only=True)
class Rewards:
    coins: int = 0
    xp: int = 0
    items: List[ItemReward] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class NPC:
    id: str
    name: str
    emoji: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class FightableNPC(NPC):
    level: int
    skill_points: Dict[str, float]
    stand: Optional[str] = None
    rewards: Optional[Rewards] = None
    dialogues: Dict[str, str] = field(default_factory=dict)
    equipped_items: Dict[str, int] = field(default_factory=dict)
    stands_evolved: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class RaidBoss:
    boss: FightableNPC
    minions: List[FightableNPC]
    base_rewards: Rewards
    level: int
    max_level: float
    max_players: int
    cooldown: int  # seconds

    @property
    def id(self) -> str:
        return self.boss.id


# ---------------------------------------------------------------------------
# story
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class Email:
    id: str
    author: NPC
    subject: str
    content: str
    emoji: str = "📧"
    footer: Optional[str] = None
    rewards: Optional[Rewards] = None
    chapter_quests: List[dict] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class Chapter:
    id: int
    title: str
    description: str
    quests: List[dict]
    dialogs: List[str] = field(default_factory=list)
    rewards_when_complete: Optional[Rewards] = None
    reward_email: Optional[str] = None
    hints: List[str] = field(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class SideQuest:
    id: str
    title: str
    emoji: str
    description: str
    quests: List[dict]
    rewards: Rewards
    # requirements(user_data) -> bool
    requirements: Callable[[dict], bool] = lambda data: True
    requirements_message: Optional[str] = None
    can_redo: bool = False


@dataclass(frozen=True, kw_only=True)
class Shop:
    id: str
    name: str
    emoji: str
    # (item_id, price or None for the item's own price)
    items: List[tuple]
    owner: Optional[NPC] = None
