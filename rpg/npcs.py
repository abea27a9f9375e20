from dataclasses import replace

from rpg.types import NPC, FightableNPC, Rewards, ItemReward, SKILL_KEYS, skill_points
from utils.functions import get_max_xp
from utils.settings import SETTINGS

BASE_SP = skill_points(defense=1, strength=1, speed=1, perception=1, stamina=0)
BASE_REWARDS = Rewards(coins=100, xp=350)

# hand-written skill points of each fightable npc, kept as its build once balanced
BUILDS: dict[str, dict] = {}

# ---------------------------------------------------------------------------
# talking npcs (email authors, shop owners)
# ---------------------------------------------------------------------------

SpeedwagonFoundation = NPC(
    id="speedwagon_foundation", name="Speedwagon Foundation", emoji="🏛️",
    email="contact@speedwagon.foundation",
)

Jolyne = NPC(id="jolyne", name="Jolyne Cujoh", emoji="🦋", email="jolyne@cujoh.com")

Tonio = NPC(id="tonio", name="Tonio Trussardi", emoji="👨‍🍳")

Pucci = NPC(id="pucci", name="Enrico Pucci", emoji="✝️")


# ---------------------------------------------------------------------------
# fightable npcs
# ---------------------------------------------------------------------------

Kakyoin = FightableNPC(
    id="kakyoin", name="Noriaki Kakyoin", emoji="🍒",
    level=0, skill_points=skill_points(perception=100),
    stand="hierophant_green",
    equipped_items={"kakyoins_snazzy_shades": 8},
    rewards=Rewards(items=[ItemReward(item="kakyoins_snazzy_shades", chance=25)]),
    dialogues={"win": "You're not bad...", "lose": "Rerorerorero."},
)

HarryLester = FightableNPC(
    id="harry_lester", name="Harry Lester", emoji="👴",
    level=1, skill_points=BASE_SP, stand="hermit_purple",
)

Jotaro = FightableNPC(
    id="jotaro", name="Jotaro Kujo", emoji="🧢",
    level=200,
    skill_points=skill_points(defense=100, strength=100, speed=100, perception=100, stamina=100),
    stand="star_platinum",
    rewards=Rewards(coins=25000, xp=100000, items=[ItemReward(item="jotaros_hat", chance=5)]),
    dialogues={"lose": "Yare yare daze."},
)

Dio = FightableNPC(
    id="dio", name="DIO", emoji="🧛",
    level=150, skill_points=Jotaro.skill_points, stand="the_world",
    equipped_items={"dios_knives": 6},
    rewards=Rewards(coins=20000, xp=75000, items=[
        ItemReward(item="the_world.$disc$", chance=2),
        ItemReward(item="dios_knives", chance=1),
    ]),
    dialogues={"lose": "MUDA MUDA MUDA!", "win": "How could I, DIO, lose?!"},
)

HeavenAscendedDio = FightableNPC(
    id="heaven_ascended_dio", name="Heaven Ascended DIO", emoji="👼",
    level=750, skill_points={k: v * 5 for k, v in Dio.skill_points.items()},
    rewards=Rewards(coins=100000, xp=500000),
)

BanditLeader = FightableNPC(
    id="bandit_leader", name="Bandit Leader", emoji="🦹",
    level=20, skill_points=BASE_SP, stand="hierophant_green",
    rewards=Rewards(coins=1500, xp=3000, items=[ItemReward(item="broken_arrow", chance=50)]),
)

Bandit = FightableNPC(
    id="bandit", name="Bandit", emoji="🥷",
    level=0, skill_points=BASE_SP,
    rewards=Rewards(items=[ItemReward(item="pizza", chance=30)]),
)

SecurityGuard = FightableNPC(
    id="security_guard", name="Security Guard", emoji="👮",
    level=5, skill_points=BASE_SP,
)

Polnareff = FightableNPC(
    id="polnareff", name="Jean Pierre Polnareff", emoji="🤺",
    level=10, skill_points=BASE_SP, stand="silver_chariot",
)

RequiemPolnareff = FightableNPC(
    id="requiem_polnareff", name="Jean Pierre Polnareff (Requiem)", emoji="🌑",
    level=200, skill_points=BASE_SP, stand="silver_chariot",
    stands_evolved={"silver_chariot": 1},
    rewards=Rewards(coins=30000, xp=150000),
)

NPCS = {n.id: n for n in (SpeedwagonFoundation, Jolyne, Tonio, Pucci)}

FIGHTABLE_NPCS = {
    n.id: n for n in (
        Kakyoin, HarryLester, Jotaro, Dio, HeavenAscendedDio, BanditLeader, Bandit,
        SecurityGuard, Polnareff, RequiemPolnareff,
    )
}


def npc_rewards(level: int) -> Rewards:
    """Coins and XP an npc hands out when it doesn't set its own."""
    return Rewards(
        coins=BASE_REWARDS.coins + level * 20,
        xp=BASE_REWARDS.xp + get_max_xp(level) // 10,
    )


def balance_npc(npc: FightableNPC, level: int | None = None) -> FightableNPC:
    """
    Give `npc` exactly the skill points a player of `level` would have
    (level * skill_points_per_level). The npc's own skill points only set the
    build: each stat keeps its share of the total, and rounding leftovers go
    to the main stat. Missing coin/XP rewards are derived from the level.
    """
    level = npc.level if level is None else level
    total = level * SETTINGS.skill_points_per_level
    build = BUILDS.get(npc.id, npc.skill_points)
    weights = {k: max(0, build.get(k, 0)) for k in SKILL_KEYS}
    if not sum(weights.values()):
        weights = dict.fromkeys(SKILL_KEYS, 1)
    weight_sum = sum(weights.values())
    sp = {k: int(total * w // weight_sum) for k, w in weights.items()}
    sp[max(weights, key=weights.get)] += total - sum(sp.values())

    rewards = npc.rewards or Rewards()
    derived = npc_rewards(level)
    rewards = replace(rewards, coins=rewards.coins or derived.coins, xp=rewards.xp or derived.xp)
    return replace(npc, level=level, skill_points=sp, rewards=rewards)


def balance_npcs():
    """Balance every fightable npc in this module, registry and module names alike."""
    module = globals()
    for name, value in list(module.items()):
        if isinstance(value, FightableNPC):
            BUILDS.setdefault(value.id, dict(value.skill_points))
            module[name] = FIGHTABLE_NPCS[value.id] = balance_npc(value)


balance_npcs()
