from rpg import abilities as A
from rpg.types import Stand, EvolutionStand, CustomAttack, skill_points
from utils.functions import fmt_num


def _sex_pistols_attack(fight, user, target, damage):
    """Every basic attack fires one of six bullets; the seventh call reloads."""
    key = f"{fight.id}_{user.id}"
    bullets = fight.cache.get(key, 0)
    if bullets >= A.SEX_PISTOLS_BULLETS:
        if fight.cache.get(key + "fireX"):
            return
        fight.cache[key] = 0
        fight.log(f"🔫 **{user.name}** reloads their revolver...")
        return
    fight.cache[key] = bullets + 1
    if not target.alive:
        return
    if not user.has_stopped_time and fight.roll_dodge(target, user, 1):
        fight.log(f"🔫 NO. {bullets + 1}: **{target.name}** dodged the bullet.")
        return
    dealt = fight.deal_damage(user, target, max(1, round(damage * 0.25)))
    fight.log(f"🔫 NO. {bullets + 1}: **{user.name}**'s bullet hits **{target.name}** for **{fmt_num(dealt)}**")


StarPlatinum = Stand(
    id="star_platinum",
    name="Star Platinum",
    description="Star Platinum is a humanoid Stand with immense strength, speed and precision.",
    rarity="S",
    emoji="⭐",
    abilities=[A.StandBarrage, A.StarFinger, A.TheWorld],
    skill_points=skill_points(defense=5, strength=5, speed=5, perception=5, stamina=5),
    color=0x985CA3,
)

TheWorld = Stand(
    id="the_world",
    name="The World",
    description="The World is a humanoid Stand able to stop time.",
    rarity="S",
    emoji="🕰️",
    abilities=[A.StandBarrage, A.RoadRoller, A.TheWorld],
    skill_points=skill_points(defense=5, strength=6, speed=5, perception=4, stamina=5),
    color=0xFFFF00,
)

HierophantGreen = Stand(
    id="hierophant_green",
    name="Hierophant Green",
    description="A long-range Stand that can unravel itself and enter other bodies.",
    rarity="A",
    emoji="🟢",
    abilities=[A.EmeraldSplash, A.Manipulation],
    skill_points=skill_points(defense=2, strength=2, speed=3, perception=7, stamina=3),
    color=0x00FF00,
)

MagiciansRed = Stand(
    id="magicians_red",
    name="Magician's Red",
    description="A bird-headed humanoid Stand that generates and controls fire.",
    rarity="A",
    emoji="🔥",
    abilities=[A.CrossfireHurricane, A.RedBind, A.Bakugo],
    skill_points=skill_points(defense=2, strength=6, speed=3, perception=3, stamina=3),
    color=0xFF0000,
)

HermitPurple = Stand(
    id="hermit_purple",
    name="Hermit Purple",
    description="Thorny vines used for divination and grappling.",
    rarity="C",
    emoji="🍇",
    abilities=[A.VineSlap, A.VineBarrage, A.OhMyGod],
    skill_points=skill_points(defense=1, strength=1, speed=1, perception=2, stamina=1),
    color=0x800080,
)

TheHand = Stand(
    id="the_hand",
    name="The Hand",
    description="Its right hand erases anything it scrapes.",
    rarity="A",
    emoji="✋",
    abilities=[A.LightSpeedBarrage, A.DeadlyErasure],
    skill_points=skill_points(defense=2, strength=6, speed=4, perception=2, stamina=3),
    color=0x0000FF,
)

SexPistols = Stand(
    id="sex_pistols",
    name="Sex Pistols",
    description="Six tiny Stands that kick bullets mid-flight.",
    rarity="B",
    emoji="🔫",
    abilities=[A.BulletsRafale],
    skill_points=skill_points(defense=1, strength=2, speed=3, perception=4, stamina=2),
    color=0xFFA500,
    custom_attack=CustomAttack(name="Fire Bullet", emoji="🔫", handle_attack=_sex_pistols_attack),
)

TheFool = Stand(
    id="the_fool",
    name="The Fool",
    description="A Stand made of sand that can reshape itself at will.",
    rarity="A",
    emoji="🏜️",
    abilities=[A.SandClone, A.SandProjectiles, A.SandMimicry, A.SandStorm, A.SandSelfHealing],
    skill_points=skill_points(defense=3, strength=3, speed=3, perception=4, stamina=2),
    color=0xC2B280,
)

PurpleHaze = Stand(
    id="purple_haze",
    name="Purple Haze",
    description="A violent Stand releasing a flesh-eating virus from its knuckles.",
    rarity="B",
    emoji="🦠",
    abilities=[A.StandBarrage, A.CapsuleShot, A.PoisonGas],
    skill_points=skill_points(defense=1, strength=5, speed=2, perception=1, stamina=2),
    color=0x9370DB,
)

Aerosmith = Stand(
    id="aerosmith",
    name="Aerosmith",
    description="A small propeller plane armed with machine guns and bombs.",
    rarity="B",
    emoji="✈️",
    abilities=[A.VolaBarrage, A.LittleBoy],
    skill_points=skill_points(defense=1, strength=2, speed=5, perception=3, stamina=1),
    color=0x87CEEB,
)

CrazyDiamond = Stand(
    id="crazy_diamond",
    name="Crazy Diamond",
    description="A close-range Stand that restores anything to a previous state.",
    rarity="A",
    emoji="💎",
    abilities=[A.StandBarrage, A.HealPunch, A.HealBarrage, A.Restoration, A.YoAngelo],
    skill_points=skill_points(defense=4, strength=5, speed=3, perception=2, stamina=3),
    color=0xFF69B4,
)

KingCrimson = Stand(
    id="king_crimson",
    name="King Crimson",
    description="Erases time and leaps past it, seeing the future with Epitaph.",
    rarity="SS",
    emoji="👑",
    abilities=[A.StandBarrage, A.Finisher, A.MysteriousGas],
    skill_points=skill_points(defense=6, strength=8, speed=6, perception=8, stamina=6),
    color=0xDC143C,
    available=False,
)

SkeletalSpectre = Stand(
    id="skeletal_spectre",
    name="Skeletal Spectre",
    description="A spooky reaper that only walked the earth during Halloween 2023.",
    rarity="T",
    emoji="💀",
    abilities=[A.ScytheSlash, A.MysteriousGas, A.LifeShot],
    skill_points=skill_points(defense=4, strength=4, speed=4, perception=4, stamina=4),
    color=0x2F4F4F,
    available=False,
)

TowerOfGray = Stand(
    id="tower_of_gray",
    name="Tower of Gray",
    description="A tiny stag beetle Stand that tears through its targets at incredible speed.",
    rarity="C",
    emoji="🪲",
    abilities=[A.RapidStrikes],
    skill_points=skill_points(defense=0, strength=1, speed=4, perception=2, stamina=1),
    color=0x808080,
)

DarkBlueMoon = Stand(
    id="dark_blue_moon",
    name="Dark Blue Moon",
    description="An amphibious Stand covered in razor-sharp scales.",
    rarity="C",
    emoji="🌊",
    abilities=[A.StandBarrage, A.Razor_SharpScales],
    skill_points=skill_points(defense=2, strength=2, speed=2, perception=1, stamina=1),
    color=0x00008B,
)

Strength = Stand(
    id="strength",
    name="Strength",
    description="A Stand bound to a freighter, able to bend every object on board.",
    rarity="C",
    emoji="🚢",
    abilities=[A.ObjectManipulation],
    skill_points=skill_points(defense=3, strength=3, speed=0, perception=1, stamina=1),
    color=0x8B4513,
)

HangedMan = Stand(
    id="hanged_man",
    name="Hanged Man",
    description="A Stand living in reflections that travels at the speed of light.",
    rarity="B",
    emoji="🪞",
    abilities=[A.LightManifestation],
    skill_points=skill_points(defense=1, strength=3, speed=4, perception=2, stamina=1),
    color=0xC0C0C0,
)

Emperor = Stand(
    id="emperor",
    name="Emperor",
    description="A revolver Stand whose bullets bend their trajectory toward the target.",
    rarity="B",
    emoji="🔫",
    abilities=[A.HomingBullets],
    skill_points=skill_points(defense=1, strength=2, speed=2, perception=5, stamina=1),
    color=0xDAA520,
)

SpiceGirl = Stand(
    id="spice_girl",
    name="Spice Girl",
    description="A Stand that softens anything it touches, then lets it snap back.",
    rarity="A",
    emoji="🌶️",
    abilities=[A.StandBarrage, A.ViolentBurst],
    skill_points=skill_points(defense=4, strength=4, speed=3, perception=2, stamina=3),
    color=0xFF4500,
)


# ---------------------------------------------------------------------------
# evolution stands: tier = user_data["stands_evolved"][id]
# ---------------------------------------------------------------------------

SilverChariot = EvolutionStand(
    id="silver_chariot",
    evolutions=[
        Stand(
            id="silver_chariot",
            name="Silver Chariot",
            description="An armored knight wielding a rapier with unmatched speed.",
            rarity="A",
            emoji="🤺",
            abilities=[A.FencingBarrage, A.DeterminationFlurry, A.Finisher],
            skill_points=skill_points(defense=3, strength=3, speed=6, perception=3, stamina=2),
            color=0xC0C0C0,
        ),
        Stand(
            id="silver_chariot",
            name="Silver Chariot Requiem",
            description="Pierced by the arrow, it swaps souls and puts everyone to sleep.",
            rarity="SS",
            emoji="🌑",
            abilities=[A.FencingBarrage, A.DeterminationFlurry, A.Finisher, A.EternalSleep, A.RequiemArrowBlast],
            skill_points=skill_points(defense=8, strength=8, speed=10, perception=8, stamina=8),
            color=0x2C2C54,
        ),
    ],
)

GoldExperience = EvolutionStand(
    id="gold_experience",
    evolutions=[
        Stand(
            id="gold_experience",
            name="Gold Experience",
            description="Gives life to inanimate matter.",
            rarity="A",
            emoji="🐞",
            abilities=[A.StandBarrage, A.LifeGiver, A.Heal, A.LifeShot],
            skill_points=skill_points(defense=3, strength=3, speed=3, perception=3, stamina=4),
            color=0xFFD700,
        ),
        Stand(
            id="gold_experience",
            name="Gold Experience Requiem",
            description="Returns every action to zero.",
            rarity="SS",
            emoji="🌟",
            abilities=[A.StandBarrage, A.LifeGiver, A.LifeTransference, A.LifeShot, A.RequiemArrowBlast],
            skill_points=skill_points(defense=8, strength=8, speed=8, perception=8, stamina=10),
            color=0xFFF8DC,
        ),
    ],
)

Whitesnake = EvolutionStand(
    id="whitesnake",
    evolutions=[
        Stand(
            id="whitesnake",
            name="Whitesnake",
            description="Steals Stands and memories as discs.",
            rarity="S",
            emoji="🐍",
            abilities=[A.StandBarrage, A.StandDisc, A.Hallucinogen],
            skill_points=skill_points(defense=4, strength=4, speed=4, perception=5, stamina=4),
            color=0xF5F5F5,
        ),
    ],
)

Echoes = EvolutionStand(
    id="echoes",
    evolutions=[
        Stand(
            id="echoes",
            name="Echoes Act 1",
            description="Sticks sound effects onto things.",
            rarity="B",
            emoji="🥚",
            abilities=[A.KickBarrage],
            skill_points=skill_points(defense=1, strength=1, speed=2, perception=2, stamina=1),
            color=0x9ACD32,
        ),
        Stand(
            id="echoes",
            name="Echoes Act 3",
            description="3 FREEZE makes whatever it touches unbearably heavy.",
            rarity="A",
            emoji="🦎",
            abilities=[A.KickBarrage, A.StandBarrage, A.YoAngelo],
            skill_points=skill_points(defense=3, strength=4, speed=3, perception=3, stamina=3),
            color=0x6B8E23,
        ),
    ],
)

KillerQueen = EvolutionStand(
    id="killer_queen",
    evolutions=[
        Stand(
            id="killer_queen",
            name="Killer Queen",
            description="Turns anything it touches into a bomb.",
            rarity="S",
            emoji="💣",
            abilities=[A.StandBarrage, A.KickBarrage, A.Bakugo],
            skill_points=skill_points(defense=4, strength=5, speed=4, perception=4, stamina=3),
            color=0xE6A8D7,
        ),
        Stand(
            id="killer_queen",
            name="Killer Queen: Bites the Dust",
            description="Rewinds time by an hour after blowing up whoever learns its secret.",
            rarity="SS",
            emoji="🌀",
            abilities=[A.StandBarrage, A.KickBarrage, A.Bakugo, A.Transformation],
            skill_points=skill_points(defense=7, strength=9, speed=7, perception=7, stamina=6),
            color=0xB0306A,
        ),
    ],
)


STANDS = {
    s.id: s for s in (
        StarPlatinum, TheWorld, HierophantGreen, MagiciansRed, HermitPurple, TheHand,
        SexPistols, TheFool, PurpleHaze, Aerosmith, CrazyDiamond, KingCrimson, SkeletalSpectre,
        TowerOfGray, DarkBlueMoon, Strength, HangedMan, Emperor, SpiceGirl,
    )
}

EVOLUTION_STANDS = {
    e.id: e for e in (SilverChariot, GoldExperience, Whitesnake, Echoes, KillerQueen)
}


def arrow_pool(include_unavailable: tuple[str, ...] = ()) -> list[Stand]:
    """Stands an arrow can roll: every available stand plus each evolution's base tier."""
    pool = [s for s in STANDS.values() if s.available or s.id in include_unavailable]
    pool.extend(e.tier(0) for e in EVOLUTION_STANDS.values())
    return pool
