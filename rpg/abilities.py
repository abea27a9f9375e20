"""
Ability catalog.

Plain abilities are just numbers: the fight engine rolls the dodge, deals
`get_ability_damage` and hands out extra turns. Abilities with an `effect`
run extra logic after the damage step. Effects talk to the fight through
`fight.log`, `fight.schedule_turn` / `fight.schedule_round` (delayed
callbacks, counted in fighter turns or in rounds), `fight.deal_damage`,
`fight.roll_dodge` / `fight.roll_hits` and `fight.add_fighter` / `fight.remove_fighter`.
"""
from __future__ import annotations

import copy
from dataclasses import replace

from rpg.types import Ability, FightableNPC, TARGET_ALLY, TARGET_SELF, TARGET_ANY
from utils.functions import get_ability_damage, get_attack_damages, fmt_num, generate_random_id


def _emoji(user) -> str:
    if user.stand:
        return user.stand.emoji
    if user.weapon:
        return user.weapon.emoji
    return "⚔️"


StandBarrage = Ability(
    name="Stand Barrage",
    description="Performs an astoundingly fast flurry of punches that deals small damage per hit",
    cooldown=5, extra_turns=1, damage=10, stamina=10, dodge_score=1,
)

KickBarrage = Ability(
    name="Kick Barrage",
    description="Performs an astoundingly fast flurry of kicks that deals small damage per hit",
    cooldown=3, extra_turns=0, damage=8, stamina=6, dodge_score=1,
)

StarFinger = Ability(
    name="Star Finger",
    description="Extends {standName}'s finger and stabs the target in the eyes",
    cooldown=8, extra_turns=1, damage=25, stamina=18, dodge_score=2,
)

RoadRoller = replace(
    StarFinger,
    name="Road Roller",
    description="jumps high into the sky, bringing a steamroller down with them, slamming it "
                "down where they were previously standing. CAN STACK FREE TURNS IF ENOUGH SPEED!",
)


# ---------------------------------------------------------------------------
# time stop
# ---------------------------------------------------------------------------

def _time_stop(fight, user, target, damage):
    def resume(f):
        f.log(f"> {_emoji(user)} **{user.name}:** Toki wo Ugokidasu...")
        user.has_stopped_time = False

    fight.schedule_turn(6, resume)
    user.has_stopped_time = True

    stand_id = user.stand.id if user.stand else ""
    if stand_id == "the_world":
        fight.log(f"> {_emoji(user)} **{user.name}:** THE WORLD! TOKI WO TOMARE!")
    elif stand_id == "star_platinum":
        fight.log(f"> {_emoji(user)} **{user.name}:** STAR PLATINUM: THE WORLD! TOKI WO TOMARE!")
    else:
        stand_name = user.stand.name if user.stand else user.name
        fight.log(f"> {_emoji(user)} **{user.name}:** {stand_name}: TOKI WO TOMARE!")


TheWorld = Ability(
    name="The World",
    description="Stops time for 5 turns",
    cooldown=10, extra_turns=5, damage=0, stamina=35, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_time_stop,
)

EmeraldSplash = Ability(
    name="Emerald Splash",
    description="fires off a large amount of energy which takes the form of emeralds.",
    cooldown=5, extra_turns=1, damage=10, stamina=15, dodge_score=10,
)

VolaBarrage = replace(
    EmeraldSplash,
    name="Vola Barrage",
    description="Sends a wave of bullets in the direction the user is facing.",
    dodge_score=3,
)

LittleBoy = Ability(
    name="Little Boy",
    description="drop 3 bombs behind its opponent that will explode instantly",
    cooldown=8, extra_turns=1, damage=15, stamina=8, dodge_score=3,
)


# ---------------------------------------------------------------------------
# manipulation
# ---------------------------------------------------------------------------

def _manipulation(fight, user, target, damage):
    if user.manipulated_by:
        fight.log(f"**{user.manipulated_by.name}:** [ERROR: cannot manipulate if already manipulated]")
        return
    if target.manipulated_by:
        fight.log(
            f"**{user.name}:** [ERROR: cannot manipulate {target.name} because they are "
            f"already manipulated by {target.manipulated_by.name}]"
        )
        return

    base_name = target.name
    target.name = f"{base_name} (Manipulated)"
    target.manipulated_by = user

    def release(f):
        if target.manipulated_by is not user:
            return
        target.name = base_name
        target.manipulated_by = None
        f.log(f"{_emoji(user)} (target: {target.name}) has been released from manipulation.")

    fight.schedule_round(2, release)
    stand_name = user.stand.name if user.stand else user.name
    fight.log(f"{_emoji(user)} **{user.name}:** {stand_name}: Manipulation! (target: {target.name})")


Manipulation = Ability(
    name="Manipulation",
    description="Manipulates the opponent's body, causing them unable to control themselves",
    cooldown=10, extra_turns=0, damage=0, stamina=TheWorld.stamina, dodge_score=1,
    special=True, effect=_manipulation,
)

LightSpeedBarrage = Ability(
    name="Light-Speed Barrage",
    description="erases matter to jump on the enemies and assault them with rapid punches.",
    cooldown=5, extra_turns=1, damage=12.5, stamina=15, dodge_score=4,
)

DeadlyErasure = Ability(
    name="Deadly Erasure",
    description="uses their right hand to erase space and jump one you and use the effect of "
                "surprise to erase you",
    cooldown=15, extra_turns=2, damage=35, stamina=15, dodge_score=4, special=True,
)


# ---------------------------------------------------------------------------
# damage over time
# ---------------------------------------------------------------------------

def _dot(fight, user, target, amount: int, icon: str, kind: str, turns: int = 3):
    def tick(f):
        if target.health <= 0:
            return
        dealt = f.deal_damage(user, target, amount, ignore_defense=True)
        f.log(f"{icon} **{target.name}** took **{fmt_num(dealt)}** {kind} damage")
        if target.health <= 0:
            f.log(f"{icon} **{target.name}** died from {kind} damage")

    fight.schedule_turn(turns, tick)


def burn_effect(ability: Ability):
    def effect(fight, user, target, damage):
        _dot(fight, user, target, max(1, round(get_ability_damage(user, ability) / 10)), "🔥", "burn")
    return effect


def bleed_effect(ability: Ability):
    def effect(fight, user, target, damage):
        _dot(fight, user, target, max(1, round(get_ability_damage(user, ability) / 10)), "🩸", "bleed")
    return effect


def _with_effect(ability: Ability, factory) -> Ability:
    return replace(ability, effect=factory(ability))


CrossfireHurricane = _with_effect(Ability(
    name="Crossfire Hurricane",
    description="launches 1 cross in the shape of an ankh at the opponent",
    cooldown=5, extra_turns=0, damage=10, stamina=12, dodge_score=1,
), burn_effect)

RedBind = _with_effect(Ability(
    name="Red Bind",
    description="takes two swings at the opponent with fiery chains",
    cooldown=7, extra_turns=0, damage=17, stamina=15, dodge_score=2,
), burn_effect)

Bakugo = _with_effect(Ability(
    name="Bakugo",
    description="grabs the opponent before engulfing the opponent's head in flames",
    cooldown=12, extra_turns=1, damage=25, stamina=15, dodge_score=3, special=True,
), burn_effect)


# ---------------------------------------------------------------------------
# hermit purple
# ---------------------------------------------------------------------------

def _oh_my_god(fight, user, target, damage):
    boosted = dict(user.skill_points)
    for stat in user.skill_points:
        user.skill_points[stat] += boosted[stat]
    fight.log(f"😱 OH MY GOD **{user.name}**'s stats are boosted by 100% !1!1!1!!!!1!1")

    def wear_off(f):
        for stat, amount in boosted.items():
            user.skill_points[stat] -= amount
        f.log(f"😱 OH MY GOD **{user.name}**'s stats are back...")

    fight.schedule_round(4, wear_off)


OhMyGod = Ability(
    name="Oh My God",
    description="BOOSTS ALL YOUR STATS BY 100% FOR 3 TURNS LETS GOOOOO",
    cooldown=4, extra_turns=1, damage=0, stamina=0, dodge_score=0,
    target=TARGET_SELF, effect=_oh_my_god,
)

VineSlap = Ability(
    name="Vine Slap",
    description="extends {standName}'s vines to whip twice in the opponent's direction",
    cooldown=4, extra_turns=1, damage=15, stamina=20, dodge_score=2,
)

VineBarrage = replace(
    StandBarrage,
    name="Vine Barrage",
    description="extends {standName}'s vines to whip the opponent",
)


# ---------------------------------------------------------------------------
# sex pistols
# ---------------------------------------------------------------------------

SEX_PISTOLS_BULLETS = 6


def _bullets_rafale(fight, user, target, damage):
    attack = user.stand.custom_attack if user.stand else None
    if not attack or not attack.handle_attack:
        fight.log(f"**{user.name}** has nothing to shoot with...")
        return
    key = f"{fight.id}_{user.id}"
    fight.cache[key + "fireX"] = True
    try:
        bullets = fight.cache.get(key, 0)
        if bullets >= SEX_PISTOLS_BULLETS:
            fight.log(
                f"🔫 **{user.name}** has no bullets left... "
                "You just wasted your ability & stamina omg you're so dumb"
            )
            return
        fight.log(f">> 🔫 **{user.name}** fires all their bullets at once! ({SEX_PISTOLS_BULLETS - bullets})")
        for _ in range(SEX_PISTOLS_BULLETS - bullets):
            attack.handle_attack(fight, user, target, get_attack_damages(user))
    finally:
        fight.cache.pop(key + "fireX", None)


BulletsRafale = Ability(
    name="Bullets Rafale",
    description="fires all your bullets at once",
    cooldown=3, extra_turns=0, damage=0, stamina=35, dodge_score=0,
    effect=_bullets_rafale,
)


# ---------------------------------------------------------------------------
# silver chariot
# ---------------------------------------------------------------------------

DeterminationFlurry = _with_effect(Ability(
    name="Determination Flurry",
    description="A Barrage with multiple slashes (+ bleed damage)",
    cooldown=5, extra_turns=0, damage=25, stamina=40, dodge_score=2,
), bleed_effect)

FencingBarrage = replace(
    StandBarrage,
    name="Fencing Barrage",
    description="A Barrage with multiple slashes",
)

Finisher = _with_effect(Ability(
    name="Finisher",
    description="attacks or finish the opponent by aiming at one of his vital parts "
                "[CRITICAL, BLEED DAMAGES]",
    cooldown=8, extra_turns=1, damage=50, stamina=40, dodge_score=2,
), bleed_effect)


# ---------------------------------------------------------------------------
# gold experience
# ---------------------------------------------------------------------------

def _life_transference(fight, user, target, damage):
    if fight.get_team_idx(fight.controller_of(user)) == fight.get_team_idx(fight.controller_of(target)):
        old = target.health
        target.incr_health(round(target.max_health * 0.3))
        fight.log(
            f"{_emoji(user)} LIFE TRANSFERENCE: {target.name} has been healed for "
            f"**{fmt_num(target.health - old)}** health."
        )
    else:
        old = target.health
        fight.deal_damage(user, target, get_attack_damages(user) * 3, ignore_defense=True)
        fight.log(
            f"{_emoji(user)} LIFE TRANSFERENCE: {target.name} has lost "
            f"**{fmt_num(old - target.health)}** health due to life force drain."
        )


LifeTransference = Ability(
    name="Life Transference",
    description="Transfers life force between individuals, healing allies by 30% of their max "
                "health or heavily damaging enemies",
    cooldown=6, extra_turns=0, damage=0, stamina=60, dodge_score=0,
    target=TARGET_ANY, effect=_life_transference,
)

RequiemArrowBlast = Ability(
    name="Requiem Arrow Blast",
    description="Unleashes **__an extremely powerful__** blast of energy using its requiem arrow.",
    cooldown=12, extra_turns=0, damage=65, stamina=60, dodge_score=2,
)


def _eternal_sleep(fight, user, target, damage):
    def hit(x):
        x.frozen_for += 3
        fight.log(f"- {_emoji(user)} ETERNAL SLEEP: **{user.name}** has put **{x.name}** to sleep for 3 turns...")

    def resist(x):
        fight.log(f"- {_emoji(user)} ETERNAL SLEEP: **{x.name}** resisted.")

    for x in [f for f in fight.fighters if f.id != user.id and f.alive]:
        if not fight.roll_hits(user, x, 3):
            resist(x)
        else:
            hit(x)


EternalSleep = Ability(
    name="Eternal Sleep",
    description="Induces a deep sleep on anyone within its range, even allies, except if they are "
                "strong enough to resist it [real dodge score: 3].",
    cooldown=5, extra_turns=0, damage=0, stamina=50, dodge_score=0,
    target=TARGET_SELF, effect=_eternal_sleep,
)


# ---------------------------------------------------------------------------
# whitesnake
# ---------------------------------------------------------------------------

def _stand_disc(fight, user, target, damage):
    stand = target.stand
    if not stand:
        fight.log(f"- {_emoji(user)} STAND DISC: **{target.name}** has no stand to remove...")
        return
    target.stand = None
    fight.log(
        f"- {_emoji(user)} STAND DISC: **{user.name}** has removed temporarily the stand of "
        f"**{target.name}**... ({stand.name} {stand.emoji})"
    )

    def give_back(f):
        target.stand = stand
        f.log(
            f"- {_emoji(user)} STAND DISC: **{target.name}** has recovered their stand... "
            f"({stand.name} {stand.emoji})"
        )

    fight.schedule_round(3, give_back)


StandDisc = Ability(
    name="Stand Disc",
    description="Removes temporarily the stand of the target",
    cooldown=9, extra_turns=0, damage=0, stamina=50, dodge_score=7,
    special=True, effect=_stand_disc,
)


def _speed_debuff(label: str):
    def effect(fight, user, target, damage):
        old = {}
        for x in fight.enemies_of(user):
            old[x.id] = (x, x.skill_points["perception"], x.skill_points["speed"])
            x.skill_points["perception"] = round(x.skill_points["perception"] * 0.1)
            x.skill_points["speed"] = round(x.skill_points["speed"] * 0.1)
            fight.log(
                f"- {_emoji(user)} {label}: **{user.name}** has decreased **{x.name}**'s "
                "perception & speed by 90%..."
            )

        def restore(f):
            for x, perception, speed in old.values():
                if f.find_fighter(x.id) is None:
                    continue
                x.skill_points["perception"] = perception
                x.skill_points["speed"] = speed
            f.log(f"- {_emoji(user)} {label}: **{user.name}**'s {label.lower()} EFFECT has disappeared...")

        fight.schedule_round(3, restore)
    return effect


Hallucinogen = Ability(
    name="Hallucinogen",
    description="Creates a hallucinogen that decreases EVERYONE's (except your allies) "
                "perception & speed BY 90%",
    cooldown=7, extra_turns=0, damage=0, stamina=50, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_speed_debuff("HALLUCINOGEN"),
)


def _heal(fight, user, target, damage):
    old = target.health
    target.incr_health(round(user.max_health * 0.15))
    lol = "" if fight.get_team_idx(fight.controller_of(user)) == fight.get_team_idx(target) \
        else "(wtf dude you just healed an enemy lol)"
    fight.log(
        f"- {_emoji(user)} HEAL: **{user.name}** has healed **{target.name}** by "
        f"**{fmt_num(target.health - old)}** health... {lol}".rstrip()
    )


Heal = Ability(
    name="Heal",
    description="Heals the target by 15% of the healer's max health",
    cooldown=4, extra_turns=0, damage=0, stamina=25, dodge_score=0,
    target=TARGET_ALLY, effect=_heal,
)


def _freeze(label: str, flavor: str, turns: int = 3):
    def effect(fight, user, target, damage):
        target.frozen_for += turns
        fight.log(f"- {_emoji(user)} {label}: **{user.name}** {flavor.format(target=target.name, turns=turns)}")
    return effect


LifeShot = Ability(
    name="Life Shot",
    description="Causes your opponent's soul to leave their body for some turns",
    cooldown=11, extra_turns=0, damage=0, stamina=50, dodge_score=0, special=True,
    effect=_freeze("LIFE SHOT", "has caused **{target}**'s soul to leave their body for {turns} turns..."),
)


# ---------------------------------------------------------------------------
# clones
# ---------------------------------------------------------------------------

def _clone_of(source, name: str) -> FightableNPC:
    sp = {k: round(v) / 10 for k, v in source.skill_points.items()}
    return FightableNPC(
        id=f"clone_{generate_random_id()[:8]}",
        name=name,
        emoji=source.stand.emoji if source.stand else "🤷‍♂️",
        level=max(1, round(source.level / 10)),
        skill_points=sp,
        stand=source.stand.id if source.stand else None,
        equipped_items=dict(source.equipped_items),
        stands_evolved=dict(source.stands_evolved),
    )


def _clone_effect(label: str, clone_self: bool):
    def effect(fight, user, target, damage):
        source = user if clone_self else target
        if clone_self:
            name = f"{user.name}'s {label.title()}"
        else:
            name = f"{user.name}'s {label.title()} [{source.name} CLONE]"
        npc = _clone_of(source, name)
        team_idx = fight.get_team_idx(fight.controller_of(user))
        clone = fight.add_fighter(npc, team_idx)
        fight.log(f"- {_emoji(user)} {label}: **{user.name}** has created a clone of **{source.name}**...")

        def vanish(f):
            if f.remove_fighter(clone.id):
                f.log(f"- {_emoji(user)} {label}: **{user.name}**'s clone of **{source.name}** has disappeared...")

        fight.schedule_round(3, vanish)
    return effect


LifeGiver = Ability(
    name="Life Giver",
    description="Gold Experience can imbue inanimate objects with life, creating living organisms. "
                "These organisms can be used for various purposes, such as attacking enemies or "
                "providing support to allies",
    cooldown=5, extra_turns=0, damage=0, stamina=50, dodge_score=0, special=True,
    target=TARGET_ANY, effect=_clone_effect("LIFE GIVER", clone_self=False),
)

SandClone = Ability(
    name="Sand Clone",
    description="The Fool can create clones of itself out of sand, which can be used to attack or defend",
    cooldown=2, extra_turns=0, damage=0, stamina=50, dodge_score=0,
    target=TARGET_SELF, effect=_clone_effect("SAND CLONE", clone_self=True),
)

SandProjectiles = Ability(
    name="Sand Projectiles",
    description="shoot or propel sand at high speeds towards its targets",
    cooldown=5, extra_turns=1, damage=14, stamina=20, dodge_score=2,
)


def _sand_mimicry(fight, user, target, damage):
    old_perception = user.skill_points["perception"]
    user.skill_points["perception"] *= 100
    fight.log(f"- {_emoji(user)} SAND MIMICRY: **{user.name}**'s perception has been boosted by x100...")

    def reset(f):
        if f.find_fighter(user.id) is None:
            return
        user.skill_points["perception"] = old_perception
        f.log(f"- {_emoji(user)} SAND MIMICRY: **{user.name}**'s perception has been reset...")

    fight.schedule_round(3, reset)


SandMimicry = Ability(
    name="Sand Mimicry",
    description="The Fool can disperse its body to avoid physical attacks or slip through narrow "
                "spaces, attacking remotely (x100 perception huge boost for **3 turns**)",
    cooldown=6, extra_turns=0, damage=0, stamina=20, dodge_score=0,
    target=TARGET_SELF, effect=_sand_mimicry,
)

SandStorm = Ability(
    name="Sand Storm",
    description="has the ability to create sandstorms, hindering visibility and disorienting opponents",
    cooldown=9, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    special=True, effect=_speed_debuff("SAND STORM"),
)


def _self_heal(fight, user, target, damage):
    old = user.health
    user.incr_health(round(user.max_health * 0.15))
    fight.log(
        f"- {_emoji(user)} SAND SELF HEALING: **{user.name}** has healed himself by "
        f"**{fmt_num(user.health - old)}** health..."
    )


SandSelfHealing = Ability(
    name="Sand Self Healing",
    description="can heal itself (+15% max health) by reforming its sand particles around injuries "
                "and aiding in the recovery process",
    cooldown=8, extra_turns=0, damage=0, stamina=15, dodge_score=0,
    target=TARGET_SELF, effect=_self_heal,
)


# ---------------------------------------------------------------------------
# weapon abilities
# ---------------------------------------------------------------------------

SwiftStrike = Ability(
    name="Swift Strike",
    description="Unleash a lightning-fast strike with your katana, dealing massive damage.",
    cooldown=5, extra_turns=1, damage=15, stamina=30, dodge_score=3,
)


def _berserkers_fury(fight, user, target, damage):
    strength_up = round(user.skill_points["strength"] * 0.25)
    defense_down = round(user.skill_points["defense"] * 0.1)
    max_health_down = round(user.max_health * 0.1)
    health_down = round(user.health * 0.1)

    user.skill_points["strength"] += strength_up
    user.skill_points["defense"] -= defense_down
    user.max_health -= max_health_down
    user.health = max(0, min(user.health - health_down, user.max_health))
    fight.log(
        f"😤 **{user.name}** enters a state of berserker's fury! Their strength is increased by "
        f"**{strength_up}**, but their defense and max health suffer."
    )

    def wear_off(f):
        user.skill_points["strength"] -= strength_up
        user.skill_points["defense"] += defense_down
        user.max_health += max_health_down
        if user.alive:
            user.incr_health(health_down)
        f.log(f"😤 **{user.name}**'s berserker's fury has worn off.")

    fight.schedule_round(3, wear_off)


BerserkersFury = Ability(
    name="Berserker's Fury",
    description="Enter a state of berserk fury, greatly increasing your attack power for a limited time.",
    cooldown=6, extra_turns=4, damage=0, stamina=20, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_berserkers_fury,
)


def _rampage(fight, user, target, damage):
    for x in fight.enemies_of(user):
        if not fight.roll_hits(user, x, 4):
            fight.log(f"- {_emoji(user)} RAMPAGE: **{x.name}** dodged.")
            continue
        dealt = fight.deal_damage(user, x, round(get_attack_damages(user) * 1.75))
        fight.log(f"- {_emoji(user)} RAMPAGE: **{user.name}** has dealt **{fmt_num(dealt)}** damages to **{x.name}**.")


BerserkersRampage = Ability(
    name="Berserker's Rampage",
    description="Enter a state of berserk rampage, attacking every enemies with a flurry of strikes. "
                "[true dodge score: 4]",
    cooldown=7, extra_turns=4, damage=0, stamina=20, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_rampage,
)


def _knives_throw(fight, user, target, damage):
    for _ in range(4):
        if not target.alive:
            break
        if fight.roll_dodge(target, user, 1):
            fight.log(f"- {_emoji(user)} KNIVES THROW: **{target.name}** dodged.")
            continue
        dealt = fight.deal_damage(user, target, round(get_attack_damages(user) * 0.75))
        stamina = round(target.max_stamina * 0.03)
        target.stamina = max(0, target.stamina - stamina)
        fight.log(
            f"- {_emoji(user)} KNIVES THROW: **{user.name}** has dealt **{fmt_num(dealt)}** damages to "
            f"**{target.name}** and reduced their stamina by **{stamina}**."
        )


KnivesThrow = Ability(
    name="Knives Throw",
    description="Throw a flurry of knives at your opponent, dealing damage and reducing their "
                "stamina by 3% of their max stamina",
    cooldown=5, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    effect=_knives_throw,
)


def _gasoline_bullets(fight, user, target, damage):
    for x in fight.enemies_of(user):
        if not fight.roll_hits(user, x, 2):
            fight.log(f"- {_emoji(user)} GASOLINE BULLETS: **{x.name}** dodged...")
            continue
        dealt = fight.deal_damage(user, x, round(get_attack_damages(user) * 3))
        fight.log(
            f"- {_emoji(user)} GASOLINE BULLETS: **{user.name}** has dealt **{fmt_num(dealt)}** "
            f"damages to **{x.name}**."
        )


GasolineBullets = Ability(
    name="Gasoline Bullets",
    description="Shoots bullets made of gasoline to every enemies [true dodge score: 2]",
    cooldown=5, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    effect=_gasoline_bullets,
)

CarCrash = Ability(
    name="Car Crash",
    description="Crashes a car into the opponent, dealing massive damage.",
    cooldown=5, extra_turns=0, damage=StandBarrage.damage, stamina=30, dodge_score=0,
)


def _transformation(fight, user, target, damage):
    old = copy.deepcopy(user.skill_points)
    for stat in user.skill_points:
        user.skill_points[stat] *= 2
    fight.log(f"- {_emoji(user)} TRANSFORMATION: **{user.name}**'s skill points have been boosted by 100%...")

    def wear_off(f):
        user.skill_points.update(old)
        f.log(f"- {_emoji(user)} TRANSFORMATION: **{user.name}**'s transformation EFFECT has disappeared...")

    fight.schedule_round(3, wear_off)


Transformation = Ability(
    name="Transformation",
    description="Boosts all your skill points by 100% for 2 turns",
    cooldown=5, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_transformation,
)


def _rage(fight, user, target, damage):
    state = {"health": user.health}
    old_strength = user.skill_points["strength"]
    end_id = generate_random_id()
    fight.log(f"- {_emoji(user)} RAGE: **{user.name}** has entered a state of rage...")

    def check(f):
        if user.health < state["health"]:
            gained = round((state["health"] - user.health) * 0.05)
            user.skill_points["strength"] += gained
            state["health"] = user.health
            f.log(f"- {_emoji(user)} RAGE: **{user.name}** has gained **{gained}** strength due to rage...")
        if f.has_scheduled(end_id):
            f.schedule_turn(1, check)

    fight.schedule_turn(1, check)

    def calm_down(f):
        user.skill_points["strength"] = old_strength
        f.log(f"- {_emoji(user)} RAGE: **{user.name}**'s rage EFFECT has disappeared...")

    fight.schedule_round(4, calm_down, id=end_id)


Rage = Ability(
    name="Rage",
    description="When enabled, the more damage you take, the more damage you deal for 3 turns "
                "(+5 strength everytime you loose 1% of your max health). [USABLE PASSIVE, USES NO STAMINA]",
    cooldown=5, extra_turns=0, damage=0, stamina=0, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_rage,
)

ScytheSlash = Ability(
    name="Scythe Slash",
    description="Slash your opponent with your scythe, dealing damage.",
    cooldown=3, extra_turns=0, damage=20, stamina=5, dodge_score=0,
)


def _mysterious_gas(fight, user, target, damage):
    for x in fight.enemies_of(user):
        if not fight.roll_hits(user, x, 3):
            fight.log(f"- {_emoji(user)} MYSTERIOUS GAS: **{x.name}** resisted.")
        else:
            x.frozen_for += 3
            fight.log(f"- {_emoji(user)} MYSTERIOUS GAS: **{user.name}** has confused **{x.name}** for 3 turns...")


MysteriousGas = Ability(
    name="Mysterious Gas",
    description="Release a mysterious gas that will confuse every enemies for 3 turns [true dodge score: 3]",
    cooldown=7, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_mysterious_gas,
)


def _poison_gas(fight, user, target, damage):
    poison = round(get_attack_damages(user))
    fight.log(f"> {_emoji(user)} POISON GAS: **{user.name}** has released a poisonous gas...")

    def spread(f):
        side = f.get_team_idx(f.controller_of(user))
        for x in [w for w in f.fighters if w.alive]:
            if f.get_team_idx(f.controller_of(x)) != side:
                dealt = f.deal_damage(user, x, poison, ignore_defense=True)
            else:
                dealt = x.incr_health(-round(poison * 0.1))
            f.log(f"- {_emoji(user)} POISON GAS: **{user.name}** has dealt **{fmt_num(abs(dealt))}** damages to **{x.name}**.")

    fight.schedule_turn(4, spread)


PoisonGas = Ability(
    name="Poison Gas",
    description="Release a poisonous gas that will poison every enemies for 3 turns This will also "
                "damage your teammates including you but 90% less",
    cooldown=8, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_poison_gas,
)


def _heal_barrage(fight, user, target, damage):
    dealt = fight.deal_damage(user, target, get_ability_damage(user, StandBarrage))
    heal = dealt * 2
    fight.log(f"> {_emoji(user)} HEAL BARRAGE: **{user.name}** has dealt **{fmt_num(dealt)}** damages to **{target.name}**.")
    for x in fight.allies_of(user, include_self=False):
        x.incr_health(heal)
        fight.log(f"- {_emoji(user)} HEAL BARRAGE: **{user.name}** has healed **{x.name}** by **{fmt_num(heal)}** ❤️.")


HealBarrage = Ability(
    name="Heal Barrage",
    description="Basic Stand Barrage but heals your allies by 200% of the damages done",
    cooldown=4, extra_turns=0, damage=0, stamina=25, dodge_score=StandBarrage.dodge_score,
    effect=_heal_barrage,
)


def _restoration(fight, user, target, damage):
    heal = round(user.max_health * 0.1)
    for x in fight.allies_of(user, include_self=False):
        x.incr_health(heal)
        fight.log(f"- {_emoji(user)} RESTORATION: **{user.name}** has healed **{x.name}** by **{fmt_num(heal)}** ❤️.")


Restoration = Ability(
    name="Restoration",
    description="Heals 10% of the healer's max health to every allies, except yourself. "
                "[Do not use this ability if you don't have any allies]",
    cooldown=6, extra_turns=0, damage=0, stamina=35, dodge_score=0,
    target=TARGET_SELF, effect=_restoration,
)

YoAngelo = Ability(
    name="Yo Angelo",
    description="Transforms the target into a rock for 3 turns",
    cooldown=8, extra_turns=0, damage=0, stamina=50, dodge_score=2, special=True,
    effect=_freeze("YO ANGELO", "has transformed **{target}** into a rock for {turns} turns... LOL GET CLAPPED BOZO"),
)


def _heal_punch(fight, user, target, damage):
    dealt = fight.deal_damage(user, target, round(get_ability_damage(user, StandBarrage) * 0.75))
    fight.log(f"> {_emoji(user)} HEAL PUNCH: **{user.name}** has dealt **{fmt_num(dealt)}** damages to **{target.name}**.")
    heal = round(dealt * 1.5)
    for x in fight.allies_of(user, include_self=False):
        x.incr_health(heal)
        fight.log(f"- {_emoji(user)} HEAL PUNCH: **{user.name}** has healed **{x.name}** by **{fmt_num(heal)}** ❤️.")


HealPunch = Ability(
    name="Heal Punch",
    description="Punches the target, healing your teammates by 150% of the damage dealt",
    cooldown=4, extra_turns=0, damage=0, stamina=25, dodge_score=0,
    effect=_heal_punch,
)

CoinBarrage = replace(
    StandBarrage,
    name="Coin Barrage",
    description="Unleash a barrage of coins, that explode on impact",
)


# ---------------------------------------------------------------------------
# purple haze
# ---------------------------------------------------------------------------

def _capsule_shot(fight, user, target, damage):
    dealt = fight.deal_damage(user, target, get_attack_damages(user))
    fight.log(f"> {_emoji(user)} CAPSULE SHOT: **{user.name}** has dealt **{fmt_num(dealt)}** damages to **{target.name}**.")
    poison = max(1, round(get_ability_damage(user, CrossfireHurricane) / 10))
    _dot(fight, user, target, poison, "☠️🧪☣️", "poison", turns=5)


CapsuleShot = Ability(
    name="Capsule Shot",
    description="shoot the capsules from your fist at your enemy, poisoning them for 5 turns.",
    cooldown=7, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    effect=_capsule_shot,
)


# ---------------------------------------------------------------------------
# ranged stands
# ---------------------------------------------------------------------------

LightManifestation = Ability(
    name="Light Manifestation",
    description="Become light and slash your opponent for heavy, giving you 2 extra turns. Not dodgeable",
    cooldown=3, extra_turns=2, damage=35, stamina=15, dodge_score=0,
)


def _wrist_knives(fight, user, target, damage):
    for x in fight.enemies_of(user):
        for _ in range(2):
            if not x.alive:
                break
            if not fight.roll_hits(user, x, 3):
                fight.log(f"- {_emoji(user)} WRIST KNIVES: **{x.name}** dodged.")
                continue
            dealt = fight.deal_damage(user, x, get_attack_damages(user))
            fight.log(f"- {_emoji(user)} WRIST KNIVES: **{user.name}** has dealt **{fmt_num(dealt)}** damages to **{x.name}**.")


WristKnives = Ability(
    name="Wrist Knives",
    description="Shoots knives from your wrists at all your enemies (x2 knives). [true dodge score: 3, hardly dodgeable]",
    cooldown=5, extra_turns=0, damage=0, stamina=15, dodge_score=0,
    target=TARGET_SELF, effect=_wrist_knives,
)

HomingBullets = Ability(
    name="Homing Bullets",
    description="Shoots a bullet that will follow the enemy and hit him. This bullet can change its "
                "trajectory and is very hard to dodge.",
    cooldown=3, extra_turns=0, damage=35, stamina=30, dodge_score=5,
)

RapidStrikes = Ability(
    name="Rapid Strikes - Wing Cutter",
    description="Tower of Gray's wings move at incredible speeds, delivering a flurry of razor-sharp "
                "strikes to the enemy.",
    cooldown=4, extra_turns=0, damage=20, stamina=25, dodge_score=4,
)

Razor_SharpScales = replace(
    RapidStrikes,
    name="Razor-Sharp Scales",
    description="Dark Blue Moon can also use its scales as projectiles, throwing them against the enemy.",
)

ObjectManipulation = replace(
    KickBarrage,
    name="Object Manipulation",
    description="Strength is capable of manipulating objects to attack the enemy.",
    cooldown=0, damage=12,
)

ViolentBurst = Ability(
    name="Violent Burst",
    description="Spice Girl quickly makes an object go back to its original state making a burst "
                "happen sending the enemy back",
    cooldown=6, extra_turns=0, damage=StandBarrage.damage + 4, stamina=15, dodge_score=1,
)


# ---------------------------------------------------------------------------
# bones
# ---------------------------------------------------------------------------

def _bones_enlargement(fight, user, target, damage):
    old_max = user.max_health
    user.max_health *= 2
    user.health *= 2
    fight.log(f"- {_emoji(user)} BONES ELARGEMENT: **{user.name}**'s bones have been enlarged...")

    def shrink(f):
        user.max_health = old_max
        user.health = min(user.health, user.max_health)
        f.log(f"- {_emoji(user)} BONES ELARGEMENT: **{user.name}**'s bones have returned to their normal size...")

    fight.schedule_round(3, shrink)


BonesElargement = Ability(
    name="Bones Elargement",
    description="Makes your bones bigger, doubling your max health for 3 turns",
    cooldown=5, extra_turns=0, damage=0, stamina=20, dodge_score=0,
    special=True, target=TARGET_SELF, effect=_bones_enlargement,
)


def _bone_crush(label: str, multiplier: float):
    def effect(fight, user, target, damage):
        bleed_effect(Finisher)(fight, user, target, damage)
        dealt = fight.deal_damage(user, target, round(get_attack_damages(user) * multiplier))
        fight.log(f"- {_emoji(user)} {label}: **{user.name}** has dealt **{fmt_num(dealt)}** damages to **{target.name}**.")
    return effect


ArmSplitter = Ability(
    name="Arm Splitter",
    description="You enclose your opponents arm bones until they snap, causing bleed damage and does "
                "dmg based on strength.",
    cooldown=7, extra_turns=0, damage=0, stamina=30, dodge_score=0,
    special=True, effect=_bone_crush("ARM SPLITTER", 1.89),
)

FistEnlargement = replace(
    Finisher,
    name="Fist Enlargement",
    description="You enlarge your fist, throwing a giant fist at the enemy! Does damage based on strength.",
)

HeartBreaker = Ability(
    name="Heart Breaker",
    description="You enclose your opponents ribs, causing it to press down on the opponents lungs and "
                "heart. Bleed damage and does damage based on strength, giving you an extra turn",
    cooldown=10, extra_turns=1, damage=0, stamina=70, dodge_score=0,
    special=True, effect=_bone_crush("HEART BREAKER", 3.5),
)

BoneSpear = replace(
    KickBarrage,
    name="Bone Spear",
    description="You throw a spear made of bone at the enemy.",
)


ALL_ABILITIES = {
    v.name: v for v in list(globals().values()) if isinstance(v, Ability)
}
