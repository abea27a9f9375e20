"""Raid bosses and the helpers to run a raid fight."""
import random
import time

from rpg import npcs
from rpg.fight import Fighter, FightHandler, FightError
from rpg.types import RaidBoss, Rewards, ItemReward
from utils.functions import match_name

INF = float("inf")

DioRaid = RaidBoss(
    boss=npcs.Dio, minions=[],
    base_rewards=Rewards(coins=5000, xp=25000, items=[
        *[ItemReward(item="stand_arrow", chance=300) for _ in range(4)],
        ItemReward(item="dios_knives", chance=5),
    ]),
    level=0, max_level=INF, max_players=10, cooldown=5 * 60,
)

JotaroRaid = RaidBoss(
    boss=npcs.Jotaro, minions=[],
    base_rewards=Rewards(coins=5000, xp=30000, items=[
        ItemReward(item="stand_arrow", chance=100),
        ItemReward(item="jotaros_hat", chance=3),
        ItemReward(item="star_platinum.$disc$", chance=25),
    ]),
    level=0, max_level=INF, max_players=10, cooldown=5 * 60,
)

BanditBossRaid = RaidBoss(
    boss=npcs.BanditLeader, minions=[npcs.Bandit],
    base_rewards=Rewards(coins=1000, xp=2500, items=[ItemReward(item="stand_arrow", chance=100)]),
    level=0, max_level=npcs.BanditLeader.level + 5, max_players=5, cooldown=2 * 60,
)

KakyoinRaid = RaidBoss(
    boss=npcs.Kakyoin, minions=[],
    base_rewards=Rewards(xp=5000, items=[
        ItemReward(item="stand_arrow", chance=100),
        ItemReward(item="kakyoins_snazzy_shades", chance=25),
    ]),
    level=0, max_level=15, max_players=5, cooldown=2 * 60,
)

RequiemPolnareffRaid = RaidBoss(
    boss=npcs.RequiemPolnareff, minions=[],
    base_rewards=Rewards(coins=20000, xp=75000, items=[
        ItemReward(item="stand_arrow", chance=70),
        ItemReward(item="requiem_arrow", chance=5),
    ]),
    level=50, max_level=INF, max_players=6, cooldown=15 * 60,
)

RAIDS = {r.id: r for r in (DioRaid, JotaroRaid, BanditBossRaid, KakyoinRaid, RequiemPolnareffRaid)}


def find_raid(query: str) -> RaidBoss | None:
    if query in RAIDS:
        return RAIDS[query]
    by_name = {r.boss.name: r for r in RAIDS.values()}
    hit, _ = match_name(list(by_name), query or "")
    return by_name.get(hit) if hit else None


def raid_level(raid: RaidBoss, participants: list[dict]) -> int:
    if not participants:
        return raid.level
    avg = round(sum(p["level"] for p in participants) / len(participants))
    level = max(raid.level, avg)
    if raid.max_level != INF:
        level = min(level, int(raid.max_level))
    return level


def build_raid_fight(raid: RaidBoss, participants: list[dict], rng: random.Random | None = None) -> FightHandler:
    """Players on team 0; the boss plus one set of minions per extra participant on team 1."""
    if not participants:
        raise FightError("Nobody joined the raid.")
    if len(participants) > raid.max_players:
        raise FightError(f"This raid allows at most {raid.max_players} players.")
    level = raid_level(raid, participants)
    players = [Fighter.from_user(p) for p in participants]
    bosses = [Fighter.from_npc(raid.boss, level=level)]
    for _ in range(len(participants) - 1):
        for minion in raid.minions:
            bosses.append(Fighter.from_npc(minion, level=level))
    print(f"[raid] {raid.id} level {level} with {len(players)} player(s), {len(bosses) - 1} minion(s)")
    return FightHandler([players, bosses], type="raid", rng=rng)


def raid_on_cooldown(data: dict, raid: RaidBoss, now: float | None = None) -> int:
    """Seconds left before `data` can raid `raid` again (0 when ready)."""
    now = time.time() if now is None else now
    last = (data.get("raid_cooldowns") or {}).get(raid.id, 0)
    return max(0, int(last + raid.cooldown - now))


def mark_raid_cooldown(data: dict, raid: RaidBoss, now: float | None = None):
    data.setdefault("raid_cooldowns", {})[raid.id] = time.time() if now is None else now


def raid_rewards(raid: RaidBoss, fight: FightHandler, fighter_id: str) -> Rewards | None:
    """Base rewards when `fighter_id` was on the winning side, else None."""
    if any(f.id == fighter_id for f in fight.winning_fighters()):
        return raid.base_rewards
    return None
