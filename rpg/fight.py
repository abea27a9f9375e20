"""
Turn-based fight engine.

A FightHandler owns two or more teams of Fighters. Exactly one fighter is
`current` at a time; `attack`, `defend`, `use_ability` and `forfeit` act for
it and then call `next_turn()`, which ticks the delayed-effect queues and
picks the next fighter. Rounds end when the speed-sorted `order` runs dry.

Delayed effects are ScheduledEffects in one of two queues:
  - next_turn_promises tick once after every action (and every frozen skip)
  - next_round_promises tick once at the start of every new round
A callback receives the fight and runs exactly once when its countdown hits 0.
"""
import random
from dataclasses import dataclass, field
from typing import Callable

from rpg.npcs import balance_npc
from rpg.player import (
    get_field, get_skill_points, get_stand, get_weapon, get_max_health, get_max_stamina,
)
from rpg.types import (
    Ability, TARGET_ENEMY, TARGET_ALLY, TARGET_ONLY_ALLY, TARGET_SELF, TARGET_ANY,
)
from utils.functions import (
    get_attack_damages, get_ability_damage, get_speed_score, get_defense_ratio,
    dodge_threshold, generate_random_id, fmt_num, life_bar,
)
from utils.settings import SETTINGS


class FightError(Exception):
    pass


@dataclass
class ScheduledEffect:
    cooldown: int
    callback: Callable
    id: str


@dataclass
class Turn:
    logs: list[str] = field(default_factory=list)


class Fighter:
    def __init__(self, data, *, is_npc: bool, name: str | None = None, full_health: bool = False):
        self.data = data
        self.is_npc = is_npc
        self.id = str(get_field(data, "id"))
        self.name = name or get_field(data, "name") or get_field(data, "tag") or self.id
        self.level = int(get_field(data, "level", 1) or 0)
        self.stand = get_stand(data)
        self.weapon = get_weapon(data)
        self.equipped_items = dict(get_field(data, "equipped_items") or {})
        self.stands_evolved = dict(get_field(data, "stands_evolved") or {})
        # mutable copy, buffs/debuffs write here
        self.skill_points = get_skill_points(data)

        self.max_health = get_max_health(data)
        self.max_stamina = get_max_stamina(data)
        stored_health = get_field(data, "health")
        stored_stamina = get_field(data, "stamina")
        if full_health or stored_health is None:
            self.health = self.max_health
        else:
            self.health = max(0, min(int(stored_health), self.max_health))
        if full_health or stored_stamina is None:
            self.stamina = self.max_stamina
        else:
            self.stamina = max(0, min(int(stored_stamina), self.max_stamina))

        self.frozen_for = 0
        self.has_stopped_time = False
        self.manipulated_by: "Fighter | None" = None
        self.total_damage_dealt = 0
        self.cooldowns: dict[str, int] = {}
        self.defending = False
        self.extra_turns = 0

    @classmethod
    def from_user(cls, data: dict) -> "Fighter":
        return cls(data, is_npc=False, name=data.get("tag"))

    @classmethod
    def from_npc(cls, npc, level: int | None = None) -> "Fighter":
        if level is not None and level != npc.level:
            npc = balance_npc(npc, level)
        return cls(npc, is_npc=True, full_health=True)

    @property
    def alive(self) -> bool:
        return self.health > 0

    @property
    def abilities(self) -> list[Ability]:
        out = list(self.stand.abilities) if self.stand else []
        if self.weapon:
            out.extend(self.weapon.abilities)
        return out

    @property
    def emoji(self) -> str:
        if self.stand:
            return self.stand.emoji
        return get_field(self.data, "emoji") or "👤"

    def incr_health(self, amount: int) -> int:
        """Clamp into [0, max_health]. Returns the signed change actually applied."""
        old = self.health
        self.health = max(0, min(self.max_health, self.health + int(amount)))
        return self.health - old

    def __repr__(self):
        return f"<Fighter {self.id} {self.name} {self.health}/{self.max_health}>"


class FightHandler:
    def __init__(self, teams: list[list[Fighter]], *, type: str = "npc",
                 rng: random.Random | None = None, fight_id: str | None = None):
        if len(teams) < 2:
            raise FightError("A fight needs at least two teams.")
        self.id = fight_id or generate_random_id()
        self.type = type
        self.rng = rng or random.Random()
        self.teams: list[list[Fighter]] = []
        for team in teams:
            self.teams.append([])
            for f in team:
                self._register(f, len(self.teams) - 1)
        self.turns: list[Turn] = []
        self.next_turn_promises: list[ScheduledEffect] = []
        self.next_round_promises: list[ScheduledEffect] = []
        self.cache: dict = {}
        self.round = 0
        self.order: list[Fighter] = []
        self.current: Fighter | None = None
        self.ended = False
        self.winners: int | None = None
        print(f"[fight] {self.id} started ({self.type}): "
              + " vs ".join(", ".join(f.name for f in t) for t in self.teams))
        self.next_turn()

    # ------------------------------------------------------------------
    # roster
    # ------------------------------------------------------------------

    @property
    def fighters(self) -> list[Fighter]:
        return [f for team in self.teams for f in team]

    def _register(self, fighter: Fighter, team_idx: int):
        # npc templates repeat (minions, clones of the same source)
        base, n = fighter.id, 1
        while self.find_fighter(fighter.id) is not None:
            n += 1
            fighter.id = f"{base}_{n}"
        self.teams[team_idx].append(fighter)

    def find_fighter(self, fighter_id: str) -> Fighter | None:
        for f in self.fighters:
            if f.id == fighter_id:
                return f
        return None

    def get_team_idx(self, fighter: Fighter) -> int:
        for idx, team in enumerate(self.teams):
            if any(f is fighter for f in team):
                return idx
        return -1

    def controller_of(self, fighter: Fighter) -> Fighter:
        return fighter.manipulated_by or fighter

    def _side(self, fighter: Fighter) -> int:
        return self.get_team_idx(self.controller_of(fighter))

    def enemies_of(self, fighter: Fighter) -> list[Fighter]:
        side = self._side(fighter)
        return [f for f in self.fighters if f.alive and self._side(f) != side]

    def allies_of(self, fighter: Fighter, include_self: bool = True) -> list[Fighter]:
        side = self._side(fighter)
        return [
            f for f in self.fighters
            if f.alive and self._side(f) == side and (include_self or f is not fighter)
        ]

    def add_fighter(self, npc, team_idx: int) -> Fighter:
        fighter = Fighter.from_npc(npc)
        self._register(fighter, team_idx)
        return fighter

    def remove_fighter(self, fighter_id: str) -> bool:
        f = self.find_fighter(fighter_id)
        if f is None:
            return False
        self.teams[self.get_team_idx(f)].remove(f)
        self.order = [x for x in self.order if x is not f]
        for other in self.fighters:
            if other.manipulated_by is f:
                other.manipulated_by = None
        return True

    def winning_fighters(self) -> list[Fighter]:
        if self.winners is None:
            return []
        return list(self.teams[self.winners])

    # ------------------------------------------------------------------
    # logging & scheduling
    # ------------------------------------------------------------------

    def log(self, msg: str):
        if not self.turns:
            self.turns.append(Turn())
        self.turns[-1].logs.append(msg)

    def schedule_turn(self, cooldown: int, callback: Callable, id: str | None = None) -> str:
        effect = ScheduledEffect(cooldown=cooldown, callback=callback, id=id or generate_random_id())
        self.next_turn_promises.append(effect)
        return effect.id

    def schedule_round(self, cooldown: int, callback: Callable, id: str | None = None) -> str:
        effect = ScheduledEffect(cooldown=cooldown, callback=callback, id=id or generate_random_id())
        self.next_round_promises.append(effect)
        return effect.id

    def has_scheduled(self, effect_id: str) -> bool:
        return any(e.id == effect_id for e in self.next_turn_promises + self.next_round_promises)

    def _tick(self, queue: list[ScheduledEffect]):
        # effects scheduled by a callback wait for the next tick
        due = []
        for effect in list(queue):
            effect.cooldown -= 1
            if effect.cooldown <= 0:
                due.append(effect)
        for effect in due:
            queue.remove(effect)
        for effect in due:
            effect.callback(self)

    # ------------------------------------------------------------------
    # combat math
    # ------------------------------------------------------------------

    def deal_damage(self, user: Fighter | None, target: Fighter, amount: float,
                    ignore_defense: bool = False) -> int:
        """Apply defense and the defend stance, clamp, and credit the attacker. Returns damage dealt."""
        amount = max(0, round(amount))
        if amount and not ignore_defense:
            amount = max(1, round(amount * (1 - get_defense_ratio(target))))
        if amount and target.defending:
            amount = max(1, round(amount / 2))
        dealt = -target.incr_health(-amount)
        if user is not None:
            user.total_damage_dealt += dealt
        return dealt

    def roll_dodge(self, dodger: Fighter, attacker: Fighter, attempts: int) -> bool:
        """True only if `dodger` wins every one of `attempts` rolls."""
        if attempts <= 0:
            return False
        if attacker.has_stopped_time or dodger.frozen_for > 0:
            return False
        threshold = dodge_threshold(dodger, attacker)
        return all(self.rng.random() < threshold for _ in range(attempts))

    def roll_hits(self, user: Fighter, target: Fighter, attempts: int) -> bool:
        """
        Area effects roll from the user's side: every one of `attempts` rolls
        must beat the user's own dodge threshold against `target`, so a quick
        target shrugs the effect off more often. Time stop and a frozen target
        let it land for free.
        """
        if user.has_stopped_time or target.frozen_for > 0:
            return True
        if attempts <= 0:
            return False
        threshold = dodge_threshold(user, target)
        return all(self.rng.random() < threshold for _ in range(attempts))

    # ------------------------------------------------------------------
    # turn flow
    # ------------------------------------------------------------------

    def _time_stopper(self) -> Fighter | None:
        for f in self.fighters:
            if f.has_stopped_time and f.alive:
                return f
        return None

    def _check_end(self) -> bool:
        if self.ended:
            return True
        alive_teams = {idx for idx, team in enumerate(self.teams) if any(f.alive for f in team)}
        if len(alive_teams) > 1:
            return False
        self._end(alive_teams.pop() if alive_teams else None)
        return True

    def _end(self, winners: int | None):
        self.ended = True
        self.winners = winners
        self.current = None
        if winners is None:
            self.log("🏳️ The fight ended in a draw.")
        else:
            self.log("🏆 " + ", ".join(f"**{f.name}**" for f in self.teams[winners]) + " won the fight!")
        print(f"[fight] {self.id} ended after {self.round} round(s), winners: {winners}")

    def _start_round(self):
        self.round += 1
        self.turns.append(Turn())
        if self.round > 1:
            self._tick(self.next_round_promises)
        alive = [f for f in self.fighters if f.alive]
        keyed = [(-get_speed_score(f), self.rng.random(), i) for i, f in enumerate(alive)]
        self.order = [alive[k[2]] for k in sorted(keyed)]

    def _begin(self, fighter: Fighter, extra: bool = False):
        self.current = fighter
        fighter.defending = False
        # extra turns don't count down cooldowns
        if extra:
            return
        for name, cd in list(fighter.cooldowns.items()):
            fighter.cooldowns[name] = max(0, cd - 1)

    def next_turn(self) -> Fighter | None:
        """Close the current action and hand the turn to whoever acts next."""
        if self.ended:
            return None
        prev = self.current
        if prev is not None:
            self._tick(self.next_turn_promises)
        if self._check_end():
            return None

        stopper = self._time_stopper()
        if prev is not None and prev.extra_turns > 0:
            if prev.alive and prev.frozen_for == 0 and self.find_fighter(prev.id) is not None \
                    and stopper in (None, prev):
                prev.extra_turns -= 1
                self._begin(prev, extra=True)
                return prev
            prev.extra_turns = 0

        while True:
            if not self.order:
                if self.round >= SETTINGS.max_rounds:
                    self._end(None)
                    return None
                self._start_round()
                if self._check_end():
                    return None
            f = self.order.pop(0)
            if not f.alive or self.find_fighter(f.id) is not f:
                continue
            stopper = self._time_stopper()
            if stopper is not None and stopper is not f:
                continue
            if f.frozen_for > 0:
                f.frozen_for -= 1
                self.log(f"💤 **{f.name}** can't move...")
                self._tick(self.next_turn_promises)
                if self._check_end():
                    return None
                continue
            self._begin(f)
            return f

    def _actor(self) -> Fighter:
        if self.ended or self.current is None:
            raise FightError("This fight is over.")
        return self.current

    def _resolve_target(self, user: Fighter, mode: str, target: Fighter | None) -> Fighter:
        if mode == TARGET_SELF:
            return user
        if target is None:
            raise FightError("You need to pick a target.")
        if self.find_fighter(target.id) is not target or not target.alive:
            raise FightError(f"{target.name} can't be targeted.")
        same_side = self._side(target) == self._side(user)
        if mode == TARGET_ENEMY and same_side:
            raise FightError(f"{target.name} is on your side.")
        if mode == TARGET_ALLY and not same_side:
            raise FightError(f"{target.name} isn't your ally.")
        if mode == TARGET_ONLY_ALLY and (not same_side or target is user):
            raise FightError("Pick an ally other than yourself.")
        return target

    # ------------------------------------------------------------------
    # actions (always for self.current)
    # ------------------------------------------------------------------

    def attack(self, target: Fighter) -> Fighter | None:
        user = self._actor()
        target = self._resolve_target(user, TARGET_ENEMY, target)
        cost = user.weapon.stamina_cost if user.weapon else SETTINGS.attack_stamina_cost
        if user.stamina < cost:
            self.log(f"😮‍💨 **{user.name}** is out of stamina and defends instead.")
            return self.defend()
        user.stamina -= cost

        custom = user.stand.custom_attack if user.stand and not user.weapon else None
        damage = max(1, round(get_attack_damages(user) * self.rng.uniform(0.9, 1.1)))
        if custom and custom.handle_attack:
            custom.handle_attack(self, user, target, damage)
            return self.next_turn()

        if self.roll_dodge(target, user, 1):
            self.log(f"💨 **{target.name}** dodged **{user.name}**'s attack.")
        else:
            dealt = self.deal_damage(user, target, damage)
            verb = user.weapon.use_message_attack if user.weapon else "attacks"
            self.log(f"{user.emoji} **{user.name}** {verb} **{target.name}** for **{fmt_num(dealt)}** damage.")
            if user.weapon and user.weapon.handle_attack:
                user.weapon.handle_attack(self, user, target, damage)
        return self.next_turn()

    def defend(self) -> Fighter | None:
        user = self._actor()
        user.defending = True
        old = user.stamina
        user.stamina = min(user.max_stamina, user.stamina + round(user.max_stamina * SETTINGS.defend_stamina_regen))
        self.log(f"🛡️ **{user.name}** defends (+{user.stamina - old} stamina).")
        return self.next_turn()

    def use_ability(self, ability: Ability, target: Fighter | None = None) -> Fighter | None:
        user = self._actor()
        if ability.name not in {a.name for a in user.abilities}:
            raise FightError(f"{user.name} can't use {ability.name}.")
        cd = user.cooldowns.get(ability.name, 0)
        if cd > 0:
            raise FightError(f"{ability.name} is on cooldown for {cd} more turn(s).")
        if user.stamina < ability.stamina:
            raise FightError(f"Not enough stamina for {ability.name} ({user.stamina}/{ability.stamina}).")
        target = self._resolve_target(user, ability.target, target)

        user.cooldowns[ability.name] = ability.cooldown
        user.stamina -= ability.stamina
        on = f" on **{target.name}**" if target is not user else ""
        self.log(f"{user.emoji} **{user.name}** used **{ability.name}**{on}!")

        if ability.dodge_score > 0 and self.roll_dodge(target, user, ability.dodge_score):
            self.log(f"💨 **{target.name}** dodged **{ability.name}**.")
            return self.next_turn()

        damage = get_ability_damage(user, ability) if ability.damage > 0 else 0
        if damage:
            dealt = self.deal_damage(user, target, damage)
            self.log(f"💥 **{target.name}** took **{fmt_num(dealt)}** damage.")
        if ability.effect:
            ability.effect(self, user, target, damage)
        user.extra_turns += ability.extra_turns
        return self.next_turn()

    def forfeit(self, fighter: Fighter | None = None) -> Fighter | None:
        fighter = fighter or self._actor()
        if self.ended:
            raise FightError("This fight is over.")
        fighter.health = 0
        self.log(f"🏳️ **{fighter.name}** forfeited.")
        if fighter is self.current:
            return self.next_turn()
        self._check_end()
        return self.current

    def abandon(self) -> list[Fighter]:
        """
        End a fight nobody is playing anymore. Every player still standing
        forfeits; if that doesn't settle it (NPCs left on several sides) the
        fight is a draw. Returns the players that forfeited.
        """
        if self.ended:
            return []
        quitters = [f for f in self.fighters if f.alive and not f.is_npc]
        for f in quitters:
            f.health = 0
            self.log(f"🏳️ **{f.name}** forfeited.")
        if not self._check_end():
            self._end(None)
        print(f"[fight] {self.id} abandoned by {len(quitters)} player(s)")
        return quitters

    # ------------------------------------------------------------------
    # npc driver
    # ------------------------------------------------------------------

    def is_npc_turn(self) -> bool:
        return self.current is not None and self.controller_of(self.current).is_npc

    def _npc_pick_ability(self, user: Fighter):
        usable = [
            a for a in user.abilities
            if user.cooldowns.get(a.name, 0) == 0 and user.stamina >= a.stamina
        ]
        self.rng.shuffle(usable)
        for ability in usable:
            if ability.target == TARGET_SELF:
                return ability, user
            if ability.target in (TARGET_ENEMY, TARGET_ANY):
                enemies = self.enemies_of(user)
                if enemies:
                    return ability, min(enemies, key=lambda f: f.health)
            else:
                allies = self.allies_of(user, include_self=ability.target == TARGET_ALLY)
                hurt = [f for f in allies if f.health < f.max_health]
                if hurt:
                    return ability, min(hurt, key=lambda f: f.health / f.max_health)
        return None, None

    def play_npc_turn(self) -> Fighter | None:
        user = self._actor()
        enemies = self.enemies_of(user)
        if not enemies:
            return self.defend()
        if self.rng.random() < 0.5:
            ability, target = self._npc_pick_ability(user)
            if ability is not None:
                return self.use_ability(ability, target)
        return self.attack(self.rng.choice(enemies))

    def run_npc_turns(self, limit: int = 1000) -> Fighter | None:
        """Play NPC-controlled turns until a human has to act or the fight ends."""
        for _ in range(limit):
            if self.ended or not self.is_npc_turn():
                break
            self.play_npc_turn()
        return self.current

    # ------------------------------------------------------------------
    # output
    # ------------------------------------------------------------------

    def status_lines(self) -> list[str]:
        lines = []
        for idx, team in enumerate(self.teams):
            lines.append(f"**Team {idx + 1}**")
            for f in team:
                mark = "▶️ " if f is self.current else ""
                lines.append(
                    f"{mark}{f.emoji} {f.name} {life_bar(f.health, f.max_health)} "
                    f"❤️ {fmt_num(f.health)}/{fmt_num(f.max_health)} ⚡ {f.stamina}/{f.max_stamina}"
                )
        return lines

    def serialize(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "round": self.round,
            "ended": self.ended,
            "winners": self.winners,
            "teams": [
                [
                    {
                        "id": f.id,
                        "name": f.name,
                        "is_npc": f.is_npc,
                        "level": f.level,
                        "stand": f.stand.id if f.stand else None,
                        "health": f.health,
                        "max_health": f.max_health,
                        "stamina": f.stamina,
                        "max_stamina": f.max_stamina,
                        "total_damage_dealt": f.total_damage_dealt,
                    }
                    for f in team
                ]
                for team in self.teams
            ],
            "turns": [{"logs": list(t.logs)} for t in self.turns],
        }
