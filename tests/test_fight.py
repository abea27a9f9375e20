import json
import random

import pytest

from rpg import abilities as A
from rpg.fight import Fighter, FightHandler, FightError
from rpg.npcs import Bandit
from utils.settings import SETTINGS
from tests.conftest import ALWAYS_DODGE, duel, make_user, dummy


def test_needs_two_teams():
    with pytest.raises(FightError):
        FightHandler([[Fighter.from_npc(dummy())]])


def test_fastest_fighter_starts():
    fight, a, (b,) = duel()
    assert fight.round == 1
    assert fight.current is a


def test_duplicate_ids_are_made_unique():
    fight = FightHandler([[Fighter.from_npc(Bandit)], [Fighter.from_npc(Bandit)]], rng=random.Random(3))
    assert [f.id for f in fight.fighters] == ["bandit", "bandit_2"]


def test_turn_effects_fire_in_countdown_order():
    fight, a, (b,) = duel()
    calls = []
    fight.schedule_turn(2, lambda f: calls.append("two"))
    fight.schedule_turn(1, lambda f: calls.append("one"))
    fight.defend()
    assert calls == ["one"]
    fight.defend()
    assert calls == ["one", "two"]


def test_effects_scheduled_by_a_callback_wait_for_the_next_tick():
    fight, a, (b,) = duel()
    calls = []
    fight.schedule_turn(1, lambda f: f.schedule_turn(1, lambda g: calls.append("late")))
    fight.defend()
    assert calls == []
    fight.defend()
    assert calls == ["late"]


def test_round_effects_tick_at_round_start():
    fight, a, (b,) = duel()
    calls = []
    eid = fight.schedule_round(1, lambda f: calls.append(f.round))
    assert fight.has_scheduled(eid)
    fight.defend()
    assert calls == []
    fight.defend()
    assert calls == [2]
    assert not fight.has_scheduled(eid)


def test_zero_dodge_attempts_never_dodge():
    fight, a, (b,) = duel(rng_value=ALWAYS_DODGE)
    assert not fight.roll_dodge(b, a, 0)
    assert fight.roll_dodge(b, a, 1)
    b.frozen_for = 1
    assert not fight.roll_dodge(b, a, 3)


def test_attack_deals_damage_and_credits_attacker():
    fight, a, (b,) = duel()
    fight.attack(b)
    assert b.health < b.max_health
    assert a.total_damage_dealt == b.max_health - b.health
    assert a.stamina == a.max_stamina - SETTINGS.attack_stamina_cost
    assert fight.current is b


def test_dodged_attack_deals_nothing():
    fight, a, (b,) = duel(rng_value=ALWAYS_DODGE)
    fight.attack(b)
    assert b.health == b.max_health
    assert "dodged" in fight.turns[-1].logs[-1]


def test_defend_halves_damage():
    fight, a, (b,) = duel()
    assert fight.deal_damage(a, b, 10) == 10
    b.defending = True
    assert fight.deal_damage(a, b, 10) == 5


def test_out_of_stamina_attack_becomes_defend():
    fight, a, (b,) = duel()
    a.stamina = 0
    fight.attack(b)
    assert b.health == b.max_health
    assert a.defending
    assert a.stamina > 0


def test_cannot_attack_an_ally_or_use_foreign_ability():
    fight, a, (b,) = duel()
    with pytest.raises(FightError):
        fight.attack(a)
    with pytest.raises(FightError):
        fight.use_ability(A.TheWorld)


def test_ability_cooldown_and_extra_turn():
    fight, a, (b,) = duel(make_user(1, stand="star_platinum"))
    fight.use_ability(A.StandBarrage, b)
    assert fight.current is a
    assert b.health < b.max_health
    with pytest.raises(FightError, match="cooldown"):
        fight.use_ability(A.StandBarrage, b)


def test_not_enough_stamina_for_ability():
    fight, a, (b,) = duel(make_user(1, stand="star_platinum"))
    a.stamina = 1
    with pytest.raises(FightError, match="stamina"):
        fight.use_ability(A.StarFinger, b)
    assert a.cooldowns.get(A.StarFinger.name, 0) == 0


def test_time_stop_skips_everyone_else_and_cannot_be_dodged():
    fight, a, (b,) = duel(make_user(1, stand="the_world"), rng_value=ALWAYS_DODGE)
    fight.use_ability(A.TheWorld)
    assert a.has_stopped_time
    assert fight.current is a
    fight.attack(b)
    assert b.health < b.max_health
    for _ in range(3):
        fight.defend()
        assert fight.current is a
    fight.defend()
    assert not a.has_stopped_time
    assert fight.current is b


def test_frozen_fighter_loses_turns_and_ticks_effects():
    fight, a, (b,) = duel()
    calls = []
    fight.schedule_turn(2, lambda f: calls.append("x"))
    b.frozen_for = 2
    fight.defend()
    assert fight.current is a
    assert fight.round == 2
    assert b.frozen_for == 1
    assert calls == ["x"]
    assert any("can't move" in log for log in fight.turns[0].logs)


def test_life_shot_freezes_target():
    fight, a, (b,) = duel(make_user(1, stand="gold_experience"))
    fight.use_ability(A.LifeShot, b)
    assert fight.current is a
    assert b.frozen_for == 2


def test_manipulation_switches_sides_then_wears_off():
    fight, a, (b, c) = duel(make_user(1, stand="hierophant_green"), dummy("b"), dummy("c"))
    fight.use_ability(A.Manipulation, b)
    assert b.manipulated_by is a
    assert b.name.endswith("(Manipulated)")
    assert fight.enemies_of(a) == [c]
    assert b in fight.allies_of(a)
    # b now acts for a's side
    assert fight.current is b
    with pytest.raises(FightError):
        fight.attack(a)
    while fight.round < 3:
        fight.defend()
    assert b.manipulated_by is None
    assert b.name == "B"


def test_clone_joins_then_vanishes():
    fight, a, (b,) = duel(make_user(1, stand="the_fool"))
    fight.use_ability(A.SandClone)
    assert len(fight.teams[0]) == 2
    clone = fight.teams[0][1]
    assert clone.id.startswith("clone_")
    assert clone.is_npc
    while fight.round < 4:
        fight.defend()
    assert fight.teams[0] == [a]


def test_burn_ticks_after_three_turns():
    fight, a, (b,) = duel(make_user(1, stand="magicians_red"))
    fight.use_ability(A.CrossfireHurricane, b)
    assert b.health == b.max_health - 20
    fight.attack(a)
    assert b.health == b.max_health - 20
    fight.defend()
    assert b.health == b.max_health - 22


def test_heal_restores_ally():
    fight, a, (b,) = duel(make_user(1, stand="gold_experience"))
    a.health = 50
    fight.use_ability(A.Heal, a)
    assert a.health == 50 + round(a.max_health * 0.15)


def test_hallucinogen_cuts_enemy_speed():
    fight, a, (b,) = duel(make_user(1, stand="whitesnake", speed=60), dummy(speed=50, perception=20))
    fight.use_ability(A.Hallucinogen)
    assert b.skill_points["speed"] == 5
    assert b.skill_points["perception"] == 2


def test_kill_ends_fight():
    fight, a, (b,) = duel()
    b.health = 1
    assert fight.attack(b) is None
    assert fight.ended
    assert fight.winners == 0
    assert fight.winning_fighters() == [a]
    assert "won the fight" in fight.turns[-1].logs[-1]
    with pytest.raises(FightError):
        fight.defend()


def test_forfeit():
    fight, a, (b,) = duel()
    fight.forfeit()
    assert fight.ended
    assert fight.winners == 1


def test_draw_after_max_rounds(monkeypatch):
    monkeypatch.setattr(SETTINGS, "max_rounds", 1)
    fight, a, (b,) = duel()
    fight.defend()
    fight.defend()
    assert fight.ended
    assert fight.winners is None
    assert "draw" in fight.turns[-1].logs[-1]


def test_npc_fight_runs_to_the_end():
    fight = FightHandler(
        [[Fighter.from_npc(Bandit)], [Fighter.from_npc(Bandit, level=5)]],
        rng=random.Random(7),
    )
    assert fight.is_npc_turn()
    fight.run_npc_turns()
    assert fight.ended


def test_user_fighter_stops_npc_driver():
    fight, a, (b,) = duel()
    assert not fight.is_npc_turn()
    assert fight.run_npc_turns() is a


def test_serialize_is_json_friendly():
    fight, a, (b,) = duel()
    fight.attack(b)
    out = fight.serialize()
    json.dumps(out)
    assert out["round"] == 1
    assert out["teams"][0][0]["id"] == "1"
    assert out["teams"][1][0]["health"] == b.health
    assert out["turns"][0]["logs"]


def test_abandon_forfeits_every_player():
    fight, a, (b,) = duel(make_user(1, speed=4), allies=[make_user(2)])
    quitters = fight.abandon()
    assert [f.id for f in quitters] == ["1", "2"]
    assert fight.ended
    assert fight.winners == 1
    assert fight.winning_fighters() == [b]
    assert fight.abandon() == []


def test_abandoned_pvp_is_a_draw():
    a, b = Fighter.from_user(make_user(1)), Fighter.from_user(make_user(2))
    fight = FightHandler([[a], [b]], type="pvp", rng=random.Random(0))
    fight.abandon()
    assert fight.ended
    assert fight.winners is None
