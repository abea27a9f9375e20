import random

import pytest

from rpg.fight import Fighter, FightHandler
from rpg.player import new_user_data, heal_full
from rpg.types import FightableNPC, skill_points
from utils import players

NOON = 1699963200  # 2023-11-14 12:00 UTC
NEVER_DODGE = 0.99
ALWAYS_DODGE = 0.0


class FixedRng(random.Random):
    """random() always returns `value`: 0.99 never dodges, 0.0 always does."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def store(tmp_path, monkeypatch):
    path = tmp_path / "players.json"
    monkeypatch.setattr(players, "REG_PATH", str(path))
    return path


@pytest.fixture
def user():
    return new_user_data(1, "tester#0001", now=NOON)


def make_user(uid=1, stand=None, level=1, **sp):
    data = new_user_data(uid, f"user{uid}", now=NOON)
    data["stand"] = stand
    data["level"] = level
    data["skill_points"].update(sp)
    heal_full(data)
    return data


def dummy(id="dummy", level=1, **sp):
    return FightableNPC(id=id, name=id.title(), emoji="🎯", level=level, skill_points=skill_points(**sp))


def duel(a_data=None, *others, rng_value=NEVER_DODGE, allies=()):
    """A user fighter (plus optional user allies) against npc fighters; the user acts first."""
    a = Fighter.from_user(a_data or make_user(1, speed=4))
    team = [a] + [Fighter.from_user(d) for d in allies]
    bs = [Fighter.from_npc(o) for o in (others or (dummy(),))]
    return FightHandler([team, bs], rng=FixedRng(rng_value)), a, bs
