import pytest

from utils import cooldowns
from utils.settings import SETTINGS


@pytest.fixture(autouse=True)
def _clean(monkeypatch):
    monkeypatch.setattr(SETTINGS, "cooldowns", {"fight": 10})
    cooldowns.reset()
    yield
    cooldowns.reset()


def test_check_and_touch():
    assert cooldowns.check_and_touch(1, "fight", now=100.0) == 0
    assert cooldowns.check_and_touch(1, "fight", now=104.0) == pytest.approx(6.0)
    assert cooldowns.check_and_touch(2, "fight", now=104.0) == 0
    assert cooldowns.check_and_touch(1, "FIGHT", now=110.0) == 0


def test_commands_without_cooldown_are_always_ready():
    cooldowns.touch(1, "shop", now=0.0)
    assert cooldowns.remaining(1, "shop", now=0.0) == 0
