import pytest

from utils import players
from tests.conftest import make_user


def test_missing_file_is_empty(store):
    assert players.get_user(1) is None
    assert players.all_users() == []


def test_create_save_get_delete(store):
    data = make_user(1)
    assert players.create_user(data)
    assert not players.create_user(data)
    data["coins"] = 42
    players.save_user(data)
    assert players.get_user("1")["coins"] == 42
    assert players.delete_user(1)
    assert not players.delete_user(1)
    assert players.get_user(1) is None


def test_corrupt_file_reads_as_empty(store):
    store.write_text("{not json", encoding="utf-8")
    assert players.get_user(1) is None


def test_leaderboard(store):
    for uid, level, xp, coins in ((1, 5, 10, 100), (2, 5, 900, 50), (3, 2, 0, 9999)):
        d = make_user(uid, level=level)
        d["xp"], d["coins"] = xp, coins
        players.save_user(d)
    assert [u["id"] for u in players.leaderboard("level")] == ["2", "1", "3"]
    assert [u["id"] for u in players.leaderboard("coins", limit=1)] == ["3"]
    with pytest.raises(ValueError):
        players.leaderboard("health")
