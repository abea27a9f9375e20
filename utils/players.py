# utils/players.py
import json, os, threading
from utils.settings import SETTINGS

REG_PATH = os.path.join(SETTINGS.data_dir, "players.json")
_lock = threading.Lock()

LEADERBOARD_KEYS = ("level", "coins", "xp")


def _load() -> dict:
    if not os.path.exists(REG_PATH):
        return {}
    with open(REG_PATH, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            print(f"[store] {REG_PATH} is unreadable ({e}); treating as empty")
            return {}


def _save(data: dict):
    """Write the whole registry through a temp file so a crash never truncates it."""
    parent = os.path.dirname(REG_PATH)
    if parent:
        os.makedirs(parent, exist_ok=True)
    tmp = REG_PATH + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(tmp, REG_PATH)


def get_user(user_id) -> dict | None:
    with _lock:
        data = _load()
        return data.get(str(user_id))


def save_user(user_data: dict):
    with _lock:
        data = _load()
        data[str(user_data["id"])] = user_data
        _save(data)


def create_user(user_data: dict) -> bool:
    """Store a brand new record. Returns False if the user already exists."""
    with _lock:
        data = _load()
        uid = str(user_data["id"])
        if uid in data:
            return False
        data[uid] = user_data
        _save(data)
        return True


def delete_user(user_id) -> bool:
    with _lock:
        data = _load()
        if data.pop(str(user_id), None) is None:
            return False
        _save(data)
        return True


def all_users() -> list[dict]:
    with _lock:
        return list(_load().values())


def leaderboard(key: str = "level", limit: int = 10) -> list[dict]:
    """
    Top users by `key`. Level ties are broken by xp, since xp resets on level-up.
    """
    if key not in LEADERBOARD_KEYS:
        raise ValueError(f"unknown leaderboard key: {key}")
    users = all_users()
    if key == "level":
        users.sort(key=lambda u: (u.get("level", 0), u.get("xp", 0)), reverse=True)
    else:
        users.sort(key=lambda u: u.get(key, 0), reverse=True)
    return [
        {"id": u["id"], "tag": u.get("tag", ""), "level": u.get("level", 0),
         "xp": u.get("xp", 0), "coins": u.get("coins", 0)}
        for u in users[:limit]
    ]
