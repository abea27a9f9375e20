import time
import threading

from utils.settings import SETTINGS

_lock = threading.Lock()
_last_used: dict[tuple[str, str], float] = {}


def remaining(user_id, command: str, now: float | None = None) -> float:
    """Seconds left before `user_id` may run `command` again (0 if ready)."""
    cd = SETTINGS.cooldowns.get(command.lower(), 0)
    if cd <= 0:
        return 0.0
    now = time.monotonic() if now is None else now
    with _lock:
        last = _last_used.get((str(user_id), command.lower()))
    if last is None:
        return 0.0
    return max(0.0, last + cd - now)


def touch(user_id, command: str, now: float | None = None):
    now = time.monotonic() if now is None else now
    with _lock:
        _last_used[(str(user_id), command.lower())] = now


def check_and_touch(user_id, command: str, now: float | None = None) -> float:
    """Returns 0 and records the use when ready, else the seconds left."""
    left = remaining(user_id, command, now)
    if left > 0:
        return left
    touch(user_id, command, now)
    return 0.0


def reset():
    with _lock:
        _last_used.clear()
