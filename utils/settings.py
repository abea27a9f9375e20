import configparser
import os
from dataclasses import dataclass, field

SETTINGS_ENV = "STANDRPG_SETTINGS"


def _find_settings_file() -> str | None:
    """Look in the env override, then the CWD, then next to the repo root."""
    envp = os.environ.get(SETTINGS_ENV)
    if envp:
        return os.path.abspath(envp) if os.path.exists(envp) else None
    here = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    for p in (os.path.join(os.getcwd(), "settings.ini"), os.path.join(here, "settings.ini")):
        if os.path.exists(p):
            return p
    return None


def read_ini(path: str) -> configparser.ConfigParser:
    cfg = configparser.ConfigParser(strict=False, interpolation=None)
    cfg.optionxform = str.lower  # [Fight] Max_Rounds == [fight] max_rounds
    cfg.read(path, encoding="utf-8")
    return cfg


def _section(cfg: configparser.ConfigParser, name: str):
    for s in cfg.sections():
        if s.lower() == name:
            return cfg[s]
    return None


def _raw(cfg, section: str, option: str) -> str | None:
    sec = _section(cfg, section)
    if sec is None:
        return None
    val = sec.get(option)
    return val.strip() if val and val.strip() else None


def _int(cfg, section: str, option: str, fallback: int) -> int:
    val = _raw(cfg, section, option)
    if val is None:
        return fallback
    try:
        return int(float(val))
    except ValueError:
        print(f"[settings] [{section}] {option}={val!r} is not a number, using {fallback}")
        return fallback


def _float(cfg, section: str, option: str, fallback: float) -> float:
    val = _raw(cfg, section, option)
    if val is None:
        return fallback
    try:
        return float(val.rstrip("%"))
    except ValueError:
        print(f"[settings] [{section}] {option}={val!r} is not a number, using {fallback}")
        return fallback


@dataclass
class Settings:
    data_dir: str = "data"
    skill_points_per_level: int = 4
    max_rounds: int = 100
    attack_stamina_cost: int = 1
    defend_stamina_regen: float = 0.1
    sell_ratio: float = 0.5
    daily_base_coins: int = 7500
    daily_streak_bonus: int = 250
    daily_streak_reset_hours: int = 48
    daily_quests: int = 3
    raid_join_seconds: int = 30
    fight_view_timeout: int = 300
    cooldowns: dict = field(default_factory=dict)
    source: str | None = None


def load_settings(path: str | None = None) -> Settings:
    path = path or _find_settings_file()
    s = Settings()
    if not path:
        return s
    cfg = read_ini(path)
    s.source = path
    s.data_dir = _raw(cfg, "storage", "data_dir") or s.data_dir
    s.skill_points_per_level = _int(cfg, "rpg", "skill_points_per_level", s.skill_points_per_level)
    s.max_rounds = _int(cfg, "fight", "max_rounds", s.max_rounds)
    s.attack_stamina_cost = _int(cfg, "fight", "attack_stamina_cost", s.attack_stamina_cost)
    s.defend_stamina_regen = _float(cfg, "fight", "defend_stamina_regen", s.defend_stamina_regen)
    s.fight_view_timeout = _int(cfg, "fight", "view_timeout", s.fight_view_timeout)
    s.raid_join_seconds = _int(cfg, "fight", "raid_join_seconds", s.raid_join_seconds)
    s.sell_ratio = _float(cfg, "shop", "sell_ratio", s.sell_ratio)
    s.daily_base_coins = _int(cfg, "daily", "base_coins", s.daily_base_coins)
    s.daily_streak_bonus = _int(cfg, "daily", "streak_bonus", s.daily_streak_bonus)
    s.daily_streak_reset_hours = _int(cfg, "daily", "streak_reset_hours", s.daily_streak_reset_hours)
    s.daily_quests = _int(cfg, "daily", "quests", s.daily_quests)
    cooldowns = _section(cfg, "cooldowns")
    if cooldowns is not None:
        for k, v in cooldowns.items():
            try:
                s.cooldowns[k] = int(v)
            except ValueError:
                print(f"[settings] ignoring bad cooldown {k}={v!r}")
    return s


SETTINGS = load_settings()
