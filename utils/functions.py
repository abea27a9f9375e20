import random
import re
import uuid
from decimal import Decimal, ROUND_HALF_UP


# ---------------------------------------------------------------------------
# progression curves
# ---------------------------------------------------------------------------

def get_max_xp(level: int) -> int:
    """XP needed to go from `level` to `level + 1`."""
    level = max(1, int(level))
    return 1000 + int(250 * level ** 1.5)


def max_health_for(level: int, defense: float) -> int:
    return int(100 + level * 10 + defense * 5)


def max_stamina_for(level: int, stamina: float) -> int:
    return int(60 + level * 2 + stamina * 3)


# ---------------------------------------------------------------------------
# fight formulas (fighter = anything with .level and .skill_points)
# ---------------------------------------------------------------------------

def get_attack_damages(fighter) -> int:
    sp = fighter.skill_points
    return max(1, round(5 + fighter.level * 0.9 + sp.get("strength", 0) * 0.75))


def get_ability_damage(fighter, ability) -> int:
    if not ability.damage:
        return 0
    return round(get_attack_damages(fighter) * (1 + ability.damage / 10))


def get_dodge_score(fighter) -> int:
    return round(fighter.skill_points.get("perception", 0) / 2)


def get_speed_score(fighter) -> int:
    return round(fighter.skill_points.get("speed", 0) / 2)


def get_defense_ratio(fighter) -> float:
    """Fraction of incoming damage absorbed. Never reaches 1."""
    d = max(0, fighter.skill_points.get("defense", 0))
    return d / (d + 100)


def dodge_threshold(dodger, attacker) -> float:
    """
    Probability (0..1) that `dodger` escapes one attempt from `attacker`.
    Both sides get a flat level offset so zero-stat fighters still roll.
    """
    dodge = get_dodge_score(dodger) + 5 + dodger.level / 10
    speed = get_speed_score(attacker) + 10 + attacker.level / 10
    return dodge / (speed * 2 + dodge)


# ---------------------------------------------------------------------------
# randomness
# ---------------------------------------------------------------------------

def random_number(a: float, b: float, rng: random.Random | None = None) -> int:
    rng = rng or random
    lo, hi = sorted((int(a), int(b)))
    return rng.randint(lo, hi)


def percent(p: float, rng: random.Random | None = None) -> bool:
    rng = rng or random
    return rng.random() * 100 < p


def random_array(seq, rng: random.Random | None = None):
    rng = rng or random
    seq = list(seq)
    if not seq:
        return None
    return rng.choice(seq)


def generate_random_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# text
# ---------------------------------------------------------------------------


def fmt_num(value) -> str:
    """12345 -> '12,345'; floats are rounded half up to an int first."""
    d = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{int(d):,}"


def life_bar(cur: int | None, mx: int | None, width: int = 10) -> str:
    if cur is None or mx is None or mx <= 0:
        return "[" + ("?" * width) + "]"
    filled = max(0, min(width, round(width * (cur / mx))))
    return "[" + ("█" * filled) + ("░" * (width - filled)) + "]"


def _squash(s: str) -> str:
    """'Kakyoin's Snazzy Shades' -> 'kakyoinssnazzyshades'"""
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance, one row at a time."""
    row = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        prev, row[0] = row[0], i
        for j, cb in enumerate(b, 1):
            prev, row[j] = row[j], min(row[j] + 1, row[j - 1] + 1, prev + (ca != cb))
    return row[-1]


def match_name(names: list[str], query: str) -> tuple[str | None, list[str]]:
    """
    Find the item / npc / raid name a player meant to type.

    Tries, in order: the whole name (case and punctuation ignored), the start
    of the name ("pizza b" -> "Pizza Box"), the start of any word in it
    ("leader" -> "Bandit Leader"), anywhere in it, then a typo or two. The
    first step with exactly one hit wins; a step with several hits stops the
    search and returns them (shortest first) as suggestions.
    """
    q = (query or "").strip().lower()
    sq = _squash(q)
    if not sq:
        return None, []
    squashed = {n: _squash(n) for n in names}

    def pick(hits):
        hits = sorted(hits, key=len)
        return (hits[0], []) if len(hits) == 1 else (None, hits[:8])

    steps = (
        lambda n: squashed[n] == sq,
        lambda n: squashed[n].startswith(sq),
        lambda n: any(w.startswith(q) for w in n.lower().split()),
        lambda n: sq in squashed[n],
    )
    for step in steps:
        hits = [n for n in names if step(n)]
        if hits:
            return pick(hits)

    allowed = 1 if len(sq) <= 5 else 2
    scored = [(edit_distance(sq, squashed[n]), n) for n in names]
    close = [n for d, n in scored if d <= allowed]
    if not close:
        return None, []
    best = min(d for d, n in scored)
    return pick([n for d, n in scored if d == best])
