from __future__ import annotations

"""Difficulty targets & the declared difficulty curve.

Every generated mission is authored against one of these profiles, and the
balance validator walks missions in DIFFICULTY_ORDER. Keep the numbers here
instead of scattering them through the generator.

Curve shape:
- world1 (tutorial -> nightmare): strength roughly x1.5-2.0 per step
- world2 (purgatory -> inferno_boss): castle HP explodes, strength x1.3-1.8
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from .errors import UnknownDifficultyError


@dataclass(frozen=True)
class DifficultyProfile:
    label: str
    target_strength: float
    target_castle_hp: int
    target_enemy_count: int
    allowed_rarities: Tuple[str, ...]
    zone: str = "world1"


def _p(label: str, strength: float, castle_hp: int, enemies: int, rarities: Tuple[str, ...], zone: str = "world1") -> DifficultyProfile:
    return DifficultyProfile(label, strength, castle_hp, enemies, rarities, zone)


DIFFICULTY_PROFILES: Dict[str, DifficultyProfile] = {
    "tutorial":     _p("tutorial", 220, 300, 20, ("N",)),
    "easy":         _p("easy", 350, 1000, 35, ("N", "R")),
    "normal":       _p("normal", 600, 3500, 50, ("N", "R")),
    "frozen":       _p("frozen", 1000, 8000, 65, ("N", "R", "SR")),
    "hard":         _p("hard", 1400, 25000, 85, ("R", "SR")),
    "extreme":      _p("extreme", 2600, 70000, 115, ("R", "SR", "SSR")),
    "nightmare":    _p("nightmare", 4200, 200000, 170, ("SR", "SSR", "UR")),
    "purgatory":    _p("purgatory", 10000, 500000, 220, ("SSR", "UR"), "world2"),
    "hellfire":     _p("hellfire", 13000, 1000000, 280, ("SSR", "UR"), "world2"),
    "abyss":        _p("abyss", 21000, 2000000, 360, ("SSR", "UR"), "world2"),
    "inferno_boss": _p("inferno_boss", 35000, 5000000, 470, ("UR",), "world2"),
}

# Total order used by the validator. "boss" and "special" are hand-authored
# categories without a generation profile.
DIFFICULTY_ORDER: List[str] = [
    "tutorial", "easy", "normal", "frozen", "hard", "extreme", "nightmare", "boss", "special",
    "purgatory", "hellfire", "abyss", "inferno_boss",
]

# Expected strength ratio between consecutive steps (shown next to the report).
RECOMMENDED_RATIOS: Dict[Tuple[str, str], Tuple[float, float]] = {
    ("tutorial", "easy"): (1.3, 1.5),
    ("easy", "normal"): (1.5, 2.0),
    ("normal", "frozen"): (1.3, 1.5),
    ("frozen", "hard"): (1.5, 2.0),
    ("hard", "extreme"): (1.5, 2.0),
    ("extreme", "nightmare"): (1.5, 2.0),
    ("nightmare", "boss"): (1.2, 1.5),
    ("boss", "purgatory"): (1.5, 2.5),
    ("purgatory", "hellfire"): (1.3, 1.8),
    ("hellfire", "abyss"): (1.3, 1.8),
    ("abyss", "inferno_boss"): (1.2, 1.5),
}


def get_profile(label: str, profiles: Optional[Dict[str, DifficultyProfile]] = None) -> DifficultyProfile:
    table = DIFFICULTY_PROFILES if profiles is None else profiles
    prof = table.get(label)
    if prof is None:
        known = ", ".join(table.keys())
        raise UnknownDifficultyError(f"unknown difficulty '{label}' (known: {known})")
    return prof


def scaled(profile: DifficultyProfile, strength_mul: float = 1.0, castle_mul: float = 1.0, count_mul: float = 1.0) -> DifficultyProfile:
    """Copy of a profile with multiplied targets (used by profile overrides)."""
    return replace(
        profile,
        target_strength=float(profile.target_strength) * strength_mul,
        target_castle_hp=int(round(profile.target_castle_hp * castle_mul)),
        target_enemy_count=max(1, int(round(profile.target_enemy_count * count_mul))),
    )
