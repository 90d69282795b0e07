from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core.storage import RosterStore
from ..models import Combatant
from .power import dps, round_half_up

Band = Tuple[float, float]

# Expected (min, max) per rarity. spawn_cd None = tier uses the default cooldown.
RARITY_BANDS: Dict[str, Dict[str, Optional[Band]]] = {
    "UR":  {"cost": (3000, 7000), "hp": (4000, 30000), "atk": (1500, 5000), "dps": (700, 3500), "spawn_cd": (15000, 35000)},
    "SSR": {"cost": (1200, 4500), "hp": (2500, 10000), "atk": (500, 2000), "dps": (200, 1200), "spawn_cd": (10000, 15000)},
    "SR":  {"cost": (350, 700), "hp": (400, 1500), "atk": (50, 350), "dps": (30, 250), "spawn_cd": (5000, 11000)},
    "R":   {"cost": (50, 400), "hp": (200, 1500), "atk": (40, 150), "dps": (25, 150), "spawn_cd": None},
    "N":   {"cost": (20, 120), "hp": (100, 1600), "atk": (15, 80), "dps": (10, 100), "spawn_cd": None},
}


@dataclass
class StatRange:
    min: float
    max: float
    avg: float


@dataclass
class TierStats:
    rarity: str
    count: int
    cost: StatRange
    hp: StatRange
    atk: StatRange
    dps: StatRange
    spawn_cd: Optional[StatRange] = None


@dataclass
class Anomaly:
    combatant_id: str
    name: str
    rarity: str
    issues: List[str] = field(default_factory=list)


def _range(values: List[float]) -> StatRange:
    return StatRange(min=min(values), max=max(values), avg=sum(values) / len(values))


def tier_stats(rarity: str, units: List[Combatant]) -> TierStats:
    cds = [float(u.spawn_cooldown_ms) for u in units if u.spawn_cooldown_ms]
    return TierStats(
        rarity=rarity,
        count=len(units),
        cost=_range([float(u.cost) for u in units]),
        hp=_range([u.max_hp for u in units]),
        atk=_range([u.attack_damage for u in units]),
        dps=_range([dps(u) for u in units]),
        spawn_cd=_range(cds) if cds else None,
    )


def _check(label: str, value: float, band: Band, out: List[str]):
    lo, hi = band
    if value < lo:
        out.append(f"{label} too low: {value:.0f} (expected {lo:.0f}+)")
    if value > hi:
        out.append(f"{label} too high: {value:.0f} (expected ~{hi:.0f})")


def find_anomalies(units: List[Combatant], rarity: str) -> List[Anomaly]:
    bands = RARITY_BANDS.get(rarity)
    if not bands:
        return []
    out: List[Anomaly] = []
    for u in units:
        issues: List[str] = []
        _check("cost", u.cost, bands["cost"], issues)
        _check("hp", u.max_hp, bands["hp"], issues)
        _check("atk", u.attack_damage, bands["atk"], issues)
        _check("dps", round(dps(u)), bands["dps"], issues)
        if bands["spawn_cd"] and u.spawn_cooldown_ms:
            _check("spawn cd", u.spawn_cooldown_ms, bands["spawn_cd"], issues)
        if issues:
            out.append(Anomaly(u.id, u.name, rarity, issues))
    return out


def check_roster(roster: RosterStore) -> Tuple[Dict[str, TierStats], List[Anomaly]]:
    stats: Dict[str, TierStats] = {}
    anomalies: List[Anomaly] = []
    for rarity, units in roster.by_rarity().items():
        stats[rarity] = tier_stats(rarity, units)
        anomalies.extend(find_anomalies(units, rarity))
    return stats, anomalies


# --- role consistency ---

@dataclass
class TierAverages:
    hp: int
    dps: int
    speed: int
    range: int


@dataclass
class RoleMismatch:
    combatant_id: str
    name: str
    rarity: str
    role: str
    detected: str
    issues: List[str] = field(default_factory=list)


def tier_averages(units: List[Combatant]) -> TierAverages:
    n = len(units)
    return TierAverages(
        hp=round_half_up(sum(u.max_hp for u in units) / n),
        dps=round_half_up(sum(dps(u) for u in units) / n),
        speed=round_half_up(sum(u.speed for u in units) / n),
        range=round_half_up(sum(u.attack_range for u in units) / n),
    )


def detect_role(u: Combatant, avg: TierAverages) -> str:
    """Role the raw stats suggest, judged against the tier averages."""
    if u.is_flying:
        return "flying"
    hp_ratio = u.max_hp / avg.hp if avg.hp else 0.0
    dps_ratio = dps(u) / avg.dps if avg.dps else 0.0
    if hp_ratio >= 1.4 and dps_ratio <= 0.6 and u.speed <= 45:
        return "tank"
    if u.speed >= 85 and u.attack_cooldown_ms <= 1100:
        return "speedster"
    if u.attack_range >= 180:
        return "ranger"
    if dps_ratio >= 1.2 and u.attack_range <= 100:
        return "attacker"
    return "balanced"


def role_issues(u: Combatant, role: str, avg: TierAverages) -> List[str]:
    out: List[str] = []
    if role == "tank":
        if u.max_hp < avg.hp * 1.3:
            out.append(f"tank with low hp: {u.max_hp:.0f} (expected {round_half_up(avg.hp * 1.3)}+)")
        if u.speed > 50:
            out.append(f"tank too fast: {u.speed:.0f} (expected ~50)")
    elif role == "attacker":
        d = dps(u)
        if d < avg.dps * 1.1:
            out.append(f"attacker with low dps: {d:.0f} (expected {round_half_up(avg.dps * 1.1)}+)")
        if u.attack_range > 120:
            out.append(f"attacker range too long: {u.attack_range:.0f} (expected ~120)")
    elif role == "ranger":
        if u.attack_range < 150:
            out.append(f"ranger range too short: {u.attack_range:.0f} (expected 150+)")
    elif role == "speedster":
        if u.speed < 80:
            out.append(f"speedster too slow: {u.speed:.0f} (expected 80+)")
        if u.attack_cooldown_ms > 1200:
            out.append(f"speedster attacks too slowly: {u.attack_cooldown_ms:.0f}ms (expected ~1200ms)")
    elif role == "flying":
        if not u.is_flying:
            out.append("flying role but is_flying is false")
    return out


def role_anomalies(roster: RosterStore) -> List[RoleMismatch]:
    """Units whose role contradicts their stats.

    A stored role is checked as-is; an unlabelled unit is checked against the
    role its stats suggest.
    """
    out: List[RoleMismatch] = []
    for rarity, units in roster.by_rarity().items():
        avg = tier_averages(units)
        for u in units:
            detected = detect_role(u, avg)
            role = u.role or detected
            issues = role_issues(u, role, avg)
            if issues:
                out.append(RoleMismatch(u.id, u.name, rarity, role, detected, issues))
    return out
