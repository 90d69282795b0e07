from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..balance.power import dps
from ..core.log import log
from ..core.storage import RosterStore
from ..models import Combatant

# Fixed processing order. Earlier roles get first pick of their best fits;
# changing this order changes the resulting distribution.
NON_FLYING_ROLES = ["tank", "attacker", "ranger", "speedster", "balanced"]
FLYING_SCORE = 10.0


def _normalize(val: float, lo: float, hi: float) -> float:
    return 0.5 if hi == lo else (val - lo) / (hi - lo)


@dataclass
class AxisNorms:
    hp: float
    speed: float
    range: float
    damage: float
    cooldown: float
    dps: float


@dataclass
class Assignment:
    combatant_id: str
    role: str
    score: Optional[float] = None
    reason: str = ""


@dataclass
class TierResult:
    rarity: str
    targets: Dict[str, int] = field(default_factory=dict)
    counts: Dict[str, int] = field(default_factory=dict)
    assignments: List[Assignment] = field(default_factory=list)


def tier_norms(units: List[Combatant]) -> Dict[str, AxisNorms]:
    """Min-max normalize every axis inside one tier."""
    def axis(values: List[float]) -> List[float]:
        lo, hi = min(values), max(values)
        return [_normalize(v, lo, hi) for v in values]

    hp = axis([u.max_hp for u in units])
    sp = axis([u.speed for u in units])
    rg = axis([u.attack_range for u in units])
    dm = axis([u.attack_damage for u in units])
    cd = axis([u.attack_cooldown_ms for u in units])
    dp = axis([dps(u) for u in units])
    return {
        u.id: AxisNorms(hp=hp[i], speed=sp[i], range=rg[i], damage=dm[i], cooldown=cd[i], dps=dp[i])
        for i, u in enumerate(units)
    }


def role_scores(u: Combatant, n: AxisNorms) -> Dict[str, float]:
    def mid(x: float) -> float:
        return 1.0 - abs(x - 0.5) * 2.0

    return {
        "tank": n.hp * 0.6 + (1 - n.dps) * 0.25 + (1 - n.speed) * 0.15,
        "attacker": n.dps * 0.45 + n.damage * 0.35 + (1 - n.range) * 0.2,
        "ranger": n.range * 0.6 + n.dps * 0.25 + (1 - n.hp) * 0.15,
        "speedster": n.speed * 0.5 + (1 - n.cooldown) * 0.3 + n.dps * 0.2,
        "flying": FLYING_SCORE if u.is_flying else 0.0,
        "balanced": (mid(n.hp) + mid(n.speed) + mid(n.dps) + mid(n.range)) / 4.0,
    }


def role_quotas(non_flying: int) -> Dict[str, int]:
    base, rem = divmod(non_flying, len(NON_FLYING_ROLES))
    return {r: base + (1 if i < rem else 0) for i, r in enumerate(NON_FLYING_ROLES)}


def assign_tier(rarity: str, units: List[Combatant]) -> TierResult:
    """Label every unit of one tier; writes `role` on each combatant."""
    res = TierResult(rarity=rarity)
    res.counts = {r: 0 for r in ["flying"] + NON_FLYING_ROLES}
    if not units:
        return res

    norms = tier_norms(units)
    scores = {u.id: role_scores(u, norms[u.id]) for u in units}
    assigned: Dict[str, str] = {}

    flyers = [u for u in units if u.is_flying]
    for u in flyers:
        assigned[u.id] = "flying"
        res.assignments.append(Assignment(u.id, "flying", reason="is_flying"))
    res.counts["flying"] = len(flyers)

    res.targets = {"flying": len(flyers), **role_quotas(len(units) - len(flyers))}

    for role in NON_FLYING_ROLES:
        while res.counts[role] < res.targets[role]:
            best: Optional[Combatant] = None
            best_score = -1.0
            for u in units:
                if u.id in assigned:
                    continue
                # strict '>' keeps the earliest unit on ties
                if scores[u.id][role] > best_score:
                    best, best_score = u, scores[u.id][role]
            if best is None:
                break
            assigned[best.id] = role
            res.counts[role] += 1
            res.assignments.append(Assignment(best.id, role, score=best_score))

    for u in units:
        if u.id not in assigned:
            assigned[u.id] = "balanced"
            res.counts["balanced"] += 1
            res.assignments.append(Assignment(u.id, "balanced", reason="leftover"))

    for u in units:
        u.role = assigned[u.id]
    return res


def assign_roles(roster: RosterStore) -> Dict[str, TierResult]:
    """Re-run role assignment over every rarity tier of the roster."""
    out: Dict[str, TierResult] = {}
    for rarity, units in roster.by_rarity().items():
        out[rarity] = assign_tier(rarity, units)
        dist = " ".join(f"{r}={n}" for r, n in out[rarity].counts.items() if n)
        log("ROLE", f"{rarity}: {len(units)} units -> {dist}")
    return out


def role_distribution(roster: RosterStore) -> Dict[str, Dict[str, int]]:
    """Current role counts per tier (unlabelled units counted under '-')."""
    out: Dict[str, Dict[str, int]] = {}
    for rarity, units in roster.by_rarity().items():
        row: Dict[str, int] = {}
        for u in units:
            k = u.role or "-"
            row[k] = row.get(k, 0) + 1
        out[rarity] = row
    return out
