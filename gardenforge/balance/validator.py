from __future__ import annotations

"""Offline balance check of a whole mission catalog.

Every mission is scored with the stage strength model, grouped by difficulty,
and the groups are compared along the declared difficulty order. Findings are
returned as severity-tagged issues; nothing here raises or writes content.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..core.difficulty import DIFFICULTY_ORDER
from ..core.log import log
from ..core.storage import MissionCatalog, RosterStore
from .strength import StageStrength, stage_strength

ERROR = "error"
WARNING = "warning"

VARIANCE_FRAC = 0.5
VARIANCE_MIN_COUNT = 3
MIN_STEP_RATIO = 1.1
MAX_STEP_RATIO = 5.0
WEAK_FRAC = 0.5
STRONG_MUL = 2.0


@dataclass
class Issue:
    kind: str
    severity: str
    message: str
    subject: str = ""


@dataclass
class DifficultyStats:
    difficulty: str
    count: int
    avg_strength: float
    min_strength: float
    max_strength: float
    avg_castle_hp: float
    avg_enemy_count: float
    avg_enemy_power: float


@dataclass
class Transition:
    prev: str
    curr: str
    strength_ratio: float
    castle_hp_ratio: float
    enemy_count_ratio: float
    enemy_power_ratio: float


@dataclass
class BalanceReport:
    stages: List[StageStrength] = field(default_factory=list)
    stats: Dict[str, DifficultyStats] = field(default_factory=dict)
    transitions: List[Transition] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)

    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == ERROR]

    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == WARNING]

    def of_kind(self, kind: str) -> List[Issue]:
        return [i for i in self.issues if i.kind == kind]


def _ratio(a: float, b: float) -> float:
    return a / b if b else 0.0


def _stats_for(label: str, rows: List[StageStrength]) -> DifficultyStats:
    strengths = [r.strength for r in rows]
    n = len(rows)
    return DifficultyStats(
        difficulty=label,
        count=n,
        avg_strength=sum(strengths) / n,
        min_strength=min(strengths),
        max_strength=max(strengths),
        avg_castle_hp=sum(r.enemy_castle_hp for r in rows) / n,
        avg_enemy_count=sum(r.enemy_count for r in rows) / n,
        avg_enemy_power=sum(r.enemy_power for r in rows) / n,
    )


def validate_catalog(
    catalog: MissionCatalog,
    roster: RosterStore,
    order: Optional[Sequence[str]] = None,
) -> BalanceReport:
    order = list(DIFFICULTY_ORDER if order is None else order)
    rank = {d: i for i, d in enumerate(order)}
    report = BalanceReport()
    issues = report.issues

    # --- content sanity ---
    seen: Dict[str, int] = {}
    for m in catalog:
        seen[m.id] = seen.get(m.id, 0) + 1
    for mid, n in seen.items():
        if n > 1:
            issues.append(Issue("duplicate_mission", ERROR, f"{mid}: stage id used {n} times", mid))

    rows = [stage_strength(m, roster) for m in catalog]
    for r in rows:
        for cid in r.missing:
            issues.append(Issue("missing_combatant", WARNING, f"{r.stage_id}: unknown combatant '{cid}' (scored as 0 power)", r.stage_id))

    unordered = sorted({r.difficulty for r in rows if r.difficulty not in rank})
    for d in unordered:
        issues.append(Issue("unordered_difficulty", WARNING, f"{d}: difficulty not in declared order", d))

    rows.sort(key=lambda r: (rank.get(r.difficulty, len(order)), r.difficulty, r.stage_id))
    report.stages = rows

    # --- per difficulty ---
    for d in order + unordered:
        group = [r for r in rows if r.difficulty == d]
        if group:
            report.stats[d] = _stats_for(d, group)

    for d, st in report.stats.items():
        spread = st.max_strength - st.min_strength
        if spread > st.avg_strength * VARIANCE_FRAC and st.count >= VARIANCE_MIN_COUNT:
            issues.append(Issue(
                "variance", WARNING,
                f"{d}: wide strength spread ({st.min_strength:.0f} - {st.max_strength:.0f}, diff {spread:.0f})", d,
            ))

    # --- along the curve ---
    present = [d for d in order if d in report.stats]
    for prev_d, curr_d in zip(present, present[1:]):
        prev, curr = report.stats[prev_d], report.stats[curr_d]
        ratio = _ratio(curr.avg_strength, prev.avg_strength)
        report.transitions.append(Transition(
            prev=prev_d,
            curr=curr_d,
            strength_ratio=ratio,
            castle_hp_ratio=_ratio(curr.avg_castle_hp, prev.avg_castle_hp),
            enemy_count_ratio=_ratio(curr.avg_enemy_count, prev.avg_enemy_count),
            enemy_power_ratio=_ratio(curr.avg_enemy_power, prev.avg_enemy_power),
        ))
        step = f"{prev_d} -> {curr_d}"
        if curr.avg_strength < prev.avg_strength:
            issues.append(Issue(
                "inversion", ERROR,
                f"{step}: strength drops ({prev.avg_strength:.0f} -> {curr.avg_strength:.0f})", step,
            ))
        if 0 < ratio < MIN_STEP_RATIO:
            issues.append(Issue("insufficient_increase", WARNING, f"{step}: small increase ({ratio:.2f}x)", step))
        if ratio > MAX_STEP_RATIO:
            issues.append(Issue("excessive_increase", WARNING, f"{step}: increase too large ({ratio:.2f}x)", step))

    # --- single missions ---
    for r in rows:
        st = report.stats.get(r.difficulty)
        if st is None:
            continue
        if r.strength < st.avg_strength * WEAK_FRAC:
            issues.append(Issue(
                "weak_stage", WARNING,
                f"{r.stage_id}: weaker than {r.difficulty} average ({r.strength:.0f} vs avg {st.avg_strength:.0f})", r.stage_id,
            ))
        if r.strength > st.avg_strength * STRONG_MUL:
            issues.append(Issue(
                "strong_stage", WARNING,
                f"{r.stage_id}: stronger than {r.difficulty} average ({r.strength:.0f} vs avg {st.avg_strength:.0f})", r.stage_id,
            ))

    log("BAL", f"{len(rows)} stages / {len(report.stats)} difficulties: {len(report.errors())} errors, {len(report.warnings())} warnings")
    return report
