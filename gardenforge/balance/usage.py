from __future__ import annotations

"""Which enemies each stage and each difficulty actually fields."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..core.difficulty import DIFFICULTY_ORDER
from ..core.storage import MissionCatalog, RosterStore


@dataclass
class StageUsage:
    stage_id: str
    difficulty: str
    wave_count: int
    unique_ids: List[str] = field(default_factory=list)   # first-appearance order


@dataclass
class DifficultyUsage:
    difficulty: str
    stages: int
    avg_unique: float
    min_unique: int
    max_unique: int
    area_ids: List[str] = field(default_factory=list)


@dataclass
class UsageReport:
    stages: List[StageUsage] = field(default_factory=list)
    by_difficulty: Dict[str, DifficultyUsage] = field(default_factory=dict)
    total_waves: int = 0
    total_enemies: int = 0
    used_ids: List[str] = field(default_factory=list)
    unused_ids: List[str] = field(default_factory=list)
    roster_size: int = 0

    @property
    def usage_pct(self) -> float:
        return len(self.used_ids) / self.roster_size * 100.0 if self.roster_size else 0.0


def _unique(ids: Sequence[str]) -> List[str]:
    out: List[str] = []
    for cid in ids:
        if cid not in out:
            out.append(cid)
    return out


def enemy_usage(catalog: MissionCatalog, roster: RosterStore, order: Optional[Sequence[str]] = None) -> UsageReport:
    order = list(DIFFICULTY_ORDER if order is None else order)
    rank = {d: i for i, d in enumerate(order)}
    missions = sorted(catalog, key=lambda m: (rank.get(m.difficulty, len(order)), m.difficulty, m.id))

    rep = UsageReport(roster_size=len(roster))
    groups: Dict[str, List[StageUsage]] = {}
    for m in missions:
        row = StageUsage(m.id, m.difficulty, len(m.waves), _unique([w.combatant_id for w in m.waves]))
        rep.stages.append(row)
        groups.setdefault(m.difficulty, []).append(row)
        rep.total_waves += len(m.waves)
        rep.total_enemies += sum(int(w.count) for w in m.waves)

    for d, rows in groups.items():
        counts = [len(r.unique_ids) for r in rows]
        rep.by_difficulty[d] = DifficultyUsage(
            difficulty=d,
            stages=len(rows),
            avg_unique=sum(counts) / len(counts),
            min_unique=min(counts),
            max_unique=max(counts),
            area_ids=sorted(_unique([cid for r in rows for cid in r.unique_ids])),
        )

    rep.used_ids = sorted(_unique([cid for r in rep.stages for cid in r.unique_ids]))
    rep.unused_ids = sorted(c.id for c in roster if c.id not in rep.used_ids)
    return rep


def _rarity(roster: RosterStore, cid: str) -> str:
    c = roster.get(cid)
    return c.rarity if c else "?"


def usage_dict(rep: UsageReport) -> Dict[str, Any]:
    return {
        "stages": [
            {"stage_id": r.stage_id, "difficulty": r.difficulty, "wave_count": r.wave_count, "unique_ids": r.unique_ids}
            for r in rep.stages
        ],
        "difficulties": {
            d: {
                "stages": u.stages,
                "avg_unique": round(u.avg_unique, 2),
                "min_unique": u.min_unique,
                "max_unique": u.max_unique,
                "area_ids": u.area_ids,
            }
            for d, u in rep.by_difficulty.items()
        },
        "totals": {
            "stages": len(rep.stages),
            "waves": rep.total_waves,
            "enemies": rep.total_enemies,
            "used": len(rep.used_ids),
            "roster": rep.roster_size,
            "usage_pct": round(rep.usage_pct, 1),
        },
        "used_ids": rep.used_ids,
        "unused_ids": rep.unused_ids,
    }


def render_usage(rep: UsageReport, roster: RosterStore) -> str:
    out: List[str] = []
    bar = "-" * 72

    out.append(f"{'stage':<17} | {'difficulty':<12} | {'waves':>5} | {'unique':>6} | enemies")
    for r in rep.stages:
        more = f" +{len(r.unique_ids) - 5}" if len(r.unique_ids) > 5 else ""
        out.append(
            f"{r.stage_id:<17} | {r.difficulty:<12} | {r.wave_count:>5} | {len(r.unique_ids):>6} | "
            f"{', '.join(r.unique_ids[:5])}{more}"
        )

    out.append(bar)
    out.append(f"{'difficulty':<13} | {'stages':>6} | {'avg':>4} | {'min':>4} | {'max':>4} | area unique")
    for d, u in rep.by_difficulty.items():
        out.append(
            f"{d:<13} | {u.stages:>6} | {u.avg_unique:>4.1f} | {u.min_unique:>4} | {u.max_unique:>4} | {len(u.area_ids):>11}"
        )

    out.append(bar)
    out.append(f"stages: {len(rep.stages)}  waves: {rep.total_waves}  enemies spawned: {rep.total_enemies}")
    out.append(f"enemy types used: {len(rep.used_ids)} / {rep.roster_size} ({rep.usage_pct:.1f}%)")
    out.append(f"used ({len(rep.used_ids)}):")
    for cid in rep.used_ids:
        out.append(f"  [{_rarity(roster, cid):<3}] {cid}")
    out.append(f"unused ({len(rep.unused_ids)}):")
    for cid in rep.unused_ids:
        out.append(f"  [{_rarity(roster, cid):<3}] {cid}")
    return "\n".join(out)
